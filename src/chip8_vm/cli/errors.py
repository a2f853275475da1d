"""
chip8run Exit Codes and Error Reporting
=======================================

Maps the exceptions a run can end with to a message on stderr and a
process exit code.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from chip8_vm.errors import Chip8Error


class ExitCode(IntEnum):
    """Process exit codes."""
    SUCCESS = 0
    EMULATION_ERROR = 1  # ROM rejected, machine fault, unknown opcode
    INVALID_ARGS = 2     # Bad option value, unreadable ROM or output path
    INTERNAL_ERROR = 3   # Bug in the VM or runner


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Report ``error`` on stderr and exit.

    VM errors are reported with the faulting detail the exception carries;
    only unexpected errors get a traceback, and only with ``verbose``.

    Raises:
        SystemExit: Always
    """
    if isinstance(error, Chip8Error):
        click.echo(f"Emulation error: {error}", err=True)
        sys.exit(ExitCode.EMULATION_ERROR)

    if isinstance(error, click.BadParameter):
        click.echo(f"Error: {error.format_message()}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    if isinstance(error, OSError):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    click.echo(f"Internal error: {error}", err=True)
    if verbose:
        traceback.print_exc()
    sys.exit(ExitCode.INTERNAL_ERROR)
