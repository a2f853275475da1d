"""
chip8-vm Command-Line Interface
===============================

This package provides command-line tools for chip8-vm:

- **chip8run**: Headless ROM runner

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["chip8run"]
