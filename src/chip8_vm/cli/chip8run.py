"""
chip8run - Headless CHIP-8 ROM Runner
=====================================

Loads a CHIP-8 program, runs it for a fixed number of VM cycles with no
window, then prints the final frame and register state.

Usage Examples
--------------
Run a ROM for 2000 cycles and show the screen:
    $ chip8run maze.ch8 --cycles 2000

Run 120 frames (two seconds at 60Hz) at 15 cycles per frame:
    $ CHIP8_CYCLES_PER_FRAME=15 chip8run maze.ch8 --frames 120

Reproducible run (fixed RND seed):
    $ chip8run maze.ch8 --seed 7

Hold keys down for the whole run (host names or 0x-prefixed indices):
    $ chip8run pong.ch8 --key 1 --key 0xC

Save a PNG screenshot instead of printing text:
    $ chip8run maze.ch8 --png maze.png --scale 10 --no-ascii

Stop on the first undefined instruction:
    $ chip8run test.ch8 --unknown-opcode raise

Environment defaults come from CHIP8_SEED, CHIP8_UNKNOWN_OPCODE and
CHIP8_CYCLES_PER_FRAME; command-line options override them.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import dataclasses
import logging
from pathlib import Path
from typing import Optional, Tuple

import click

from chip8_vm import __version__
from chip8_vm.cli.errors import handle_cli_exception
from chip8_vm.emulator import Emulator, EmulatorConfig, UnknownOpcodePolicy


def _parse_key(value: str) -> int | str:
    """Turn a --key value into a keypad index or host key name."""
    if value.lower().startswith("0x"):
        try:
            return int(value, 16)
        except ValueError:
            raise click.BadParameter(f"invalid key index '{value}'", param_hint="--key")
    return value


def _format_registers(emu: Emulator) -> str:
    regs = emu.registers
    v_line = " ".join(f"{regs[f'v{n:x}']:02X}" for n in range(16))
    return (
        f"PC=${regs['pc']:03X} I=${regs['i']:03X} SP={regs['sp']} "
        f"DT={regs['dt']} ST={regs['st']}\n"
        f"V0-VF: {v_line}"
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "rom",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-n", "--cycles",
    type=click.IntRange(min=0),
    default=1000,
    show_default=True,
    help="Number of VM cycles to run (ignored with --frames)",
)
@click.option(
    "-f", "--frames",
    type=click.IntRange(min=0),
    default=None,
    help="Run this many 60Hz frames of CHIP8_CYCLES_PER_FRAME cycles instead",
)
@click.option(
    "--seed",
    type=int,
    default=None,
    help="Seed for the RND instruction (default: CHIP8_SEED or random)",
)
@click.option(
    "--unknown-opcode",
    type=click.Choice([p.value for p in UnknownOpcodePolicy], case_sensitive=False),
    default=None,
    help="Handling of undefined instruction words (default: skip)",
)
@click.option(
    "-k", "--key",
    "keys",
    multiple=True,
    help="Key to hold down for the whole run (repeatable)",
)
@click.option(
    "--png",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the final frame as a PNG image",
)
@click.option(
    "--scale",
    type=click.IntRange(min=1),
    default=8,
    show_default=True,
    help="Pixel scale factor for --png",
)
@click.option(
    "--ascii/--no-ascii",
    default=True,
    help="Print the final frame as text (default: enabled)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output (DEBUG logging)",
)
@click.version_option(version=__version__, prog_name="chip8run")
def main(
    rom: Path,
    cycles: int,
    frames: Optional[int],
    seed: Optional[int],
    unknown_opcode: Optional[str],
    keys: Tuple[str, ...],
    png: Optional[Path],
    scale: int,
    ascii: bool,
    verbose: bool,
) -> None:
    """
    Run a CHIP-8 ROM headless and show the final frame.

    ROM is the raw program image, loaded at $200.

    Examples:

        # Run for 2000 cycles
        chip8run maze.ch8 --cycles 2000

        # Hold key 5 (W) and save a screenshot
        chip8run game.ch8 --key W --png shot.png
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    try:
        config = EmulatorConfig.from_env()
        if seed is not None:
            config = dataclasses.replace(config, seed=seed)
        if unknown_opcode is not None:
            config = dataclasses.replace(
                config, unknown_opcode_policy=UnknownOpcodePolicy(unknown_opcode.lower())
            )

        emu = Emulator(config)
        emu.load_rom(rom)

        for key in keys:
            try:
                emu.press_key(_parse_key(key))
            except ValueError as e:
                raise click.BadParameter(str(e), param_hint="--key") from e

        if verbose:
            click.echo(f"ROM: {rom} ({rom.stat().st_size} bytes)", err=True)

        if frames is not None:
            emu.run_frames(frames)
        else:
            emu.run(cycles)

        if ascii:
            click.echo(emu.display_text)
        click.echo(_format_registers(emu))
        click.echo(f"Cycles: {emu.total_cycles}")

        unknown = emu.unknown_opcodes
        if unknown:
            click.echo(f"Unknown opcodes: {len(unknown)}", err=True)

        if png is not None:
            png.write_bytes(emu.render_display(scale=scale))
            click.echo(f"Wrote {png}")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose)


if __name__ == "__main__":
    main()
