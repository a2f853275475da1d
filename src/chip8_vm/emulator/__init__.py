"""
CHIP-8 Virtual Machine
======================

A headless interpreter for the CHIP-8 virtual machine.

This package provides the complete machine model:

- **Engine**: Fetch/decode/execute loop over the 35 CHIP-8 operations
- **Memory**: 4KB image with the built-in hex font at $000
- **Display**: 64x32 XOR sprite buffer with text/pixel/PNG output
- **Keypad**: 16-key hex keypad with a QWERTY host mapping
- **Timers**: Delay and sound down-counters

Quick Start
-----------

Basic usage::

    >>> from chip8_vm.emulator import Emulator, EmulatorConfig
    >>> emu = Emulator(EmulatorConfig(seed=1))
    >>> emu.load_rom("pong.ch8")
    >>> emu.run(10_000)
    10000
    >>> print(emu.display_text)

Module Structure
----------------

- `emulator.py`: Main Emulator class (high-level API)
- `cpu.py`: Chip8 VM and decode/execute engine
- `decode.py`: Instruction word decoder
- `memory.py`: Memory image
- `font.py`: Built-in glyph font
- `stack.py`: Call stack
- `timers.py`: Delay and sound timers
- `display.py`: Display buffer
- `keypad.py`: Keypad state

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

# Main entry point
from .emulator import Emulator, EmulatorConfig

# Engine
from .cpu import Chip8, CPUState, UnknownOpcodePolicy
from .decode import Instruction, Op, decode

# Machine components
from .memory import Memory, MEMORY_SIZE, PROGRAM_START, MAX_PROGRAM_SIZE
from .font import FONTSET, GLYPH_SIZE, glyph_address
from .stack import CallStack, STACK_DEPTH
from .timers import Timers
from .display import Display, DISPLAY_WIDTH, DISPLAY_HEIGHT
from .keypad import Keypad, KEY_TO_INDEX_QWERTY

__all__ = [
    # Main API
    "Emulator",
    "EmulatorConfig",

    # Engine
    "Chip8",
    "CPUState",
    "UnknownOpcodePolicy",
    "Instruction",
    "Op",
    "decode",

    # Memory
    "Memory",
    "MEMORY_SIZE",
    "PROGRAM_START",
    "MAX_PROGRAM_SIZE",
    "FONTSET",
    "GLYPH_SIZE",
    "glyph_address",

    # Stack and timers
    "CallStack",
    "STACK_DEPTH",
    "Timers",

    # Display
    "Display",
    "DISPLAY_WIDTH",
    "DISPLAY_HEIGHT",

    # Keypad
    "Keypad",
    "KEY_TO_INDEX_QWERTY",
]
