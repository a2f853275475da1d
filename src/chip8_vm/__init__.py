"""
chip8-vm - Headless CHIP-8 Virtual Machine
==========================================

CHIP-8 is a small interpreted language from the late 1970s, designed so
simple games could run on 8-bit hobbyist machines. This package provides
a deterministic, headless implementation of its virtual machine, suitable
for test harnesses, ROM analysis and as the core of a front end.

Main Components
---------------
- **emulator**: The VM (memory, registers, stack, timers, display,
  keypad) and the high-level Emulator API
- **cli**: Command-line runner (chip8run)

Quick Start
-----------
Run a ROM for a while and look at the screen:
    >>> from chip8_vm import Emulator
    >>> emu = Emulator()
    >>> emu.load_rom("maze.ch8")
    >>> emu.run(2_000)
    2000
    >>> print(emu.display_text)

Or from the command line:
    $ chip8run maze.ch8 --cycles 2000 --png maze.png

Version History
---------------
1.0.0 - Initial release
"""

__version__ = "1.0.0"
__author__ = "Hugo José Pinto & Contributors"

# =============================================================================
# Public API Exports
# =============================================================================

from chip8_vm.emulator import (
    Chip8,
    Emulator,
    EmulatorConfig,
    Instruction,
    Op,
    UnknownOpcodePolicy,
    decode,
)
from chip8_vm.errors import (
    Chip8Error,
    LoadError,
    UnknownOpcodeError,
    MachineFault,
    MemoryAccessError,
    StackOverflowError,
    StackUnderflowError,
)

__all__ = [
    "__version__",
    # VM
    "Chip8",
    "Emulator",
    "EmulatorConfig",
    "Instruction",
    "Op",
    "UnknownOpcodePolicy",
    "decode",
    # Errors
    "Chip8Error",
    "LoadError",
    "UnknownOpcodeError",
    "MachineFault",
    "MemoryAccessError",
    "StackOverflowError",
    "StackUnderflowError",
]
