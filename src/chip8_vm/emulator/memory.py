"""
Memory Image for the CHIP-8 VM
==============================

Flat 4KB byte-addressable memory.

Memory Map:
    $000-$04F  Built-in hex glyph font (written on reset)
    $050-$1FF  Unused (historically the interpreter itself)
    $200-$FFF  Program image and program data

Unlike a real bus, every access is bounds-checked: an address outside
$000-$FFF raises MemoryAccessError instead of wrapping or being ignored,
so a runaway index register stops the VM at the faulting instruction.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from typing import Iterable

from chip8_vm.errors import MemoryAccessError
from .font import FONT_ADDRESS, FONTSET


MEMORY_SIZE = 0x1000
PROGRAM_START = 0x200

# Largest program that fits between PROGRAM_START and the end of memory
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START


class Memory:
    """
    CHIP-8 main memory.

    Provides byte, word and block access with strict bounds checking.
    Block writes validate the whole range before writing anything.

    Example:
        >>> mem = Memory()
        >>> mem.reset()
        >>> mem.write(0x300, 0x42)
        >>> mem.read(0x300)
        66
        >>> mem.read_word(0x000)  # first glyph rows
        61584
    """

    def __init__(self, size: int = MEMORY_SIZE):
        """
        Initialize memory (all zero, font not yet loaded).

        Args:
            size: Memory size in bytes (4096 on every CHIP-8 machine)
        """
        self._data = bytearray(size)

    @property
    def size(self) -> int:
        """Memory size in bytes."""
        return len(self._data)

    def _check(self, address: int, count: int = 1) -> None:
        """Raise MemoryAccessError unless address..address+count-1 is mapped."""
        if address < 0 or address + count > len(self._data):
            raise MemoryAccessError(address, count)

    def reset(self) -> None:
        """Zero all memory and load the glyph font at FONT_ADDRESS."""
        self._data[:] = bytes(len(self._data))
        self._data[FONT_ADDRESS:FONT_ADDRESS + len(FONTSET)] = FONTSET

    def read(self, address: int) -> int:
        """
        Read byte from memory.

        Args:
            address: 12-bit address

        Returns:
            Byte value at address

        Raises:
            MemoryAccessError: If address is outside memory
        """
        self._check(address)
        return self._data[address]

    def write(self, address: int, value: int) -> None:
        """
        Write byte to memory.

        Args:
            address: 12-bit address
            value: Byte value (masked to 8 bits)

        Raises:
            MemoryAccessError: If address is outside memory
        """
        self._check(address)
        self._data[address] = value & 0xFF

    def read_word(self, address: int) -> int:
        """Read 16-bit word (big-endian). Both bytes must be in range."""
        self._check(address, 2)
        return (self._data[address] << 8) | self._data[address + 1]

    def read_block(self, address: int, count: int) -> bytes:
        """Read count bytes starting at address."""
        self._check(address, count)
        return bytes(self._data[address:address + count])

    def write_block(self, address: int, data: Iterable[int]) -> None:
        """
        Write a sequence of bytes starting at address.

        The whole range is validated first; on failure nothing is written.
        """
        values = bytes(v & 0xFF for v in data)
        self._check(address, len(values))
        self._data[address:address + len(values)] = values

    def dump(self) -> bytes:
        """Return a copy of the entire memory image."""
        return bytes(self._data)
