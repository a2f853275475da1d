"""
CHIP-8 VM Error Hierarchy
=========================

This module defines the exception hierarchy for the whole package.
All exceptions inherit from Chip8Error, allowing callers to catch every
VM-related error with a single except clause if desired.

Exception Hierarchy
-------------------
Chip8Error (base)
├── LoadError - program image rejected (too large, unreadable)
├── UnknownOpcodeError - undefined instruction word (RAISE policy only)
└── MachineFault (engine-internal index out of range)
    ├── MemoryAccessError - address outside the 4KB image
    ├── StackOverflowError - CALL with every stack slot in use
    └── StackUnderflowError - RET with an empty stack

Design Philosophy
-----------------
Machine faults are raised before the faulting write happens, so the VM
state is never partially corrupted. Each exception keeps the values that
caused it (address, opcode word, stack pointer) as attributes so drivers
can report them without parsing the message.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class Chip8Error(Exception):
    """
    Base exception for all CHIP-8 VM errors.

    All exceptions in the package inherit from this class:

        try:
            emu.load_rom("pong.ch8")
            emu.run(10_000)
        except Chip8Error as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Program Loading
# =============================================================================

class LoadError(Chip8Error):
    """
    Program image could not be loaded.

    Raised when a ROM does not fit between the program start address
    (0x200) and the end of memory. The load is atomic: when this is
    raised, the VM has been reset but no program byte was written.

    Attributes:
        size: Size of the rejected program in bytes (None if unknown)
        limit: Largest size that would have fit (None if unknown)
    """

    def __init__(
        self,
        message: str,
        size: Optional[int] = None,
        limit: Optional[int] = None,
    ):
        self.size = size
        self.limit = limit
        super().__init__(message)


# =============================================================================
# Instruction Errors
# =============================================================================

class UnknownOpcodeError(Chip8Error):
    """
    Fetched instruction word matches no defined operation.

    Only raised when the VM is configured with UnknownOpcodePolicy.RAISE.
    Under the default policy the condition is logged and reported through
    the on_unknown_opcode hook instead.

    Attributes:
        word: The 16-bit instruction word
        address: Address the word was fetched from
    """

    def __init__(self, word: int, address: int):
        self.word = word
        self.address = address
        super().__init__(f"unknown opcode {word:04X} at {address:03X}")


# =============================================================================
# Machine Faults
# =============================================================================

class MachineFault(Chip8Error):
    """
    Base exception for engine-internal out-of-range accesses.

    A program that computes an address or stack depth outside the backing
    store triggers one of these. They are fail-fast: the VM stops at the
    faulting instruction instead of corrupting adjacent state.
    """
    pass


class MemoryAccessError(MachineFault):
    """
    Memory address outside 0x000-0xFFF.

    Typical causes:
    - Index register walked past the end of memory (Fx55, Fx65, Dxyn)
    - Jump with offset (Bnnn) landing beyond the last instruction
    - Program counter running off the top of memory

    Attributes:
        address: The offending address
        size: Number of bytes the access needed
    """

    def __init__(self, address: int, size: int = 1, message: str = ""):
        self.address = address
        self.size = size
        if not message:
            if size == 1:
                message = f"memory access out of range: {address:04X}"
            else:
                message = (
                    f"memory access out of range: {address:04X}"
                    f"..{address + size - 1:04X}"
                )
        super().__init__(message)


class StackOverflowError(MachineFault):
    """
    CALL attempted with every stack slot in use.

    Attributes:
        depth: Stack depth at the time of the call
    """

    def __init__(self, depth: int):
        self.depth = depth
        super().__init__(f"call stack overflow (depth {depth})")


class StackUnderflowError(MachineFault):
    """RET attempted with an empty call stack."""

    def __init__(self, message: str = "call stack underflow (RET with empty stack)"):
        super().__init__(message)
