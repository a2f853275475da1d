"""
Call Stack for the CHIP-8 VM
============================

Fixed-depth stack of 16-bit return addresses used only by CALL (2nnn)
and RET (00EE). The stack lives outside addressable memory, so the only
failure modes are overflow and underflow, both of which are raised as
machine faults.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from typing import List

from chip8_vm.errors import StackOverflowError, StackUnderflowError


STACK_DEPTH = 16


class CallStack:
    """
    Return-address stack with an explicit stack pointer.

    ``sp`` is the number of live frames (0-depth). push stores at
    ``slots[sp]`` then increments; pop decrements then reads, matching
    the VM's CALL/RET semantics.
    """

    def __init__(self, depth: int = STACK_DEPTH):
        self._slots: List[int] = [0] * depth
        self._sp = 0

    @property
    def sp(self) -> int:
        """Stack pointer (number of live frames)."""
        return self._sp

    @property
    def depth(self) -> int:
        """Maximum number of frames."""
        return len(self._slots)

    def __len__(self) -> int:
        return self._sp

    def reset(self) -> None:
        """Zero every slot and empty the stack."""
        for i in range(len(self._slots)):
            self._slots[i] = 0
        self._sp = 0

    def push(self, address: int) -> None:
        """
        Push a return address.

        Raises:
            StackOverflowError: If all slots are in use
        """
        if self._sp >= len(self._slots):
            raise StackOverflowError(self._sp)
        self._slots[self._sp] = address & 0xFFFF
        self._sp += 1

    def pop(self) -> int:
        """
        Pop the most recent return address.

        Raises:
            StackUnderflowError: If the stack is empty
        """
        if self._sp == 0:
            raise StackUnderflowError()
        self._sp -= 1
        return self._slots[self._sp]

    def peek(self) -> int:
        """Return the most recent return address without popping it."""
        if self._sp == 0:
            raise StackUnderflowError("peek on empty call stack")
        return self._slots[self._sp - 1]

    def frames(self) -> List[int]:
        """Live return addresses, oldest first."""
        return list(self._slots[:self._sp])
