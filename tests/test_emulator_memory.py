"""
Memory, Font, Stack and Timer Unit Tests
========================================

Tests for the storage components of the CHIP-8 VM:
- Memory image with bounds checking
- Built-in glyph font
- Call stack
- Delay and sound timers

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import pytest

from chip8_vm.emulator import (
    CallStack,
    FONTSET,
    GLYPH_SIZE,
    Memory,
    Timers,
    glyph_address,
)
from chip8_vm.errors import (
    MachineFault,
    MemoryAccessError,
    StackOverflowError,
    StackUnderflowError,
)


# =============================================================================
# Memory Tests
# =============================================================================

class TestMemory:
    """Test Memory class."""

    @pytest.fixture
    def mem(self):
        m = Memory()
        m.reset()
        return m

    def test_size(self, mem):
        assert mem.size == 4096

    def test_reset_loads_font(self, mem):
        assert mem.read_block(0, 80) == FONTSET
        assert mem.read(0x50) == 0

    def test_reset_clears(self, mem):
        mem.write(0x300, 0x42)
        mem.reset()
        assert mem.read(0x300) == 0

    def test_read_write(self, mem):
        mem.write(0xFFF, 0x55)
        assert mem.read(0xFFF) == 0x55

    def test_write_masks_value(self, mem):
        mem.write(0x300, 0x1AB)
        assert mem.read(0x300) == 0xAB

    def test_read_word_big_endian(self, mem):
        mem.write_block(0x200, b"\x12\x34")
        assert mem.read_word(0x200) == 0x1234

    @pytest.mark.parametrize("address", [-1, 0x1000, 0x2000])
    def test_read_out_of_range(self, mem, address):
        with pytest.raises(MemoryAccessError) as exc_info:
            mem.read(address)
        assert exc_info.value.address == address

    def test_word_straddling_end(self, mem):
        with pytest.raises(MemoryAccessError):
            mem.read_word(0xFFF)

    def test_write_block_is_atomic(self, mem):
        """A block that runs past the end writes nothing."""
        with pytest.raises(MemoryAccessError) as exc_info:
            mem.write_block(0xFFE, b"\x01\x02\x03")
        assert exc_info.value.size == 3
        assert mem.read(0xFFE) == 0
        assert mem.read(0xFFF) == 0

    def test_empty_block_at_end(self, mem):
        assert mem.read_block(0x1000, 0) == b""

    def test_memory_access_error_is_machine_fault(self, mem):
        with pytest.raises(MachineFault):
            mem.write(0x1000, 0)


# =============================================================================
# Font Tests
# =============================================================================

class TestFont:
    """Test glyph font layout."""

    def test_fontset_size(self):
        assert len(FONTSET) == 16 * GLYPH_SIZE

    def test_glyph_address(self):
        assert glyph_address(0) == 0
        assert glyph_address(0xF) == 75
        assert glyph_address(0x1A) == 0x1A * GLYPH_SIZE

    def test_glyph_zero(self):
        assert FONTSET[glyph_address(0):glyph_address(1)] == bytes(
            [0xF0, 0x90, 0x90, 0x90, 0xF0]
        )


# =============================================================================
# Call Stack Tests
# =============================================================================

class TestCallStack:
    """Test CallStack class."""

    def test_starts_empty(self):
        stack = CallStack()
        assert stack.sp == 0
        assert len(stack) == 0
        assert stack.depth == 16

    def test_push_pop_order(self):
        stack = CallStack()
        stack.push(0x200)
        stack.push(0x300)
        assert stack.frames() == [0x200, 0x300]
        assert stack.pop() == 0x300
        assert stack.pop() == 0x200
        assert stack.sp == 0

    def test_overflow(self):
        stack = CallStack()
        for n in range(16):
            stack.push(0x200 + n * 2)
        with pytest.raises(StackOverflowError):
            stack.push(0x400)
        assert stack.sp == 16

    def test_underflow(self):
        stack = CallStack()
        with pytest.raises(StackUnderflowError):
            stack.pop()
        with pytest.raises(StackUnderflowError):
            stack.peek()

    def test_reset(self):
        stack = CallStack()
        stack.push(0x222)
        stack.reset()
        assert stack.sp == 0
        assert stack.frames() == []


# =============================================================================
# Timer Tests
# =============================================================================

class TestTimers:
    """Test Timers class."""

    def test_tick_decrements(self):
        timers = Timers(delay=3, sound=1)
        timers.tick()
        assert timers.delay == 2
        assert timers.sound == 0

    def test_tick_stops_at_zero(self):
        timers = Timers()
        timers.tick()
        assert timers.delay == 0
        assert timers.sound == 0

    def test_values_masked(self):
        timers = Timers()
        timers.delay = 0x1FF
        assert timers.delay == 0xFF

    def test_sound_active(self):
        timers = Timers(sound=2)
        assert timers.sound_active
        timers.tick()
        timers.tick()
        assert not timers.sound_active

    def test_reset(self):
        timers = Timers(delay=5, sound=5)
        timers.reset()
        assert (timers.delay, timers.sound) == (0, 0)
