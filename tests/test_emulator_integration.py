"""
Emulator Integration Tests
==========================

End-to-end tests that run small hand-assembled programs through the
high-level Emulator API: loading, execution control, keypad input,
display output and configuration.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import io
import logging

import pytest
from PIL import Image

from chip8_vm import Emulator, EmulatorConfig, LoadError, UnknownOpcodePolicy


# =============================================================================
# Test Programs
# =============================================================================

def program(*words: int) -> bytes:
    return b"".join(word.to_bytes(2, "big") for word in words)


# Convert 123 to BCD, load the digits back and draw the hundreds digit
BCD_DRAW = program(
    0x6A7B,  # LD VA, 123
    0xA300,  # LD I, $300
    0xFA33,  # LD B, VA
    0xF265,  # LD V2, [I]
    0xF029,  # LD F, V0
    0x6B00,  # LD VB, 0
    0x6C00,  # LD VC, 0
    0xDBC5,  # DRW VB, VC, 5
    0x1210,  # JP $210
)

# Wait for a key into V5, then spin
WAIT_KEY = program(
    0xF50A,  # LD V5, K
    0x1202,  # JP $202
)


@pytest.fixture
def emu():
    return Emulator(EmulatorConfig(seed=7))


# =============================================================================
# Loading Tests
# =============================================================================

class TestLoading:
    """Test ROM and byte loading."""

    def test_load_rom(self, emu, tmp_path):
        rom = tmp_path / "bcd.ch8"
        rom.write_bytes(BCD_DRAW)
        emu.load_rom(rom)
        assert emu.vm.memory.read_block(0x200, len(BCD_DRAW)) == BCD_DRAW

    def test_load_rom_missing(self, emu, tmp_path):
        with pytest.raises(FileNotFoundError):
            emu.load_rom(tmp_path / "missing.ch8")

    def test_load_rom_too_large(self, emu, tmp_path):
        rom = tmp_path / "big.ch8"
        rom.write_bytes(bytes(5000))
        with pytest.raises(LoadError):
            emu.load_rom(rom)

    def test_load_resets_counters(self, emu):
        emu.load_bytes(BCD_DRAW)
        emu.run(5)
        emu.load_bytes(BCD_DRAW)
        assert emu.total_cycles == 0
        assert emu.registers["pc"] == 0x200


# =============================================================================
# Execution Tests
# =============================================================================

class TestExecution:
    """Test step, run and run_until."""

    def test_bcd_draw_program(self, emu):
        emu.load_bytes(BCD_DRAW)
        assert emu.run(20) == 20
        regs = emu.registers
        assert (regs["v0"], regs["v1"], regs["v2"]) == (1, 2, 3)
        lines = emu.display_lines
        assert lines[0][:4] == "..#."
        assert lines[1][:4] == ".##."
        assert lines[4][:4] == ".###"
        assert emu.total_cycles == 20

    def test_step_returns_instruction(self, emu):
        emu.load_bytes(BCD_DRAW)
        ins = emu.step()
        assert ins.word == 0x6A7B
        assert emu.total_cycles == 1

    def test_run_frames(self):
        emu = Emulator(EmulatorConfig(cycles_per_frame=5))
        emu.load_bytes(WAIT_KEY)
        assert emu.run_frames(3) == 15
        assert emu.total_cycles == 15

    def test_run_frames_follows_env(self, monkeypatch):
        monkeypatch.setenv("CHIP8_CYCLES_PER_FRAME", "7")
        emu = Emulator(EmulatorConfig.from_env())
        emu.load_bytes(WAIT_KEY)
        emu.run_frames(2)
        assert emu.total_cycles == 14

    def test_run_until_waiting_for_key(self, emu):
        emu.load_bytes(WAIT_KEY)
        assert emu.run_until(lambda e: e.vm.waiting_for_key, max_cycles=10)
        assert emu.total_cycles == 1

    def test_run_until_gives_up(self, emu):
        emu.load_bytes(WAIT_KEY)
        assert not emu.run_until(lambda e: e.registers["v5"] == 1, max_cycles=10)
        assert emu.total_cycles == 10

    def test_tap_key_completes_wait(self, emu):
        emu.load_bytes(WAIT_KEY)
        emu.run(3)
        assert emu.step() is None
        emu.tap_key("W", hold_cycles=1)
        assert emu.registers["v5"] == 0x5
        assert emu.registers["pc"] == 0x202
        assert emu.keypad.pressed_keys() == []

    def test_reset(self, emu):
        emu.load_bytes(BCD_DRAW)
        emu.run(20)
        emu.reset()
        assert emu.total_cycles == 0
        assert emu.display.count_lit() == 0
        assert emu.vm.memory.read(0x200) == 0


# =============================================================================
# Unknown Opcode Tests
# =============================================================================

class TestUnknownOpcodes:
    """Test unknown-opcode reporting."""

    def test_recorded(self, emu, caplog):
        emu.load_bytes(program(0x0123, 0xFFFF))
        with caplog.at_level(logging.WARNING):
            emu.run(2)
        assert emu.unknown_opcodes == [(0x200, 0x0123), (0x202, 0xFFFF)]
        assert len(caplog.records) == 2

    def test_cleared_on_reset(self, emu):
        emu.load_bytes(program(0x0123))
        emu.run(1)
        emu.reset()
        assert emu.unknown_opcodes == []


# =============================================================================
# Display Output Tests
# =============================================================================

class TestDisplayOutput:
    """Test frame export through the emulator."""

    def test_display_text(self, emu):
        emu.load_bytes(BCD_DRAW)
        emu.run(20)
        text = emu.display_text
        assert len(text.splitlines()) == 32
        assert text.count("#") == 8

    def test_render_display(self, emu):
        emu.load_bytes(BCD_DRAW)
        emu.run(20)
        img = Image.open(io.BytesIO(emu.render_display(scale=4)))
        assert img.size == (256, 128)

    def test_display_pixels(self, emu):
        assert emu.display_pixels == bytes(64 * 32)

    def test_sound_active(self, emu):
        emu.load_bytes(program(0x6005, 0xF018))
        emu.run(2)
        assert emu.sound_active

    def test_repr(self, emu):
        assert repr(emu) == "Emulator(pc=$200, i=$000, cycles=0)"


# =============================================================================
# Configuration Tests
# =============================================================================

class TestConfig:
    """Test EmulatorConfig."""

    def test_defaults(self):
        config = EmulatorConfig()
        assert config.seed is None
        assert config.unknown_opcode_policy is UnknownOpcodePolicy.SKIP
        assert (config.display_width, config.display_height) == (64, 32)
        assert config.cycles_per_frame == 10

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("CHIP8_SEED", "42")
        monkeypatch.setenv("CHIP8_UNKNOWN_OPCODE", "RAISE")
        monkeypatch.setenv("CHIP8_CYCLES_PER_FRAME", "15")
        config = EmulatorConfig.from_env()
        assert config.seed == 42
        assert config.unknown_opcode_policy is UnknownOpcodePolicy.RAISE
        assert config.cycles_per_frame == 15

    def test_from_env_ignores_invalid(self, monkeypatch, caplog):
        monkeypatch.setenv("CHIP8_CYCLES_PER_FRAME", "fast")
        monkeypatch.delenv("CHIP8_SEED", raising=False)
        monkeypatch.delenv("CHIP8_UNKNOWN_OPCODE", raising=False)
        with caplog.at_level(logging.WARNING):
            config = EmulatorConfig.from_env()
        assert config == EmulatorConfig()
        assert "CHIP8_CYCLES_PER_FRAME" in caplog.text

    def test_seed_makes_runs_reproducible(self):
        rom = program(0xC0FF, 0xC1FF, 0xC2FF)
        results = []
        for _ in range(2):
            emu = Emulator(EmulatorConfig(seed=2025))
            emu.load_bytes(rom)
            emu.run(3)
            results.append([emu.registers[f"v{n}"] for n in range(3)])
        assert results[0] == results[1]

    def test_custom_display_size(self):
        emu = Emulator(EmulatorConfig(display_width=128, display_height=64))
        assert len(emu.display_lines) == 64
        assert len(emu.display_lines[0]) == 128
