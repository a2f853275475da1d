"""
CHIP-8 Emulator - Main Orchestrator
===================================

This module provides the main `Emulator` class that wraps the Chip8 VM
with a high-level API for running and testing programs headless.

The Emulator class:
- Builds the VM from an EmulatorConfig (seed, unknown-opcode policy,
  display size)
- Loads programs from ROM files or raw bytes
- Supports execution control (step, run, run_until)
- Offers display output inspection (text, pixels, PNG)
- Supports keypad input simulation
- Records unknown instruction words encountered while running

Example usage:
    >>> from chip8_vm.emulator import Emulator, EmulatorConfig
    >>> emu = Emulator(EmulatorConfig(seed=1))
    >>> emu.load_rom("pong.ch8")
    >>> emu.run(10_000)
    10000
    >>> print(emu.display_text)

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

from .cpu import Chip8, UnknownOpcodePolicy
from .decode import Instruction
from .display import DISPLAY_HEIGHT, DISPLAY_WIDTH
from .keypad import KeyRef


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmulatorConfig:
    """
    Configuration for emulator initialization.

    Attributes:
        seed: Seed for the RND instruction. None uses OS entropy.
        unknown_opcode_policy: What to do with undefined instruction words
        display_width: Display columns (default 64)
        display_height: Display rows (default 32)
        cycles_per_frame: VM cycles per 60Hz frame, used by run_frames()

    Example:
        >>> config = EmulatorConfig(seed=42)
        >>> config = EmulatorConfig(unknown_opcode_policy=UnknownOpcodePolicy.RAISE)
    """
    seed: Optional[int] = None
    unknown_opcode_policy: UnknownOpcodePolicy = UnknownOpcodePolicy.SKIP
    display_width: int = DISPLAY_WIDTH
    display_height: int = DISPLAY_HEIGHT
    cycles_per_frame: int = 10

    @classmethod
    def from_env(cls) -> "EmulatorConfig":
        """
        Create EmulatorConfig from environment variables.

        Environment variables (all optional):
            CHIP8_SEED: RND seed (integer)
            CHIP8_UNKNOWN_OPCODE: "skip", "stall" or "raise"
            CHIP8_CYCLES_PER_FRAME: Cycles per frame (integer)

        Invalid values are logged and ignored.

        Returns:
            EmulatorConfig with values from environment variables
        """
        overrides = {}

        if seed := os.environ.get("CHIP8_SEED"):
            try:
                overrides["seed"] = int(seed, 0)
            except ValueError:
                logger.warning(f"Ignoring invalid CHIP8_SEED={seed!r}")

        if policy := os.environ.get("CHIP8_UNKNOWN_OPCODE"):
            try:
                overrides["unknown_opcode_policy"] = UnknownOpcodePolicy(policy.lower())
            except ValueError:
                logger.warning(f"Ignoring invalid CHIP8_UNKNOWN_OPCODE={policy!r}")

        if cycles := os.environ.get("CHIP8_CYCLES_PER_FRAME"):
            try:
                overrides["cycles_per_frame"] = int(cycles)
            except ValueError:
                logger.warning(f"Ignoring invalid CHIP8_CYCLES_PER_FRAME={cycles!r}")

        return cls(**overrides)


class Emulator:
    """
    CHIP-8 emulator with inspection and input-simulation helpers.

    Attributes:
        config: The EmulatorConfig used to initialize this instance
        vm: The Chip8 VM (accessible for low-level control)
        display: The VM's display buffer
        keypad: The VM's keypad

    Example:
        >>> emu = Emulator()
        >>> emu.load_bytes(bytes([0xA0, 0x00, 0xD0, 0x05]))  # draw glyph "0"
        >>> emu.run(2)
        2
        >>> print(emu.display_lines[0][:4])
        ####
    """

    def __init__(self, config: Optional[EmulatorConfig] = None):
        """
        Initialize the emulator with given configuration.

        Args:
            config: EmulatorConfig. If None, defaults are used.
        """
        self.config = config or EmulatorConfig()
        self.vm = Chip8(
            seed=self.config.seed,
            unknown_opcode_policy=self.config.unknown_opcode_policy,
            display_width=self.config.display_width,
            display_height=self.config.display_height,
        )
        self.display = self.vm.display
        self.keypad = self.vm.keypad

        self._total_cycles = 0
        self._unknown_opcodes: List[Tuple[int, int]] = []
        self.vm.on_unknown_opcode = self._unknown_opcode_hook

    def _unknown_opcode_hook(self, instruction: Instruction, address: int) -> None:
        self._unknown_opcodes.append((address, instruction.word))

    # =========================================================================
    # Program Loading
    # =========================================================================

    def load_rom(self, path: Union[str, Path]) -> None:
        """
        Reset and load a ROM image file at $200.

        Args:
            path: Path to the raw program image

        Raises:
            FileNotFoundError: If the file does not exist
            LoadError: If the image is too large
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"ROM file not found: {path}")
        self.load_bytes(path.read_bytes())
        logger.debug(f"Loaded ROM {path}")

    def load_bytes(self, data: bytes) -> None:
        """
        Reset and load raw program bytes at $200.

        Raises:
            LoadError: If the image is too large
        """
        self._reset_counters()
        self.vm.load(data)

    def reset(self) -> None:
        """
        Reset emulator to power-on state.

        Memory is cleared along with everything else, so any loaded program
        is gone; load again before running.
        """
        self.vm.reset()
        self._reset_counters()

    def _reset_counters(self) -> None:
        self._total_cycles = 0
        self._unknown_opcodes.clear()

    # =========================================================================
    # Execution Control
    # =========================================================================

    def step(self) -> Optional[Instruction]:
        """
        Execute a single VM cycle.

        Returns:
            The executed instruction, or None if the cycle was a key-wait stall
        """
        instruction = self.vm.cycle()
        self._total_cycles += 1
        return instruction

    def run(self, max_cycles: int = 1_000) -> int:
        """
        Run a fixed number of cycles.

        Args:
            max_cycles: Cycles to execute

        Returns:
            Number of cycles executed
        """
        for _ in range(max_cycles):
            self.step()
        return max_cycles

    def run_frames(self, frames: int = 1) -> int:
        """
        Run whole 60Hz frames of config.cycles_per_frame cycles each.

        Args:
            frames: Number of frames to run

        Returns:
            Number of cycles executed
        """
        return self.run(frames * self.config.cycles_per_frame)

    def run_until(
        self,
        predicate: Callable[["Emulator"], bool],
        max_cycles: int = 100_000,
    ) -> bool:
        """
        Run until a predicate on the emulator becomes true.

        The predicate is checked before each cycle.

        Args:
            predicate: Called with this emulator
            max_cycles: Maximum cycles before giving up

        Returns:
            True if the predicate was satisfied, False if max_cycles hit first

        Example:
            >>> emu.run_until(lambda e: e.vm.waiting_for_key)
            True
        """
        for _ in range(max_cycles):
            if predicate(self):
                return True
            self.step()
        return predicate(self)

    # =========================================================================
    # Keypad Input
    # =========================================================================

    def press_key(self, key: KeyRef) -> None:
        """
        Press a key (key down event).

        Args:
            key: Keypad index (0-15) or host key name ('1', 'Q', ...)
        """
        self.keypad.key_down(key)

    def release_key(self, key: KeyRef) -> None:
        """Release a key (key up event)."""
        self.keypad.key_up(key)

    def tap_key(self, key: KeyRef, hold_cycles: int = 10) -> None:
        """
        Tap a key (press, run, release).

        Args:
            key: Key to tap
            hold_cycles: How long to hold the key (in VM cycles)
        """
        self.press_key(key)
        self.run(hold_cycles)
        self.release_key(key)

    # =========================================================================
    # Display Output
    # =========================================================================

    @property
    def display_text(self) -> str:
        """Current frame as newline-joined rows of '#' and '.'."""
        return self.display.get_text()

    @property
    def display_lines(self) -> List[str]:
        """Current frame as a list of rows."""
        return self.display.get_text_grid()

    @property
    def display_pixels(self) -> bytes:
        """Raw pixel buffer (1 byte per pixel, row-major)."""
        return self.display.get_pixel_buffer()

    def render_display(self, scale: int = 8) -> bytes:
        """
        Render display to a PNG image.

        Args:
            scale: Pixel scaling factor (default 8)

        Returns:
            PNG image bytes
        """
        return self.display.render_image(scale=scale)

    # =========================================================================
    # State Inspection
    # =========================================================================

    @property
    def registers(self) -> dict:
        """
        Get current register values as a dictionary.

        Returns:
            Dictionary with keys: v0-vf, i, pc, sp, dt, st
        """
        return self.vm.registers()

    @property
    def total_cycles(self) -> int:
        """Total VM cycles executed since last reset or load."""
        return self._total_cycles

    @property
    def unknown_opcodes(self) -> List[Tuple[int, int]]:
        """(address, word) for each unknown instruction executed since last load."""
        return list(self._unknown_opcodes)

    @property
    def sound_active(self) -> bool:
        """True while the sound timer is running."""
        return self.vm.timers.sound_active

    def __repr__(self) -> str:
        """Return string representation of emulator state."""
        return (
            f"Emulator(pc=${self.vm.pc:03X}, "
            f"i=${self.vm.i:03X}, "
            f"cycles={self._total_cycles})"
        )
