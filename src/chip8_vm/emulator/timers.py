"""
Delay and Sound Timers
======================

Two independent 8-bit down-counters. The engine ticks them once per
executed cycle; each decrements by one while non-zero and stops at zero
(no wraparound).

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from dataclasses import dataclass


@dataclass
class Timers:
    """
    Delay timer (readable by programs) and sound timer (tone while non-zero).

    Assignments are masked to 8 bits.
    """
    delay: int = 0
    sound: int = 0

    def __setattr__(self, name: str, value: int) -> None:
        super().__setattr__(name, value & 0xFF)

    def reset(self) -> None:
        """Zero both timers."""
        self.delay = 0
        self.sound = 0

    def tick(self) -> None:
        """Decrement each non-zero timer by one."""
        if self.delay > 0:
            self.delay -= 1
        if self.sound > 0:
            self.sound -= 1

    @property
    def sound_active(self) -> bool:
        """True while the sound timer is running (tone should play)."""
        return self.sound > 0
