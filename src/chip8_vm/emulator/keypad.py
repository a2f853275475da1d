"""
Hex Keypad for the CHIP-8 VM
============================

The CHIP-8 input device is a 16-key hexadecimal keypad. The VM only sees
sixteen boolean slots indexed 0x0-0xF; the host side decides which
physical keys drive them.

COSMAC VIP keypad layout:     Default host mapping:
    1  2  3  C                     1  2  3  4
    4  5  6  D                     Q  W  E  R
    7  8  9  E                     A  S  D  F
    A  0  B  F                     Z  X  C  V

Keys can be addressed either by index (0-15) or by host key name, e.g.
``keypad.key_down('W')`` presses key 0x5. Names are case-insensitive.

The keypad is written by the input side and only read by the VM during a
cycle. Drivers that feed it from another thread must synchronise
externally.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from typing import Dict, List, Optional, Union


NUM_KEYS = 16


# =============================================================================
# HOST KEY NAME TO KEYPAD INDEX MAPPING
# =============================================================================

KEY_TO_INDEX_QWERTY: Dict[str, int] = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "Q": 0x4, "W": 0x5, "E": 0x6, "R": 0xD,
    "A": 0x7, "S": 0x8, "D": 0x9, "F": 0xE,
    "Z": 0xA, "X": 0x0, "C": 0xB, "V": 0xF,
}


KeyRef = Union[int, str]


class Keypad:
    """
    Sixteen-slot key state.

    Example:
        >>> keypad = Keypad()
        >>> keypad.key_down('W')
        >>> keypad.is_pressed(0x5)
        True
        >>> keypad.first_pressed()
        5
    """

    def __init__(self, layout: Optional[Dict[str, int]] = None):
        """
        Initialize keypad with all keys released.

        Args:
            layout: Host key name to keypad index mapping
                    (default: KEY_TO_INDEX_QWERTY)
        """
        self._layout = dict(layout if layout is not None else KEY_TO_INDEX_QWERTY)
        self._keys: List[bool] = [False] * NUM_KEYS

    def resolve(self, key: KeyRef) -> int:
        """
        Convert a key reference to a keypad index.

        Args:
            key: Keypad index (0-15) or host key name

        Returns:
            Keypad index 0-15

        Raises:
            ValueError: If the index is out of range or the name is unknown
        """
        if isinstance(key, int):
            if not 0 <= key < NUM_KEYS:
                raise ValueError(f"keypad index must be 0-15, got {key}")
            return key
        index = self._layout.get(key.upper())
        if index is None:
            raise ValueError(f"unknown key name: {key!r}")
        return index

    def key_down(self, key: KeyRef) -> None:
        """Press a key."""
        self._keys[self.resolve(key)] = True

    def key_up(self, key: KeyRef) -> None:
        """Release a key."""
        self._keys[self.resolve(key)] = False

    def release_all(self) -> None:
        """Release every key."""
        for i in range(NUM_KEYS):
            self._keys[i] = False

    def is_pressed(self, index: int) -> bool:
        """True if keypad slot ``index`` (0-15) is down."""
        return self._keys[index]

    def first_pressed(self) -> Optional[int]:
        """Lowest pressed key index, or None if no key is down."""
        for i, down in enumerate(self._keys):
            if down:
                return i
        return None

    def pressed_keys(self) -> List[int]:
        """All pressed key indices in ascending order."""
        return [i for i, down in enumerate(self._keys) if down]

    def __getitem__(self, index: int) -> bool:
        return self._keys[index]

    def __setitem__(self, index: int, value: bool) -> None:
        self._keys[index] = bool(value)
