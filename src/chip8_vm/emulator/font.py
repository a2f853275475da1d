"""
Built-in Hexadecimal Glyph Font
===============================

Sixteen 4x5 digit sprites (0-F), 5 bytes each, loaded verbatim at the
bottom of memory on every reset. Programs locate a digit with Fx29, which
sets I to digit * GLYPH_SIZE, so both the layout and the byte values are
part of the machine contract.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

# Address of glyph 0
FONT_ADDRESS = 0x000

# Bytes per glyph (one byte per row, high nibble used)
GLYPH_SIZE = 5

FONTSET = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])


def glyph_address(digit: int) -> int:
    """
    Address Fx29 loads into I for a digit value.

    Values above 15 are not masked, so they point past the font.
    """
    return FONT_ADDRESS + digit * GLYPH_SIZE
