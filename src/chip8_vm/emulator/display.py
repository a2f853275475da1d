"""
Monochrome Display Buffer for the CHIP-8 VM
===========================================

The CHIP-8 display is a 64x32 grid of single-bit pixels. Programs change
it in exactly two ways:

- CLS (00E0) turns every pixel off
- DRW (Dxyn) XORs an 8-pixel-wide sprite into the grid and reports
  whether any pixel that was on got turned off (collision)

Sprite placement:
- The start coordinate wraps: (x % width, y % height)
- Individual pixels do NOT wrap; anything past the right or bottom edge
  is clipped

The buffer is paired with a "needs refresh" flag. The VM sets it after
every CLS/DRW; the rendering side clears it with mark_refreshed() once it
has consumed the frame.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import io
from typing import Iterable, List

from PIL import Image


DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32

# Sprites are always one byte wide
SPRITE_WIDTH = 8


class Display:
    """
    Single-bit pixel grid with XOR sprite compositor.

    Pixels are stored row-major, one byte per pixel (0=off, 1=on).

    Example:
        >>> display = Display()
        >>> display.draw_sprite(0, 0, [0xF0, 0x90, 0x90, 0x90, 0xF0])
        False
        >>> display.get_pixel(0, 0)
        1
        >>> display.draw_sprite(0, 0, [0xF0, 0x90, 0x90, 0x90, 0xF0])
        True
        >>> display.get_pixel(0, 0)
        0
    """

    def __init__(self, width: int = DISPLAY_WIDTH, height: int = DISPLAY_HEIGHT):
        """
        Initialize an all-off display.

        Args:
            width: Pixel columns (64 on the COSMAC VIP)
            height: Pixel rows (32 on the COSMAC VIP)
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"display size must be positive, got {width}x{height}")

        self._width = width
        self._height = height
        self._pixels = bytearray(width * height)

        # Track if display needs refresh (for external rendering)
        self._needs_refresh = False

    @property
    def width(self) -> int:
        """Number of pixel columns."""
        return self._width

    @property
    def height(self) -> int:
        """Number of pixel rows."""
        return self._height

    @property
    def needs_refresh(self) -> bool:
        """True if the buffer changed since the last mark_refreshed()."""
        return self._needs_refresh

    def mark_refreshed(self) -> None:
        """Acknowledge the current frame (called by the renderer)."""
        self._needs_refresh = False

    def clear(self) -> None:
        """Turn all pixels off and signal a new frame (CLS and reset)."""
        self._pixels[:] = bytes(len(self._pixels))
        self._needs_refresh = True

    def get_pixel(self, x: int, y: int) -> int:
        """
        Get pixel state at (x, y).

        Raises:
            IndexError: If the coordinate is outside the display
        """
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise IndexError(f"pixel ({x}, {y}) outside {self._width}x{self._height} display")
        return self._pixels[y * self._width + x]

    def draw_sprite(self, x: int, y: int, rows: Iterable[int]) -> bool:
        """
        XOR a sprite into the buffer.

        Each row byte is drawn left to right starting from its most
        significant bit. Only set bits toggle pixels.

        Args:
            x: Horizontal start position (wrapped modulo width)
            y: Vertical start position (wrapped modulo height)
            rows: Sprite bytes, one per row

        Returns:
            True if any pixel was turned off (collision)
        """
        x0 = x % self._width
        y0 = y % self._height
        collision = False

        for row_offset, row in enumerate(rows):
            py = y0 + row_offset
            if py >= self._height:
                break
            base = py * self._width
            for bit in range(SPRITE_WIDTH):
                if not (row & (0x80 >> bit)):
                    continue
                px = x0 + bit
                if px >= self._width:
                    break
                offset = base + px
                if self._pixels[offset]:
                    collision = True
                self._pixels[offset] ^= 1

        self._needs_refresh = True
        return collision

    # =========================================================================
    # Frame export
    # =========================================================================

    def get_pixel_buffer(self) -> bytes:
        """
        Get raw pixel buffer.

        Returns:
            width * height bytes, row-major, 1 = pixel on
        """
        return bytes(self._pixels)

    def get_text_grid(self, on: str = "#", off: str = ".") -> List[str]:
        """
        Get display content as text, one string per pixel row.

        Args:
            on: Character for lit pixels
            off: Character for dark pixels
        """
        lines = []
        for y in range(self._height):
            row = self._pixels[y * self._width:(y + 1) * self._width]
            lines.append("".join(on if p else off for p in row))
        return lines

    def get_text(self, on: str = "#", off: str = ".") -> str:
        """Get display content as a single newline-joined string."""
        return "\n".join(self.get_text_grid(on, off))

    def count_lit(self) -> int:
        """Number of pixels currently on."""
        return sum(self._pixels)

    def render_image(self, scale: int = 8) -> bytes:
        """
        Render display as PNG image.

        Lit pixels are white on a black background, matching the
        classic texture fill.

        Args:
            scale: Pixel scale factor (default 8)

        Returns:
            PNG image bytes
        """
        if scale < 1:
            raise ValueError(f"scale must be at least 1, got {scale}")

        img = Image.frombytes(
            "L",
            (self._width, self._height),
            bytes(255 if p else 0 for p in self._pixels),
        )
        if scale > 1:
            img = img.resize(
                (self._width * scale, self._height * scale),
                Image.Resampling.NEAREST,
            )

        # Export as PNG
        buffer = io.BytesIO()
        img.save(buffer, format="PNG")
        return buffer.getvalue()
