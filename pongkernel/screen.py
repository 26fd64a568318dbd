"""Framebuffer text and pixel writer."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence

# Additional vertical space between lines.
LINE_SPACING = 0
RASTER_HEIGHT = 16
LINE_HEIGHT = RASTER_HEIGHT + LINE_SPACING

Raster = Sequence[Sequence[int]]
Rasterizer = Callable[[str], Optional[Raster]]


class PixelFormat(Enum):
    """Byte layout of a framebuffer pixel."""

    RGB = "rgb"
    BGR = "bgr"
    U8 = "u8"
    UNKNOWN = "unknown"


@dataclass
class FrameBufferInfo:
    """Geometry and layout of a framebuffer."""

    width: int
    height: int
    stride: int
    bytes_per_pixel: int
    pixel_format: PixelFormat = PixelFormat.RGB

    def __post_init__(self) -> None:
        if not 1 <= self.bytes_per_pixel <= 4:
            raise ValueError(f"unsupported bytes per pixel: {self.bytes_per_pixel}")


class UnsupportedPixelFormat(Exception):
    """Raised when drawing to a framebuffer whose pixel format is not handled."""


_GLYPH_WIDTH = 8


def _block_rasterizer(c: str) -> Optional[Raster]:
    """Render printable characters as an outlined block in a fixed cell."""
    if c == " ":
        return [[0] * _GLYPH_WIDTH for _ in range(RASTER_HEIGHT)]
    if not c.isprintable():
        return None
    rows = []
    for y in range(RASTER_HEIGHT):
        if y in (2, RASTER_HEIGHT - 3):
            rows.append([255 if 1 <= x <= 6 else 0 for x in range(_GLYPH_WIDTH)])
        elif 2 < y < RASTER_HEIGHT - 3:
            rows.append([255 if x in (1, 6) else 0 for x in range(_GLYPH_WIDTH)])
        else:
            rows.append([0] * _GLYPH_WIDTH)
    return rows


class ScreenWriter:
    """Draws pixels and text into a framebuffer."""

    def __init__(
        self,
        framebuffer: bytearray,
        info: FrameBufferInfo,
        rasterizer: Optional[Rasterizer] = None,
    ) -> None:
        self.framebuffer = framebuffer
        self.info = info
        self.rasterizer: Rasterizer = rasterizer or _block_rasterizer
        self.x_pos = 0
        self.y_pos = 0
        self.clear()

    @property
    def width(self) -> int:
        return self.info.width

    @property
    def height(self) -> int:
        return self.info.height

    def _newline(self) -> None:
        self.y_pos += LINE_HEIGHT
        self._carriage_return()

    def _carriage_return(self) -> None:
        self.x_pos = 0

    def clear(self) -> None:
        """Erase the screen and move the cursor to the top left."""
        self.x_pos = 0
        self.y_pos = 0
        self.framebuffer[:] = bytes(len(self.framebuffer))

    def write_char(self, c: str) -> None:
        """Write one character at the cursor, wrapping and clearing as needed."""
        if c == "\n":
            self._newline()
            return
        if c == "\r":
            self._carriage_return()
            return
        raster = self.rasterizer(c)
        if raster is None:
            return
        glyph_height = len(raster)
        glyph_width = len(raster[0]) if glyph_height else 0
        if self.x_pos + glyph_width > self.width:
            self._newline()
        if self.y_pos + glyph_height > self.height:
            self.clear()
        for y, row in enumerate(raster):
            for x, intensity in enumerate(row):
                self.write_pixel(self.x_pos + x, self.y_pos + y, intensity)
        self.x_pos += glyph_width

    def write(self, text: str) -> None:
        """Write a string at the cursor."""
        for c in text:
            self.write_char(c)

    def write_pixel(self, x: int, y: int, intensity: int) -> None:
        """Draw a pixel in the writer's text colour at the given intensity."""
        self.draw_pixel(x, y, intensity // 4, intensity, intensity // 2)

    def draw_pixel(self, x: int, y: int, r: int, g: int, b: int) -> None:
        """Draw a pixel of the given colour; out-of-bounds pixels are skipped."""
        if x >= self.width or y >= self.height:
            return
        fmt = self.info.pixel_format
        if fmt is PixelFormat.RGB:
            color = bytes((r, g, b, 0))
        elif fmt is PixelFormat.BGR:
            color = bytes((b, g, r, 0))
        else:
            self.info = dataclasses.replace(self.info, pixel_format=PixelFormat.RGB)
            raise UnsupportedPixelFormat(f"pixel format {fmt.name} not supported")
        bpp = self.info.bytes_per_pixel
        byte_offset = (y * self.info.stride + x) * bpp
        if byte_offset + bpp > len(self.framebuffer):
            return
        self.framebuffer[byte_offset:byte_offset + bpp] = color[:bpp]


_WRITER: Optional[ScreenWriter] = None


def init(
    framebuffer: bytearray,
    info: FrameBufferInfo,
    rasterizer: Optional[Rasterizer] = None,
) -> ScreenWriter:
    """Create the shared screen writer over a framebuffer."""
    global _WRITER
    _WRITER = ScreenWriter(framebuffer, info, rasterizer)
    return _WRITER


def screenwriter() -> ScreenWriter:
    """Return the shared screen writer."""
    if _WRITER is None:
        raise RuntimeError("the screen writer has not been initialised")
    return _WRITER