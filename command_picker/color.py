"""
command_picker/color.py - Colors and the surfaces we read them from.

Two kinds of pixel source:
  PackedBufferSource - raw 32bpp bytes straight off a screen grab
  RasterSource       - an RGB numpy array (e.g. a screenshot loaded from disk)

Both hand back objects with get_red/get_green/get_blue so the analysis code
never cares which one it's looking at.
"""

from typing import NamedTuple, Protocol, Sequence, Union

import numpy as np

from .errors import CaptureError, ConfigError, PixelBoundsError


class Color(Protocol):
    def get_red(self) -> int: ...
    def get_green(self) -> int: ...
    def get_blue(self) -> int: ...


class PixelSource(Protocol):
    def get_pixel(self, x: int, y: int) -> Color: ...


class Rgb(NamedTuple):
    r: int
    g: int
    b: int

    def get_red(self) -> int:
        return self.r

    def get_green(self) -> int:
        return self.g

    def get_blue(self) -> int:
        return self.b


class PackedColor(NamedTuple):
    # Little-endian 32-bit word: red is the LOW byte, then green, then blue.
    # Top byte is padding/alpha and gets ignored.
    word: int

    def get_red(self) -> int:
        return self.word & 0xFF

    def get_green(self) -> int:
        return (self.word >> 8) & 0xFF

    def get_blue(self) -> int:
        return (self.word >> 16) & 0xFF


def as_color(value: Union[Color, Sequence[int]]) -> Color:
    """Accept either a Color or a plain (r, g, b) sequence from config."""
    if hasattr(value, "get_red"):
        return value
    if len(value) != 3:
        raise ConfigError(f"color needs exactly 3 channels, got {list(value)!r}")
    r, g, b = (int(c) for c in value)
    for c in (r, g, b):
        if not 0 <= c <= 255:
            raise ConfigError(f"channel value {c} out of range 0-255 in {list(value)!r}")
    return Rgb(r, g, b)


class PackedBufferSource:
    # Row-major, top row first, 4 bytes per pixel.

    BYTES_PER_PIXEL = 4

    def __init__(self, data: bytes, width: int, height: int, bits_per_pixel: int = 32) -> None:
        if bits_per_pixel != 32:
            raise ConfigError(f"only 32-bit pixels are supported, got {bits_per_pixel}-bit")

        expected = width * height * self.BYTES_PER_PIXEL
        if len(data) < expected:
            raise CaptureError(
                f"partial capture: {len(data)} bytes for {width}x{height}, expected {expected}"
            )

        self._data = bytes(data)
        self.width = width
        self.height = height

    def get_pixel(self, x: int, y: int) -> PackedColor:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise PixelBoundsError(x, y, self.width, self.height)
        offset = (y * self.width + x) * self.BYTES_PER_PIXEL
        word = int.from_bytes(self._data[offset:offset + self.BYTES_PER_PIXEL], "little")
        return PackedColor(word)


class RasterSource:
    # Wraps an H x W x 3 uint8 array in RGB order (NOT OpenCV's BGR).

    def __init__(self, array: np.ndarray) -> None:
        if array.ndim != 3 or array.shape[2] != 3:
            raise ConfigError(f"expected an H x W x 3 RGB raster, got shape {array.shape}")
        self._array = array
        self.height, self.width = array.shape[:2]

    def get_pixel(self, x: int, y: int) -> Rgb:
        # numpy would happily wrap negative indices, so check by hand
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise PixelBoundsError(x, y, self.width, self.height)
        r, g, b = self._array[y, x]
        return Rgb(int(r), int(g), int(b))
