import numpy as np
import pytest

from command_picker.color import PackedBufferSource, PackedColor, RasterSource, Rgb, as_color
from command_picker.errors import CaptureError, ConfigError, PixelBoundsError


def test_packed_color_channel_positions():
    # low byte red, then green, then blue, top byte ignored
    c = PackedColor(0xAA332211)
    assert c.get_red() == 0x11
    assert c.get_green() == 0x22
    assert c.get_blue() == 0x33


def test_packed_and_rgb_agree_on_channels():
    packed = PackedColor(int.from_bytes(bytes([212, 83, 54, 255]), "little"))
    rgb = Rgb(212, 83, 54)
    assert (packed.get_red(), packed.get_green(), packed.get_blue()) == \
        (rgb.get_red(), rgb.get_green(), rgb.get_blue())


def test_packed_buffer_row_major_lookup():
    width, height = 3, 2
    data = bytearray(width * height * 4)
    # pixel (2, 1) is the last one
    offset = (1 * width + 2) * 4
    data[offset:offset + 4] = bytes([10, 20, 30, 0])
    src = PackedBufferSource(bytes(data), width, height)

    px = src.get_pixel(2, 1)
    assert (px.get_red(), px.get_green(), px.get_blue()) == (10, 20, 30)
    assert src.get_pixel(0, 0).get_red() == 0


def test_packed_buffer_rejects_other_depths():
    with pytest.raises(ConfigError):
        PackedBufferSource(bytes(12), 2, 2, bits_per_pixel=24)


def test_packed_buffer_rejects_truncated_data():
    with pytest.raises(CaptureError):
        PackedBufferSource(bytes(4 * 3), 2, 2)


@pytest.mark.parametrize("x, y", [(-1, 0), (0, -1), (2, 0), (0, 2)])
def test_packed_buffer_out_of_bounds(x, y):
    src = PackedBufferSource(bytes(16), 2, 2)
    with pytest.raises(PixelBoundsError):
        src.get_pixel(x, y)


def test_raster_source_reads_rgb():
    arr = np.zeros((2, 4, 3), dtype=np.uint8)
    arr[1, 3] = (1, 2, 3)
    src = RasterSource(arr)
    assert src.get_pixel(3, 1) == Rgb(1, 2, 3)
    assert isinstance(src.get_pixel(3, 1).r, int)


def test_raster_source_does_not_wrap_negative_indices():
    src = RasterSource(np.zeros((2, 2, 3), dtype=np.uint8))
    with pytest.raises(PixelBoundsError):
        src.get_pixel(-1, 0)
    # still an IndexError for anyone catching the builtin
    with pytest.raises(IndexError):
        src.get_pixel(0, 5)


def test_raster_source_rejects_wrong_shape():
    with pytest.raises(ConfigError):
        RasterSource(np.zeros((2, 2, 4), dtype=np.uint8))
    with pytest.raises(ConfigError):
        RasterSource(np.zeros((2, 2), dtype=np.uint8))


def test_as_color():
    assert as_color([1, 2, 3]) == Rgb(1, 2, 3)
    c = Rgb(4, 5, 6)
    assert as_color(c) is c
    with pytest.raises(ConfigError):
        as_color([1, 2])
    with pytest.raises(ConfigError):
        as_color([1, 2, 300])
