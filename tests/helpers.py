import numpy as np

from command_picker.color import RasterSource

RED = (212, 83, 54)
GREEN = (118, 237, 34)
WHITE = (242, 246, 232)


def solid_raster(color, width=32, height=8) -> RasterSource:
    arr = np.zeros((height, width, 3), dtype=np.uint8)
    arr[:, :] = color
    return RasterSource(arr)


def split_raster(left_color, right_color, width=32, height=8) -> RasterSource:
    # Left half one color, right half another
    arr = np.zeros((height, width, 3), dtype=np.uint8)
    arr[:, : width // 2] = left_color
    arr[:, width // 2:] = right_color
    return RasterSource(arr)
