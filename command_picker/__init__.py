"""
command_picker package

color.py       - Color types and pixel sources (packed 32bpp buffer, RGB raster)
analysis.py    - Distance metric, span sampler, mirrored-spot tier classifier
layout.py      - Grid cell -> screen pixel mapping, item selection
vision.py      - Screen capture (mss) and image loading (OpenCV)
human_input.py - Mouse movement and clicks (pyautogui)
calibration.py - Distance reports for tuning sample spots
config.py      - Typed configuration dataclasses
ui.py          - Rich terminal dashboard
"""

from .errors import CommandPickerError, ConfigError, CaptureError, PixelBoundsError
from .color import Rgb, PackedColor, PackedBufferSource, RasterSource, as_color
from .analysis import (
    AnalysisOptions, Reference, Detection, CandidateScore,
    build_reference_table, distance2, average_distance, detect, classify,
)
from .layout import ItemPos, MousePos, ScreenInfo, ItemSelector, grid_to_screen
from .config import AppConfig, load_config

__all__ = [
    "CommandPickerError", "ConfigError", "CaptureError", "PixelBoundsError",
    "Rgb", "PackedColor", "PackedBufferSource", "RasterSource", "as_color",
    "AnalysisOptions", "Reference", "Detection", "CandidateScore",
    "build_reference_table", "distance2", "average_distance", "detect", "classify",
    "ItemPos", "MousePos", "ScreenInfo", "ItemSelector", "grid_to_screen",
    "AppConfig", "load_config",
]
