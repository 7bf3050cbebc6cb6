"""
command_picker/vision.py - Getting pixels off the screen (or off disk).
"""

from pathlib import Path
from typing import Optional, Tuple, Union

import cv2
import mss
import mss.exception
import numpy as np

from .color import PackedBufferSource, RasterSource
from .errors import CaptureError


def check_resolution(width: int, height: int, expected: Tuple[int, int]) -> bool:
    """The sample spots and grid math assume an unscaled UI, so this is an exact check."""
    return (width, height) == tuple(expected)


def load_raster(path: Union[str, Path]) -> RasterSource:
    # cv2 reads BGR, the raster source wants RGB
    img = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if img is None:
        raise CaptureError(f"could not read image: {path}")
    return RasterSource(cv2.cvtColor(img, cv2.COLOR_BGR2RGB))


class ScreenCapture:
    # Screen grabber using mss (way faster than pyautogui)

    def __init__(self, monitor_index: int = 1) -> None:
        self._sct: Optional[mss.mss] = None
        self.monitor_index = monitor_index

    def __enter__(self):
        self._sct = mss.mss()
        return self

    def __exit__(self, exc_type, exc_str, exc_tb):
        self.close()

    def close(self) -> None:
        if self._sct:
            self._sct.close()
            self._sct = None

    def list_monitors(self) -> list:
        if not self._sct:
            self._sct = mss.mss()
        return self._sct.monitors

    def monitor_size(self) -> Tuple[int, int]:
        monitors = self.list_monitors()
        monitor = monitors[self._monitor_idx(monitors)]
        return monitor["width"], monitor["height"]

    def _monitor_idx(self, monitors: list) -> int:
        # Clamp to valid range, 0 is the all-monitors virtual screen
        return max(0, min(self.monitor_index, len(monitors) - 1))

    def capture(self) -> PackedBufferSource:
        """
        One frozen snapshot of the selected monitor as a packed 32bpp source.
        Any failure comes out as CaptureError. No retries here, that's the
        caller's call.
        """
        try:
            if not self._sct:
                self._sct = mss.mss()
            monitors = self._sct.monitors
            img = self._sct.grab(monitors[self._monitor_idx(monitors)])
        except mss.exception.ScreenShotError as e:
            raise CaptureError(f"screen grab failed: {e}") from e

        frame = np.array(img)
        if frame.ndim != 3 or frame.shape[2] != 4:
            raise CaptureError(f"unexpected capture layout {frame.shape}, need 32-bit BGRA")

        # mss hands us BGRA, packed sources want red in the low byte
        rgba = cv2.cvtColor(frame, cv2.COLOR_BGRA2RGBA)
        height, width = rgba.shape[:2]
        return PackedBufferSource(rgba.tobytes(), width, height, bits_per_pixel=32)
