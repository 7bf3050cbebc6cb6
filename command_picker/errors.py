"""
command_picker/errors.py - Things that can go wrong.

"Nothing recognised on screen" is NOT in here. That's a plain None from
classify(), because an empty menu is a perfectly normal frame.
"""


class CommandPickerError(Exception):
    """Base exception for everything this package raises on purpose."""
    pass


class ConfigError(CommandPickerError):
    """Bad configuration: unknown item class, span <= 0, unsupported pixel depth, broken YAML."""
    pass


class CaptureError(CommandPickerError):
    """Couldn't get pixels: screen grab failed, image unreadable, truncated buffer."""
    pass


class PixelBoundsError(CommandPickerError, IndexError):
    """Pixel lookup outside the source surface. Caller bug, not something to retry."""

    def __init__(self, x: int, y: int, width: int, height: int) -> None:
        super().__init__(f"pixel ({x}, {y}) outside {width}x{height} surface")
        self.x = x
        self.y = y
        self.width = width
        self.height = height
