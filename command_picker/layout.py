"""
command_picker/layout.py - Grid cell -> screen pixel.

The item picker is a grid of square icons centered on screen. Given which
grid is open and which cell we want, work out where to click.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, NamedTuple, Optional, Tuple

from .errors import ConfigError


class ItemPos(NamedTuple):
    # Zero-based (column, row). Not checked against the grid size.
    col: int
    row: int


class MousePos(NamedTuple):
    x: int
    y: int

    def __sub__(self, other: "MousePos") -> "MousePos":
        return MousePos(self.x - other.x, self.y - other.y)


@dataclass(frozen=True)
class ScreenInfo:
    icon_size: int
    icon_margin: int
    screen_size: Tuple[int, int]
    grids: Mapping[str, Tuple[int, int]] = field(default_factory=dict)  # class -> (cols, rows)
    # How many leading cells get no margin added. 1 matches the in-game
    # layout as calibrated at 1920x1080; 0 gives an even icon+margin pitch.
    margin_offset: int = 1

    def __post_init__(self) -> None:
        object.__setattr__(self, "grids", MappingProxyType(dict(self.grids)))

    def grid_size(self, item_class: str) -> Tuple[int, int]:
        try:
            return self.grids[item_class]
        except KeyError:
            known = ", ".join(sorted(self.grids)) or "none"
            raise ConfigError(f"no grid dimensions for item class {item_class!r} (known: {known})") from None


def _axis_center(index: int, size: int, margin: int, margin_offset: int) -> int:
    return size // 2 + index * size + max(index - margin_offset, 0) * margin


def grid_to_screen(screen: ScreenInfo, item_class: str, pos: ItemPos) -> MousePos:
    """
    Absolute pixel at the center of icon `pos` in the grid for `item_class`.

    Fixed formula verified by calibration against the real menu, not derived
    from first principles. Don't "fix" the margin term without re-measuring.
    Cells outside the grid just extrapolate.

    Heads up: with the default margin_offset=1 the first step (col 0 -> 1)
    is a bare icon_size, every later step is icon_size + icon_margin. So at
    76/6 the (4, 4) icon sits 322px from (0, 0) on each axis, not 4 * 82.
    If you want the textbook even pitch, use margin_offset=0.
    """
    cols, rows = screen.grid_size(item_class)
    size, margin = screen.icon_size, screen.icon_margin
    screen_w, screen_h = screen.screen_size

    grid_w = cols * size + (cols - 1) * margin
    grid_h = rows * size + (rows - 1) * margin

    origin_x = screen_w // 2 - grid_w // 2
    origin_y = screen_h // 2 - grid_h // 2

    return MousePos(
        origin_x + _axis_center(pos.col, size, margin, screen.margin_offset),
        origin_y + _axis_center(pos.row, size, margin, screen.margin_offset),
    )


class ItemSelector:
    # Picks which cell to click for a given tier. Classes without a
    # preference get the top-left icon.

    def __init__(self, picks: Optional[Mapping[str, ItemPos]] = None) -> None:
        self._picks: Dict[str, ItemPos] = {k: ItemPos(*v) for k, v in (picks or {}).items()}

    def select_item(self, item_class: str) -> ItemPos:
        return self._picks.get(item_class, ItemPos(0, 0))
