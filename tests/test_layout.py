import pytest

from command_picker.errors import ConfigError
from command_picker.layout import ItemPos, ItemSelector, MousePos, ScreenInfo, grid_to_screen


def screen(**kw):
    base = dict(icon_size=76, icon_margin=6, screen_size=(1920, 1080), grids={"red": (5, 5)})
    base.update(kw)
    return ScreenInfo(**base)


def test_top_left_icon_center():
    # grid is 5*76 + 4*6 = 404 px, centered: origin (758, 338)
    assert grid_to_screen(screen(), "red", ItemPos(0, 0)) == MousePos(758 + 38, 338 + 38)


def test_calibrated_margin_term():
    s = screen()
    # max(i - 1, 0) margins: first step is a bare icon width, later steps icon + margin
    assert grid_to_screen(s, "red", ItemPos(1, 0)).x == 796 + 76
    assert grid_to_screen(s, "red", ItemPos(2, 0)).x == 796 + 76 + 82
    assert grid_to_screen(s, "red", ItemPos(4, 4)) == MousePos(796 + 322, 376 + 322)


def test_uniform_pitch_layout():
    s = screen(margin_offset=0)
    origin = grid_to_screen(s, "red", ItemPos(0, 0))
    assert origin == MousePos(796, 376)
    assert grid_to_screen(s, "red", ItemPos(4, 4)) - origin == MousePos(4 * 82, 4 * 82)


@pytest.mark.parametrize("a, b", [
    (ItemPos(0, 0), ItemPos(1, 0)),
    (ItemPos(2, 3), ItemPos(3, 3)),
    (ItemPos(1, 1), ItemPos(1, 2)),
    (ItemPos(3, 0), ItemPos(3, 1)),
])
def test_adjacent_cells_are_icon_plus_margin_apart_with_uniform_pitch(a, b):
    s = screen(margin_offset=0)
    pa, pb = grid_to_screen(s, "red", a), grid_to_screen(s, "red", b)
    assert abs(pb.x - pa.x) + abs(pb.y - pa.y) == 76 + 6


def test_axes_are_independent():
    s = screen(grids={"wide": (7, 2)})
    a = grid_to_screen(s, "wide", ItemPos(3, 0))
    b = grid_to_screen(s, "wide", ItemPos(3, 1))
    assert a.x == b.x
    assert b.y - a.y == 76


def test_odd_sizes_floor():
    s = ScreenInfo(icon_size=5, icon_margin=1, screen_size=(101, 51), grids={"g": (2, 1)})
    # grid_w = 11 -> origin x = 50 - 5 = 45, icon center 5 // 2 = 2
    # grid_h = 5  -> origin y = 25 - 2 = 23
    assert grid_to_screen(s, "g", ItemPos(0, 0)) == MousePos(47, 25)


def test_positions_outside_grid_extrapolate():
    s = screen(margin_offset=0)
    inside = grid_to_screen(s, "red", ItemPos(4, 0))
    outside = grid_to_screen(s, "red", ItemPos(5, 0))
    assert outside.x - inside.x == 82


def test_unknown_item_class_fails():
    with pytest.raises(ConfigError, match="lunar"):
        grid_to_screen(screen(), "lunar", ItemPos(0, 0))


def test_grids_are_read_only():
    grids = {"red": (5, 5)}
    s = screen(grids=grids)
    grids["green"] = (3, 3)
    assert "green" not in s.grids
    with pytest.raises(TypeError):
        s.grids["green"] = (3, 3)


def test_mouse_pos_subtraction():
    assert MousePos(10, 5) - MousePos(3, 7) == MousePos(7, -2)


def test_selector_uses_preference_or_top_left():
    sel = ItemSelector({"red": (2, 1)})
    assert sel.select_item("red") == ItemPos(2, 1)
    assert sel.select_item("green") == ItemPos(0, 0)
