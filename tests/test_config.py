import pytest

from command_picker.analysis import classify
from command_picker.color import Rgb
from command_picker.config import (
    AppConfig, build_analysis_options, build_palette_table, build_screen_info,
    build_selector, load_config, unknown_picks,
)
from command_picker.errors import ConfigError
from command_picker.layout import ItemPos, MousePos, grid_to_screen

from helpers import GREEN, solid_raster


def write(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_missing_file_means_defaults(tmp_path):
    cfg = load_config(str(tmp_path / "nope.yaml"))
    assert cfg == AppConfig()
    assert list(cfg.palette) == ["white", "green", "red"]


def test_partial_config_keeps_defaults(tmp_path):
    cfg = load_config(write(tmp_path, "analysis:\n  span: 8\n"))
    assert cfg.analysis.span == 8
    assert cfg.analysis.left == 672
    assert cfg.grid.icon_size == 76
    assert cfg.grid.classes["red"] == (5, 5)


def test_empty_file_means_defaults(tmp_path):
    assert load_config(write(tmp_path, "")) == AppConfig()


def test_palette_and_grid_from_yaml(tmp_path):
    cfg = load_config(write(tmp_path, """
palette:
  lunar: [80, 150, 230]
  red: [212, 83, 54]
grid:
  icon_size: 64
  classes:
    lunar: [4, 3]
picks:
  lunar: [1, 2]
"""))
    assert cfg.palette == {"lunar": (80, 150, 230), "red": (212, 83, 54)}
    assert cfg.grid.classes == {"lunar": (4, 3)}
    assert cfg.grid.icon_margin == 6
    assert cfg.picks == {"lunar": (1, 2)}
    assert unknown_picks(cfg) == []


def test_malformed_yaml_is_an_error(tmp_path):
    with pytest.raises(ConfigError):
        load_config(write(tmp_path, "palette: [unclosed\n"))


def test_non_mapping_yaml_is_an_error(tmp_path):
    with pytest.raises(ConfigError):
        load_config(write(tmp_path, "- just\n- a list\n"))


@pytest.mark.parametrize("text", [
    "palette:\n  red: [1, 2]\n",
    "palette:\n  red: banana\n",
    "palette: [1, 2, 3]\n",
    "grid:\n  classes:\n    red: [5]\n",
    "picks:\n  red: [a, b]\n",
])
def test_bad_entries_are_errors(tmp_path, text):
    with pytest.raises(ConfigError):
        load_config(write(tmp_path, text))


def test_out_of_range_channel_fails_when_building_table(tmp_path):
    cfg = load_config(write(tmp_path, "palette:\n  red: [300, 0, 0]\n"))
    with pytest.raises(ConfigError):
        build_palette_table(cfg)


def test_build_analysis_options():
    opts = build_analysis_options(AppConfig())
    assert (opts.left, opts.right, opts.y, opts.span) == (672, 1248, 540, 4)
    assert opts.permitted_deviation == 0.05
    assert opts.max_distance == 40000


def test_zero_span_rejected_at_build(tmp_path):
    cfg = load_config(write(tmp_path, "analysis:\n  span: 0\n"))
    with pytest.raises(ConfigError):
        build_analysis_options(cfg)


def test_palette_table_keeps_order_and_types():
    table = build_palette_table(AppConfig())
    assert [label for _, label in table] == ["white", "green", "red"]
    assert table[1].color == Rgb(*GREEN)


def test_default_config_classifies_full_screen_frame():
    cfg = AppConfig()
    src = solid_raster(GREEN, width=1920, height=541)
    assert classify(build_analysis_options(cfg), build_palette_table(cfg), src) == "green"


def test_build_screen_info_and_selector():
    cfg = AppConfig(picks={"red": (4, 4), "lunar": (0, 0)})
    info = build_screen_info(cfg)
    assert info.screen_size == (1920, 1080)
    assert info.margin_offset == 1
    pos = build_selector(cfg).select_item("red")
    assert pos == ItemPos(4, 4)
    assert grid_to_screen(info, "red", pos) == MousePos(1118, 698)
    assert unknown_picks(cfg) == ["lunar"]


@pytest.mark.parametrize("text, builder", [
    ("grid:\n  icon_size: big\n", build_screen_info),
    ("grid:\n  icon_margin: 6.5\n", build_screen_info),
    ("display:\n  screen_width: wide\n", build_screen_info),
    ("analysis:\n  span: four\n", build_analysis_options),
    ("analysis:\n  span: 4.7\n", build_analysis_options),
    ("analysis:\n  left: true\n", build_analysis_options),
    ("analysis:\n  permitted_deviation: lots\n", build_analysis_options),
])
def test_non_numeric_values_are_config_errors(tmp_path, text, builder):
    cfg = load_config(write(tmp_path, text))
    with pytest.raises(ConfigError):
        builder(cfg)


def test_whole_floats_are_accepted(tmp_path):
    cfg = load_config(write(tmp_path, "analysis:\n  span: 4.0\n  max_distance: 1000\n"))
    opts = build_analysis_options(cfg)
    assert opts.span == 4 and isinstance(opts.span, int)
    assert opts.max_distance == 1000


def test_fractional_palette_channel_is_an_error(tmp_path):
    with pytest.raises(ConfigError):
        load_config(write(tmp_path, "palette:\n  red: [212.5, 83, 54]\n"))
