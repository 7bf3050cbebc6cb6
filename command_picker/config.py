"""
command_picker/config.py - The Knobs and Dials

Everything in here was measured on a 1920x1080 screen with the game's UI
scale at 100%. Change the resolution or the UI scale and the sample spots
and grid geometry are wrong. Re-run screen_sampler.py before you blame the bot.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Tuple

import yaml

from .analysis import AnalysisOptions, Reference, build_reference_table
from .errors import ConfigError
from .layout import ItemPos, ItemSelector, ScreenInfo


# ═══════════════════════════════════════════════════════════════════════════════
# DISPLAY
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass
class DisplayConfig:
    # Monitor selection: 0=all, 1=primary, 2+=specific
    monitor: int = 1
    # The resolution every coordinate below was measured at.
    screen_width: int = 1920
    screen_height: int = 1080


# ═══════════════════════════════════════════════════════════════════════════════
# ANALYSIS - Where to look and how picky to be
# ═══════════════════════════════════════════════════════════════════════════════
#
# Two spans on the same row, mirrored around screen center. When a menu is
# open both land on the banner and agree with each other.
#

@dataclass
class AnalysisConfig:
    left: int = 672
    right: int = 1248
    y: int = 540
    # Pixels averaged per spot. 4 is plenty.
    span: int = 4
    # How much left and right may disagree, as a fraction. 0.05 = 5%.
    permitted_deviation: float = 0.05
    # Squared distance ceiling. Anything further is "not this color".
    max_distance: int = 40000


# ═══════════════════════════════════════════════════════════════════════════════
# PALETTE - Banner colors per tier
# ═══════════════════════════════════════════════════════════════════════════════
#
# Order matters only for ties (earlier wins).
#

def _default_palette() -> Dict[str, Tuple[int, int, int]]:
    return {
        "white": (242, 246, 232),
        "green": (118, 237, 34),
        "red": (212, 83, 54),
    }


# ═══════════════════════════════════════════════════════════════════════════════
# GRID - Icon layout per tier
# ═══════════════════════════════════════════════════════════════════════════════

def _default_grids() -> Dict[str, Tuple[int, int]]:
    return {
        "white": (5, 5),
        "green": (5, 5),
        "red": (5, 5),
    }


@dataclass
class GridConfig:
    icon_size: int = 76
    icon_margin: int = 6
    # Leading cells without a margin. 1 is what the real menu measured as.
    margin_offset: int = 1
    classes: Dict[str, Tuple[int, int]] = field(default_factory=_default_grids)


# ═══════════════════════════════════════════════════════════════════════════════
# MOUSE / TIMING
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass
class MouseConfig:
    curve_resolution: int = 40
    # 1.0 = normal. Higher = twitchier.
    speed_factor: float = 1.0
    jitter_amplitude: float = 0.0
    hesitation_min_ms: int = 40
    hesitation_max_ms: int = 120


@dataclass
class TimingConfig:
    # How often to look at the screen.
    poll_seconds: float = 0.25
    # After a click, give the menu time to close before looking again.
    click_cooldown_seconds: float = 1.0


# ═══════════════════════════════════════════════════════════════════════════════
# HOTKEYS
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass
class HotkeysConfig:
    pause_bot: str = "f9"
    stop_bot: str = "f10"
    reload_bot: str = "f5"
    # Click the preferred item in whatever menu is open right now.
    pick_item: str = "f6"
    # Toggle clicking automatically as soon as a menu shows up.
    toggle_auto: str = "f7"


@dataclass
class VisualConfig:
    # Logs every rejected candidate with its distances
    debug_mode: bool = False


@dataclass
class UIConfig:
    refresh_rate_ms: int = 100


# ═══════════════════════════════════════════════════════════════════════════════
# MASTER CONFIG
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass
class AppConfig:
    """
    Everything bundled together. Use load_config() rather than building
    this by hand, then the build_* helpers to get the immutable pieces the
    analysis and layout code want.
    """
    display: DisplayConfig = field(default_factory=DisplayConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    palette: Dict[str, Tuple[int, int, int]] = field(default_factory=_default_palette)
    grid: GridConfig = field(default_factory=GridConfig)
    picks: Dict[str, Tuple[int, int]] = field(default_factory=dict)
    mouse: MouseConfig = field(default_factory=MouseConfig)
    timing: TimingConfig = field(default_factory=TimingConfig)
    hotkeys: HotkeysConfig = field(default_factory=HotkeysConfig)
    visual: VisualConfig = field(default_factory=VisualConfig)
    ui: UIConfig = field(default_factory=UIConfig)


# ═══════════════════════════════════════════════════════════════════════════════
# CONFIG LOADER
# ═══════════════════════════════════════════════════════════════════════════════

def _get(data: dict, *keys, default=None):
    """Drill into nested dicts without KeyError explosions."""
    for key in keys:
        if not isinstance(data, dict):
            return default
        data = data.get(key)
        if data is None:
            return default
    return data


def _whole(where: str, value) -> int:
    # 4.0 is fine, 4.7 or "four" is a typo we refuse to guess about
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{where} must be an integer, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ConfigError(f"{where} must be an integer, got {value!r}")
    return int(value)


def _number(where: str, value) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{where} must be a number, got {value!r}")
    return float(value)


def _pairs(section: str, raw, length: int) -> Dict[str, Tuple[int, ...]]:
    # label -> fixed-length int tuple, e.g. palette colors or grid sizes
    if not isinstance(raw, dict):
        raise ConfigError(f"'{section}' must be a mapping of name -> list")
    out = {}
    for name, value in raw.items():
        if not isinstance(value, (list, tuple)) or len(value) != length:
            raise ConfigError(f"{section}.{name} must be a list of {length} integers, got {value!r}")
        out[str(name)] = tuple(_whole(f"{section}.{name}", v) for v in value)
    return out


def load_config(path: str = "config.yaml") -> AppConfig:
    """
    Load config from YAML. Missing file = all defaults. Missing keys = defaults.
    Broken YAML or garbage in palette/grid/picks raises ConfigError, because
    silently defaulting those means clicking the wrong thing.
    """
    config_path = Path(path)

    if not config_path.exists():
        return AppConfig()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"malformed YAML in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a mapping at the top level")

    defaults = AppConfig()

    display = DisplayConfig(
        monitor=_get(data, "display", "monitor", default=1),
        screen_width=_get(data, "display", "screen_width", default=1920),
        screen_height=_get(data, "display", "screen_height", default=1080),
    )

    analysis = AnalysisConfig(
        left=_get(data, "analysis", "left", default=672),
        right=_get(data, "analysis", "right", default=1248),
        y=_get(data, "analysis", "y", default=540),
        span=_get(data, "analysis", "span", default=4),
        permitted_deviation=_get(data, "analysis", "permitted_deviation", default=0.05),
        max_distance=_get(data, "analysis", "max_distance", default=40000),
    )

    palette = defaults.palette
    if "palette" in data:
        palette = _pairs("palette", data["palette"], 3)

    classes = defaults.grid.classes
    if _get(data, "grid", "classes") is not None:
        classes = _pairs("grid.classes", data["grid"]["classes"], 2)

    grid = GridConfig(
        icon_size=_get(data, "grid", "icon_size", default=76),
        icon_margin=_get(data, "grid", "icon_margin", default=6),
        margin_offset=_get(data, "grid", "margin_offset", default=1),
        classes=classes,
    )

    picks = {}
    if data.get("picks") is not None:
        picks = _pairs("picks", data["picks"], 2)

    mouse = MouseConfig(
        curve_resolution=_get(data, "mouse", "curve_resolution", default=40),
        speed_factor=_get(data, "mouse", "speed_factor", default=1.0),
        jitter_amplitude=_get(data, "mouse", "jitter_amplitude", default=0.0),
        hesitation_min_ms=_get(data, "mouse", "hesitation_min_ms", default=40),
        hesitation_max_ms=_get(data, "mouse", "hesitation_max_ms", default=120),
    )

    timing = TimingConfig(
        poll_seconds=_get(data, "timing", "poll_seconds", default=0.25),
        click_cooldown_seconds=_get(data, "timing", "click_cooldown_seconds", default=1.0),
    )

    hotkeys = HotkeysConfig(
        pause_bot=_get(data, "hotkeys", "pause_bot", default="f9"),
        stop_bot=_get(data, "hotkeys", "stop_bot", default="f10"),
        reload_bot=_get(data, "hotkeys", "reload_bot", default="f5"),
        pick_item=_get(data, "hotkeys", "pick_item", default="f6"),
        toggle_auto=_get(data, "hotkeys", "toggle_auto", default="f7"),
    )

    return AppConfig(
        display=display,
        analysis=analysis,
        palette=palette,
        grid=grid,
        picks=picks,
        mouse=mouse,
        timing=timing,
        hotkeys=hotkeys,
        visual=VisualConfig(
            debug_mode=_get(data, "visual", "debug_mode", default=False)
        ),
        ui=UIConfig(
            refresh_rate_ms=_get(data, "ui", "refresh_rate_ms", default=100)
        ),
    )


# ═══════════════════════════════════════════════════════════════════════════════
# BUILDERS - config -> the frozen stuff the core runs on
# ═══════════════════════════════════════════════════════════════════════════════

def build_analysis_options(cfg: AppConfig) -> AnalysisOptions:
    a = cfg.analysis
    return AnalysisOptions(
        left=_whole("analysis.left", a.left),
        right=_whole("analysis.right", a.right),
        y=_whole("analysis.y", a.y),
        span=_whole("analysis.span", a.span),
        permitted_deviation=_number("analysis.permitted_deviation", a.permitted_deviation),
        max_distance=_whole("analysis.max_distance", a.max_distance),
    )


def build_palette_table(cfg: AppConfig) -> Tuple[Reference, ...]:
    return build_reference_table((color, label) for label, color in cfg.palette.items())


def build_screen_info(cfg: AppConfig) -> ScreenInfo:
    g = cfg.grid
    return ScreenInfo(
        icon_size=_whole("grid.icon_size", g.icon_size),
        icon_margin=_whole("grid.icon_margin", g.icon_margin),
        screen_size=(
            _whole("display.screen_width", cfg.display.screen_width),
            _whole("display.screen_height", cfg.display.screen_height),
        ),
        grids=dict(g.classes),
        margin_offset=_whole("grid.margin_offset", g.margin_offset),
    )


def build_selector(cfg: AppConfig) -> ItemSelector:
    return ItemSelector({label: ItemPos(*pos) for label, pos in cfg.picks.items()})


def unknown_picks(cfg: AppConfig) -> List[str]:
    # Picks for tiers that have no grid can never be clicked
    return [label for label in cfg.picks if label not in cfg.grid.classes]
