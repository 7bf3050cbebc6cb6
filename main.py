# Command Picker - clicks your favourite item in the Command artifact menu
# Because scrolling for Soldier's Syringe for the 40th time gets old

import sys
import time
import traceback
from pathlib import Path
from typing import Optional, Tuple

import keyboard

from command_picker import CaptureError, ConfigError, Detection, detect, grid_to_screen
from command_picker.config import (
    AppConfig, load_config, build_analysis_options, build_palette_table,
    build_screen_info, build_selector, unknown_picks,
)
from command_picker.analysis import AnalysisOptions, Reference
from command_picker.human_input import HumanMouse
from command_picker.layout import ItemSelector, ScreenInfo
from command_picker.ui import Dashboard, make_logger
from command_picker.vision import ScreenCapture, check_resolution

# Configuration

DEFAULT_CONFIG = """
# Command Picker Configuration
# Measured at 1920x1080, UI scale 100%. Re-measure with screen_sampler.py if yours differs.

display:
  monitor: 1  # 0=all, 1=primary, 2+=specific
  screen_width: 1920
  screen_height: 1080

analysis:
  left: 672
  right: 1248
  y: 540
  span: 4
  permitted_deviation: 0.05
  max_distance: 40000

palette:
  white: [242, 246, 232]
  green: [118, 237, 34]
  red: [212, 83, 54]

grid:
  icon_size: 76
  icon_margin: 6
  margin_offset: 1
  classes:
    white: [5, 5]
    green: [5, 5]
    red: [5, 5]

# Preferred cell per tier as [column, row], zero-based. Unlisted tiers get [0, 0].
picks:
  white: [0, 0]
  green: [0, 0]
  red: [0, 0]

mouse:
  curve_resolution: 40
  speed_factor: 1.0
  jitter_amplitude: 0.0
  hesitation_min_ms: 40
  hesitation_max_ms: 120

timing:
  poll_seconds: 0.25
  click_cooldown_seconds: 1.0

hotkeys:
  pause_bot: "f9"
  stop_bot: "f10"
  reload_bot: "f5"
  pick_item: "f6"
  toggle_auto: "f7"

visual:
  debug_mode: false

ui:
  refresh_rate_ms: 100
"""


class CommandBot:
    # Main loop - watch the screen, recognise the open menu, click the pick

    def __init__(self):
        # State Flags
        self.running: bool = True
        self.paused: bool = True
        self.auto_pick: bool = False
        self.reload_requested: bool = False
        self.pick_requested: bool = False

        # Runtime State
        self.last_label: Optional[str] = None

        # Components (set up in bootstrap)
        self.cfg: Optional[AppConfig] = None
        self.dash: Optional[Dashboard] = None
        self.log = lambda m, l: None
        self.screen: Optional[ScreenCapture] = None
        self.mouse: Optional[HumanMouse] = None
        self.options: Optional[AnalysisOptions] = None
        self.palette: Tuple[Reference, ...] = ()
        self.screen_info: Optional[ScreenInfo] = None
        self.selector: Optional[ItemSelector] = None

    def bootstrap(self):
        # 1. Config First
        if not Path("config.yaml").exists():
            with open("config.yaml", "w", encoding="utf-8") as f:
                f.write(DEFAULT_CONFIG.strip() + "\n")

        try:
            self.cfg = load_config()
        except ConfigError as e:
            print(f"CRITICAL: Config failed to load: {e}")
            sys.exit(1)

        # 2. UI
        self._init_ui()

        try:
            self._reload_systems(initial=True)
        except ConfigError as e:
            self.dash.stop()
            print(f"CRITICAL: Bad config: {e}")
            sys.exit(1)

        # 3. Capture + sanity check
        self.screen = ScreenCapture(monitor_index=self.cfg.display.monitor)
        width, height = self.screen.monitor_size()
        expected = (self.cfg.display.screen_width, self.cfg.display.screen_height)
        if not check_resolution(width, height, expected):
            self.log(f"Monitor is {width}x{height} but config expects {expected[0]}x{expected[1]}. "
                     f"Detection will be garbage.", "WARN")

        # 4. Hotkeys
        self._bind_hotkeys()

        self.log(f"Tiers: {', '.join(label for _, label in self.palette)}", "INFO")
        self.log(f"READY. Press {self.cfg.hotkeys.pause_bot.upper()} to START.", "WARN")

    def _bind_hotkeys(self):
        # Callbacks run on keyboard's thread, so they only flip flags
        keyboard.add_hotkey(self.cfg.hotkeys.pause_bot, self._toggle_pause)
        keyboard.add_hotkey(self.cfg.hotkeys.stop_bot, self._stop)
        keyboard.add_hotkey(self.cfg.hotkeys.reload_bot, self._request_reload)
        keyboard.add_hotkey(self.cfg.hotkeys.pick_item, self._request_pick)
        keyboard.add_hotkey(self.cfg.hotkeys.toggle_auto, self._toggle_auto)

    def _toggle_pause(self):
        self.paused = not self.paused

    def _stop(self):
        self.running = False

    def _request_reload(self):
        self.reload_requested = True

    def _request_pick(self):
        self.pick_requested = True

    def _toggle_auto(self):
        self.auto_pick = not self.auto_pick

    def _init_ui(self):
        self.dash = Dashboard(
            refresh_ms=self.cfg.ui.refresh_rate_ms,
            pause_key=self.cfg.hotkeys.pause_bot,
            stop_key=self.cfg.hotkeys.stop_bot,
            reload_key=self.cfg.hotkeys.reload_bot,
            pick_key=self.cfg.hotkeys.pick_item,
            auto_key=self.cfg.hotkeys.toggle_auto,
            debug=self.cfg.visual.debug_mode,
        )
        self.log = make_logger(self.dash)
        self.dash.start()

    def _reload_systems(self, initial: bool = False):
        # Rebuild everything derived from config. Raises ConfigError.
        options = build_analysis_options(self.cfg)
        palette = build_palette_table(self.cfg)
        screen_info = build_screen_info(self.cfg)
        selector = build_selector(self.cfg)

        self.options, self.palette = options, palette
        self.screen_info, self.selector = screen_info, selector

        self.mouse = HumanMouse(
            resolution=self.cfg.mouse.curve_resolution,
            speed=self.cfg.mouse.speed_factor,
            jitter_amp=self.cfg.mouse.jitter_amplitude,
            hesitate_range=(self.cfg.mouse.hesitation_min_ms, self.cfg.mouse.hesitation_max_ms),
            log_fn=lambda m, l: self.log(m, l),
        )

        for label in unknown_picks(self.cfg):
            self.log(f"Pick for '{label}' ignored: no grid configured for it", "WARN")

        if not initial:
            self.log("Config reloaded.", "SUCCESS")

    def handle_reload(self):
        self.reload_requested = False
        old_cfg = self.cfg
        try:
            self.cfg = load_config()
            self._reload_systems()
            self.dash.set_debug(self.cfg.visual.debug_mode)
        except ConfigError as e:
            self.cfg = old_cfg
            self.log(f"Reload failed, keeping old config: {e}", "ERROR")

    def smart_sleep(self, duration: float):
        # Responsive sleep - keeps UI alive and checks hotkeys
        end_time = time.time() + duration
        while time.time() < end_time:
            if self.reload_requested: self.handle_reload()
            if not self.running or self.paused or self.pick_requested: break
            if self.dash: self.dash.update()
            time.sleep(0.05)

    def run(self):
        last_pause_state = True

        try:
            # Inside the try so a failed start still tears the live screen down
            self.bootstrap()
            while self.running:
                if self.reload_requested: self.handle_reload()
                self.dash.set_auto(self.auto_pick)

                if self.paused:
                    if not last_pause_state:
                        self.dash.set_status(Dashboard.STATUS_IDLE, "Paused")
                        self.log("PAUSED via Hotkey", "WARN")
                        last_pause_state = True
                    self.pick_requested = False
                    self.dash.update()
                    time.sleep(0.1)
                    continue

                if last_pause_state:
                    self.log("RESUMED", "SUCCESS")
                    last_pause_state = False

                self._tick()
                self.smart_sleep(self.cfg.timing.poll_seconds)

        except KeyboardInterrupt:
            pass
        except Exception as e:
            self.log(f"CRITICAL ERROR: {e}", "ERROR")
            traceback.print_exc()
            time.sleep(3.0)
        finally:
            self.shutdown()

    def _tick(self):
        # One capture-classify-maybe-click cycle
        self.dash.stats.inc_ticks()
        self.dash.set_status(Dashboard.STATUS_WATCHING)

        try:
            frame = self.screen.capture()
        except CaptureError as e:
            self.dash.stats.inc_errors()
            self.dash.set_status(Dashboard.STATUS_ERROR, "capture failed")
            self.log(str(e), "ERROR")
            return

        detection = detect(self.options, self.palette, frame, log_fn=self.log)
        self.dash.set_detection(detection)

        label = detection.label
        is_new = label is not None and label != self.last_label
        self.last_label = label

        if is_new:
            self.dash.stats.inc_detections()
            self.log(f"Menu open: {label}", "SUCCESS")

        pick_now = self.pick_requested
        self.pick_requested = False

        if label is None:
            if pick_now:
                self.log("Pick requested but no menu recognized", "WARN")
            return

        if pick_now or (self.auto_pick and is_new):
            self._pick(detection)

    def _pick(self, detection: Detection):
        label = detection.label
        pos = self.selector.select_item(label)
        try:
            target = grid_to_screen(self.screen_info, label, pos)
        except ConfigError as e:
            self.log(str(e), "ERROR")
            return

        self.log(f"Picking {label} item at cell {pos.col},{pos.row} -> {target.x},{target.y}", "INFO")
        self.mouse.click_on(target)
        self.dash.stats.inc_clicks()
        self.smart_sleep(self.cfg.timing.click_cooldown_seconds)

    def shutdown(self):
        try:
            keyboard.unhook_all()
        except Exception:
            pass
        if self.screen:
            self.screen.close()
        if self.dash:
            self.dash.stop()
        print("\nExiting Command Picker...")


if __name__ == "__main__":
    bot = CommandBot()
    bot.run()
