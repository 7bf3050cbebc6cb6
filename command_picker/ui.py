# Dashboard UI

import threading
from collections import deque
from datetime import datetime
from typing import Optional

from rich.align import Align
from rich.console import Console, Group
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .analysis import Detection

VERSION = "v0.3.0"

COLORS = {
    "border": "#334155",
    "muted": "#64748b",
    "text": "#e2e8f0",
    "text_dim": "#94a3b8",
    "heading": "#e9c46a",
    "success": "#10b981",
    "warn": "#f59e0b",
    "error": "#ef4444",
    "info": "#3b82f6",
    "click": "#10b981",
    "debug": "#64748b",
    "idle": "#64748b",
    "active": "#10b981",
    # tier badges
    "white": "#f2f6e8",
    "green": "#76ed22",
    "red": "#d45336",
}

HEADER = "▓▓▓ COMMAND PICKER ▓▓▓"


class Stats:
    # Session counters, touched from the loop and read by the renderer

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._start = datetime.now()
        self.ticks = 0
        self.detections = 0
        self.clicks = 0
        self.errors = 0

    def inc_ticks(self) -> None:
        with self._lock: self.ticks += 1

    def inc_detections(self) -> None:
        with self._lock: self.detections += 1

    def inc_clicks(self) -> None:
        with self._lock: self.clicks += 1

    def inc_errors(self) -> None:
        with self._lock: self.errors += 1

    def get(self) -> dict:
        with self._lock:
            total_sec = max(0, int((datetime.now() - self._start).total_seconds()))
            h, rem = divmod(total_sec, 3600)
            m, s = divmod(rem, 60)
            return {
                "runtime": f"{h:02d}:{m:02d}:{s:02d}",
                "ticks": self.ticks,
                "detections": self.detections,
                "clicks": self.clicks,
                "errors": self.errors,
            }


class LogBuffer:
    def __init__(self, max_lines: int = 50) -> None:
        self._lines = deque(maxlen=max_lines)
        self._lock = threading.Lock()

    def add(self, message: str, level: str = "INFO") -> None:
        timestamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
        with self._lock:
            self._lines.append((timestamp, level, message))

    def get_all(self):
        with self._lock: return list(self._lines)


class Dashboard:
    STATUS_IDLE = "idle"
    STATUS_WATCHING = "watching"
    STATUS_ERROR = "error"

    def __init__(
        self, refresh_ms: int = 100, pause_key: str = "f9", stop_key: str = "f10",
        reload_key: str = "f5", pick_key: str = "f6", auto_key: str = "f7",
        debug: bool = False,
    ) -> None:
        self._live: Optional[Live] = None
        self._refresh_ms = max(10, refresh_ms)
        self._keys = [
            (pause_key.upper(), "Start/Stop"),
            (pick_key.upper(), "Pick"),
            (auto_key.upper(), "Auto"),
            (reload_key.upper(), "Reload"),
            (stop_key.upper(), "Quit"),
        ]
        self._debug = debug
        self._console = Console()
        self._stats = Stats()
        self._log = LogBuffer(max_lines=50)
        self._status = self.STATUS_IDLE
        self._status_detail = ""
        self._auto = False
        self._detection: Optional[Detection] = None
        self._lock = threading.Lock()

    @property
    def stats(self): return self._stats

    def log(self, message: str, level: str = "INFO"):
        if level == "DEBUG" and not self._debug:
            return
        self._log.add(message, level)

    def set_status(self, status: str, detail: str = ""):
        with self._lock:
            self._status = status
            self._status_detail = detail

    def log_entries(self):
        # (timestamp, level, message), oldest first
        return self._log.get_all()

    def set_debug(self, enabled: bool):
        self._debug = enabled

    def set_auto(self, enabled: bool):
        with self._lock: self._auto = enabled

    def set_detection(self, detection: Optional[Detection]):
        with self._lock: self._detection = detection

    def start(self):
        self._live = Live(
            self._render(), console=self._console,
            refresh_per_second=1000 // self._refresh_ms,
            screen=True, transient=False
        )
        self._live.start()

    def update(self):
        if self._live: self._live.update(self._render())

    def stop(self):
        if self._live:
            self._live.stop()
            self._live = None

    def _render(self):
        layout = Layout()
        layout.split(
            Layout(name="header", size=4),
            Layout(name="middle", size=10),
            Layout(name="log", ratio=1, minimum_size=5),
            Layout(name="footer", size=3)
        )
        layout["middle"].split_row(
            Layout(name="stats", ratio=1),
            Layout(name="detection", ratio=2)
        )
        layout["header"].update(self._render_header())
        layout["stats"].update(self._render_stats())
        layout["detection"].update(self._render_detection())
        layout["log"].update(self._render_log())
        layout["footer"].update(self._render_footer())
        return layout

    def _render_header(self):
        if self._status == self.STATUS_WATCHING:
            badge = Text(" ⚡ Watching ", style=f"bold {COLORS['active']}")
        elif self._status == self.STATUS_ERROR:
            badge = Text(" ✖ Error ", style=f"bold {COLORS['error']}")
        else:
            badge = Text(" ● Idle ", style=f"bold {COLORS['idle']}")

        subtitle = Text()
        subtitle.append(f"  {VERSION}  ", style=f"bold {COLORS['text_dim']}")
        subtitle.append("│ Auto-pick: ", style=COLORS['border'])
        subtitle.append("ON" if self._auto else "OFF", style=f"bold {COLORS['success'] if self._auto else COLORS['muted']}")
        subtitle.append("  │  ", style=COLORS['border'])
        subtitle.append_text(badge)
        if self._status_detail:
            subtitle.append(f"  {self._status_detail}", style=COLORS['text_dim'])

        title = Text(HEADER, style=f"bold {COLORS['heading']}")
        return Panel(Group(Align.center(title), Align.center(subtitle)), border_style=COLORS['border'])

    def _render_stats(self):
        data = self._stats.get()
        table = Table.grid(padding=(0, 2), expand=True)
        table.add_column("L", justify="right", style=COLORS['muted'])
        table.add_column("V", justify="left", style=f"bold {COLORS['text']}")
        table.add_row("Runtime", data["runtime"])
        table.add_row("Ticks", str(data["ticks"]))
        table.add_row("Detections", str(data["detections"]))
        table.add_row("Clicks", str(data["clicks"]))
        if data["errors"] > 0:
            table.add_row("Errors", Text(str(data["errors"]), style=f"bold {COLORS['error']}"))
        return Panel(table, title=f"[{COLORS['heading']}]Session[/]", border_style=COLORS['border'])

    def _render_detection(self):
        det = self._detection
        if det is None:
            return Panel(Align.center(Text("No frame yet", style=COLORS['muted'])),
                         title=f"[{COLORS['heading']}]Detection[/]", border_style=COLORS['border'])

        table = Table(expand=True, box=None)
        table.add_column("Tier")
        table.add_column("Left", justify="right")
        table.add_column("Right", justify="right")
        table.add_column("Dev", justify="right")
        table.add_column("", justify="left")
        for s in det.scores:
            mark = Text("✔", style=COLORS['success']) if s.accepted else Text("✖", style=COLORS['muted'])
            name_style = f"bold {COLORS.get(s.label, COLORS['text'])}" if s.label == det.label else COLORS['text_dim']
            table.add_row(Text(s.label, style=name_style), str(s.left_dist), str(s.right_dist),
                          f"{s.deviation:.3f}", mark)

        verdict = det.label.upper() if det.found else "nothing"
        return Panel(table, title=f"[{COLORS['heading']}]Detection: {verdict}[/]",
                     border_style=COLORS.get(det.label, COLORS['border']) if det.found else COLORS['border'])

    def _render_log(self):
        lines = self.log_entries()
        avail = max(3, self._console.size.height - 20)
        visible = lines[-avail:] if lines else []

        if not visible:
            return Panel(Align.center(Text("Waiting...", style=COLORS['muted'])),
                         title=f"[{COLORS['heading']}]Log[/]", border_style=COLORS['border'])

        text = Text()
        for ts, lvl, msg in visible:
            text.append(f" {ts} ", style=COLORS['text_dim'])
            c = COLORS.get(lvl.lower(), COLORS['info'])
            text.append(f"[{lvl:^7}]", style=f"bold {c}")
            text.append(f" {msg}\n", style=COLORS['text'])

        return Panel(Align(text, vertical="bottom"), title=f"[{COLORS['heading']}]Event Log[/]", border_style=COLORS['border'])

    def _render_footer(self):
        f = Text()
        for key, label in self._keys:
            f.append(f"  {key} {label}", style=COLORS['muted'])
        return Panel(Align.center(f), border_style=COLORS['border'])


def make_logger(dash: Dashboard):
    def log(msg: str, level: str = "INFO"):
        dash.log(msg, level)
        dash.update()
    return log
