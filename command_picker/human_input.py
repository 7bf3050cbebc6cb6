# Mouse output: the InputSink the bot clicks through

import math
import random
import time
from typing import Callable, List, Optional, Tuple

import pyautogui

from .layout import MousePos

# Slam the mouse into a screen corner to abort
pyautogui.FAILSAFE = True


def pascal_row(n: int) -> List[int]:
    # Binomial coefficients for the bezier weights
    row = [1]
    for i in range(1, n + 1):
        row.append(row[-1] * (n - i + 1) // i)
    return row


def make_bezier(control_points: List[MousePos]) -> Callable[[float], Tuple[float, float]]:
    n = len(control_points) - 1
    weights = pascal_row(n)

    def curve(t: float) -> Tuple[float, float]:
        x = y = 0.0
        for i, (px, py) in enumerate(control_points):
            b = weights[i] * (t ** i) * ((1 - t) ** (n - i))
            x += px * b
            y += py * b
        return x, y

    return curve


class HumanMouse:
    # Moves along a gently bent curve instead of teleporting. The game
    # ignores clicks that land before the menu notices the cursor.

    def __init__(
        self,
        resolution: int = 40,
        speed: float = 1.0,
        jitter_amp: float = 0.0,
        hesitate_range: Tuple[int, int] = (40, 120),
        log_fn: Optional[Callable[[str, str], None]] = None,
    ) -> None:
        self.res = max(1, resolution)
        self.speed = speed
        self.jitter_amp = jitter_amp
        self.hesitate_rng = hesitate_range
        self._log = log_fn or (lambda m, l: None)

    def position(self) -> MousePos:
        x, y = pyautogui.position()
        return MousePos(int(x), int(y))

    def mouse_to(self, pos: MousePos) -> None:
        start = self.position()
        dist = math.hypot(pos.x - start.x, pos.y - start.y)
        if dist < 1:
            return

        # One control point off to the side, scaled by distance
        bend = min(dist * 0.25, 200.0)
        mid = MousePos(
            int((start.x + pos.x) / 2 + random.uniform(-bend, bend)),
            int((start.y + pos.y) / 2 + random.uniform(-bend, bend)),
        )
        curve = make_bezier([start, mid, pos])

        duration = max(0.08, dist * random.uniform(0.0003, 0.0005) / self.speed)
        start_time = time.time()

        for i in range(1, self.res + 1):
            t = i / self.res
            # easeInOutQuad
            t = 2 * t * t if t < 0.5 else -1 + (4 - 2 * t) * t
            x, y = curve(t)

            if self.jitter_amp > 0 and i < self.res:
                x += random.uniform(-self.jitter_amp, self.jitter_amp)
                y += random.uniform(-self.jitter_amp, self.jitter_amp)

            pyautogui.moveTo(x, y, _pause=False)

            target = duration * i / self.res
            elapsed = time.time() - start_time
            if elapsed < target:
                time.sleep(target - elapsed)

        # Land exactly on target regardless of easing/jitter rounding
        pyautogui.moveTo(pos.x, pos.y, _pause=False)

    def mouse_relative(self, delta: MousePos) -> None:
        pyautogui.moveRel(delta.x, delta.y, _pause=False)

    def click_on(self, pos: MousePos) -> MousePos:
        self.mouse_to(pos)

        ms = random.randint(*self.hesitate_rng)
        time.sleep(ms / 1000.0)

        pyautogui.mouseDown()
        time.sleep(random.uniform(0.04, 0.09))
        pyautogui.mouseUp()

        landed = self.position()
        self._log(f"Click @ {landed.x},{landed.y}", "CLICK")
        return landed
