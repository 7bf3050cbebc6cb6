"""
command_picker/analysis.py - Which item tier is on screen?

The trick: sample a short horizontal span at two mirrored spots (left and
right of screen center) and compare each against every reference color.
When a tier's menu is open, both spots show the same banner color, so the
two distances agree. If they don't agree, the left spot is probably sitting
on an icon edge or some other UI junk, and we throw the candidate out.

This is a heuristic tuned for one fixed, unscaled UI layout. It is not a
general color classifier and it will happily be wrong on a different game.
"""

import math
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, NamedTuple, Optional, Sequence, Tuple, Union

from .color import Color, PixelSource, as_color
from .errors import ConfigError


LogFn = Callable[[str, str], None]


class Reference(NamedTuple):
    color: Color
    label: str


@dataclass(frozen=True)
class AnalysisOptions:
    # Where and how strictly to look. Built once, never mutated.
    left: int
    right: int
    y: int
    span: int = 4
    permitted_deviation: float = 0.05
    max_distance: int = 40000

    def __post_init__(self) -> None:
        if self.span <= 0:
            raise ConfigError(f"span must be a positive pixel count, got {self.span}")


@dataclass
class CandidateScore:
    label: str
    left_dist: int
    right_dist: int
    deviation: float
    accepted: bool
    reason: str = ""


@dataclass
class Detection:
    """Outcome of one classification pass. label is None when nothing matched."""
    label: Optional[str]
    scores: List[CandidateScore] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.label is not None


def build_reference_table(
    entries: Iterable[Union[Reference, Tuple[Union[Color, Sequence[int]], str]]]
) -> Tuple[Reference, ...]:
    """
    Normalize (color, label) pairs into an ordered, immutable table.
    Order is kept because it decides ties. Duplicate labels are rejected.
    """
    table = []
    seen = set()
    for color, label in entries:
        if label in seen:
            raise ConfigError(f"duplicate reference label: {label!r}")
        seen.add(label)
        table.append(Reference(as_color(color), label))
    return tuple(table)


def distance2(sample: Color, reference: Color) -> int:
    # Squared euclidean. No sqrt: thresholds are squared too.
    dr = sample.get_red() - reference.get_red()
    dg = sample.get_green() - reference.get_green()
    db = sample.get_blue() - reference.get_blue()
    return dr * dr + dg * dg + db * db


def average_distance(source: PixelSource, reference: Color, x0: int, y: int, span: int) -> int:
    """
    Average distance2 over `span` pixels starting at (x0, y), going right.
    Integer (floor) average. Font rendering and compression make single
    pixels noisy, a short run smooths that out.
    """
    if span <= 0:
        raise ConfigError(f"span must be a positive pixel count, got {span}")

    total = 0
    for x in range(x0, x0 + span):
        total += distance2(source.get_pixel(x, y), reference)
    return total // span


def relative_deviation(left_dist: int, right_dist: int) -> float:
    """|1 - left/right|. Identical zero spots count as no deviation, x/0 as infinite."""
    if right_dist == 0:
        return 0.0 if left_dist == 0 else math.inf
    return abs(1.0 - left_dist / right_dist)


def detect(
    options: AnalysisOptions,
    table: Iterable[Tuple[Color, str]],
    source: PixelSource,
    log_fn: Optional[LogFn] = None,
) -> Detection:
    log = log_fn or (lambda m, l: None)

    scores: List[CandidateScore] = []
    best: Optional[CandidateScore] = None

    for reference, label in table:
        left_dist = average_distance(source, reference, options.left, options.y, options.span)
        right_dist = average_distance(source, reference, options.right, options.y, options.span)
        deviation = relative_deviation(left_dist, right_dist)

        score = CandidateScore(label, left_dist, right_dist, deviation, accepted=True)

        if deviation > options.permitted_deviation:
            score.accepted = False
            score.reason = f"deviation {deviation:.3f} > {options.permitted_deviation}"
        elif left_dist > options.max_distance:
            score.accepted = False
            score.reason = f"distance {left_dist} > {options.max_distance}"

        scores.append(score)

        if not score.accepted:
            log(
                f"Reject {label}: {score.reason} "
                f"(left@{options.left}={left_dist}, right@{options.right}={right_dist}, y={options.y})",
                "DEBUG",
            )
            continue

        # Strictly smaller only, so the earlier table entry wins ties
        if best is None or left_dist < best.left_dist:
            best = score

    if best is None:
        log("No tier recognized", "DEBUG")
        return Detection(None, scores)

    log(f"Tier {best.label}: distance {best.left_dist}, deviation {best.deviation:.3f}", "DEBUG")
    return Detection(best.label, scores)


def classify(
    options: AnalysisOptions,
    table: Iterable[Tuple[Color, str]],
    source: PixelSource,
    log_fn: Optional[LogFn] = None,
) -> Optional[str]:
    """Label of the best matching reference, or None if nothing survives the checks."""
    return detect(options, table, source, log_fn).label
