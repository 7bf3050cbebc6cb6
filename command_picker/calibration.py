"""
command_picker/calibration.py - Pick sample spots and thresholds by looking at numbers.

Take a screenshot of every tier's menu, point this at one x/y, and see how
far each reference color is from each screenshot. A good spot has one tiny
distance per row (the matching tier) and large ones everywhere else.
"""

from typing import Dict, Iterable, Mapping, Tuple

from rich.table import Table

from .analysis import average_distance
from .color import Color, PixelSource


def distance_report(
    sources: Mapping[str, PixelSource],
    table: Iterable[Tuple[Color, str]],
    x: int,
    y: int,
    span: int,
) -> Dict[str, Dict[str, int]]:
    """{reference label: {image name: average distance}}, in table order."""
    report: Dict[str, Dict[str, int]] = {}
    for reference, label in table:
        report[label] = {
            name: average_distance(source, reference, x, y, span)
            for name, source in sources.items()
        }
    return report


def best_matches(report: Mapping[str, Mapping[str, int]]) -> Dict[str, str]:
    # image name -> reference label with the smallest distance (first wins ties)
    best: Dict[str, Tuple[int, str]] = {}
    for label, row in report.items():
        for image, dist in row.items():
            if image not in best or dist < best[image][0]:
                best[image] = (dist, label)
    return {image: label for image, (_, label) in best.items()}


def render_report(report: Mapping[str, Mapping[str, int]], x: int, y: int, span: int) -> Table:
    images = list(next(iter(report.values()), {}).keys())
    winners = best_matches(report)

    table = Table(title=f"Average distance @ x={x} y={y} span={span}")
    table.add_column("Reference", style="bold")
    for image in images:
        table.add_column(image, justify="right")

    for label, row in report.items():
        cells = []
        for image in images:
            text = str(row[image])
            cells.append(f"[bold green]{text}[/]" if winners.get(image) == label else text)
        table.add_row(label, *cells)

    return table
