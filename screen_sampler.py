# Screen sampler - how far is each tier color from each screenshot?
#
#   python screen_sampler.py screens/white_items.jpg screens/green_items.jpg screens/red_items.jpg
#
# Uses the palette from config.yaml. The defaults below work very well on the
# reference 1080p screenshots.

import argparse
import sys
from pathlib import Path

from rich.console import Console

from command_picker import CommandPickerError
from command_picker.calibration import distance_report, render_report
from command_picker.config import build_palette_table, load_config
from command_picker.vision import load_raster


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Print average color distance per tier per screenshot")
    parser.add_argument("images", nargs="+", help="screenshots to sample")
    parser.add_argument("-x", type=int, default=672, help="span start column")
    parser.add_argument("-y", type=int, default=1080 // 2, help="row to sample")
    parser.add_argument("--span", type=int, default=4, help="pixels per span")
    parser.add_argument("--config", default="config.yaml", help="config with the palette to test")
    args = parser.parse_args(argv)

    console = Console()

    try:
        table = build_palette_table(load_config(args.config))
        sources = {Path(p).stem: load_raster(p) for p in args.images}
        report = distance_report(sources, table, args.x, args.y, args.span)
    except CommandPickerError as e:
        console.print(f"[bold red]error:[/] {e}")
        return 1

    console.print(render_report(report, args.x, args.y, args.span))
    return 0


if __name__ == "__main__":
    sys.exit(main())
