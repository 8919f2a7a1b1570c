"""
sensorgen: entry point.

Usage:
    python -m sensorgen generate layouts/demo_device.json
    python -m sensorgen generate layout.json --svg out/device.svg --png out/device.png
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from sensorgen.canvas import ImageCanvas, RecordingCanvas
from sensorgen.config import DEVICE_RULES, ConfigError, RenderOptions, load_rules
from sensorgen.generate import run_generation
from sensorgen.layout import LayoutError, load_layout
from sensorgen.reporting import summary_lines, write_report

log = logging.getLogger("sensorgen")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="sensorgen", description="Device trace geometry and physical properties")
    sub = p.add_subparsers(dest="cmd", required=True)

    g = sub.add_parser("generate", help="Run one generation for a layout JSON file")
    g.add_argument("layout", type=Path, help="Device specification (JSON)")
    g.add_argument("--rules", type=Path, default=None, help="Rules JSON overriding the defaults")
    g.add_argument("--svg", type=Path, default=None, help="Write the SVG document here")
    g.add_argument("--png", type=Path, default=None, help="Write a raster preview here")
    g.add_argument("--scale", type=float, default=0.1, help="PNG pixels per micrometre")
    g.add_argument("--report-dir", type=Path, default=None, help="Write report.md into this directory")
    g.add_argument("--no-end-caps", action="store_true", help="Draw straight traces without end caps")
    g.add_argument("--no-labels", action="store_true", help="Do not draw pin labels")
    g.add_argument("--highlight-detector", action="store_true", help="Shade the detector bounding box")
    g.add_argument("-v", "--verbose", action="store_true")
    return p


def _generate(args: argparse.Namespace) -> int:
    try:
        rules = load_rules(args.rules) if args.rules else DEVICE_RULES
        spec = load_layout(args.layout)
    except (ConfigError, LayoutError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    options = RenderOptions(
        end_caps=not args.no_end_caps,
        labels=not args.no_labels,
        highlight_detector=args.highlight_detector,
    )
    canvas = ImageCanvas(rules, px_per_um=args.scale) if args.png else RecordingCanvas()

    try:
        result = run_generation(spec, rules, canvas=canvas, options=options)
    except LayoutError as e:
        for msg in e.errors:
            print(f"error: {msg}", file=sys.stderr)
        return 2

    if args.svg:
        args.svg.parent.mkdir(parents=True, exist_ok=True)
        args.svg.write_text(result.svg, encoding="utf-8")
        log.info("Wrote %s", args.svg)
    if args.png:
        canvas.save(args.png)
        log.info("Wrote %s", args.png)
    if args.report_dir:
        log.info("Wrote %s", write_report(args.report_dir, result))

    for line in summary_lines(result):
        print(line)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )
    if args.cmd == "generate":
        return _generate(args)
    return 1


if __name__ == "__main__":
    sys.exit(main())
