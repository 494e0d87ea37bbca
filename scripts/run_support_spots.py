#!/usr/bin/env python3
"""
Support spot search from the command line.

Reads a toolpath dump, runs the full search and prints the support points.

Usage:
    python scripts/run_support_spots.py toolpaths.json --set BRIDGE_DISTANCE=10 --export
"""

import argparse
import logging
import sys

from supportspots import Params, SupportSpotsGenerator, parse_file
from supportspots.generator import export_support_points


def parse_overrides(items):
    """KEY=VALUE pairs into a flat dict."""
    overrides = {}
    for item in items or []:
        if "=" not in item:
            raise ValueError(f"Expected KEY=VALUE, got {item!r}")
        key, value = item.split("=", 1)
        overrides[key.strip()] = value.strip()
    return overrides


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Find support spots in sliced toolpaths.")
    parser.add_argument("file", help="Toolpath dump (.json)")
    parser.add_argument("--set", dest="overrides", action="append", metavar="KEY=VALUE",
                        help="Override one analysis parameter, repeatable")
    parser.add_argument("--export", action="store_true", help="Write OBJ debug point clouds to the workspace")
    parser.add_argument("--show", action="store_true", help="Render toolpaths and support points with PyVista")
    parser.add_argument("--frame", action="store_true", help="Print the islands graph table")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s %(name)s %(levelname)s: %(message)s")
    logger = logging.getLogger("SupportSpots.cli")

    try:
        params = Params.from_dict(parse_overrides(args.overrides))
        print_object = parse_file(args.file)
    except (ValueError, FileNotFoundError) as e:
        logger.error(str(e))
        return 2

    generator = SupportSpotsGenerator(print_object, params, debug_export=args.export)
    issues = generator.full_search()

    for sp in issues.support_points:
        x, y, z = sp.position
        print(f"{x:10.3f} {y:10.3f} {z:8.3f}  force={sp.force:.3f}")
    logger.info(f"{len(issues)} support points")

    if args.frame:
        print(generator.islands_graph_frame().to_string(index=False))
    if args.export:
        export_support_points(issues.support_points, "all_issues")
    if args.show:
        from supportspots.visualizer import IVisualizer
        visualizer = IVisualizer.create()
        print_object.show(visualizer)
        visualizer.addSupportPoints(issues.support_points)
        visualizer.show()
    return 0


if __name__ == "__main__":
    sys.exit(main())
