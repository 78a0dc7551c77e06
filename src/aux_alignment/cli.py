"""
Command line front end for the alignment engine.

Loads sync points from YAML, builds the alignment model and converts a single
direction, or reports how well the model reproduces its sync points.
"""

from __future__ import annotations
from typing import List, Optional
import argparse
import logging
import math
import sys

from .config import (
    load_config,
    load_sync_points,
    mount_alignment_hint,
    observer_position,
    singularity_tolerance,
)
from .coordinates import MountAlignment
from .math_plugin import BasicMathPlugin
from .vectors import DirectionVector, vector_to_altaz


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Telescope mount alignment transforms")
    parser.add_argument("-c", "--config", help="Configuration YAML file")
    parser.add_argument(
        "-s", "--sync-points", required=True, help="YAML file with sync points"
    )
    parser.add_argument(
        "--hint",
        choices=[m.value for m in MountAlignment],
        help="Approximate mount alignment (overrides config)",
    )
    parser.add_argument(
        "-d", "--debug", action="store_true", help="Enable debug logging to stderr"
    )

    sub = parser.add_subparsers(dest="command", required=True)

    to_tel = sub.add_parser("to-telescope", help="RA/Dec to telescope direction")
    to_tel.add_argument("ra", type=float, help="Right ascension (hours)")
    to_tel.add_argument("dec", type=float, help="Declination (degrees)")
    to_tel.add_argument(
        "--offset", type=float, default=0.0, help="Time offset from now (days)"
    )

    to_cel = sub.add_parser("to-celestial", help="Telescope direction to RA/Dec")
    to_cel.add_argument("x", type=float)
    to_cel.add_argument("y", type=float)
    to_cel.add_argument("z", type=float)

    sub.add_parser("residuals", help="Per sync point model error")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)
    hint = MountAlignment(args.hint) if args.hint else mount_alignment_hint(config)

    database = load_sync_points(args.sync_points)
    if database.get_reference_position() is None:
        database.set_reference_position(observer_position(config))

    plugin = BasicMathPlugin(hint, singularity_tolerance=singularity_tolerance(config))
    if not plugin.initialise(database):
        print("Error: cannot build alignment model from sync points", file=sys.stderr)
        return 1

    if args.command == "to-telescope":
        vector, ok = plugin.transform_celestial_to_telescope(
            args.ra, args.dec, args.offset
        )
        if not ok:
            print("Error: transformation failed", file=sys.stderr)
            return 1
        az, alt = vector_to_altaz(vector)
        print(f"{vector.x:.9f} {vector.y:.9f} {vector.z:.9f}")
        print(f"Az {az:.5f} Alt {alt:.5f}")
    elif args.command == "to-celestial":
        vector = DirectionVector(args.x, args.y, args.z)
        vector.normalize()
        ra, dec, ok = plugin.transform_telescope_to_celestial(vector)
        if not ok:
            print("Error: transformation failed", file=sys.stderr)
            return 1
        print(f"RA {ra:.6f} Dec {dec:.5f}")
    else:
        residuals = plugin.sync_point_residuals()
        for i, (entry, res) in enumerate(zip(database.entries, residuals), start=1):
            shown = "n/a" if math.isnan(res) else f'{res:.2f}"'
            print(f"{i:3d} RA {entry.ra:9.5f} Dec {entry.dec:9.4f}  {shown}")
        print(f'RMS {plugin.rms_error_arcsec:.2f}"')
    return 0


if __name__ == "__main__":
    sys.exit(main())
