"""drivegraph CLI.

Usage:
    drivegraph recompute    graph.json --out recomputed.json
    drivegraph recompute    --id line-3 --save
    drivegraph profile      --distance 100 --velocity 50 --accel 100 --decel 100
    drivegraph interpolate  curve.json --rpm 1500
    drivegraph kinds        --category drive
"""

from __future__ import annotations

import argparse
import sys

from drivegraph.cli.commands import (
    interpolate_command,
    kinds_command,
    profile_command,
    recompute_command,
)
from drivegraph.core.config import default_config, load_config
from drivegraph.core.logging import LEVELS, set_log_level


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Drivetrain computation graph CLI")
    parser.add_argument("--config", type=str, default=None, help="YAML config file")
    parser.add_argument("--log-level", type=str, default=None, choices=list(LEVELS))
    subparsers = parser.add_subparsers(dest="command", required=True, help="Command")

    # --- Recompute ---
    rc = subparsers.add_parser("recompute", help="Recompute a graph to its fixpoint")
    rc.add_argument("graph", type=str, nargs="?", default=None, help="Snapshot JSON file")
    rc.add_argument("--id", dest="config_id", type=str, default=None, help="Stored configuration id")
    rc.add_argument("--out", type=str, default=None)
    rc.add_argument("--save", action="store_true", help="Write back to the store (with --id)")
    rc.add_argument("--end", type=str, default=None, help="Task end node for a duration breakdown")

    # --- Profile ---
    pf = subparsers.add_parser("profile", help="Trapezoidal velocity profile")
    pf.add_argument("--distance", type=float, required=True)
    pf.add_argument("--velocity", type=float, required=True)
    pf.add_argument("--accel", type=float, required=True)
    pf.add_argument("--decel", type=float, required=True)
    pf.add_argument("--samples", action="store_true")
    pf.add_argument("--n-samples", type=int, default=None)

    # --- Interpolate ---
    ip = subparsers.add_parser("interpolate", help="Torque from a VT curve")
    ip.add_argument("curve", type=str, help="JSON list of {rpm, torque}")
    ip.add_argument("--rpm", type=float, required=True)
    ip.add_argument("--required", type=float, default=None, help="Required torque for a margin")

    # --- Kinds ---
    kd = subparsers.add_parser("kinds", help="List registered node kinds")
    kd.add_argument("--category", type=str, default=None, choices=["drive", "operation", "detail"])
    kd.add_argument("--verbose", action="store_true")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config) if args.config else default_config()
    set_log_level(args.log_level or config.logging.level)

    dispatch = {
        "recompute": recompute_command,
        "profile": profile_command,
        "interpolate": interpolate_command,
        "kinds": kinds_command,
    }

    fn = dispatch.get(args.command)
    if fn is None:
        parser.print_help()
        return 1

    return fn(args, config)


if __name__ == "__main__":
    sys.exit(main())
