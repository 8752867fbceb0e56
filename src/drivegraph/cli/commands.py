"""CLI command implementations.

Each command takes the parsed ``argparse.Namespace`` plus the loaded
configuration, prints JSON to stdout and returns a process exit code.
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from drivegraph.core.config import DrivegraphConfig
from drivegraph.core.graph_io import GraphStore, read_snapshot, write_snapshot
from drivegraph.core.logging import get_logger
from drivegraph.graph.driver import recompute
from drivegraph.graph.durations import duration_breakdown
from drivegraph.mechanics.motion import sample_profile, velocity_profile
from drivegraph.mechanics.vtcurve import interpolate_torque, torque_margin
from drivegraph.nodes.schema import list_kinds

logger = get_logger(__name__)


def _print_json(data) -> None:
    print(json.dumps(data, indent=2))


# ---------------------------------------------------------------------------
# Recompute
# ---------------------------------------------------------------------------


def recompute_command(args: argparse.Namespace, config: DrivegraphConfig) -> int:
    """Recompute a snapshot file or a stored configuration."""
    store = GraphStore(config.storage.root, indent=config.storage.indent)
    if args.config_id:
        snapshot = store.load_graph(args.config_id)
        if snapshot is None:
            logger.error("configuration not found", config_id=args.config_id)
            return 1
    elif args.graph:
        snapshot = read_snapshot(args.graph)
    else:
        logger.error("recompute needs GRAPH or --id")
        return 2

    try:
        report = recompute(snapshot)
        durations = duration_breakdown(report.snapshot, args.end) if args.end else None
    except (ValueError, KeyError) as exc:
        logger.error("recompute failed", error=str(exc), error_type=type(exc).__name__)
        return 4
    logger.info(
        "recompute finished",
        steps=report.steps,
        n_changed=len(report.changed),
    )

    if args.out:
        write_snapshot(args.out, report.snapshot, indent=config.storage.indent)
    elif args.config_id and args.save:
        store.save_graph(args.config_id, report.snapshot)

    summary = {
        "computed": report.computed,
        "changed": report.changed,
        "outputs": {
            n.id: (n.output.to_dict() if n.output is not None else None)
            for n in report.snapshot.nodes
        },
    }
    if durations is not None:
        summary["durations"] = durations
    _print_json(summary)
    return 0


# ---------------------------------------------------------------------------
# Velocity profile
# ---------------------------------------------------------------------------


def profile_command(args: argparse.Namespace, config: DrivegraphConfig) -> int:
    profile = velocity_profile(args.distance, args.velocity, args.accel, args.decel)
    out = {
        "shape": profile.shape,
        "totalTime": profile.total_time,
        "points": [p.to_dict() for p in profile.points],
    }
    if args.samples:
        n = args.n_samples or config.chart.n_samples
        t, v = sample_profile(profile, n)
        out["samples"] = {"time": t.tolist(), "velocity": v.tolist()}
    _print_json(out)
    return 0


# ---------------------------------------------------------------------------
# VT curve
# ---------------------------------------------------------------------------


def interpolate_command(args: argparse.Namespace, config: DrivegraphConfig) -> int:
    path = Path(args.curve)
    if not path.exists():
        logger.error("curve file not found", path=str(path))
        return 1
    with open(path) as f:
        curve = json.load(f)
    if isinstance(curve, dict):
        curve = curve.get("points", [])

    out = {"rpm": args.rpm, "torque": interpolate_torque(curve, args.rpm)}
    if args.required is not None:
        out["margin"] = torque_margin(curve, args.rpm, args.required)
    _print_json(out)
    return 0 if out["torque"] is not None else 3


# ---------------------------------------------------------------------------
# Kinds
# ---------------------------------------------------------------------------


def kinds_command(args: argparse.Namespace, config: DrivegraphConfig) -> int:
    schemas = list_kinds(args.category)
    if args.verbose:
        _print_json([s.describe() for s in schemas])
    else:
        for s in schemas:
            print(f"{s.kind:<20} {s.category:<10} {s.title}")
    return 0
