"""Graph snapshot persistence with version guards.

One JSON file per configuration id::

    <root>/<config_id>.json = {
        "format_version": "1.0",
        "config_id": "...",
        "saved_at": 1700000000.0,
        "graph": {"nodes": [...], "edges": [...], "viewport": {...}},
    }
"""

from __future__ import annotations

import json
import re
import time
from pathlib import Path
from typing import Any

from .constants import GRAPH_FORMAT_VERSION
from .logging import get_logger
from .types import GraphSnapshot

logger = get_logger(__name__)

_CONFIG_ID_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


def _check_config_id(config_id: str) -> str:
    config_id = str(config_id)
    if not _CONFIG_ID_RE.match(config_id) or config_id in (".", ".."):
        raise ValueError(f"Invalid configuration id: {config_id!r}")
    return config_id


def read_snapshot(path: str | Path) -> GraphSnapshot:
    """Read a bare or wrapped snapshot JSON file.

    Accepts either a plain ``{"nodes", "edges", "viewport"}`` document (as
    exported by the editor) or a stored file wrapped with ``format_version``.
    """
    path = Path(path)
    with open(path) as f:
        data = json.load(f)
    if "format_version" in data:
        _check_version(data, path)
        data = data.get("graph") or {}
    return GraphSnapshot.from_dict(data)


def write_snapshot(path: str | Path, snapshot: GraphSnapshot, indent: int = 2) -> None:
    """Write a bare snapshot JSON file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(snapshot.to_dict(), f, indent=indent)


def _check_version(data: dict[str, Any], path: Path) -> None:
    version = data.get("format_version")
    if version != GRAPH_FORMAT_VERSION:
        raise ValueError(
            f"Graph format version mismatch in {path}: {version}, expected {GRAPH_FORMAT_VERSION}"
        )


class GraphStore:
    """File-backed load/save of graphs keyed by configuration id."""

    def __init__(self, root: str | Path, indent: int = 2) -> None:
        self.root = Path(root)
        self.indent = indent

    def path_for(self, config_id: str) -> Path:
        return self.root / f"{_check_config_id(config_id)}.json"

    def load_graph(self, config_id: str) -> GraphSnapshot | None:
        """Load the graph for ``config_id``; None if it was never saved.

        Raises:
            ValueError: On a format version mismatch or invalid id.
        """
        path = self.path_for(config_id)
        if not path.exists():
            logger.debug("graph not found", config_id=config_id, path=str(path))
            return None

        with open(path) as f:
            data = json.load(f)
        _check_version(data, path)

        snapshot = GraphSnapshot.from_dict(data.get("graph") or {})
        logger.debug(
            "graph loaded",
            config_id=config_id,
            n_nodes=len(snapshot.nodes),
            n_edges=len(snapshot.edges),
        )
        return snapshot

    def save_graph(self, config_id: str, snapshot: GraphSnapshot) -> None:
        """Persist ``snapshot`` under ``config_id`` (overwrites)."""
        path = self.path_for(config_id)
        path.parent.mkdir(parents=True, exist_ok=True)

        payload = {
            "format_version": GRAPH_FORMAT_VERSION,
            "config_id": config_id,
            "saved_at": time.time(),
            "graph": snapshot.to_dict(),
        }
        tmp = path.with_suffix(".json.tmp")
        with open(tmp, "w") as f:
            json.dump(payload, f, indent=self.indent)
        tmp.replace(path)
        logger.info("graph saved", config_id=config_id, path=str(path))

    def delete_graph(self, config_id: str) -> bool:
        """Remove a stored graph. Returns True if a file was deleted."""
        path = self.path_for(config_id)
        if path.exists():
            path.unlink()
            return True
        return False

    def list_configs(self) -> list[str]:
        """List stored configuration ids."""
        if not self.root.exists():
            return []
        return sorted(p.stem for p in self.root.glob("*.json"))
