from pathlib import Path

# src/drivegraph/paths.py -> src/drivegraph -> src -> ROOT
REPO_ROOT = Path(__file__).resolve().parent.parent.parent

# Canonical directories
DATA_DIR = REPO_ROOT / "data"
FLOWS_DIR = DATA_DIR / "flows"
