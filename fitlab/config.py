"""Global configuration and search defaults."""

import os
from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = PROJECT_ROOT / "data"


def _load_env() -> None:
    """Load variables from .env file into os.environ."""
    env_path = PROJECT_ROOT / ".env"
    if not env_path.exists():
        return
    for line in env_path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        os.environ.setdefault(key.strip(), value.strip())


_load_env()

RESULTS_DIR = Path(os.environ.get("FITLAB_RESULTS_DIR", "") or PROJECT_ROOT / "results")

# Adaptive search defaults
DEFAULT_ITERS = 100
DEFAULT_GAMMA_BETTER = 1.1
DEFAULT_GAMMA_WORSE = 0.9
DEFAULT_ALPHA_TOL = 1e-3


def default_seed() -> int | None:
    """Seed for CLI runs from FITLAB_SEED, or None for a fresh random source."""
    raw = os.environ.get("FITLAB_SEED", "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"FITLAB_SEED must be an integer, got {raw!r}") from None
