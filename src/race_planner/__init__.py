"""Race Planner - grade-adjusted pacing for running routes."""

import subprocess
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

__version_date__ = "2025-03-14"

try:
    __version__ = version("race-planner")
except PackageNotFoundError:
    # Running from a source checkout without an install
    __version__ = "0.0.0"


def get_git_hash() -> str:
    """Short commit hash of the checkout holding this package, or 'unknown'."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            cwd=Path(__file__).resolve().parent,
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (OSError, subprocess.SubprocessError):
        return "unknown"
    if result.returncode != 0:
        return "unknown"
    return result.stdout.strip()
