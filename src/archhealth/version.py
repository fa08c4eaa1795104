"""Package version, tagged with the commit when running from a git checkout."""

import subprocess
from pathlib import Path

PACKAGE_VERSION = "0.1.0"

# src/archhealth/version.py -> checkout root
_CHECKOUT = Path(__file__).resolve().parents[2]


def commit_hash() -> str | None:
    """Short hash of the checkout's HEAD, or None outside a git work tree."""
    try:
        proc = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            cwd=_CHECKOUT,
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (OSError, subprocess.TimeoutExpired):
        return None
    if proc.returncode != 0:
        return None
    return proc.stdout.strip() or None


def get_version() -> str:
    commit = commit_hash()
    return f"{PACKAGE_VERSION} (g{commit})" if commit else PACKAGE_VERSION
