"""Core utility functions: console logging, log files, timestamps."""

import os
from datetime import datetime, timezone

from rich.console import Console

# stderr keeps stdout free for the JSON report
console = Console(stderr=True)

_log_dir: str | None = None


def configure_log_dir(path: str | None) -> None:
    """Mirror every log() message into <path>/<source>.log, or stop if None."""
    global _log_dir
    if path:
        os.makedirs(path, exist_ok=True)
    _log_dir = path


def set_quiet(quiet: bool) -> None:
    """Silence (or restore) console output."""
    console.quiet = quiet


def log(source: str, message: str, style: str = "") -> None:
    """Write a message to the console (with optional style) and the source's log file."""
    if style:
        console.print(message, style=style)
    else:
        console.print(message)

    if _log_dir is None:
        return
    try:
        log_file = os.path.join(_log_dir, f"{source}.log")
        with open(log_file, "a", encoding="utf-8") as f:
            f.write(message + "\n")
    except OSError:
        pass  # Never break an analysis over logging


def utc_timestamp() -> str:
    """Return the current UTC time as ISO-8601 with milliseconds, e.g. '2026-01-02T03:04:05.678Z'."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")
