"""Shared utility functions for the PDF merge service.

Contains:
- env_* helpers: typed environment variable parsing
- get_file_size_mb: Get file size in MB
- generate_artifact_name: collision-resistant output filenames
- remove_path: idempotent file/directory deletion
"""

import logging
import os
import shutil
import time
import uuid
from pathlib import Path

logger = logging.getLogger(__name__)


def env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes")


def env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def env_choice(name: str, default: str, allowed: tuple) -> str:
    raw = (os.environ.get(name) or "").strip().upper()
    return raw if raw in allowed else default


def get_file_size_mb(path: Path) -> float:
    """Get file size in megabytes.

    Args:
        path: Path to the file.

    Returns:
        File size in MB.
    """
    return path.stat().st_size / (1024 * 1024)


def generate_artifact_name(prefix: str = "merged", suffix: str = ".pdf") -> str:
    """Build an output filename that is unique across concurrent requests.

    Nanosecond timestamp keeps names sortable; the random part covers
    requests landing on the same clock tick.
    """
    return f"{prefix}-{time.time_ns()}-{uuid.uuid4().hex[:8]}{suffix}"


def remove_path(path: Path) -> bool:
    """Delete a file or directory tree.

    Returns:
        True if something was deleted, False if the path was already gone.
    """
    path = Path(path)
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
    except FileNotFoundError:
        return False
    return True
