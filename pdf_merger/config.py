"""Application configuration loading."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from pdf_merger.core.utils import env_bool, env_float, env_int

REPO_ROOT = Path(__file__).resolve().parents[1]

DEFAULT_MAX_FILE_SIZE_MB = 50
DEFAULT_MAX_REQUEST_SIZE_MB = 200
MULTIPART_OVERHEAD_BYTES = 1024 * 1024

# A4 at 72 DPI
DEFAULT_PRINT_WIDTH = 595.0
DEFAULT_PRINT_HEIGHT = 842.0


def _resolve_folder(env_name: str, default_name: str) -> Path:
    override = os.environ.get(env_name)
    if override:
        return Path(override)
    return REPO_ROOT / default_name


@dataclass(frozen=True)
class RuntimeConfig:
    """Runtime configuration values consumed by the Flask app and the pipeline."""

    upload_folder: Path = field(default_factory=lambda: REPO_ROOT / "uploads")
    output_folder: Path = field(default_factory=lambda: REPO_ROOT / "outputs")
    max_file_size: int = DEFAULT_MAX_FILE_SIZE_MB * 1024 * 1024
    max_request_size: int = DEFAULT_MAX_REQUEST_SIZE_MB * 1024 * 1024
    session_retention_seconds: float = 300.0
    artifact_retention_seconds: float = 3600.0
    sweep_interval_seconds: float = 30.0
    print_width: float = DEFAULT_PRINT_WIDTH
    print_height: float = DEFAULT_PRINT_HEIGHT
    adopt_orphans_on_start: bool = True

    @property
    def max_content_length(self) -> int:
        return self.max_request_size + MULTIPART_OVERHEAD_BYTES

    @property
    def print_envelope(self) -> tuple[float, float]:
        return (self.print_width, self.print_height)


def load_runtime_config() -> RuntimeConfig:
    """Load runtime configuration from environment variables."""
    return RuntimeConfig(
        upload_folder=_resolve_folder("UPLOAD_FOLDER", "uploads"),
        output_folder=_resolve_folder("OUTPUT_FOLDER", "outputs"),
        max_file_size=max(1, env_int("MAX_FILE_SIZE_MB", DEFAULT_MAX_FILE_SIZE_MB)) * 1024 * 1024,
        max_request_size=max(1, env_int("MAX_REQUEST_SIZE_MB", DEFAULT_MAX_REQUEST_SIZE_MB)) * 1024 * 1024,
        session_retention_seconds=max(0.0, env_float("SESSION_RETENTION_SECONDS", 300.0)),
        artifact_retention_seconds=max(0.0, env_float("ARTIFACT_RETENTION_SECONDS", 3600.0)),
        sweep_interval_seconds=max(1.0, env_float("RETENTION_SWEEP_INTERVAL_SECONDS", 30.0)),
        print_width=env_float("PRINT_PAGE_WIDTH", DEFAULT_PRINT_WIDTH),
        print_height=env_float("PRINT_PAGE_HEIGHT", DEFAULT_PRINT_HEIGHT),
        adopt_orphans_on_start=env_bool("ADOPT_ORPHANS_ON_START", True),
    )
