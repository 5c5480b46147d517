"""Runtime bootstrap for the retention cleanup daemon."""

from __future__ import annotations

import logging
import threading

from pdf_merger.config import RuntimeConfig
from pdf_merger.workers import retention

logger = logging.getLogger(__name__)

_bootstrap_lock = threading.Lock()
_bootstrap_started = False


def bootstrap_runtime(config: RuntimeConfig) -> None:
    """Start background services once per process."""
    global _bootstrap_started
    with _bootstrap_lock:
        if _bootstrap_started:
            return

        if config.adopt_orphans_on_start:
            # Schedules are in memory only; re-arm whatever a previous process left.
            retention.retention_queue.adopt_orphans(config.upload_folder, config.session_retention_seconds)
            retention.retention_queue.adopt_orphans(config.output_folder, config.artifact_retention_seconds)

        threading.Thread(
            target=retention.cleanup_daemon,
            args=(retention.retention_queue, config.sweep_interval_seconds),
            daemon=True,
            name="retention-cleanup-daemon",
        ).start()
        _bootstrap_started = True


def is_bootstrapped() -> bool:
    """Expose runtime bootstrap state for diagnostics/tests."""
    return _bootstrap_started
