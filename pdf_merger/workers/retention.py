"""Retention queue for time-based cleanup of sessions and merged artifacts.

Deletions are kept in an in-memory index keyed by path, so they can be
inspected and swept deterministically in tests. The index does not
survive a restart; `adopt_orphans` re-arms leftovers from file mtimes.
"""

import logging
import threading
import time
from pathlib import Path
from typing import Dict, List, Optional

from pdf_merger.core.utils import remove_path

logger = logging.getLogger(__name__)


class RetentionQueue:
    """Paths scheduled for deletion, with their expiry timestamps."""

    def __init__(self) -> None:
        self._expiries: Dict[Path, float] = {}
        self._lock = threading.Lock()

    def schedule(self, path: Path, delay_seconds: float, now: Optional[float] = None) -> float:
        """Arm (or re-arm) deletion of `path` after `delay_seconds`.

        Returns:
            The expiry timestamp.
        """
        now = time.time() if now is None else now
        expires_at = now + max(0.0, delay_seconds)
        with self._lock:
            self._expiries[Path(path)] = expires_at
        logger.debug(f"[retention] Scheduled {Path(path).name} in {delay_seconds:.0f}s")
        return expires_at

    def pending(self) -> Dict[Path, float]:
        with self._lock:
            return dict(self._expiries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._expiries)

    def sweep(self, now: Optional[float] = None) -> List[Path]:
        """Delete every path whose expiry has passed.

        Paths that are already gone count as deleted. Paths that fail to
        delete stay queued and are retried on the next sweep.

        Returns:
            Paths removed from the queue.
        """
        now = time.time() if now is None else now
        with self._lock:
            due = sorted(p for p, t in self._expiries.items() if t <= now)

        swept: List[Path] = []
        for path in due:
            try:
                removed = remove_path(path)
            except OSError as e:
                logger.error(f"[retention] Cleanup error for {path.name}: {e}")
                continue
            with self._lock:
                # A concurrent re-schedule pushed the expiry out; keep it.
                if self._expiries.get(path, now) <= now:
                    self._expiries.pop(path, None)
            swept.append(path)
            if removed:
                logger.info(f"[retention] Cleaned up: {path.name}")
        return swept

    def adopt_orphans(self, root: Path, delay_seconds: float, now: Optional[float] = None) -> int:
        """Schedule every untracked entry under `root` by its mtime.

        Returns:
            Number of entries adopted.
        """
        root = Path(root).resolve()
        if not root.is_dir():
            return 0
        now = time.time() if now is None else now
        tracked = self.pending()
        adopted = 0
        for entry in root.iterdir():
            if entry in tracked:
                continue
            try:
                mtime = entry.stat().st_mtime
            except OSError:
                continue
            remaining = delay_seconds - (now - mtime)
            self.schedule(entry, remaining, now=now)
            adopted += 1
        if adopted:
            logger.info(f"[retention] Adopted {adopted} leftover entries under {root.name}")
        return adopted


retention_queue = RetentionQueue()


def cleanup_daemon(queue: RetentionQueue, interval_seconds: float, stop_event: Optional[threading.Event] = None) -> None:
    """Background cleanup - sweeps expired sessions and artifacts."""
    stop_event = stop_event or threading.Event()
    logger.info(f"[retention] Cleanup daemon started (interval={interval_seconds:.0f}s)")
    while not stop_event.wait(interval_seconds):
        try:
            queue.sweep()
        except Exception as e:
            logger.exception(f"[retention] Sweep failed: {e}")
