"""Per-request upload sessions backed by a directory each."""

import logging
import re
import uuid
from pathlib import Path

from pdf_merger.core.exceptions import StorageError
from pdf_merger.core.models import UploadSession
from pdf_merger.core.utils import remove_path

logger = logging.getLogger(__name__)

_SESSION_ID_RE = re.compile(r"^[A-Za-z0-9_-]+$")


class SessionStore:
    """Creates, locates and removes session directories under one root."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def create_session(self) -> UploadSession:
        """Allocate a fresh session id and an empty directory for it.

        Raises:
            StorageError: If the directory cannot be created.
        """
        session_id = uuid.uuid4().hex
        path = self.session_path(session_id)
        try:
            path.mkdir(parents=True, exist_ok=False)
        except OSError as e:
            logger.error(f"[{session_id}] Could not create session directory: {e}")
            raise StorageError("Could not reserve storage for the upload.", original_error=e) from e

        logger.info(f"[{session_id}] Session created")
        return UploadSession(session_id=session_id, root=path)

    def session_path(self, session_id: str) -> Path:
        """Derive the directory of a session. No I/O."""
        if not session_id or not _SESSION_ID_RE.match(session_id):
            raise StorageError(f"Invalid session id: {session_id!r}")
        return self.root / session_id

    def destroy_session(self, session_id: str) -> bool:
        """Remove a session directory. Removing a missing session is not an error."""
        try:
            removed = remove_path(self.session_path(session_id))
        except OSError as e:
            raise StorageError("Could not remove upload storage.", original_error=e) from e
        if removed:
            logger.info(f"[{session_id}] Session removed")
        return removed
