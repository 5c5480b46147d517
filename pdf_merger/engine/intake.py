"""Upload intake: validate declared type and size, persist into the session."""

import logging
import mimetypes
import os
from pathlib import Path
from typing import IO, Optional

from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from pdf_merger.core.exceptions import (
    PayloadTooLargeError,
    StorageError,
    UnsupportedTypeError,
)
from pdf_merger.core.models import InputFile, UploadSession

logger = logging.getLogger(__name__)

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

ACCEPTED_MIME_TYPES = frozenset({
    PDF_MIME,
    "image/jpeg",
    "image/png",
    DOCX_MIME,
})
# Types the merge engine can consume without a conversion step.
MERGEABLE_MIME_TYPES = frozenset({PDF_MIME})

_GENERIC_MIME_TYPES = {"", "application/octet-stream", "binary/octet-stream"}

COPY_CHUNK_SIZE = 64 * 1024


class UploadBudget:
    """Per-file and aggregate byte limits for one request."""

    def __init__(self, max_file_size: int, max_request_size: int) -> None:
        self.max_file_size = max_file_size
        self.max_request_size = max_request_size
        self.used = 0

    @property
    def remaining(self) -> int:
        return max(0, self.max_request_size - self.used)

    def check(self, filename: str, size: int) -> None:
        """Raise if a file of `size` bytes does not fit the remaining budget."""
        if size > self.max_file_size:
            raise PayloadTooLargeError.for_file(filename, self.max_file_size)
        if size > self.remaining:
            raise PayloadTooLargeError.for_request(self.max_request_size)

    def consume(self, size: int) -> None:
        self.used += size


def resolve_mime_type(filename: str, declared: Optional[str]) -> str:
    """Return the declared MIME type, guessing from the name when it is generic."""
    mime_type = (declared or "").split(";", 1)[0].strip().lower()
    if mime_type in _GENERIC_MIME_TYPES:
        guessed, _ = mimetypes.guess_type(filename)
        mime_type = (guessed or mime_type).lower()
    # Some clients send the legacy alias for JPEG.
    if mime_type == "image/pjpeg":
        mime_type = "image/jpeg"
    return mime_type


def validate_mime_type(filename: str, mime_type: str) -> None:
    if mime_type not in ACCEPTED_MIME_TYPES:
        raise UnsupportedTypeError.for_file(filename, mime_type)
    if mime_type not in MERGEABLE_MIME_TYPES:
        raise UnsupportedTypeError.needs_conversion(filename, mime_type)


def _stream_size(stream: IO[bytes]) -> Optional[int]:
    """Size of the remaining stream content, or None if it cannot be seeked."""
    try:
        start = stream.tell()
        stream.seek(0, os.SEEK_END)
        end = stream.tell()
        stream.seek(start)
    except (AttributeError, OSError, ValueError):
        return None
    return end - start


def _storage_name(session: UploadSession, filename: str, index: int) -> str:
    """Sanitized on-disk name, unique within the session directory."""
    safe = secure_filename(filename) or f"upload-{index}.pdf"
    candidate = safe
    stem, suffix = os.path.splitext(safe)
    counter = 1
    while (session.root / candidate).exists():
        candidate = f"{stem}-{counter}{suffix}"
        counter += 1
    return candidate


def _copy_limited(stream: IO[bytes], target: Path, filename: str, budget: UploadBudget) -> int:
    """Copy `stream` to `target`, aborting as soon as a limit is crossed."""
    written = 0
    limit = min(budget.max_file_size, budget.remaining)
    try:
        with open(target, "wb") as f:
            while True:
                chunk = stream.read(COPY_CHUNK_SIZE)
                if not chunk:
                    break
                written += len(chunk)
                if written > limit:
                    budget.check(filename, written)
                f.write(chunk)
    except PayloadTooLargeError:
        target.unlink(missing_ok=True)
        raise
    except OSError as e:
        target.unlink(missing_ok=True)
        raise StorageError(f"Could not save '{filename}'.", original_error=e) from e
    return written


def accept_upload(session: UploadSession, raw_file: FileStorage, budget: UploadBudget) -> InputFile:
    """Validate one uploaded file and write it verbatim into the session directory.

    Args:
        session: Session that owns the upload.
        raw_file: Multipart file part as parsed by werkzeug.
        budget: Size limits shared by every file of the request.

    Returns:
        The persisted InputFile, also appended to session.files.

    Raises:
        UnsupportedTypeError: Type is not accepted or needs conversion.
        PayloadTooLargeError: File or request exceeds the size limits.
        StorageError: The file could not be written.
    """
    filename = raw_file.filename or ""
    mime_type = resolve_mime_type(filename, raw_file.mimetype)
    validate_mime_type(filename, mime_type)

    stream = raw_file.stream
    known_size = _stream_size(stream)
    if known_size is not None:
        budget.check(filename, known_size)

    target = session.root / _storage_name(session, filename, len(session.files) + 1)
    size = _copy_limited(stream, target, filename, budget)
    budget.consume(size)

    entry = InputFile(filename=filename, path=target.resolve(), mime_type=mime_type, size_bytes=size)
    session.files.append(entry)
    logger.info(f"[{session.session_id}] Saved upload '{filename}' ({size:,} bytes, {mime_type})")
    return entry
