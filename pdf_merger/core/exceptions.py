"""Custom exceptions for the PDF merge pipeline.

All error messages are written in plain English so users know exactly
what went wrong and how to fix it. Messages never contain server paths.
"""

from typing import Optional


class MergeError(Exception):
    """Base exception for all merge pipeline errors."""

    error_type: str = "MergeError"
    status_code: int = 500

    def __init__(
        self,
        message: str,
        original_error: Optional[Exception] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class UnsupportedTypeError(MergeError):
    """Upload has a MIME type the service does not accept."""

    error_type: str = "UnsupportedTypeError"
    status_code: int = 415

    @staticmethod
    def for_file(filename: str, mime_type: str) -> "UnsupportedTypeError":
        return UnsupportedTypeError(
            f"'{filename}' has an unsupported type ({mime_type or 'unknown'}). "
            f"Only PDF, JPEG, PNG and DOCX files are accepted."
        )

    @staticmethod
    def needs_conversion(filename: str, mime_type: str) -> "UnsupportedTypeError":
        return UnsupportedTypeError(
            f"'{filename}' is {mime_type}, which must be converted to PDF before merging. "
            f"Conversion is not available yet; please upload a PDF version of this file."
        )


class PayloadTooLargeError(MergeError):
    """A single file or the whole request exceeds the size limits."""

    error_type: str = "PayloadTooLargeError"
    status_code: int = 413

    @staticmethod
    def for_file(filename: str, limit_bytes: int) -> "PayloadTooLargeError":
        return PayloadTooLargeError(
            f"'{filename}' is too large (limit {limit_bytes / (1024 * 1024):.0f}MB per file)."
        )

    @staticmethod
    def for_request(limit_bytes: int) -> "PayloadTooLargeError":
        return PayloadTooLargeError(
            f"The uploaded files are too large together (limit {limit_bytes / (1024 * 1024):.0f}MB per request)."
        )


class InsufficientInputError(MergeError):
    """Fewer than two documents were supplied."""

    error_type: str = "InsufficientInputError"
    status_code: int = 400

    @staticmethod
    def for_count(count: int) -> "InsufficientInputError":
        if count == 0:
            return InsufficientInputError("No files were uploaded.")
        return InsufficientInputError(
            f"At least 2 files are needed to merge (got {count})."
        )


class InvalidOrderError(MergeError):
    """The order hint is not a JSON array of filenames."""

    error_type: str = "InvalidOrderError"
    status_code: int = 400


class CorruptInputError(MergeError):
    """An input cannot be parsed as a PDF document.

    User-friendly message examples:
    - "'scan.pdf' is damaged and cannot be merged."
    - "'locked.pdf' is password-protected. Please remove the password and try again."
    """

    error_type: str = "CorruptInputError"

    @staticmethod
    def for_file(filename: str, detail: str = "") -> "CorruptInputError":
        base_msg = f"'{filename}' is damaged and cannot be merged."
        if detail:
            return CorruptInputError(f"{base_msg} Issue: {detail}")
        return CorruptInputError(
            f"{base_msg} Try opening it in a PDF viewer and re-saving it, "
            f"or use a different copy of the file."
        )

    @staticmethod
    def encrypted(filename: str) -> "CorruptInputError":
        return CorruptInputError(
            f"'{filename}' is password-protected or locked. "
            f"Please remove the password and try again."
        )


class OptimizationError(MergeError):
    """The merged document could not be resized for printing."""

    error_type: str = "OptimizationError"


class StorageError(MergeError):
    """A filesystem operation failed (permissions, disk full, ...)."""

    error_type: str = "StorageError"


class NotFoundError(MergeError):
    """Requested artifact never existed or has expired."""

    error_type: str = "NotFoundError"
    status_code: int = 404

    @staticmethod
    def for_artifact(filename: str) -> "NotFoundError":
        return NotFoundError(f"'{filename}' was not found. Download links expire after a while; please merge again.")
