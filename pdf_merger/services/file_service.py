"""Delivery of merged artifacts from the output area."""

import logging
from pathlib import Path

from flask import current_app, send_file
from werkzeug.utils import secure_filename

from pdf_merger.core.exceptions import NotFoundError
from pdf_merger.core.utils import get_file_size_mb

logger = logging.getLogger(__name__)


def fetch_artifact(output_folder: Path, filename: str) -> Path:
    """Locate an artifact by its generated name.

    Raises:
        NotFoundError: Name is invalid, never existed, or has been cleaned up.
    """
    # Security: Prevent path traversal attacks
    safe_filename = secure_filename(filename or "")
    if not safe_filename or safe_filename != filename:
        logger.warning(f"[download] Invalid filename rejected: {filename}")
        raise NotFoundError.for_artifact(filename)

    output_folder = Path(output_folder).resolve()
    file_path = output_folder / safe_filename
    try:
        file_path.resolve().relative_to(output_folder)
    except ValueError:
        logger.warning(f"[download] Path traversal attempt blocked: {filename}")
        raise NotFoundError.for_artifact(filename)

    if not file_path.is_file():
        logger.info(f"[download] File not found: {safe_filename}")
        raise NotFoundError.for_artifact(filename)
    return file_path


def read_artifact(output_folder: Path, filename: str) -> bytes:
    return fetch_artifact(output_folder, filename).read_bytes()


def download(filename):
    """
    Direct file download endpoint.

    Files stay downloadable until the retention window removes them.
    """
    config = current_app.config["RUNTIME_CONFIG"]
    file_path = fetch_artifact(config.output_folder, filename)
    logger.info(f"[download] Serving file: {file_path.name} ({get_file_size_mb(file_path):.1f}MB)")
    return send_file(file_path, as_attachment=True, download_name=file_path.name, mimetype="application/pdf")
