"""Flask API for merging uploaded documents into one print-ready PDF."""

import logging
import sys

from flask import current_app, jsonify, request
from werkzeug.exceptions import HTTPException, NotFound, RequestEntityTooLarge

from pdf_merger.core.exceptions import MergeError
from pdf_merger.core.utils import env_choice
from pdf_merger.engine.pipeline import run_merge
from pdf_merger.workers.retention import retention_queue

# Config
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

logging.basicConfig(
    level=env_choice("LOG_LEVEL", "INFO", LOG_LEVELS),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    stream=sys.stdout,
)
logger = logging.getLogger(__name__)


def configure_app(app, config) -> None:
    """Apply Flask app config values required by this service layer."""
    app.config["RUNTIME_CONFIG"] = config
    app.config["MAX_CONTENT_LENGTH"] = config.max_content_length
    config.upload_folder.mkdir(parents=True, exist_ok=True)
    config.output_folder.mkdir(parents=True, exist_ok=True)
    logger.info(
        "Folders resolved: uploads=%s outputs=%s (session retention=%ss, artifact retention=%ss)",
        config.upload_folder.resolve(),
        config.output_folder.resolve(),
        config.session_retention_seconds,
        config.artifact_retention_seconds,
    )


def register_error_handlers(app) -> None:
    """Register HTTP and framework error handlers."""
    app.register_error_handler(MergeError, handle_merge_error)
    app.register_error_handler(RequestEntityTooLarge, handle_large_file)
    app.register_error_handler(HTTPException, handle_http_exception)
    app.register_error_handler(Exception, handle_error)


def create_error_response(error: Exception, status_code: int = 500):
    """Create standardized error response.

    `message` is what a person should read; `error` carries the cause.
    """
    if isinstance(error, MergeError):
        message = error.message if status_code < 500 else "Error processing your request"
        return jsonify({
            "success": False,
            "message": message,
            "error": error.message,
            "error_type": error.error_type,
        }), status_code

    if isinstance(error, HTTPException):
        return jsonify({
            "success": False,
            "message": error.description,
            "error": error.name,
            "error_type": type(error).__name__,
        }), status_code

    return jsonify({
        "success": False,
        "message": "Error processing your request",
        "error": "Internal server error",
        "error_type": "UnknownError",
    }), status_code


# Error handlers
def handle_merge_error(e: MergeError):
    if e.status_code >= 500:
        logger.error(f"[merge] {e.error_type} on {request.method} {request.path}: {e.message}")
    else:
        logger.info(f"[merge] Rejected {request.method} {request.path}: {e.error_type}: {e.message}")
    return create_error_response(e, e.status_code)


def handle_large_file(e):
    max_mb = int(current_app.config["RUNTIME_CONFIG"].max_request_size / (1024 * 1024))
    message = f"Upload too large (max {max_mb}MB per request)"
    return jsonify({
        "success": False,
        "message": message,
        "error": message,
        "error_type": "PayloadTooLargeError",
    }), 413


def handle_http_exception(e):
    if isinstance(e, NotFound):
        logger.info("404 %s %s", request.method, request.path)
    else:
        logger.warning("HTTP %s on %s %s: %s", e.code, request.method, request.path, e.description)
    return create_error_response(e, e.code or 400)


def handle_error(e):
    logger.exception("Unhandled error")
    return create_error_response(e, 500)


# Routes
def health():
    """Health check endpoint with storage and retention info."""
    config = current_app.config["RUNTIME_CONFIG"]
    return jsonify({
        "status": "ok",
        "upload_folder": config.upload_folder.name,
        "output_folder": config.output_folder.name,
        "session_retention_seconds": config.session_retention_seconds,
        "artifact_retention_seconds": config.artifact_retention_seconds,
        "max_file_size_mb": config.max_file_size // (1024 * 1024),
        "max_request_size_mb": config.max_request_size // (1024 * 1024),
        "pending_deletions": len(retention_queue),
    })


def merge():
    """
    Merge uploaded documents into one PDF.

    Accepts multipart/form-data with repeated 'files' parts and an optional
    'order' field holding a JSON list of filenames in the desired order.

    Returns a download path for the merged PDF.
    """
    config = current_app.config["RUNTIME_CONFIG"]
    uploads = request.files.getlist("files")
    artifact = run_merge(uploads, request.form.get("order"), config, retention_queue)

    return jsonify({
        "success": True,
        "message": "Documents merged successfully",
        "file": f"/download/{artifact.filename}",
        "page_count": artifact.page_count,
        "optimized": artifact.optimized,
    }), 200
