"""API routes."""

from flask import Blueprint

from pdf_merger.services import file_service, merge_service

api_bp = Blueprint("api", __name__)

api_bp.add_url_rule(
    "/merge",
    endpoint="merge",
    view_func=merge_service.merge,
    methods=["POST"],
)
api_bp.add_url_rule(
    "/api/merge",
    endpoint="merge_legacy",
    view_func=merge_service.merge,
    methods=["POST"],
)
api_bp.add_url_rule(
    "/download/<filename>",
    endpoint="download",
    view_func=file_service.download,
    methods=["GET"],
)
api_bp.add_url_rule(
    "/api/download/<filename>",
    endpoint="download_legacy",
    view_func=file_service.download,
    methods=["GET"],
)
