"""Health routes."""

from flask import Blueprint

from pdf_merger.services import merge_service

web_bp = Blueprint("web", __name__)


@web_bp.get("/health")
def health():
    return merge_service.health()
