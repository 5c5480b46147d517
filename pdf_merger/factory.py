"""Flask app factory."""

from __future__ import annotations

from typing import Optional

from flask import Flask
from flask_cors import CORS

from pdf_merger import bootstrap
from pdf_merger.config import RuntimeConfig, load_runtime_config
from pdf_merger.routes.api_routes import api_bp
from pdf_merger.routes.web_routes import web_bp
from pdf_merger.services import merge_service


def create_app(config: Optional[RuntimeConfig] = None) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    # Browser clients served from another origin call the /api/* routes.
    CORS(app)

    runtime_config = config or load_runtime_config()
    merge_service.configure_app(app, runtime_config)

    app.register_blueprint(web_bp)
    app.register_blueprint(api_bp)
    merge_service.register_error_handlers(app)

    bootstrap.bootstrap_runtime(runtime_config)
    return app
