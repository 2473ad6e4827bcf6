"""
project: sewergen
module: __init__.py

Flask application factory and configuration for the sewer generator service.

The generator itself lives in ``sewergen.sewer`` and has no web dependency;
this module only wires it to an HTTP blueprint. Configuration is sourced from
environment variables (optionally loaded from a ``.env`` file) with defaults
suitable for local development.
"""

import logging
import os
import uuid

from dotenv import load_dotenv
from flask import Flask, jsonify

# Load .env if present so SEWER_* settings can be supplied without exporting
# shell variables during development.
load_dotenv()

app = Flask(__name__)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logging.getLogger(__name__).warning("Ignoring non-integer %s=%r", name, raw)
        return default


app.config.update(
    SEWER_DEFAULT_WIDTH=_env_int("SEWER_DEFAULT_WIDTH", 40),
    SEWER_DEFAULT_HEIGHT=_env_int("SEWER_DEFAULT_HEIGHT", 20),
    # Upper bounds keep a single request from pinning a worker on a huge map
    SEWER_MAX_WIDTH=_env_int("SEWER_MAX_WIDTH", 120),
    SEWER_MAX_HEIGHT=_env_int("SEWER_MAX_HEIGHT", 80),
    SEWER_API_MAX_ATTEMPTS=_env_int("SEWER_API_MAX_ATTEMPTS", 200),
)

# Register HTTP blueprints (import after app created)
from sewergen.routes.sewer_api import bp_sewer  # noqa: E402

app.register_blueprint(bp_sewer)


def create_app():
    """Return the Flask app instance."""
    return app


@app.errorhandler(500)
def internal_error(e):
    error_id = uuid.uuid4().hex[:8]
    logging.exception("Unhandled exception (id=%s)", error_id)
    return jsonify({"error": "internal error", "error_id": error_id}), 500
