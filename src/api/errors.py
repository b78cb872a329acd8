import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

from core.exceptions import NotFoundError

logger = logging.getLogger(__name__)


def register_error_handlers(app):
    """404 for missing entities, JSON for HTTP errors, 500 with the message for everything else."""

    @app.errorhandler(NotFoundError)
    def handle_not_found(e):
        return jsonify({"error": str(e)}), 404

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({"error": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        logger.exception(f"Request failed: {e}")
        return jsonify({"error": str(e)}), 500
