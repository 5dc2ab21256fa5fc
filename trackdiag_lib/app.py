# --- trackdiag_lib/app.py ---
import logging
import os

from flask import Flask, jsonify

from .config_service import ConfigService, DEFAULT_CONFIG_PATH

UPLOAD_DIR = os.path.join(os.path.expanduser("~"), ".trackdiag", "uploads")


def create_app(config_overrides=None):
    """
    Creates and configs an instance of the Flask application.
    """
    app = Flask(__name__, instance_relative_config=True)
    log = logging.getLogger("trackdiag.web")

    # --- Configuration ---
    app.config.from_mapping(
        CONFIG_PATH=DEFAULT_CONFIG_PATH,
        UPLOAD_DIR=UPLOAD_DIR,
        MAX_CONTENT_LENGTH=32 * 1024 * 1024,
    )

    if config_overrides:
        app.config.from_mapping(config_overrides)
        log.info("Applied runtime configuration overrides.")

    app.config_service = ConfigService(app.config["CONFIG_PATH"])

    # --- Register Blueprints (APIs) ---
    from . import routes

    app.register_blueprint(routes.bp, url_prefix="/api/diagram")
    log.info("Diagram API registered.")

    # --- Global Error Handler ---
    @app.errorhandler(Exception)
    def handle_exception(e):
        """Catches all unhandled exceptions, logs them, and returns JSON."""
        if hasattr(e, "code") and isinstance(e.code, int) and e.code < 500:
            return jsonify(error=str(e)), e.code
        log.exception("An unhandled exception occurred: %s", e)
        return jsonify(error="An internal server error occurred."), 500

    @app.route("/health")
    def health_check():
        return "OK"

    return app
