"""
Resume Optimizer API - Application Factory

Stores job applications in MongoDB and tailors resumes to job
descriptions with an LLM.
"""

import traceback

from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from resume_optimizer.config import Config, get_config
from resume_optimizer.database import ConnectionSupervisor, DatabaseNotConnectedError
from resume_optimizer.logging_config import get_logger
from resume_optimizer.repository import JobRepository

logger = get_logger(__name__)


def create_app(config=None, supervisor=None, repository=None, ai_provider=None):
    """
    Application factory for creating Flask app instances.

    The supervisor is not connected here; call ``supervisor.start()`` (as
    run.py does) so the HTTP layer is up before MongoDB answers.

    Args:
        config: Optional Config instance (defaults to get_config())
        supervisor: Optional ConnectionSupervisor (built from config if omitted)
        repository: Optional JobRepository (built on the supervisor if omitted)
        ai_provider: Optional AIProvider used for every optimize request;
            when omitted a provider is built per request from config

    Returns:
        Configured Flask application instance
    """
    from dotenv import load_dotenv

    load_dotenv()

    if config is None:
        config = get_config()

    if supervisor is None:
        supervisor = ConnectionSupervisor(config.to_connection_settings())

    if repository is None:
        repository = JobRepository(supervisor)

    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = config.max_content_length
    app.config["OPTIMIZER_CONFIG"] = config
    app.config["CONNECTION_SUPERVISOR"] = supervisor
    app.config["JOB_REPOSITORY"] = repository
    app.config["AI_PROVIDER"] = ai_provider

    CORS(app)

    register_request_logging(app)
    register_error_handlers(app)
    register_blueprints(app)

    return app


def register_request_logging(app):
    """Log every incoming request as 'METHOD path'."""

    @app.before_request
    def _log_request():
        logger.info(f"{request.method} {request.full_path.rstrip('?')}")


def register_error_handlers(app):
    """Turn unhandled exceptions into JSON responses."""

    @app.errorhandler(DatabaseNotConnectedError)
    def _database_unavailable(e):
        logger.warning(f"Database unavailable for {request.method} {request.path}: {e}")
        return (
            jsonify(
                {
                    "success": False,
                    "error": "Database unavailable",
                    "message": "Database connection is not ready. Please try again shortly.",
                }
            ),
            503,
        )

    @app.errorhandler(Exception)
    def _server_error(e):
        if isinstance(e, HTTPException):
            return e

        logger.exception(f"Error: {e}")
        config: Config = app.config["OPTIMIZER_CONFIG"]
        body = {
            "success": False,
            "error": "Server Error",
            "message": str(e) if config.is_development else "An error occurred",
        }
        if config.is_development:
            body["details"] = {
                "name": type(e).__name__,
                "stack": traceback.format_exc(),
            }
        return jsonify(body), 500


def register_blueprints(app):
    """Register all Flask blueprints."""
    from resume_optimizer.routes import register_all_blueprints

    register_all_blueprints(app)
