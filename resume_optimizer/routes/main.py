"""
Main Routes Blueprint - Root status and health check
"""


from flask import Blueprint, current_app, jsonify

from resume_optimizer.logging_config import get_logger
from resume_optimizer.startup import get_health_status

logger = get_logger(__name__)

main_bp = Blueprint("main", __name__)


@main_bp.route("/")
def index():
    """Plain-text liveness check."""
    return "API Running"


@main_bp.route("/api/health")
def health():
    """
    Report database connection and AI provider health.

    Always answers 200 so load balancers can tell "up but degraded" from
    "down"; the body's status field carries the detail.
    """
    config = current_app.config["OPTIMIZER_CONFIG"]
    status = get_health_status(
        supervisor=current_app.config["CONNECTION_SUPERVISOR"],
        provider_name=config.ai_provider,
    )
    return jsonify(status)
