"""
Routes Package - Flask Blueprints for the Resume Optimizer API

Blueprint structure:
- main_bp: Root status and health check (/, /api/health)
- jobs_bp: Job CRUD and resume optimization (/api/jobs)
"""


from resume_optimizer.logging_config import get_logger

from .jobs import jobs_bp
from .main import main_bp

logger = get_logger(__name__)


def register_all_blueprints(app):
    """
    Register all Flask blueprints with the application.

    Args:
        app: Flask application instance
    """
    app.register_blueprint(main_bp)
    logger.info("Registered main blueprint (status routes)")

    app.register_blueprint(jobs_bp, url_prefix="/api/jobs")
    logger.info("Registered jobs blueprint")


__all__ = [
    "register_all_blueprints",
    "main_bp",
    "jobs_bp",
]
