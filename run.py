#!/usr/bin/env python3
"""
Resume Optimizer API - Main Entry Point

Starts the HTTP server first and connects to MongoDB in the background, so
the API answers even while the database is unreachable (limited mode).

Usage:
    python run.py

Environment Variables:
    MONGO_URI: Primary MongoDB connection string
    MONGO_FALLBACK_URI: Secondary MongoDB (default mongodb://127.0.0.1:27017/resume-optimizer)
    GEMINI_API_KEY: Google Gemini API key (or ANTHROPIC_API_KEY with AI_PROVIDER=claude)
    PORT: HTTP port (default 5000)
    FLASK_ENV: development (default), production, testing (NODE_ENV is honored too)
    LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (optional)
"""

import os
import sys
from pathlib import Path

APP_DIR = Path(__file__).parent

# Load environment variables from .env file
from dotenv import load_dotenv

load_dotenv(APP_DIR / ".env")

# Initialize logging first
from resume_optimizer.logging_config import get_environment, get_logger, setup_logging

env = get_environment()
setup_logging(level=os.environ.get("LOG_LEVEL"), json_logs=env == "production")
logger = get_logger(__name__)


def main():
    """Main entry point for the Resume Optimizer API."""
    logger.info("=" * 60)
    logger.info("Resume Optimizer API - Starting Up")
    logger.info("=" * 60)

    from resume_optimizer.config import get_config
    from resume_optimizer.startup import run_startup_validation

    validation_passed, _ = run_startup_validation(strict=False, log_results=True)
    if not validation_passed:
        logger.error("Startup validation failed. Please fix the errors above.")
        sys.exit(1)

    config = get_config()

    from resume_optimizer import create_app
    from resume_optimizer.database import ConnectionSupervisor

    supervisor = ConnectionSupervisor(config.to_connection_settings())
    app = create_app(config=config, supervisor=supervisor)

    supervisor.install_signal_handlers()
    supervisor.start()

    logger.info(f"  Environment: {config.environment}")
    logger.info(f"  AI provider: {config.ai_provider}")
    logger.info(f"  Server started on port {config.port}")
    logger.info(f"  API available at http://localhost:{config.port}")
    logger.info("=" * 60)

    # The reloader would fork a second process with its own supervisor
    app.run(
        host="0.0.0.0",
        port=config.port,
        debug=config.is_development,
        use_reloader=False,
        threaded=True,
    )


if __name__ == "__main__":
    main()
