"""
Logging setup for the Resume Optimizer API.

Development gets short colored lines on stderr. Production gets one JSON
object per line, on the console and in a rotating file under logs/.
MongoDB connection strings are masked in every record, since driver errors
and connection logs can carry the URI.
"""

import json
import logging
import logging.handlers
import os
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

SERVICE_NAME = "resume-optimizer-api"

LOGS_DIR = Path(__file__).parent.parent / "logs"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

LOG_LEVELS = {
    "development": logging.DEBUG,
    "production": logging.INFO,
    "testing": logging.WARNING,
}

# Driver and SDK loggers that flood DEBUG/INFO
NOISY_LOGGERS = ("pymongo", "werkzeug", "google", "httpx", "httpcore", "urllib3", "anthropic")

# Longest message the console formatter prints; raw AI output can be pages long
CONSOLE_MESSAGE_LIMIT = 500

_MONGO_CREDENTIALS = re.compile(r"(mongodb(?:\+srv)?://)[^@/\s]+@")


def get_environment() -> str:
    """Return the deployment environment name (FLASK_ENV, then NODE_ENV)."""
    return os.environ.get("FLASK_ENV") or os.environ.get("NODE_ENV") or "development"


def mask_credentials(text: str) -> str:
    """Replace user:password in MongoDB URIs with ***."""
    return _MONGO_CREDENTIALS.sub(r"\1***@", text)


class CredentialMaskingFilter(logging.Filter):
    """Rewrites each record's message with MongoDB credentials masked."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = mask_credentials(message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per record, for log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": SERVICE_NAME,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
            "thread": record.threadName,
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Colored single-line output for development."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        timestamp = datetime.now().strftime("%H:%M:%S")

        message = record.getMessage()
        if len(message) > CONSOLE_MESSAGE_LIMIT:
            message = message[:CONSOLE_MESSAGE_LIMIT] + "..."

        line = f"{color}[{timestamp}] {record.levelname:8}{self.RESET} {record.name}: {message}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def _file_handler(path: str, level: int) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter())
    return handler


def setup_logging(
    level: Optional[str] = None,
    json_logs: bool = False,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the root logger for the API process.

    Args:
        level: Level name (DEBUG, INFO, ...); defaults by environment
        json_logs: JSON on the console instead of colored lines
        log_file: Also write JSON to this file (production always writes
            logs/app.log)

    Returns:
        The root logger
    """
    env = get_environment()
    if level:
        log_level = getattr(logging, level.upper(), logging.INFO)
    else:
        log_level = LOG_LEVELS.get(env, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(JSONFormatter() if json_logs else ConsoleFormatter())
    root_logger.addHandler(console_handler)

    if log_file is None and env == "production":
        LOGS_DIR.mkdir(exist_ok=True)
        log_file = str(LOGS_DIR / "app.log")
    if log_file:
        root_logger.addHandler(_file_handler(log_file, log_level))

    masking = CredentialMaskingFilter()
    for handler in root_logger.handlers:
        handler.addFilter(masking)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Module logger; use as ``logger = get_logger(__name__)``."""
    return logging.getLogger(name)
