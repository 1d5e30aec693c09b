"""
Configuration Loader for the Resume Optimizer API

Loads optional settings from config.yaml and overlays environment variables.
Environment variables always win over the YAML file.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from resume_optimizer.logging_config import get_environment

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config.yaml"

DEFAULT_FALLBACK_URI = "mongodb://127.0.0.1:27017/resume-optimizer"
DEFAULT_DB_NAME = "resume-optimizer"
DEFAULT_PORT = 5000

SUPPORTED_AI_PROVIDERS = ("gemini", "claude")


@dataclass
class ConnectionSettings:
    """
    Everything the connection supervisor needs to reach MongoDB.

    Attributes:
        primary_uri: Preferred MongoDB URI (usually Atlas); may be empty
        fallback_uri: Secondary URI tried after the primary's retries run out
        database_name: Database used when the URI does not name one
        max_retries: Retries after the first attempt, per endpoint
        retry_interval: Seconds between attempts
        reconnect_delay: Seconds to wait after a disconnect before reconnecting
        client_options: Keyword arguments passed to MongoClient
    """

    primary_uri: Optional[str] = None
    fallback_uri: Optional[str] = DEFAULT_FALLBACK_URI
    database_name: str = DEFAULT_DB_NAME
    max_retries: int = 5
    retry_interval: float = 2.0
    reconnect_delay: float = 2.0
    client_options: Dict[str, Any] = field(
        default_factory=lambda: {
            "serverSelectionTimeoutMS": 10000,
            "connectTimeoutMS": 10000,
            "socketTimeoutMS": 45000,
            "retryWrites": True,
        }
    )


class Config:
    """Configuration manager for the Resume Optimizer API."""

    def __init__(self, config_path: Optional[Path] = None, environ: Optional[Dict[str, str]] = None):
        """
        Initialize configuration from an optional YAML file and the environment.

        Args:
            config_path: Path to config.yaml (defaults to ./config.yaml; missing file is fine)
            environ: Mapping to read env vars from (defaults to os.environ)
        """
        if config_path is None:
            config_path = DEFAULT_CONFIG_PATH

        self.config_path = Path(config_path)
        self._env = os.environ if environ is None else environ
        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file, then validate it."""
        config: Dict[str, Any] = {}
        if self.config_path.exists():
            with open(self.config_path, "r") as f:
                config = yaml.safe_load(f) or {}

        if not isinstance(config, dict):
            raise ValueError(f"Config file must contain a mapping: {self.config_path}")

        for section in ("database", "ai", "server"):
            value = config.setdefault(section, {})
            if not isinstance(value, dict):
                raise ValueError(f"Config section '{section}' must be a mapping")

        self._validate_config(config)
        return config

    def _validate_config(self, config: Dict[str, Any]) -> None:
        """Validate value ranges in the YAML file."""
        db = config["database"]
        if int(db.get("max_retries", 5)) < 0:
            raise ValueError("database.max_retries must be >= 0")
        if float(db.get("retry_interval", 2.0)) < 0:
            raise ValueError("database.retry_interval must be >= 0")
        if float(db.get("reconnect_delay", 2.0)) < 0:
            raise ValueError("database.reconnect_delay must be >= 0")

        provider = self._env.get("AI_PROVIDER") or config["ai"].get("provider", "gemini")
        if provider.lower() not in SUPPORTED_AI_PROVIDERS:
            raise ValueError(
                f"Unknown AI provider: '{provider}'. "
                f"Available providers: {', '.join(SUPPORTED_AI_PROVIDERS)}"
            )

    def _get(self, section: str, key: str, env_var: Optional[str] = None, default: Any = None) -> Any:
        if env_var and self._env.get(env_var):
            return self._env[env_var]
        return self._config[section].get(key, default)

    # ===== ENVIRONMENT =====

    @property
    def environment(self) -> str:
        """Deployment environment (development, production, testing)."""
        return self._env.get("FLASK_ENV") or self._env.get("NODE_ENV") or get_environment()

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def port(self) -> int:
        """HTTP port (PORT env var, default 5000)."""
        return int(self._get("server", "port", "PORT", DEFAULT_PORT))

    @property
    def max_content_length(self) -> int:
        """Maximum request body size in bytes (10MB default)."""
        return int(self._config["server"].get("max_content_length", 10 * 1024 * 1024))

    # ===== DATABASE =====

    @property
    def mongo_uri(self) -> Optional[str]:
        """Primary MongoDB URI."""
        return self._get("database", "uri", "MONGO_URI")

    @property
    def mongo_fallback_uri(self) -> str:
        """Fallback MongoDB URI, tried after the primary gives up."""
        return self._get("database", "fallback_uri", "MONGO_FALLBACK_URI", DEFAULT_FALLBACK_URI)

    @property
    def mongo_db_name(self) -> str:
        return self._get("database", "name", "MONGO_DB_NAME", DEFAULT_DB_NAME)

    def to_connection_settings(self) -> ConnectionSettings:
        """Build the settings object injected into the connection supervisor."""
        db = self._config["database"]
        settings = ConnectionSettings(
            primary_uri=self.mongo_uri,
            fallback_uri=self.mongo_fallback_uri,
            database_name=self.mongo_db_name,
            max_retries=int(db.get("max_retries", 5)),
            retry_interval=float(db.get("retry_interval", 2.0)),
            reconnect_delay=float(db.get("reconnect_delay", 2.0)),
        )
        settings.client_options.update(db.get("client_options") or {})
        return settings

    # ===== AI =====

    @property
    def ai_provider(self) -> str:
        """Configured AI provider name ('gemini' or 'claude')."""
        return self._get("ai", "provider", "AI_PROVIDER", "gemini").lower()

    @property
    def ai_model(self) -> Optional[str]:
        """Model override; providers fall back to their own default."""
        return self._get("ai", "model", "AI_MODEL")

    @property
    def ai_timeout(self) -> float:
        """Seconds to wait for the generation API before giving up."""
        return float(self._get("ai", "timeout_seconds", "AI_TIMEOUT_SECONDS", 60))

    @property
    def gemini_api_key(self) -> Optional[str]:
        return self._env.get("GEMINI_API_KEY")

    @property
    def anthropic_api_key(self) -> Optional[str]:
        return self._env.get("ANTHROPIC_API_KEY")

    def to_dict(self) -> Dict[str, Any]:
        """Return a provider-factory friendly dict (no secrets)."""
        return {
            "ai": {
                "provider": self.ai_provider,
                "model": self.ai_model,
                "timeout_seconds": self.ai_timeout,
            },
        }


_config: Optional[Config] = None


def get_config(config_path: Optional[Path] = None) -> Config:
    """Return the process-wide Config, loading it on first use."""
    global _config
    if _config is None or config_path is not None:
        _config = Config(config_path)
    return _config


def reset_config() -> None:
    """Forget the cached Config (used by tests)."""
    global _config
    _config = None
