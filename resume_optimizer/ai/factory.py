"""
AI Provider Factory - Creates the appropriate AI provider based on configuration

Reads the ai.provider setting and instantiates the matching provider class.
"""

import importlib
import os
from typing import Any, Dict, Optional

from resume_optimizer.logging_config import get_logger

from .base import AIProvider

logger = get_logger(__name__)

# Registry of available providers
PROVIDERS = {
    "gemini": "resume_optimizer.ai.gemini_provider.GeminiProvider",
    "claude": "resume_optimizer.ai.claude.ClaudeProvider",
}

# Environment variable holding each provider's API key
PROVIDER_KEYS = {
    "gemini": "GEMINI_API_KEY",
    "claude": "ANTHROPIC_API_KEY",
}

DEFAULT_PROVIDER = "gemini"


def get_provider(config: Optional[Dict[str, Any]] = None) -> AIProvider:
    """
    Get the configured AI provider instance.

    Args:
        config: Optional configuration dict. If not provided, reads from
                resume_optimizer.config.get_config()

    Returns:
        AIProvider: An instance of the configured AI provider

    Raises:
        ValueError: If the specified provider is not supported
        ConfigurationError: If the provider's API key is missing

    Example:
        >>> get_provider({'ai': {'provider': 'claude'}}).provider_name
        'claude'
    """
    if config is None:
        from resume_optimizer.config import get_config

        config = get_config().to_dict()

    ai_config = config.get("ai", {})
    provider_name = (ai_config.get("provider") or DEFAULT_PROVIDER).lower()

    if provider_name not in PROVIDERS:
        available = ", ".join(PROVIDERS.keys())
        raise ValueError(
            f"Unknown AI provider: '{provider_name}'. " f"Available providers: {available}"
        )

    module_path, class_name = PROVIDERS[provider_name].rsplit(".", 1)
    module = importlib.import_module(module_path)
    provider_class = getattr(module, class_name)
    return provider_class(config)


def get_provider_info() -> Dict[str, Dict[str, Any]]:
    """
    Report which providers have an API key configured.

    Example:
        >>> get_provider_info()['gemini']
        {'env_var': 'GEMINI_API_KEY', 'has_key': True}
    """
    return {
        name: {"env_var": env_var, "has_key": bool(os.environ.get(env_var))}
        for name, env_var in PROVIDER_KEYS.items()
    }
