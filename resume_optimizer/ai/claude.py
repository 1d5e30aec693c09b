"""
Claude AI Provider - Anthropic Claude implementation

Alternative backend, selected with ai.provider: claude (or AI_PROVIDER=claude).
"""

import os
from typing import Any, Dict, Optional

import anthropic

from resume_optimizer.logging_config import get_logger

from .base import AIProvider, ConfigurationError

logger = get_logger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-20250514"
MAX_TOKENS = 4096


class ClaudeProvider(AIProvider):
    """Claude AI provider using the Anthropic API."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize Claude provider.

        Args:
            config: Configuration dict with optional 'ai.model' setting

        Raises:
            ConfigurationError: If ANTHROPIC_API_KEY is not set
        """
        super().__init__(config)
        ai_config = (config or {}).get("ai", {})
        self._model = ai_config.get("model") or DEFAULT_MODEL

        api_key = os.environ.get("ANTHROPIC_API_KEY")
        if not api_key:
            raise ConfigurationError(
                "ANTHROPIC_API_KEY not found. Set it in .env or environment variables."
            )

        self._client = anthropic.Anthropic(api_key=api_key, timeout=self.timeout)

    @property
    def provider_name(self) -> str:
        return "claude"

    @property
    def model_name(self) -> str:
        return self._model

    def generate(self, prompt: str) -> str:
        """Generate a response using Claude."""
        try:
            response = self._client.messages.create(
                model=self._model,
                max_tokens=MAX_TOKENS,
                messages=[{"role": "user", "content": prompt}],
            )
            return response.content[0].text.strip()
        except Exception as e:
            logger.error(f"Claude generation error: {e}")
            raise
