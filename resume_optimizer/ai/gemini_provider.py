"""
Gemini AI Provider - Google Gemini implementation

Default backend for resume optimization.
"""

import os
from typing import Any, Dict, Optional

import google.generativeai as genai

from resume_optimizer.logging_config import get_logger

from .base import AIProvider, ConfigurationError

logger = get_logger(__name__)

DEFAULT_MODEL = "gemini-1.5-flash-latest"

GENERATION_CONFIG = {
    "temperature": 0.7,
    "top_k": 40,
    "top_p": 0.95,
    "max_output_tokens": 2048,
}


class GeminiProvider(AIProvider):
    """Gemini AI provider using the google-generativeai SDK."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize Gemini provider.

        Args:
            config: Configuration dict with optional 'ai.model' setting

        Raises:
            ConfigurationError: If GEMINI_API_KEY is not set
        """
        super().__init__(config)
        ai_config = (config or {}).get("ai", {})
        self._model = ai_config.get("model") or DEFAULT_MODEL

        api_key = os.environ.get("GEMINI_API_KEY")
        if not api_key:
            logger.error("Gemini API key is missing in environment variables")
            raise ConfigurationError(
                "GEMINI_API_KEY not found. Set it in .env or environment variables."
            )

        genai.configure(api_key=api_key)
        logger.info(f"Initializing Gemini model {self._model} with config: {GENERATION_CONFIG}")
        self._client = genai.GenerativeModel(self._model, generation_config=GENERATION_CONFIG)

    @property
    def provider_name(self) -> str:
        return "gemini"

    @property
    def model_name(self) -> str:
        return self._model

    def generate(self, prompt: str) -> str:
        """Generate a response using Gemini."""
        try:
            response = self._client.generate_content(
                prompt, request_options={"timeout": self.timeout}
            )
        except Exception as e:
            logger.error(f"Error generating content: {e}")
            raise

        if response is None:
            raise RuntimeError("No response from Gemini API")
        return response.text
