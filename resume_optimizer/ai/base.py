"""
Base AI Provider - Abstract base class for AI providers

This module defines the interface for generation backends (Gemini, Claude).
Providers only produce raw text; parsing and validation of that text
happens in resume_optimizer.ai.validation so every backend is held to the
same rules.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from resume_optimizer.logging_config import get_logger

from .prompts import build_optimize_resume_prompt

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 60.0


class ConfigurationError(Exception):
    """Raised when a provider is missing its API key or other settings."""


class AIProvider(ABC):
    """
    Abstract base class for AI providers.

    Implementations wrap one vendor SDK and expose a single text
    generation call bounded by a timeout.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Args:
            config: Configuration dict with optional 'ai.model' and
                'ai.timeout_seconds' settings
        """
        ai_config = (config or {}).get("ai", {})
        self._timeout = float(ai_config.get("timeout_seconds") or DEFAULT_TIMEOUT_SECONDS)

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """
        Return the name of this AI provider.

        Returns:
            str: Provider name (e.g., 'gemini', 'claude')
        """
        pass

    @property
    @abstractmethod
    def model_name(self) -> str:
        """
        Return the model being used.

        Returns:
            str: Model identifier (e.g., 'gemini-1.5-flash-latest')
        """
        pass

    @property
    def timeout(self) -> float:
        """Seconds a single generation call may take."""
        return self._timeout

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """
        Send a prompt to the model and return its text output.

        Args:
            prompt: Full prompt text

        Returns:
            str: Raw model output (may contain fences or prose around JSON)

        Raises:
            Exception: Any SDK or transport error; callers map it to
                an AI service failure
        """
        pass

    def optimize_resume(self, base_resume: str, job_description: str) -> str:
        """
        Ask the model to optimize a resume for a job description.

        Returns:
            str: Raw model output, expected to contain a JSON object with
                'optimizedResume' and 'changesSummary'
        """
        prompt = build_optimize_resume_prompt(base_resume, job_description)
        logger.info(f"Sending optimization prompt to {self.provider_name} ({self.model_name})")
        text = self.generate(prompt)
        logger.debug(f"Raw response from {self.provider_name}: {text}")
        return text
