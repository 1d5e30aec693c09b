"""
Resume optimization flow

Validates the inputs, calls the configured provider once, and validates the
provider's output. Every outcome comes back as an OptimizationResult; only
the caller decides whether to persist it. No retry happens here.
"""

from typing import Any, Dict, Optional

from resume_optimizer.logging_config import get_logger

from .base import AIProvider, ConfigurationError
from .factory import get_provider
from .validation import (
    ErrorKind,
    OptimizationResult,
    validate_optimization_input,
    validate_optimization_response,
)

logger = get_logger(__name__)


def optimize_resume(
    base_resume: Optional[str],
    job_description: Optional[str],
    provider: Optional[AIProvider] = None,
    config: Optional[Dict[str, Any]] = None,
) -> OptimizationResult:
    """
    Optimize a resume for a job description.

    Input checks run before the provider is built, so invalid requests never
    reach the external API.

    Args:
        base_resume: Candidate's resume text
        job_description: Target job description
        provider: Provider to use; built from config when omitted
        config: Config dict passed to get_provider() when provider is omitted

    Returns:
        OptimizationResult: success, or a failure tagged with an ErrorKind
    """
    invalid = validate_optimization_input(base_resume, job_description)
    if invalid is not None:
        logger.warning(f"Optimization input rejected: {invalid.message}")
        return invalid

    if provider is None:
        try:
            provider = get_provider(config)
        except ConfigurationError as e:
            logger.error(f"AI provider not configured: {e}")
            return OptimizationResult.failure(
                ErrorKind.CONFIGURATION_ERROR,
                "The AI service is not properly configured. Please contact support.",
            )

    try:
        raw_text = provider.optimize_resume(base_resume, job_description)
    except Exception as e:
        logger.error(f"Error in {provider.provider_name} API call: {e}")
        return OptimizationResult.failure(
            ErrorKind.AI_SERVICE_ERROR,
            str(e) or "An error occurred while optimizing the resume. Please try again.",
        )

    return validate_optimization_response(raw_text)
