"""
AI Package - Resume optimization for the Resume Optimizer API

Supports two generation backends: Gemini (default) and Claude.

Usage:
    from resume_optimizer.ai import optimize_resume

    result = optimize_resume(job["baseResume"], job["jobDescription"])
    if result.ok:
        ...save result.optimized_resume and result.changes_summary...
    else:
        ...report result.error_kind and result.message...
"""

from .base import AIProvider, ConfigurationError
from .claude import ClaudeProvider
from .gemini_provider import GeminiProvider
from .factory import get_provider, get_provider_info
from .optimizer import optimize_resume
from .validation import (
    ErrorKind,
    OptimizationResult,
    extract_json_payload,
    validate_optimization_input,
    validate_optimization_response,
)

__all__ = [
    # Base
    "AIProvider",
    "ConfigurationError",
    # Providers
    "ClaudeProvider",
    "GeminiProvider",
    # Factory
    "get_provider",
    "get_provider_info",
    # Optimization
    "optimize_resume",
    "ErrorKind",
    "OptimizationResult",
    "extract_json_payload",
    "validate_optimization_input",
    "validate_optimization_response",
]
