"""
Response validation for resume optimization

Turns the free text returned by a generation API into a validated
OptimizationResult. Models often wrap the JSON in markdown fences or add a
sentence before/after it, so the payload is extracted first and then
checked field by field. Nothing here raises; every problem becomes a
failure result with an ErrorKind the caller can map to a response.
"""

import json
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from resume_optimizer.logging_config import get_logger

logger = get_logger(__name__)

MIN_INPUT_LENGTH = 10
MIN_RESUME_LENGTH = 100
MIN_SUMMARY_LENGTH = 20

_FENCE_PATTERNS = (re.compile(r"```json\s*"), re.compile(r"```\s*"))


class ErrorKind(str, Enum):
    """Failure kinds reported by the optimize flow."""

    MISSING_REQUIRED_DATA = "MissingRequiredData"
    INVALID_INPUT = "InvalidInput"
    CONFIGURATION_ERROR = "ConfigurationError"
    PROCESSING_ERROR = "ProcessingError"
    INVALID_RESPONSE_FORMAT = "InvalidResponseFormat"
    INVALID_RESUME_FORMAT = "InvalidResumeFormat"
    INVALID_CHANGES_SUMMARY = "InvalidChangesSummary"
    INVALID_CONTENT_LENGTH = "InvalidContentLength"
    INVALID_SUMMARY_LENGTH = "InvalidSummaryLength"
    AI_SERVICE_ERROR = "AIServiceError"

    @property
    def label(self) -> str:
        """Human-readable name, e.g. 'Processing Error'."""
        return _LABELS[self]

    @property
    def category(self) -> str:
        """Coarse grouping clients use to decide whether a retry makes sense."""
        if self is ErrorKind.CONFIGURATION_ERROR:
            return "configuration"
        if self in (ErrorKind.MISSING_REQUIRED_DATA, ErrorKind.INVALID_INPUT):
            return "invalid_input"
        if self is ErrorKind.AI_SERVICE_ERROR:
            return "service_error"
        return "invalid_ai_response"


_LABELS = {
    ErrorKind.MISSING_REQUIRED_DATA: "Missing Required Data",
    ErrorKind.INVALID_INPUT: "Invalid Input",
    ErrorKind.CONFIGURATION_ERROR: "Configuration Error",
    ErrorKind.PROCESSING_ERROR: "Processing Error",
    ErrorKind.INVALID_RESPONSE_FORMAT: "Invalid Response Format",
    ErrorKind.INVALID_RESUME_FORMAT: "Invalid Resume Format",
    ErrorKind.INVALID_CHANGES_SUMMARY: "Invalid Changes Summary",
    ErrorKind.INVALID_CONTENT_LENGTH: "Invalid Content Length",
    ErrorKind.INVALID_SUMMARY_LENGTH: "Invalid Summary Length",
    ErrorKind.AI_SERVICE_ERROR: "AI Service Error",
}


@dataclass(frozen=True)
class OptimizationResult:
    """
    Outcome of one optimization request.

    Success carries optimized_resume and changes_summary; failure carries
    error_kind and a user-facing message. Use the classmethods to build one.
    """

    optimized_resume: Optional[str] = None
    changes_summary: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    message: Optional[str] = None

    @classmethod
    def success(cls, optimized_resume: str, changes_summary: str) -> "OptimizationResult":
        return cls(optimized_resume=optimized_resume, changes_summary=changes_summary)

    @classmethod
    def failure(cls, error_kind: ErrorKind, message: str) -> "OptimizationResult":
        return cls(error_kind=error_kind, message=message)

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    def to_dict(self) -> Dict[str, Any]:
        if self.ok:
            return {
                "optimizedResume": self.optimized_resume,
                "changesSummary": self.changes_summary,
            }
        return {
            "error": self.error_kind.label,
            "errorKind": self.error_kind.value,
            "category": self.error_kind.category,
            "message": self.message,
        }


def validate_optimization_input(
    base_resume: Optional[str], job_description: Optional[str]
) -> Optional[OptimizationResult]:
    """
    Check the inputs before any generation call is made.

    Returns:
        A failure result, or None when both inputs are usable
    """
    if not base_resume or not job_description:
        return OptimizationResult.failure(
            ErrorKind.MISSING_REQUIRED_DATA,
            "Resume and job description are required for optimization.",
        )

    if not isinstance(base_resume, str) or not isinstance(job_description, str):
        return OptimizationResult.failure(
            ErrorKind.INVALID_INPUT,
            "The resume and job description must be text.",
        )

    if len(base_resume) < MIN_INPUT_LENGTH:
        return OptimizationResult.failure(
            ErrorKind.INVALID_INPUT,
            "The provided resume is too short. Please provide a more detailed resume.",
        )

    if len(job_description) < MIN_INPUT_LENGTH:
        return OptimizationResult.failure(
            ErrorKind.INVALID_INPUT,
            "The job description is too short. Please provide a more detailed job description.",
        )

    return None


def extract_json_payload(raw_text: str) -> str:
    """
    Strip code fences and surrounding prose from an AI response.

    Example:
        >>> extract_json_payload('Sure!\\n```json\\n{"a": 1}\\n```')
        '{"a": 1}'
    """
    text = raw_text or ""
    for pattern in _FENCE_PATTERNS:
        text = pattern.sub("", text)
    text = text.strip()

    if not text.startswith("{"):
        start = text.find("{")
        if start != -1:
            text = text[start:]
    if not text.endswith("}"):
        end = text.rfind("}")
        if end != -1:
            text = text[: end + 1]

    return text


def validate_optimization_response(raw_text: str) -> OptimizationResult:
    """
    Validate raw generation output as an optimization result.

    Checks run in order and stop at the first failure: JSON parse, object
    shape, optimizedResume text, changesSummary text, optimizedResume length,
    changesSummary length.

    Args:
        raw_text: Text returned by the generation API

    Returns:
        OptimizationResult: success with both fields unchanged, or a failure
    """
    cleaned = extract_json_payload(raw_text)

    try:
        parsed = json.loads(cleaned)
    except (ValueError, TypeError, RecursionError) as e:
        logger.error(f"Failed to parse AI response: {e}")
        return OptimizationResult.failure(
            ErrorKind.PROCESSING_ERROR,
            "Failed to process the AI response. Please try again.",
        )

    if not isinstance(parsed, dict):
        logger.error("Invalid JSON structure received from AI")
        return OptimizationResult.failure(
            ErrorKind.INVALID_RESPONSE_FORMAT,
            "The AI provided an invalid response structure. Please try again.",
        )

    optimized_resume = parsed.get("optimizedResume")
    changes_summary = parsed.get("changesSummary")

    if not optimized_resume or not isinstance(optimized_resume, str):
        logger.error("Missing or invalid optimizedResume in AI response")
        return OptimizationResult.failure(
            ErrorKind.INVALID_RESUME_FORMAT,
            "The optimized resume format was invalid. Please try again.",
        )

    if not changes_summary or not isinstance(changes_summary, str):
        logger.error("Missing or invalid changesSummary in AI response")
        return OptimizationResult.failure(
            ErrorKind.INVALID_CHANGES_SUMMARY,
            "The changes summary was not provided. Please try again.",
        )

    if len(optimized_resume) < MIN_RESUME_LENGTH:
        logger.error(f"Optimized resume too short: {len(optimized_resume)}")
        return OptimizationResult.failure(
            ErrorKind.INVALID_CONTENT_LENGTH,
            "The generated resume is too short. Please try again.",
        )

    if len(changes_summary) < MIN_SUMMARY_LENGTH:
        logger.error(f"Changes summary too short: {len(changes_summary)}")
        return OptimizationResult.failure(
            ErrorKind.INVALID_SUMMARY_LENGTH,
            "The changes summary is too brief. Please try again.",
        )

    return OptimizationResult.success(optimized_resume, changes_summary)
