"""
Startup validation and health checks for the Resume Optimizer API.

Validates environment and configuration before the application starts and
reports live health for the /api/health endpoint. A missing database is
never fatal: the API starts anyway and serves in limited mode.
"""

import os
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from resume_optimizer.ai.factory import PROVIDER_KEYS, get_provider_info
from resume_optimizer.config import Config, get_config
from resume_optimizer.logging_config import get_logger

logger = get_logger(__name__)


class ValidationResult:
    """Result of a validation check."""

    def __init__(
        self,
        name: str,
        passed: bool,
        message: str,
        severity: str = "error",  # error, warning, info
        fix_hint: Optional[str] = None,
    ):
        self.name = name
        self.passed = passed
        self.message = message
        self.severity = severity
        self.fix_hint = fix_hint

    def __str__(self) -> str:
        status = "PASS" if self.passed else self.severity.upper()
        return f"[{status}] {self.name}: {self.message}"


def validate_environment(config: Optional[Config] = None) -> List[ValidationResult]:
    """
    Validate environment variables and configuration.

    Returns:
        List of validation results
    """
    results = []

    try:
        config = config or get_config()
    except (ValueError, OSError) as e:
        return [
            ValidationResult(
                name="Configuration",
                passed=False,
                message=f"Invalid configuration: {e}",
                severity="error",
                fix_hint="Check config.yaml and environment variables",
            )
        ]

    key_var = PROVIDER_KEYS[config.ai_provider]
    if os.environ.get(key_var):
        results.append(
            ValidationResult(
                name="AI Provider",
                passed=True,
                message=f"{config.ai_provider} configured ({key_var} set)",
                severity="info",
            )
        )
    else:
        results.append(
            ValidationResult(
                name="AI Provider",
                passed=False,
                message=f"{key_var} not set; optimize requests will report a configuration error",
                severity="warning",
                fix_hint=f"Add {key_var}=... to your .env file",
            )
        )

    if config.mongo_uri:
        results.append(
            ValidationResult(
                name="MongoDB URI",
                passed=True,
                message="MONGO_URI configured",
                severity="info",
            )
        )
    else:
        results.append(
            ValidationResult(
                name="MongoDB URI",
                passed=False,
                message=f"MONGO_URI not set; only the local fallback ({config.mongo_fallback_uri}) will be tried",
                severity="warning",
                fix_hint="Add MONGO_URI=mongodb+srv://... to your .env file",
            )
        )

    if config.environment not in ("development", "production", "testing"):
        results.append(
            ValidationResult(
                name="Environment",
                passed=False,
                message=f"Unknown environment '{config.environment}', using defaults",
                severity="warning",
            )
        )

    return results


def run_startup_validation(
    strict: bool = False, log_results: bool = True, config: Optional[Config] = None
) -> Tuple[bool, List[ValidationResult]]:
    """
    Run all startup validations.

    Args:
        strict: If True, treat warnings as errors
        log_results: If True, log validation results
        config: Config to validate (defaults to get_config())

    Returns:
        Tuple of (all_passed, results)
    """
    try:
        all_results = validate_environment(config)
    except Exception as e:
        all_results = [
            ValidationResult(
                name="Environment Validation",
                passed=False,
                message=f"Validation failed with error: {e}",
                severity="error",
            )
        ]

    if log_results:
        logger.info("=" * 60)
        logger.info("STARTUP VALIDATION RESULTS")
        logger.info("=" * 60)

        for result in all_results:
            if result.passed or result.severity == "info":
                logger.info(str(result))
            elif result.severity == "error":
                logger.error(str(result))
                if result.fix_hint:
                    logger.error(f"  Hint: {result.fix_hint}")
            else:
                logger.warning(str(result))
                if result.fix_hint:
                    logger.warning(f"  Hint: {result.fix_hint}")

        logger.info("=" * 60)

    errors = [r for r in all_results if not r.passed and r.severity == "error"]
    warnings = [r for r in all_results if not r.passed and r.severity == "warning"]

    if errors:
        logger.error(f"Startup validation failed with {len(errors)} error(s)")
        return False, all_results

    if strict and warnings:
        logger.error(f"Startup validation failed with {len(warnings)} warning(s) (strict mode)")
        return False, all_results

    logger.info("Startup validation passed")
    return True, all_results


def get_health_status(supervisor=None, provider_name: Optional[str] = None) -> Dict:
    """
    Get current health status for health check endpoint.

    Overall status is "degraded" while the database is down or the AI key
    is missing.

    Args:
        supervisor: ConnectionSupervisor to report on (optional)
        provider_name: Configured AI provider name

    Returns:
        Health status dictionary
    """
    status = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "checks": {},
    }

    if supervisor is None:
        status["status"] = "degraded"
        status["checks"]["database"] = {"status": "unknown"}
    else:
        db_status = supervisor.status()
        db_status["status"] = "healthy" if supervisor.is_connected else "unhealthy"
        status["checks"]["database"] = db_status
        if not supervisor.is_connected:
            status["status"] = "degraded"

    provider_info = get_provider_info()
    if provider_name in provider_info:
        has_key = provider_info[provider_name]["has_key"]
        status["checks"]["ai_provider"] = {
            "status": "healthy" if has_key else "unhealthy",
            "provider": provider_name,
            "has_key": has_key,
        }
        if not has_key:
            status["status"] = "degraded"

    return status
