"""Environment validation: the process refuses to start on bad configuration."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from newsfront.exceptions import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

logger = logging.getLogger(__name__)

_GA_ID_PATTERN = re.compile(r"G-[A-Za-z0-9]+")
_PUBLIC_PREFIX = "PUBLIC_"
_SITE_METADATA_VARS = (
    "SITE_URL",
    "SITE_TITLE",
    "SITE_DESCRIPTION",
    "SITE_NAME",
    "SITE_COPYRIGHT",
)


def _is_absolute_url(value: str) -> bool:
    try:
        parts = urlsplit(value.strip())
    except ValueError:
        return False
    return bool(parts.scheme) and bool(parts.netloc)


def _is_non_empty(value: str) -> bool:
    return len(value) > 0


def _is_secret(value: str) -> bool:
    return len(value) >= 8


def _is_ga_id(value: str) -> bool:
    return _GA_ID_PATTERN.fullmatch(value) is not None


def _is_bool_flag(value: str) -> bool:
    return value in ("true", "false")


@dataclass(frozen=True)
class EnvVarRule:
    """Validation rule for one environment variable."""

    required: bool
    validate: Callable[[str], bool]
    error_message: str
    description: str


@dataclass(frozen=True)
class EnvError:
    variable: str
    message: str


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating an environment mapping against ``ENV_SPEC``."""

    is_valid: bool
    errors: tuple[EnvError, ...] = ()
    missing_variables: tuple[str, ...] = ()
    warnings: tuple[str, ...] = field(default_factory=tuple)


ENV_SPEC: Mapping[str, EnvVarRule] = MappingProxyType(
    {
        "WPGRAPHQL_ENDPOINT": EnvVarRule(
            required=True,
            validate=_is_absolute_url,
            error_message="Must be a valid URL to WordPress GraphQL endpoint",
            description="WordPress GraphQL API endpoint URL",
        ),
        "REVALIDATE_SECRET": EnvVarRule(
            required=True,
            validate=_is_secret,
            error_message="Must be at least 8 characters long",
            description="Secret key for on-demand revalidation",
        ),
        "SITE_URL": EnvVarRule(
            required=True,
            validate=_is_absolute_url,
            error_message="Must be a valid URL",
            description="Production site URL",
        ),
        "SITE_TITLE": EnvVarRule(
            required=True,
            validate=_is_non_empty,
            error_message="Cannot be empty",
            description="Website title",
        ),
        "SITE_DESCRIPTION": EnvVarRule(
            required=True,
            validate=_is_non_empty,
            error_message="Cannot be empty",
            description="Website description",
        ),
        "SITE_NAME": EnvVarRule(
            required=True,
            validate=_is_non_empty,
            error_message="Cannot be empty",
            description="Website name",
        ),
        "SITE_COPYRIGHT": EnvVarRule(
            required=True,
            validate=_is_non_empty,
            error_message="Cannot be empty",
            description="Copyright notice",
        ),
        "PUBLIC_GA_ID": EnvVarRule(
            required=False,
            validate=_is_ga_id,
            error_message="Must be in format G-XXXXXXXXXX",
            description="Google Analytics 4 measurement ID",
        ),
        "PUBLIC_GA_DEBUG": EnvVarRule(
            required=False,
            validate=_is_bool_flag,
            error_message='Must be "true" or "false"',
            description="Enable analytics debug logging",
        ),
    }
)


def validate_env(
    env: Mapping[str, str | None],
    spec: Mapping[str, EnvVarRule] = ENV_SPEC,
) -> ValidationResult:
    """Validate every variable in ``spec`` against ``env``.

    Each variable is checked independently; all failures are collected.
    Absent means missing, ``None``, empty or whitespace-only.
    """
    errors: list[EnvError] = []
    missing: list[str] = []
    warnings: list[str] = []

    for name, rule in spec.items():
        value = env.get(name)
        if value is None or not value.strip():
            if rule.required:
                missing.append(name)
                errors.append(
                    EnvError(
                        variable=name,
                        message=(
                            f"Required environment variable missing: {name} ({rule.description})"
                        ),
                    )
                )
            else:
                warnings.append(f"Optional variable not set: {name}")
            continue

        if not rule.validate(value):
            errors.append(EnvError(variable=name, message=rule.error_message))

    return ValidationResult(
        is_valid=not errors,
        errors=tuple(errors),
        missing_variables=tuple(missing),
        warnings=tuple(warnings),
    )


def format_validation_errors(result: ValidationResult) -> str:
    """Render a diagnostic listing every missing or invalid variable."""
    lines = ["Environment configuration error: the service will not start."]
    if result.missing_variables:
        lines.append("Missing required variables:")
        lines.extend(f"  - {name}" for name in result.missing_variables)
    invalid = [e for e in result.errors if e.variable not in result.missing_variables]
    if invalid:
        lines.append("Invalid variable values:")
        lines.extend(f"  - {e.variable}: {e.message}" for e in invalid)
    return "\n".join(lines)


def validate_env_or_throw(
    env: Mapping[str, str | None],
    spec: Mapping[str, EnvVarRule] = ENV_SPEC,
) -> ValidationResult:
    """Validate ``env`` and raise ``ConfigurationError`` if anything is wrong."""
    result = validate_env(env, spec)
    if not result.is_valid:
        raise ConfigurationError(
            format_validation_errors(result),
            errors=result.errors,
            missing_variables=result.missing_variables,
        )
    for warning in result.warnings:
        logger.info("Environment: %s", warning)
    return result


def get_safe_env_vars(env: Mapping[str, str | None]) -> dict[str, str]:
    """Return the variables that are safe to expose to browser-side code."""
    safe: dict[str, str] = {}
    for key, value in env.items():
        if key.startswith(_PUBLIC_PREFIX) and value:
            safe[key] = value
    for key in _SITE_METADATA_VARS:
        value = env.get(key)
        if value:
            safe[key] = value
    return safe


def is_production(environment: str | None) -> bool:
    return (environment or "").strip().lower() in ("production", "prod")


def log_env_status(env: Mapping[str, str | None]) -> ValidationResult:
    """Log a summary of the configuration state without raising."""
    result = validate_env(env)
    if result.is_valid:
        logger.info("All required environment variables are properly configured")
    else:
        logger.error("Environment configuration incomplete")
        for error in result.errors:
            logger.error("  - %s: %s", error.variable, error.message)
    for warning in result.warnings:
        logger.warning("  - %s", warning)
    return result
