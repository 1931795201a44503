"""Validation of configuration values against the tokens a template needs."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Iterable, Sequence

from ..core.models import (
    Found,
    FoundToken,
    MissingToken,
    ReportSummary,
    ValidationReport,
    ValidationResult,
)
from .resolver import get_all_config_paths, json_type_name, resolve_token, set_nested_value

logger = logging.getLogger(__name__)


def validate_against_tokens(
    config: Mapping[str, Any],
    tokens: Sequence[str],
    *,
    strict_mode: bool = False,
    allow_empty: bool = False,
    warn_on_unused: bool = False,
) -> ValidationResult:
    """Check which tokens resolve against ``config``.

    Args:
        config: Configuration mapping
        tokens: Token names required by the template(s)
        strict_mode: Missing tokens become errors and invalidate the result
        allow_empty: Empty strings count as found
        warn_on_unused: Report config leaf paths that no token references

    Returns:
        Validation result; ``valid`` is False only in strict mode with at
        least one missing token
    """
    result = ValidationResult()

    for token in tokens:
        resolution = resolve_token(config, token, allow_empty=allow_empty)
        if isinstance(resolution, Found):
            result.found.append(
                FoundToken(token=token, value=resolution.value, type=json_type_name(resolution.value))
            )
            continue

        reason = resolution.reason.value
        result.missing.append(MissingToken(token=token, reason=reason))
        if strict_mode:
            result.errors.append(f"Required token '{token}' is missing: {reason}")
            result.valid = False
        else:
            result.warnings.append(f"Token '{token}' is missing: {reason}")

    if warn_on_unused:
        result.unused = find_unused_config_values(config, tokens)
        if result.unused:
            result.warnings.append(f"Unused config values: {', '.join(result.unused)}")

    logger.debug(
        f"Validated {len(tokens)} token(s): {len(result.found)} found, {len(result.missing)} missing"
    )
    return result


def find_missing_tokens(config: Mapping[str, Any], tokens: Iterable[str]) -> list[str]:
    return [
        token
        for token in tokens
        if not isinstance(resolve_token(config, token, allow_empty=False), Found)
    ]


def find_unused_config_values(config: Mapping[str, Any], used_tokens: Iterable[str]) -> list[str]:
    used = set(used_tokens)
    return [path for path in get_all_config_paths(config) if path not in used]


def generate_config_suggestions(missing: Iterable[MissingToken]) -> dict[str, Any]:
    """Build a config skeleton with a ``[token]`` placeholder for each missing token."""
    suggestions: dict[str, Any] = {}
    for item in missing:
        set_nested_value(suggestions, item.token, f"[{item.token}]")
    return suggestions


def generate_validation_report(
    config: Mapping[str, Any],
    tokens: Sequence[str],
    *,
    strict_mode: bool = False,
    allow_empty: bool = False,
    warn_on_unused: bool = False,
) -> ValidationReport:
    """Validate and attach recommendations for fixing the configuration."""
    validation = validate_against_tokens(
        config,
        tokens,
        strict_mode=strict_mode,
        allow_empty=allow_empty,
        warn_on_unused=warn_on_unused,
    )

    report = ValidationReport(
        summary=ReportSummary(
            total=len(tokens),
            found=len(validation.found),
            missing=len(validation.missing),
            valid=validation.valid,
        ),
        details=validation,
    )

    if validation.missing:
        report.recommendations.append("Add missing tokens to your config file")
        suggested = generate_config_suggestions(validation.missing)
        if suggested:
            report.suggested_config = suggested
            report.recommendations.append("Consider adding these fields to your config")

    if validation.unused:
        report.recommendations.append("Remove unused config values to keep config clean")

    return report
