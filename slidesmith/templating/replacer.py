"""Token substitution with a configurable missing-token policy."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Sequence

from ..core.errors import TokenReplacementError
from ..core.models import (
    ErrorHandling,
    Found,
    PreviewError,
    PreviewMissing,
    PreviewToken,
    ReplacementPreview,
)
from .extractor import extract_tokens, substitute_markers
from .resolver import resolve_token, stringify

logger = logging.getLogger(__name__)

DEFAULT_PLACEHOLDER = "[MISSING]"


@dataclass
class ReplacementOutcome:
    text: str
    warnings: list[str] = field(default_factory=list)
    replaced: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)


def replace_tokens(
    text: str,
    config: Mapping[str, Any],
    tokens: Sequence[str] | None = None,
    *,
    error_handling: ErrorHandling | str = ErrorHandling.WARN,
    missing_token_placeholder: str = DEFAULT_PLACEHOLDER,
    preserve_unknown_tokens: bool = False,
    allow_empty: bool = False,
) -> ReplacementOutcome:
    """Replace every token marker in ``text`` with its configured value.

    Args:
        text: Template content
        config: Configuration mapping
        tokens: Tokens to replace; extracted from ``text`` when omitted
        error_handling: ``fail``, ``warn`` or ``graceful``
        missing_token_placeholder: Replacement for unresolved tokens
        preserve_unknown_tokens: Leave unresolved markers untouched
        allow_empty: Substitute empty strings instead of treating them as missing

    Returns:
        Replacement outcome with the new text and any warnings

    Raises:
        TokenReplacementError: Under ``fail`` when any token is missing; the
            error lists all of them
    """
    policy = ErrorHandling(error_handling)
    if tokens is None:
        tokens = extract_tokens(text)

    outcome = ReplacementOutcome(text=text)
    messages: list[str] = []
    table: dict[str, str] = {}

    for token in tokens:
        resolution = resolve_token(config, token, allow_empty=allow_empty)

        if isinstance(resolution, Found):
            table[token] = stringify(resolution.value)
            outcome.replaced.append(token)
            continue

        outcome.missing.append(token)
        messages.append(f"Token '{token}' {resolution.reason.value}")

        if policy is ErrorHandling.FAIL or preserve_unknown_tokens:
            continue
        table[token] = missing_token_placeholder

    outcome.text = substitute_markers(text, table.get)

    if not messages:
        return outcome

    if policy is ErrorHandling.FAIL:
        raise TokenReplacementError(outcome.missing, messages)

    if policy is ErrorHandling.WARN:
        for message in messages:
            logger.warning(message)
        outcome.warnings = messages
    else:
        logger.debug(f"Substituted placeholder for {len(messages)} missing token(s)")

    return outcome


def preview_replacements(
    text: str,
    config: Mapping[str, Any],
    tokens: Sequence[str] | None = None,
) -> ReplacementPreview:
    """Resolve tokens without touching the text, for dry runs."""
    if tokens is None:
        tokens = extract_tokens(text)

    preview = ReplacementPreview()
    for token in tokens:
        resolution = resolve_token(config, token)
        if not isinstance(resolution, Found):
            preview.missing.append(PreviewMissing(token=token, path=token))
            continue
        try:
            value = stringify(resolution.value)
        except (TypeError, ValueError) as exc:
            preview.errors.append(PreviewError(token=token, error=str(exc)))
            continue
        preview.tokens.append(PreviewToken(token=token, value=value))
    return preview
