"""Token templating engine."""

from .extractor import TokenCache, TokenExtractor, extract_tokens
from .processor import TemplateProcessor, create_processor, process_template
from .replacer import ReplacementOutcome, preview_replacements, replace_tokens
from .resolver import get_nested_value, resolve_token
from .validator import (
    find_missing_tokens,
    generate_validation_report,
    validate_against_tokens,
)

validate_config = validate_against_tokens

__all__ = [
    "ReplacementOutcome",
    "TemplateProcessor",
    "TokenCache",
    "TokenExtractor",
    "create_processor",
    "extract_tokens",
    "find_missing_tokens",
    "generate_validation_report",
    "get_nested_value",
    "preview_replacements",
    "process_template",
    "replace_tokens",
    "resolve_token",
    "validate_against_tokens",
    "validate_config",
]
