"""Slidesmith - Config-driven HTML slide customizer.

Substitutes ``{{token}}`` placeholders in slide templates with values from a
per-client JSON configuration.
"""

__version__ = "0.1.0"

# Configure logging for library use
import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

from .templating import (
    TemplateProcessor,
    TokenExtractor,
    create_processor,
    extract_tokens,
    generate_validation_report,
    preview_replacements,
    process_template,
    replace_tokens,
    validate_config,
)

# Re-export main CLI entry point
from .cli import main

__all__ = [
    "main",
    "TemplateProcessor",
    "TokenExtractor",
    "create_processor",
    "extract_tokens",
    "generate_validation_report",
    "preview_replacements",
    "process_template",
    "replace_tokens",
    "validate_config",
]
