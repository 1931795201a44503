"""Exception hierarchy for template processing."""

from __future__ import annotations

from pathlib import Path


class SlidesmithError(Exception):
    """Base class for all slidesmith errors."""


class TemplateNotFoundError(SlidesmithError, FileNotFoundError):
    """Raised when a template file does not exist at read time."""

    def __init__(self, path: str | Path):
        self.path = str(path)
        super().__init__(f"Template file not found: {self.path}")


class TokenReplacementError(SlidesmithError):
    """Raised under the ``fail`` policy when tokens cannot be resolved.

    The message lists every missing token found during the pass.
    """

    def __init__(self, missing: list[str], messages: list[str] | None = None):
        self.missing = list(missing)
        self.messages = list(messages or [f"Token '{t}' not found in config" for t in missing])
        super().__init__("Token replacement failed:\n" + "\n".join(self.messages))


class TemplateValidationError(SlidesmithError):
    """Raised when strict validation fails for a template."""

    def __init__(self, template_path: str, errors: list[str]):
        self.template_path = template_path
        self.errors = list(errors)
        super().__init__(
            f"Template validation failed for {template_path}:\n" + "\n".join(self.errors)
        )


class ConfigError(SlidesmithError, ValueError):
    """Raised when a client configuration cannot be loaded or is invalid."""

    def __init__(self, issues: list[str]):
        self.issues = [str(i).strip() for i in issues if str(i).strip()]
        if not self.issues:
            self.issues = ["Invalid configuration"]
        super().__init__(self._format())

    def _format(self) -> str:
        lines = ["Configuration validation failed:"]
        for issue in self.issues:
            lines.append(f"- {issue}")
        return "\n".join(lines)
