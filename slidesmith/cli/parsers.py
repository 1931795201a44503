"""CLI argument parsers and validators."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import typer

from ..config.loader import load_config, process_config, resolve_config_path
from ..core.errors import ConfigError
from ..core.models import ErrorHandling


def parse_error_handling(value: str) -> ErrorHandling:
    """Parse a missing-token policy name."""
    try:
        return ErrorHandling(value.strip().lower())
    except ValueError as e:
        allowed = ", ".join(p.value for p in ErrorHandling)
        raise typer.BadParameter(f"Must be one of {allowed}, got: {value!r}") from e


def parse_template_paths(values: list[str]) -> list[Path]:
    """Expand template arguments; a directory contributes its ``*.html`` files."""
    paths: list[Path] = []
    for value in values:
        path = Path(value)
        if path.is_dir():
            paths.extend(sorted(path.glob("*.html")))
        else:
            paths.append(path)
    if not paths:
        raise typer.BadParameter("No template files given")
    return paths


def parse_client_config(
    value: str, configs_dir: Path, *, apply_defaults: bool = True
) -> dict[str, Any]:
    """Load a client config by name or path."""
    path = resolve_config_path(value, configs_dir)
    try:
        raw = load_config(path)
        return process_config(raw) if apply_defaults else raw
    except FileNotFoundError as e:
        raise typer.BadParameter(
            f"Config file {str(path)!r} not found. "
            'Use a name like "john-boros" to load "configs/john-boros.json".'
        ) from e
    except ConfigError as e:
        raise typer.BadParameter(str(e)) from e
