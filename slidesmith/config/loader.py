"""Client configuration loading, defaults and validation."""

from __future__ import annotations

import copy
import json
import logging
import re
from datetime import date
from pathlib import Path
from typing import Any

import yaml

from ..core.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_PAYMENT: dict[str, str] = {
    "amount": "Pay $1,000",
    "description": "Deposit to Start",
    "provider": "Bonsai",
}

TEMPLATE_SHORTCUTS: dict[str, str] = {
    "discovery": "discovery-planning-agreement",
    "agreement": "discovery-planning-agreement",
    "planning": "discovery-planning-agreement",
}

_REQUIRED_PAYMENT_FIELDS = ("amount", "description", "provider")


def default_date(today: date | None = None) -> str:
    """Long-form date used when a config leaves ``date`` empty, e.g. ``June 6, 2025``."""
    today = today or date.today()
    return f"{today:%B} {today.day}, {today.year}"


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def apply_defaults(raw: dict[str, Any], *, today: date | None = None) -> dict[str, Any]:
    """Return a copy of ``raw`` with ``date`` and ``payment`` defaults filled in."""
    config = copy.deepcopy(raw)

    if _is_blank(config.get("date")):
        config["date"] = default_date(today)

    payment = config.get("payment")
    if not isinstance(payment, dict):
        config["payment"] = dict(DEFAULT_PAYMENT)
    else:
        for key, default in DEFAULT_PAYMENT.items():
            if not payment.get(key):
                payment[key] = default

    return config


def validate_client_config(config: dict[str, Any]) -> list[str]:
    """Check the fields every client configuration must provide.

    Returns:
        List of issues; empty when the configuration is usable
    """
    issues: list[str] = []

    if _is_blank(config.get("client_name")):
        issues.append('client_name is required (e.g., "John Doe, Acme Corp")')

    payment = config.get("payment")
    if not isinstance(payment, dict):
        issues.append("payment object is required")
        return issues

    for field in _REQUIRED_PAYMENT_FIELDS:
        if _is_blank(payment.get(field)):
            issues.append(f"payment.{field} is required (e.g., {DEFAULT_PAYMENT[field]!r})")

    return issues


def process_config(raw: dict[str, Any], *, today: date | None = None) -> dict[str, Any]:
    """Apply defaults, then validate.

    Raises:
        ConfigError: If required fields are still missing
    """
    config = apply_defaults(raw, today=today)
    issues = validate_client_config(config)
    if issues:
        raise ConfigError(issues)
    return config


def load_config(path: Path) -> dict[str, Any]:
    """Load a client configuration from a JSON or YAML file.

    Args:
        path: Config file path (``.json``, ``.yaml`` or ``.yml``)

    Returns:
        Parsed configuration mapping

    Raises:
        FileNotFoundError: If the file does not exist
        ConfigError: If the file cannot be parsed or is not a mapping
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    text = path.read_text(encoding="utf-8")
    logger.debug(f"Reading config from: {path}")

    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(text) or {}
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError([f"Invalid config file {path}: {exc}"]) from exc

    if not isinstance(data, dict):
        raise ConfigError([f"Config file {path} must contain an object at the top level"])

    return data


def resolve_config_path(name: str, configs_dir: Path = Path("configs")) -> Path:
    """Resolve a config argument: ``john-boros`` becomes ``configs/john-boros.json``.

    Anything that already looks like a path (contains ``/`` or ``.json``) is
    returned unchanged.
    """
    if "/" in name or ".json" in name or name.endswith((".yaml", ".yml")):
        return Path(name)
    return configs_dir / f"{name}.json"


def resolve_template_name(name: str) -> str:
    return TEMPLATE_SHORTCUTS.get(name.lower(), name)


def generate_client_slug(client_name: str) -> str:
    slug = client_name.lower()
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")
