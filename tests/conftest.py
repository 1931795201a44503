from __future__ import annotations

import json
from pathlib import Path
from typing import Iterator

import pytest

from slidesmith.settings import get_settings


@pytest.fixture
def client_config() -> dict:
    return {
        "client_name": "María González",
        "date": "June 6, 2025",
        "payment": {
            "amount": "$1,500",
            "description": "Deposit to Start",
            "provider": "Bonsai",
        },
    }


@pytest.fixture
def workspace(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, client_config: dict
) -> Iterator[Path]:
    """Project layout with one template, one client config and shared assets."""
    template_dir = tmp_path / "templates" / "discovery-planning-agreement"
    template_dir.mkdir(parents=True)
    (template_dir / "01-cover.html").write_text(
        '<h1>{{client_name}}</h1><p>{{ date }}</p><img src="../../assets/logo.png">',
        encoding="utf-8",
    )
    (template_dir / "02-payment.html").write_text(
        "<p>{{payment.amount}} {{payment.description}} via {{payment.provider}}</p>",
        encoding="utf-8",
    )
    (template_dir / "notes.txt").write_text("{{ignored}}", encoding="utf-8")

    configs = tmp_path / "configs"
    configs.mkdir()
    (configs / "maria.json").write_text(
        json.dumps(client_config, ensure_ascii=False), encoding="utf-8"
    )

    assets = tmp_path / "assets"
    assets.mkdir()
    (assets / "logo.png").write_bytes(b"\x89PNG")

    monkeypatch.setenv("SLIDESMITH_TEMPLATES_DIR", str(tmp_path / "templates"))
    monkeypatch.setenv("SLIDESMITH_CONFIGS_DIR", str(configs))
    monkeypatch.setenv("SLIDESMITH_EXPORTS_DIR", str(tmp_path / "exports"))
    monkeypatch.setenv("SLIDESMITH_ASSETS_DIR", str(assets))
    get_settings.cache_clear()
    yield tmp_path
    get_settings.cache_clear()
