from __future__ import annotations

from pathlib import Path

import pytest

from slidesmith.core.errors import TemplateNotFoundError
from slidesmith.rendering.customize import customize_template, list_template_files
from slidesmith.templating.processor import TemplateProcessor


def test_list_template_files_only_html(workspace: Path) -> None:
    files = list_template_files(workspace / "templates" / "discovery-planning-agreement")
    assert [f.name for f in files] == ["01-cover.html", "02-payment.html"]


def test_customize_writes_export(workspace: Path) -> None:
    config = {
        "client_name": "Acme Corp",
        "date": "June 6, 2025",
        "payment": {"amount": "$1,500", "description": "Deposit", "provider": "Bonsai"},
    }
    result = customize_template(
        workspace / "templates" / "discovery-planning-agreement",
        config,
        workspace / "exports",
        assets_dir=workspace / "assets",
    )

    slides = workspace / "exports" / "acme-corp" / "slides"
    assert result.client_slug == "acme-corp"
    assert result.output_dir == slides
    assert [p.name for p in result.written] == ["01-cover.html", "02-payment.html"]
    assert (slides / "01-cover.html").read_text(encoding="utf-8") == (
        '<h1>Acme Corp</h1><p>June 6, 2025</p><img src="../assets/logo.png">'
    )
    assert (slides / "02-payment.html").read_text(encoding="utf-8") == (
        "<p>$1,500 Deposit via Bonsai</p>"
    )
    assert result.assets_copied == 1
    assert (workspace / "exports" / "acme-corp" / "assets" / "logo.png").exists()


def test_customize_skips_failed_slides(workspace: Path) -> None:
    result = customize_template(
        workspace / "templates" / "discovery-planning-agreement",
        {"client_name": "Acme", "date": "today"},
        workspace / "exports",
        processor=TemplateProcessor(error_handling="fail"),
    )
    assert [p.name for p in result.written] == ["01-cover.html"]
    assert result.batch.summary.failed == 1
    assert result.assets_copied == 0


def test_customize_missing_template_dir(tmp_path: Path) -> None:
    with pytest.raises(TemplateNotFoundError):
        customize_template(tmp_path / "nope", {"client_name": "A"}, tmp_path / "out")


def test_customize_writes_slides_with_mode_and_no_leftovers(workspace: Path) -> None:
    result = customize_template(
        workspace / "templates" / "discovery-planning-agreement",
        {"client_name": "Acme", "date": "today", "payment": {}},
        workspace / "exports",
        processor=TemplateProcessor(error_handling="graceful"),
        file_mode=0o640,
    )
    slides = result.output_dir
    assert sorted(p.name for p in slides.iterdir()) == ["01-cover.html", "02-payment.html"]
    assert all((p.stat().st_mode & 0o777) == 0o640 for p in result.written)


def test_customize_overwrites_previous_export(workspace: Path) -> None:
    template_dir = workspace / "templates" / "discovery-planning-agreement"
    exports = workspace / "exports"
    customize_template(template_dir, {"client_name": "Acme", "date": "first"}, exports)
    result = customize_template(
        template_dir,
        {"client_name": "Acme", "date": "second"},
        exports,
        assets_dir=workspace / "assets",
    )
    assert "second" in (result.output_dir / "01-cover.html").read_text(encoding="utf-8")
    assert result.assets_copied == 1
