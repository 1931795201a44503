from __future__ import annotations

from pathlib import Path

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from slidesmith.server.app import _contained, app

client = TestClient(app)


def test_healthz() -> None:
    assert client.get("/healthz").json() == {"status": "ok"}


def test_preview_substitutes_tokens() -> None:
    response = client.post(
        "/preview",
        json={"template": "Hi {{name}} {{other}}", "config": {"name": "Ada"}},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["content"] == "Hi Ada [MISSING]"
    assert len(body["warnings"]) == 1


def test_preview_fail_policy_returns_422() -> None:
    response = client.post(
        "/preview",
        json={"template": "Hi {{name}}", "config": {}, "error_handling": "fail"},
    )
    assert response.status_code == 422
    assert "name" in response.json()["detail"]


def test_render_slide_for_client(workspace: Path) -> None:
    response = client.get(
        "/templates/discovery/02-payment.html", params={"client": "maria"}
    )
    assert response.status_code == 200
    assert response.text == "<p>$1,500 Deposit to Start via Bonsai</p>"


def test_render_slide_unknown_file(workspace: Path) -> None:
    response = client.get("/templates/discovery/99.html", params={"client": "maria"})
    assert response.status_code == 404


def test_render_slide_unknown_client(workspace: Path) -> None:
    response = client.get(
        "/templates/discovery/01-cover.html", params={"client": "nobody"}
    )
    assert response.status_code == 400


def test_assets_are_served(workspace: Path) -> None:
    response = client.get("/assets/logo.png")
    assert response.status_code == 200
    assert response.content == b"\x89PNG"


def test_contained_rejects_traversal(tmp_path: Path) -> None:
    root = tmp_path / "templates"
    root.mkdir()
    assert _contained(root, "deck", "a.html") == (root / "deck" / "a.html").resolve()
    with pytest.raises(HTTPException) as exc:
        _contained(root, "..", "secret.html")
    assert exc.value.status_code == 403


@pytest.mark.parametrize("outside", ["absolute", "../secret/s.json"])
def test_render_slide_rejects_config_outside_configs_dir(
    workspace: Path, outside: str
) -> None:
    secret = workspace / "secret" / "s.json"
    secret.parent.mkdir()
    secret.write_text('{"client_name": "LEAKED"}', encoding="utf-8")
    name = str(secret) if outside == "absolute" else outside

    response = client.get("/templates/discovery/01-cover.html", params={"client": name})
    assert response.status_code == 403
    assert "LEAKED" not in response.text


def test_render_slide_accepts_explicit_file_in_configs_dir(workspace: Path) -> None:
    response = client.get(
        "/templates/discovery/02-payment.html", params={"client": "maria.json"}
    )
    assert response.status_code == 200
