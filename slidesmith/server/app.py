from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.responses import FileResponse, HTMLResponse
from pydantic import BaseModel, Field

from ..config.loader import (
    load_config,
    process_config,
    resolve_config_path,
    resolve_template_name,
)
from ..core.errors import ConfigError, SlidesmithError
from ..core.models import ErrorHandling, ProcessingResult
from ..settings import Settings, get_settings
from ..templating.processor import TemplateProcessor

logger = logging.getLogger(__name__)


class PreviewRequest(BaseModel):
    template: str = Field(..., description="Template text containing {{tokens}}")
    config: dict[str, Any] = Field(default_factory=dict)
    error_handling: ErrorHandling | None = None


@lru_cache(maxsize=1)
def get_processor() -> TemplateProcessor:
    settings = get_settings()
    return TemplateProcessor(
        error_handling=settings.error_handling,
        missing_token_placeholder=settings.missing_token_placeholder,
    )


def _contained(root: Path, *parts: str) -> Path:
    base = root.resolve()
    candidate = base.joinpath(*parts).resolve()
    if not candidate.is_relative_to(base):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return candidate


app = FastAPI(title="Slidesmith Preview", version="0.1.0")


@app.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/preview", response_model=ProcessingResult)
async def preview(
    payload: PreviewRequest,
    processor: TemplateProcessor = Depends(get_processor),
) -> ProcessingResult:
    overrides: dict[str, Any] = {}
    if payload.error_handling is not None:
        overrides["error_handling"] = payload.error_handling
    try:
        return processor.process_template(payload.template, payload.config, **overrides)
    except SlidesmithError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc


@app.get("/templates/{template}/{filename}", response_class=HTMLResponse)
async def render_slide(
    template: str,
    filename: str,
    client: str,
    settings: Settings = Depends(get_settings),
    processor: TemplateProcessor = Depends(get_processor),
) -> HTMLResponse:
    """Serve a template slide customized on the fly for ``client``."""
    slide_path = _contained(settings.templates_dir, resolve_template_name(template), filename)
    if not slide_path.is_file():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")

    # Client configs are only ever read from inside configs_dir.
    config_path = _contained(settings.configs_dir, str(resolve_config_path(client, Path())))
    try:
        config = process_config(load_config(config_path))
    except (FileNotFoundError, ConfigError) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    try:
        result = processor.process_template(slide_path, config)
    except SlidesmithError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc

    return HTMLResponse(result.content or "")


@app.get("/assets/{asset_path:path}")
async def asset(asset_path: str, settings: Settings = Depends(get_settings)) -> FileResponse:
    path = _contained(settings.assets_dir, asset_path)
    if not path.is_file():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
    return FileResponse(path)


def run(host: str | None = None, port: int | None = None) -> None:
    settings = get_settings()
    uvicorn.run(
        "slidesmith.server.app:app",
        host=host or settings.bind_host,
        port=port or settings.bind_port,
        reload=False,
        workers=1,
    )


__all__ = ["app", "run"]
