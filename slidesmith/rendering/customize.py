"""Customize a slide template directory for one client."""

from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel, Field

from ..config.loader import generate_client_slug
from ..core.errors import TemplateNotFoundError
from ..core.models import BatchResult
from ..templating.processor import TemplateProcessor

logger = logging.getLogger(__name__)

# Templates reference shared assets two levels up; exports keep them one level up.
TEMPLATE_ASSET_PREFIX = "../../assets/"
EXPORT_ASSET_PREFIX = "../assets/"


class CustomizeResult(BaseModel):
    """Outcome of customizing one template directory."""

    client_slug: str
    output_dir: Path
    written: list[Path] = Field(default_factory=list)
    assets_copied: int = 0
    batch: BatchResult


def list_template_files(template_dir: Path) -> list[Path]:
    """List the HTML slides of a template directory in name order."""
    if not template_dir.is_dir():
        raise TemplateNotFoundError(template_dir)
    return sorted(p for p in template_dir.iterdir() if p.suffix == ".html" and p.is_file())


def _write_slide(path: Path, text: str, mode: int) -> None:
    # Readers of the export directory never see a partially written slide.
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        "w", encoding="utf-8", dir=path.parent, prefix=f".{path.name}.", delete=False
    ) as tmp:
        tmp.write(text)
    staged = Path(tmp.name)
    try:
        staged.chmod(mode)
        staged.replace(path)
    except OSError:
        staged.unlink(missing_ok=True)
        raise


def _copy_assets(assets_dir: Path, dest: Path) -> int:
    shutil.copytree(assets_dir, dest, dirs_exist_ok=True)
    return sum(1 for item in assets_dir.rglob("*") if item.is_file())


def customize_template(
    template_dir: Path,
    config: Mapping[str, Any],
    export_root: Path,
    *,
    processor: TemplateProcessor | None = None,
    assets_dir: Path | None = None,
    file_mode: int = 0o644,
) -> CustomizeResult:
    """Process every slide in ``template_dir`` and write the client export.

    Output goes to ``<export_root>/<client-slug>/slides``; the assets directory,
    when given, is copied next to it so the export is self-contained.

    Args:
        template_dir: Directory holding the template's ``*.html`` slides
        config: Client configuration (defaults already applied)
        export_root: Base directory for client exports
        processor: Processor to use; a default one is created when omitted
        assets_dir: Shared assets to copy into the export
        file_mode: File permissions for written slides

    Returns:
        Written files together with the batch processing result
    """
    processor = processor or TemplateProcessor()
    slug = generate_client_slug(str(config.get("client_name", ""))) or "client"
    client_root = export_root / slug
    output_dir = client_root / "slides"

    templates = list_template_files(template_dir)
    logger.info(f"Processing {len(templates)} template file(s) from {template_dir}")

    batch = processor.process_many(templates, config)
    result = CustomizeResult(client_slug=slug, output_dir=output_dir, batch=batch)

    for processed in batch.processed:
        source = Path(processed.template_path)
        content = (processed.content or "").replace(TEMPLATE_ASSET_PREFIX, EXPORT_ASSET_PREFIX)
        output_path = output_dir / source.name
        _write_slide(output_path, content, file_mode)
        result.written.append(output_path)
        logger.info(f"Generated: {source.name}")

    if assets_dir is not None and assets_dir.is_dir():
        result.assets_copied = _copy_assets(assets_dir, client_root / "assets")
        logger.info(f"Copied {result.assets_copied} asset file(s) to {client_root / 'assets'}")

    return result
