"""Main CLI application."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import typer
from typing_extensions import Annotated

from ..config.loader import resolve_template_name
from ..core.errors import SlidesmithError
from ..rendering.customize import customize_template
from ..settings import get_settings
from ..templating.extractor import TokenExtractor
from ..templating.processor import TemplateProcessor
from ..templating.validator import generate_validation_report
from .parsers import parse_client_config, parse_error_handling, parse_template_paths

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="slidesmith",
    help="Customize HTML slide templates with per-client JSON configuration.",
)


@app.callback()
def configure(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging."),
    ] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )


@app.command()
def tokens(
    templates: Annotated[
        list[str],
        typer.Argument(help="Template files or directories of *.html slides."),
    ],
) -> None:
    """List the tokens each template uses."""
    paths = parse_template_paths(templates)
    extractor = TokenExtractor()

    results = extractor.extract_from_many(paths)
    for path, found in results.items():
        if isinstance(found, dict):
            typer.echo(f"{path}: error: {found['error']}", err=True)
            continue
        typer.echo(f"{path}: {', '.join(found) or '(none)'}")

    typer.echo(f"All tokens: {', '.join(extractor.all_unique_tokens(paths)) or '(none)'}")


@app.command()
def validate(
    templates: Annotated[
        list[str],
        typer.Argument(help="Template files or directories of *.html slides."),
    ],
    config: Annotated[
        str,
        typer.Option("--config", "-c", help="Client config name or path.", metavar="CONFIG"),
    ],
    strict: Annotated[
        bool, typer.Option("--strict", help="Treat missing tokens as errors.")
    ] = False,
    allow_empty: Annotated[
        bool, typer.Option("--allow-empty", help="Accept empty string values.")
    ] = False,
    unused: Annotated[
        bool, typer.Option("--unused", help="Report config values no template uses.")
    ] = False,
    no_defaults: Annotated[
        bool, typer.Option("--no-defaults", help="Validate the config as written.")
    ] = False,
) -> None:
    """Check a client config against the tokens of one or more templates."""
    settings = get_settings()
    paths = parse_template_paths(templates)
    client_config = parse_client_config(
        config, settings.configs_dir, apply_defaults=not no_defaults
    )

    all_tokens = TokenExtractor().all_unique_tokens(paths)
    report = generate_validation_report(
        client_config,
        all_tokens,
        strict_mode=strict,
        allow_empty=allow_empty,
        warn_on_unused=unused,
    )

    summary = report.summary
    typer.echo(
        f"Tokens: {summary.total} total, {summary.found} found, {summary.missing} missing"
    )
    for item in report.details.missing:
        typer.echo(f"  missing: {item.token} ({item.reason})")
    for path in report.details.unused:
        typer.echo(f"  unused: {path}")
    for recommendation in report.recommendations:
        typer.echo(f"- {recommendation}")
    if report.suggested_config:
        typer.echo(json.dumps(report.suggested_config, indent=2, ensure_ascii=False))

    if not summary.valid:
        raise typer.Exit(code=1)


@app.command()
def customize(
    template: Annotated[
        str, typer.Argument(help="Template name or shortcut (e.g. discovery).")
    ],
    config: Annotated[str, typer.Argument(help="Client config name or path.")],
    error_handling: Annotated[
        str,
        typer.Option(
            "--error-handling",
            "-e",
            help="Missing-token policy: fail, warn or graceful.",
        ),
    ] = "",
    exports: Annotated[
        str,
        typer.Option("--exports", help="Export root directory.", metavar="DIR"),
    ] = "",
    strict: Annotated[
        bool, typer.Option("--strict", help="Validate strictly before replacing.")
    ] = False,
) -> None:
    """Write a customized copy of a template for one client."""
    settings = get_settings()
    template_name = resolve_template_name(template)
    template_dir = settings.templates_dir / template_name
    logger.info(f'Template: "{template}" -> "{template_name}"')

    client_config = parse_client_config(config, settings.configs_dir)
    logger.info(f"Client: {client_config['client_name']}")

    policy = parse_error_handling(error_handling) if error_handling else settings.error_handling
    processor = TemplateProcessor(
        error_handling=policy,
        missing_token_placeholder=settings.missing_token_placeholder,
        strict_validation=strict,
    )

    try:
        result = customize_template(
            template_dir,
            client_config,
            Path(exports) if exports else settings.exports_dir,
            processor=processor,
            assets_dir=settings.assets_dir,
        )
    except SlidesmithError as exc:
        logger.error(str(exc))
        raise typer.Exit(code=1) from exc

    for failed in result.batch.failed:
        logger.error(f"{failed.template_path}: {failed.error}")

    logger.info(f"Customized slides saved to: {result.output_dir}")
    logger.info(f"Files generated: {len(result.written)}")
    logger.info(f"Next step: render PDFs from {result.output_dir}")

    if not result.batch.success:
        raise typer.Exit(code=1)


@app.command()
def serve(
    host: Annotated[str, typer.Option("--host", help="Bind address.")] = "",
    port: Annotated[int, typer.Option("--port", help="Bind port.")] = 0,
) -> None:
    """Run the preview server."""
    from ..server.app import run

    run(host or None, port or None)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
