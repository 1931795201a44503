"""Template processing pipeline: extract, validate, replace."""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Sequence, Union

from ..core.errors import (
    SlidesmithError,
    TemplateNotFoundError,
    TemplateValidationError,
)
from ..core.models import (
    BatchResult,
    BatchSummary,
    CacheStats,
    ErrorHandling,
    ProcessingMetadata,
    ProcessingPreview,
    ProcessingResult,
    ProcessorOptions,
    TokenSummary,
)
from .extractor import TokenExtractor, extract_tokens
from .replacer import preview_replacements, replace_tokens
from .validator import validate_against_tokens

logger = logging.getLogger(__name__)

# A Path is read from disk; a str is template text.
TemplateSource = Union[Path, str]

INLINE_LABEL = "<inline>"


def _read_template(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise TemplateNotFoundError(path) from None


class TemplateProcessor:
    """Runs templates through token extraction, validation and replacement.

    Options are mutable after construction; per-call keyword overrides apply
    to that call only.
    """

    def __init__(
        self,
        options: ProcessorOptions | None = None,
        *,
        extractor: TokenExtractor | None = None,
        **overrides: Any,
    ) -> None:
        base = options or ProcessorOptions()
        self.options = self._merge(base, overrides)
        self.extractor = extractor or TokenExtractor()

    @staticmethod
    def _merge(options: ProcessorOptions, overrides: Mapping[str, Any]) -> ProcessorOptions:
        if not overrides:
            return options.model_copy()
        return ProcessorOptions.model_validate({**options.model_dump(), **overrides})

    def _load(
        self, source: TemplateSource, label: str | None, opts: ProcessorOptions
    ) -> tuple[str, str, list[str]]:
        if isinstance(source, Path):
            content = _read_template(source)
            if opts.cache_tokens:
                tokens = self.extractor.extract_cached(source)
            else:
                tokens = extract_tokens(content)
            return str(source), content, tokens
        return label or INLINE_LABEL, source, extract_tokens(source)

    def process_template(
        self,
        source: TemplateSource,
        config: Mapping[str, Any],
        *,
        label: str | None = None,
        **overrides: Any,
    ) -> ProcessingResult:
        """Process one template against a configuration.

        Args:
            source: Template file path, or template text
            config: Configuration mapping
            label: Name reported for inline template text
            **overrides: ProcessorOptions fields overriding this call only

        Returns:
            Successful processing result, possibly carrying warnings

        Raises:
            TemplateNotFoundError: If a template path does not exist
            TemplateValidationError: If strict validation fails under ``fail``
            TokenReplacementError: If tokens are missing under ``fail``
        """
        opts = self._merge(self.options, overrides)
        started = time.perf_counter()

        template_path, content, tokens = self._load(source, label, opts)
        logger.debug(f"Processing {template_path}: {len(tokens)} token(s)")

        validation = validate_against_tokens(
            config,
            tokens,
            strict_mode=opts.strict_validation,
            allow_empty=opts.allow_empty_values,
            warn_on_unused=opts.warn_on_unused,
        )

        if not validation.valid and opts.error_handling is ErrorHandling.FAIL:
            raise TemplateValidationError(template_path, validation.errors)

        outcome = replace_tokens(
            content,
            config,
            tokens,
            error_handling=opts.error_handling,
            missing_token_placeholder=opts.missing_token_placeholder,
            allow_empty=opts.allow_empty_values,
        )

        return ProcessingResult(
            success=True,
            template_path=template_path,
            content=outcome.text,
            original_content=content,
            tokens=TokenSummary(
                found=tokens,
                total=len(tokens),
                missing=[m.token for m in validation.missing],
                replaced=[f.token for f in validation.found],
            ),
            validation=validation,
            warnings=outcome.warnings,
            metadata=ProcessingMetadata(
                options=opts,
                file_size=len(content),
                output_size=len(outcome.text),
                duration_ms=(time.perf_counter() - started) * 1000,
            ),
        )

    def _process_isolated(
        self,
        source: TemplateSource,
        label: str,
        config: Mapping[str, Any],
        overrides: Mapping[str, Any],
    ) -> ProcessingResult:
        name = str(source) if isinstance(source, Path) else label
        try:
            return self.process_template(source, config, label=label, **overrides)
        except (SlidesmithError, OSError, UnicodeDecodeError) as exc:
            logger.error(f"Failed to process {name}: {exc}")
            return ProcessingResult(
                success=False,
                template_path=name,
                error=str(exc),
                metadata=ProcessingMetadata(options=self._merge(self.options, overrides)),
            )

    def process_many(
        self,
        sources: Sequence[TemplateSource],
        config: Mapping[str, Any],
        **overrides: Any,
    ) -> BatchResult:
        """Process several templates; a failing template never stops the others.

        Args:
            sources: Template file paths and/or template texts
            config: Configuration mapping shared by every template
            **overrides: ProcessorOptions fields overriding this batch only

        Returns:
            Batch result with per-template outcomes and aggregated tokens
        """
        opts = self._merge(self.options, overrides)
        labels = [f"{INLINE_LABEL}[{i}]" for i in range(len(sources))]

        if opts.max_workers > 1 and len(sources) > 1:
            with ThreadPoolExecutor(max_workers=opts.max_workers) as pool:
                results = list(
                    pool.map(
                        lambda item: self._process_isolated(item[0], item[1], config, overrides),
                        zip(sources, labels),
                    )
                )
        else:
            results = [
                self._process_isolated(source, label, config, overrides)
                for source, label in zip(sources, labels)
            ]

        batch = BatchResult(summary=BatchSummary(total=len(sources)))
        aggregated: set[str] = set()

        for result in results:
            if not result.success:
                batch.failed.append(result)
                batch.summary.failed += 1
                batch.success = False
                continue

            batch.processed.append(result)
            batch.summary.successful += 1
            if result.tokens is not None:
                aggregated.update(result.tokens.found)
            if result.validation is not None:
                batch.aggregated_validation.errors.extend(result.validation.errors)
                batch.aggregated_validation.warnings.extend(result.validation.warnings)

        batch.aggregated_tokens = sorted(aggregated)
        logger.info(
            f"Processed {batch.summary.successful}/{batch.summary.total} template(s)"
        )
        return batch

    def preview_processing(
        self, source: TemplateSource, config: Mapping[str, Any], *, label: str | None = None
    ) -> ProcessingPreview:
        """Report what processing would do without substituting anything."""
        opts = self.options
        template_path = str(source) if isinstance(source, Path) else label or INLINE_LABEL
        try:
            content = _read_template(source) if isinstance(source, Path) else source
        except (SlidesmithError, OSError, UnicodeDecodeError) as exc:
            return ProcessingPreview(template_path=template_path, error=str(exc))

        tokens = extract_tokens(content)
        validation = validate_against_tokens(
            config,
            tokens,
            strict_mode=opts.strict_validation,
            allow_empty=opts.allow_empty_values,
            warn_on_unused=opts.warn_on_unused,
        )
        return ProcessingPreview(
            template_path=template_path,
            tokens=tokens,
            validation=validation,
            replacement_preview=preview_replacements(content, config, tokens),
            would_succeed=(
                opts.error_handling is not ErrorHandling.FAIL or not validation.missing
            ),
        )

    def set_error_handling(self, strategy: ErrorHandling | str) -> None:
        try:
            self.options.error_handling = ErrorHandling(strategy)
        except ValueError:
            raise ValueError(
                f"Invalid error handling strategy: {strategy}. "
                "Must be 'fail', 'warn', or 'graceful'"
            ) from None

    def update_options(self, **new_options: Any) -> None:
        self.options = self._merge(self.options, new_options)

    def get_options(self) -> ProcessorOptions:
        return self.options.model_copy()

    def clear_cache(self, template_path: str | Path | None = None) -> None:
        self.extractor.clear_cache(template_path)

    def get_cache_stats(self) -> CacheStats:
        return self.extractor.cache_stats()


def create_processor(**options: Any) -> TemplateProcessor:
    return TemplateProcessor(**options)


def process_template(
    source: TemplateSource, config: Mapping[str, Any], **options: Any
) -> ProcessingResult:
    """One-shot processing with a throwaway processor."""
    return TemplateProcessor(**options).process_template(source, config)
