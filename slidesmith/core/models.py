"""Domain models for token resolution, validation reports and processing results."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field


class ErrorHandling(str, Enum):
    """Policy applied to tokens that do not resolve."""

    FAIL = "fail"
    WARN = "warn"
    GRACEFUL = "graceful"


class MissingReason(str, Enum):
    NOT_FOUND = "not found in config"
    NULL_VALUE = "value is null"
    EMPTY_STRING = "value is empty string"


@dataclass(frozen=True)
class Found:
    value: Any


@dataclass(frozen=True)
class Missing:
    reason: MissingReason


Resolution = Union[Found, Missing]


class FoundToken(BaseModel):
    token: str
    value: Any
    type: str = Field(..., description="JSON type name of the resolved value")


class MissingToken(BaseModel):
    token: str
    reason: str


class ValidationResult(BaseModel):
    """Outcome of checking a token list against a configuration."""

    valid: bool = True
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    found: list[FoundToken] = Field(default_factory=list)
    missing: list[MissingToken] = Field(default_factory=list)
    unused: list[str] = Field(
        default_factory=list, description="Config leaf paths no token references"
    )


class ReportSummary(BaseModel):
    total: int
    found: int
    missing: int
    valid: bool


class ValidationReport(BaseModel):
    """Validation result plus human-oriented recommendations."""

    summary: ReportSummary
    details: ValidationResult
    recommendations: list[str] = Field(default_factory=list)
    suggested_config: dict[str, Any] | None = None


class PreviewToken(BaseModel):
    token: str
    value: str
    status: str = "found"


class PreviewMissing(BaseModel):
    token: str
    path: str
    status: str = "missing"


class PreviewError(BaseModel):
    token: str
    error: str
    status: str = "error"


class ReplacementPreview(BaseModel):
    tokens: list[PreviewToken] = Field(default_factory=list)
    missing: list[PreviewMissing] = Field(default_factory=list)
    errors: list[PreviewError] = Field(default_factory=list)


class ProcessorOptions(BaseModel):
    """Options controlling a TemplateProcessor run."""

    model_config = ConfigDict(extra="forbid")

    error_handling: ErrorHandling = Field(
        default=ErrorHandling.WARN, description="Missing-token policy"
    )
    missing_token_placeholder: str = Field(
        default="[MISSING]", description="Substituted for unresolved tokens"
    )
    strict_validation: bool = Field(
        default=False, description="Treat missing tokens as validation errors"
    )
    allow_empty_values: bool = Field(
        default=False, description="Count empty strings as resolved"
    )
    warn_on_unused: bool = Field(
        default=False, description="Report config leaves no token references"
    )
    cache_tokens: bool = Field(
        default=True, description="Use the mtime cache for file templates"
    )
    max_workers: int = Field(
        default=1, ge=1, description="Thread pool size for batch processing"
    )


class TokenSummary(BaseModel):
    found: list[str] = Field(..., description="All tokens extracted from the template")
    total: int
    missing: list[str] = Field(default_factory=list)
    replaced: list[str] = Field(default_factory=list)


class ProcessingMetadata(BaseModel):
    processed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    options: ProcessorOptions
    file_size: int | None = None
    output_size: int | None = None
    duration_ms: float | None = None


class ProcessingResult(BaseModel):
    """Result of running one template through extract, validate and replace."""

    success: bool
    template_path: str
    content: str | None = None
    original_content: str | None = None
    tokens: TokenSummary | None = None
    validation: ValidationResult | None = None
    warnings: list[str] = Field(default_factory=list)
    error: str | None = None
    metadata: ProcessingMetadata


class BatchSummary(BaseModel):
    total: int
    successful: int = 0
    failed: int = 0


class AggregatedValidation(BaseModel):
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class BatchResult(BaseModel):
    """Results of processing several templates against one configuration."""

    success: bool = True
    processed: list[ProcessingResult] = Field(default_factory=list)
    failed: list[ProcessingResult] = Field(default_factory=list)
    summary: BatchSummary
    aggregated_tokens: list[str] = Field(default_factory=list)
    aggregated_validation: AggregatedValidation = Field(
        default_factory=AggregatedValidation
    )


class ProcessingPreview(BaseModel):
    template_path: str
    tokens: list[str] = Field(default_factory=list)
    validation: ValidationResult | None = None
    replacement_preview: ReplacementPreview | None = None
    would_succeed: bool = False
    error: str | None = None


class CacheStats(BaseModel):
    size: int
    files: list[str] = Field(default_factory=list)
