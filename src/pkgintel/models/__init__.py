"""Data models and schemas."""

from pkgintel.models.envelope import (
    ErrorResponse,
    ResponseEnvelope,
    SuccessResponse,
    error_response,
    error_response_from_exception,
    success_response,
)
from pkgintel.models.schemas import (
    Deprecation,
    Downloads,
    Ecosystem,
    ErrorCode,
    MaintenanceSignals,
    PackageSummary,
    Rating,
    ReleaseEntry,
    ReleaseTimeline,
    ScoreFactors,
)

__all__ = [
    "Deprecation",
    "Downloads",
    "Ecosystem",
    "ErrorCode",
    "ErrorResponse",
    "MaintenanceSignals",
    "PackageSummary",
    "Rating",
    "ReleaseEntry",
    "ReleaseTimeline",
    "ResponseEnvelope",
    "ScoreFactors",
    "SuccessResponse",
    "error_response",
    "error_response_from_exception",
    "success_response",
]
