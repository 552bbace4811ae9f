"""Uniform success/failure envelopes returned from every query."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Generic, Literal, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field

from pkgintel.models.schemas import ErrorCode

if TYPE_CHECKING:
    from pkgintel.errors import RegistryError

T = TypeVar("T")


def utc_timestamp(moment: datetime | None = None) -> str:
    """Format a moment as ISO-8601 UTC with millisecond precision."""
    moment = moment or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class Pagination(BaseModel):
    model_config = ConfigDict(frozen=True)

    next_cursor: str | None = None


class ResponseMeta(BaseModel):
    """Metadata attached to a successful response."""

    model_config = ConfigDict(frozen=True)

    source: str | None = None
    retrieved_at: str = Field(default_factory=utc_timestamp)
    pagination: Pagination = Field(default_factory=Pagination)
    warnings: tuple[str, ...] = ()


class ErrorMeta(BaseModel):
    model_config = ConfigDict(frozen=True)

    retrieved_at: str = Field(default_factory=utc_timestamp)


class ErrorDetail(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: ErrorCode
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


class SuccessResponse(BaseModel, Generic[T]):
    model_config = ConfigDict(frozen=True)

    ok: Literal[True] = True
    data: T
    meta: ResponseMeta

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class ErrorResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    ok: Literal[False] = False
    error: ErrorDetail
    meta: ErrorMeta = Field(default_factory=ErrorMeta)

    @property
    def code(self) -> ErrorCode:
        return self.error.code

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


ResponseEnvelope = Union[SuccessResponse[T], ErrorResponse]


def success_response(
    data: T,
    source: str | None = None,
    next_cursor: str | None = None,
    warnings: list[str] | None = None,
) -> SuccessResponse[T]:
    """Wrap a computed result in a success envelope."""
    meta = ResponseMeta(
        source=source,
        pagination=Pagination(next_cursor=next_cursor),
        warnings=tuple(warnings or ()),
    )
    return SuccessResponse[type(data)](data=data, meta=meta)


def error_response(
    code: ErrorCode,
    message: str,
    details: dict[str, Any] | None = None,
) -> ErrorResponse:
    """Build a failure envelope."""
    return ErrorResponse(
        error=ErrorDetail(code=code, message=message, details=dict(details or {})),
    )


def error_response_from_exception(exc: RegistryError) -> ErrorResponse:
    """Serialize a classified registry failure into a failure envelope."""
    return error_response(exc.code, exc.message, exc.details)
