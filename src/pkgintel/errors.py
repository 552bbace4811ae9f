"""Exceptions raised while querying registries.

Each exception carries the :class:`ErrorCode` that ends up in the failure
envelope, so callers can branch on ``code`` without matching on messages.
"""

from typing import Any

from pkgintel.models.schemas import Ecosystem, ErrorCode


class RegistryError(Exception):
    """Base class for classified registry failures."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details: dict[str, Any] = dict(details or {})
        super().__init__(message)

    def with_context(self, ecosystem: Ecosystem, name: str) -> "RegistryError":
        """Attach the package and ecosystem being queried to ``details``."""
        self.details.setdefault("package", name)
        self.details.setdefault("ecosystem", ecosystem.value)
        return self


class InvalidInputError(RegistryError):
    """Raised for client-correctable input (blank name, unknown ecosystem)."""

    code = ErrorCode.INVALID_INPUT


class PackageNotFoundError(InvalidInputError):
    """Raised when the registry answers 404 for a package."""

    def __init__(self, url: str, details: dict[str, Any] | None = None) -> None:
        self.url = url
        super().__init__(f"Package not found at {url}", details)

    def with_context(self, ecosystem: Ecosystem, name: str) -> RegistryError:
        # The bare URL message is only useful until we know what was asked for.
        self.message = f"Package '{name}' not found on {ecosystem.value}"
        self.args = (self.message,)
        return super().with_context(ecosystem, name)


class RateLimitedError(RegistryError):
    """Raised when the registry answers 429."""

    code = ErrorCode.RATE_LIMITED


class RegistryTimeoutError(RegistryError):
    """Raised when a registry call exceeds its deadline."""

    code = ErrorCode.TIMEOUT


class UpstreamError(RegistryError):
    """Raised for network failures, bad bodies and unclassified statuses."""

    code = ErrorCode.UPSTREAM_ERROR


class PayloadParseError(RegistryError):
    """Raised when a registry payload is missing something we cannot default."""

    code = ErrorCode.PARSE_ERROR
