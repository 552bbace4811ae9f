"""Abstract base class for registry adapters."""

import re
import urllib.parse
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Callable, TypeVar

from pydantic import ValidationError

from pkgintel.analyzers.prerelease import is_prerelease
from pkgintel.client import RegistryClient
from pkgintel.errors import InvalidInputError, PayloadParseError, RegistryError
from pkgintel.models.schemas import (
    Deprecation,
    Ecosystem,
    PackageSummary,
    ReleaseEntry,
)

T = TypeVar("T")


class BaseAdapter(ABC):
    """Base class for registry adapters.

    Each adapter knows one registry's raw JSON schema and normalizes it into
    the canonical models. Fetching is split from parsing so a single
    document can answer several questions (maintenance needs both the
    timeline and the deprecation flag).
    """

    def __init__(self, client: RegistryClient, base_url: str) -> None:
        """Initialize the adapter.

        Args:
            client: Registry client used for the outbound GET.
            base_url: Registry API base URL, without trailing slash.
        """
        self.client = client
        self.base_url = base_url.rstrip("/")

    @property
    @abstractmethod
    def ecosystem(self) -> Ecosystem:
        """Return the ecosystem this adapter handles."""
        ...

    @abstractmethod
    def package_url(self, name: str) -> str:
        """Return the registry URL holding the package document."""
        ...

    @abstractmethod
    def parse_summary(self, name: str, data: dict) -> PackageSummary:
        """Build a PackageSummary from a fetched package document."""
        ...

    @abstractmethod
    def parse_timeline(self, data: dict) -> list[ReleaseEntry]:
        """Extract unordered release entries from a package document."""
        ...

    @abstractmethod
    def parse_deprecation(self, data: dict) -> Deprecation:
        """Extract the deprecation signal from a package document."""
        ...

    def package_name(self, name: str, data: dict) -> str:
        """Return the canonical package name reported by the registry."""
        return name

    def warnings(self, data: dict) -> list[str]:
        """Notes about the document worth surfacing in response metadata."""
        return []

    async def fetch_document(self, name: str) -> dict:
        """Validate ``name`` and fetch its package document.

        Raises:
            RegistryError: Classified failure, with package and ecosystem
                attached to its details.
        """
        name = validate_name(name, self.ecosystem)
        try:
            data = await self.client.fetch_json(self.package_url(name))
            if not isinstance(data, dict):
                raise PayloadParseError(
                    f"Expected a JSON object from {self.ecosystem.value}, "
                    f"got {type(data).__name__}"
                )
        except RegistryError as e:
            raise e.with_context(self.ecosystem, name)
        return data

    async def fetch_summary(self, name: str) -> PackageSummary:
        name = validate_name(name, self.ecosystem)
        data = await self.fetch_document(name)
        return self.normalize(name, self.parse_summary, name, data)

    async def fetch_timeline(self, name: str) -> list[ReleaseEntry]:
        name = validate_name(name, self.ecosystem)
        data = await self.fetch_document(name)
        return self.normalize(name, self.parse_timeline, data)

    async def fetch_deprecation(self, name: str) -> Deprecation:
        name = validate_name(name, self.ecosystem)
        data = await self.fetch_document(name)
        return self.normalize(name, self.parse_deprecation, data)

    def normalize(self, name: str, parser: Callable[..., T], *args: Any) -> T:
        """Run a ``parse_*`` method, classifying payload problems as PARSE_ERROR."""
        try:
            return parser(*args)
        except ValidationError as e:
            raise PayloadParseError(
                f"Could not normalize {self.ecosystem.value} payload: "
                f"{e.error_count()} invalid field(s)",
                {"errors": [err["msg"] for err in e.errors()]},
            ).with_context(self.ecosystem, name) from e
        except RegistryError as e:
            raise e.with_context(self.ecosystem, name)

    def _entry(self, version: str, date: Any) -> ReleaseEntry:
        """Build a ReleaseEntry, rejecting dates that are not timestamps."""
        if not isinstance(date, str) or not date:
            raise PayloadParseError(
                f"Version {version} has no release date",
                {"version": version},
            )
        parse_timestamp(date, version)
        return ReleaseEntry(
            version=version,
            date=date,
            is_prerelease=is_prerelease(version),
        )


def validate_name(name: Any, ecosystem: Ecosystem | None = None) -> str:
    """Return the trimmed package name.

    Raises:
        InvalidInputError: If the name is missing or blank.
    """
    if not isinstance(name, str) or not name.strip():
        details: dict[str, Any] = {"provided": name, "package": name}
        if ecosystem is not None:
            details["ecosystem"] = ecosystem.value
        raise InvalidInputError("Package name is required", details)
    return name.strip()


def encode_name(name: str) -> str:
    """Percent-encode a package name for use in a URL path segment."""
    return urllib.parse.quote(name, safe="")


def parse_timestamp(value: str, version: str | None = None) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC.

    Raises:
        PayloadParseError: If ``value`` is not a timestamp.
    """
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except (AttributeError, ValueError) as e:
        details = {"date": value}
        if version is not None:
            details["version"] = version
        raise PayloadParseError(f"Unparseable release date: {value!r}", details) from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# Shorthand forms accepted in npm's repository field
_SHORTHAND_HOSTS = {
    "github": "github.com",
    "gitlab": "gitlab.com",
    "bitbucket": "bitbucket.org",
}

_SCP_LIKE = re.compile(r"^[\w.-]+@([^:/\s]+):/?(.+)$")
_SSH_URL = re.compile(r"^ssh://(?:[\w.-]+@)?([^/:\s]+)(?::\d+)?/(.+)$")


def normalize_repo_url(repository: Any) -> str | None:
    """Normalize a repository reference to a browsable https URL.

    Handles the formats registries publish:
    - {"type": "git", "url": "git+https://github.com/owner/repo.git"}
    - "git://github.com/owner/repo.git"
    - "git@github.com:owner/repo.git"
    - "github:owner/repo"

    Normalizing an already-normalized URL returns it unchanged.
    """
    if not repository:
        return None

    if isinstance(repository, str):
        url = repository
    elif isinstance(repository, dict):
        url = repository.get("url") or ""
    else:
        return None

    if not isinstance(url, str):
        return None

    url = url.strip()
    url = re.sub(r"^git\+", "", url)
    if url.startswith("git://"):
        url = "https://" + url[len("git://"):]

    match = _SSH_URL.match(url)
    if match:
        url = f"https://{match.group(1)}/{match.group(2)}"
    else:
        match = _SCP_LIKE.match(url)
        if match and "://" not in url:
            url = f"https://{match.group(1)}/{match.group(2)}"

    prefix, sep, rest = url.partition(":")
    if sep and prefix in _SHORTHAND_HOSTS and not rest.startswith("//"):
        url = f"https://{_SHORTHAND_HOSTS[prefix]}/{rest}"

    url = re.sub(r"(?:\.git)+$", "", url)
    return url or None
