"""Pydantic models for normalized registry data."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Ecosystem(str, Enum):
    """Package ecosystems."""

    NPM = "npm"
    PYPI = "pypi"
    CRATES = "crates"

    @classmethod
    def parse(cls, value: "str | Ecosystem") -> "Ecosystem":
        """Resolve a tag like ``"PyPI "`` to an ecosystem.

        Raises:
            ValueError: If the tag is not one of the supported ecosystems.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            tag = value.strip().lower()
            for member in cls:
                if member.value == tag:
                    return member
        supported = ", ".join(m.value for m in cls)
        raise ValueError(f"Unsupported ecosystem: {value}. Supported: {supported}")


class ErrorCode(str, Enum):
    """Machine-readable failure codes shared by every query."""

    INVALID_INPUT = "INVALID_INPUT"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    RATE_LIMITED = "RATE_LIMITED"
    TIMEOUT = "TIMEOUT"
    PARSE_ERROR = "PARSE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class Rating(str, Enum):
    """Three-level maintenance rating.

    Ratings are ordered ``poor < fair < good``; ``points`` gives the value
    used in the weighted overall score.
    """

    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"

    @property
    def points(self) -> int:
        return _RATING_POINTS[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Rating):
            return NotImplemented
        return self.points < other.points

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Rating):
            return NotImplemented
        return self.points <= other.points

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Rating):
            return NotImplemented
        return self.points > other.points

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Rating):
            return NotImplemented
        return self.points >= other.points


_RATING_POINTS = {
    Rating.GOOD: 2,
    Rating.FAIR: 1,
    Rating.POOR: 0,
}


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class Downloads(_Frozen):
    """Download counters; availability depends on the ecosystem."""

    weekly: int | None = None
    monthly: int | None = None
    total: int | None = None


class PackageSummary(_Frozen):
    """Core package metadata from any ecosystem."""

    name: str = Field(min_length=1)
    version: str = Field(min_length=1)
    description: str | None = None
    homepage: str | None = None
    repository: str | None = None
    license: str | None = None
    keywords: tuple[str, ...] = ()
    downloads: Downloads | None = None


class ReleaseEntry(_Frozen):
    """A single published version and its release timestamp."""

    version: str
    date: str  # ISO-8601, as reported by the registry
    is_prerelease: bool = False


class ReleaseTimeline(_Frozen):
    """Releases ordered newest first, possibly truncated."""

    package_name: str
    ecosystem: Ecosystem
    releases: tuple[ReleaseEntry, ...] = ()
    total_versions: int = Field(ge=0)


class Deprecation(_Frozen):
    """Deprecation signal reported by an adapter."""

    is_deprecated: bool = False
    message: str | None = None


class ScoreFactors(_Frozen):
    """Sub-ratings feeding the overall maintenance score."""

    recency: Rating
    frequency: Rating
    maturity: Rating


class MaintenanceSignals(_Frozen):
    """Maintenance health derived from release metadata."""

    package_name: str
    ecosystem: Ecosystem
    days_since_last_release: int = Field(ge=-1)  # -1 when no release date is known
    last_release_date: str | None = None
    releases_per_year: float = Field(ge=0)
    total_versions: int = Field(ge=0)
    is_deprecated: bool = False
    deprecation_message: str | None = None
    maintenance_score: Rating
    score_factors: ScoreFactors
