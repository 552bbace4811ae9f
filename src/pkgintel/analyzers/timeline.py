"""Release timeline assembly: ordering, limiting and pagination."""

from dataclasses import dataclass
from typing import Any, Iterable

from pkgintel.adapters.base import parse_timestamp
from pkgintel.models.schemas import Ecosystem, ReleaseEntry, ReleaseTimeline

DEFAULT_LIMIT = 20
MAX_LIMIT = 100


def clamp_limit(limit: Any = None, apply_ceiling: bool = True) -> int:
    """Resolve a caller-supplied limit.

    Missing, non-numeric and sub-1 values become ``DEFAULT_LIMIT``; values
    above ``MAX_LIMIT`` are capped when ``apply_ceiling`` is set. Fractional
    limits are truncated toward zero (``7.9`` resolves to ``7``), and the
    pagination cursor reports the resolved value.
    """
    if isinstance(limit, bool) or not isinstance(limit, (int, float)):
        resolved = DEFAULT_LIMIT
    elif limit != limit or limit < 1:  # NaN or below range
        resolved = DEFAULT_LIMIT
    elif limit == float("inf"):
        resolved = MAX_LIMIT if apply_ceiling else DEFAULT_LIMIT
    else:
        resolved = int(limit)
    if apply_ceiling and resolved > MAX_LIMIT:
        resolved = MAX_LIMIT
    return resolved


def sort_releases(entries: Iterable[ReleaseEntry]) -> list[ReleaseEntry]:
    """Sort entries newest first; ties keep their input order."""
    return sorted(entries, key=lambda e: parse_timestamp(e.date, e.version), reverse=True)


@dataclass(frozen=True)
class AssembledTimeline:
    """A timeline plus the pagination cursor for the envelope."""

    timeline: ReleaseTimeline
    next_cursor: str | None


def assemble_timeline(
    package_name: str,
    ecosystem: Ecosystem,
    entries: Iterable[ReleaseEntry],
    limit: Any = None,
    apply_ceiling: bool = True,
) -> AssembledTimeline:
    """Order, count and truncate release entries.

    ``total_versions`` always reports every entry passed in, whatever the
    limit. The cursor is ``str(limit)`` when entries were cut off.
    """
    ordered = sort_releases(entries)
    resolved = clamp_limit(limit, apply_ceiling)
    truncated = ordered[:resolved]
    next_cursor = str(resolved) if len(ordered) > resolved else None

    timeline = ReleaseTimeline(
        package_name=package_name,
        ecosystem=ecosystem,
        releases=tuple(truncated),
        total_versions=len(ordered),
    )
    return AssembledTimeline(timeline=timeline, next_cursor=next_cursor)
