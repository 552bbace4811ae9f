"""Tests for limit clamping and timeline assembly."""

import pytest

from pkgintel.analyzers.timeline import (
    DEFAULT_LIMIT,
    MAX_LIMIT,
    assemble_timeline,
    clamp_limit,
    sort_releases,
)
from pkgintel.models.schemas import Ecosystem, ReleaseEntry


def _entries(count: int) -> list[ReleaseEntry]:
    # Deliberately oldest first so sorting has work to do
    return [
        ReleaseEntry(version=f"1.{i}.0", date=f"{2000 + i}-01-01T00:00:00Z")
        for i in range(count)
    ]


@pytest.mark.parametrize("limit", [None, 0, -5, "10", True, float("nan")])
def test_clamp_limit_falls_back_to_default(limit):
    assert clamp_limit(limit) == DEFAULT_LIMIT


def test_clamp_limit_caps_at_ceiling():
    assert clamp_limit(500) == MAX_LIMIT
    assert clamp_limit(100) == 100
    assert clamp_limit(1) == 1
    assert clamp_limit(7.9) == 7


def test_clamp_limit_without_ceiling():
    assert clamp_limit(500, apply_ceiling=False) == 500


def test_sort_releases_newest_first():
    ordered = sort_releases(_entries(5))
    assert [e.version for e in ordered] == ["1.4.0", "1.3.0", "1.2.0", "1.1.0", "1.0.0"]


def test_sort_releases_is_stable_for_ties():
    entries = [
        ReleaseEntry(version="a", date="2023-01-01T00:00:00Z"),
        ReleaseEntry(version="b", date="2023-06-01T00:00:00Z"),
        ReleaseEntry(version="c", date="2023-01-01T00:00:00.000+00:00"),
    ]
    assert [e.version for e in sort_releases(entries)] == ["b", "a", "c"]


def test_sort_releases_compares_offsets():
    entries = [
        ReleaseEntry(version="utc", date="2023-01-01T10:00:00Z"),
        ReleaseEntry(version="plus-two", date="2023-01-01T11:00:00+02:00"),
    ]
    # 11:00+02:00 is 09:00 UTC
    assert [e.version for e in sort_releases(entries)] == ["utc", "plus-two"]


def test_assemble_truncates_and_reports_total():
    assembled = assemble_timeline("pkg", Ecosystem.NPM, _entries(30), limit=10)
    timeline = assembled.timeline

    assert len(timeline.releases) == 10
    assert timeline.total_versions == 30
    assert assembled.next_cursor == "10"
    assert timeline.releases[0].version == "1.29.0"


def test_assemble_default_limit():
    assembled = assemble_timeline("pkg", Ecosystem.NPM, _entries(25))
    assert len(assembled.timeline.releases) == DEFAULT_LIMIT
    assert assembled.next_cursor == str(DEFAULT_LIMIT)


def test_assemble_no_cursor_when_everything_fits():
    assembled = assemble_timeline("pkg", Ecosystem.PYPI, _entries(5), limit=5)
    assert len(assembled.timeline.releases) == 5
    assert assembled.next_cursor is None


def test_assemble_empty():
    assembled = assemble_timeline("pkg", Ecosystem.CRATES, [])
    assert assembled.timeline.releases == ()
    assert assembled.timeline.total_versions == 0
    assert assembled.next_cursor is None


def test_assembled_dates_are_non_increasing():
    timeline = assemble_timeline("pkg", Ecosystem.NPM, _entries(40), limit=100).timeline
    dates = [e.date for e in timeline.releases]
    assert dates == sorted(dates, reverse=True)
    assert timeline.total_versions >= len(timeline.releases)


def test_fractional_limit_is_truncated_in_cursor():
    assembled = assemble_timeline("pkg", Ecosystem.NPM, _entries(10), limit=7.9)
    assert len(assembled.timeline.releases) == 7
    assert assembled.next_cursor == "7"
