"""Maintenance scoring from release metadata."""

import math
from datetime import datetime, timezone

from pkgintel.adapters.base import parse_timestamp
from pkgintel.models.envelope import utc_timestamp
from pkgintel.models.schemas import (
    Deprecation,
    Ecosystem,
    MaintenanceSignals,
    Rating,
    ReleaseEntry,
    ScoreFactors,
)

SECONDS_PER_DAY = 86_400
DAYS_PER_YEAR = 365

# Returned for days_since_last_release when nothing has been released
NO_RELEASE_SENTINEL = -1


def days_between(first: datetime, second: datetime) -> int:
    """Whole days between two moments, ignoring order."""
    return math.floor(abs((first - second).total_seconds()) / SECONDS_PER_DAY)


def round_half_up(value: float, places: int = 2) -> float:
    factor = 10**places
    return math.floor(value * factor + 0.5) / factor


class MaintenanceScorer:
    """Rates release recency, frequency and maturity.

    Sub-ratings (lower bounds inclusive):
    - Recency: < 90 days good, < 365 days fair, otherwise poor
    - Frequency: >= 4 releases/year good, >= 1 fair, otherwise poor
    - Maturity: >= 10 versions good, >= 3 fair, otherwise poor

    Overall: deprecated packages are always poor. Otherwise the sub-ratings
    are weighted 50/30/20 (good=2, fair=1, poor=0); >= 1.5 is good,
    >= 0.7 is fair.
    """

    WEIGHTS = {
        "recency": 0.5,
        "frequency": 0.3,
        "maturity": 0.2,
    }
    GOOD_THRESHOLD = 1.5
    FAIR_THRESHOLD = 0.7

    # Release histories shorter than this fraction of a year are extrapolated
    SHORT_HISTORY_YEARS = 0.1
    SHORT_HISTORY_MULTIPLIER = 10

    def rate_recency(self, days_since_last_release: float) -> Rating:
        if days_since_last_release < 90:
            return Rating.GOOD
        if days_since_last_release < 365:
            return Rating.FAIR
        return Rating.POOR

    def rate_frequency(self, releases_per_year: float) -> Rating:
        if releases_per_year >= 4:
            return Rating.GOOD
        if releases_per_year >= 1:
            return Rating.FAIR
        return Rating.POOR

    def rate_maturity(self, total_versions: int) -> Rating:
        if total_versions >= 10:
            return Rating.GOOD
        if total_versions >= 3:
            return Rating.FAIR
        return Rating.POOR

    def releases_per_year(self, release_dates: list[datetime]) -> float:
        """Average releases per year across the whole history.

        Fewer than two releases yields 0. Histories spanning under a tenth
        of a year yield ``count * 10`` instead of dividing by the span.
        """
        if len(release_dates) < 2:
            return 0.0

        years_span = days_between(min(release_dates), max(release_dates)) / DAYS_PER_YEAR
        if years_span < self.SHORT_HISTORY_YEARS:
            return float(len(release_dates) * self.SHORT_HISTORY_MULTIPLIER)

        return len(release_dates) / years_span

    def overall(self, factors: ScoreFactors, is_deprecated: bool) -> Rating:
        """Combine sub-ratings into the overall maintenance rating."""
        if is_deprecated:
            return Rating.POOR

        weighted = (
            factors.recency.points * self.WEIGHTS["recency"]
            + factors.frequency.points * self.WEIGHTS["frequency"]
            + factors.maturity.points * self.WEIGHTS["maturity"]
        )

        if weighted >= self.GOOD_THRESHOLD:
            return Rating.GOOD
        if weighted >= self.FAIR_THRESHOLD:
            return Rating.FAIR
        return Rating.POOR

    def score(
        self,
        package_name: str,
        ecosystem: Ecosystem,
        releases: list[ReleaseEntry],
        deprecation: Deprecation,
        now: datetime | None = None,
    ) -> MaintenanceSignals:
        """Compute maintenance signals from the full, untruncated release set.

        Args:
            package_name: Canonical package name.
            ecosystem: Ecosystem the releases came from.
            releases: Every known (non-withdrawn) release.
            deprecation: Deprecation signal from the adapter.
            now: Reference time for recency. Defaults to the current UTC time.

        Returns:
            MaintenanceSignals with sub-ratings and the overall rating.
        """
        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)

        release_dates = [parse_timestamp(r.date, r.version) for r in releases]
        last_release = max(release_dates) if release_dates else None

        if last_release is not None:
            days_since = days_between(now, last_release)
        else:
            days_since = math.inf

        per_year = self.releases_per_year(release_dates)
        factors = ScoreFactors(
            recency=self.rate_recency(days_since),
            frequency=self.rate_frequency(per_year),
            maturity=self.rate_maturity(len(release_dates)),
        )

        return MaintenanceSignals(
            package_name=package_name,
            ecosystem=ecosystem,
            days_since_last_release=(
                NO_RELEASE_SENTINEL if last_release is None else days_since
            ),
            last_release_date=utc_timestamp(last_release) if last_release else None,
            releases_per_year=round_half_up(per_year),
            total_versions=len(release_dates),
            is_deprecated=deprecation.is_deprecated,
            deprecation_message=deprecation.message if deprecation.is_deprecated else None,
            maintenance_score=self.overall(factors, deprecation.is_deprecated),
            score_factors=factors,
        )
