"""
Use case: Breeding analytics for a selected period.

Input: AnalyticsQuery (period name, optional custom bounds)
Output: BreedingAnalytics (hatch rate, mortality, weight-gain proxy, trend)
Side effects: Buffers a breeding_analytics_viewed analytics event.
Failure cases: InvalidAnalyticsPeriodError for unknown periods or bad
    custom bounds.
"""

from typing import Optional

from fowlregistry.application.analytics import AnalyticsRecorder
from fowlregistry.application.breeding.dtos import AnalyticsQuery
from fowlregistry.domain.breeding.analytics import DAY_MS, derive_analytics
from fowlregistry.domain.breeding.entities import AnalyticsPeriod, BreedingAnalytics
from fowlregistry.domain.breeding.errors import InvalidAnalyticsPeriodError
from fowlregistry.domain.breeding.ports import BreedingSummaryRepository
from fowlregistry.domain.ownership.entities import now_millis


def resolve_window(
    period: AnalyticsPeriod,
    start: Optional[int],
    end: Optional[int],
    now_ms: int,
) -> tuple[int, int]:
    """Return the [start, end) window in epoch ms for a period."""
    if period is AnalyticsPeriod.CUSTOM:
        if start is None or end is None:
            raise InvalidAnalyticsPeriodError("custom period needs start and end")
        if start >= end:
            raise InvalidAnalyticsPeriodError("start must be before end")
        return start, end
    return now_ms - period.days * DAY_MS, now_ms


class GetBreedingAnalyticsUseCase:
    def __init__(
        self,
        summaries: BreedingSummaryRepository,
        analytics: AnalyticsRecorder,
    ) -> None:
        self._summaries = summaries
        self._analytics = analytics

    def execute(self, query: AnalyticsQuery) -> BreedingAnalytics:
        try:
            period = AnalyticsPeriod[query.period.upper()]
        except KeyError:
            raise InvalidAnalyticsPeriodError(
                f"unknown period {query.period!r}"
            ) from None

        start, end = resolve_window(period, query.start, query.end, now_millis())
        summary = self._summaries.get_summary(start, end)

        self._analytics.record(
            "breeding_analytics_viewed",
            {"period": period.name, "startDate": start, "endDate": end},
        )
        return derive_analytics(summary, period)
