"""
Breeding analytics derivation.

Turns a stored BreedingSummary into dashboard figures. The weight-gain
figure is a proxy: average offspring count times a fixed 50 g.
"""

from fowlregistry.domain.breeding.entities import (
    AnalyticsPeriod,
    BreedingAnalytics,
    BreedingSummary,
)

WEIGHT_GAIN_PER_OFFSPRING_G = 50
DAY_MS = 24 * 60 * 60 * 1000


def trend_bucket_days(window_days: int) -> int:
    """Daily buckets up to a month, weekly beyond."""
    return 1 if window_days <= 30 else 7


def derive_analytics(
    summary: BreedingSummary, period: AnalyticsPeriod
) -> BreedingAnalytics:
    hatch_rate = round(summary.hatch_rate, 2)
    return BreedingAnalytics(
        hatch_rate=hatch_rate,
        mortality_rate=round(100 - hatch_rate, 2),
        avg_weight_gain=round(
            summary.average_offspring_count * WEIGHT_GAIN_PER_OFFSPRING_G, 2
        ),
        trend_data=list(summary.trend),
        period=period,
    )
