"""
Adapter: Breeding summary repository.

Implements BreedingSummaryRepository port. Breeding events in the window
are loaded into a pandas DataFrame and aggregated there: overall totals,
average offspring per breeding, and a hatch-rate trend bucketed by day
(windows up to 30 days) or by week.
"""

import logging
import math

import pandas as pd
from sqlalchemy import text
from sqlalchemy.engine import Engine

from fowlregistry.domain.breeding.analytics import DAY_MS, trend_bucket_days
from fowlregistry.domain.breeding.entities import BreedingSummary
from fowlregistry.domain.breeding.ports import BreedingSummaryRepository

logger = logging.getLogger(__name__)


def hatch_rate_trend(df: pd.DataFrame, start: int, end: int) -> list[float]:
    """Per-bucket hatch rate (percent) over [start, end), empty buckets as 0."""
    window_days = max(1, math.ceil((end - start) / DAY_MS))
    bucket_ms = trend_bucket_days(window_days) * DAY_MS
    bucket_count = max(1, math.ceil((end - start) / bucket_ms))

    if df.empty:
        return [0.0] * bucket_count

    buckets = (df["breeding_date"] - start) // bucket_ms
    grouped = df.groupby(buckets)[["egg_count", "hatched_count"]].sum()
    grouped = grouped.reindex(range(bucket_count), fill_value=0)
    rates = (grouped["hatched_count"] / grouped["egg_count"] * 100).where(
        grouped["egg_count"] > 0, 0.0
    )
    return [round(float(rate), 2) for rate in rates]


class BreedingSummaryRepositoryAdapter(BreedingSummaryRepository):
    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def get_summary(self, start: int, end: int) -> BreedingSummary:
        query = text(
            """
            SELECT breeding_date, egg_count, hatched_count, offspring_count
            FROM breeding_events
            WHERE breeding_date >= :start AND breeding_date < :end
            ORDER BY breeding_date
            """
        )
        with self._engine.connect() as conn:
            rows = conn.execute(query, {"start": start, "end": end}).fetchall()

        df = pd.DataFrame(
            [tuple(row) for row in rows],
            columns=["breeding_date", "egg_count", "hatched_count", "offspring_count"],
        )
        if not df.empty:
            df = df.astype("int64")

        summary = BreedingSummary(
            total_breedings=len(df),
            total_eggs=int(df["egg_count"].sum()) if not df.empty else 0,
            total_hatched=int(df["hatched_count"].sum()) if not df.empty else 0,
            average_offspring_count=(
                float(df["offspring_count"].mean()) if not df.empty else 0.0
            ),
            trend=hatch_rate_trend(df, start, end),
        )
        logger.debug(
            "Breeding summary %s-%s: %d breedings", start, end, summary.total_breedings
        )
        return summary
