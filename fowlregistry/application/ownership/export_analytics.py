"""
Use case: Export one day of buffered analytics events.

Input: the instant the job runs (epoch ms, defaults to now)
Output: ExportAnalyticsResult (window, exported count, deleted count)
Side effects: Writes yesterday's events to the warehouse sink, then deletes
    exactly the exported rows from the buffer.
Failure cases: none surface. Sink or storage errors are logged and the
    buffer is left untouched so the next run can retry.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fowlregistry.application.ownership.dtos import ExportAnalyticsResult
from fowlregistry.domain.ownership.entities import now_millis
from fowlregistry.domain.ownership.ports import AnalyticsEventRepository, AnalyticsSink

logger = logging.getLogger(__name__)


def previous_day_window(at_ms: int) -> tuple[int, int]:
    """Return [yesterday 00:00, today 00:00) UTC, in epoch ms, relative to at_ms."""
    now = datetime.fromtimestamp(at_ms / 1000, tz=timezone.utc)
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    yesterday = today - timedelta(days=1)
    return int(yesterday.timestamp() * 1000), int(today.timestamp() * 1000)


class ExportAnalyticsUseCase:
    """Moves yesterday's analytics buffer into the warehouse."""

    def __init__(self, events: AnalyticsEventRepository, sink: AnalyticsSink) -> None:
        self._events = events
        self._sink = sink

    def execute(self, at_ms: Optional[int] = None) -> ExportAnalyticsResult:
        start, end = previous_day_window(at_ms if at_ms is not None else now_millis())

        try:
            batch = self._events.get_between(start, end)
        except Exception:
            logger.error("Error reading analytics buffer", exc_info=True)
            return ExportAnalyticsResult(start, end, exported=0, deleted=0)

        if not batch:
            logger.info("No analytics events to export for window %s-%s", start, end)
            return ExportAnalyticsResult(start, end, exported=0, deleted=0)

        try:
            exported = self._sink.export(batch)
        except Exception:
            logger.error("Error exporting %d analytics events", len(batch), exc_info=True)
            return ExportAnalyticsResult(start, end, exported=0, deleted=0)

        deleted = 0
        try:
            deleted = self._events.delete([event.id for event in batch])
        except Exception:
            logger.error("Exported events could not be deleted", exc_info=True)

        logger.info("Exported %d analytics events, deleted %d", exported, deleted)
        return ExportAnalyticsResult(start, end, exported=exported, deleted=deleted)
