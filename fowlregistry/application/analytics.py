"""
Best-effort analytics recording shared by all use cases.

Analytics never fails the operation it describes: errors are logged
and dropped.
"""

import logging
from typing import Any

from fowlregistry.domain.ownership.entities import now_millis
from fowlregistry.domain.ownership.ports import AnalyticsEventRepository

logger = logging.getLogger(__name__)


class AnalyticsRecorder:
    """Buffers analytics events for the nightly warehouse export."""

    def __init__(self, events: AnalyticsEventRepository) -> None:
        self._events = events

    def record(self, event_name: str, event_data: dict[str, Any]) -> None:
        """Buffer one event. Never raises."""
        try:
            self._events.add(event_name, event_data, at=now_millis())
        except Exception:
            logger.error("Error logging analytics event %s", event_name, exc_info=True)
