"""
Adapter: Analytics event buffer.

Implements AnalyticsEventRepository port. Events sit here until the
daily export moves them to the warehouse.
"""

import json
import logging
from typing import Any
from uuid import uuid4

from sqlalchemy import bindparam, text
from sqlalchemy.engine import Engine

from fowlregistry.domain.ownership.entities import AnalyticsEvent
from fowlregistry.domain.ownership.ports import AnalyticsEventRepository

logger = logging.getLogger(__name__)


class AnalyticsEventRepositoryAdapter(AnalyticsEventRepository):
    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def add(self, event_name: str, event_data: dict[str, Any], at: int) -> str:
        event_id = str(uuid4())
        with self._engine.begin() as conn:
            conn.execute(
                text(
                    """
                    INSERT INTO analytics_events (id, event_name, event_data, created_at)
                    VALUES (:id, :name, :data, :at)
                    """
                ),
                {
                    "id": event_id,
                    "name": event_name,
                    "data": json.dumps(event_data, default=str),
                    "at": at,
                },
            )
        logger.debug("Buffered analytics event %s", event_name)
        return event_id

    def get_between(self, start: int, end: int) -> list[AnalyticsEvent]:
        query = text(
            """
            SELECT id, event_name, event_data, created_at
            FROM analytics_events
            WHERE created_at >= :start AND created_at < :end
            ORDER BY created_at, id
            """
        )
        with self._engine.connect() as conn:
            rows = conn.execute(query, {"start": start, "end": end}).fetchall()
        return [
            AnalyticsEvent(
                id=row.id,
                event_name=row.event_name,
                event_data=json.loads(row.event_data or "{}"),
                created_at=int(row.created_at),
            )
            for row in rows
        ]

    def delete(self, event_ids: list[str]) -> int:
        if not event_ids:
            return 0
        query = text("DELETE FROM analytics_events WHERE id IN :ids").bindparams(
            bindparam("ids", expanding=True)
        )
        with self._engine.begin() as conn:
            result = conn.execute(query, {"ids": list(event_ids)})
        return result.rowcount
