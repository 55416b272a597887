"""
Adapters: Analytics warehouse sinks.

HttpWarehouseSink POSTs newline-delimited JSON to a warehouse ingest
endpoint. JsonlFileSink appends one file per export day, used when no
endpoint is configured.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

import httpx

from fowlregistry.domain.ownership.entities import AnalyticsEvent
from fowlregistry.domain.ownership.ports import AnalyticsSink

logger = logging.getLogger(__name__)


def to_record(event: AnalyticsEvent) -> dict:
    return {
        "id": event.id,
        "eventName": event.event_name,
        "eventData": event.event_data,
        "createdAt": event.created_at,
    }


def to_ndjson(events: list[AnalyticsEvent]) -> str:
    return "".join(json.dumps(to_record(e), default=str) + "\n" for e in events)


class HttpWarehouseSink(AnalyticsSink):
    def __init__(self, url: str, timeout: float = 30.0) -> None:
        self._url = url
        self._timeout = timeout

    def export(self, events: list[AnalyticsEvent]) -> int:
        if not events:
            return 0
        with httpx.Client(timeout=self._timeout) as client:
            resp = client.post(
                self._url,
                content=to_ndjson(events).encode("utf-8"),
                headers={"Content-Type": "application/x-ndjson"},
            )
            resp.raise_for_status()
        logger.info("Warehouse accepted %d events", len(events))
        return len(events)


class JsonlFileSink(AnalyticsSink):
    def __init__(self, directory: str) -> None:
        self._directory = Path(directory)

    def export(self, events: list[AnalyticsEvent]) -> int:
        if not events:
            return 0
        self._directory.mkdir(parents=True, exist_ok=True)
        day = datetime.fromtimestamp(events[0].created_at / 1000, tz=timezone.utc)
        path = self._directory / f"analytics_{day:%Y%m%d}.jsonl"
        with path.open("a", encoding="utf-8") as fh:
            fh.write(to_ndjson(events))
        logger.info("Wrote %d events to %s", len(events), path)
        return len(events)
