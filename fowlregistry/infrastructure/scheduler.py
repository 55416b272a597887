"""
Background scheduler for the daily analytics export.

Uses APScheduler to run the export once a day at a fixed UTC hour
(02:00 by default). The job reads yesterday's buffered analytics events,
sends them to the warehouse sink and deletes what was exported.

Usage:
    scheduler = AnalyticsExportScheduler(export_use_case)
    scheduler.start()                      # begin the daily job
    scheduler.run_now("analytics_export")  # run it immediately
    scheduler.stop()                       # graceful shutdown
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from fowlregistry.application.ownership.export_analytics import ExportAnalyticsUseCase

logger = logging.getLogger(__name__)

EXPORT_TASK = "analytics_export"


class TaskStatus(Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class TaskResult:
    """Result of a scheduled task execution."""

    task_name: str
    status: TaskStatus
    started_at: str
    finished_at: str | None = None
    duration_seconds: float = 0.0
    details: dict = field(default_factory=dict)
    error: str | None = None


class AnalyticsExportScheduler:
    """Runs the analytics export on a daily cron trigger.

    Args:
        export_use_case: The export to run.
        hour_utc: Hour of day (UTC) at which the job fires.
    """

    def __init__(self, export_use_case: ExportAnalyticsUseCase, hour_utc: int = 2) -> None:
        self._export = export_use_case
        self._hour_utc = hour_utc
        self._running = False
        self._task_history: list[TaskResult] = []
        self._max_history = 200
        self._lock = threading.Lock()
        self._scheduler: Any | None = None

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def task_history(self) -> list[TaskResult]:
        return list(self._task_history)

    def start(self) -> None:
        """Start the scheduler with the daily export job."""
        if self._running:
            logger.warning("Scheduler already running.")
            return

        self._scheduler = BackgroundScheduler(
            timezone=timezone.utc,
            job_defaults={"coalesce": True, "max_instances": 1},
        )
        self._scheduler.add_job(
            self._task_export_analytics,
            CronTrigger(hour=self._hour_utc, minute=0, timezone=timezone.utc),
            id=EXPORT_TASK,
            name="Daily analytics export",
        )
        self._scheduler.start()
        self._running = True
        logger.info("Analytics export scheduled daily at %02d:00 UTC.", self._hour_utc)

    def stop(self) -> None:
        """Gracefully stop the scheduler."""
        self._running = False
        if self._scheduler is not None:
            self._scheduler.shutdown(wait=False)
            self._scheduler = None
        logger.info("Analytics export scheduler stopped.")

    def run_now(self, task_name: str = EXPORT_TASK) -> TaskResult:
        """Execute a named task immediately (blocking)."""
        task_map = {EXPORT_TASK: self._task_export_analytics}
        fn = task_map.get(task_name)
        if fn is None:
            return TaskResult(
                task_name=task_name,
                status=TaskStatus.FAILED,
                started_at=datetime.now(timezone.utc).isoformat(),
                error=f"Unknown task: {task_name}. Available: {list(task_map)}",
            )
        return fn()

    def _record_result(self, result: TaskResult) -> None:
        with self._lock:
            self._task_history.append(result)
            if len(self._task_history) > self._max_history:
                self._task_history = self._task_history[-self._max_history:]

    def _task_export_analytics(self) -> TaskResult:
        start = time.monotonic()
        started_at = datetime.now(timezone.utc).isoformat()
        try:
            outcome = self._export.execute()
            task_result = TaskResult(
                task_name=EXPORT_TASK,
                status=TaskStatus.COMPLETED,
                started_at=started_at,
                finished_at=datetime.now(timezone.utc).isoformat(),
                duration_seconds=round(time.monotonic() - start, 2),
                details={
                    "window_start": outcome.window_start,
                    "window_end": outcome.window_end,
                    "exported": outcome.exported,
                    "deleted": outcome.deleted,
                },
            )
        except Exception as exc:
            logger.exception("Analytics export task failed")
            task_result = TaskResult(
                task_name=EXPORT_TASK,
                status=TaskStatus.FAILED,
                started_at=started_at,
                finished_at=datetime.now(timezone.utc).isoformat(),
                duration_seconds=round(time.monotonic() - start, 2),
                error=str(exc),
            )

        self._record_result(task_result)
        return task_result
