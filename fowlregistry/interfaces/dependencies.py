"""
Dependencies shared by both bounded contexts.

The engine is built lazily on first use, so importing the application
never touches the database. Tests override get_engine.
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.engine import Engine

from fowlregistry.application.analytics import AnalyticsRecorder
from fowlregistry.infrastructure.database import create_engine_from_settings
from fowlregistry.infrastructure.ownership.analytics_event_repository import (
    AnalyticsEventRepositoryAdapter,
)


@lru_cache
def get_engine() -> Engine:
    """Build the process-wide SQLAlchemy engine from settings."""
    return create_engine_from_settings()


def get_analytics_recorder(engine: Engine = Depends(get_engine)) -> AnalyticsRecorder:
    return AnalyticsRecorder(AnalyticsEventRepositoryAdapter(engine=engine))
