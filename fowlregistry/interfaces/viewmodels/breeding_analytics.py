"""
View-model for the breeding analytics dashboard.

States: Loading → Loaded(analytics) | Failed(message)
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Union

from fowlregistry.application.breeding.dtos import AnalyticsQuery
from fowlregistry.application.breeding.get_breeding_analytics import (
    GetBreedingAnalyticsUseCase,
)
from fowlregistry.domain.breeding.entities import AnalyticsPeriod, BreedingAnalytics
from fowlregistry.domain.errors import DomainError
from fowlregistry.interfaces.viewmodels.state import StateHolder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Loading:
    pass


@dataclass(frozen=True)
class Loaded:
    analytics: BreedingAnalytics


@dataclass(frozen=True)
class Failed:
    message: str


AnalyticsState = Union[Loading, Loaded, Failed]


class BreedingAnalyticsViewModel:
    def __init__(self, get_analytics: GetBreedingAnalyticsUseCase) -> None:
        self._get_analytics = get_analytics
        self.state: StateHolder[AnalyticsState] = StateHolder(Loading())
        self.selected_period = AnalyticsPeriod.SEVEN_DAYS

    async def select_period(
        self,
        period: AnalyticsPeriod,
        start: Optional[int] = None,
        end: Optional[int] = None,
    ) -> None:
        self.selected_period = period
        self.state.set(Loading())
        query = AnalyticsQuery(period=period.name, start=start, end=end)
        try:
            analytics = await asyncio.to_thread(self._get_analytics.execute, query)
        except Exception as exc:
            logger.warning("Breeding analytics failed: %s", exc)
            message = exc.message if isinstance(exc, DomainError) else "Could not load analytics"
            self.state.set(Failed(message))
            return
        self.state.set(Loaded(analytics))
