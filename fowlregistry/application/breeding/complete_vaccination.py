"""
Use case: Mark a vaccination as given.

Input: event id, caller uid
Output: The COMPLETED VaccinationEvent
Side effects: Buffers a vaccination_completed analytics event.
Failure cases: UnauthenticatedError, VaccinationEventNotFoundError,
    FowlAccessDeniedError,
    VaccinationAlreadyCompletedError (also when a concurrent call won).
"""

import logging
from typing import Optional

from fowlregistry.application.analytics import AnalyticsRecorder
from fowlregistry.application.breeding.schedule_vaccination import require_fowl_owner
from fowlregistry.domain.breeding.entities import VaccinationEvent, VaccinationStatus
from fowlregistry.domain.breeding.errors import (
    VaccinationAlreadyCompletedError,
    VaccinationEventNotFoundError,
)
from fowlregistry.domain.breeding.ports import PedigreeRepository, VaccinationRepository
from fowlregistry.domain.errors import UnauthenticatedError
from fowlregistry.domain.ownership.entities import now_millis

logger = logging.getLogger(__name__)


class CompleteVaccinationUseCase:
    def __init__(
        self,
        vaccinations: VaccinationRepository,
        pedigree: PedigreeRepository,
        analytics: AnalyticsRecorder,
    ) -> None:
        self._vaccinations = vaccinations
        self._pedigree = pedigree
        self._analytics = analytics

    def execute(self, event_id: str, caller_uid: Optional[str]) -> VaccinationEvent:
        if not caller_uid:
            raise UnauthenticatedError()
        event = self._vaccinations.get(event_id)
        if event is None:
            raise VaccinationEventNotFoundError(event_id)
        require_fowl_owner(self._pedigree, event.fowl_id, caller_uid)
        if event.status is VaccinationStatus.COMPLETED:
            raise VaccinationAlreadyCompletedError(event_id)

        completed_at = now_millis()
        if not self._vaccinations.mark_completed(event_id, completed_at):
            raise VaccinationAlreadyCompletedError(event_id)

        logger.info("Vaccination %s completed", event_id)
        self._analytics.record(
            "vaccination_completed",
            {
                "fowlId": event.fowl_id,
                "vaccineName": event.vaccine_name,
                "completedDate": completed_at,
            },
        )
        return VaccinationEvent(
            id=event.id,
            fowl_id=event.fowl_id,
            vaccine_name=event.vaccine_name,
            scheduled_date=event.scheduled_date,
            status=VaccinationStatus.COMPLETED,
            completed_date=completed_at,
            notes=event.notes,
        )
