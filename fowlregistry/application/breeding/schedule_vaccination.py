"""
Use case: Schedule a vaccination for a fowl.

Input: ScheduleVaccinationCommand
Output: The stored PENDING VaccinationEvent
Side effects: Buffers a vaccination_scheduled analytics event.
Failure cases: UnauthenticatedError, InvalidVaccinationError,
    PedigreeRootNotFoundError, FowlAccessDeniedError.
"""

import logging
from typing import Optional
from uuid import uuid4

from fowlregistry.application.analytics import AnalyticsRecorder
from fowlregistry.application.breeding.dtos import ScheduleVaccinationCommand
from fowlregistry.domain.breeding.entities import (
    PedigreeRecord,
    VaccinationEvent,
    VaccinationStatus,
)
from fowlregistry.domain.breeding.errors import (
    FowlAccessDeniedError,
    InvalidVaccinationError,
    PedigreeRootNotFoundError,
)
from fowlregistry.domain.breeding.ports import PedigreeRepository, VaccinationRepository
from fowlregistry.domain.errors import UnauthenticatedError

logger = logging.getLogger(__name__)


def require_fowl_owner(
    pedigree: PedigreeRepository, fowl_id: str, caller_uid: Optional[str]
) -> PedigreeRecord:
    """Return the fowl's record if caller_uid owns it, else raise."""
    if not caller_uid:
        raise UnauthenticatedError()
    records = pedigree.get_records([fowl_id])
    if not records:
        raise PedigreeRootNotFoundError(fowl_id)
    if records[0].owner_id != caller_uid:
        logger.warning("Caller %s refused health write on fowl=%s", caller_uid, fowl_id)
        raise FowlAccessDeniedError(fowl_id)
    return records[0]


class ScheduleVaccinationUseCase:
    def __init__(
        self,
        vaccinations: VaccinationRepository,
        pedigree: PedigreeRepository,
        analytics: AnalyticsRecorder,
    ) -> None:
        self._vaccinations = vaccinations
        self._pedigree = pedigree
        self._analytics = analytics

    def execute(self, command: ScheduleVaccinationCommand) -> VaccinationEvent:
        vaccine_name = (command.vaccine_name or "").strip()
        if not vaccine_name:
            raise InvalidVaccinationError("vaccine name is empty")
        if command.scheduled_date <= 0:
            raise InvalidVaccinationError("scheduled date must be positive")
        require_fowl_owner(self._pedigree, command.fowl_id, command.caller_uid)

        event = VaccinationEvent(
            id=str(uuid4()),
            fowl_id=command.fowl_id,
            vaccine_name=vaccine_name,
            scheduled_date=command.scheduled_date,
            status=VaccinationStatus.PENDING,
            notes=command.notes or "",
        )
        self._vaccinations.add(event)
        logger.info("Vaccination %s scheduled for fowl=%s", event.id, event.fowl_id)

        self._analytics.record(
            "vaccination_scheduled",
            {
                "fowlId": event.fowl_id,
                "vaccineName": event.vaccine_name,
                "scheduledDate": event.scheduled_date,
            },
        )
        return event
