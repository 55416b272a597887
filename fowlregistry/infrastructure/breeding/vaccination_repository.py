"""
Adapter: Vaccination repository.

Implements VaccinationRepository port. Completion is compare-and-set on
status = 'PENDING'.
"""

import logging
from typing import Any, Optional

from sqlalchemy import bindparam, text
from sqlalchemy.engine import Engine

from fowlregistry.domain.breeding.entities import VaccinationEvent, VaccinationStatus
from fowlregistry.domain.breeding.ports import VaccinationRepository

logger = logging.getLogger(__name__)

VACCINATION_COLUMNS = (
    "id, fowl_id, vaccine_name, scheduled_date, status, completed_date, notes"
)


def _to_event(row: Any) -> VaccinationEvent:
    return VaccinationEvent(
        id=row.id,
        fowl_id=row.fowl_id,
        vaccine_name=row.vaccine_name,
        scheduled_date=int(row.scheduled_date),
        status=VaccinationStatus(row.status),
        completed_date=int(row.completed_date) if row.completed_date is not None else None,
        notes=row.notes or "",
    )


class VaccinationRepositoryAdapter(VaccinationRepository):
    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def add(self, event: VaccinationEvent) -> None:
        with self._engine.begin() as conn:
            conn.execute(
                text(
                    """
                    INSERT INTO vaccination_events
                        (id, fowl_id, vaccine_name, scheduled_date, status,
                         completed_date, notes)
                    VALUES
                        (:id, :fowl_id, :vaccine_name, :scheduled_date, :status,
                         :completed_date, :notes)
                    """
                ),
                {
                    "id": event.id,
                    "fowl_id": event.fowl_id,
                    "vaccine_name": event.vaccine_name,
                    "scheduled_date": event.scheduled_date,
                    "status": event.status.value,
                    "completed_date": event.completed_date,
                    "notes": event.notes,
                },
            )

    def get(self, event_id: str) -> Optional[VaccinationEvent]:
        query = text(f"SELECT {VACCINATION_COLUMNS} FROM vaccination_events WHERE id = :id")
        with self._engine.connect() as conn:
            row = conn.execute(query, {"id": event_id}).first()
        return _to_event(row) if row is not None else None

    def list_for_fowl(self, fowl_id: str) -> list[VaccinationEvent]:
        query = text(
            f"""
            SELECT {VACCINATION_COLUMNS}
            FROM vaccination_events
            WHERE fowl_id = :fowl_id
            ORDER BY scheduled_date, id
            """
        )
        with self._engine.connect() as conn:
            rows = conn.execute(query, {"fowl_id": fowl_id}).fetchall()
        return [_to_event(row) for row in rows]

    def list_for_fowls(self, fowl_ids: list[str]) -> list[VaccinationEvent]:
        if not fowl_ids:
            return []
        query = text(
            f"""
            SELECT {VACCINATION_COLUMNS}
            FROM vaccination_events
            WHERE fowl_id IN :ids
            ORDER BY fowl_id, scheduled_date, id
            """
        ).bindparams(bindparam("ids", expanding=True))
        with self._engine.connect() as conn:
            rows = conn.execute(query, {"ids": list(fowl_ids)}).fetchall()
        return [_to_event(row) for row in rows]

    def mark_completed(self, event_id: str, completed_at: int) -> bool:
        with self._engine.begin() as conn:
            result = conn.execute(
                text(
                    """
                    UPDATE vaccination_events
                    SET status = :completed, completed_date = :at
                    WHERE id = :id AND status = :pending
                    """
                ),
                {
                    "id": event_id,
                    "completed": VaccinationStatus.COMPLETED.value,
                    "pending": VaccinationStatus.PENDING.value,
                    "at": completed_at,
                },
            )
        return result.rowcount == 1
