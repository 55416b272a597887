"""
Pydantic schemas for breeding API request/response validation.
"""

from typing import Optional

from pydantic import Field

from fowlregistry.domain.breeding.entities import VaccinationEvent
from fowlregistry.interfaces.schemas import CamelModel


class TreeNodeItem(CamelModel):
    id: str
    name: str
    breed: str
    gender: str
    generation: int
    position: int
    sibling_count: int
    birth_date: str
    x: float
    y: float
    color: str


class TreeConnectionItem(CamelModel):
    from_id: str
    to_id: str
    type: str


class FamilyTreeResponse(CamelModel):
    """A fowl's family tree with node positions centred on (0, 0)."""

    root_id: str
    nodes: list[TreeNodeItem]
    connections: list[TreeConnectionItem]


class BreedingAnalyticsResponse(CamelModel):
    period: str
    hatch_rate: float
    mortality_rate: float
    avg_weight_gain: float
    trend_data: list[float]


class ScheduleVaccinationRequest(CamelModel):
    """Request schema for scheduling a vaccination.

    Attributes:
        vaccine_name: Vaccine to administer.
        scheduled_date: When it is due, epoch milliseconds.
        notes: Free text.
    """

    vaccine_name: str = Field(..., min_length=1, max_length=256)
    scheduled_date: int = Field(..., gt=0)
    notes: str = Field(default="", max_length=2000)


class VaccinationEventItem(CamelModel):
    id: str
    fowl_id: str
    vaccine_name: str
    scheduled_date: int
    status: str
    completed_date: Optional[int] = None
    notes: str
    is_overdue: bool

    @classmethod
    def from_event(cls, event: VaccinationEvent) -> "VaccinationEventItem":
        return cls(
            id=event.id,
            fowl_id=event.fowl_id,
            vaccine_name=event.vaccine_name,
            scheduled_date=event.scheduled_date,
            status=event.status.value,
            completed_date=event.completed_date,
            notes=event.notes,
            is_overdue=event.is_overdue,
        )


class VaccinationListResponse(CamelModel):
    events: list[VaccinationEventItem]
