"""
Port interfaces (ABCs) for the breeding bounded context.
"""

from abc import ABC, abstractmethod
from typing import Optional

from fowlregistry.domain.breeding.entities import (
    BreedingSummary,
    FamilyTree,
    LineageLink,
    PedigreeRecord,
    VaccinationEvent,
)


class PedigreeRepository(ABC):
    """Port for reading fowl display records and lineage links."""

    @abstractmethod
    def get_records(self, fowl_ids: list[str]) -> list[PedigreeRecord]:
        """Return display records for the given ids (unknown ids are skipped)."""
        raise NotImplementedError

    @abstractmethod
    def get_links(self, fowl_ids: list[str]) -> list[LineageLink]:
        """Return every link whose parent or offspring is in fowl_ids."""
        raise NotImplementedError


class VaccinationRepository(ABC):
    """Port for persisting vaccination events."""

    @abstractmethod
    def add(self, event: VaccinationEvent) -> None:
        raise NotImplementedError

    @abstractmethod
    def get(self, event_id: str) -> Optional[VaccinationEvent]:
        raise NotImplementedError

    @abstractmethod
    def list_for_fowl(self, fowl_id: str) -> list[VaccinationEvent]:
        """Return the fowl's events ordered by scheduled date."""
        raise NotImplementedError

    @abstractmethod
    def list_for_fowls(self, fowl_ids: list[str]) -> list[VaccinationEvent]:
        raise NotImplementedError

    @abstractmethod
    def mark_completed(self, event_id: str, completed_at: int) -> bool:
        """Move a PENDING event to COMPLETED.

        Returns:
            True if the event was PENDING and is now COMPLETED.
        """
        raise NotImplementedError


class BreedingSummaryRepository(ABC):
    """Port for aggregating breeding events over a time window."""

    @abstractmethod
    def get_summary(self, start: int, end: int) -> BreedingSummary:
        """Aggregate breeding events with breeding_date in [start, end)."""
        raise NotImplementedError


class TreeRenderer(ABC):
    """Port for turning a laid-out family tree into a static document."""

    @abstractmethod
    def render_png(self, tree: FamilyTree) -> bytes:
        raise NotImplementedError

    @abstractmethod
    def render_pdf(self, tree: FamilyTree) -> bytes:
        raise NotImplementedError
