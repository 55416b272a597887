"""
View-model for the pedigree and vaccination screens.

States: Loading → FamilyTreeLoaded | VaccinationScheduleLoaded | Failed.
Exports of the loaded tree land in `last_export`.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Union

from fowlregistry.application.breeding.complete_vaccination import (
    CompleteVaccinationUseCase,
)
from fowlregistry.application.breeding.dtos import FamilyTreeResult, TreeExport
from fowlregistry.application.breeding.export_family_tree import ExportFamilyTreeUseCase
from fowlregistry.application.breeding.get_family_tree import GetFamilyTreeUseCase
from fowlregistry.application.breeding.list_vaccinations import ListVaccinationsUseCase
from fowlregistry.domain.breeding.entities import VaccinationEvent
from fowlregistry.domain.errors import DomainError
from fowlregistry.interfaces.viewmodels.state import StateHolder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Loading:
    pass


@dataclass(frozen=True)
class FamilyTreeLoaded:
    result: FamilyTreeResult


@dataclass(frozen=True)
class VaccinationScheduleLoaded:
    fowl_id: str
    events: tuple[VaccinationEvent, ...]

    @property
    def overdue(self) -> list[VaccinationEvent]:
        return [e for e in self.events if e.is_overdue]


@dataclass(frozen=True)
class Failed:
    message: str


BreedingState = Union[Loading, FamilyTreeLoaded, VaccinationScheduleLoaded, Failed]


def _message(exc: Exception, fallback: str) -> str:
    return exc.message if isinstance(exc, DomainError) else fallback


class BreedingViewModel:
    def __init__(
        self,
        get_family_tree: GetFamilyTreeUseCase,
        export_family_tree: ExportFamilyTreeUseCase,
        list_vaccinations: ListVaccinationsUseCase,
        complete_vaccination: CompleteVaccinationUseCase,
        caller_uid: Optional[str] = None,
    ) -> None:
        self._get_family_tree = get_family_tree
        self._export_family_tree = export_family_tree
        self._list_vaccinations = list_vaccinations
        self._complete_vaccination = complete_vaccination
        self._caller_uid = caller_uid
        self.state: StateHolder[BreedingState] = StateHolder(Loading())
        self.last_export: Optional[TreeExport] = None

    async def load_family_tree(self, fowl_id: str) -> None:
        self.state.set(Loading())
        try:
            result = await asyncio.to_thread(self._get_family_tree.execute, fowl_id)
        except Exception as exc:
            logger.warning("Family tree load failed for fowl=%s: %s", fowl_id, exc)
            self.state.set(Failed(_message(exc, "Could not load family tree")))
            return
        self.state.set(FamilyTreeLoaded(result))

    async def export_tree(self, export_format: str) -> Optional[TreeExport]:
        """Export the loaded tree; None when no tree is loaded or export fails."""
        current = self.state.value
        if not isinstance(current, FamilyTreeLoaded):
            return None
        try:
            export = await asyncio.to_thread(
                self._export_family_tree.execute,
                current.result.tree.root_id,
                export_format,
            )
        except Exception as exc:
            logger.warning("Tree export failed: %s", exc)
            self.state.set(Failed(_message(exc, "Could not export family tree")))
            return None
        self.last_export = export
        return export

    async def load_vaccinations(self, fowl_id: str) -> None:
        self.state.set(Loading())
        try:
            events = await asyncio.to_thread(self._list_vaccinations.execute, fowl_id)
        except Exception as exc:
            logger.warning("Vaccination load failed for fowl=%s: %s", fowl_id, exc)
            self.state.set(Failed(_message(exc, "Could not load vaccinations")))
            return
        self.state.set(VaccinationScheduleLoaded(fowl_id, tuple(events)))

    async def mark_vaccination_complete(self, event_id: str) -> None:
        """Complete an event, then reload the schedule it belongs to."""
        try:
            event = await asyncio.to_thread(
                self._complete_vaccination.execute, event_id, self._caller_uid
            )
        except Exception as exc:
            logger.warning("Vaccination completion failed: %s", exc)
            self.state.set(Failed(_message(exc, "Could not update vaccination")))
            return
        await self.load_vaccinations(event.fowl_id)
