"""Use case: List a fowl's vaccination schedule, earliest first."""

from fowlregistry.domain.breeding.entities import VaccinationEvent
from fowlregistry.domain.breeding.errors import PedigreeRootNotFoundError
from fowlregistry.domain.breeding.ports import PedigreeRepository, VaccinationRepository


class ListVaccinationsUseCase:
    def __init__(
        self, vaccinations: VaccinationRepository, pedigree: PedigreeRepository
    ) -> None:
        self._vaccinations = vaccinations
        self._pedigree = pedigree

    def execute(self, fowl_id: str) -> list[VaccinationEvent]:
        if not self._pedigree.get_records([fowl_id]):
            raise PedigreeRootNotFoundError(fowl_id)
        return self._vaccinations.list_for_fowl(fowl_id)
