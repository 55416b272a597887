"""
Dependency injection for the breeding bounded context.

These are the composition root for the breeding context.
"""

from fastapi import Depends
from sqlalchemy.engine import Engine

from fowlregistry.application.analytics import AnalyticsRecorder
from fowlregistry.application.breeding.complete_vaccination import (
    CompleteVaccinationUseCase,
)
from fowlregistry.application.breeding.export_family_tree import ExportFamilyTreeUseCase
from fowlregistry.application.breeding.get_breeding_analytics import (
    GetBreedingAnalyticsUseCase,
)
from fowlregistry.application.breeding.get_family_tree import GetFamilyTreeUseCase
from fowlregistry.application.breeding.list_vaccinations import ListVaccinationsUseCase
from fowlregistry.application.breeding.schedule_vaccination import (
    ScheduleVaccinationUseCase,
)
from fowlregistry.core.config import settings
from fowlregistry.domain.breeding.family_tree import FamilyTreeBuilder
from fowlregistry.infrastructure.breeding.breeding_summary_repository import (
    BreedingSummaryRepositoryAdapter,
)
from fowlregistry.infrastructure.breeding.pedigree_repository import (
    PedigreeRepositoryAdapter,
)
from fowlregistry.infrastructure.breeding.tree_renderer import (
    PillowReportlabTreeRenderer,
)
from fowlregistry.infrastructure.breeding.vaccination_repository import (
    VaccinationRepositoryAdapter,
)
from fowlregistry.interfaces.dependencies import get_analytics_recorder, get_engine


def _builder(engine: Engine) -> FamilyTreeBuilder:
    return FamilyTreeBuilder(
        PedigreeRepositoryAdapter(engine=engine),
        max_generations=settings.family_tree_max_generations,
    )


def get_family_tree_use_case(engine: Engine = Depends(get_engine)) -> GetFamilyTreeUseCase:
    """Build GetFamilyTreeUseCase with its infrastructure dependencies."""
    return GetFamilyTreeUseCase(
        builder=_builder(engine),
        level_radius=settings.family_tree_level_radius,
    )


def get_export_family_tree_use_case(
    engine: Engine = Depends(get_engine),
    analytics: AnalyticsRecorder = Depends(get_analytics_recorder),
) -> ExportFamilyTreeUseCase:
    """Build ExportFamilyTreeUseCase with its infrastructure dependencies."""
    return ExportFamilyTreeUseCase(
        builder=_builder(engine),
        renderer=PillowReportlabTreeRenderer(
            level_radius=settings.family_tree_level_radius
        ),
        analytics=analytics,
    )


def get_breeding_analytics_use_case(
    engine: Engine = Depends(get_engine),
    analytics: AnalyticsRecorder = Depends(get_analytics_recorder),
) -> GetBreedingAnalyticsUseCase:
    return GetBreedingAnalyticsUseCase(
        summaries=BreedingSummaryRepositoryAdapter(engine=engine),
        analytics=analytics,
    )


def get_schedule_vaccination_use_case(
    engine: Engine = Depends(get_engine),
    analytics: AnalyticsRecorder = Depends(get_analytics_recorder),
) -> ScheduleVaccinationUseCase:
    return ScheduleVaccinationUseCase(
        vaccinations=VaccinationRepositoryAdapter(engine=engine),
        pedigree=PedigreeRepositoryAdapter(engine=engine),
        analytics=analytics,
    )


def get_list_vaccinations_use_case(
    engine: Engine = Depends(get_engine),
) -> ListVaccinationsUseCase:
    return ListVaccinationsUseCase(
        vaccinations=VaccinationRepositoryAdapter(engine=engine),
        pedigree=PedigreeRepositoryAdapter(engine=engine),
    )


def get_complete_vaccination_use_case(
    engine: Engine = Depends(get_engine),
    analytics: AnalyticsRecorder = Depends(get_analytics_recorder),
) -> CompleteVaccinationUseCase:
    return CompleteVaccinationUseCase(
        vaccinations=VaccinationRepositoryAdapter(engine=engine),
        pedigree=PedigreeRepositoryAdapter(engine=engine),
        analytics=analytics,
    )
