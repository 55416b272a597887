"""
FastAPI router for the breeding bounded context.

Family tree, breeding analytics and vaccination schedule endpoints.
All routes require an authenticated caller and delegate to use cases.
Vaccination writes are limited to the fowl's owner.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status

from fowlregistry.application.breeding.complete_vaccination import (
    CompleteVaccinationUseCase,
)
from fowlregistry.application.breeding.dtos import (
    AnalyticsQuery,
    ScheduleVaccinationCommand,
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
from fowlregistry.domain.breeding.family_tree import node_color
from fowlregistry.interfaces.breeding.dependencies import (
    get_breeding_analytics_use_case,
    get_complete_vaccination_use_case,
    get_export_family_tree_use_case,
    get_family_tree_use_case,
    get_list_vaccinations_use_case,
    get_schedule_vaccination_use_case,
)
from fowlregistry.interfaces.breeding.schemas import (
    BreedingAnalyticsResponse,
    FamilyTreeResponse,
    ScheduleVaccinationRequest,
    TreeConnectionItem,
    TreeNodeItem,
    VaccinationEventItem,
    VaccinationListResponse,
)
from fowlregistry.interfaces.schemas import ERROR_RESPONSES
from fowlregistry.shared.security.auth import require_caller_uid
from fowlregistry.shared.security.rate_limiting import HEAVY_RATE_LIMIT, limiter

router = APIRouter(tags=["breeding"], dependencies=[Depends(require_caller_uid)])


@router.get(
    "/fowls/{fowl_id}/family-tree",
    response_model=FamilyTreeResponse,
    responses=ERROR_RESPONSES,
    summary="Family tree",
    description="Ancestors and descendants of a fowl with their radial layout.",
)
def get_family_tree(
    fowl_id: str,
    use_case: GetFamilyTreeUseCase = Depends(get_family_tree_use_case),
) -> FamilyTreeResponse:
    result = use_case.execute(fowl_id)
    return FamilyTreeResponse(
        root_id=result.tree.root_id,
        nodes=[
            TreeNodeItem(
                id=node.id,
                name=node.name,
                breed=node.breed,
                gender=node.gender,
                generation=node.generation,
                position=node.position,
                sibling_count=node.sibling_count,
                birth_date=node.birth_date,
                x=round(result.positions[node.id].x, 3),
                y=round(result.positions[node.id].y, 3),
                color=node_color(node.gender),
            )
            for node in result.tree.nodes
        ],
        connections=[
            TreeConnectionItem(from_id=c.from_id, to_id=c.to_id, type=c.type.value)
            for c in result.tree.connections
        ],
    )


@router.get(
    "/fowls/{fowl_id}/family-tree/export",
    responses={**ERROR_RESPONSES, 200: {"content": {"image/png": {}, "application/pdf": {}}}},
    summary="Export family tree",
    description="Render the family tree as a PNG image or a PDF document.",
)
@limiter.limit(HEAVY_RATE_LIMIT)
def export_family_tree(
    request: Request,
    fowl_id: str,
    export_format: str = Query("png", alias="format"),
    use_case: ExportFamilyTreeUseCase = Depends(get_export_family_tree_use_case),
) -> Response:
    export = use_case.execute(fowl_id, export_format)
    return Response(
        content=export.content,
        media_type=export.media_type,
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )


@router.get(
    "/breeding/analytics",
    response_model=BreedingAnalyticsResponse,
    responses=ERROR_RESPONSES,
    summary="Breeding analytics",
    description="Hatch rate, mortality, weight-gain proxy and trend for a period.",
)
def get_breeding_analytics(
    period: str = Query("SEVEN_DAYS"),
    start: Optional[int] = Query(None, description="Custom window start, epoch ms"),
    end: Optional[int] = Query(None, description="Custom window end, epoch ms"),
    use_case: GetBreedingAnalyticsUseCase = Depends(get_breeding_analytics_use_case),
) -> BreedingAnalyticsResponse:
    analytics = use_case.execute(AnalyticsQuery(period=period, start=start, end=end))
    return BreedingAnalyticsResponse(
        period=analytics.period.name,
        hatch_rate=analytics.hatch_rate,
        mortality_rate=analytics.mortality_rate,
        avg_weight_gain=analytics.avg_weight_gain,
        trend_data=analytics.trend_data,
    )


@router.post(
    "/fowls/{fowl_id}/vaccinations",
    response_model=VaccinationEventItem,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
    summary="Schedule a vaccination",
)
def schedule_vaccination(
    fowl_id: str,
    payload: ScheduleVaccinationRequest,
    caller_uid: str = Depends(require_caller_uid),
    use_case: ScheduleVaccinationUseCase = Depends(get_schedule_vaccination_use_case),
) -> VaccinationEventItem:
    event = use_case.execute(
        ScheduleVaccinationCommand(
            fowl_id=fowl_id,
            vaccine_name=payload.vaccine_name,
            scheduled_date=payload.scheduled_date,
            notes=payload.notes,
            caller_uid=caller_uid,
        )
    )
    return VaccinationEventItem.from_event(event)


@router.get(
    "/fowls/{fowl_id}/vaccinations",
    response_model=VaccinationListResponse,
    responses=ERROR_RESPONSES,
    summary="Vaccination schedule",
)
def list_vaccinations(
    fowl_id: str,
    use_case: ListVaccinationsUseCase = Depends(get_list_vaccinations_use_case),
) -> VaccinationListResponse:
    events = use_case.execute(fowl_id)
    return VaccinationListResponse(
        events=[VaccinationEventItem.from_event(e) for e in events]
    )


@router.post(
    "/vaccinations/{event_id}/complete",
    response_model=VaccinationEventItem,
    responses=ERROR_RESPONSES,
    summary="Complete a vaccination",
)
def complete_vaccination(
    event_id: str,
    caller_uid: str = Depends(require_caller_uid),
    use_case: CompleteVaccinationUseCase = Depends(get_complete_vaccination_use_case),
) -> VaccinationEventItem:
    return VaccinationEventItem.from_event(use_case.execute(event_id, caller_uid))
