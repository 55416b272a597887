"""
Tests for the breeding use cases: family tree, tree export, breeding
analytics and the vaccination schedule.
"""

import time

import pytest
from sqlalchemy import insert, text

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
    resolve_window,
)
from fowlregistry.application.breeding.get_family_tree import GetFamilyTreeUseCase
from fowlregistry.application.breeding.list_vaccinations import ListVaccinationsUseCase
from fowlregistry.application.breeding.schedule_vaccination import (
    ScheduleVaccinationUseCase,
)
from fowlregistry.domain.breeding.analytics import DAY_MS
from fowlregistry.domain.breeding.entities import AnalyticsPeriod, VaccinationStatus
from fowlregistry.domain.breeding.errors import (
    FowlAccessDeniedError,
    InvalidAnalyticsPeriodError,
    InvalidVaccinationError,
    PedigreeRootNotFoundError,
    UnsupportedExportFormatError,
    VaccinationAlreadyCompletedError,
    VaccinationEventNotFoundError,
)
from fowlregistry.domain.breeding.family_tree import FamilyTreeBuilder
from fowlregistry.domain.errors import PermissionDeniedError, UnauthenticatedError
from fowlregistry.infrastructure import database
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


@pytest.fixture
def pedigree(engine) -> PedigreeRepositoryAdapter:
    return PedigreeRepositoryAdapter(engine=engine)


@pytest.fixture
def builder(pedigree) -> FamilyTreeBuilder:
    return FamilyTreeBuilder(pedigree, max_generations=3)


@pytest.fixture
def vaccinations(engine) -> VaccinationRepositoryAdapter:
    return VaccinationRepositoryAdapter(engine=engine)


def _event_names(engine) -> list[str]:
    with engine.connect() as conn:
        rows = conn.execute(text("SELECT event_name FROM analytics_events")).fetchall()
    return [row.event_name for row in rows]


# ══════════════════════════════════════════════════════════════════════
# Family tree
# ══════════════════════════════════════════════════════════════════════


class TestGetFamilyTree:
    def test_tree_around_goldie(self, builder) -> None:
        result = GetFamilyTreeUseCase(builder).execute("F1")

        assert result.tree.root_id == "F1"
        assert {n.id for n in result.tree.nodes} == {"F1", "F2", "F3", "F4"}
        assert result.positions["F1"].x == pytest.approx(0.0)
        assert result.positions["F1"].y == pytest.approx(0.0)
        for fowl_id in ("F2", "F3", "F4"):
            pos = result.positions[fowl_id]
            assert (pos.x ** 2 + pos.y ** 2) ** 0.5 == pytest.approx(100.0)

    def test_level_radius_scales_layout(self, builder) -> None:
        result = GetFamilyTreeUseCase(builder, level_radius=40.0).execute("F1")
        pos = result.positions["F2"]
        assert (pos.x ** 2 + pos.y ** 2) ** 0.5 == pytest.approx(40.0)

    def test_unknown_fowl(self, builder) -> None:
        with pytest.raises(PedigreeRootNotFoundError):
            GetFamilyTreeUseCase(builder).execute("F404")


class TestExportFamilyTree:
    @pytest.fixture
    def use_case(self, builder, analytics) -> ExportFamilyTreeUseCase:
        return ExportFamilyTreeUseCase(builder, PillowReportlabTreeRenderer(), analytics)

    def test_png(self, use_case, engine) -> None:
        export = use_case.execute("F1", "png")
        assert export.content.startswith(b"\x89PNG")
        assert export.media_type == "image/png"
        assert export.filename == "family_tree_F1.png"
        assert _event_names(engine) == ["tree_exported"]

    def test_pdf(self, use_case) -> None:
        export = use_case.execute("F1", "PDF")
        assert export.content.startswith(b"%PDF")
        assert export.media_type == "application/pdf"
        assert export.filename == "family_tree_F1.pdf"

    def test_single_node_tree(self, use_case, engine) -> None:
        with engine.begin() as conn:
            conn.execute(insert(database.fowls), {"id": "F9", "owner_id": "bob", "name": "Solo"})
        assert use_case.execute("F9", "png").content.startswith(b"\x89PNG")

    @pytest.mark.parametrize("fmt", ["svg", "", "jpeg"])
    def test_unsupported_format(self, use_case, engine, fmt) -> None:
        with pytest.raises(UnsupportedExportFormatError):
            use_case.execute("F1", fmt)
        assert _event_names(engine) == []


# ══════════════════════════════════════════════════════════════════════
# Breeding analytics
# ══════════════════════════════════════════════════════════════════════


class TestResolveWindow:
    NOW = 1_717_200_000_000

    @pytest.mark.parametrize(
        "period, days",
        [
            (AnalyticsPeriod.SEVEN_DAYS, 7),
            (AnalyticsPeriod.THIRTY_DAYS, 30),
            (AnalyticsPeriod.NINETY_DAYS, 90),
        ],
    )
    def test_fixed_periods_end_now(self, period, days) -> None:
        assert resolve_window(period, None, None, self.NOW) == (self.NOW - days * DAY_MS, self.NOW)

    def test_custom(self) -> None:
        assert resolve_window(AnalyticsPeriod.CUSTOM, 10, 20, self.NOW) == (10, 20)

    @pytest.mark.parametrize("start, end", [(None, 20), (10, None), (20, 20), (30, 20)])
    def test_custom_bad_bounds(self, start, end) -> None:
        with pytest.raises(InvalidAnalyticsPeriodError):
            resolve_window(AnalyticsPeriod.CUSTOM, start, end, self.NOW)


class TestGetBreedingAnalytics:
    @pytest.fixture
    def use_case(self, engine, analytics) -> GetBreedingAnalyticsUseCase:
        return GetBreedingAnalyticsUseCase(BreedingSummaryRepositoryAdapter(engine=engine), analytics)

    def test_seven_days(self, use_case, engine) -> None:
        now = int(time.time() * 1000)
        with engine.begin() as conn:
            conn.execute(
                insert(database.breeding_events),
                [
                    {"id": "B1", "sire_id": "F2", "dam_id": "F3", "breeding_date": now - DAY_MS,
                     "egg_count": 10, "hatched_count": 8, "offspring_count": 8},
                    {"id": "B2", "sire_id": "F2", "dam_id": "F3", "breeding_date": now - 2 * DAY_MS,
                     "egg_count": 10, "hatched_count": 7, "offspring_count": 6},
                    {"id": "B3", "sire_id": "F2", "dam_id": "F3", "breeding_date": now - 20 * DAY_MS,
                     "egg_count": 50, "hatched_count": 0, "offspring_count": 0},
                ],
            )

        result = use_case.execute(AnalyticsQuery(period="seven_days"))

        assert result.period is AnalyticsPeriod.SEVEN_DAYS
        assert result.hatch_rate == pytest.approx(75.0)
        assert result.mortality_rate == pytest.approx(25.0)
        assert result.avg_weight_gain == pytest.approx(350.0)
        assert len(result.trend_data) == 7
        assert _event_names(engine) == ["breeding_analytics_viewed"]

    def test_no_data(self, use_case) -> None:
        result = use_case.execute(AnalyticsQuery(period="THIRTY_DAYS"))
        assert result.hatch_rate == 0.0
        assert result.mortality_rate == 100.0
        assert result.trend_data == [0.0] * 30

    def test_custom_window(self, use_case) -> None:
        result = use_case.execute(AnalyticsQuery("CUSTOM", start=0, end=3 * DAY_MS))
        assert result.period is AnalyticsPeriod.CUSTOM
        assert len(result.trend_data) == 3

    def test_unknown_period(self, use_case, engine) -> None:
        with pytest.raises(InvalidAnalyticsPeriodError):
            use_case.execute(AnalyticsQuery(period="FORTNIGHT"))
        assert _event_names(engine) == []


# ══════════════════════════════════════════════════════════════════════
# Vaccinations
# ══════════════════════════════════════════════════════════════════════


class TestVaccinationSchedule:
    @pytest.fixture
    def schedule(self, vaccinations, pedigree, analytics) -> ScheduleVaccinationUseCase:
        return ScheduleVaccinationUseCase(vaccinations, pedigree, analytics)

    @pytest.fixture
    def complete(self, vaccinations, pedigree, analytics) -> CompleteVaccinationUseCase:
        return CompleteVaccinationUseCase(vaccinations, pedigree, analytics)

    def test_schedule_list_complete(
        self, schedule, complete, vaccinations, pedigree, engine
    ) -> None:
        later = schedule.execute(
            ScheduleVaccinationCommand("F1", "Newcastle", 5_000, caller_uid="alice")
        )
        first = schedule.execute(
            ScheduleVaccinationCommand(
                "F1", " Marek ", 1_000, notes="day-old", caller_uid="alice"
            )
        )

        listed = ListVaccinationsUseCase(vaccinations, pedigree).execute("F1")
        assert [e.id for e in listed] == [first.id, later.id]
        assert listed[0].vaccine_name == "Marek"
        assert listed[0].status is VaccinationStatus.PENDING
        assert listed[0].is_overdue is True

        done = complete.execute(first.id, "alice")
        assert done.status is VaccinationStatus.COMPLETED
        assert done.completed_date > 0
        assert vaccinations.get(first.id).status is VaccinationStatus.COMPLETED
        assert vaccinations.get(first.id).is_overdue is False

        assert _event_names(engine).count("vaccination_scheduled") == 2
        assert _event_names(engine).count("vaccination_completed") == 1

    def test_complete_twice(self, schedule, complete) -> None:
        event = schedule.execute(
            ScheduleVaccinationCommand("F2", "Marek", 1_000, caller_uid="alice")
        )
        complete.execute(event.id, "alice")
        with pytest.raises(VaccinationAlreadyCompletedError):
            complete.execute(event.id, "alice")

    def test_complete_unknown(self, complete) -> None:
        with pytest.raises(VaccinationEventNotFoundError):
            complete.execute("nope", "alice")

    @pytest.mark.parametrize("name, date", [("", 1_000), ("   ", 1_000), ("Marek", 0), ("Marek", -5)])
    def test_invalid_event(self, schedule, name, date) -> None:
        with pytest.raises(InvalidVaccinationError):
            schedule.execute(ScheduleVaccinationCommand("F1", name, date, caller_uid="alice"))

    def test_unknown_fowl(self, schedule, vaccinations, pedigree) -> None:
        with pytest.raises(PedigreeRootNotFoundError):
            schedule.execute(
                ScheduleVaccinationCommand("F404", "Marek", 1_000, caller_uid="alice")
            )
        with pytest.raises(PedigreeRootNotFoundError):
            ListVaccinationsUseCase(vaccinations, pedigree).execute("F404")

    def test_only_owner_schedules(self, schedule, vaccinations) -> None:
        with pytest.raises(FowlAccessDeniedError) as exc_info:
            schedule.execute(
                ScheduleVaccinationCommand("F1", "Marek", 1_000, caller_uid="mallory")
            )
        assert isinstance(exc_info.value, PermissionDeniedError)
        assert vaccinations.list_for_fowl("F1") == []

    def test_anonymous_schedule(self, schedule) -> None:
        with pytest.raises(UnauthenticatedError):
            schedule.execute(ScheduleVaccinationCommand("F1", "Marek", 1_000))

    def test_only_owner_completes(self, schedule, complete, vaccinations) -> None:
        event = schedule.execute(
            ScheduleVaccinationCommand("F1", "Marek", 1_000, caller_uid="alice")
        )
        with pytest.raises(FowlAccessDeniedError):
            complete.execute(event.id, "mallory")
        with pytest.raises(UnauthenticatedError):
            complete.execute(event.id, None)
        assert vaccinations.get(event.id).status is VaccinationStatus.PENDING
