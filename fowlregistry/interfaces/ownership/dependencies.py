"""
Dependency injection for the ownership bounded context.

Provides FastAPI dependency functions that wire infrastructure
adapters into use cases via constructor injection.
These are the composition root for the ownership context.
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.engine import Engine

from fowlregistry.application.analytics import AnalyticsRecorder
from fowlregistry.application.ownership.create_transfer import CreateTransferUseCase
from fowlregistry.application.ownership.export_analytics import ExportAnalyticsUseCase
from fowlregistry.application.ownership.export_user_data import ExportUserDataUseCase
from fowlregistry.application.ownership.get_transfer import GetTransferUseCase
from fowlregistry.application.ownership.verify_transfer import VerifyTransferUseCase
from fowlregistry.core.config import settings
from fowlregistry.domain.ownership.ownership_service import OwnershipTransferService
from fowlregistry.domain.ownership.ports import AnalyticsSink
from fowlregistry.domain.ownership.transfer_notifier import TransferNotifier
from fowlregistry.infrastructure.breeding.vaccination_repository import (
    VaccinationRepositoryAdapter,
)
from fowlregistry.infrastructure.ownership.analytics_event_repository import (
    AnalyticsEventRepositoryAdapter,
)
from fowlregistry.infrastructure.ownership.ownership_store import OwnershipStoreAdapter
from fowlregistry.infrastructure.ownership.push_gateway_adapter import (
    HttpPushGatewayAdapter,
)
from fowlregistry.infrastructure.ownership.signature_verifier import (
    EcdsaSignatureVerifier,
)
from fowlregistry.infrastructure.ownership.transfer_repository import (
    TransferRepositoryAdapter,
)
from fowlregistry.infrastructure.ownership.user_directory import UserDirectoryAdapter
from fowlregistry.infrastructure.ownership.warehouse_sink import (
    HttpWarehouseSink,
    JsonlFileSink,
)
from fowlregistry.interfaces.dependencies import get_analytics_recorder, get_engine


@lru_cache
def get_transfer_notifier() -> TransferNotifier:
    """Process-wide notifier; it owns the in-flight notification tasks."""
    return TransferNotifier(
        users=UserDirectoryAdapter(engine=get_engine()),
        gateway=HttpPushGatewayAdapter(
            url=settings.push_gateway_url,
            auth_token=settings.push_gateway_token,
            timeout=settings.push_timeout_seconds,
        ),
    )


def get_create_transfer_use_case(
    engine: Engine = Depends(get_engine),
    analytics: AnalyticsRecorder = Depends(get_analytics_recorder),
) -> CreateTransferUseCase:
    """Build CreateTransferUseCase with its infrastructure dependencies."""
    return CreateTransferUseCase(
        transfer_repo=TransferRepositoryAdapter(engine=engine),
        ownership_store=OwnershipStoreAdapter(engine=engine),
        users=UserDirectoryAdapter(engine=engine),
        analytics=analytics,
    )


def get_get_transfer_use_case(engine: Engine = Depends(get_engine)) -> GetTransferUseCase:
    """Build GetTransferUseCase with its infrastructure dependencies."""
    return GetTransferUseCase(
        transfer_repo=TransferRepositoryAdapter(engine=engine),
        users=UserDirectoryAdapter(engine=engine),
    )


def get_export_user_data_use_case(
    engine: Engine = Depends(get_engine),
    analytics: AnalyticsRecorder = Depends(get_analytics_recorder),
) -> ExportUserDataUseCase:
    """Build ExportUserDataUseCase with its infrastructure dependencies."""
    return ExportUserDataUseCase(
        users=UserDirectoryAdapter(engine=engine),
        ownership_store=OwnershipStoreAdapter(engine=engine),
        transfer_repo=TransferRepositoryAdapter(engine=engine),
        vaccinations=VaccinationRepositoryAdapter(engine=engine),
        analytics=analytics,
    )


def get_verify_transfer_use_case(
    engine: Engine = Depends(get_engine),
    notifier: TransferNotifier = Depends(get_transfer_notifier),
    analytics: AnalyticsRecorder = Depends(get_analytics_recorder),
) -> VerifyTransferUseCase:
    """Build VerifyTransferUseCase with its infrastructure dependencies."""
    return VerifyTransferUseCase(
        transfer_repo=TransferRepositoryAdapter(engine=engine),
        users=UserDirectoryAdapter(engine=engine),
        verifier=EcdsaSignatureVerifier(),
        ownership=OwnershipTransferService(OwnershipStoreAdapter(engine=engine)),
        notifier=notifier,
        analytics=analytics,
    )


def build_analytics_sink() -> AnalyticsSink:
    """Warehouse endpoint when configured, JSON-lines files otherwise."""
    if settings.analytics_sink_url:
        return HttpWarehouseSink(url=settings.analytics_sink_url)
    return JsonlFileSink(directory=settings.analytics_export_dir)


def build_export_analytics_use_case(engine: Engine) -> ExportAnalyticsUseCase:
    """Build ExportAnalyticsUseCase for the scheduler (outside any request)."""
    return ExportAnalyticsUseCase(
        events=AnalyticsEventRepositoryAdapter(engine=engine),
        sink=build_analytics_sink(),
    )
