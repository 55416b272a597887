"""
FastAPI router for the ownership bounded context.

Transfer routes plus the caller's data export under /users.
All routes delegate to use cases. No business logic here.
Error mapping is handled by centralized error handlers.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request, status

from fowlregistry.application.ownership.create_transfer import CreateTransferUseCase
from fowlregistry.application.ownership.dtos import (
    CreateTransferCommand,
    GetTransferQuery,
    VerifyTransferCommand,
)
from fowlregistry.application.ownership.export_user_data import ExportUserDataUseCase
from fowlregistry.application.ownership.get_transfer import GetTransferUseCase
from fowlregistry.application.ownership.verify_transfer import VerifyTransferUseCase
from fowlregistry.interfaces.ownership.dependencies import (
    get_create_transfer_use_case,
    get_export_user_data_use_case,
    get_get_transfer_use_case,
    get_verify_transfer_use_case,
)
from fowlregistry.interfaces.ownership.schemas import (
    CreateTransferRequest,
    CreateTransferResponse,
    TransferResponse,
    UserDataExportResponse,
    VerifyTransferRequest,
    VerifyTransferResponse,
)
from fowlregistry.interfaces.schemas import ERROR_RESPONSES
from fowlregistry.shared.security.auth import get_caller_uid, require_caller_uid
from fowlregistry.shared.security.rate_limiting import HEAVY_RATE_LIMIT, limiter

router = APIRouter(prefix="/transfers", tags=["transfers"])
user_router = APIRouter(prefix="/users", tags=["users"])


@router.post(
    "",
    response_model=CreateTransferResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
    summary="Start an ownership transfer",
    description="Create a PENDING transfer of a fowl owned by the caller.",
)
def create_transfer(
    payload: CreateTransferRequest,
    caller_uid: Optional[str] = Depends(get_caller_uid),
    use_case: CreateTransferUseCase = Depends(get_create_transfer_use_case),
) -> CreateTransferResponse:
    """Create a transfer and return its id."""
    result = use_case.execute(
        CreateTransferCommand(
            caller_uid=caller_uid,
            fowl_id=payload.fowl_id,
            recipient_identifier=payload.recipient_identifier,
            contact_method=payload.contact_method,
            proof_urls=tuple(payload.proof_urls),
        )
    )
    return CreateTransferResponse(
        transfer_id=result.transfer_id,
        status=result.status,
        timestamp=result.timestamp,
    )


@router.post(
    "/verify",
    response_model=VerifyTransferResponse,
    responses=ERROR_RESPONSES,
    summary="Verify a transfer",
    description=(
        "Check the caller's signature and proof, then settle ownership. "
        "Invalid proof rejects the transfer permanently."
    ),
)
@limiter.limit(HEAVY_RATE_LIMIT)
async def verify_transfer(
    request: Request,
    payload: VerifyTransferRequest,
    caller_uid: Optional[str] = Depends(get_caller_uid),
    use_case: VerifyTransferUseCase = Depends(get_verify_transfer_use_case),
) -> VerifyTransferResponse:
    """The verification callable."""
    result = await use_case.execute(
        VerifyTransferCommand(
            caller_uid=caller_uid,
            transfer_id=payload.transfer_id or "",
            signature=payload.signature or "",
            proof_data=payload.proof_data or {},
        )
    )
    return VerifyTransferResponse(
        success=result.success,
        transfer_id=result.transfer_id,
        status=result.status,
    )


@router.get(
    "/{transfer_id}",
    response_model=TransferResponse,
    responses=ERROR_RESPONSES,
    summary="Read a transfer",
    description="Return a transfer record. Only its parties may read it.",
)
def get_transfer(
    transfer_id: str,
    caller_uid: Optional[str] = Depends(get_caller_uid),
    use_case: GetTransferUseCase = Depends(get_get_transfer_use_case),
) -> TransferResponse:
    result = use_case.execute(GetTransferQuery(caller_uid=caller_uid, transfer_id=transfer_id))
    return TransferResponse.from_result(result)


@user_router.get(
    "/me/export",
    response_model=UserDataExportResponse,
    responses=ERROR_RESPONSES,
    summary="Export my data",
    description=(
        "Profile, owned fowls, sent and received transfers, and the "
        "vaccination events of owned fowls."
    ),
)
@limiter.limit(HEAVY_RATE_LIMIT)
def export_user_data(
    request: Request,
    caller_uid: str = Depends(require_caller_uid),
    use_case: ExportUserDataUseCase = Depends(get_export_user_data_use_case),
) -> UserDataExportResponse:
    return UserDataExportResponse.from_export(use_case.execute(caller_uid))
