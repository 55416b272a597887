"""
Pydantic schemas for ownership API request/response validation.

Required-ness of the verification fields is checked by the use case,
so a missing field yields the invalid-argument kind with the
"Missing required parameters" detail rather than a schema error.
"""

from typing import Any, Literal, Optional

from pydantic import Field

from fowlregistry.application.ownership.dtos import TransferResult, UserDataExport
from fowlregistry.interfaces.breeding.schemas import VaccinationEventItem
from fowlregistry.interfaces.schemas import CamelModel


class CreateTransferRequest(CamelModel):
    """Request schema for starting a transfer.

    Attributes:
        fowl_id: The fowl being handed over.
        recipient_identifier: Recipient email or phone number.
        contact_method: EMAIL or PHONE.
        proof_urls: Optional proof artefacts.
    """

    fowl_id: str = Field(..., min_length=1, max_length=128)
    recipient_identifier: str = Field(..., min_length=1, max_length=320)
    contact_method: Literal["EMAIL", "PHONE"]
    proof_urls: list[str] = Field(default_factory=list, max_length=20)


class CreateTransferResponse(CamelModel):
    transfer_id: str
    status: str
    timestamp: int


class VerifyTransferRequest(CamelModel):
    """Request schema of the verification callable."""

    transfer_id: Optional[str] = None
    signature: Optional[str] = None
    proof_data: Optional[dict[str, Any]] = None


class VerifyTransferResponse(CamelModel):
    success: bool
    transfer_id: str
    status: str


class TransferResponse(CamelModel):
    """A stored transfer record."""

    id: str
    fowl_id: str
    from_uid: str
    to_uid: str
    contact_method: str
    status: str
    timestamp: int
    verified: bool
    proof_urls: list[str]
    rejection_reason: Optional[str] = None
    verification_timestamp: Optional[int] = None
    recipient_uid: Optional[str] = None

    @classmethod
    def from_result(cls, result: TransferResult) -> "TransferResponse":
        return cls(
            id=result.id,
            fowl_id=result.fowl_id,
            from_uid=result.from_uid,
            to_uid=result.to_uid,
            contact_method=result.contact_method,
            status=result.status,
            timestamp=result.timestamp,
            verified=result.verified,
            proof_urls=result.proof_urls,
            rejection_reason=result.rejection_reason,
            verification_timestamp=result.verification_timestamp,
            recipient_uid=result.recipient_uid,
        )


class UserProfileItem(CamelModel):
    """Account record as exported; device tokens are left out."""

    uid: str
    email: Optional[str] = None
    phone: Optional[str] = None
    public_key_pem: Optional[str] = None


class OwnedFowlItem(CamelModel):
    id: str
    name: str
    breed: str
    gender: str
    birth_date: str
    previous_owner_id: Optional[str] = None
    ownership_transfer_date: Optional[int] = None


class UserTransfersItem(CamelModel):
    sent: list[TransferResponse]
    received: list[TransferResponse]


class UserDataExportResponse(CamelModel):
    """Portable copy of the caller's data."""

    uid: str
    exported_at: int
    record_count: int
    profile: Optional[UserProfileItem] = None
    fowls: list[OwnedFowlItem]
    transfers: UserTransfersItem
    vaccination_events: list[VaccinationEventItem]

    @classmethod
    def from_export(cls, export: UserDataExport) -> "UserDataExportResponse":
        profile = None
        if export.profile is not None:
            profile = UserProfileItem(
                uid=export.profile.uid,
                email=export.profile.email,
                phone=export.profile.phone,
                public_key_pem=export.profile.public_key_pem,
            )
        return cls(
            uid=export.uid,
            exported_at=export.exported_at,
            record_count=export.record_count,
            profile=profile,
            fowls=[
                OwnedFowlItem(
                    id=fowl.id,
                    name=fowl.name,
                    breed=fowl.breed,
                    gender=fowl.gender,
                    birth_date=fowl.birth_date,
                    previous_owner_id=fowl.previous_owner_id,
                    ownership_transfer_date=fowl.ownership_transfer_date,
                )
                for fowl in export.fowls
            ],
            transfers=UserTransfersItem(
                sent=[TransferResponse.from_result(t) for t in export.transfers_sent],
                received=[
                    TransferResponse.from_result(t) for t in export.transfers_received
                ],
            ),
            vaccination_events=[
                VaccinationEventItem.from_event(e) for e in export.vaccination_events
            ],
        )
