"""
Data Transfer Objects for the ownership application layer.

DTOs carry data between the interface and application layers.
They are plain dataclasses with no behavior.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from fowlregistry.domain.breeding.entities import VaccinationEvent
from fowlregistry.domain.ownership.entities import Fowl, UserProfile


@dataclass(frozen=True)
class CreateTransferCommand:
    """Input DTO for starting a transfer.

    Attributes:
        caller_uid: Authenticated caller, becomes the sender. None if anonymous.
        fowl_id: The fowl being handed over.
        recipient_identifier: Recipient email, phone number or uid.
        contact_method: "EMAIL" or "PHONE".
        proof_urls: Optional proof artefacts (photos, documents).
    """

    caller_uid: Optional[str]
    fowl_id: str
    recipient_identifier: str
    contact_method: str
    proof_urls: tuple[str, ...] = ()


@dataclass(frozen=True)
class CreateTransferResult:
    transfer_id: str
    status: str
    timestamp: int


@dataclass(frozen=True)
class VerifyTransferCommand:
    """Input DTO for the verification callable.

    Attributes:
        caller_uid: Authenticated caller. None if anonymous.
        transfer_id: The transfer to verify.
        signature: Base64 DER ECDSA signature over proof_data.
        proof_data: The proof fields the caller vouches for.
    """

    caller_uid: Optional[str]
    transfer_id: str
    signature: str
    proof_data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class VerifyTransferResult:
    success: bool
    transfer_id: str
    status: str


@dataclass(frozen=True)
class GetTransferQuery:
    caller_uid: Optional[str]
    transfer_id: str


@dataclass(frozen=True)
class TransferResult:
    """Output DTO mirroring the stored transfer record."""

    id: str
    fowl_id: str
    from_uid: str
    to_uid: str
    contact_method: str
    status: str
    timestamp: int
    verified: bool
    proof_urls: list[str]
    rejection_reason: Optional[str]
    verification_timestamp: Optional[int]
    recipient_uid: Optional[str]


@dataclass(frozen=True)
class ExportAnalyticsResult:
    """Outcome of one analytics export run."""

    window_start: int
    window_end: int
    exported: int
    deleted: int


@dataclass(frozen=True)
class UserDataExport:
    """Everything the registry holds about one account.

    Attributes:
        uid: The exported account.
        exported_at: Epoch ms when the export was assembled.
        profile: The account record, None if the directory has no entry.
        fowls: Fowls the account currently owns.
        transfers_sent: Transfers the account started.
        transfers_received: Transfers addressed or settled to the account.
        vaccination_events: Vaccination events of the owned fowls.
    """

    uid: str
    exported_at: int
    profile: Optional[UserProfile]
    fowls: list[Fowl]
    transfers_sent: list[TransferResult]
    transfers_received: list[TransferResult]
    vaccination_events: list[VaccinationEvent]

    @property
    def record_count(self) -> int:
        return (
            len(self.fowls)
            + len(self.transfers_sent)
            + len(self.transfers_received)
            + len(self.vaccination_events)
        )
