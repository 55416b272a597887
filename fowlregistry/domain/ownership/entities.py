"""
Domain entities for the ownership bounded context.

Entities mirror the persisted record shapes. All instants are epoch
milliseconds, the unit the stored records have always used.
They contain no framework imports and no IO operations.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


def now_millis() -> int:
    """Return the current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


class TransferStatus(Enum):
    """Lifecycle state of a transfer. VERIFIED and REJECTED are terminal."""

    PENDING = "PENDING"
    VERIFIED = "VERIFIED"
    REJECTED = "REJECTED"

    @property
    def is_terminal(self) -> bool:
        return self is not TransferStatus.PENDING


class ContactMethod(Enum):
    """How the recipient identifier of a transfer is interpreted."""

    EMAIL = "EMAIL"
    PHONE = "PHONE"

    @property
    def analytics_label(self) -> str:
        return self.value.lower()


class OwnershipUpdateResult(Enum):
    """Outcome of a conditional owner update."""

    SUCCESS = "success"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    ALREADY_FINALIZED = "already_finalized"


@dataclass(frozen=True)
class Transfer:
    """A request to move one fowl from one owner to another."""

    id: str
    fowl_id: str
    from_uid: str
    to_uid: str
    contact_method: ContactMethod
    timestamp: int
    status: TransferStatus = TransferStatus.PENDING
    verified: bool = False
    signature: Optional[str] = None
    proof_urls: tuple[str, ...] = ()
    rejection_reason: Optional[str] = None
    verification_timestamp: Optional[int] = None
    recipient_uid: Optional[str] = None

    def involves(self, uid: str) -> bool:
        """Return True when uid is the sender or the recipient as entered."""
        return uid in (self.from_uid, self.to_uid)

    def proof_fields(self) -> dict[str, Any]:
        """Return the canonical proof fields of the stored record."""
        return {
            "transferId": self.id,
            "fowlId": self.fowl_id,
            "fromUid": self.from_uid,
            "toUid": self.to_uid,
            "timestamp": self.timestamp,
            "proofUrls": list(self.proof_urls),
        }


@dataclass(frozen=True)
class Fowl:
    """Ownership view of a fowl record."""

    id: str
    owner_id: str
    previous_owner_id: Optional[str] = None
    ownership_transfer_date: Optional[int] = None
    name: str = ""
    breed: str = ""
    gender: str = ""
    birth_date: str = ""


@dataclass(frozen=True)
class UserProfile:
    """An account as seen by the ownership context."""

    uid: str
    email: Optional[str] = None
    phone: Optional[str] = None
    fcm_token: Optional[str] = None
    public_key_pem: Optional[str] = None


@dataclass(frozen=True)
class PushMessage:
    """A single push notification addressed to one device token."""

    token: str
    title: str
    body: str
    data: dict[str, str] = field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        return {
            "token": self.token,
            "notification": {"title": self.title, "body": self.body},
            "data": dict(self.data),
        }


@dataclass(frozen=True)
class AnalyticsEvent:
    """A buffered analytics event awaiting warehouse export."""

    id: str
    event_name: str
    event_data: dict[str, Any]
    created_at: int
