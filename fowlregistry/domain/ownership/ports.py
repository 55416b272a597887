"""
Port interfaces (ABCs) for the ownership bounded context.

Ports define the contracts that the domain requires from the outside world.
Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from fowlregistry.domain.ownership.entities import (
    AnalyticsEvent,
    ContactMethod,
    Fowl,
    OwnershipUpdateResult,
    PushMessage,
    Transfer,
    UserProfile,
)


class TransferRepository(ABC):
    """Port for persisting and reading transfer records.

    Status writes are compare-and-set on PENDING so that a terminal
    status can never be replaced.
    """

    @abstractmethod
    def create(self, transfer: Transfer) -> None:
        """Insert a new PENDING transfer."""
        raise NotImplementedError

    @abstractmethod
    def get(self, transfer_id: str) -> Optional[Transfer]:
        """Return a transfer by id, or None if absent."""
        raise NotImplementedError

    @abstractmethod
    def mark_rejected(self, transfer_id: str, reason: str, at: int) -> bool:
        """Move a PENDING transfer to REJECTED.

        Returns:
            True if the row was PENDING and is now REJECTED, False otherwise.
        """
        raise NotImplementedError

    @abstractmethod
    def list_sent(self, from_uid: str) -> list[Transfer]:
        """Return transfers started by from_uid, oldest first."""
        raise NotImplementedError

    @abstractmethod
    def list_received(self, recipient_keys: list[str]) -> list[Transfer]:
        """Return transfers addressed to any of recipient_keys, oldest first.

        A transfer matches on its recipient as entered or on the uid it
        was settled to.
        """
        raise NotImplementedError


class OwnershipStore(ABC):
    """Port for the transactional source of truth of fowl ownership."""

    @abstractmethod
    def get_fowl(self, fowl_id: str) -> Optional[Fowl]:
        """Return a fowl by id, or None if absent."""
        raise NotImplementedError

    @abstractmethod
    def list_owned(self, owner_id: str) -> list[Fowl]:
        """Return the fowls currently owned by owner_id."""
        raise NotImplementedError

    @abstractmethod
    def conditional_owner_update(
        self, fowl_id: str, expected_owner: str, new_owner: str, at: int
    ) -> OwnershipUpdateResult:
        """Atomically hand a fowl from expected_owner to new_owner.

        Writes owner_id, previous_owner_id and ownership_transfer_date only
        if the current owner equals expected_owner.

        Returns:
            SUCCESS, CONFLICT (owner differs) or NOT_FOUND.
        """
        raise NotImplementedError

    @abstractmethod
    def settle_transfer(
        self,
        transfer: Transfer,
        signature: str,
        new_owner: str,
        at: int,
    ) -> OwnershipUpdateResult:
        """Commit a verified transfer in one storage transaction.

        Performs the conditional owner update (expected owner is the
        transfer's from_uid) and the PENDING → VERIFIED compare-and-set of
        the transfer. Either both writes happen or neither does.

        Returns:
            SUCCESS, CONFLICT, NOT_FOUND (fowl missing) or
            ALREADY_FINALIZED (transfer no longer PENDING).
        """
        raise NotImplementedError


class UserDirectory(ABC):
    """Port for looking up accounts."""

    @abstractmethod
    def get(self, uid: str) -> Optional[UserProfile]:
        """Return a profile by uid, or None if absent."""
        raise NotImplementedError

    @abstractmethod
    def resolve(
        self, identifier: str, contact_method: Optional[ContactMethod] = None
    ) -> Optional[UserProfile]:
        """Resolve a uid, email address or phone number to an account."""
        raise NotImplementedError


class SignatureVerifier(ABC):
    """Port for verifying a party's signature over proof data."""

    @abstractmethod
    def verify(
        self, signer: Optional[UserProfile], payload: bytes, signature: str
    ) -> bool:
        """Return True only if signature is valid for payload under signer's key."""
        raise NotImplementedError


class PushGateway(ABC):
    """Port for delivering push notifications to devices."""

    @abstractmethod
    async def send_all(self, messages: list[PushMessage]) -> int:
        """Deliver messages and return how many were accepted."""
        raise NotImplementedError


class AnalyticsEventRepository(ABC):
    """Port for the analytics event buffer."""

    @abstractmethod
    def add(self, event_name: str, event_data: dict[str, Any], at: int) -> str:
        """Buffer one event and return its id."""
        raise NotImplementedError

    @abstractmethod
    def get_between(self, start: int, end: int) -> list[AnalyticsEvent]:
        """Return events created in [start, end), oldest first."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, event_ids: list[str]) -> int:
        """Delete the given events and return how many were removed."""
        raise NotImplementedError


class AnalyticsSink(ABC):
    """Port for the analytics warehouse."""

    @abstractmethod
    def export(self, events: list[AnalyticsEvent]) -> int:
        """Write events to the warehouse and return how many were accepted."""
        raise NotImplementedError
