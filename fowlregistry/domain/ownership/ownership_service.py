"""
Ownership domain service.

Holds the rules that do not belong to a single use case:
- recipient identifier validation per contact method
- the ``PENDING → {VERIFIED, REJECTED}`` transition guard
- atomic ownership hand-over through the OwnershipStore port
"""

import logging
import re

from fowlregistry.domain.ownership.entities import (
    ContactMethod,
    OwnershipUpdateResult,
    Transfer,
    now_millis,
)
from fowlregistry.domain.ownership.errors import (
    FowlNotFoundError,
    InvalidRecipientError,
    OwnershipConflictError,
    TransferAlreadyFinalizedError,
)
from fowlregistry.domain.ownership.ports import OwnershipStore

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PHONE_SEPARATORS = re.compile(r"[\s().-]")
MIN_PHONE_DIGITS = 7
MAX_PHONE_DIGITS = 15


def compact_phone(value: str) -> str:
    """Drop spaces, dots, dashes and parentheses from a phone number."""
    return PHONE_SEPARATORS.sub("", value.strip())


def normalize_recipient(identifier: str, contact_method: ContactMethod) -> str:
    """Validate a recipient identifier and return its stored form.

    Emails are lower-cased; phone numbers keep their leading ``+`` and
    lose separators.

    Raises:
        InvalidRecipientError: If the identifier is empty or malformed.
    """
    value = (identifier or "").strip()
    if not value:
        raise InvalidRecipientError("recipient identifier is empty")

    if contact_method is ContactMethod.EMAIL:
        if not EMAIL_PATTERN.match(value):
            raise InvalidRecipientError("not an email address")
        return value.lower()

    compact = compact_phone(value)
    digits = compact[1:] if compact.startswith("+") else compact
    if not digits.isdigit() or not (MIN_PHONE_DIGITS <= len(digits) <= MAX_PHONE_DIGITS):
        raise InvalidRecipientError("not a phone number")
    return compact


def ensure_pending(transfer: Transfer) -> None:
    """Raise if the transfer already reached a terminal status."""
    if transfer.status.is_terminal:
        raise TransferAlreadyFinalizedError(transfer.id, transfer.status.value)


class OwnershipTransferService:
    """Moves fowl ownership through the store's conditional update."""

    def __init__(self, store: OwnershipStore) -> None:
        self._store = store

    def transfer_ownership(self, fowl_id: str, from_uid: str, to_uid: str) -> None:
        """Hand fowl_id from from_uid to to_uid atomically.

        Raises:
            FowlNotFoundError: If the fowl does not exist.
            OwnershipConflictError: If from_uid is no longer the owner.
        """
        result = self._store.conditional_owner_update(
            fowl_id, expected_owner=from_uid, new_owner=to_uid, at=now_millis()
        )
        if result is OwnershipUpdateResult.NOT_FOUND:
            raise FowlNotFoundError(fowl_id)
        if result is not OwnershipUpdateResult.SUCCESS:
            logger.warning("Ownership conflict on fowl=%s", fowl_id)
            raise OwnershipConflictError(fowl_id, from_uid)
        logger.info("Ownership of fowl=%s moved to new owner", fowl_id)

    def settle(self, transfer: Transfer, signature: str, new_owner: str) -> int:
        """Commit ownership change and VERIFIED status together.

        Returns:
            The settlement instant in epoch milliseconds.

        Raises:
            OwnershipConflictError: If the owner changed or the fowl vanished.
            TransferAlreadyFinalizedError: If another call finalised the transfer.
        """
        at = now_millis()
        result = self._store.settle_transfer(transfer, signature, new_owner, at)
        if result is OwnershipUpdateResult.ALREADY_FINALIZED:
            raise TransferAlreadyFinalizedError(transfer.id, "finalized")
        if result is not OwnershipUpdateResult.SUCCESS:
            logger.warning(
                "Settlement aborted for transfer=%s fowl=%s: %s",
                transfer.id,
                transfer.fowl_id,
                result.value,
            )
            raise OwnershipConflictError(transfer.fowl_id, transfer.from_uid)
        return at
