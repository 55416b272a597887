"""
Use case: Start an ownership transfer.

Input: CreateTransferCommand (caller, fowl, recipient, contact method)
Output: CreateTransferResult with the new transfer id
Side effects: Inserts a PENDING transfer; buffers a transfer_initiated event.
Failure cases: UnauthenticatedError, InvalidRecipientError (also when the
    recipient is the caller),
    FowlNotFoundError, NotFowlOwnerError. Storage errors propagate as-is.
"""

import logging
from uuid import uuid4

from fowlregistry.application.analytics import AnalyticsRecorder
from fowlregistry.application.ownership.dtos import (
    CreateTransferCommand,
    CreateTransferResult,
)
from fowlregistry.domain.errors import UnauthenticatedError
from fowlregistry.domain.ownership.entities import (
    ContactMethod,
    Transfer,
    TransferStatus,
    now_millis,
)
from fowlregistry.domain.ownership.errors import (
    FowlNotFoundError,
    InvalidRecipientError,
    NotFowlOwnerError,
)
from fowlregistry.domain.ownership.ownership_service import normalize_recipient
from fowlregistry.domain.ownership.ports import (
    OwnershipStore,
    TransferRepository,
    UserDirectory,
)

logger = logging.getLogger(__name__)


class CreateTransferUseCase:
    """Creates a PENDING transfer on behalf of the fowl's current owner."""

    def __init__(
        self,
        transfer_repo: TransferRepository,
        ownership_store: OwnershipStore,
        users: UserDirectory,
        analytics: AnalyticsRecorder,
    ) -> None:
        self._transfer_repo = transfer_repo
        self._ownership_store = ownership_store
        self._users = users
        self._analytics = analytics

    def execute(self, command: CreateTransferCommand) -> CreateTransferResult:
        """Run the create transfer use case.

        Args:
            command: Who is sending which fowl to whom.

        Returns:
            The generated transfer id with its initial status and timestamp.
        """
        if not command.caller_uid:
            raise UnauthenticatedError()

        try:
            contact_method = ContactMethod(command.contact_method.upper())
        except ValueError:
            raise InvalidRecipientError(
                f"unknown contact method {command.contact_method!r}"
            ) from None
        recipient = normalize_recipient(command.recipient_identifier, contact_method)
        if self._is_caller(recipient, contact_method, command.caller_uid):
            raise InvalidRecipientError("cannot transfer a fowl to yourself")

        fowl = self._ownership_store.get_fowl(command.fowl_id)
        if fowl is None:
            raise FowlNotFoundError(command.fowl_id)
        if fowl.owner_id != command.caller_uid:
            raise NotFowlOwnerError(command.fowl_id)

        transfer = Transfer(
            id=str(uuid4()),
            fowl_id=command.fowl_id,
            from_uid=command.caller_uid,
            to_uid=recipient,
            contact_method=contact_method,
            timestamp=now_millis(),
            status=TransferStatus.PENDING,
            proof_urls=tuple(command.proof_urls),
        )
        self._transfer_repo.create(transfer)

        logger.info(
            "Transfer created: id=%s fowl=%s method=%s",
            transfer.id,
            transfer.fowl_id,
            contact_method.analytics_label,
        )
        self._analytics.record(
            "transfer_initiated",
            {
                "transferId": transfer.id,
                "fowlId": transfer.fowl_id,
                "transferMethod": contact_method.analytics_label,
            },
        )

        return CreateTransferResult(
            transfer_id=transfer.id,
            status=transfer.status.value,
            timestamp=transfer.timestamp,
        )

    def _is_caller(
        self, recipient: str, contact_method: ContactMethod, caller_uid: str
    ) -> bool:
        if recipient == caller_uid:
            return True
        account = self._users.resolve(recipient, contact_method)
        return account is not None and account.uid == caller_uid
