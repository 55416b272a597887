"""
Use case: Read one transfer.

Only the two parties of a transfer may read it.
"""

from fowlregistry.application.ownership.dtos import GetTransferQuery, TransferResult
from fowlregistry.domain.errors import UnauthenticatedError
from fowlregistry.domain.ownership.entities import Transfer
from fowlregistry.domain.ownership.errors import (
    NotTransferPartyError,
    TransferNotFoundError,
)
from fowlregistry.domain.ownership.ports import TransferRepository, UserDirectory


def to_result(transfer: Transfer) -> TransferResult:
    return TransferResult(
        id=transfer.id,
        fowl_id=transfer.fowl_id,
        from_uid=transfer.from_uid,
        to_uid=transfer.to_uid,
        contact_method=transfer.contact_method.value,
        status=transfer.status.value,
        timestamp=transfer.timestamp,
        verified=transfer.verified,
        proof_urls=list(transfer.proof_urls),
        rejection_reason=transfer.rejection_reason,
        verification_timestamp=transfer.verification_timestamp,
        recipient_uid=transfer.recipient_uid,
    )


class GetTransferUseCase:
    def __init__(self, transfer_repo: TransferRepository, users: UserDirectory) -> None:
        self._transfer_repo = transfer_repo
        self._users = users

    def execute(self, query: GetTransferQuery) -> TransferResult:
        if not query.caller_uid:
            raise UnauthenticatedError()

        transfer = self._transfer_repo.get(query.transfer_id)
        if transfer is None:
            raise TransferNotFoundError(query.transfer_id)

        allowed = transfer.involves(query.caller_uid) or (
            transfer.recipient_uid == query.caller_uid
        )
        if not allowed:
            recipient = self._users.resolve(transfer.to_uid, transfer.contact_method)
            allowed = recipient is not None and recipient.uid == query.caller_uid
        if not allowed:
            raise NotTransferPartyError(transfer.id)

        return to_result(transfer)
