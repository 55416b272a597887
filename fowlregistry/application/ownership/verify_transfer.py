"""
Use case: Verify a transfer and settle fowl ownership.

Input: VerifyTransferCommand (caller, transfer id, signature, proof data)
Output: VerifyTransferResult with status VERIFIED
Side effects:
    - on integrity failure: transfer moves to REJECTED, both parties notified
    - on success: owner change and VERIFIED status committed together,
      both parties notified, transfer_verified event buffered
Failure cases: UnauthenticatedError, MissingParametersError,
    TransferNotFoundError, NotTransferPartyError,
    TransferAlreadyFinalizedError, InvalidSignatureError,
    ProofMismatchError, RecipientNotResolvedError, OwnershipConflictError.
"""

import asyncio
import hmac
import logging
from dataclasses import dataclass
from typing import Optional

from fowlregistry.application.analytics import AnalyticsRecorder
from fowlregistry.application.ownership.dtos import (
    VerifyTransferCommand,
    VerifyTransferResult,
)
from fowlregistry.domain.errors import UnauthenticatedError
from fowlregistry.domain.ownership.entities import (
    Transfer,
    TransferStatus,
    UserProfile,
    now_millis,
)
from fowlregistry.domain.ownership.errors import (
    InvalidSignatureError,
    MissingParametersError,
    NotTransferPartyError,
    ProofMismatchError,
    RecipientNotResolvedError,
    TransferIntegrityError,
    TransferNotFoundError,
)
from fowlregistry.domain.ownership.ownership_service import (
    OwnershipTransferService,
    ensure_pending,
)
from fowlregistry.domain.ownership.ports import (
    SignatureVerifier,
    TransferRepository,
    UserDirectory,
)
from fowlregistry.domain.ownership.proof import (
    canonical_signing_string,
    generate_proof_hash,
)
from fowlregistry.domain.ownership.transfer_notifier import TransferNotifier

logger = logging.getLogger(__name__)

VERIFICATION_METHOD = "ecdsa_signature"


@dataclass(frozen=True)
class _Outcome:
    """Result of the blocking part of verification."""

    transfer: Transfer
    error: Optional[TransferIntegrityError] = None
    rejection_written: bool = False


class VerifyTransferUseCase:
    """Server-side verification callable for a pending transfer.

    Storage reads, the signature check and settlement run in a worker
    thread along with the analytics record. Only notification dispatch
    happens on the event loop.
    """

    def __init__(
        self,
        transfer_repo: TransferRepository,
        users: UserDirectory,
        verifier: SignatureVerifier,
        ownership: OwnershipTransferService,
        notifier: TransferNotifier,
        analytics: AnalyticsRecorder,
    ) -> None:
        self._transfer_repo = transfer_repo
        self._users = users
        self._verifier = verifier
        self._ownership = ownership
        self._notifier = notifier
        self._analytics = analytics

    async def execute(self, command: VerifyTransferCommand) -> VerifyTransferResult:
        """Run the verification flow.

        Args:
            command: The caller and the proof they submit.

        Returns:
            Success result carrying the VERIFIED status.
        """
        outcome = await asyncio.to_thread(self._verify, command)
        transfer = outcome.transfer

        if outcome.error is not None:
            if outcome.rejection_written:
                self._notifier.dispatch(transfer, TransferStatus.REJECTED)
            raise outcome.error

        self._notifier.dispatch(transfer, TransferStatus.VERIFIED)

        return VerifyTransferResult(
            success=True,
            transfer_id=transfer.id,
            status=TransferStatus.VERIFIED.value,
        )

    def _verify(self, command: VerifyTransferCommand) -> _Outcome:
        """Check the proof and settle ownership.

        Guard failures raise. Integrity failures are returned so the
        caller can notify before raising them.
        """
        if not command.caller_uid:
            raise UnauthenticatedError()

        missing = [
            name
            for name, value in (
                ("transferId", command.transfer_id),
                ("signature", command.signature),
                ("proofData", command.proof_data),
            )
            if not value
        ]
        if missing:
            raise MissingParametersError(missing)

        transfer = self._transfer_repo.get(command.transfer_id)
        if transfer is None:
            raise TransferNotFoundError(command.transfer_id)

        recipient = self._users.resolve(transfer.to_uid, transfer.contact_method)
        if not self._is_party(transfer, recipient, command.caller_uid):
            logger.warning(
                "Verification refused for transfer=%s: caller is not a party",
                transfer.id,
            )
            raise NotTransferPartyError(transfer.id)

        ensure_pending(transfer)

        signer = self._users.get(command.caller_uid)
        payload = canonical_signing_string(command.proof_data)
        if not self._verifier.verify(signer, payload, command.signature):
            return self._reject(transfer, InvalidSignatureError(transfer.id))

        stored_hash = generate_proof_hash(transfer.proof_fields())
        submitted_hash = generate_proof_hash(command.proof_data)
        if not hmac.compare_digest(stored_hash, submitted_hash):
            return self._reject(transfer, ProofMismatchError(transfer.id))

        if recipient is None:
            raise RecipientNotResolvedError(transfer.id)

        self._ownership.settle(transfer, command.signature, recipient.uid)
        logger.info(
            "Transfer verified: id=%s fowl=%s", transfer.id, transfer.fowl_id
        )
        self._analytics.record(
            "transfer_verified",
            {
                "transferId": transfer.id,
                "fowlId": transfer.fowl_id,
                "verificationMethod": VERIFICATION_METHOD,
            },
        )
        return _Outcome(transfer=transfer)

    @staticmethod
    def _is_party(
        transfer: Transfer, recipient: Optional[UserProfile], caller_uid: str
    ) -> bool:
        if transfer.involves(caller_uid):
            return True
        return recipient is not None and recipient.uid == caller_uid

    def _reject(self, transfer: Transfer, error: TransferIntegrityError) -> _Outcome:
        """Persist REJECTED with the error's reason."""
        written = self._transfer_repo.mark_rejected(
            transfer.id, error.reason, now_millis()
        )
        if written:
            logger.warning(
                "Transfer rejected: id=%s reason=%s", transfer.id, error.reason
            )
        else:
            logger.warning(
                "Transfer %s was finalized concurrently, rejection not written",
                transfer.id,
            )
        return _Outcome(transfer=transfer, error=error, rejection_written=written)
