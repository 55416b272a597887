"""
Domain-specific errors for the ownership bounded context.

All errors raised from the ownership domain must be defined here.
Each one specialises a shared error kind from fowlregistry.domain.errors.
No framework imports allowed.
"""

from fowlregistry.domain.errors import (
    InternalError,
    InvalidArgumentError,
    NotFoundError,
    PermissionDeniedError,
)

INVALID_SIGNATURE_REASON = "Invalid signature"
PROOF_MISMATCH_REASON = "Proof data mismatch"


class TransferNotFoundError(NotFoundError):
    """Raised when a transfer record does not exist."""

    def __init__(self, transfer_id: str) -> None:
        super().__init__(f"Transfer not found: {transfer_id}")
        self.transfer_id = transfer_id


class FowlNotFoundError(NotFoundError):
    """Raised when a fowl record does not exist."""

    def __init__(self, fowl_id: str) -> None:
        super().__init__(f"Fowl not found: {fowl_id}")
        self.fowl_id = fowl_id


class NotTransferPartyError(PermissionDeniedError):
    """Raised when the caller is neither sender nor recipient of a transfer."""

    def __init__(self, transfer_id: str) -> None:
        super().__init__("User not authorized to verify this transfer")
        self.transfer_id = transfer_id


class NotFowlOwnerError(PermissionDeniedError):
    """Raised when the caller tries to transfer a fowl they do not own."""

    def __init__(self, fowl_id: str) -> None:
        super().__init__(f"Caller does not own fowl: {fowl_id}")
        self.fowl_id = fowl_id


class MissingParametersError(InvalidArgumentError):
    """Raised when a verification request lacks a required field."""

    def __init__(self, missing: list[str]) -> None:
        super().__init__("Missing required parameters")
        self.missing = missing


class InvalidRecipientError(InvalidArgumentError):
    """Raised when a recipient identifier does not fit its contact method."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Invalid recipient: {reason}")
        self.reason = reason


class TransferIntegrityError(InvalidArgumentError):
    """Base for verification failures that reject the transfer."""

    reason: str = ""

    def __init__(self, transfer_id: str) -> None:
        super().__init__(self.reason)
        self.transfer_id = transfer_id


class InvalidSignatureError(TransferIntegrityError):
    """Raised when the submitted signature does not verify."""

    reason = INVALID_SIGNATURE_REASON


class ProofMismatchError(TransferIntegrityError):
    """Raised when the submitted proof hash differs from the stored one."""

    reason = PROOF_MISMATCH_REASON


class TransferAlreadyFinalizedError(InvalidArgumentError):
    """Raised when a transfer has already reached VERIFIED or REJECTED."""

    def __init__(self, transfer_id: str, status: str) -> None:
        super().__init__(f"Transfer already finalized with status {status}")
        self.transfer_id = transfer_id
        self.status = status


class RecipientNotResolvedError(InvalidArgumentError):
    """Raised when the recipient identifier matches no account."""

    def __init__(self, transfer_id: str) -> None:
        super().__init__("Recipient has no account")
        self.transfer_id = transfer_id


class OwnershipConflictError(InternalError):
    """Raised when the fowl owner no longer matches the expected owner."""

    def __init__(self, fowl_id: str, expected_owner: str) -> None:
        super().__init__(
            f"Ownership of fowl {fowl_id} is no longer held by {expected_owner}"
        )
        self.fowl_id = fowl_id
        self.expected_owner = expected_owner


class UserDataExportError(InternalError):
    """Raised when a user data export could not be assembled."""

    def __init__(self, uid: str) -> None:
        super().__init__("Failed to export user data")
        self.uid = uid
