"""
Tests for the ownership domain: proof hashing, signing strings,
recipient normalisation and the ownership transfer service.

All tests use pure domain objects and mocked ports.
"""

from unittest.mock import MagicMock

import pytest

from fowlregistry.domain.errors import ErrorKind
from fowlregistry.domain.ownership.entities import (
    ContactMethod,
    OwnershipUpdateResult,
    Transfer,
    TransferStatus,
)
from fowlregistry.domain.ownership.errors import (
    FowlNotFoundError,
    InvalidRecipientError,
    InvalidSignatureError,
    OwnershipConflictError,
    ProofMismatchError,
    TransferAlreadyFinalizedError,
)
from fowlregistry.domain.ownership.ownership_service import (
    OwnershipTransferService,
    ensure_pending,
    normalize_recipient,
)
from fowlregistry.domain.ownership.ports import OwnershipStore
from fowlregistry.domain.ownership.proof import (
    canonical_signing_string,
    generate_proof_hash,
    proof_string,
)


def _transfer(**overrides) -> Transfer:
    fields = dict(
        id="T1",
        fowl_id="F1",
        from_uid="alice",
        to_uid="bob@example.com",
        contact_method=ContactMethod.EMAIL,
        timestamp=1_700_000_000_000,
        proof_urls=("https://img/1.jpg", "https://img/2.jpg"),
    )
    fields.update(overrides)
    return Transfer(**fields)


# ══════════════════════════════════════════════════════════════════════
# Proof hashing
# ══════════════════════════════════════════════════════════════════════


class TestProofHash:
    """Tests for generate_proof_hash and the canonical proof string."""

    def test_proof_string_joins_fields_in_order(self) -> None:
        assert proof_string(_transfer().proof_fields()) == (
            "T1|F1|alice|bob@example.com|1700000000000|https://img/1.jpg,https://img/2.jpg"
        )

    def test_missing_fields_hash_as_empty(self) -> None:
        assert proof_string({}) == "|||||"
        assert generate_proof_hash({"transferId": None}) == generate_proof_hash({})

    def test_hash_is_sha256_hex(self) -> None:
        digest = generate_proof_hash(_transfer().proof_fields())
        assert len(digest) == 64
        int(digest, 16)

    def test_integral_float_timestamp_matches_int(self) -> None:
        """JSON clients may send the timestamp as a float."""
        stored = _transfer().proof_fields()
        submitted = dict(stored, timestamp=1_700_000_000_000.0)
        assert generate_proof_hash(stored) == generate_proof_hash(submitted)

    def test_extra_keys_do_not_affect_hash(self) -> None:
        stored = _transfer().proof_fields()
        submitted = dict(stored, note="hello")
        assert generate_proof_hash(stored) == generate_proof_hash(submitted)

    @pytest.mark.parametrize(
        "field, value",
        [
            ("transferId", "T2"),
            ("fowlId", "F9"),
            ("fromUid", "mallory"),
            ("toUid", "eve@example.com"),
            ("timestamp", 1_700_000_000_001),
            ("proofUrls", ["https://img/1.jpg"]),
        ],
    )
    def test_changing_any_field_changes_hash(self, field, value) -> None:
        stored = _transfer().proof_fields()
        tampered = dict(stored, **{field: value})
        assert generate_proof_hash(stored) != generate_proof_hash(tampered)


class TestSigningString:
    def test_keys_sorted_and_joined(self) -> None:
        data = {"b": 2, "a": "x", "c": ["u", "v"]}
        assert canonical_signing_string(data) == b"a=x&b=2&c=u,v"

    def test_independent_of_insertion_order(self) -> None:
        first = canonical_signing_string({"x": 1, "y": 2})
        second = canonical_signing_string({"y": 2, "x": 1})
        assert first == second


# ══════════════════════════════════════════════════════════════════════
# Recipient normalisation and status guard
# ══════════════════════════════════════════════════════════════════════


class TestNormalizeRecipient:
    def test_email_lowercased(self) -> None:
        assert normalize_recipient("  Bob@Example.COM ", ContactMethod.EMAIL) == "bob@example.com"

    def test_phone_separators_removed(self) -> None:
        assert normalize_recipient("+1 (555) 123-4567", ContactMethod.PHONE) == "+15551234567"

    @pytest.mark.parametrize(
        "identifier, method",
        [
            ("", ContactMethod.EMAIL),
            ("   ", ContactMethod.PHONE),
            ("not-an-email", ContactMethod.EMAIL),
            ("12ab34", ContactMethod.PHONE),
            ("123", ContactMethod.PHONE),
        ],
    )
    def test_invalid_identifiers_rejected(self, identifier, method) -> None:
        with pytest.raises(InvalidRecipientError) as exc_info:
            normalize_recipient(identifier, method)
        assert exc_info.value.kind is ErrorKind.INVALID_ARGUMENT


class TestEnsurePending:
    def test_pending_passes(self) -> None:
        ensure_pending(_transfer())

    @pytest.mark.parametrize("status", [TransferStatus.VERIFIED, TransferStatus.REJECTED])
    def test_terminal_status_raises(self, status) -> None:
        with pytest.raises(TransferAlreadyFinalizedError):
            ensure_pending(_transfer(status=status))


class TestIntegrityErrors:
    def test_reasons_are_distinct(self) -> None:
        assert InvalidSignatureError("T1").message == "Invalid signature"
        assert ProofMismatchError("T1").message == "Proof data mismatch"
        assert InvalidSignatureError("T1").kind is ErrorKind.INVALID_ARGUMENT


# ══════════════════════════════════════════════════════════════════════
# OwnershipTransferService
# ══════════════════════════════════════════════════════════════════════


class TestOwnershipTransferService:
    """Tests for transfer_ownership and settle against a mocked store."""

    def _service(self, result: OwnershipUpdateResult):
        store = MagicMock(spec=OwnershipStore)
        store.conditional_owner_update.return_value = result
        store.settle_transfer.return_value = result
        return OwnershipTransferService(store), store

    def test_transfer_success_passes_expected_owner(self) -> None:
        service, store = self._service(OwnershipUpdateResult.SUCCESS)
        service.transfer_ownership("F1", "alice", "bob")
        _, kwargs = store.conditional_owner_update.call_args
        assert kwargs["expected_owner"] == "alice"
        assert kwargs["new_owner"] == "bob"

    def test_conflict_is_internal_error(self) -> None:
        service, _ = self._service(OwnershipUpdateResult.CONFLICT)
        with pytest.raises(OwnershipConflictError) as exc_info:
            service.transfer_ownership("F1", "alice", "bob")
        assert exc_info.value.kind is ErrorKind.INTERNAL

    def test_missing_fowl_is_not_found(self) -> None:
        service, _ = self._service(OwnershipUpdateResult.NOT_FOUND)
        with pytest.raises(FowlNotFoundError):
            service.transfer_ownership("F9", "alice", "bob")

    def test_settle_returns_instant(self) -> None:
        service, store = self._service(OwnershipUpdateResult.SUCCESS)
        at = service.settle(_transfer(), "sig", "bob")
        assert at > 0
        store.settle_transfer.assert_called_once_with(_transfer(), "sig", "bob", at)

    def test_settle_on_finalized_transfer(self) -> None:
        service, _ = self._service(OwnershipUpdateResult.ALREADY_FINALIZED)
        with pytest.raises(TransferAlreadyFinalizedError):
            service.settle(_transfer(), "sig", "bob")

    def test_settle_conflict(self) -> None:
        service, _ = self._service(OwnershipUpdateResult.CONFLICT)
        with pytest.raises(OwnershipConflictError):
            service.settle(_transfer(), "sig", "bob")
