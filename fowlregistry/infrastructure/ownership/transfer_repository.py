"""
Adapter: Transfer repository.

Implements TransferRepository port.
Transfer rows are never deleted; status writes are compare-and-set
on status = 'PENDING'.
"""

import json
import logging
from typing import Any, Optional

from sqlalchemy import bindparam, text
from sqlalchemy.engine import Engine

from fowlregistry.domain.ownership.entities import ContactMethod, Transfer, TransferStatus
from fowlregistry.domain.ownership.ports import TransferRepository

logger = logging.getLogger(__name__)

TRANSFER_COLUMNS = """
    id, fowl_id, from_uid, to_uid, contact_method, status, timestamp,
    verified, signature, proof_urls, rejection_reason,
    verification_timestamp, recipient_uid
"""


def row_to_transfer(row: Any) -> Transfer:
    """Map a transfers row to the domain entity."""
    return Transfer(
        id=row.id,
        fowl_id=row.fowl_id,
        from_uid=row.from_uid,
        to_uid=row.to_uid,
        contact_method=ContactMethod(row.contact_method),
        timestamp=int(row.timestamp),
        status=TransferStatus(row.status),
        verified=bool(row.verified),
        signature=row.signature,
        proof_urls=tuple(json.loads(row.proof_urls or "[]")),
        rejection_reason=row.rejection_reason,
        verification_timestamp=(
            int(row.verification_timestamp)
            if row.verification_timestamp is not None
            else None
        ),
        recipient_uid=row.recipient_uid,
    )


class TransferRepositoryAdapter(TransferRepository):
    """Persists transfer records through SQLAlchemy."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def create(self, transfer: Transfer) -> None:
        query = text(
            """
            INSERT INTO transfers
                (id, fowl_id, from_uid, to_uid, contact_method, status,
                 timestamp, verified, signature, proof_urls)
            VALUES
                (:id, :fowl_id, :from_uid, :to_uid, :contact_method, :status,
                 :timestamp, :verified, :signature, :proof_urls)
            """
        )
        with self._engine.begin() as conn:
            conn.execute(
                query,
                {
                    "id": transfer.id,
                    "fowl_id": transfer.fowl_id,
                    "from_uid": transfer.from_uid,
                    "to_uid": transfer.to_uid,
                    "contact_method": transfer.contact_method.value,
                    "status": transfer.status.value,
                    "timestamp": transfer.timestamp,
                    "verified": transfer.verified,
                    "signature": transfer.signature,
                    "proof_urls": json.dumps(list(transfer.proof_urls)),
                },
            )
        logger.debug("Inserted transfer id=%s", transfer.id)

    def get(self, transfer_id: str) -> Optional[Transfer]:
        query = text(f"SELECT {TRANSFER_COLUMNS} FROM transfers WHERE id = :id")
        with self._engine.connect() as conn:
            row = conn.execute(query, {"id": transfer_id}).first()
        return row_to_transfer(row) if row is not None else None

    def mark_rejected(self, transfer_id: str, reason: str, at: int) -> bool:
        query = text(
            """
            UPDATE transfers
            SET status = :rejected,
                verified = :verified,
                rejection_reason = :reason,
                verification_timestamp = :at
            WHERE id = :id AND status = :pending
            """
        )
        with self._engine.begin() as conn:
            result = conn.execute(
                query,
                {
                    "id": transfer_id,
                    "rejected": TransferStatus.REJECTED.value,
                    "pending": TransferStatus.PENDING.value,
                    "verified": False,
                    "reason": reason,
                    "at": at,
                },
            )
        return result.rowcount == 1

    def list_sent(self, from_uid: str) -> list[Transfer]:
        query = text(
            f"""
            SELECT {TRANSFER_COLUMNS}
            FROM transfers
            WHERE from_uid = :uid
            ORDER BY timestamp, id
            """
        )
        with self._engine.connect() as conn:
            rows = conn.execute(query, {"uid": from_uid}).fetchall()
        return [row_to_transfer(row) for row in rows]

    def list_received(self, recipient_keys: list[str]) -> list[Transfer]:
        keys = [key for key in recipient_keys if key]
        if not keys:
            return []
        query = text(
            f"""
            SELECT {TRANSFER_COLUMNS}
            FROM transfers
            WHERE to_uid IN :keys OR recipient_uid IN :keys
            ORDER BY timestamp, id
            """
        ).bindparams(bindparam("keys", expanding=True))
        with self._engine.connect() as conn:
            rows = conn.execute(query, {"keys": keys}).fetchall()
        return [row_to_transfer(row) for row in rows]
