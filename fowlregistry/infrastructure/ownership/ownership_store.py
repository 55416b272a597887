"""
Adapter: Ownership store.

Implements OwnershipStore port on top of conditional UPDATE statements.
The owner check and the owner write are one statement
(WHERE owner_id = :expected), so of two racing writers with the same
expected owner exactly one sees rowcount 1.
"""

import logging
from typing import Any, Optional

from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine

from fowlregistry.domain.ownership.entities import (
    Fowl,
    OwnershipUpdateResult,
    Transfer,
    TransferStatus,
)
from fowlregistry.domain.ownership.ports import OwnershipStore

logger = logging.getLogger(__name__)

FOWL_COLUMNS = (
    "id, owner_id, previous_owner_id, ownership_transfer_date, "
    "name, breed, gender, birth_date"
)


def _to_fowl(row: Any) -> Fowl:
    return Fowl(
        id=row.id,
        owner_id=row.owner_id,
        previous_owner_id=row.previous_owner_id,
        ownership_transfer_date=row.ownership_transfer_date,
        name=row.name or "",
        breed=row.breed or "",
        gender=row.gender or "",
        birth_date=row.birth_date or "",
    )


class _Rollback(Exception):
    """Aborts a settlement transaction carrying its outcome."""

    def __init__(self, result: OwnershipUpdateResult) -> None:
        super().__init__(result.value)
        self.result = result


class OwnershipStoreAdapter(OwnershipStore):
    """Fowl ownership source of truth backed by SQLAlchemy."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def get_fowl(self, fowl_id: str) -> Optional[Fowl]:
        query = text(f"SELECT {FOWL_COLUMNS} FROM fowls WHERE id = :id")
        with self._engine.connect() as conn:
            row = conn.execute(query, {"id": fowl_id}).first()
        return _to_fowl(row) if row is not None else None

    def list_owned(self, owner_id: str) -> list[Fowl]:
        query = text(
            f"SELECT {FOWL_COLUMNS} FROM fowls WHERE owner_id = :owner ORDER BY id"
        )
        with self._engine.connect() as conn:
            rows = conn.execute(query, {"owner": owner_id}).fetchall()
        return [_to_fowl(row) for row in rows]

    def conditional_owner_update(
        self, fowl_id: str, expected_owner: str, new_owner: str, at: int
    ) -> OwnershipUpdateResult:
        with self._engine.begin() as conn:
            return self._update_owner(conn, fowl_id, expected_owner, new_owner, at)

    def settle_transfer(
        self,
        transfer: Transfer,
        signature: str,
        new_owner: str,
        at: int,
    ) -> OwnershipUpdateResult:
        try:
            with self._engine.begin() as conn:
                owner_result = self._update_owner(
                    conn, transfer.fowl_id, transfer.from_uid, new_owner, at
                )
                if owner_result is not OwnershipUpdateResult.SUCCESS:
                    raise _Rollback(owner_result)

                verified = conn.execute(
                    text(
                        """
                        UPDATE transfers
                        SET status = :verified_status,
                            verified = :verified,
                            signature = :signature,
                            recipient_uid = :recipient_uid,
                            verification_timestamp = :at
                        WHERE id = :id AND status = :pending
                        """
                    ),
                    {
                        "id": transfer.id,
                        "verified_status": TransferStatus.VERIFIED.value,
                        "pending": TransferStatus.PENDING.value,
                        "verified": True,
                        "signature": signature,
                        "recipient_uid": new_owner,
                        "at": at,
                    },
                )
                if verified.rowcount != 1:
                    raise _Rollback(OwnershipUpdateResult.ALREADY_FINALIZED)
        except _Rollback as rollback:
            logger.info(
                "Settlement of transfer=%s rolled back: %s",
                transfer.id,
                rollback.result.value,
            )
            return rollback.result

        logger.info("Settled transfer=%s fowl=%s", transfer.id, transfer.fowl_id)
        return OwnershipUpdateResult.SUCCESS

    @staticmethod
    def _update_owner(
        conn: Connection, fowl_id: str, expected_owner: str, new_owner: str, at: int
    ) -> OwnershipUpdateResult:
        result = conn.execute(
            text(
                """
                UPDATE fowls
                SET owner_id = :new_owner,
                    previous_owner_id = :expected_owner,
                    ownership_transfer_date = :at
                WHERE id = :id AND owner_id = :expected_owner
                """
            ),
            {
                "id": fowl_id,
                "expected_owner": expected_owner,
                "new_owner": new_owner,
                "at": at,
            },
        )
        if result.rowcount == 1:
            return OwnershipUpdateResult.SUCCESS

        exists = conn.execute(
            text("SELECT 1 FROM fowls WHERE id = :id"), {"id": fowl_id}
        ).first()
        if exists is None:
            return OwnershipUpdateResult.NOT_FOUND
        return OwnershipUpdateResult.CONFLICT
