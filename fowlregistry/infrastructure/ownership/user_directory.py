"""
Adapter: User directory.

Implements UserDirectory port over the users table. Recipients are
resolved by uid first, then by the column matching the contact method
(or both email and phone when no method is given). Phone numbers are
compared with separators stripped on both sides, since accounts keep
them as entered.
"""

from typing import Any, Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine

from fowlregistry.domain.ownership.entities import ContactMethod, UserProfile
from fowlregistry.domain.ownership.ownership_service import compact_phone
from fowlregistry.domain.ownership.ports import UserDirectory

USER_COLUMNS = "uid, email, phone, fcm_token, public_key_pem"

# Same separators as compact_phone, stripped in SQL so stored numbers match.
COMPACT_PHONE_SQL = (
    "REPLACE(REPLACE(REPLACE(REPLACE(REPLACE(phone, ' ', ''), '-', ''), "
    "'(', ''), ')', ''), '.', '')"
)


def _to_profile(row: Any) -> UserProfile:
    return UserProfile(
        uid=row.uid,
        email=row.email,
        phone=row.phone,
        fcm_token=row.fcm_token,
        public_key_pem=row.public_key_pem,
    )


class UserDirectoryAdapter(UserDirectory):
    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def get(self, uid: str) -> Optional[UserProfile]:
        return self._first("uid = :value", uid)

    def resolve(
        self, identifier: str, contact_method: Optional[ContactMethod] = None
    ) -> Optional[UserProfile]:
        if not identifier:
            return None
        profile = self.get(identifier)
        if profile is not None:
            return profile
        if contact_method in (None, ContactMethod.EMAIL):
            profile = self._first("LOWER(email) = :value", identifier.lower())
            if profile is not None:
                return profile
        if contact_method in (None, ContactMethod.PHONE):
            return self._first(
                f"{COMPACT_PHONE_SQL} = :value", compact_phone(identifier)
            )
        return None

    def _first(self, condition: str, value: str) -> Optional[UserProfile]:
        query = text(f"SELECT {USER_COLUMNS} FROM users WHERE {condition}")
        with self._engine.connect() as conn:
            row = conn.execute(query, {"value": value}).first()
        return _to_profile(row) if row is not None else None
