"""
Shared fixtures: an in-memory SQLite database with the full schema,
seeded accounts with ECDSA key pairs, and a signing helper.
"""

import base64
from dataclasses import dataclass
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from sqlalchemy import create_engine, insert
from sqlalchemy.pool import StaticPool

from fowlregistry.application.analytics import AnalyticsRecorder
from fowlregistry.domain.ownership.ports import PushGateway
from fowlregistry.domain.ownership.proof import canonical_signing_string
from fowlregistry.domain.ownership.transfer_notifier import TransferNotifier
from fowlregistry.infrastructure import database
from fowlregistry.infrastructure.ownership.analytics_event_repository import (
    AnalyticsEventRepositoryAdapter,
)
from fowlregistry.infrastructure.ownership.user_directory import UserDirectoryAdapter


@dataclass
class Account:
    uid: str
    email: str
    phone: str
    fcm_token: str
    private_key: ec.EllipticCurvePrivateKey

    @property
    def public_key_pem(self) -> str:
        return (
            self.private_key.public_key()
            .public_bytes(
                serialization.Encoding.PEM,
                serialization.PublicFormat.SubjectPublicKeyInfo,
            )
            .decode("ascii")
        )

    def sign(self, proof_data: dict[str, Any]) -> str:
        """Base64 DER signature over the canonical signing string."""
        der = self.private_key.sign(
            canonical_signing_string(proof_data), ec.ECDSA(hashes.SHA256())
        )
        return base64.b64encode(der).decode("ascii")


def _account(uid: str, email: str, phone: str) -> Account:
    return Account(
        uid=uid,
        email=email,
        phone=phone,
        fcm_token=f"{uid}-device",
        private_key=ec.generate_private_key(ec.SECP256R1()),
    )


@pytest.fixture(scope="session")
def accounts() -> dict[str, Account]:
    """alice owns F1; bob is the usual recipient; mallory is an outsider."""
    return {
        "alice": _account("alice", "alice@example.com", "+15550000001"),
        "bob": _account("bob", "bob@example.com", "+15551234567"),
        "mallory": _account("mallory", "mallory@example.com", "+15550000666"),
    }


def make_engine(url: str = "sqlite://"):
    if url == "sqlite://":
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(url, connect_args={"check_same_thread": False})
    database.init_schema(engine)
    return engine


def seed(engine, accounts: dict[str, Account]) -> None:
    with engine.begin() as conn:
        conn.execute(
            insert(database.users),
            [
                {
                    "uid": a.uid,
                    "email": a.email,
                    "phone": a.phone,
                    "fcm_token": a.fcm_token,
                    "public_key_pem": a.public_key_pem,
                }
                for a in accounts.values()
            ],
        )
        conn.execute(
            insert(database.fowls),
            [
                {"id": "F1", "owner_id": "alice", "name": "Goldie", "breed": "Silkie",
                 "gender": "female", "birth_date": "2023-03-01"},
                {"id": "F2", "owner_id": "alice", "name": "Rex", "breed": "Brahma",
                 "gender": "male", "birth_date": "2021-05-10"},
                {"id": "F3", "owner_id": "alice", "name": "Hattie", "breed": "Silkie",
                 "gender": "female", "birth_date": "2021-06-12"},
                {"id": "F4", "owner_id": "bob", "name": "Pip", "breed": "Silkie",
                 "gender": "", "birth_date": "2024-01-20"},
            ],
        )
        # Rex and Hattie are Goldie's parents, Pip is Goldie's chick.
        conn.execute(
            insert(database.lineage_links),
            [
                {"parent_id": "F2", "offspring_id": "F1"},
                {"parent_id": "F3", "offspring_id": "F1"},
                {"parent_id": "F1", "offspring_id": "F4"},
            ],
        )


@pytest.fixture
def engine(accounts):
    """Fresh in-memory database, schema created and seeded."""
    engine = make_engine()
    seed(engine, accounts)
    yield engine
    engine.dispose()


@pytest.fixture
def analytics(engine) -> AnalyticsRecorder:
    return AnalyticsRecorder(AnalyticsEventRepositoryAdapter(engine=engine))


@pytest.fixture
def push_gateway() -> MagicMock:
    gateway = MagicMock(spec=PushGateway)
    gateway.send_all = AsyncMock(side_effect=lambda messages: len(messages))
    return gateway


@pytest.fixture
def notifier(engine, push_gateway) -> TransferNotifier:
    return TransferNotifier(users=UserDirectoryAdapter(engine=engine), gateway=push_gateway)


@pytest.fixture
def file_engine(tmp_path, accounts):
    """Seeded on-disk database, for tests that need real concurrent connections."""
    engine = make_engine(f"sqlite:///{tmp_path / 'registry.db'}")
    seed(engine, accounts)
    yield engine
    engine.dispose()
