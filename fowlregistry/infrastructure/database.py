"""
Relational schema and engine factory.

Tables are declared with SQLAlchemy Core metadata so the same schema runs
on PostgreSQL in production and SQLite in tests. Repositories issue
plain text() SQL against these tables. Instants are epoch milliseconds
stored as BIGINT; list and object columns hold JSON text.
"""

import logging

from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    create_engine,
)
from sqlalchemy.engine import Engine

from fowlregistry.core.config import settings

logger = logging.getLogger(__name__)

metadata = MetaData()

users = Table(
    "users",
    metadata,
    Column("uid", String(128), primary_key=True),
    Column("email", String(320), unique=True),
    Column("phone", String(32), unique=True),
    Column("fcm_token", String(512)),
    Column("public_key_pem", Text),
)

fowls = Table(
    "fowls",
    metadata,
    Column("id", String(128), primary_key=True),
    Column("owner_id", String(128), nullable=False, index=True),
    Column("previous_owner_id", String(128)),
    Column("ownership_transfer_date", BigInteger),
    Column("name", String(256), nullable=False, default=""),
    Column("breed", String(128), nullable=False, default=""),
    Column("gender", String(32), nullable=False, default=""),
    Column("birth_date", String(32), nullable=False, default=""),
)

lineage_links = Table(
    "lineage_links",
    metadata,
    Column("parent_id", String(128), ForeignKey("fowls.id"), primary_key=True),
    Column("offspring_id", String(128), ForeignKey("fowls.id"), primary_key=True),
    Index("ix_lineage_links_offspring", "offspring_id"),
)

transfers = Table(
    "transfers",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("fowl_id", String(128), nullable=False, index=True),
    Column("from_uid", String(128), nullable=False),
    Column("to_uid", String(320), nullable=False),
    Column("contact_method", String(16), nullable=False),
    Column("status", String(16), nullable=False, default="PENDING"),
    Column("timestamp", BigInteger, nullable=False),
    Column("verified", Boolean, nullable=False, default=False),
    Column("signature", Text),
    Column("proof_urls", Text, nullable=False, default="[]"),
    Column("rejection_reason", String(128)),
    Column("verification_timestamp", BigInteger),
    Column("recipient_uid", String(128)),
)

analytics_events = Table(
    "analytics_events",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("event_name", String(128), nullable=False),
    Column("event_data", Text, nullable=False, default="{}"),
    Column("created_at", BigInteger, nullable=False, index=True),
)

vaccination_events = Table(
    "vaccination_events",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("fowl_id", String(128), ForeignKey("fowls.id"), nullable=False, index=True),
    Column("vaccine_name", String(256), nullable=False),
    Column("scheduled_date", BigInteger, nullable=False),
    Column("status", String(16), nullable=False, default="PENDING"),
    Column("completed_date", BigInteger),
    Column("notes", Text, nullable=False, default=""),
)

breeding_events = Table(
    "breeding_events",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("sire_id", String(128)),
    Column("dam_id", String(128)),
    Column("breeding_date", BigInteger, nullable=False, index=True),
    Column("egg_count", Integer, nullable=False, default=0),
    Column("hatched_count", Integer, nullable=False, default=0),
    Column("offspring_count", Integer, nullable=False, default=0),
)


def create_engine_from_settings() -> Engine:
    """Build a SQLAlchemy engine from application settings."""
    return create_engine(settings.get_database_url(), pool_pre_ping=True)


def init_schema(engine: Engine) -> None:
    """Create any missing tables."""
    metadata.create_all(engine)
    logger.info("Database schema ready (%d tables)", len(metadata.tables))
