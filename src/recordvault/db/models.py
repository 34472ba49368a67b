"""SQLAlchemy ORM models — the users and records collections.

Learn: The store enforces the invariants the services rely on:
- users.username is UNIQUE, so concurrent duplicate signups cannot both win
- records.user_id is a NOT NULL foreign key, so every record has an owner
- (user_id, created_at) is indexed for the owner-scoped, newest-first listing
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, TypeDecorator, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_uuid() -> uuid.UUID:
    return uuid.uuid4()


class UtcDateTime(TypeDecorator):
    """Timezone-aware UTC datetimes on every store.

    SQLite drops tzinfo on the way in, so values read back naive. Naive
    values are stored and returned as UTC.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return value
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class User(Base):
    """An account. The password hash never leaves the service layer."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=new_uuid)
    username: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        UtcDateTime, nullable=False, default=utcnow
    )

    records: Mapped[list["Record"]] = relationship(
        back_populates="owner", cascade="all, delete-orphan"
    )


class Record(Base):
    """A personal record (account, certificate, scholarship, ...).

    Learn: `secret` is serialized as "password" on the wire. It is stored
    in plain text, a known weakness carried over from the existing
    clients, which read it back to reveal it on demand.
    """

    __tablename__ = "records"
    __table_args__ = (
        Index("ix_records_user_created", "user_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=new_uuid)
    type: Mapped[str] = mapped_column(Text, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    id_number: Mapped[str] = mapped_column(Text, nullable=False)
    secret: Mapped[str] = mapped_column(Text, nullable=False, default="")
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    # Assigned client-side at insert so ordering keeps sub-second precision
    # on stores whose now() is coarse.
    created_at: Mapped[datetime] = mapped_column(
        UtcDateTime, nullable=False, default=utcnow
    )

    owner: Mapped["User"] = relationship(back_populates="records")


async def create_all(engine) -> None:
    """Create tables that don't exist yet (idempotent)."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
