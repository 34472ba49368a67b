"""Record service — owner-scoped CRUD (minus update) for records.

Learn: Every method takes the caller's CurrentIdentity explicitly and
filters on Record.user_id. There is no unscoped query in this module.

Deletion uses a single DELETE ... WHERE id = :id AND user_id = :owner, so
"doesn't exist" and "belongs to someone else" are the same zero-row
outcome and both surface as RecordNotFoundError.
"""

import uuid
from typing import Optional

import structlog
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from recordvault.auth.dependencies import CurrentIdentity
from recordvault.db.models import Record
from recordvault.errors import RecordNotFoundError, ValidationError

logger = structlog.get_logger()

REQUIRED_FIELDS = {"type": "Type", "name": "Name", "id_number": "ID/Number"}


class RecordService:
    """Business logic for a user's records."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_records(self, identity: CurrentIdentity) -> list[Record]:
        """The caller's records, newest first."""
        result = await self.db.execute(
            select(Record)
            .where(Record.user_id == identity.user_id)
            .order_by(Record.created_at.desc())
        )
        return list(result.scalars().all())

    async def create_record(
        self,
        identity: CurrentIdentity,
        type: str,
        name: str,
        id_number: str,
        secret: Optional[str] = "",
        notes: Optional[str] = None,
    ) -> Record:
        values = {"type": type, "name": name, "id_number": id_number}
        for field, label in REQUIRED_FIELDS.items():
            value = values[field]
            if value is None or not value.strip():
                raise ValidationError(f"{label} is required.")

        record = Record(
            type=type.strip(),
            name=name.strip(),
            id_number=id_number.strip(),
            secret=secret or "",
            notes=notes,
            user_id=identity.user_id,
        )
        self.db.add(record)
        await self.db.commit()

        logger.info("records.created", record_id=str(record.id), type=record.type)
        return record

    async def delete_record(self, identity: CurrentIdentity, record_id: str) -> None:
        """Delete one of the caller's records, or raise RecordNotFoundError."""
        try:
            rid = uuid.UUID(record_id)
        except (ValueError, TypeError):
            raise RecordNotFoundError()

        result = await self.db.execute(
            delete(Record).where(Record.id == rid, Record.user_id == identity.user_id)
        )
        if result.rowcount == 0:
            await self.db.rollback()
            logger.info("records.delete_not_found", record_id=record_id)
            raise RecordNotFoundError()

        await self.db.commit()
        logger.info("records.deleted", record_id=record_id)
