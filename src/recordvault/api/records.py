"""Record API routes — all scoped to the authenticated caller.

- GET    /records       → caller's records, newest first
- POST   /records       → create a record owned by the caller (201)
- DELETE /records/{id}  → delete one of the caller's records

A record id that doesn't exist and one that belongs to another user
both give the same 404.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from recordvault.auth.dependencies import CurrentIdentity, get_current_user
from recordvault.db.engine import get_db
from recordvault.schemas.record import MessageResponse, RecordCreate, RecordRead
from recordvault.services.record_service import RecordService

router = APIRouter(prefix="/records")


def _svc(db: AsyncSession = Depends(get_db)) -> RecordService:
    return RecordService(db)


@router.get("", response_model=list[RecordRead])
async def list_records(
    identity: CurrentIdentity = Depends(get_current_user),
    svc: RecordService = Depends(_svc),
):
    return await svc.list_records(identity)


@router.post("", response_model=RecordRead, status_code=201)
async def create_record(
    body: RecordCreate,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: RecordService = Depends(_svc),
):
    return await svc.create_record(
        identity,
        type=body.type,
        name=body.name,
        id_number=body.id_number,
        secret=body.secret,
        notes=body.notes,
    )


@router.delete("/{record_id}", response_model=MessageResponse)
async def delete_record(
    record_id: str,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: RecordService = Depends(_svc),
):
    await svc.delete_record(identity, record_id)
    return MessageResponse(message="Record successfully deleted")
