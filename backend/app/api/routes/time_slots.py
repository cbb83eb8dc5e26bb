from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_db, require_permission
from app.core.permissions import Action, Resource
from app.models.user import User
from app.schemas.time_slot import TimeSlotCreate, TimeSlotOut, TimeSlotUpdate, parse_time_to_minutes
from app.services.time_slots import TimeSlotCatalog

router = APIRouter()


@router.get("/", response_model=list[TimeSlotOut])
def list_time_slots(
    current_user: User = Depends(require_permission(Resource.TIMESLOTS, Action.read)),
    db: Session = Depends(get_db),
) -> list[TimeSlotOut]:
    return TimeSlotCatalog(db).list()


@router.get("/{slot_id}", response_model=TimeSlotOut)
def get_time_slot(
    slot_id: str,
    current_user: User = Depends(require_permission(Resource.TIMESLOTS, Action.read)),
    db: Session = Depends(get_db),
) -> TimeSlotOut:
    return TimeSlotCatalog(db).get(slot_id)


@router.post("/", response_model=TimeSlotOut, status_code=status.HTTP_201_CREATED)
def create_time_slot(
    payload: TimeSlotCreate,
    current_user: User = Depends(require_permission(Resource.TIMESLOTS, Action.create)),
    db: Session = Depends(get_db),
) -> TimeSlotOut:
    return TimeSlotCatalog(db, actor=current_user).create(
        payload.name,
        parse_time_to_minutes(payload.start_time),
        parse_time_to_minutes(payload.end_time),
    )


@router.put("/{slot_id}", response_model=TimeSlotOut)
def update_time_slot(
    slot_id: str,
    payload: TimeSlotUpdate,
    current_user: User = Depends(require_permission(Resource.TIMESLOTS, Action.update)),
    db: Session = Depends(get_db),
) -> TimeSlotOut:
    return TimeSlotCatalog(db, actor=current_user).update(
        slot_id,
        name=payload.name,
        start_minutes=parse_time_to_minutes(payload.start_time) if payload.start_time else None,
        end_minutes=parse_time_to_minutes(payload.end_time) if payload.end_time else None,
    )


@router.delete("/{slot_id}")
def delete_time_slot(
    slot_id: str,
    current_user: User = Depends(require_permission(Resource.TIMESLOTS, Action.delete)),
    db: Session = Depends(get_db),
) -> dict:
    TimeSlotCatalog(db, actor=current_user).delete(slot_id)
    return {"success": True}
