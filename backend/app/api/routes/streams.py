from fastapi import APIRouter, Depends, status
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.api.deps import authorize, get_current_user, get_db, require_permission
from app.core.exceptions import HasDependentsError, ResourceNotFoundError
from app.core.permissions import Action, Resource
from app.models.academics import Grade, Stream
from app.models.lesson import Lesson
from app.models.user import User
from app.schemas.academics import StreamCreate, StreamOut, StreamUpdate

router = APIRouter()


def _get_stream(db: Session, stream_id: str) -> Stream:
    stream = db.get(Stream, stream_id)
    if stream is None:
        raise ResourceNotFoundError("Stream", stream_id)
    return stream


def _ensure_grade(db: Session, grade_id: str) -> None:
    if db.get(Grade, grade_id) is None:
        raise ResourceNotFoundError("Grade", grade_id)


@router.get("/", response_model=list[StreamOut])
def list_streams(
    current_user: User = Depends(require_permission(Resource.STREAMS, Action.read)),
    db: Session = Depends(get_db),
) -> list[StreamOut]:
    statement = select(Stream).join(Grade, Stream.grade_id == Grade.id).order_by(Grade.level, Stream.name)
    return list(db.execute(statement).unique().scalars())


@router.get("/{stream_id}", response_model=StreamOut)
def get_stream(
    stream_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> StreamOut:
    stream = _get_stream(db, stream_id)
    authorize(db, current_user, Resource.STREAMS, Action.read, {"stream_id": stream_id})
    return stream


@router.post("/", response_model=StreamOut, status_code=status.HTTP_201_CREATED)
def create_stream(
    payload: StreamCreate,
    current_user: User = Depends(require_permission(Resource.STREAMS, Action.create)),
    db: Session = Depends(get_db),
) -> StreamOut:
    _ensure_grade(db, payload.grade_id)
    stream = Stream(**payload.model_dump())
    db.add(stream)
    db.commit()
    db.refresh(stream)
    return stream


@router.put("/{stream_id}", response_model=StreamOut)
def update_stream(
    stream_id: str,
    payload: StreamUpdate,
    current_user: User = Depends(require_permission(Resource.STREAMS, Action.update)),
    db: Session = Depends(get_db),
) -> StreamOut:
    stream = _get_stream(db, stream_id)
    data = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "grade_id" in data:
        _ensure_grade(db, data["grade_id"])
    for key, value in data.items():
        setattr(stream, key, value)
    db.commit()
    db.refresh(stream)
    return stream


@router.delete("/{stream_id}")
def delete_stream(
    stream_id: str,
    current_user: User = Depends(require_permission(Resource.STREAMS, Action.delete)),
    db: Session = Depends(get_db),
) -> dict:
    stream = _get_stream(db, stream_id)
    lessons = db.execute(select(func.count()).select_from(Lesson).where(Lesson.stream_id == stream_id)).scalar_one()
    if lessons:
        raise HasDependentsError("Stream", stream_id, lessons)
    db.delete(stream)
    db.commit()
    return {"success": True}
