from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.api.deps import get_db, require_permission
from app.core.exceptions import HasDependentsError, ResourceNotFoundError
from app.core.permissions import Action, Resource
from app.models.academics import Subject
from app.models.lesson import Lesson
from app.models.user import User
from app.schemas.academics import SubjectCreate, SubjectOut, SubjectUpdate

router = APIRouter()


def _get_subject(db: Session, subject_id: str) -> Subject:
    subject = db.get(Subject, subject_id)
    if subject is None:
        raise ResourceNotFoundError("Subject", subject_id)
    return subject


@router.get("/", response_model=list[SubjectOut])
def list_subjects(
    current_user: User = Depends(require_permission(Resource.SUBJECTS, Action.read)),
    db: Session = Depends(get_db),
) -> list[SubjectOut]:
    return list(db.execute(select(Subject).order_by(Subject.code)).scalars())


@router.post("/", response_model=SubjectOut, status_code=status.HTTP_201_CREATED)
def create_subject(
    payload: SubjectCreate,
    current_user: User = Depends(require_permission(Resource.SUBJECTS, Action.create)),
    db: Session = Depends(get_db),
) -> SubjectOut:
    existing = db.execute(select(Subject).where(Subject.code == payload.code)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Subject code already exists")
    subject = Subject(**payload.model_dump())
    db.add(subject)
    db.commit()
    db.refresh(subject)
    return subject


@router.put("/{subject_id}", response_model=SubjectOut)
def update_subject(
    subject_id: str,
    payload: SubjectUpdate,
    current_user: User = Depends(require_permission(Resource.SUBJECTS, Action.update)),
    db: Session = Depends(get_db),
) -> SubjectOut:
    subject = _get_subject(db, subject_id)
    data = payload.model_dump(exclude_unset=True)
    if "code" in data:
        existing = db.execute(
            select(Subject).where(Subject.code == data["code"], Subject.id != subject_id)
        ).scalar_one_or_none()
        if existing:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Subject code already exists")
    for key, value in data.items():
        setattr(subject, key, value)
    db.commit()
    db.refresh(subject)
    return subject


@router.delete("/{subject_id}")
def delete_subject(
    subject_id: str,
    current_user: User = Depends(require_permission(Resource.SUBJECTS, Action.delete)),
    db: Session = Depends(get_db),
) -> dict:
    subject = _get_subject(db, subject_id)
    lessons = db.execute(select(func.count()).select_from(Lesson).where(Lesson.subject_id == subject_id)).scalar_one()
    if lessons:
        raise HasDependentsError("Subject", subject_id, lessons)
    db.delete(subject)
    db.commit()
    return {"success": True}
