from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.api.deps import get_db, require_permission
from app.core.exceptions import HasDependentsError, ResourceNotFoundError
from app.core.permissions import Action, Resource
from app.models.academics import Subject, Teacher
from app.models.lesson import Lesson
from app.models.user import User, UserRole
from app.schemas.academics import TeacherCreate, TeacherOut, TeacherUpdate

router = APIRouter()


def _get_teacher(db: Session, teacher_id: str) -> Teacher:
    teacher = db.get(Teacher, teacher_id)
    if teacher is None:
        raise ResourceNotFoundError("Teacher", teacher_id)
    return teacher


def _load_subjects(db: Session, subject_ids: list[str]) -> list[Subject]:
    unique_ids = list(dict.fromkeys(subject_ids))
    subjects = list(db.execute(select(Subject).where(Subject.id.in_(unique_ids))).scalars()) if unique_ids else []
    found = {subject.id for subject in subjects}
    missing = [subject_id for subject_id in unique_ids if subject_id not in found]
    if missing:
        raise ResourceNotFoundError("Subject", missing[0])
    return subjects


def _ensure_linkable_user(db: Session, user_id: str, teacher_id: str | None = None) -> None:
    user = db.get(User, user_id)
    if user is None:
        raise ResourceNotFoundError("User", user_id)
    if user.role != UserRole.teacher:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Linked user must have the teacher role")
    statement = select(Teacher).where(Teacher.user_id == user_id)
    if teacher_id is not None:
        statement = statement.where(Teacher.id != teacher_id)
    if db.execute(statement).scalar_one_or_none() is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User is already linked to a teacher")


@router.get("/", response_model=list[TeacherOut])
def list_teachers(
    current_user: User = Depends(require_permission(Resource.TEACHERS, Action.read)),
    db: Session = Depends(get_db),
) -> list[TeacherOut]:
    return list(db.execute(select(Teacher).order_by(Teacher.last_name, Teacher.first_name)).scalars())


@router.get("/{teacher_id}", response_model=TeacherOut)
def get_teacher(
    teacher_id: str,
    current_user: User = Depends(require_permission(Resource.TEACHERS, Action.read)),
    db: Session = Depends(get_db),
) -> TeacherOut:
    return _get_teacher(db, teacher_id)


@router.post("/", response_model=TeacherOut, status_code=status.HTTP_201_CREATED)
def create_teacher(
    payload: TeacherCreate,
    current_user: User = Depends(require_permission(Resource.TEACHERS, Action.create)),
    db: Session = Depends(get_db),
) -> TeacherOut:
    existing = db.execute(select(Teacher).where(Teacher.email == payload.email)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Teacher email already exists")
    if payload.user_id is not None:
        _ensure_linkable_user(db, payload.user_id)
    values = payload.model_dump(exclude={"subject_ids"})
    teacher = Teacher(**values, subjects=_load_subjects(db, payload.subject_ids))
    db.add(teacher)
    db.commit()
    db.refresh(teacher)
    return teacher


@router.put("/{teacher_id}", response_model=TeacherOut)
def update_teacher(
    teacher_id: str,
    payload: TeacherUpdate,
    current_user: User = Depends(require_permission(Resource.TEACHERS, Action.update)),
    db: Session = Depends(get_db),
) -> TeacherOut:
    teacher = _get_teacher(db, teacher_id)
    data = payload.model_dump(exclude_unset=True)

    if data.get("email") is not None:
        existing = db.execute(
            select(Teacher).where(Teacher.email == data["email"], Teacher.id != teacher_id)
        ).scalar_one_or_none()
        if existing:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Teacher email already exists")
    if data.get("user_id") is not None:
        _ensure_linkable_user(db, data["user_id"], teacher_id)

    subject_ids = data.pop("subject_ids", None)
    if subject_ids is not None:
        # Narrowing the subject set does not touch lessons already scheduled.
        teacher.subjects = _load_subjects(db, subject_ids)
    for key, value in data.items():
        setattr(teacher, key, value)
    db.commit()
    db.refresh(teacher)
    return teacher


@router.delete("/{teacher_id}")
def delete_teacher(
    teacher_id: str,
    current_user: User = Depends(require_permission(Resource.TEACHERS, Action.delete)),
    db: Session = Depends(get_db),
) -> dict:
    teacher = _get_teacher(db, teacher_id)
    lessons = db.execute(select(func.count()).select_from(Lesson).where(Lesson.teacher_id == teacher_id)).scalar_one()
    if lessons:
        raise HasDependentsError("Teacher", teacher_id, lessons)
    db.delete(teacher)
    db.commit()
    return {"success": True}
