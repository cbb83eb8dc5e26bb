from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import authorize, ensure_not_in_maintenance, get_current_user, get_db
from app.core.permissions import Action, Resource
from app.models.user import User
from app.schemas.lesson import LessonCreate, LessonOut, LessonUpdate
from app.services.lesson_scheduler import LessonFilter, LessonScheduler

router = APIRouter()


def lesson_filter_params(
    stream_id: str | None = Query(default=None),
    teacher_id: str | None = Query(default=None),
    subject_id: str | None = Query(default=None),
    day: int | None = Query(default=None, ge=1, le=5),
) -> LessonFilter:
    return LessonFilter(stream_id=stream_id, teacher_id=teacher_id, subject_id=subject_id, day=day)


@router.get("/", response_model=list[LessonOut])
def list_lessons(
    lesson_filter: LessonFilter = Depends(lesson_filter_params),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[LessonOut]:
    authorize(
        db,
        current_user,
        Resource.LESSONS,
        Action.read,
        {"stream_id": lesson_filter.stream_id, "teacher_id": lesson_filter.teacher_id},
    )
    return LessonScheduler(db).list(lesson_filter)


@router.get("/{lesson_id}", response_model=LessonOut)
def get_lesson(
    lesson_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> LessonOut:
    lesson = LessonScheduler(db).get(lesson_id)
    authorize(
        db,
        current_user,
        Resource.LESSONS,
        Action.read,
        {"stream_id": lesson.stream_id, "teacher_id": lesson.teacher_id},
    )
    return lesson


@router.post("/", response_model=LessonOut, status_code=status.HTTP_201_CREATED)
def create_lesson(
    payload: LessonCreate,
    current_user: User = Depends(ensure_not_in_maintenance),
    db: Session = Depends(get_db),
) -> LessonOut:
    authorize(db, current_user, Resource.LESSONS, Action.create, {"teacher_id": payload.teacher_id})
    return LessonScheduler(db, actor=current_user).create(**payload.model_dump())


@router.put("/{lesson_id}", response_model=LessonOut)
def update_lesson(
    lesson_id: str,
    payload: LessonUpdate,
    current_user: User = Depends(ensure_not_in_maintenance),
    db: Session = Depends(get_db),
) -> LessonOut:
    scheduler = LessonScheduler(db, actor=current_user)
    lesson = scheduler.get(lesson_id)
    changes = payload.model_dump(exclude_unset=True)
    authorize(db, current_user, Resource.LESSONS, Action.update, {"teacher_id": lesson.teacher_id})
    if changes.get("teacher_id") not in (None, lesson.teacher_id):
        # Handing a lesson to another teacher requires permission over the new owner too.
        authorize(db, current_user, Resource.LESSONS, Action.update, {"teacher_id": changes["teacher_id"]})
    return scheduler.update(lesson_id, changes)


@router.delete("/{lesson_id}")
def delete_lesson(
    lesson_id: str,
    current_user: User = Depends(ensure_not_in_maintenance),
    db: Session = Depends(get_db),
) -> dict:
    scheduler = LessonScheduler(db, actor=current_user)
    lesson = scheduler.get(lesson_id)
    authorize(db, current_user, Resource.LESSONS, Action.delete, {"teacher_id": lesson.teacher_id})
    scheduler.delete(lesson_id)
    return {"success": True}
