from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import authorize, get_current_user, get_db
from app.api.routes.lessons import lesson_filter_params
from app.core.exceptions import ResourceNotFoundError
from app.core.permissions import Action, Resource
from app.models.academics import Stream, Teacher
from app.models.user import User
from app.schemas.timetable import TimetableOut
from app.services.lesson_scheduler import LessonFilter, LessonScheduler
from app.services.timetable_assembler import assemble_timetable

router = APIRouter()


def _timetable(db: Session, lesson_filter: LessonFilter) -> TimetableOut:
    return TimetableOut.model_validate(assemble_timetable(LessonScheduler(db).list(lesson_filter)))


@router.get("/", response_model=TimetableOut)
def get_timetable(
    lesson_filter: LessonFilter = Depends(lesson_filter_params),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TimetableOut:
    authorize(
        db,
        current_user,
        Resource.LESSONS,
        Action.read,
        {"stream_id": lesson_filter.stream_id, "teacher_id": lesson_filter.teacher_id},
    )
    return _timetable(db, lesson_filter)


@router.get("/streams/{stream_id}", response_model=TimetableOut)
def get_stream_timetable(
    stream_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TimetableOut:
    if db.get(Stream, stream_id) is None:
        raise ResourceNotFoundError("Stream", stream_id)
    authorize(db, current_user, Resource.LESSONS, Action.read, {"stream_id": stream_id})
    return _timetable(db, LessonFilter(stream_id=stream_id))


@router.get("/teachers/{teacher_id}", response_model=TimetableOut)
def get_teacher_timetable(
    teacher_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TimetableOut:
    if db.get(Teacher, teacher_id) is None:
        raise ResourceNotFoundError("Teacher", teacher_id)
    authorize(db, current_user, Resource.LESSONS, Action.read, {"teacher_id": teacher_id})
    return _timetable(db, LessonFilter(teacher_id=teacher_id))
