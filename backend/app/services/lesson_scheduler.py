from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import (
    InfrastructureError,
    ResourceNotFoundError,
    ScheduleConflictError,
    UnqualifiedTeacherError,
)
from app.models.academics import Stream, Subject, Teacher
from app.models.lesson import Lesson
from app.models.time_slot import TimeSlot
from app.models.user import User
from app.services.audit import log_activity
from app.services.conflict_service import ConflictDetector
from app.services.locking import scheduling_lock
from app.services.qualification import is_qualified

logger = logging.getLogger(__name__)

PLACEMENT_FIELDS = ("teacher_id", "stream_id", "time_slot_id", "day")
REFERENCE_MODELS = {
    "teacher_id": (Teacher, "Teacher"),
    "subject_id": (Subject, "Subject"),
    "stream_id": (Stream, "Stream"),
    "time_slot_id": (TimeSlot, "TimeSlot"),
}


@dataclass(frozen=True)
class LessonFilter:
    stream_id: str | None = None
    teacher_id: str | None = None
    subject_id: str | None = None
    day: int | None = None


def _snapshot(lesson: Lesson) -> dict:
    return {
        "name": lesson.name,
        "day": lesson.day,
        "teacher_id": lesson.teacher_id,
        "subject_id": lesson.subject_id,
        "stream_id": lesson.stream_id,
        "time_slot_id": lesson.time_slot_id,
    }


class LessonScheduler:
    """Creates, moves and removes lessons while keeping teachers and streams single-booked.

    Checks run in a fixed order: referenced records must exist, then conflicts
    are detected, then the teacher's qualification for the subject is verified.
    A conflict therefore wins over a qualification failure when both apply.
    """

    def __init__(self, db: Session, *, actor: User | None = None) -> None:
        self.db = db
        self.actor = actor
        self.detector = ConflictDetector(db)

    def get(self, lesson_id: str) -> Lesson:
        lesson = self.db.get(Lesson, lesson_id)
        if lesson is None:
            raise ResourceNotFoundError("Lesson", lesson_id)
        return lesson

    def list(self, lesson_filter: LessonFilter | None = None) -> list[Lesson]:
        lesson_filter = lesson_filter or LessonFilter()
        statement = select(Lesson).join(TimeSlot, Lesson.time_slot_id == TimeSlot.id)
        if lesson_filter.stream_id is not None:
            statement = statement.where(Lesson.stream_id == lesson_filter.stream_id)
        if lesson_filter.teacher_id is not None:
            statement = statement.where(Lesson.teacher_id == lesson_filter.teacher_id)
        if lesson_filter.subject_id is not None:
            statement = statement.where(Lesson.subject_id == lesson_filter.subject_id)
        if lesson_filter.day is not None:
            statement = statement.where(Lesson.day == lesson_filter.day)
        statement = statement.order_by(Lesson.day, TimeSlot.start_minutes, Lesson.id)
        return list(self.db.execute(statement).unique().scalars())

    def _ensure_references(self, values: dict) -> None:
        for field_name, (model, label) in REFERENCE_MODELS.items():
            if field_name in values and self.db.get(model, values[field_name]) is None:
                raise ResourceNotFoundError(label, values[field_name])

    def _reject_conflicts(self, values: dict, *, exclude_lesson_id: str | None = None) -> None:
        conflicts = self.detector.detect(
            values["teacher_id"],
            values["stream_id"],
            values["time_slot_id"],
            values["day"],
            exclude_lesson_id=exclude_lesson_id,
        )
        if conflicts:
            logger.warning(
                "Rejected lesson placement teacher=%s stream=%s day=%s slot=%s: %d conflict(s)",
                values["teacher_id"],
                values["stream_id"],
                values["day"],
                values["time_slot_id"],
                len(conflicts),
            )
            raise ScheduleConflictError(conflicts)

    def _ensure_qualified(self, teacher_id: str, subject_id: str) -> None:
        if not is_qualified(self.db, teacher_id, subject_id):
            logger.warning("Teacher %s is not qualified for subject %s", teacher_id, subject_id)
            raise UnqualifiedTeacherError(teacher_id, subject_id)

    def _commit_placement(self, values: dict, *, exclude_lesson_id: str | None = None) -> None:
        try:
            self.db.commit()
        except IntegrityError as exc:
            # The storage constraints caught a placement committed concurrently.
            self.db.rollback()
            conflicts = self.detector.detect(
                values["teacher_id"],
                values["stream_id"],
                values["time_slot_id"],
                values["day"],
                exclude_lesson_id=exclude_lesson_id,
            )
            if conflicts:
                raise ScheduleConflictError(conflicts) from exc
            logger.exception("Lesson write violated a storage constraint")
            raise InfrastructureError() from exc

    def create(
        self,
        *,
        name: str,
        day: int,
        teacher_id: str,
        subject_id: str,
        stream_id: str,
        time_slot_id: str,
        description: str | None = None,
    ) -> Lesson:
        values = {
            "name": name,
            "description": description,
            "day": day,
            "teacher_id": teacher_id,
            "subject_id": subject_id,
            "stream_id": stream_id,
            "time_slot_id": time_slot_id,
        }
        with scheduling_lock(self.db):
            try:
                self._ensure_references(values)
                self._reject_conflicts(values)
                self._ensure_qualified(teacher_id, subject_id)
                lesson = Lesson(id=str(uuid.uuid4()), **values)
                self.db.add(lesson)
                log_activity(
                    self.db,
                    user=self.actor,
                    action="lesson.create",
                    entity_type="lesson",
                    entity_id=lesson.id,
                    summary=f"Scheduled {lesson.name} on {lesson.day_name}",
                    details=_snapshot(lesson),
                )
                self._commit_placement(values)
            except SQLAlchemyError as exc:
                self.db.rollback()
                logger.exception("Failed to create lesson %s", name)
                raise InfrastructureError() from exc
            except Exception:
                self.db.rollback()
                raise
        self.db.refresh(lesson)
        logger.info("Scheduled lesson %s on day %s slot %s", lesson.id, lesson.day, lesson.time_slot_id)
        return lesson

    def update(self, lesson_id: str, changes: dict) -> Lesson:
        with scheduling_lock(self.db):
            try:
                lesson = self.get(lesson_id)
                changes = {key: value for key, value in changes.items() if value is not None or key == "description"}
                self._ensure_references(changes)

                effective = _snapshot(lesson) | {key: changes[key] for key in changes if key in PLACEMENT_FIELDS}
                if any(key in changes for key in PLACEMENT_FIELDS):
                    self._reject_conflicts(effective, exclude_lesson_id=lesson_id)

                teacher_id = changes.get("teacher_id", lesson.teacher_id)
                subject_id = changes.get("subject_id", lesson.subject_id)
                if teacher_id != lesson.teacher_id or subject_id != lesson.subject_id:
                    self._ensure_qualified(teacher_id, subject_id)

                before = _snapshot(lesson)
                for key, value in changes.items():
                    setattr(lesson, key, value)
                log_activity(
                    self.db,
                    user=self.actor,
                    action="lesson.update",
                    entity_type="lesson",
                    entity_id=lesson.id,
                    summary=f"Updated {lesson.name} ({lesson.day_name})",
                    details={"before": before, "after": _snapshot(lesson)},
                )
                self._commit_placement(_snapshot(lesson), exclude_lesson_id=lesson_id)
            except SQLAlchemyError as exc:
                self.db.rollback()
                logger.exception("Failed to update lesson %s", lesson_id)
                raise InfrastructureError() from exc
            except Exception:
                self.db.rollback()
                raise
        self.db.refresh(lesson)
        return lesson

    def delete(self, lesson_id: str) -> None:
        try:
            lesson = self.get(lesson_id)
            snapshot = _snapshot(lesson)
            self.db.delete(lesson)
            log_activity(
                self.db,
                user=self.actor,
                action="lesson.delete",
                entity_type="lesson",
                entity_id=lesson_id,
                summary=f"Removed {snapshot['name']}",
                details=snapshot,
            )
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Failed to delete lesson %s", lesson_id)
            raise InfrastructureError() from exc
        logger.info("Removed lesson %s", lesson_id)
