from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.lesson import Day, Lesson
from app.schemas.conflict import Conflict, ConflictParty


class ConflictDetector:
    """Reports teacher and stream double-bookings for a proposed lesson placement.

    Both checks run independently against stored lessons, so a proposal that
    duplicates an existing lesson yields two records. Nothing is written.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def _find(self, column, value: str, time_slot_id: str, day: int, exclude_lesson_id: str | None) -> Lesson | None:
        statement = select(Lesson).where(
            column == value,
            Lesson.day == day,
            Lesson.time_slot_id == time_slot_id,
        )
        if exclude_lesson_id is not None:
            statement = statement.where(Lesson.id != exclude_lesson_id)
        return self.db.execute(statement.limit(1)).unique().scalar_one_or_none()

    def detect(
        self,
        teacher_id: str,
        stream_id: str,
        time_slot_id: str,
        day: int,
        exclude_lesson_id: str | None = None,
    ) -> list[Conflict]:
        conflicts: list[Conflict] = []
        day_name = Day(day).label

        teacher_clash = self._find(Lesson.teacher_id, teacher_id, time_slot_id, day, exclude_lesson_id)
        if teacher_clash is not None:
            grade = teacher_clash.stream.grade
            conflicts.append(
                Conflict(
                    conflict_type="teacher_conflict",
                    day=day,
                    day_name=day_name,
                    time_slot_id=time_slot_id,
                    existing_lesson_id=teacher_clash.id,
                    existing_lesson_name=teacher_clash.name,
                    subject=ConflictParty(id=teacher_clash.subject.id, name=teacher_clash.subject.name),
                    stream=ConflictParty(id=teacher_clash.stream.id, name=teacher_clash.stream.name),
                    grade=ConflictParty(id=grade.id, name=grade.name),
                    message=(
                        f"Teacher {teacher_clash.teacher.full_name} already teaches "
                        f"{teacher_clash.subject.name} to {grade.name} {teacher_clash.stream.name} "
                        f"on {day_name} during {teacher_clash.time_slot.name}"
                    ),
                )
            )

        stream_clash = self._find(Lesson.stream_id, stream_id, time_slot_id, day, exclude_lesson_id)
        if stream_clash is not None:
            conflicts.append(
                Conflict(
                    conflict_type="stream_conflict",
                    day=day,
                    day_name=day_name,
                    time_slot_id=time_slot_id,
                    existing_lesson_id=stream_clash.id,
                    existing_lesson_name=stream_clash.name,
                    subject=ConflictParty(id=stream_clash.subject.id, name=stream_clash.subject.name),
                    teacher=ConflictParty(id=stream_clash.teacher.id, name=stream_clash.teacher.full_name),
                    message=(
                        f"Stream {stream_clash.stream.grade.name} {stream_clash.stream.name} already has "
                        f"{stream_clash.subject.name} with {stream_clash.teacher.full_name} "
                        f"on {day_name} during {stream_clash.time_slot.name}"
                    ),
                )
            )

        return conflicts
