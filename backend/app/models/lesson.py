import uuid
from datetime import datetime
from enum import IntEnum

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from app.db.base import Base
from app.models.academics import Stream, Subject, Teacher
from app.models.time_slot import TimeSlot


class Day(IntEnum):
    monday = 1
    tuesday = 2
    wednesday = 3
    thursday = 4
    friday = 5

    @property
    def label(self) -> str:
        return self.name.capitalize()


class Lesson(Base):
    __tablename__ = "lessons"
    __table_args__ = (
        UniqueConstraint("teacher_id", "day", "time_slot_id", name="uq_lessons_teacher_day_slot"),
        UniqueConstraint("stream_id", "day", "time_slot_id", name="uq_lessons_stream_day_slot"),
        CheckConstraint("day BETWEEN 1 AND 5", name="ck_lessons_day"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    day: Mapped[int] = mapped_column(Integer, nullable=False)
    teacher_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("teachers.id", ondelete="RESTRICT"), index=True, nullable=False
    )
    subject_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("subjects.id", ondelete="RESTRICT"), index=True, nullable=False
    )
    stream_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("streams.id", ondelete="RESTRICT"), index=True, nullable=False
    )
    time_slot_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("time_slots.id", ondelete="RESTRICT"), index=True, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())

    teacher: Mapped[Teacher] = relationship(lazy="joined")
    subject: Mapped[Subject] = relationship(lazy="joined")
    stream: Mapped[Stream] = relationship(lazy="joined")
    time_slot: Mapped[TimeSlot] = relationship(lazy="joined")

    @property
    def day_name(self) -> str:
        return Day(self.day).label
