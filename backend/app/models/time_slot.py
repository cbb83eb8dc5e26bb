import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base


def format_minutes(value: int) -> str:
    hours, minutes = divmod(value, 60)
    return f"{hours:02d}:{minutes:02d}"


class TimeSlot(Base):
    __tablename__ = "time_slots"
    __table_args__ = (
        CheckConstraint("start_minutes < end_minutes", name="ck_time_slots_interval"),
        CheckConstraint("start_minutes >= 0 AND end_minutes <= 1440", name="ck_time_slots_day_bounds"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    start_minutes: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    end_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())

    @property
    def start_time(self) -> str:
        return format_minutes(self.start_minutes)

    @property
    def end_time(self) -> str:
        return format_minutes(self.end_minutes)

    def overlaps(self, start_minutes: int, end_minutes: int) -> bool:
        return start_minutes < self.end_minutes and self.start_minutes < end_minutes

    def summary(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "start_time": self.start_time,
            "end_time": self.end_time,
        }
