from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from app.models.lesson import Day
from app.schemas.academics import StreamOut, SubjectOut, TeacherSummary
from app.schemas.time_slot import TimeSlotOut

DAY_BY_NAME = {day.label: day for day in Day} | {day.label[:3]: day for day in Day}


def coerce_day(value):
    """Accept 1..5 or an English weekday name and return the canonical integer."""
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, str):
        cleaned = value.strip()
        if cleaned.isdigit():
            value = int(cleaned)
        else:
            day = DAY_BY_NAME.get(cleaned.capitalize())
            if day is None:
                raise ValueError("Day must be Monday to Friday")
            return int(day)
    return value


class LessonCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str | None = None
    day: int = Field(ge=1, le=5)
    teacher_id: str = Field(min_length=1, max_length=36)
    subject_id: str = Field(min_length=1, max_length=36)
    stream_id: str = Field(min_length=1, max_length=36)
    time_slot_id: str = Field(min_length=1, max_length=36)

    @field_validator("day", mode="before")
    @classmethod
    def normalize_day(cls, value):
        return coerce_day(value)


class LessonUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    day: int | None = Field(default=None, ge=1, le=5)
    teacher_id: str | None = Field(default=None, min_length=1, max_length=36)
    subject_id: str | None = Field(default=None, min_length=1, max_length=36)
    stream_id: str | None = Field(default=None, min_length=1, max_length=36)
    time_slot_id: str | None = Field(default=None, min_length=1, max_length=36)

    @field_validator("day", mode="before")
    @classmethod
    def normalize_day(cls, value):
        return coerce_day(value)


class LessonOut(BaseModel):
    id: str
    name: str
    description: str | None = None
    day: int
    day_name: str
    teacher_id: str
    subject_id: str
    stream_id: str
    time_slot_id: str
    teacher: TeacherSummary
    subject: SubjectOut
    stream: StreamOut
    time_slot: TimeSlotOut

    model_config = {"from_attributes": True}
