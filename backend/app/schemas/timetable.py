from pydantic import BaseModel, Field

from app.schemas.lesson import LessonOut
from app.schemas.time_slot import TimeSlotOut


class TimetableRowOut(BaseModel):
    day: int
    day_name: str
    lessons: list[LessonOut] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class TimetableOut(BaseModel):
    rows: list[TimetableRowOut]
    column_time_slots: list[TimeSlotOut]
    total_lessons: int

    model_config = {"from_attributes": True}
