from typing import Literal

from pydantic import BaseModel


class ConflictParty(BaseModel):
    id: str
    name: str


class Conflict(BaseModel):
    conflict_type: Literal["teacher_conflict", "stream_conflict"]
    day: int
    day_name: str
    time_slot_id: str
    existing_lesson_id: str
    existing_lesson_name: str
    subject: ConflictParty
    # Teacher conflicts report the stream the teacher is already with,
    # stream conflicts report the teacher already teaching the stream.
    stream: ConflictParty | None = None
    grade: ConflictParty | None = None
    teacher: ConflictParty | None = None
    message: str
