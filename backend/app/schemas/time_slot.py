from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def parse_time_to_minutes(value: str) -> int:
    match = TIME_PATTERN.match(value)
    if match is None:
        raise ValueError("Time must be in HH:MM 24-hour format")
    return int(match.group(1)) * 60 + int(match.group(2))


def _normalize_name(value: str | None) -> str | None:
    if value is None:
        return None
    trimmed = value.strip()
    if not trimmed:
        raise ValueError("Slot name is required")
    return trimmed


def _validate_time(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    if not TIME_PATTERN.match(value):
        raise ValueError("Invalid time format (expected HH:MM)")
    return value


class TimeSlotCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    start_time: str
    end_time: str

    @field_validator("name")
    @classmethod
    def normalize_name(cls, value: str) -> str:
        return _normalize_name(value)

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, value: str) -> str:
        return _validate_time(value)


class TimeSlotUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    start_time: str | None = None
    end_time: str | None = None

    @field_validator("name")
    @classmethod
    def normalize_name(cls, value: str | None) -> str | None:
        return _normalize_name(value)

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, value: str | None) -> str | None:
        return _validate_time(value)


class TimeSlotOut(BaseModel):
    id: str
    name: str
    start_time: str
    end_time: str
    start_minutes: int
    end_minutes: int

    model_config = {"from_attributes": True}
