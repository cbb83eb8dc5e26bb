from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from app.models.lesson import Day


@dataclass
class TimetableRow:
    day: int
    day_name: str
    lessons: list[Any] = field(default_factory=list)


@dataclass
class Timetable:
    rows: list[TimetableRow]
    column_time_slots: list[Any]
    total_lessons: int


def _slot_sort_key(slot: Any) -> tuple[int, int, str]:
    return slot.start_minutes, slot.end_minutes, slot.id


def assemble_timetable(lessons: Iterable[Any]) -> Timetable:
    """Arrange lessons into a Monday..Friday grid.

    Every weekday gets a row, empty or not, with its lessons ordered by slot
    start. The column headers are the distinct slots the lessons actually use.
    Works on any objects exposing ``day`` and ``time_slot`` (with ``id`` and
    ``start_minutes``), so the same grid backs stream, teacher and school views.
    """
    rows = {day.value: TimetableRow(day=day.value, day_name=day.label) for day in Day}
    columns: dict[str, Any] = {}
    total = 0

    for lesson in lessons:
        row = rows.get(lesson.day)
        if row is None:
            raise ValueError(f"Lesson {lesson.id} has invalid day {lesson.day}")
        row.lessons.append(lesson)
        columns.setdefault(lesson.time_slot.id, lesson.time_slot)
        total += 1

    for row in rows.values():
        row.lessons.sort(key=lambda item: (_slot_sort_key(item.time_slot), item.id))

    return Timetable(
        rows=[rows[day.value] for day in Day],
        column_time_slots=sorted(columns.values(), key=_slot_sort_key),
        total_lessons=total,
    )

