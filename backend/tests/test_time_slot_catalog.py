import itertools

import pytest

from app.core.exceptions import HasDependentsError, InvalidIntervalError, ResourceNotFoundError, SlotOverlapError
from app.models.lesson import Lesson
from app.models.time_slot import TimeSlot
from app.services.time_slots import TimeSlotCatalog, slots_overlap


def minutes(value: str) -> int:
    hours, mins = value.split(":")
    return int(hours) * 60 + int(mins)


def test_overlapping_slot_is_rejected_but_touching_slot_is_accepted(db_session):
    catalog = TimeSlotCatalog(db_session)
    first = catalog.create("Period 1", minutes("09:00"), minutes("09:45"))

    with pytest.raises(SlotOverlapError) as excinfo:
        catalog.create("Clash", minutes("09:30"), minutes("10:15"))
    assert excinfo.value.details["colliding_slot"]["id"] == first.id
    assert excinfo.value.status_code == 409

    second = catalog.create("Period 2", minutes("09:45"), minutes("10:15"))
    assert second.start_time == "09:45"
    assert [slot.name for slot in catalog.list()] == ["Period 1", "Period 2"]


def test_slot_enclosing_an_existing_slot_overlaps(db_session):
    catalog = TimeSlotCatalog(db_session)
    catalog.create("Short", minutes("10:00"), minutes("10:10"))

    with pytest.raises(SlotOverlapError):
        catalog.create("Long", minutes("09:00"), minutes("11:00"))


@pytest.mark.parametrize("start,end", [("10:00", "10:00"), ("11:00", "10:00")])
def test_non_positive_interval_is_invalid(db_session, start, end):
    with pytest.raises(InvalidIntervalError):
        TimeSlotCatalog(db_session).create("Broken", minutes(start), minutes(end))


def test_list_is_sorted_by_start_time(db_session):
    catalog = TimeSlotCatalog(db_session)
    catalog.create("Afternoon", minutes("14:00"), minutes("14:40"))
    catalog.create("Morning", minutes("08:00"), minutes("08:40"))
    catalog.create("Midday", minutes("11:00"), minutes("11:40"))

    assert [slot.name for slot in catalog.list()] == ["Morning", "Midday", "Afternoon"]


def test_accepted_slots_never_pairwise_overlap(db_session):
    catalog = TimeSlotCatalog(db_session)
    proposals = [("08:00", "08:40"), ("08:20", "09:00"), ("08:40", "09:20"), ("09:10", "09:50"), ("09:20", "10:00")]
    for index, (start, end) in enumerate(proposals):
        try:
            catalog.create(f"Slot {index}", minutes(start), minutes(end))
        except SlotOverlapError:
            pass

    accepted = catalog.list()
    assert len(accepted) == 3
    for a, b in itertools.combinations(accepted, 2):
        assert not slots_overlap(a.start_minutes, a.end_minutes, b.start_minutes, b.end_minutes)


def test_update_ignores_the_slot_being_moved(db_session):
    catalog = TimeSlotCatalog(db_session)
    slot = catalog.create("Period 1", minutes("09:00"), minutes("09:45"))
    catalog.create("Period 2", minutes("10:00"), minutes("10:45"))

    moved = catalog.update(slot.id, start_minutes=minutes("09:15"), end_minutes=minutes("10:00"))
    assert (moved.start_time, moved.end_time) == ("09:15", "10:00")

    with pytest.raises(SlotOverlapError):
        catalog.update(slot.id, end_minutes=minutes("10:30"))

    with pytest.raises(InvalidIntervalError):
        catalog.update(slot.id, start_minutes=minutes("11:00"))

    renamed = catalog.update(slot.id, name="First Period")
    assert renamed.name == "First Period"
    assert renamed.start_time == "09:15"


def test_update_and_delete_unknown_slot(db_session):
    catalog = TimeSlotCatalog(db_session)
    with pytest.raises(ResourceNotFoundError):
        catalog.update("missing", name="Nope")
    with pytest.raises(ResourceNotFoundError):
        catalog.delete("missing")


def test_delete_is_blocked_while_lessons_reference_the_slot(db_session, school):
    catalog = TimeSlotCatalog(db_session)
    slot = school["period_1"]
    lesson = Lesson(
        name="Algebra",
        day=1,
        teacher_id=school["wanjiru"].id,
        subject_id=school["maths"].id,
        stream_id=school["east"].id,
        time_slot_id=slot.id,
    )
    db_session.add(lesson)
    db_session.commit()

    with pytest.raises(HasDependentsError) as excinfo:
        catalog.delete(slot.id)
    assert excinfo.value.details["dependent_count"] == 1

    db_session.delete(lesson)
    db_session.commit()

    catalog.delete(slot.id)
    assert [item.name for item in catalog.list()] == ["Period 2", "Period 3"]


def test_restricting_foreign_key_blocks_delete_missed_by_count(db_session, school, monkeypatch):
    catalog = TimeSlotCatalog(db_session)
    slot = school["period_1"]
    db_session.add(
        Lesson(
            name="Algebra",
            day=1,
            teacher_id=school["wanjiru"].id,
            subject_id=school["maths"].id,
            stream_id=school["east"].id,
            time_slot_id=slot.id,
        )
    )
    db_session.commit()

    # The lesson lands after the dependent count was taken.
    real_count = TimeSlotCatalog.dependent_count
    calls = []

    def stale_count(self, slot_id):
        calls.append(slot_id)
        return 0 if len(calls) == 1 else real_count(self, slot_id)

    monkeypatch.setattr(TimeSlotCatalog, "dependent_count", stale_count)

    with pytest.raises(HasDependentsError) as excinfo:
        catalog.delete(slot.id)

    assert excinfo.value.details["dependent_count"] == 1
    assert db_session.get(TimeSlot, slot.id) is not None
    assert db_session.query(Lesson).filter(Lesson.time_slot_id == slot.id).count() == 1
