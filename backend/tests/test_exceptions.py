from app.core.exceptions import (
    AppError,
    HasDependentsError,
    InfrastructureError,
    ResourceNotFoundError,
    ScheduleConflictError,
    SlotOverlapError,
)
from app.schemas.conflict import Conflict, ConflictParty


def test_app_error_defaults():
    err = AppError("Generic error")
    assert err.status_code == 500
    assert err.details == {}
    assert err.code == "app_error"


def test_not_found_structure():
    err = ResourceNotFoundError("Lesson", "abc")
    assert err.status_code == 404
    assert err.details == {"resource_type": "Lesson", "resource_id": "abc"}
    assert isinstance(err, AppError)


def test_slot_overlap_names_colliding_slot():
    err = SlotOverlapError({"id": "s1", "name": "Period 1", "start_time": "08:00", "end_time": "08:40"})
    assert err.status_code == 409
    assert "Period 1" in err.message
    assert err.details["colliding_slot"]["id"] == "s1"


def test_schedule_conflict_serializes_conflicts():
    conflict = Conflict(
        conflict_type="teacher_conflict",
        day=1,
        day_name="Monday",
        time_slot_id="slot",
        existing_lesson_id="lesson",
        existing_lesson_name="Algebra",
        subject=ConflictParty(id="sub", name="Mathematics"),
        message="Teacher busy",
    )
    err = ScheduleConflictError([conflict])
    assert err.status_code == 409
    assert err.conflicts == [conflict]
    assert err.details["conflicts"][0]["conflict_type"] == "teacher_conflict"
    assert "Teacher busy" in err.message


def test_dependents_and_infrastructure_codes():
    assert HasDependentsError("TimeSlot", "s1", 3).details["dependent_count"] == 3
    assert InfrastructureError().status_code == 503
