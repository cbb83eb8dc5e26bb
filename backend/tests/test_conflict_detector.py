from app.models.lesson import Lesson
from app.services.conflict_service import ConflictDetector


def add_lesson(db_session, school, *, teacher="wanjiru", subject="maths", stream="east", slot="period_1", day=1):
    lesson = Lesson(
        name=f"{school[subject].name} {school[stream].name}",
        day=day,
        teacher_id=school[teacher].id,
        subject_id=school[subject].id,
        stream_id=school[stream].id,
        time_slot_id=school[slot].id,
    )
    db_session.add(lesson)
    db_session.commit()
    return lesson


def test_no_conflicts_on_free_tuple(db_session, school):
    add_lesson(db_session, school)
    detector = ConflictDetector(db_session)

    assert detector.detect(school["wanjiru"].id, school["east"].id, school["period_2"].id, 1) == []
    assert detector.detect(school["wanjiru"].id, school["east"].id, school["period_1"].id, 2) == []


def test_teacher_conflict_reports_subject_and_stream(db_session, school):
    existing = add_lesson(db_session, school)

    conflicts = ConflictDetector(db_session).detect(
        school["wanjiru"].id, school["west"].id, school["period_1"].id, 1
    )

    assert len(conflicts) == 1
    conflict = conflicts[0]
    assert conflict.conflict_type == "teacher_conflict"
    assert conflict.existing_lesson_id == existing.id
    assert conflict.subject.name == "Mathematics"
    assert conflict.stream.name == "East"
    assert conflict.grade.name == "Grade 7"
    assert conflict.day_name == "Monday"
    assert "Grace Wanjiru" in conflict.message


def test_stream_conflict_reports_subject_and_teacher(db_session, school):
    add_lesson(db_session, school)

    conflicts = ConflictDetector(db_session).detect(
        school["otieno"].id, school["east"].id, school["period_1"].id, 1
    )

    assert [item.conflict_type for item in conflicts] == ["stream_conflict"]
    assert conflicts[0].teacher.name == "Grace Wanjiru"
    assert conflicts[0].subject.name == "Mathematics"


def test_exact_duplicate_reports_both_conflicts(db_session, school):
    add_lesson(db_session, school)

    conflicts = ConflictDetector(db_session).detect(
        school["wanjiru"].id, school["east"].id, school["period_1"].id, 1
    )

    assert {item.conflict_type for item in conflicts} == {"teacher_conflict", "stream_conflict"}


def test_excluded_lesson_does_not_conflict_with_itself(db_session, school):
    existing = add_lesson(db_session, school)

    conflicts = ConflictDetector(db_session).detect(
        school["wanjiru"].id,
        school["east"].id,
        school["period_1"].id,
        1,
        exclude_lesson_id=existing.id,
    )

    assert conflicts == []
