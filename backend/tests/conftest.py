import os

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app.api.deps import get_db
from app.db.base import Base
from app.db.session import build_engine
from app.main import app
from app.models.academics import Grade, Stream, Subject, Teacher
from app.models.time_slot import TimeSlot


@pytest.fixture()
def engine():
    # Fresh in-memory database with foreign keys enforced, like production.
    test_engine = build_engine("sqlite+pysqlite://")
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_factory):
    app.state.settings_cache.invalidate()

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    app.state.settings_cache.invalidate()


@pytest.fixture()
def school(db_session):
    """Two streams, three subjects, two teachers and three consecutive periods."""
    grade = Grade(name="Grade 7", level=7)
    maths = Subject(name="Mathematics", code="MAT")
    english = Subject(name="English", code="ENG")
    science = Subject(name="Science", code="SCI")
    db_session.add_all([grade, maths, english, science])
    db_session.flush()

    east = Stream(name="East", grade_id=grade.id)
    west = Stream(name="West", grade_id=grade.id)
    wanjiru = Teacher(first_name="Grace", last_name="Wanjiru", email="grace@example.com", subjects=[maths, science])
    otieno = Teacher(first_name="Peter", last_name="Otieno", email="peter@example.com", subjects=[english, maths])
    period_1 = TimeSlot(name="Period 1", start_minutes=8 * 60, end_minutes=8 * 60 + 40)
    period_2 = TimeSlot(name="Period 2", start_minutes=8 * 60 + 40, end_minutes=9 * 60 + 20)
    period_3 = TimeSlot(name="Period 3", start_minutes=9 * 60 + 30, end_minutes=10 * 60 + 10)
    db_session.add_all([east, west, wanjiru, otieno, period_1, period_2, period_3])
    db_session.commit()

    return {
        "grade": grade,
        "east": east,
        "west": west,
        "maths": maths,
        "english": english,
        "science": science,
        "wanjiru": wanjiru,
        "otieno": otieno,
        "period_1": period_1,
        "period_2": period_2,
        "period_3": period_3,
    }
