from __future__ import annotations

import logging

from sqlalchemy import inspect
from sqlalchemy.engine import Connection

from app.db.base import Base
from app.db.session import engine
import app.models  # noqa: F401

logger = logging.getLogger(__name__)

REQUIRED_TABLES = (
    "users",
    "subjects",
    "grades",
    "streams",
    "teachers",
    "teacher_subjects",
    "time_slots",
    "lessons",
    "system_settings",
    "activity_logs",
)


def missing_tables(connection: Connection) -> list[str]:
    existing = set(inspect(connection).get_table_names())
    return [name for name in REQUIRED_TABLES if name not in existing]


def ensure_schema(*, auto_create: bool) -> None:
    """Create missing tables in development setups, otherwise just report them."""
    if auto_create:
        Base.metadata.create_all(bind=engine)
        return
    with engine.connect() as connection:
        absent = missing_tables(connection)
    if absent:
        logger.warning(
            "Database schema is missing tables %s. Run `alembic upgrade head` before serving traffic.",
            ", ".join(absent),
        )
