from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from threading import RLock

from sqlalchemy import text
from sqlalchemy.orm import Session

from app.core.config import get_settings

_process_lock = RLock()


@contextmanager
def scheduling_lock(db: Session) -> Iterator[None]:
    """Serialize check-then-write sections of the scheduling engine.

    On PostgreSQL a transaction-scoped advisory lock is taken, so it is released
    by the caller's commit or rollback. Other dialects fall back to a process-wide
    lock held for the duration of the block; callers must commit inside it.
    """
    if db.get_bind().dialect.name == "postgresql":
        db.execute(text("SELECT pg_advisory_xact_lock(:key)"), {"key": get_settings().scheduling_lock_key})
        yield
        return
    with _process_lock:
        yield
