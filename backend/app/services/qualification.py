from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.academics import teacher_subjects


def is_qualified(db: Session, teacher_id: str, subject_id: str) -> bool:
    """True when the subject is in the teacher's configured subject set."""
    statement = select(teacher_subjects.c.teacher_id).where(
        teacher_subjects.c.teacher_id == teacher_id,
        teacher_subjects.c.subject_id == subject_id,
    )
    return db.execute(statement.limit(1)).first() is not None
