from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.activity_log import ActivityLog
from app.models.user import User


def log_activity(
    db: Session,
    *,
    user: User | None,
    action: str,
    entity_type: str,
    entity_id: str,
    summary: str | None = None,
    details: dict | None = None,
) -> ActivityLog:
    """Stage an audit record in the caller's transaction.

    Nothing is flushed here: the record is committed or rolled back together
    with the change it describes.
    """
    record = ActivityLog(
        actor_id=user.id if user is not None else None,
        actor_role=user.role.value if user is not None else None,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        summary=summary or f"{action} {entity_type} {entity_id}",
        details=details or {},
    )
    db.add(record)
    return record


def recent_activity(
    db: Session,
    *,
    entity_type: str | None = None,
    entity_id: str | None = None,
    actor_id: str | None = None,
    limit: int = 200,
) -> list[ActivityLog]:
    statement = select(ActivityLog)
    if entity_type is not None:
        statement = statement.where(ActivityLog.entity_type == entity_type)
    if entity_id is not None:
        statement = statement.where(ActivityLog.entity_id == entity_id)
    if actor_id is not None:
        statement = statement.where(ActivityLog.actor_id == actor_id)
    statement = statement.order_by(ActivityLog.created_at.desc(), ActivityLog.id).limit(limit)
    return list(db.execute(statement).scalars())
