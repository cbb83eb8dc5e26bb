from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import (
    HasDependentsError,
    InfrastructureError,
    InvalidIntervalError,
    ResourceNotFoundError,
    SlotOverlapError,
)
from app.models.lesson import Lesson
from app.models.time_slot import TimeSlot, format_minutes
from app.models.user import User
from app.services.audit import log_activity
from app.services.locking import scheduling_lock

logger = logging.getLogger(__name__)


def slots_overlap(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    return start_a < end_b and start_b < end_a


class TimeSlotCatalog:
    """Owns the day-agnostic set of non-overlapping lesson periods."""

    def __init__(self, db: Session, *, actor: User | None = None) -> None:
        self.db = db
        self.actor = actor

    def list(self) -> list[TimeSlot]:
        return list(self.db.execute(select(TimeSlot).order_by(TimeSlot.start_minutes)).scalars())

    def get(self, slot_id: str) -> TimeSlot:
        slot = self.db.get(TimeSlot, slot_id)
        if slot is None:
            raise ResourceNotFoundError("TimeSlot", slot_id)
        return slot

    def find_overlap(self, start_minutes: int, end_minutes: int, *, exclude_id: str | None = None) -> TimeSlot | None:
        statement = select(TimeSlot).where(
            TimeSlot.start_minutes < end_minutes,
            TimeSlot.end_minutes > start_minutes,
        )
        if exclude_id is not None:
            statement = statement.where(TimeSlot.id != exclude_id)
        return self.db.execute(statement.order_by(TimeSlot.start_minutes).limit(1)).scalar_one_or_none()

    def _validate(self, start_minutes: int, end_minutes: int, *, exclude_id: str | None = None) -> None:
        if start_minutes >= end_minutes:
            raise InvalidIntervalError(format_minutes(start_minutes), format_minutes(end_minutes))
        colliding = self.find_overlap(start_minutes, end_minutes, exclude_id=exclude_id)
        if colliding is not None:
            raise SlotOverlapError(colliding.summary())

    def create(self, name: str, start_minutes: int, end_minutes: int) -> TimeSlot:
        with scheduling_lock(self.db):
            try:
                self._validate(start_minutes, end_minutes)
                slot = TimeSlot(name=name, start_minutes=start_minutes, end_minutes=end_minutes)
                self.db.add(slot)
                self.db.flush()
                log_activity(
                    self.db,
                    user=self.actor,
                    action="time_slot.create",
                    entity_type="time_slot",
                    entity_id=slot.id,
                    summary=f"Created time slot {slot.name} ({slot.start_time}-{slot.end_time})",
                    details=slot.summary(),
                )
                self.db.commit()
            except SQLAlchemyError as exc:
                self.db.rollback()
                logger.exception("Failed to create time slot %s", name)
                raise InfrastructureError() from exc
            except Exception:
                self.db.rollback()
                raise
        self.db.refresh(slot)
        logger.info("Created time slot %s (%s-%s)", slot.name, slot.start_time, slot.end_time)
        return slot

    def update(
        self,
        slot_id: str,
        *,
        name: str | None = None,
        start_minutes: int | None = None,
        end_minutes: int | None = None,
    ) -> TimeSlot:
        with scheduling_lock(self.db):
            try:
                slot = self.get(slot_id)
                new_start = slot.start_minutes if start_minutes is None else start_minutes
                new_end = slot.end_minutes if end_minutes is None else end_minutes
                if start_minutes is not None or end_minutes is not None:
                    self._validate(new_start, new_end, exclude_id=slot_id)
                if name is not None:
                    slot.name = name
                slot.start_minutes = new_start
                slot.end_minutes = new_end
                log_activity(
                    self.db,
                    user=self.actor,
                    action="time_slot.update",
                    entity_type="time_slot",
                    entity_id=slot.id,
                    summary=f"Updated time slot {slot.name} ({slot.start_time}-{slot.end_time})",
                    details=slot.summary(),
                )
                self.db.commit()
            except SQLAlchemyError as exc:
                self.db.rollback()
                logger.exception("Failed to update time slot %s", slot_id)
                raise InfrastructureError() from exc
            except Exception:
                self.db.rollback()
                raise
        self.db.refresh(slot)
        return slot

    def dependent_count(self, slot_id: str) -> int:
        return self.db.execute(
            select(func.count()).select_from(Lesson).where(Lesson.time_slot_id == slot_id)
        ).scalar_one()

    def delete(self, slot_id: str) -> None:
        with scheduling_lock(self.db):
            try:
                slot = self.get(slot_id)
                dependents = self.dependent_count(slot_id)
                if dependents:
                    raise HasDependentsError("TimeSlot", slot_id, dependents)
                snapshot = slot.summary()
                self.db.delete(slot)
                log_activity(
                    self.db,
                    user=self.actor,
                    action="time_slot.delete",
                    entity_type="time_slot",
                    entity_id=slot_id,
                    summary=f"Deleted time slot {snapshot['name']}",
                    details=snapshot,
                )
                self.db.commit()
            except IntegrityError as exc:
                # A lesson referencing the slot was committed after the count check.
                self.db.rollback()
                raise HasDependentsError("TimeSlot", slot_id, self.dependent_count(slot_id)) from exc
            except SQLAlchemyError as exc:
                self.db.rollback()
                logger.exception("Failed to delete time slot %s", slot_id)
                raise InfrastructureError() from exc
            except Exception:
                self.db.rollback()
                raise
        logger.info("Deleted time slot %s", slot_id)
