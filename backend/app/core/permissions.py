"""Role based permission evaluation.

Permissions are declared per role as ``(resource, action, conditions)``.
A condition compares a field of the resource context supplied by the caller
with either a literal value or an attribute of the acting principal
(``SelfRef``), e.g. "the lesson's teacher_id equals my teacher_id".
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from app.models.user import UserRole

WILDCARD = "*"


class Action(str, Enum):
    create = "create"
    read = "read"
    update = "update"
    delete = "delete"


class Comparator(str, Enum):
    eq = "eq"
    ne = "ne"
    in_ = "in"


@dataclass(frozen=True)
class SelfRef:
    """Operand resolved against the acting principal's attributes."""

    attribute: str


@dataclass(frozen=True)
class Value:
    """Literal operand."""

    value: Any


@dataclass(frozen=True)
class Principal:
    user_id: str
    role: UserRole
    attributes: Mapping[str, Any] = field(default_factory=dict)

    def resolve(self, attribute: str) -> Any:
        if attribute == "user_id":
            return self.user_id
        return self.attributes.get(attribute)


@dataclass(frozen=True)
class Condition:
    field: str
    comparator: Comparator
    operand: SelfRef | Value

    def evaluate(self, context: Mapping[str, Any], principal: Principal) -> bool:
        if self.field not in context:
            return False
        actual = context[self.field]
        if isinstance(self.operand, SelfRef):
            expected = principal.resolve(self.operand.attribute)
            # An unresolved self reference never matches.
            if expected is None:
                return False
        else:
            expected = self.operand.value

        if self.comparator == Comparator.eq:
            return actual == expected
        if self.comparator == Comparator.ne:
            return actual != expected
        if self.comparator == Comparator.in_:
            return actual in expected
        raise ValueError(f"Unsupported comparator: {self.comparator}")


@dataclass(frozen=True)
class Permission:
    resource: str
    action: Action
    conditions: tuple[Condition, ...] = ()

    def matches(self, resource: str, action: Action) -> bool:
        return self.action == action and self.resource in {resource, WILDCARD}


def _own(field_name: str, attribute: str | None = None) -> tuple[Condition, ...]:
    return (Condition(field_name, Comparator.eq, SelfRef(attribute or field_name)),)


class Resource:
    LESSONS = "lessons"
    TIMESLOTS = "timeslots"
    SUBJECTS = "subjects"
    GRADES = "grades"
    STREAMS = "streams"
    TEACHERS = "teachers"
    SETTINGS = "settings"


ROLE_PERMISSIONS: dict[UserRole, tuple[Permission, ...]] = {
    UserRole.admin: tuple(Permission(WILDCARD, action) for action in Action),
    UserRole.teacher: (
        Permission(Resource.LESSONS, Action.create, _own("teacher_id")),
        Permission(Resource.LESSONS, Action.read),
        Permission(Resource.LESSONS, Action.update, _own("teacher_id")),
        Permission(Resource.LESSONS, Action.delete, _own("teacher_id")),
        Permission(Resource.TIMESLOTS, Action.read),
        Permission(Resource.SUBJECTS, Action.read),
        Permission(Resource.GRADES, Action.read),
        Permission(Resource.STREAMS, Action.read),
        Permission(Resource.TEACHERS, Action.read),
    ),
    UserRole.student: (
        Permission(Resource.LESSONS, Action.read, _own("stream_id")),
        Permission(Resource.TIMESLOTS, Action.read),
        Permission(Resource.SUBJECTS, Action.read),
        Permission(Resource.STREAMS, Action.read, _own("stream_id")),
    ),
    UserRole.staff: (
        Permission(Resource.LESSONS, Action.read),
        Permission(Resource.TIMESLOTS, Action.read),
        Permission(Resource.SUBJECTS, Action.read),
        Permission(Resource.GRADES, Action.read),
        Permission(Resource.STREAMS, Action.read),
        Permission(Resource.TEACHERS, Action.read),
    ),
}


def has_permission(
    principal: Principal,
    resource: str,
    action: Action,
    context: Mapping[str, Any] | None = None,
) -> bool:
    candidates = [item for item in ROLE_PERMISSIONS.get(principal.role, ()) if item.matches(resource, action)]
    if not candidates:
        return False
    if context is None:
        return any(not item.conditions for item in candidates)
    return any(
        all(condition.evaluate(context, principal) for condition in item.conditions)
        for item in candidates
    )


def can_access_resource(role: UserRole, resource: str) -> bool:
    return any(item.resource in {resource, WILDCARD} for item in ROLE_PERMISSIONS.get(role, ()))
