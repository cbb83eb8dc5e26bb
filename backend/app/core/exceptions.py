class AppError(Exception):
    """Base class for all application exceptions."""

    code = "app_error"

    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ResourceNotFoundError(AppError):
    """Raised when a requested resource is not found."""

    code = "not_found"

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} with id {resource_id} not found",
            status_code=404,
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


class InvalidIntervalError(AppError):
    """Raised when a time slot does not start strictly before it ends."""

    code = "invalid_interval"

    def __init__(self, start_time: str, end_time: str):
        super().__init__(
            f"Start time {start_time} must be before end time {end_time}",
            status_code=422,
            details={"start_time": start_time, "end_time": end_time},
        )


class SlotOverlapError(AppError):
    """Raised when a time slot would overlap an existing catalogue entry."""

    code = "slot_overlap"

    def __init__(self, colliding_slot: dict):
        super().__init__(
            (
                f"Time slot overlaps '{colliding_slot['name']}' "
                f"({colliding_slot['start_time']}-{colliding_slot['end_time']})"
            ),
            status_code=409,
            details={"colliding_slot": colliding_slot},
        )


class HasDependentsError(AppError):
    """Raised when deleting a resource that other records still reference."""

    code = "has_dependents"

    def __init__(self, resource_type: str, resource_id: str, dependent_count: int | None = None):
        super().__init__(
            f"{resource_type} with id {resource_id} is still referenced by existing lessons",
            status_code=409,
            details={
                "resource_type": resource_type,
                "resource_id": resource_id,
                "dependent_count": dependent_count,
            },
        )


class ScheduleConflictError(AppError):
    """Raised when a lesson would double-book a teacher and/or a stream."""

    code = "schedule_conflict"

    def __init__(self, conflicts: list):
        self.conflicts = list(conflicts)
        messages = "; ".join(conflict.message for conflict in self.conflicts)
        super().__init__(
            f"Scheduling conflict: {messages}",
            status_code=409,
            details={"conflicts": [conflict.model_dump() for conflict in self.conflicts]},
        )


class UnqualifiedTeacherError(AppError):
    """Raised when a teacher is not assigned to the subject being scheduled."""

    code = "unqualified_teacher"

    def __init__(self, teacher_id: str, subject_id: str):
        super().__init__(
            f"Teacher {teacher_id} is not qualified to teach subject {subject_id}",
            status_code=422,
            details={"teacher_id": teacher_id, "subject_id": subject_id},
        )


class InfrastructureError(AppError):
    """Raised when the storage layer fails for reasons unrelated to the request."""

    code = "infrastructure_error"

    def __init__(self, message: str = "Storage is temporarily unavailable"):
        super().__init__(message, status_code=503)
