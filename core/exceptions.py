"""
Typed errors raised by the workflow services.

Each error carries a stable ``code`` that the error handling middleware maps
to an HTTP status. None of them are retried: they are deterministic outcomes
of business rule evaluation.
"""

from typing import Any, Optional


class WorkflowError(Exception):
    """Base class for business rule failures."""

    code = "WORKFLOW_ERROR"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.field:
            data["field"] = self.field
        return data


class NotFoundError(WorkflowError):
    """Referenced entity does not exist."""

    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: Any = None):
        message = f"{entity} not found"
        if entity_id is not None:
            message = f"{entity} {entity_id} not found"
        super().__init__(message)
        self.entity = entity
        self.entity_id = entity_id


class ConflictError(WorkflowError):
    """A uniqueness or one-to-one invariant would be violated."""

    code = "CONFLICT"


class AlreadyProcessedError(WorkflowError):
    """A terminal transition was attempted on an already reviewed entity."""

    code = "ALREADY_PROCESSED"

    def __init__(self, entity: str, current_status: Any):
        status_value = getattr(current_status, "value", current_status)
        super().__init__(
            f"{entity} has already been processed. Current status: {status_value}"
        )
        self.entity = entity
        self.current_status = current_status


class PreconditionFailedError(WorkflowError):
    """A cross-entity gating condition is not met."""

    code = "PRECONDITION_FAILED"


class ValidationError(WorkflowError):
    """A field required by the transition is missing or blank."""

    code = "VALIDATION_ERROR"


class UnauthorizedError(WorkflowError):
    """Caller does not own the target entity or lacks the required role."""

    code = "UNAUTHORIZED"


def is_blank(value: Optional[str]) -> bool:
    """True for None, empty or whitespace-only strings."""
    return value is None or not value.strip()
