"""
Domain errors raised by the services layer.

Each error carries a stable ``code`` and an HTTP ``status_code`` so the
boundary layer (and the HTTP client) can branch on the kind of failure
without matching on messages.
"""

from typing import Any, Dict, List, Optional, Type


class PlannerError(Exception):
    code = "error"
    status_code = 500

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.code, "message": self.message, "errors": self.errors}


class ValidationFailed(PlannerError):
    code = "validation_failed"
    status_code = 400

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationFailed":
        return cls(message, errors=[{"field": field, "message": message}])


class UnauthorizedError(PlannerError):
    code = "unauthorized"
    status_code = 401

    def __init__(self, message: str = "Authentication required.", errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message, errors)


class NotFoundError(PlannerError):
    code = "not_found"
    status_code = 404


class ConflictError(PlannerError):
    code = "conflict"
    status_code = 409


class OverlapError(ConflictError):
    """A task interval collides with another task of the same account."""

    def __init__(self, message: str, conflicting_task_id: Any = None):
        errors = []
        if conflicting_task_id is not None:
            errors.append({"field": "start", "message": f"overlaps task {conflicting_task_id}"})
        super().__init__(message, errors=errors)
        self.conflicting_task_id = conflicting_task_id


class MigrationFailedError(PlannerError):
    """Importing local data failed; the account created for it was removed."""

    code = "migration_failed"
    status_code = 422


class OperationCancelled(PlannerError):
    code = "cancelled"
    status_code = 499

    def __init__(self, message: str = "Operation cancelled before commit.", errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message, errors)


_BY_CODE: Dict[str, Type[PlannerError]] = {
    cls.code: cls
    for cls in (
        ValidationFailed,
        UnauthorizedError,
        NotFoundError,
        ConflictError,
        MigrationFailedError,
        OperationCancelled,
    )
}


def error_for_code(code: Optional[str]) -> Type[PlannerError]:
    return _BY_CODE.get(code or "", PlannerError)
