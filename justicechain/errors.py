"""Error taxonomy for justicechain workflow operations.

Every error carries the HTTP status code the API layer reports for it, so
routers can translate without a lookup table.
"""

from __future__ import annotations


class WorkflowError(Exception):
    """Base class for expected, user-visible failures."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(WorkflowError):
    """Malformed input, rejected before any mutation."""

    status_code = 400


class AuthorizationError(WorkflowError):
    """Role or ownership mismatch."""

    status_code = 403


class NotFoundError(WorkflowError):
    """Referenced case, evidence or user does not exist."""

    status_code = 404


class ConflictError(WorkflowError):
    """The record changed underneath us or is in the wrong state."""

    status_code = 409


class InvalidTransition(ConflictError):
    """Action not allowed from the case's current status."""

    def __init__(self, action: str, status: str):
        super().__init__(f"Cannot {action.replace('_', ' ')} while the case is {status}")
        self.action = action
        self.status = status


class ConfigurationError(WorkflowError):
    """A prerequisite setting or linkage is missing."""

    status_code = 400


class DependencyError(WorkflowError):
    """The pinning service or ledger was unreachable or rejected the call."""

    status_code = 502
