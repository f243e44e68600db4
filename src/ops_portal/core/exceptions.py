from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..backend.error_channel import ErrorEvent


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(ValidationError):
    """Raised when a referenced record does not exist."""


class InvalidTransitionError(ValidationError):
    """Raised when a permit action is not allowed from its current status."""


class PreconditionError(DomainError):
    """Raised when a required precondition (e.g. attendance) is not met."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class WriteConflictError(DomainError):
    """Raised inside a write when the stored status no longer matches the expected one."""


class WriteError(Exception):
    """Outcome of a failed backend write.

    Never raised to the caller of a service command; it travels inside a
    ``WriteResult`` and is broadcast on the error channel.
    """

    def __init__(self, event: "ErrorEvent"):
        self.event = event
        super().__init__(f"{event.operation.value} failed on {event.path}: {event.reason}")
