"""Domain errors raised by the permit lifecycle and identity services.

Routers translate these to HTTP responses; none of them is retried internally.
"""


class PermitFlowError(Exception):
    """Base class; carries a user-presentable message."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(PermitFlowError):
    """Input is malformed or logically inconsistent (e.g. return before departure)."""


class NotFoundError(PermitFlowError):
    """A referenced user or permit id does not resolve."""


class ConflictError(PermitFlowError):
    """Uniqueness violation, or a decision on a permit that is already decided."""


class AuthenticationError(PermitFlowError):
    """Credentials or session token rejected. Never says which part was wrong."""

    def __init__(self, message: str = "Invalid username or password.") -> None:
        super().__init__(message)


class AuthorizationError(PermitFlowError):
    """Authenticated, but the role or ownership does not allow the operation."""


class InfrastructureError(PermitFlowError):
    """The store could not be reached while producing a result (e.g. report export)."""
