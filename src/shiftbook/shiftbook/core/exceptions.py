class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidTimeRange(ValidationError):
    """Raised when a shift ends at or before its start."""


class AuthorizationError(DomainError):
    """Raised when an actor lacks permission for an action."""


class StateConflict(DomainError):
    """Raised when the stored state does not allow the requested transition."""


class InvalidTransition(StateConflict):
    """Raised when a record is not in the state the transition starts from."""


class AlreadyClockedIn(StateConflict):
    pass


class NotClockedIn(StateConflict):
    pass


class TransportError(DomainError):
    """Raised when the underlying data backend cannot be reached or fails."""
