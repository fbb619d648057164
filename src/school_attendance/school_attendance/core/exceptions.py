from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class AlreadyCheckedIn(ValidationError):
    def __init__(self, message: str = "You already have an attendance entry for today"):
        super().__init__(message)


class OutOfRange(ValidationError):
    """Position is outside the school geofence. Carries the computed distance."""

    def __init__(self, distance: float, radius: int):
        self.distance = float(distance)
        self.radius = int(radius)
        super().__init__(f"You are outside the school radius ({self.distance:.0f}m, limit {self.radius}m)")


class TooEarly(ValidationError):
    """Action attempted before the configured hour. Carries the missed threshold."""

    def __init__(self, threshold_hour: int, message: str | None = None):
        self.threshold_hour = int(threshold_hour)
        super().__init__(message or f"Not open yet, available from {self.threshold_hour:02d}:00")


class NotEligibleForCheckout(ValidationError):
    def __init__(self, message: str = "There is no open check-in to close today"):
        super().__init__(message)


class DuplicateTask(ValidationError):
    def __init__(self, role: str):
        self.role = role
        super().__init__(f"Task '{role}' has already been reported today")


class InvalidTimeWindow(ValidationError):
    def __init__(self, message: str = "Invalid time window: start hour < check-out hour < end hour is required"):
        super().__init__(message)


class StoreUnavailable(Exception):
    """Storage failure. Kept apart from DomainError so callers can tell a rule
    rejection from an outage."""
