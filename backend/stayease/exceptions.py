"""Custom exceptions for StayEase."""
from typing import Optional


class StayEaseError(Exception):
    """Base exception for all StayEase errors."""
    pass


class ConfigurationError(StayEaseError):
    """Raised when configuration is invalid or missing."""
    pass


class NotFoundError(StayEaseError):
    """Raised when a referenced entity does not exist."""

    def __init__(self, entity: str, message: Optional[str] = None):
        self.entity = entity
        super().__init__(message or f"{entity} not found")


class ForbiddenError(StayEaseError):
    """Raised when the caller may not act on an entity."""

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message)


class BookingStateError(StayEaseError):
    """Raised when a booking status transition is not allowed."""
    pass


class InvalidBookingError(StayEaseError):
    """Raised when a booking request does not fit the room it names."""
    pass


class DuplicateUsernameError(StayEaseError):
    """Raised when registering a username that is already taken."""

    def __init__(self, message: str = "Username already exists"):
        super().__init__(message)


class StorageUnavailableError(StayEaseError):
    """Raised when the storage backend fails or cannot be reached."""
    pass
