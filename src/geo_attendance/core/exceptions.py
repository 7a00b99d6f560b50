from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    def __init__(self, message: str, *, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class InvalidCoordinates(ValidationError):
    """Latitude/longitude outside the valid range."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class AlreadyCheckedIn(DomainError):
    """The user already has an open session."""


class NoActiveSession(DomainError):
    """Check-out attempted without an open session."""


class NoGeofenceConfigured(DomainError):
    """No active zone to validate a check-in against."""


class OutsideGeofence(DomainError):
    """Check-in position is farther from the nearest zone than its radius."""

    def __init__(self, *, distance_meters: float, allowed_radius: float, zone_name: str):
        super().__init__(
            f"You are {distance_meters}m from {zone_name}. Maximum allowed distance is {allowed_radius}m."
        )
        self.distance_meters = distance_meters
        self.allowed_radius = allowed_radius
        self.zone_name = zone_name


class StorageUnavailable(Exception):
    """Infrastructure failure talking to the store. Not retried here."""
