"""Custom exception hierarchy for PlacementDesk."""

from __future__ import annotations


class PlacementDeskError(Exception):
    """Base exception for all PlacementDesk errors."""

    error_kind = "PlacementDeskError"


class ValidationError(PlacementDeskError):
    """Raised when input is missing or malformed."""

    error_kind = "ValidationError"

    def __init__(self, message: str, field: str = "") -> None:
        super().__init__(message)
        self.field = field


class NotFoundError(PlacementDeskError):
    """Raised when a referenced entity does not exist."""

    error_kind = "NotFoundError"


class DuplicateError(PlacementDeskError):
    """Raised when a student already applied to a job."""

    error_kind = "DuplicateError"


class IneligibleError(PlacementDeskError):
    """Raised when a student fails global or job-level eligibility."""

    error_kind = "IneligibleError"


class ClosedError(PlacementDeskError):
    """Raised when a job is inactive or past its application deadline."""

    error_kind = "ClosedError"


class UnverifiedError(PlacementDeskError):
    """Raised when an unverified employer tries to post a job."""

    error_kind = "UnverifiedError"


class ConfigurationError(PlacementDeskError):
    """Raised when settings or seed data are invalid or missing."""

    error_kind = "ConfigurationError"
