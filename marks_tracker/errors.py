class MarksTrackerError(Exception):
    """Base class for marks tracker errors."""


class ValidationError(MarksTrackerError):
    """Raised when submitted marks or entry context are invalid."""

    def __init__(self, message, subject=None, bound=None):
        super().__init__(message)
        self.subject = subject
        self.bound = bound


class PermissionDeniedError(MarksTrackerError):
    """Raised when the caller is not allowed to perform an operation."""
