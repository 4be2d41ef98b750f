class DomainError(Exception):
    """Base exception for business rule violations.

    ``title`` is the short heading shown next to the message in flash/JSON responses.
    """

    title = "Something went wrong"

    def __init__(self, message: str = "", *, title: str | None = None):
        super().__init__(message)
        if title is not None:
            self.title = title


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    title = "Invalid input"


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    title = "Sign in failed"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    title = "Permission denied"


class NotFoundError(DomainError):
    title = "Not found"


class InvalidQRCodeError(ValidationError):
    title = "Invalid QR Code"


class CourseNotFoundError(NotFoundError):
    title = "Course not found"


class AlreadyCheckedInError(DomainError):
    title = "Already checked in"
