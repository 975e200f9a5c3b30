"""
Custom domain exceptions for the application.

These exceptions are raised by the service layer and converted to HTTP exceptions
by centralized exception handlers in main.py, maintaining proper separation of concerns.

The authentication module (auth.py) also uses these domain exceptions to remain
HTTP-agnostic, allowing reuse in non-HTTP contexts (init_db, scripts).

Every exception carries a correlation ID so a user-facing message can be
matched to the server log line and the Sentry event.
"""

from core.correlation import generate_correlation_id, get_correlation_id


class DomainException(Exception):
    """
    Base class for all domain exceptions.

    Attributes:
        message: Human-readable error message.
        correlation_id: Unique ID for error tracking (auto-generated if not provided).
    """

    def __init__(self, message: str, correlation_id: str | None = None):
        self.message = message
        # Use request correlation ID if available, otherwise generate new one
        self.correlation_id = (
            correlation_id or get_correlation_id() or generate_correlation_id()
        )
        super().__init__(self.message)


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    pass


class PermissionDeniedException(DomainException):
    """Raised when user lacks required permissions."""

    pass


class ValidationException(DomainException):
    """Raised when input validation fails."""

    pass


class ConflictException(DomainException):
    """Raised when operation conflicts with existing data."""

    pass


class AuthenticationException(DomainException):
    """Raised when authentication fails."""

    pass


class AlreadyExistsException(DomainException):
    """Raised when trying to create a resource that already exists."""

    pass


class BusinessRuleException(DomainException):
    """Raised when a business rule is violated."""

    pass


class BackendUnavailableException(DomainException):
    """Raised when the database cannot be reached or drops the connection.

    The operation that raised it left no committed changes; callers may retry.
    """

    pass


# Specific exceptions for domain entities


class ProfileNotFoundException(NotFoundException):
    """Profile not found."""

    pass


class ReportNotFoundException(NotFoundException):
    """Report not found."""

    pass


class RewardNotFoundException(NotFoundException):
    """Reward not found."""

    pass


class ContentNotFoundException(NotFoundException):
    """Educational content not found or not published."""

    pass


class InvalidCredentialsException(AuthenticationException):
    """Invalid email or password."""

    pass


class InactiveUserException(PermissionDeniedException):
    """Profile is deactivated."""

    pass


class InsufficientPermissionsException(PermissionDeniedException):
    """Principal lacks the role or ownership the operation requires."""

    pass


class MissingLocationException(ValidationException):
    """Report submitted without latitude/longitude."""

    def __init__(self) -> None:
        super().__init__("Location is required to file a report")


class EmptyCommentException(ValidationException):
    """Report update submitted with a blank comment."""

    def __init__(self) -> None:
        super().__init__("Comment cannot be empty")


# Points ledger exceptions


class InsufficientPointsException(BusinessRuleException):
    """Raised when a profile cannot afford a reward."""

    def __init__(self, available: int, required: int) -> None:
        super().__init__(
            f"Insufficient points: {required} required, {available} available"
        )
        self.available = available
        self.required = required


class InactiveRewardException(BusinessRuleException):
    """Raised when redeeming a reward that has been deactivated."""

    def __init__(self, reward_id: int) -> None:
        super().__init__(f"Reward {reward_id} is not active")
        self.reward_id = reward_id


class RewardOutOfStockException(BusinessRuleException):
    """Raised when a reward with limited quantity has none left."""

    def __init__(self, reward_id: int) -> None:
        super().__init__(f"Reward {reward_id} is out of stock")
        self.reward_id = reward_id
