from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested resource is not found.

    Also raised when the resource exists but belongs to another user, so the
    two cases cannot be told apart.
    """

    def __init__(self, message: str = "Not found") -> None:
        super().__init__(message)


class AuthenticationError(UserError):
    """Raised when credentials are rejected."""

    def __init__(self, message: str = "Invalid email or password") -> None:
        super().__init__(message)


class LoginRequiredError(UserError):
    """Raised when a page requires a logged-in user and the session has none."""

    def __init__(self, message: str = "Please log in to continue") -> None:
        super().__init__(message)


class GuestOnlyError(UserError):
    """Raised when a logged-in user requests a guest-only page (login, register)."""

    def __init__(self, message: str = "Already logged in") -> None:
        super().__init__(message)


class CsrfError(UserError):
    """Raised when a state-changing request carries no valid CSRF token."""

    def __init__(
        self, message: str = "Your form session has expired or the CSRF token was invalid. Please try again."
    ) -> None:
        super().__init__(message)


class ValidationError(UserError):
    """Raised when user input fails validation.

    `errors` maps form field names to messages.
    """

    def __init__(self, message: str = "Please correct the errors below", errors: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or {}

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(message, {field: message})
