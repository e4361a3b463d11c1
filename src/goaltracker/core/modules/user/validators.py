from goaltracker.errors import ValidationError
from goaltracker.utils import is_email

MIN_PASSWORD_LENGTH = 8


def validate_registration(email: str, display_name: str, password: str) -> tuple[str, str]:
    """Validate registration input and return the normalized email and display name.

    Requirements:
    - A well-formed email address
    - A non-blank display name
    - A password of at least 8 characters

    Raises:
        ValidationError: With one message per offending field
    """
    email = email.strip().lower()
    display_name = display_name.strip()
    errors: dict[str, str] = {}

    if not is_email(email):
        errors["email"] = "Enter a valid email"
    if not display_name:
        errors["display_name"] = "Display name required"
    if len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"

    if errors:
        raise ValidationError(errors=errors)
    return email, display_name


def validate_login(email: str, password: str) -> str:
    """Validate login input and return the normalized email."""
    email = email.strip().lower()
    errors: dict[str, str] = {}

    if not is_email(email):
        errors["email"] = "Valid email required"
    if not password:
        errors["password"] = "Password required"

    if errors:
        raise ValidationError(errors=errors)
    return email
