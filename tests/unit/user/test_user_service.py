"""Tests for registration and login."""

import pytest

from goaltracker.core.modules.user.validators import validate_login, validate_registration
from goaltracker.errors import AuthenticationError, ValidationError


class TestRegistrationValidation:
    def test_normalizes_email_and_name(self):
        assert validate_registration(" Ada@Example.COM ", " Ada ", "long-enough") == ("ada@example.com", "Ada")

    def test_reports_each_field(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_registration("not-an-email", "", "short")
        assert set(exc_info.value.errors) == {"email", "display_name", "password"}

    def test_login_requires_password(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_login("ada@example.com", "")
        assert set(exc_info.value.errors) == {"password"}


class TestAccounts:
    async def test_register_returns_principal(self, app, database):
        user = await app.register("ada@example.com", "Ada", "s3cret-pass")
        assert user.email == "ada@example.com"
        assert user.display_name == "Ada"

        stored = database.get_collection("users").docs[0]
        assert stored["_id"] == user.id
        assert stored["password_hash"] != "s3cret-pass"

    async def test_duplicate_email_is_a_field_error(self, app):
        await app.register("ada@example.com", "Ada", "s3cret-pass")
        with pytest.raises(ValidationError) as exc_info:
            await app.register("ADA@example.com", "Other Ada", "s3cret-pass")
        assert set(exc_info.value.errors) == {"email"}

    async def test_login_with_correct_password(self, app):
        registered = await app.register("ada@example.com", "Ada", "s3cret-pass")
        assert await app.login("Ada@Example.com", "s3cret-pass") == registered

    async def test_login_with_wrong_password(self, app):
        await app.register("ada@example.com", "Ada", "s3cret-pass")
        with pytest.raises(AuthenticationError):
            await app.login("ada@example.com", "wrong-pass")

    async def test_login_unknown_email(self, app):
        with pytest.raises(AuthenticationError):
            await app.login("nobody@example.com", "s3cret-pass")
