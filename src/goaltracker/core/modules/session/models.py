"""Session management models."""

import secrets
from datetime import datetime
from typing import NewType

from pydantic import Field, PrivateAttr

from goaltracker.core.db import MongoModel
from goaltracker.core.modules.session.csrf import generate_csrf_token, verify_csrf_token
from goaltracker.core.modules.user.models import SessionUser
from goaltracker.utils import is_local_path, now

SessionToken = NewType("SessionToken", str)


def new_session_token() -> SessionToken:
    return SessionToken(secrets.token_urlsafe(32))


def new_csrf_secret() -> str:
    return secrets.token_urlsafe(32)


class Session(MongoModel):
    """Server-side browser session.

    Indexed on token - unique, expires_at (TTL). The browser only ever sees
    the token, signed, in the session cookie.
    """

    token: SessionToken = Field(default_factory=new_session_token)
    user: SessionUser | None = None
    return_to: str | None = None
    csrf_secret: str = Field(default_factory=new_csrf_secret)
    created_at: datetime = Field(default_factory=now)
    expires_at: datetime = Field(default_factory=now)

    _modified: bool = PrivateAttr(default=False)
    _destroyed: bool = PrivateAttr(default=False)

    @property
    def is_modified(self) -> bool:
        return self._modified

    @property
    def is_destroyed(self) -> bool:
        return self._destroyed

    def login(self, user: SessionUser) -> None:
        """Attach the principal and rotate the token and CSRF secret."""
        self.user = user
        self.token = new_session_token()
        self.csrf_secret = new_csrf_secret()
        self._modified = True

    def destroy(self) -> None:
        self.user = None
        self.return_to = None
        self._destroyed = True

    def set_return_to(self, path: str) -> None:
        if is_local_path(path):
            self.return_to = path
            self._modified = True

    def pop_return_to(self) -> str | None:
        """Take the saved return path, clearing it."""
        path, self.return_to = self.return_to, None
        if path is not None:
            self._modified = True
        return path

    def issue_csrf_token(self) -> str:
        # A fresh session has to be stored for the token to verify later
        self._modified = True
        return generate_csrf_token(self.csrf_secret)

    def check_csrf_token(self, token: str) -> bool:
        return verify_csrf_token(self.csrf_secret, token)
