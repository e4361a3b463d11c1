"""Server-side session middleware.

The cookie carries only the session token, signed with itsdangerous the same
way Starlette's cookie sessions are. The session itself lives in the session
store and is handed to the request as `request.state.session`.
"""

import structlog
from itsdangerous import BadSignature, TimestampSigner
from starlette.datastructures import MutableHeaders
from starlette.requests import HTTPConnection
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from goaltracker.app import App
from goaltracker.core.modules.session.models import Session, SessionToken

logger = structlog.get_logger(__name__)


class SessionMiddleware:
    def __init__(
        self,
        app: ASGIApp,
        store: App,
        secret_key: str,
        cookie_name: str = "sid",
        max_age: int = 24 * 60 * 60,
        https_only: bool = False,
    ) -> None:
        self.app = app
        self.store = store
        self.signer = TimestampSigner(secret_key)
        self.cookie_name = cookie_name
        self.max_age = max_age
        self.security_flags = "httponly; samesite=lax"
        if https_only:
            self.security_flags += "; secure"

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        connection = HTTPConnection(scope)
        session, is_new = await self._resolve(connection.cookies.get(self.cookie_name))
        scope.setdefault("state", {})["session"] = session

        async def send_wrapper(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                if session.is_destroyed:
                    if not is_new:
                        await self.store.discard_session(session)
                    headers.append("Set-Cookie", self._expired_cookie())
                elif not is_new or session.is_modified:
                    # Every response refreshes the expiry of a stored session
                    await self.store.save_session(session)
                    headers.append("Set-Cookie", self._cookie(session))
            await send(message)

        user_id = str(session.user.id) if session.user is not None else None
        with structlog.contextvars.bound_contextvars(user_id=user_id):
            await self.app(scope, receive, send_wrapper)

    async def _resolve(self, cookie: str | None) -> tuple[Session, bool]:
        """Find the session for a cookie value. Any failure yields a new anonymous session."""
        if cookie:
            try:
                token = self.signer.unsign(cookie, max_age=self.max_age).decode("utf-8")
            except BadSignature:
                logger.debug("session_cookie_rejected")
            else:
                session = await self.store.load_session(SessionToken(token))
                if session is not None:
                    return session, False
        return self.store.new_session(), True

    def _cookie(self, session: Session) -> str:
        value = self.signer.sign(session.token).decode("utf-8")
        return f"{self.cookie_name}={value}; path=/; Max-Age={self.max_age}; {self.security_flags}"

    def _expired_cookie(self) -> str:
        return f"{self.cookie_name}=null; path=/; expires=Thu, 01 Jan 1970 00:00:00 GMT; {self.security_flags}"
