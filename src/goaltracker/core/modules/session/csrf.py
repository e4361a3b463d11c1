"""Stateless CSRF tokens derived from a per-session secret.

A token is `<salt>.<mac>` where mac = HMAC-SHA256(secret, salt). Any number
of tokens can be issued for one secret and all of them stay valid until the
secret changes, which happens only when the session is destroyed or rotated.
"""

import base64
import hashlib
import hmac
import secrets

SALT_BYTES = 8


def _mac(secret: str, salt: str) -> str:
    digest = hmac.new(secret.encode("utf-8"), salt.encode("utf-8"), hashlib.sha256).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


def generate_csrf_token(secret: str) -> str:
    salt = secrets.token_urlsafe(SALT_BYTES)
    return f"{salt}.{_mac(secret, salt)}"


def verify_csrf_token(secret: str, token: str) -> bool:
    salt, sep, mac = token.partition(".")
    if not sep or not salt or not mac:
        return False
    return hmac.compare_digest(mac, _mac(secret, salt))
