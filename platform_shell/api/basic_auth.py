"""
HTTP Basic auth gate for internal access.

Protects everything except API routes and static assets. Fails open when
BASIC_AUTH_USERNAME / BASIC_AUTH_PASSWORD are not both configured.
"""

import base64
import binascii
import secrets
from typing import Optional, Tuple

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import PlainTextResponse

from platform_shell.config import basic_auth_credentials

PUBLIC_PREFIXES = (
    "/api",
    "/functions",
    "/_next",
    "/favicon.ico",
    "/images",
    "/static",
)

REALM_HEADER = 'Basic realm="NSD Sales Engine", charset="UTF-8"'


def is_public_path(path: str) -> bool:
    return any(path.startswith(p) for p in PUBLIC_PREFIXES)


def validate_credentials(auth_header: Optional[str], expected: Tuple[str, str]) -> bool:
    """Check a Basic Authorization header against (username, password)."""
    if not auth_header or not auth_header.startswith("Basic "):
        return False
    try:
        decoded = base64.b64decode(auth_header[6:], validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return False
    username, _, password = decoded.partition(":")
    user_ok = secrets.compare_digest(username.encode(), expected[0].encode())
    pass_ok = secrets.compare_digest(password.encode(), expected[1].encode())
    return user_ok and pass_ok


class BasicAuthMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request, call_next):
        if is_public_path(request.url.path):
            return await call_next(request)

        expected = basic_auth_credentials()
        if expected is None:
            return await call_next(request)

        if not validate_credentials(request.headers.get("authorization"), expected):
            return PlainTextResponse(
                "Authentication required",
                status_code=401,
                headers={"WWW-Authenticate": REALM_HEADER},
            )
        return await call_next(request)
