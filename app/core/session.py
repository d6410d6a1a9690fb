"""
Cookie-based browser session. The access and refresh tokens issued by
Supabase Auth are kept in two httpOnly cookies; API clients may send the
access token as a Bearer header instead.
"""

from typing import Optional
from starlette.requests import HTTPConnection
from starlette.responses import Response

from app.config import settings

ACCESS_TOKEN_COOKIE = "sb-access-token"
REFRESH_TOKEN_COOKIE = "sb-refresh-token"


def set_session_cookies(response: Response, access_token: str, refresh_token: str) -> None:
    for name, value in ((ACCESS_TOKEN_COOKIE, access_token), (REFRESH_TOKEN_COOKIE, refresh_token)):
        response.set_cookie(
            name,
            value,
            max_age=settings.session_cookie_max_age,
            path="/",
            httponly=True,
            secure=settings.session_cookie_secure or settings.is_production,
            samesite="lax",
        )


def clear_session_cookies(response: Response) -> None:
    response.delete_cookie(ACCESS_TOKEN_COOKIE, path="/")
    response.delete_cookie(REFRESH_TOKEN_COOKIE, path="/")


def get_session_token(connection: HTTPConnection) -> Optional[str]:
    """Access token from the session cookie, else from an Authorization: Bearer header"""
    token = connection.cookies.get(ACCESS_TOKEN_COOKIE)
    if token:
        return token
    auth_header = connection.headers.get("authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[7:] or None
    return None
