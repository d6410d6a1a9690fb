"""
Page guard: decides, for every browser navigation, whether the request goes
through or is redirected to the login page or to the user's default route.
"""

import logging
import uuid
from typing import Optional, Tuple
from urllib.parse import urlencode

from fastapi import HTTPException
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response

from app.config.acl_config import LOGIN_ROUTE
from app.core.acl import get_default_route, has_access, is_public_route
from app.core.dependencies import resolve_user_role
from app.core.session import ACCESS_TOKEN_COOKIE, clear_session_cookies
from app.database.supabase_client import SupabaseClient
from app.modules.auth.service import AuthService

logger = logging.getLogger(__name__)

AUTH_PAGES = ("/login", "/register")

# Paths the guard never looks at: API, docs, probes and static assets
EXCLUDED_PREFIXES = ("/api", "/_next", "/static", "/docs", "/redoc", "/openapi.json", "/health", "/ready")
EXCLUDED_SUFFIXES = (".ico", ".svg", ".png", ".jpg", ".jpeg", ".webp", ".css", ".js", ".map")


def is_guarded_path(path: str) -> bool:
    if any(path == p or path.startswith(p + "/") for p in EXCLUDED_PREFIXES):
        return False
    return not path.lower().endswith(EXCLUDED_SUFFIXES)


def login_redirect(pathname: str) -> str:
    return f"{LOGIN_ROUTE}?{urlencode({'redirect': pathname})}"


def resolve_guard_redirect(
    pathname: str,
    has_session: bool,
    role: Optional[str],
    session_error: bool = False,
) -> Optional[str]:
    """
    Where to send a navigation request, or None to let it through.

    - broken session: protected pages go to login, public pages pass
    - signed-in user with a role on login/register: default route
    - protected page without session: login, remembering the page
    - session without access to the page: default route, or login when
      the user has no navigation role
    """
    is_public = is_public_route(pathname)

    if session_error:
        return None if is_public else login_redirect(pathname)

    if is_public and pathname in AUTH_PAGES and has_session and role:
        return get_default_route(role)

    if not is_public and not has_session:
        return login_redirect(pathname)

    if has_session and not has_access(role, pathname):
        return get_default_route(role) if role else LOGIN_ROUTE

    return None


def _resolve_session(token: str) -> Tuple[dict, Optional[str]]:
    supabase = SupabaseClient.get_service_client()
    user_data = AuthService(supabase).get_current_user(token)
    return user_data, resolve_user_role(user_data["id"], supabase)


class PageGuardMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http" or not is_guarded_path(scope["path"]):
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        pathname = scope["path"]
        request_id = uuid.uuid4().hex[:6]
        logger.debug(f"[guard] {request_id} start {request.method} {pathname}")

        token = request.cookies.get(ACCESS_TOKEN_COOKIE)
        user_data, role, session_error = None, None, False

        try:
            if token:
                try:
                    user_data, role = await run_in_threadpool(_resolve_session, token)
                except HTTPException as e:
                    logger.info(f"[guard] {request_id} session rejected: {e.detail}")
                    session_error = True
            redirect_to = resolve_guard_redirect(pathname, user_data is not None, role, session_error)
        except Exception as e:
            logger.error(f"[guard] {request_id} unexpected error: {e}")
            redirect_to = None if is_public_route(pathname) else login_redirect(pathname)

        if redirect_to:
            logger.info(f"[guard] {request_id} redirect {pathname} -> {redirect_to} (role={role})")
            response = RedirectResponse(redirect_to, status_code=307)
            if session_error:
                clear_session_cookies(response)
            await response(scope, receive, send)
            return

        logger.debug(f"[guard] {request_id} pass-through {pathname}")
        if not session_error:
            await self.app(scope, receive, send)
            return

        # Public page reached with a broken session: let it through but drop the cookies
        cleared = Response()
        clear_session_cookies(cleared)
        cookie_headers = [(k, v) for k, v in cleared.raw_headers if k == b"set-cookie"]

        async def send_clearing_cookies(message):
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                message["headers"] = list(message["headers"]) + cookie_headers
            await send(message)

        await self.app(scope, receive, send_clearing_cookies)
