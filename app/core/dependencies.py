"""
Core dependencies for route protection and role checking
"""

from fastapi import Depends, HTTPException, Request, status
from app.database.supabase_client import get_supabase
from app.modules.auth.service import AuthService
from app.core.acl import has_access, is_valid_role
from app.core.session import get_session_token
from supabase import Client
from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)


def _get_request_cache(request: Request) -> Dict[str, Any]:
    """Return request-scoped cache for access data (profile, role)."""
    if not hasattr(request.state, "access_cache"):
        request.state.access_cache = {}
    return request.state.access_cache


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_user_id(
    request: Request,
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Resolve the session user from the session cookie or Bearer JWT"""
    token = get_session_token(request)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Non autenticato")
    return auth_service.get_current_user(token)


def get_user_profile(user_id: str, supabase: Client, cache: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
    """Profile row owned by an auth user. Uses request-scoped cache when provided."""
    if cache is not None and "profile" in cache:
        return cache["profile"]
    result = supabase.table("profile")\
        .select("*")\
        .eq("user_id", user_id)\
        .maybe_single()\
        .execute()
    profile = result.data if result and result.data else None
    if cache is not None:
        cache["profile"] = profile
    return profile


def resolve_user_role(user_id: str, supabase: Client, cache: Optional[Dict[str, Any]] = None) -> Optional[str]:
    """Navigation role of a user; None when the profile is missing or its role grants no navigation"""
    try:
        profile = get_user_profile(user_id, supabase, cache)
    except Exception as e:
        logger.error(f"Error getting user role: {e}")
        return None
    role = profile.get("role") if profile else None
    return role if is_valid_role(role) else None


def get_current_profile(
    request: Request,
    user_data: dict = Depends(get_current_user_id),
    supabase: Client = Depends(get_supabase)
) -> dict:
    """Profile of the session user, 404 when it does not exist"""
    profile = get_user_profile(user_data["id"], supabase, _get_request_cache(request))
    if not profile:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profilo non trovato")
    return profile


def require_route_access(route_path: str):
    """Factory: allow the request only if the user's role may open the given backoffice screen"""
    def check_access(
        request: Request,
        user_data: dict = Depends(get_current_user_id),
        supabase: Client = Depends(get_supabase)
    ) -> dict:
        role = resolve_user_role(user_data["id"], supabase, _get_request_cache(request))
        if not has_access(role, route_path):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Accesso negato"
            )
        return {**user_data, "role": role}
    return check_access


def get_token_profile_id(
    request: Request,
    supabase: Client = Depends(get_supabase)
) -> str:
    """Profile owning the opaque API token sent as Authorization: Bearer <token>"""
    auth_header = request.headers.get("authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token di autorizzazione mancante")
    token = auth_header[7:]
    try:
        result = supabase.table("profile_token")\
            .select("profile_id")\
            .eq("token", token)\
            .maybe_single()\
            .execute()
    except Exception as e:
        logger.warning(f"Profile token lookup failed: {e}")
        result = None
    if not result or not result.data or not result.data.get("profile_id"):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token non valido")
    return result.data["profile_id"]
