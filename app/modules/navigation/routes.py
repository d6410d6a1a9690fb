from fastapi import APIRouter, Depends, Request
from app.database.supabase_client import get_supabase
from app.modules.navigation.schemas import NavigationResponse
from app.modules.navigation.service import build_navigation
from app.core.dependencies import get_current_user_id, resolve_user_role, _get_request_cache
from supabase import Client
from typing import Dict, Optional

router = APIRouter(prefix="/navigation", tags=["navigation"])


@router.get("", response_model=NavigationResponse)
async def get_navigation(
    request: Request,
    path: Optional[str] = None,
    user_data: Dict = Depends(get_current_user_id),
    supabase: Client = Depends(get_supabase)
):
    """Sidebar entries for the session user; `path` marks the active entry"""
    role = resolve_user_role(user_data["id"], supabase, _get_request_cache(request))
    return build_navigation(role, path)
