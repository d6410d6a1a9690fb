from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase, get_admin_supabase
from app.modules.users.schemas import UserCreate, UserUpdate, ToggleStatusRequest, UserResetPasswordRequest
from app.modules.users.service import UserService
from app.core.dependencies import require_route_access
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/users", tags=["users"])


def get_user_service(
    supabase: Client = Depends(get_supabase),
    admin: Client = Depends(get_admin_supabase)
) -> UserService:
    return UserService(supabase, admin)


@router.get("")
async def list_users(
    user_data: Dict = Depends(require_route_access("/users")),
    service: UserService = Depends(get_user_service)
):
    """All auth users with their profile"""
    return service.list_users()


@router.post("", status_code=201)
async def create_user(
    data: UserCreate,
    user_data: Dict = Depends(require_route_access("/users")),
    service: UserService = Depends(get_user_service)
):
    """Create a user and send the invite e-mail"""
    return service.create_user(data)


@router.put("")
async def update_user(
    data: UserUpdate,
    user_data: Dict = Depends(require_route_access("/users")),
    service: UserService = Depends(get_user_service)
):
    return service.update_user(data)


@router.delete("")
async def delete_user(
    userId: str = "",
    user_data: Dict = Depends(require_route_access("/users")),
    service: UserService = Depends(get_user_service)
):
    service.delete_user(userId)
    return {"ok": True}


@router.post("/toggle-status")
async def toggle_status(
    data: ToggleStatusRequest,
    user_data: Dict = Depends(require_route_access("/users")),
    service: UserService = Depends(get_user_service)
):
    """Ban or unban a user"""
    return service.set_banned(data.user_id, data.banned)


@router.post("/reset-password")
async def reset_password(
    data: UserResetPasswordRequest,
    user_data: Dict = Depends(require_route_access("/users")),
    service: UserService = Depends(get_user_service)
):
    service.send_password_reset(data.email)
    return {"ok": True}
