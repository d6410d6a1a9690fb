from fastapi import APIRouter, Depends, File, UploadFile
from app.database.supabase_client import get_supabase
from app.modules.profile.schemas import ProfileUpdate, TokenCreate, TokenResponse, TokenCreatedResponse
from app.modules.profile.service import ProfileService
from app.core.dependencies import require_route_access, get_current_profile
from supabase import Client
from typing import Dict, List

router = APIRouter(prefix="/profile", tags=["profile"])


def get_profile_service(supabase: Client = Depends(get_supabase)) -> ProfileService:
    return ProfileService(supabase)


@router.get("")
async def get_profile(
    user_data: Dict = Depends(require_route_access("/profile")),
    profile: Dict = Depends(get_current_profile)
):
    """Profile of the session user with its login e-mail"""
    return {**profile, "email": user_data.get("email")}


@router.patch("")
async def update_profile(
    data: ProfileUpdate,
    user_data: Dict = Depends(require_route_access("/profile")),
    profile: Dict = Depends(get_current_profile),
    service: ProfileService = Depends(get_profile_service)
):
    return service.update_profile(profile["id"], data)


@router.post("/image")
async def upload_profile_image(
    file: UploadFile = File(...),
    user_data: Dict = Depends(require_route_access("/profile")),
    profile: Dict = Depends(get_current_profile),
    service: ProfileService = Depends(get_profile_service)
):
    """Replace the profile picture"""
    content = await file.read()
    return service.replace_image(profile, file.filename or "image", content, file.content_type)


@router.delete("/image")
async def delete_profile_image(
    user_data: Dict = Depends(require_route_access("/profile")),
    profile: Dict = Depends(get_current_profile),
    service: ProfileService = Depends(get_profile_service)
):
    return service.remove_image(profile)


@router.get("/tokens", response_model=List[TokenResponse])
async def list_tokens(
    profile: Dict = Depends(get_current_profile),
    service: ProfileService = Depends(get_profile_service)
):
    return service.list_tokens(profile["id"])


@router.post("/tokens", response_model=TokenCreatedResponse, status_code=201)
async def create_token(
    data: TokenCreate,
    profile: Dict = Depends(get_current_profile),
    service: ProfileService = Depends(get_profile_service)
):
    """New API token; the value is returned only here"""
    return service.create_token(profile["id"], data.nome)


@router.delete("/tokens/{token_id}")
async def delete_token(
    token_id: str,
    profile: Dict = Depends(get_current_profile),
    service: ProfileService = Depends(get_profile_service)
):
    service.delete_token(profile["id"], token_id)
    return {"success": True}
