from fastapi import APIRouter, Depends, HTTPException
from app.database.supabase_client import get_supabase
from app.modules.cover.schemas import CoverCreate, CoverUpdate, CoverReorder
from app.modules.cover.service import CoverService
from app.core.dependencies import require_route_access
from supabase import Client
from typing import Dict, Optional

router = APIRouter(prefix="/cover", tags=["cover"])


def get_cover_service(supabase: Client = Depends(get_supabase)) -> CoverService:
    return CoverService(supabase)


@router.get("")
async def list_cover(
    user_data: Dict = Depends(require_route_access("/cover")),
    service: CoverService = Depends(get_cover_service)
):
    """Cover entries in display order"""
    return service.list_items()


@router.post("", status_code=201)
async def create_cover(
    data: CoverCreate,
    user_data: Dict = Depends(require_route_access("/cover")),
    service: CoverService = Depends(get_cover_service)
):
    """Append a product to the cover"""
    return service.create(data)


@router.put("")
async def update_cover(
    data: CoverUpdate,
    user_data: Dict = Depends(require_route_access("/cover")),
    service: CoverService = Depends(get_cover_service)
):
    return service.update(data)


@router.delete("")
async def delete_cover(
    id: Optional[str] = None,
    user_data: Dict = Depends(require_route_access("/cover")),
    service: CoverService = Depends(get_cover_service)
):
    if not id:
        raise HTTPException(status_code=400, detail="Missing id")
    service.delete(id)
    return {"ok": True}


@router.post("/reorder")
async def reorder_cover(
    data: CoverReorder,
    user_data: Dict = Depends(require_route_access("/cover")),
    service: CoverService = Depends(get_cover_service)
):
    return {"ok": True, "items": service.reorder(data.ids)}
