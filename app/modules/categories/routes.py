import asyncio
from fastapi import APIRouter, Depends, HTTPException
from starlette.concurrency import run_in_threadpool
from app.database.supabase_client import get_supabase
from app.modules.categories.schemas import CategoryCreate, CategoryUpdate, CategoryOption, ExpertOption
from app.modules.categories.service import CategoryService
from app.core.dependencies import require_route_access
from supabase import Client
from typing import Dict, List, Optional

router = APIRouter(tags=["categories"])


def get_category_service(supabase: Client = Depends(get_supabase)) -> CategoryService:
    return CategoryService(supabase)


@router.get("/categories")
async def list_categories(
    user_data: Dict = Depends(require_route_access("/categories")),
    service: CategoryService = Depends(get_category_service)
):
    """Categories (with expert) and items, both newest first"""
    categories, items = await asyncio.gather(
        run_in_threadpool(service.list_categories),
        run_in_threadpool(service.list_items),
    )
    return {"categories": categories, "items": items}


@router.post("/categories", status_code=201)
async def create_category(
    data: CategoryCreate,
    user_data: Dict = Depends(require_route_access("/categories")),
    service: CategoryService = Depends(get_category_service)
):
    return service.create(data)


@router.put("/categories")
async def update_category(
    data: CategoryUpdate,
    user_data: Dict = Depends(require_route_access("/categories")),
    service: CategoryService = Depends(get_category_service)
):
    return service.update(data)


@router.delete("/categories")
async def delete_category(
    id: Optional[str] = None,
    type: Optional[str] = None,
    user_data: Dict = Depends(require_route_access("/categories")),
    service: CategoryService = Depends(get_category_service)
):
    """Delete an item (type=item) or a category with all its items"""
    if not id:
        raise HTTPException(status_code=400, detail="Missing id")
    service.delete(id, type)
    return {"ok": True}


@router.get("/categories-search", response_model=List[CategoryOption])
async def search_categories(
    q: str = "",
    id: str = "",
    user_data: Dict = Depends(require_route_access("/categories")),
    service: CategoryService = Depends(get_category_service)
):
    return service.search_categories(q.strip(), id.strip())


@router.get("/experts-search", response_model=List[ExpertOption])
async def search_experts(
    q: str = "",
    id: str = "",
    user_data: Dict = Depends(require_route_access("/categories")),
    service: CategoryService = Depends(get_category_service)
):
    """Experts eligible for a category: role expert with an image"""
    return service.search_experts(q.strip(), id.strip())
