import asyncio
from fastapi import APIRouter, Depends, HTTPException
from starlette.concurrency import run_in_threadpool
from app.database.supabase_client import get_supabase
from app.modules.selling_links.schemas import SellingLinkCreate, SellingLinkUpdate
from app.modules.selling_links.service import SellingLinkService
from app.core.dependencies import require_route_access
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/selling-links", tags=["selling-links"])
brand_router = APIRouter(prefix="/brand/links", tags=["brand"])


def get_selling_link_service(supabase: Client = Depends(get_supabase)) -> SellingLinkService:
    return SellingLinkService(supabase)


@router.get("")
async def list_selling_links(
    q: str = "",
    category_id: str = "",
    item_id: str = "",
    selling_link_id: str = "",
    user_data: Dict = Depends(require_route_access("/selling-links")),
    service: SellingLinkService = Depends(get_selling_link_service)
):
    """
    - category_id: links attached to a category
    - item_id: links attached to an item
    - selling_link_id: categories and items the link is attached to
    - otherwise the newest links, optionally searched by name
    """
    category_id, item_id, selling_link_id = category_id.strip(), item_id.strip(), selling_link_id.strip()
    if category_id:
        return service.links_for("category", category_id)
    if item_id:
        return service.links_for("item", item_id)
    if selling_link_id:
        categories, products = await asyncio.gather(
            run_in_threadpool(service.categories_for, selling_link_id),
            run_in_threadpool(service.items_for, selling_link_id),
        )
        return {"categories": categories, "products": products}
    return service.list_links(q.strip())


@router.post("", status_code=201)
async def create_selling_link(
    data: SellingLinkCreate,
    user_data: Dict = Depends(require_route_access("/selling-links")),
    service: SellingLinkService = Depends(get_selling_link_service)
):
    """Create a link, or attach one to a category/item with type=attach"""
    if data.type == "attach":
        return service.attach(data.target, data.target_id, data.selling_link_id)
    return service.create(data)


@router.put("")
async def update_selling_link(
    data: SellingLinkUpdate,
    user_data: Dict = Depends(require_route_access("/selling-links")),
    service: SellingLinkService = Depends(get_selling_link_service)
):
    return service.update(data)


@router.delete("")
async def delete_selling_link(
    id: str = "",
    type: str = "",
    target: str = "",
    target_id: str = "",
    selling_link_id: str = "",
    user_data: Dict = Depends(require_route_access("/selling-links")),
    service: SellingLinkService = Depends(get_selling_link_service)
):
    """Delete a link, or detach it from a category/item with type=detach"""
    if type == "detach":
        service.detach(target, target_id, selling_link_id)
        return {"ok": True}
    if not id:
        raise HTTPException(status_code=400, detail="Missing id")
    service.delete(id)
    return {"ok": True}


@brand_router.get("")
async def list_brand_links(
    q: str = "",
    user_data: Dict = Depends(require_route_access("/brand/links")),
    service: SellingLinkService = Depends(get_selling_link_service)
):
    """Read-only list for brands, searchable by name or description"""
    return service.search_links(q.strip())
