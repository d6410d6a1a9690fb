from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.products.schemas import ProductCreate, ProductUpdate, ProductPage
from app.modules.products.service import ProductService, parse_page, parse_limit
from app.core.dependencies import get_token_profile_id
from supabase import Client
from typing import Optional

# Sync API for external systems, authenticated with a profile token
router = APIRouter(prefix="/products", tags=["products"])


def get_product_service(supabase: Client = Depends(get_supabase)) -> ProductService:
    return ProductService(supabase)


@router.get("", response_model=ProductPage)
async def list_products(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    search: str = "",
    profile_id: str = Depends(get_token_profile_id),
    service: ProductService = Depends(get_product_service)
):
    """Products of the token's profile. limit is clamped to 1..100."""
    return service.list_products(profile_id, parse_page(page), parse_limit(limit), search)


@router.post("", status_code=201)
async def create_product(
    data: ProductCreate,
    profile_id: str = Depends(get_token_profile_id),
    service: ProductService = Depends(get_product_service)
):
    return service.create_product(profile_id, data)


@router.get("/{product_id}")
async def get_product(
    product_id: str,
    profile_id: str = Depends(get_token_profile_id),
    service: ProductService = Depends(get_product_service)
):
    return service.get_product(profile_id, product_id)


@router.put("/{product_id}")
async def update_product(
    product_id: str,
    data: ProductUpdate,
    profile_id: str = Depends(get_token_profile_id),
    service: ProductService = Depends(get_product_service)
):
    """Partial update: only the fields present in the body are written"""
    return service.update_product(profile_id, product_id, data)
