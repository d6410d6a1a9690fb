from fastapi import APIRouter, Depends, File, UploadFile
from app.database.supabase_client import get_supabase
from app.modules.products.schemas import ProductCreate, ProductUpdate, BulkDeleteRequest, ProductPage
from app.modules.products.service import ProductService, BRAND_PAGE_SIZE, parse_page
from app.modules.products.routes import get_product_service
from app.core.dependencies import require_route_access, get_current_profile
from typing import Dict, List, Optional

# Product management for the brand screens, authenticated with the session
router = APIRouter(prefix="/brand/products", tags=["brand"])

brand_access = require_route_access("/brand/products")


@router.get("", response_model=ProductPage)
async def list_brand_products(
    page: Optional[str] = None,
    search: str = "",
    user_data: Dict = Depends(brand_access),
    profile: Dict = Depends(get_current_profile),
    service: ProductService = Depends(get_product_service)
):
    """50 products per page, newest first"""
    return service.list_products(profile["id"], parse_page(page), BRAND_PAGE_SIZE, search.strip(), "*")


@router.post("", status_code=201)
async def create_brand_product(
    data: ProductCreate,
    user_data: Dict = Depends(brand_access),
    profile: Dict = Depends(get_current_profile),
    service: ProductService = Depends(get_product_service)
):
    return service.create_product(profile["id"], data, "*")


@router.post("/bulk-delete")
async def bulk_delete_products(
    data: BulkDeleteRequest,
    user_data: Dict = Depends(brand_access),
    profile: Dict = Depends(get_current_profile),
    service: ProductService = Depends(get_product_service)
):
    """Cascade delete several products; reports which ones failed"""
    return service.bulk_delete(profile["id"], data.ids)


@router.get("/{product_id}")
async def get_brand_product(
    product_id: str,
    user_data: Dict = Depends(brand_access),
    profile: Dict = Depends(get_current_profile),
    service: ProductService = Depends(get_product_service)
):
    """Product with its images, oldest image first"""
    return service.get_product_with_images(profile["id"], product_id)


@router.put("/{product_id}")
async def update_brand_product(
    product_id: str,
    data: ProductUpdate,
    user_data: Dict = Depends(brand_access),
    profile: Dict = Depends(get_current_profile),
    service: ProductService = Depends(get_product_service)
):
    return service.update_product(profile["id"], product_id, data, "*")


@router.delete("/{product_id}")
async def delete_brand_product(
    product_id: str,
    user_data: Dict = Depends(brand_access),
    profile: Dict = Depends(get_current_profile),
    service: ProductService = Depends(get_product_service)
):
    service.delete_product(profile["id"], product_id)
    return {"ok": True}


@router.post("/{product_id}/images", status_code=201)
async def upload_product_images(
    product_id: str,
    files: List[UploadFile] = File(...),
    user_data: Dict = Depends(brand_access),
    profile: Dict = Depends(get_current_profile),
    service: ProductService = Depends(get_product_service)
):
    payload = [(f.filename or "image", await f.read(), f.content_type) for f in files]
    return service.add_images(profile["id"], product_id, payload)


@router.delete("/{product_id}/images/{image_id}")
async def delete_product_image(
    product_id: str,
    image_id: str,
    user_data: Dict = Depends(brand_access),
    profile: Dict = Depends(get_current_profile),
    service: ProductService = Depends(get_product_service)
):
    service.delete_image(profile["id"], product_id, image_id)
    return {"ok": True}
