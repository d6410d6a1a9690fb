import math
import logging
from datetime import datetime, timezone
from supabase import Client
from fastapi import HTTPException
from typing import Any, Dict, List, Optional, Tuple

from app.core.search import ilike_any
from app.core.storage import StorageService, PRODUCTS_PREFIX, build_object_path, is_image_content_type
from app.modules.products.schemas import ProductCreate, ProductUpdate, RowId

logger = logging.getLogger(__name__)

PRODUCT_COLUMNS = "id, name, description, price, price_currency, selling_url, fee_perc, created_at, edited_at"

DEFAULT_PAGE_SIZE = 100
MAX_PAGE_SIZE = 100
BRAND_PAGE_SIZE = 50

PRICE_ERROR = "Il prezzo deve essere un numero valido >= 0"
FEE_ERROR = "La percentuale fee deve essere tra 0 e 100"


def _to_int(value: Optional[str], default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def parse_page(value: Optional[str]) -> int:
    """1-based page number; anything unparsable means page 1"""
    return max(1, _to_int(value, 1))


def parse_limit(value: Optional[str], default: int = DEFAULT_PAGE_SIZE) -> int:
    return min(MAX_PAGE_SIZE, max(1, _to_int(value, default)))


def page_range(page: int, limit: int) -> Tuple[int, int]:
    """Inclusive row range for PostgREST .range()"""
    start = (page - 1) * limit
    return start, start + limit - 1


def build_pagination(page: int, limit: int, total_count: int) -> Dict[str, Any]:
    total_pages = math.ceil(total_count / limit) if limit else 0
    return {
        "current_page": page,
        "total_pages": total_pages,
        "total_count": total_count,
        "per_page": limit,
        "has_next": page < total_pages,
        "has_prev": page > 1
    }


def _parse_number(value: Any, message: str) -> Optional[float]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise HTTPException(status_code=400, detail=message)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise HTTPException(status_code=400, detail=message)
    if not math.isfinite(number):
        raise HTTPException(status_code=400, detail=message)
    return number


def parse_price(value: Any) -> Optional[float]:
    price = _parse_number(value, PRICE_ERROR)
    if price is not None and price < 0:
        raise HTTPException(status_code=400, detail=PRICE_ERROR)
    return price


def parse_fee_perc(value: Any) -> Optional[float]:
    fee = _parse_number(value, FEE_ERROR)
    if fee is not None and not 0 <= fee <= 100:
        raise HTTPException(status_code=400, detail=FEE_ERROR)
    return fee


def product_insert_row(data: ProductCreate, profile_id: str) -> Dict[str, Any]:
    """Validated insert payload: name required, numbers in range, blanks stored as null"""
    if not isinstance(data.name, str) or not data.name.strip():
        raise HTTPException(status_code=400, detail="Il campo 'name' è obbligatorio")
    return {
        "name": data.name.strip(),
        "description": data.description or None,
        "price": parse_price(data.price),
        "price_currency": data.price_currency or None,
        "selling_url": data.selling_url or None,
        "fee_perc": parse_fee_perc(data.fee_perc),
        "profile_id": profile_id,
        "created_at": datetime.now(timezone.utc).isoformat()
    }


def product_update_patch(data: ProductUpdate) -> Dict[str, Any]:
    """Validated patch of the sent fields, stamped with edited_at"""
    sent = data.model_dump(exclude_unset=True)
    patch: Dict[str, Any] = {}
    if "name" in sent:
        name = sent["name"]
        if not isinstance(name, str) or not name.strip():
            raise HTTPException(status_code=400, detail="Il campo 'name' deve essere una stringa non vuota")
        patch["name"] = name.strip()
    for field in ("description", "price_currency", "selling_url"):
        if field in sent:
            patch[field] = sent[field]
    if "price" in sent:
        patch["price"] = parse_price(sent["price"])
    if "fee_perc" in sent:
        patch["fee_perc"] = parse_fee_perc(sent["fee_perc"])
    patch["edited_at"] = datetime.now(timezone.utc).isoformat()
    return patch


def _project(row: Dict[str, Any], columns: str) -> Dict[str, Any]:
    """Keep only the selected columns of a returned row"""
    if columns == "*":
        return row
    return {k: row.get(k) for k in (c.strip() for c in columns.split(","))}


class ProductService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.storage = StorageService(supabase)

    def _search(self, query, search: str):
        if search:
            return query.or_(ilike_any(("name", "description"), search))
        return query

    def list_products(
        self,
        profile_id: str,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
        search: str = "",
        columns: str = PRODUCT_COLUMNS
    ) -> Dict[str, Any]:
        """One page of a profile's products, newest first, with pagination metadata"""
        count_query = self.supabase.table("products")\
            .select("id", count="exact", head=True)\
            .eq("profile_id", profile_id)
        total_count = self._search(count_query, search).execute().count or 0

        start, end = page_range(page, limit)
        products: List[Dict[str, Any]] = []
        # PostgREST rejects ranges past the last row
        if start < total_count:
            data_query = self.supabase.table("products")\
                .select(columns)\
                .eq("profile_id", profile_id)\
                .order("created_at", desc=True)
            products = self._search(data_query, search).range(start, end).execute().data or []

        return {"products": products, "pagination": build_pagination(page, limit, total_count)}

    def find_product(self, profile_id: str, product_id: RowId, columns: str = PRODUCT_COLUMNS) -> Optional[Dict[str, Any]]:
        try:
            result = self.supabase.table("products")\
                .select(columns)\
                .eq("id", product_id)\
                .eq("profile_id", profile_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            logger.warning(f"Product lookup failed for {product_id}: {e}")
            return None
        return result.data if result and result.data else None

    def get_product(self, profile_id: str, product_id: RowId, columns: str = PRODUCT_COLUMNS) -> Dict[str, Any]:
        product = self.find_product(profile_id, product_id, columns)
        if not product:
            raise HTTPException(status_code=404, detail="Prodotto non trovato")
        return product

    def create_product(self, profile_id: str, data: ProductCreate, columns: str = PRODUCT_COLUMNS) -> Dict[str, Any]:
        result = self.supabase.table("products")\
            .insert(product_insert_row(data, profile_id))\
            .execute()
        if not result.data:
            raise HTTPException(status_code=500, detail="Errore nella creazione del prodotto")
        return _project(result.data[0], columns)

    def update_product(self, profile_id: str, product_id: RowId, data: ProductUpdate, columns: str = PRODUCT_COLUMNS) -> Dict[str, Any]:
        if not self.find_product(profile_id, product_id, "id, profile_id"):
            raise HTTPException(status_code=404, detail="Prodotto non trovato o non autorizzato")
        result = self.supabase.table("products")\
            .update(product_update_patch(data))\
            .eq("id", product_id)\
            .eq("profile_id", profile_id)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Prodotto non trovato o non autorizzato")
        return _project(result.data[0], columns)

    # Images

    def list_images(self, product_id: RowId) -> List[Dict[str, Any]]:
        """Images of a product, oldest first. A failed read yields no images."""
        try:
            result = self.supabase.table("product_images")\
                .select("*")\
                .eq("product_id", product_id)\
                .order("created_at", desc=False)\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching images for product {product_id}: {e}")
            return []
        return result.data or []

    def get_product_with_images(self, profile_id: str, product_id: RowId) -> Dict[str, Any]:
        product = self.get_product(profile_id, product_id, "*")
        return {**product, "images": self.list_images(product_id)}

    def add_images(self, profile_id: str, product_id: RowId, files: List[Tuple[str, bytes, Optional[str]]]) -> List[Dict[str, Any]]:
        """Upload (name, content, content_type) files under products/{id}/ and record them"""
        self.get_product(profile_id, product_id, "id")
        for _, _, content_type in files:
            if not is_image_content_type(content_type):
                raise HTTPException(status_code=400, detail="Il file deve essere un'immagine")

        records = []
        for file_name, content, content_type in files:
            path = build_object_path(f"{PRODUCTS_PREFIX}/{product_id}", file_name)
            records.append({
                "product_id": product_id,
                "img_url": self.storage.upload_file(path, content, content_type)
            })
        if not records:
            return []
        result = self.supabase.table("product_images").insert(records).execute()
        return result.data or []

    def delete_image(self, profile_id: str, product_id: RowId, image_id: RowId) -> None:
        self.get_product(profile_id, product_id, "id")
        try:
            result = self.supabase.table("product_images")\
                .select("id, img_url")\
                .eq("id", image_id)\
                .eq("product_id", product_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            logger.warning(f"Image lookup failed for {image_id}: {e}")
            result = None
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Immagine non trovata")
        self.storage.remove_public_urls([result.data.get("img_url")])
        self.supabase.table("product_images").delete().eq("id", image_id).execute()

    # Cascade delete

    def delete_product(self, profile_id: str, product_id: RowId) -> None:
        """Image files, then image rows, then the product row; sequential, no rollback"""
        if not self.find_product(profile_id, product_id, "id"):
            raise HTTPException(status_code=404, detail="Prodotto non trovato o non autorizzato")

        images = self.supabase.table("product_images")\
            .select("img_url")\
            .eq("product_id", product_id)\
            .execute()
        self.storage.remove_public_urls([row.get("img_url") for row in images.data or []])

        self.supabase.table("product_images").delete().eq("product_id", product_id).execute()
        self.supabase.table("products")\
            .delete()\
            .eq("id", product_id)\
            .eq("profile_id", profile_id)\
            .execute()
        logger.info(f"Deleted product {product_id} of profile {profile_id}")

    def bulk_delete(self, profile_id: str, product_ids: List[RowId]) -> Dict[str, List[RowId]]:
        """Cascade delete each product in turn; failures do not stop the rest"""
        deleted, failed = [], []
        for product_id in product_ids:
            try:
                self.delete_product(profile_id, product_id)
                deleted.append(product_id)
            except Exception as e:
                logger.error(f"Error deleting product {product_id}: {e}")
                failed.append(product_id)
        return {"deleted": deleted, "failed": failed}
