import logging
from supabase import Client
from fastapi import HTTPException
from typing import Any, Dict, List, Optional

from app.core.slug import generate_slug, is_valid_slug
from app.modules.categories.schemas import CategoryCreate, CategoryUpdate, RowId

logger = logging.getLogger(__name__)

CATEGORIES_TABLE = "products_categories"
ITEMS_TABLE = "products_categories_items"

CATEGORY_COLUMNS = (
    "id,created_at,name,slug,is_public,expert_id,category_description,"
    "expert:profile!products_categories_expert_id_fkey(id,nome,img_url)"
)
CATEGORY_PATCH_FIELDS = ("name", "slug", "is_public", "expert_id", "category_description")
ITEM_FIELDS = ("category_id", "name", "slug", "description", "image_url", "is_public")

SEARCH_LIMIT = 20


def resolve_slug(slug: Optional[str], name: Optional[str]) -> Optional[str]:
    """Validated slug, or one generated from the name when the slug is empty"""
    if slug:
        if not is_valid_slug(slug):
            raise HTTPException(status_code=400, detail="Slug non valido")
        return slug
    return generate_slug(name or "") or None


class CategoryService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_categories(self) -> List[Dict[str, Any]]:
        """Categories with their expert, newest first"""
        result = self.supabase.table(CATEGORIES_TABLE)\
            .select(CATEGORY_COLUMNS)\
            .order("created_at", desc=True)\
            .execute()
        return result.data or []

    def list_items(self) -> List[Dict[str, Any]]:
        result = self.supabase.table(ITEMS_TABLE)\
            .select("*")\
            .order("created_at", desc=True)\
            .execute()
        return result.data or []

    def validate_expert(self, expert_id: RowId) -> None:
        """An expert is a profile with role expert and an image"""
        try:
            result = self.supabase.table("profile")\
                .select("id")\
                .eq("id", expert_id)\
                .eq("role", "expert")\
                .not_.is_("img_url", "null")\
                .maybe_single()\
                .execute()
        except Exception as e:
            logger.warning(f"Expert lookup failed for {expert_id}: {e}")
            result = None
        if not result or not result.data:
            raise HTTPException(status_code=400, detail="Esperto non valido")

    def create(self, data: CategoryCreate) -> Dict[str, Any]:
        if data.expert_id:
            self.validate_expert(data.expert_id)

        slug = resolve_slug(data.slug, data.name)
        if data.type == "item":
            row = {
                "category_id": data.category_id,
                "name": data.name,
                "slug": slug,
                "description": data.description,
                "image_url": data.image_url,
                "is_public": data.is_public,
            }
            table = ITEMS_TABLE
        else:
            row = {
                "name": data.name,
                "slug": slug,
                "is_public": data.is_public,
                "expert_id": data.expert_id,
                "category_description": data.category_description,
            }
            table = CATEGORIES_TABLE

        result = self.supabase.table(table).insert(row).execute()
        if not result.data:
            raise HTTPException(status_code=400, detail="Creazione non riuscita")
        return result.data[0]

    def update(self, data: CategoryUpdate) -> Dict[str, Any]:
        if not data.id:
            raise HTTPException(status_code=400, detail="Missing id")

        sent = data.model_dump(exclude_unset=True)
        if data.type == "item":
            table = ITEMS_TABLE
            patch = {k: sent[k] for k in ITEM_FIELDS if k in sent}
        else:
            if data.expert_id:
                self.validate_expert(data.expert_id)
            table = CATEGORIES_TABLE
            patch = {k: sent[k] for k in CATEGORY_PATCH_FIELDS if k in sent}

        if "slug" in patch:
            patch["slug"] = resolve_slug(patch["slug"], sent.get("name"))
        if not patch:
            raise HTTPException(status_code=400, detail="Nessun campo da aggiornare")

        result = self.supabase.table(table)\
            .update(patch)\
            .eq("id", data.id)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Categoria non trovata")
        return result.data[0]

    def delete(self, row_id: str, row_type: Optional[str] = None) -> None:
        """Delete an item, or a category together with its items (items first)"""
        if row_type == "item":
            self.supabase.table(ITEMS_TABLE).delete().eq("id", row_id).execute()
            return
        self.supabase.table(ITEMS_TABLE).delete().eq("category_id", row_id).execute()
        self.supabase.table(CATEGORIES_TABLE).delete().eq("id", row_id).execute()
        logger.info(f"Deleted category {row_id} and its items")

    def search_categories(self, q: str = "", row_id: str = "") -> List[Dict[str, Any]]:
        """Lookup for pickers: a single category by id, or the newest matching the name"""
        query = self.supabase.table(CATEGORIES_TABLE).select("id,name")
        if row_id:
            result = query.eq("id", row_id).execute()
            return (result.data or [])[:1]
        query = query.order("created_at", desc=True).limit(SEARCH_LIMIT)
        if q:
            query = query.ilike("name", f"%{q}%")
        return query.execute().data or []

    def search_experts(self, q: str = "", row_id: str = "") -> List[Dict[str, Any]]:
        query = self.supabase.table("profile")\
            .select("id,nome,img_url")\
            .eq("role", "expert")\
            .not_.is_("img_url", "null")
        if row_id:
            result = query.eq("id", row_id).execute()
            return (result.data or [])[:1]
        query = query.order("created_at", desc=True).limit(SEARCH_LIMIT)
        if q:
            query = query.ilike("nome", f"%{q}%")
        return query.execute().data or []
