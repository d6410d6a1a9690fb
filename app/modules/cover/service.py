from supabase import Client
from fastapi import HTTPException
from typing import Any, Dict, List

from app.modules.cover.schemas import CoverCreate, CoverUpdate, RowId

COVER_TABLE = "products_cover_items"
COVER_PATCH_FIELDS = ("name", "image_url", "is_public", "product_id", "order")


class CoverService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_items(self) -> List[Dict[str, Any]]:
        result = self.supabase.table(COVER_TABLE)\
            .select("*")\
            .order("order", desc=False, nullsfirst=False)\
            .order("created_at", desc=True)\
            .execute()
        return result.data or []

    def next_order(self) -> int:
        """Highest order + 1, or 1 for an empty cover"""
        result = self.supabase.table(COVER_TABLE)\
            .select("order")\
            .not_.is_("order", "null")\
            .order("order", desc=True)\
            .limit(1)\
            .execute()
        rows = result.data or []
        last = rows[0].get("order") if rows else None
        return (last or 0) + 1

    def create(self, data: CoverCreate) -> Dict[str, Any]:
        if not data.product_id:
            raise HTTPException(status_code=400, detail="Missing product_id")
        result = self.supabase.table(COVER_TABLE).insert({
            "name": data.name,
            "image_url": data.image_url,
            "is_public": data.is_public,
            "product_id": data.product_id,
            "order": self.next_order()
        }).execute()
        if not result.data:
            raise HTTPException(status_code=400, detail="Creazione non riuscita")
        return result.data[0]

    def update(self, data: CoverUpdate) -> Dict[str, Any]:
        if not data.id:
            raise HTTPException(status_code=400, detail="Missing id")
        sent = data.model_dump(exclude_unset=True)
        patch = {k: sent[k] for k in COVER_PATCH_FIELDS if k in sent}
        if not patch:
            raise HTTPException(status_code=400, detail="Nessun campo da aggiornare")
        result = self.supabase.table(COVER_TABLE)\
            .update(patch)\
            .eq("id", data.id)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Elemento non trovato")
        return result.data[0]

    def delete(self, item_id: str) -> None:
        self.supabase.table(COVER_TABLE).delete().eq("id", item_id).execute()

    def reorder(self, ids: List[RowId]) -> List[Dict[str, Any]]:
        """Persist a new display order: the n-th id gets order n (1-based), one write per id"""
        updated = []
        for position, item_id in enumerate(ids, start=1):
            self.supabase.table(COVER_TABLE)\
                .update({"order": position})\
                .eq("id", item_id)\
                .execute()
            updated.append({"id": item_id, "order": position})
        return updated
