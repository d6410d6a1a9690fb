import logging
from supabase import Client
from fastapi import HTTPException
from typing import Any, Dict, List, Optional

from app.core.search import ilike_any
from app.modules.selling_links.schemas import SellingLinkCreate, SellingLinkUpdate, RowId

logger = logging.getLogger(__name__)

LINKS_TABLE = "selling_links"
LINK_FIELDS = ("name", "link", "descrizione", "img_url", "calltoaction")
LINK_COLUMNS = "id, name, link, descrizione, img_url, calltoaction, created_at"
LIST_LIMIT = 100

# target -> (pivot table, target column, link column)
PIVOTS = {
    "category": ("link_category_sellinglink", "category_id", "selling_link_id"),
    "item": ("link_items_sellinglinks", "item_id", "sellinglink_id"),
}


def _pivot(target: Optional[str]):
    if target not in PIVOTS:
        raise HTTPException(status_code=400, detail="Invalid target")
    return PIVOTS[target]


class SellingLinkService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_links(self, q: str = "") -> List[Dict[str, Any]]:
        """Newest links, optionally filtered by name"""
        query = self.supabase.table(LINKS_TABLE)\
            .select("*")\
            .order("created_at", desc=True)\
            .limit(LIST_LIMIT)
        if q:
            query = query.ilike("name", f"%{q}%")
        return query.execute().data or []

    def search_links(self, q: str = "") -> List[Dict[str, Any]]:
        """Brand view: all links, search on name or description"""
        query = self.supabase.table(LINKS_TABLE)\
            .select("*")\
            .order("created_at", desc=True)
        if q:
            query = query.or_(ilike_any(("name", "descrizione"), q))
        return query.execute().data or []

    def links_for(self, target: str, target_id: str) -> List[Dict[str, Any]]:
        """Links attached to a category or an item"""
        table, target_column, link_column = _pivot(target)
        result = self.supabase.table(table)\
            .select(f"sellinglink:{link_column} ( {LINK_COLUMNS} )")\
            .eq(target_column, target_id)\
            .execute()
        return [row["sellinglink"] for row in result.data or [] if row.get("sellinglink")]

    def categories_for(self, selling_link_id: str) -> List[Dict[str, Any]]:
        result = self.supabase.table("link_category_sellinglink")\
            .select("category:category_id ( id, name )")\
            .eq("selling_link_id", selling_link_id)\
            .execute()
        return [row["category"] for row in result.data or [] if row.get("category")]

    def items_for(self, selling_link_id: str) -> List[Dict[str, Any]]:
        result = self.supabase.table("link_items_sellinglinks")\
            .select("item:item_id ( id, name )")\
            .eq("sellinglink_id", selling_link_id)\
            .execute()
        return [row["item"] for row in result.data or [] if row.get("item")]

    def create(self, data: SellingLinkCreate) -> Dict[str, Any]:
        row = {field: getattr(data, field) for field in LINK_FIELDS}
        result = self.supabase.table(LINKS_TABLE).insert(row).execute()
        if not result.data:
            raise HTTPException(status_code=400, detail="Creazione non riuscita")
        return result.data[0]

    def attach(self, target: Optional[str], target_id: Optional[RowId], selling_link_id: Optional[RowId]) -> Dict[str, Any]:
        if not target or not target_id or not selling_link_id:
            raise HTTPException(status_code=400, detail="Missing attach parameters")
        table, target_column, link_column = _pivot(target)
        result = self.supabase.table(table).insert({
            target_column: target_id,
            link_column: selling_link_id
        }).execute()
        if not result.data:
            raise HTTPException(status_code=400, detail="Collegamento non riuscito")
        return result.data[0]

    def detach(self, target: str, target_id: str, selling_link_id: str) -> None:
        if not target or not target_id or not selling_link_id:
            raise HTTPException(status_code=400, detail="Missing detach parameters")
        table, target_column, link_column = _pivot(target)
        self.supabase.table(table)\
            .delete()\
            .eq(target_column, target_id)\
            .eq(link_column, selling_link_id)\
            .execute()

    def update(self, data: SellingLinkUpdate) -> Dict[str, Any]:
        if not data.id:
            raise HTTPException(status_code=400, detail="Missing id")
        sent = data.model_dump(exclude_unset=True)
        patch = {k: sent[k] for k in LINK_FIELDS if k in sent}
        if not patch:
            raise HTTPException(status_code=400, detail="Nessun campo da aggiornare")
        result = self.supabase.table(LINKS_TABLE)\
            .update(patch)\
            .eq("id", data.id)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Link non trovato")
        return result.data[0]

    def delete(self, link_id: str) -> None:
        """Remove the link from both pivots, then the link itself"""
        for table, _, link_column in PIVOTS.values():
            self.supabase.table(table).delete().eq(link_column, link_id).execute()
        self.supabase.table(LINKS_TABLE).delete().eq("id", link_id).execute()
        logger.info(f"Deleted selling link {link_id}")
