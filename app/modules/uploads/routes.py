from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from app.database.supabase_client import get_supabase
from app.core.acl import has_access
from app.core.dependencies import get_current_user_id, resolve_user_role, _get_request_cache
from app.core.storage import (
    StorageService, COVER_PREFIX, SELLING_LINKS_PREFIX, PROFILES_PREFIX, CATEGORIES_PREFIX,
    build_object_path, is_image_content_type
)
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/uploads", tags=["uploads"])

# Upload kind -> screen that owns it
UPLOAD_KINDS = {
    COVER_PREFIX: "/cover",
    SELLING_LINKS_PREFIX: "/selling-links",
    PROFILES_PREFIX: "/profile",
    CATEGORIES_PREFIX: "/categories",
}


@router.post("/{kind}", status_code=201)
async def upload_image(
    kind: str,
    request: Request,
    file: UploadFile = File(...),
    user_data: Dict = Depends(get_current_user_id),
    supabase: Client = Depends(get_supabase)
):
    """Store an image under {kind}/ and return its storage path and public URL"""
    if kind not in UPLOAD_KINDS:
        raise HTTPException(status_code=404, detail="Tipo di upload non valido")
    role = resolve_user_role(user_data["id"], supabase, _get_request_cache(request))
    if not has_access(role, UPLOAD_KINDS[kind]):
        raise HTTPException(status_code=403, detail="Accesso negato")
    if not is_image_content_type(file.content_type):
        raise HTTPException(status_code=400, detail="Il file deve essere un'immagine")

    path = build_object_path(kind, file.filename or "image")
    public_url = StorageService(supabase).upload_file(path, await file.read(), file.content_type)
    return {"path": path, "public_url": public_url}
