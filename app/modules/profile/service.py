import logging
import secrets
from datetime import datetime, timezone
from supabase import Client
from fastapi import HTTPException
from typing import Any, Dict, List, Optional

from app.core.storage import StorageService, PROFILES_PREFIX, build_object_path, is_image_content_type
from app.modules.profile.schemas import ProfileUpdate

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32


class ProfileService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.storage = StorageService(supabase)

    def update_profile(self, profile_id: str, data: ProfileUpdate) -> Dict[str, Any]:
        """Write the sent fields in one update, stamping edited_at"""
        patch = data.model_dump(exclude_unset=True)
        if not patch:
            raise HTTPException(status_code=400, detail="Nessun campo da aggiornare")
        return self._write(profile_id, patch)

    def _write(self, profile_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
        result = self.supabase.table("profile")\
            .update({**patch, "edited_at": datetime.now(timezone.utc).isoformat()})\
            .eq("id", profile_id)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Profilo non trovato")
        return result.data[0]

    def replace_image(self, profile: Dict[str, Any], file_name: str, content: bytes, content_type: Optional[str]) -> Dict[str, Any]:
        """Drop the previous image (if it is ours), upload the new one and save its URL"""
        if not is_image_content_type(content_type):
            raise HTTPException(status_code=400, detail="Il file deve essere un'immagine")
        if profile.get("img_url"):
            self.storage.remove_public_urls([profile["img_url"]])
        path = build_object_path(f"{PROFILES_PREFIX}/{profile['id']}", file_name)
        public_url = self.storage.upload_file(path, content, content_type)
        return self._write(profile["id"], {"img_url": public_url})

    def remove_image(self, profile: Dict[str, Any]) -> Dict[str, Any]:
        if profile.get("img_url"):
            self.storage.remove_public_urls([profile["img_url"]])
        return self._write(profile["id"], {"img_url": None})

    def list_tokens(self, profile_id: str) -> List[Dict[str, Any]]:
        """Tokens of a profile, newest first, without their values"""
        result = self.supabase.table("profile_token")\
            .select("id,nome,created_at")\
            .eq("profile_id", profile_id)\
            .order("created_at", desc=True)\
            .execute()
        return result.data or []

    def create_token(self, profile_id: str, nome: Optional[str]) -> Dict[str, Any]:
        nome = (nome or "").strip()
        if not nome:
            raise HTTPException(status_code=400, detail="Il nome del token è obbligatorio")
        token = secrets.token_hex(TOKEN_BYTES)
        result = self.supabase.table("profile_token").insert({
            "profile_id": profile_id,
            "nome": nome,
            "token": token
        }).execute()
        if not result.data:
            raise HTTPException(status_code=400, detail="Impossibile creare il token")
        row = result.data[0]
        logger.info(f"Created API token {row.get('id')} for profile {profile_id}")
        return {
            "id": row["id"],
            "nome": row.get("nome"),
            "created_at": row.get("created_at"),
            "token": token
        }

    def delete_token(self, profile_id: str, token_id: str) -> None:
        """Owner-scoped: a token of another profile is left untouched"""
        self.supabase.table("profile_token")\
            .delete()\
            .eq("id", token_id)\
            .eq("profile_id", profile_id)\
            .execute()
