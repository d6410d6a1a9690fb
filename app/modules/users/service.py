import logging
from datetime import datetime, timezone
from supabase import Client
from fastapi import HTTPException
from typing import Any, Dict, List, Optional

from app.config import settings
from app.core.errors import error_message
from app.config.acl_config import PROFILE_ROLES
from app.modules.auth.service import evict_cached_user
from app.modules.users.schemas import UserCreate, UserUpdate

logger = logging.getLogger(__name__)

DEFAULT_PROFILE_ROLE = "expert"
BAN_FOREVER = "876000h"
UNBAN = "none"


def _dump_user(user) -> Dict[str, Any]:
    return user.model_dump(mode="json")


def _check_role(role: Optional[str]) -> str:
    role = role or DEFAULT_PROFILE_ROLE
    if role not in PROFILE_ROLES:
        raise HTTPException(status_code=400, detail="Ruolo non valido")
    return role


class UserService:
    def __init__(self, supabase: Client, admin: Client):
        # supabase: table access; admin: client holding the service role key for auth.admin
        self.supabase = supabase
        self.admin = admin

    def list_users(self) -> List[Dict[str, Any]]:
        """Every auth user paired with its profile row (or None)"""
        try:
            users = self.admin.auth.admin.list_users()
        except Exception as e:
            logger.error(f"Error listing auth users: {e}")
            raise HTTPException(status_code=500, detail=error_message(e))

        profiles = self.supabase.table("profile").select("*").execute().data or []
        by_user_id = {p.get("user_id"): p for p in profiles}
        return [
            {"user": _dump_user(user), "profile": by_user_id.get(user.id)}
            for user in users
        ]

    def create_user(self, data: UserCreate) -> Dict[str, Any]:
        """Create an unconfirmed auth user, its profile, then send the invite e-mail"""
        if not data.email or not data.nome:
            raise HTTPException(status_code=400, detail="Email e nome sono obbligatori")
        role = _check_role(data.role)

        try:
            created = self.admin.auth.admin.create_user({
                "email": data.email,
                "email_confirm": False,
                "user_metadata": {"nome": data.nome, "bio": data.bio or None}
            })
        except Exception as e:
            raise HTTPException(status_code=400, detail=error_message(e))
        user = created.user

        try:
            result = self.supabase.table("profile").insert({
                "user_id": user.id,
                "nome": data.nome,
                "bio": data.bio or None,
                "role": role,
                "img_url": data.img_url or None
            }).execute()
            profile_error = None if result.data else "Errore nella creazione del profilo"
        except Exception as e:
            profile_error = error_message(e)

        if profile_error:
            # No orphan auth users: roll the account back
            logger.error(f"Profile creation failed for {user.id}, deleting auth user: {profile_error}")
            self.admin.auth.admin.delete_user(user.id)
            raise HTTPException(status_code=400, detail=profile_error)

        try:
            self.admin.auth.admin.invite_user_by_email(
                data.email, {"redirect_to": f"{settings.site_url}/auth/callback"}
            )
        except Exception as e:
            logger.warning(f"Invite e-mail not sent to {data.email}: {e}")

        return {"user": _dump_user(user), "profile": result.data[0]}

    def update_user(self, data: UserUpdate) -> Dict[str, Any]:
        """Update auth e-mail/metadata (when an e-mail is given) and upsert the profile"""
        if not data.user_id or not data.nome:
            raise HTTPException(status_code=400, detail="UserId e nome sono obbligatori")
        role = _check_role(data.role)

        if data.email:
            try:
                self.admin.auth.admin.update_user_by_id(data.user_id, {
                    "email": data.email,
                    "user_metadata": {"nome": data.nome, "bio": data.bio or None}
                })
            except Exception as e:
                raise HTTPException(status_code=400, detail=error_message(e))

        fields = {
            "nome": data.nome,
            "bio": data.bio or None,
            "role": role,
            "img_url": data.img_url or None
        }
        existing = self.supabase.table("profile")\
            .select("id")\
            .eq("user_id", data.user_id)\
            .execute()
        if existing.data:
            result = self.supabase.table("profile")\
                .update({**fields, "edited_at": datetime.now(timezone.utc).isoformat()})\
                .eq("user_id", data.user_id)\
                .execute()
        else:
            result = self.supabase.table("profile")\
                .insert({**fields, "user_id": data.user_id})\
                .execute()

        if not result.data:
            raise HTTPException(status_code=400, detail="Errore nel salvataggio del profilo")
        return {"profile": result.data[0]}

    def delete_user(self, user_id: str) -> None:
        """Profile first, then the auth user"""
        if not user_id:
            raise HTTPException(status_code=400, detail="UserId è obbligatorio")
        self.supabase.table("profile").delete().eq("user_id", user_id).execute()
        try:
            self.admin.auth.admin.delete_user(user_id)
        except Exception as e:
            raise HTTPException(status_code=400, detail=error_message(e))
        evict_cached_user(user_id)
        logger.info(f"Deleted user {user_id}")

    def set_banned(self, user_id: Optional[str], banned: bool) -> Dict[str, Any]:
        if not user_id:
            raise HTTPException(status_code=400, detail="UserId è obbligatorio")
        try:
            self.admin.auth.admin.update_user_by_id(user_id, {
                "ban_duration": BAN_FOREVER if banned else UNBAN
            })
        except Exception as e:
            raise HTTPException(status_code=400, detail=error_message(e))
        evict_cached_user(user_id)
        return {"ok": True, "banned": banned}

    def send_password_reset(self, email: Optional[str]) -> None:
        """Recovery link e-mailed by Supabase, landing on the reset page"""
        if not email:
            raise HTTPException(status_code=400, detail="Email è obbligatoria")
        try:
            self.admin.auth.admin.generate_link({
                "type": "recovery",
                "email": email,
                "options": {"redirect_to": f"{settings.site_url}/reset-password"}
            })
        except Exception as e:
            raise HTTPException(status_code=400, detail=error_message(e))
