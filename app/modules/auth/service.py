import hashlib
import time
import logging
from supabase import Client
from app.modules.auth.schemas import (
    LoginRequest, RegisterRequest, VerifyOtpRequest
)
from app.config import settings
from app.core.errors import error_message
from fastapi import HTTPException
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (e.g. many parallel requests with same token)
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_TTL_SEC = 60
_AUTH_CACHE_MAX_SIZE = 500

# Registration user types and the profile role they receive
USER_TYPE_ROLES = {
    "creator": "expert",
    "brand": "admin",
}


def clear_auth_cache() -> None:
    _AUTH_USER_CACHE.clear()


def evict_cached_user(user_id: str) -> None:
    """Forget cached token lookups of a user so a ban or deletion applies on the next request"""
    stale = [key for key, (user_data, _) in _AUTH_USER_CACHE.items() if user_data.get("id") == user_id]
    for key in stale:
        _AUTH_USER_CACHE.pop(key, None)


class AuthService:
    def __init__(self, supabase: Client, auth_client: Optional[Client] = None):
        # supabase: service client (profiles, admin API, token checks)
        # auth_client: throwaway anon client for sign-in flows
        self.supabase = supabase
        self.auth_client = auth_client or supabase

    def set_session(self, access_token: str, refresh_token: str) -> Dict[str, str]:
        """Validate a token pair issued to the browser and return the (possibly refreshed) pair"""
        try:
            auth_response = self.auth_client.auth.set_session(access_token, refresh_token)
        except Exception as e:
            raise HTTPException(status_code=400, detail=error_message(e))
        session = getattr(auth_response, "session", None)
        if session is None:
            return {"access_token": access_token, "refresh_token": refresh_token}
        return {"access_token": session.access_token, "refresh_token": session.refresh_token}

    def login(self, login_data: LoginRequest):
        """Authenticate with e-mail and password; returns the Supabase auth response"""
        try:
            auth_response = self.auth_client.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })
        except Exception as e:
            message = error_message(e)
            if "invalid" in message.lower() or "credentials" in message.lower():
                raise HTTPException(status_code=401, detail="Email o password non validi")
            raise HTTPException(status_code=400, detail=message)

        if not auth_response.user or not auth_response.session:
            raise HTTPException(status_code=401, detail="Email o password non validi")
        return auth_response

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        try:
            cache_key = hashlib.sha256(token.encode()).hexdigest()
            now = time.monotonic()
            if cache_key in _AUTH_USER_CACHE:
                user_data, expiry = _AUTH_USER_CACHE[cache_key]
                if now < expiry:
                    return user_data
                del _AUTH_USER_CACHE[cache_key]
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise HTTPException(status_code=401, detail="Non autenticato")
            user = user_response.user
            user_data = {
                "id": user.id,
                "email": user.email,
                "user_metadata": user.user_metadata or {},
                "app_metadata": user.app_metadata or {},
                "created_at": user.created_at,
                "updated_at": user.updated_at
            }
            if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
                _AUTH_USER_CACHE[cache_key] = (user_data, now + _AUTH_CACHE_TTL_SEC)
            return user_data
        except HTTPException:
            raise
        except Exception as e:
            logger.debug(f"Token rejected by Supabase Auth: {e}")
            raise HTTPException(status_code=401, detail="Sessione non valida o scaduta")

    def logout(self, token: Optional[str]) -> bool:
        """Revoke the session behind the token. Cookies are cleared by the caller either way."""
        if not token:
            return False
        _AUTH_USER_CACHE.pop(hashlib.sha256(token.encode()).hexdigest(), None)
        try:
            self.supabase.auth.admin.sign_out(token)
            return True
        except Exception as e:
            logger.warning(f"Sign out failed: {e}")
            return False

    def send_registration_otp(self, register_data: RegisterRequest) -> None:
        """Start registration: Supabase e-mails a 6 digit code and creates the user if needed"""
        try:
            self.auth_client.auth.sign_in_with_otp({
                "email": register_data.email,
                "options": {
                    "should_create_user": True,
                    "data": {"user_type": register_data.user_type}
                }
            })
        except Exception as e:
            raise HTTPException(status_code=400, detail=error_message(e))

    def verify_registration_otp(self, otp_data: VerifyOtpRequest):
        """Complete registration: verify the code, set the password and create the profile"""
        try:
            auth_response = self.auth_client.auth.verify_otp({
                "email": otp_data.email,
                "token": otp_data.otp,
                "type": "email"
            })
        except Exception as e:
            raise HTTPException(status_code=400, detail=error_message(e))

        if not auth_response.user or not auth_response.session:
            raise HTTPException(status_code=400, detail="Codice non valido o scaduto")

        user_id = auth_response.user.id
        if otp_data.password:
            self.update_password(user_id, otp_data.password)

        self.create_profile(user_id, otp_data.email, USER_TYPE_ROLES[otp_data.user_type])
        return auth_response

    def create_profile(self, user_id: str, email: str, role: str) -> Dict[str, Any]:
        """Profile for a freshly registered user; nome defaults to the e-mail local part"""
        try:
            result = self.supabase.table("profile").insert({
                "user_id": user_id,
                "role": role,
                "nome": email.split("@", 1)[0]
            }).execute()
        except Exception as e:
            logger.error(f"Error creating profile for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Errore nella creazione del profilo")
        if not result.data:
            raise HTTPException(status_code=500, detail="Errore nella creazione del profilo")
        return result.data[0]

    def request_password_reset(self, email: str) -> None:
        """Send the recovery e-mail pointing back to the backoffice reset page"""
        try:
            self.auth_client.auth.reset_password_for_email(
                email, {"redirect_to": f"{settings.site_url}/reset-password"}
            )
        except Exception as e:
            raise HTTPException(status_code=400, detail=error_message(e))

    def update_password(self, user_id: str, password: str) -> None:
        """Set a new password (requires service role key)"""
        try:
            self.supabase.auth.admin.update_user_by_id(user_id, {"password": password})
        except Exception as e:
            raise HTTPException(status_code=400, detail=error_message(e))
