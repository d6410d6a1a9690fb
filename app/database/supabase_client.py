from fastapi import HTTPException
from supabase import create_client, Client, ClientOptions
from app.config import settings


class SupabaseClient:
    _client: Client = None
    _service_client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        if cls._client is None:
            cls._client = create_client(settings.supabase_url, settings.supabase_key)
        return cls._client

    @classmethod
    def get_service_client(cls) -> Client:
        """Client with service_role key; bypasses RLS. Used for table, storage and admin operations."""
        if cls._service_client is None and settings.supabase_service_role_key:
            cls._service_client = create_client(
                settings.supabase_url, settings.supabase_service_role_key
            )
        return cls._service_client or cls.get_client()

    @classmethod
    def get_admin_client(cls) -> Client:
        """Service client for auth.admin calls; these never work with the anon key."""
        if not settings.supabase_service_role_key and cls._service_client is None:
            raise HTTPException(status_code=500, detail="Service role key non configurata")
        return cls.get_service_client()

    @classmethod
    def create_auth_client(cls) -> Client:
        """Fresh anon client for a single sign-in flow; never shared between requests."""
        return create_client(
            settings.supabase_url,
            settings.supabase_key,
            options=ClientOptions(auto_refresh_token=False, persist_session=False),
        )

    @classmethod
    def reset_client(cls):
        cls._client = None
        cls._service_client = None


def get_supabase() -> Client:
    return SupabaseClient.get_service_client()


def get_admin_supabase() -> Client:
    return SupabaseClient.get_admin_client()


def get_auth_client() -> Client:
    return SupabaseClient.create_auth_client()
