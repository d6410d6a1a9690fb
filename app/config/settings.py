from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Required for auth admin operations (users, bans, invites)
    storage_bucket: str = "images"

    # Public URL of the backoffice, used in auth e-mail redirects
    site_url: str = "http://localhost:3000"

    # Session cookies
    session_cookie_secure: bool = False
    session_cookie_max_age: int = 60 * 60 * 24 * 7  # 7 days

    # App
    app_name: str = "ilpdg-backoffice"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"
    frontend_dir: Optional[str] = None  # built frontend served behind the page guard

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
