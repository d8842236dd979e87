from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    app_name: str = "Caption Gateway"
    app_env: str = "development"
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_reload: bool = False
    log_level: str = "INFO"

    api_prefix: str = "/api"
    api_v1_prefix: str = "/api/v1"

    allowed_origins: list[str] = Field(default_factory=lambda: ["*"])

    # The Next.js style names are accepted so one .env can serve both the frontend and this API.
    supabase_url: str = Field(default="", validation_alias=AliasChoices("SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL"))
    supabase_anon_key: str = Field(
        default="",
        validation_alias=AliasChoices("SUPABASE_ANON_KEY", "NEXT_PUBLIC_SUPABASE_ANON_KEY"),
    )
    supabase_timeout_seconds: float = 10.0
    session_cookie_name: str = "sb-access-token"

    storage_bucket: str = "images"
    max_upload_bytes: int = 10 * 1024 * 1024
    upload_cache_control_seconds: int = 3600

    caption_api_url: str = ""
    caption_api_key: str = ""
    caption_api_timeout_seconds: float = 30.0
    num_captions: int = 10

    gallery_limit: int = 20
    rate_captions_limit: int = 10

    google_client_id: str = Field(
        default="",
        validation_alias=AliasChoices("GOOGLE_CLIENT_ID", "NEXT_PUBLIC_GOOGLE_CLIENT_ID"),
    )

    @property
    def caption_api_enabled(self) -> bool:
        return bool(self.caption_api_url.strip() and self.caption_api_key.strip())

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url.strip() and self.supabase_anon_key.strip())

    @property
    def oauth_enabled(self) -> bool:
        return bool(self.google_client_id.strip())


@lru_cache
def get_settings() -> Settings:
    return Settings()
