from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "Food Fantasy API"
    debug: bool = False
    database_url: str = "sqlite+aiosqlite:///./foodfantasy.db"
    sql_echo: bool = False
    cors_origins: List[str] = ["*"]

    # Seeded on startup as the first super admin
    super_admin_email: Optional[str] = None

    # PhonePe
    phonepe_merchant_id: Optional[str] = None
    phonepe_salt_key: Optional[str] = None
    phonepe_salt_index: str = "1"
    phonepe_base_url: str = "https://api-preprod.phonepe.com/apis/pg-sandbox/pg/v1/pay"
    phonepe_status_url: str = "https://api-preprod.phonepe.com/apis/pg-sandbox/pg/v1/status"
    phonepe_redirect_url: str = "http://localhost:5173/payment-success"
    phonepe_timeout_seconds: float = 30.0

    # Web push
    vapid_public_key: Optional[str] = None
    vapid_private_key: Optional[str] = None
    vapid_subject: str = "mailto:admin@example.com"
    push_timeout_seconds: float = 1.5

    # Menu cache; caching is off when unset
    redis_url: Optional[str] = None
    food_cache_ttl_seconds: int = 1800

    # S3-compatible object storage for food and offer images
    spaces_key: Optional[str] = None
    spaces_secret: Optional[str] = None
    spaces_region: str = "nyc3"
    spaces_bucket: Optional[str] = None
    spaces_endpoint: Optional[str] = None  # e.g. https://nyc3.digitaloceanspaces.com
    spaces_cdn_base: Optional[str] = None  # e.g. https://<bucket>.nyc3.cdn.digitaloceanspaces.com
    spaces_prefix: str = "prod"

    @property
    def push_enabled(self) -> bool:
        return bool(self.vapid_public_key and self.vapid_private_key)

    @property
    def payment_enabled(self) -> bool:
        return bool(self.phonepe_merchant_id and self.phonepe_salt_key)


settings = Settings()
