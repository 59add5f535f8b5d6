"""Runtime configuration read from the environment (prefix ROUTE_NAV_) or .env."""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="ROUTE_NAV_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # AMap web-service key; AMAP_API_KEY is accepted for compatibility
    amap_key: str = Field(
        default="",
        validation_alias=AliasChoices("ROUTE_NAV_AMAP_KEY", "AMAP_API_KEY"),
    )
    amap_base_url: str = "https://restapi.amap.com"
    request_timeout: float = Field(default=10.0, gt=0)

    # Provider QPS discipline
    request_interval: float = Field(default=0.3, ge=0)
    retry_backoff: float = Field(default=0.5, ge=0)
    max_retries: int = Field(default=2, ge=0, le=10)

    log_level: str = "INFO"


def get_settings() -> Settings:
    return Settings()
