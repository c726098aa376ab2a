from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

INVENTORY_BACKENDS = ("snapshot", "legacy")
MAX_INVENTORY_PAGE_SIZE = 5000


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    steam_api_key: Optional[str] = Field(default=None, validation_alias="STEAM_API_KEY")
    inventory_backend: str = Field(default="snapshot", validation_alias="INVENTORY_BACKEND")
    app_id: int = Field(default=730, validation_alias="STEAM_APP_ID")
    inventory_page_size: int = Field(default=MAX_INVENTORY_PAGE_SIZE, validation_alias="INVENTORY_PAGE_SIZE")
    inventory_language: str = Field(default="english", validation_alias="INVENTORY_LANGUAGE")
    request_timeout_s: float = Field(default=15, validation_alias="REQUEST_TIMEOUT_S")
    user_agent: str = Field(default="CS2InventoryExport/1.0", validation_alias="USER_AGENT")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    port: int = Field(default=5000, validation_alias="PORT")

    @field_validator("steam_api_key", mode="after")
    @classmethod
    def blank_key_is_missing(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None

    @field_validator("inventory_backend", mode="after")
    @classmethod
    def normalize_backend(cls, value: str) -> str:
        value = (value or "").strip().lower()
        if value not in INVENTORY_BACKENDS:
            raise ValueError(f"inventory backend must be one of {', '.join(INVENTORY_BACKENDS)}")
        return value

    @field_validator("inventory_page_size", mode="after")
    @classmethod
    def cap_page_size(cls, value: int) -> int:
        return min(max(value, 1), MAX_INVENTORY_PAGE_SIZE)

    @field_validator("log_level", mode="after")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.upper() if value else "INFO"


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    return AppConfig()
