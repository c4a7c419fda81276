from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Central settings object, resolved once at startup.
    The host provides env vars; locally you can use a .env file.

    The SerpAPI key is read from the first non-empty of:
        SERPAPI_KEY, SERP_API_KEY, SERPAPIKEY, SERP_KEY, SERPAPI_API_KEY
    No key means the primary source is skipped and only the catalog is used.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        populate_by_name=True,
        extra="ignore",
    )

    # Primary source (SerpAPI Google Shopping)
    SERPAPI_API_KEY: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "SERPAPI_KEY",
            "SERP_API_KEY",
            "SERPAPIKEY",
            "SERP_KEY",
            "SERPAPI_API_KEY",
        ),
    )
    SERPAPI_BASE: str = "https://serpapi.com/search.json"
    SERPAPI_ENGINE: str = "google_shopping"
    SERPAPI_HL: str = "en"
    SERPAPI_GL: str = "in"
    SERPAPI_NUM: int = 20

    # Fallback catalog
    FALLBACK_CATALOG_URL: str = "https://fakestoreapi.com/products"
    FALLBACK_CURRENCY: str = "USD"
    FALLBACK_MERCHANT: str = "FakeStore"

    # Result cache
    CACHE_TTL_SECONDS: float = 300.0
    CACHE_MAX_ENTRIES: Optional[int] = None

    HTTP_TIMEOUT_SECONDS: float = 60.0
    LOG_LEVEL: str = "INFO"

    # Versioning
    APP_VERSION: str = "0.1.0"
    BUILD_ID: str = "dev"

    @field_validator("SERPAPI_API_KEY", mode="before")
    @classmethod
    def _blank_key_is_none(cls, v):
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @property
    def primary_enabled(self) -> bool:
        return bool(self.SERPAPI_API_KEY)


# Other modules import this
settings = Settings()
