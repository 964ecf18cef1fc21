from dataclasses import dataclass
from typing import Optional

from django.conf import settings

DEFAULT_COUNTRIES_API_URL = (
    "https://restcountries.com/v2/all?fields=name,capital,region,population,flag,currencies"
)
DEFAULT_EXCHANGE_API_URL = "https://open.er-api.com/v6/latest/USD"


@dataclass(frozen=True)
class RefreshConfig:
    """Everything the refresh pipeline needs to know about its environment."""

    countries_url: str = DEFAULT_COUNTRIES_API_URL
    exchange_url: str = DEFAULT_EXCHANGE_API_URL
    timeout: float = 10
    cache_dir: str = "cache"
    font_path: Optional[str] = None
    chunk_size: int = 50
    lock_timeout: int = 600

    @classmethod
    def from_settings(cls) -> "RefreshConfig":
        return cls(
            countries_url=getattr(settings, "COUNTRIES_API_URL", DEFAULT_COUNTRIES_API_URL),
            exchange_url=getattr(settings, "EXCHANGE_API_URL", DEFAULT_EXCHANGE_API_URL),
            timeout=getattr(settings, "EXTERNAL_API_TIMEOUT", 10),
            cache_dir=getattr(settings, "SUMMARY_CACHE_DIR", "cache"),
            font_path=getattr(settings, "SUMMARY_FONT_PATH", None),
            chunk_size=getattr(settings, "REFRESH_CHUNK_SIZE", 50),
            lock_timeout=getattr(settings, "REFRESH_LOCK_TIMEOUT", 600),
        )
