"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple

from dotenv import load_dotenv

from business_finder.core.models import SearchConfig

logger = logging.getLogger(__name__)

DEFAULT_LAT = 49.8220544
DEFAULT_LNG = 19.0319995
DEFAULT_RADIUS = 20000.0
DEFAULT_BUSINESS_TYPES = ("car_repair",)
DEFAULT_SOCIAL_MEDIA_DOMAINS = (
    "facebook.com",
    "instagram.com",
    "twitter.com",
    "linkedin.com",
    "tiktok.com",
)


@dataclass(frozen=True)
class Settings:
    google_api_key: str
    default_lat: float = DEFAULT_LAT
    default_lng: float = DEFAULT_LNG
    default_radius: float = DEFAULT_RADIUS
    business_types: Tuple[str, ...] = DEFAULT_BUSINESS_TYPES
    social_media_domains: Tuple[str, ...] = DEFAULT_SOCIAL_MEDIA_DOMAINS
    batch_size: int = 5
    batch_delay_ms: int = 200
    export_results: bool = False
    worker_port: int = 9000

    def to_search_config(
        self,
        *,
        api_key: Optional[str] = None,
        batch_size: Optional[int] = None,
        batch_delay_ms: Optional[int] = None,
        run_timeout: Optional[float] = None,
    ) -> SearchConfig:
        """Build the per-run configuration, letting callers override selected values."""
        return SearchConfig(
            api_key=api_key if api_key is not None else self.google_api_key,
            batch_size=batch_size if batch_size is not None else self.batch_size,
            batch_delay_ms=batch_delay_ms if batch_delay_ms is not None else self.batch_delay_ms,
            run_timeout=run_timeout,
        )


def split_csv(raw: Optional[str]) -> Tuple[str, ...]:
    """Split a comma-separated value into stripped, non-empty items."""
    if not raw:
        return ()
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    google_api_key = os.getenv("GOOGLE_API_KEY", "")
    default_lat = float(os.getenv("DEFAULT_LAT", str(DEFAULT_LAT)))
    default_lng = float(os.getenv("DEFAULT_LNG", str(DEFAULT_LNG)))
    default_radius = float(os.getenv("DEFAULT_RADIUS", str(DEFAULT_RADIUS)))
    business_types = split_csv(os.getenv("BUSINESS_TYPES")) or DEFAULT_BUSINESS_TYPES
    social_media_domains = split_csv(os.getenv("SOCIAL_MEDIA_DOMAINS")) or DEFAULT_SOCIAL_MEDIA_DOMAINS
    batch_size = int(os.getenv("BATCH_SIZE", "5"))
    batch_delay_ms = int(os.getenv("BATCH_DELAY_MS", "200"))
    export_results = os.getenv("EXPORT_RESULTS", "false").lower() in {"1", "true", "yes"}
    worker_port = int(os.getenv("WORKER_PORT") or os.getenv("PORT") or "9000")

    if not google_api_key:
        logger.warning("GOOGLE_API_KEY is not configured; Google Places requests will fail.")

    return Settings(
        google_api_key=google_api_key,
        default_lat=default_lat,
        default_lng=default_lng,
        default_radius=default_radius,
        business_types=business_types,
        social_media_domains=social_media_domains,
        batch_size=batch_size,
        batch_delay_ms=batch_delay_ms,
        export_results=export_results,
        worker_port=worker_port,
    )
