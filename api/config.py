"""
Backend settings read from the environment (and `.env`)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple

from dotenv import load_dotenv

from analytics.insights import InsightClient, OpenAIInsightClient
from analytics.regions import DEFAULT_REGIONS, Region, load_regions

load_dotenv()

logger = logging.getLogger(__name__)


def _get_str(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _get_int(name: str, default: Optional[int]) -> Optional[int]:
    value = _get_str(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r", name, value)
        return default


@dataclass(frozen=True)
class Settings:
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    openai_base_url: Optional[str] = None
    insight_max_tokens: int = 300
    random_seed: Optional[int] = None
    regions_file: Optional[str] = None
    log_level: str = "INFO"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings(
        openai_api_key=_get_str("OPENAI_API_KEY"),
        openai_model=_get_str("OPENAI_MODEL", "gpt-4o-mini"),
        openai_base_url=_get_str("OPENAI_BASE_URL"),
        insight_max_tokens=max(1, _get_int("INSIGHT_MAX_TOKENS", 300)),
        random_seed=_get_int("INGEST_RANDOM_SEED", None),
        regions_file=_get_str("REGIONS_FILE"),
        log_level=(_get_str("LOG_LEVEL", "INFO") or "INFO").upper(),
    )


@lru_cache(maxsize=1)
def get_regions() -> Tuple[Region, ...]:
    """Active reference table: REGIONS_FILE when set, else the built-in one"""
    path = get_settings().regions_file
    if path:
        return load_regions(path)
    return DEFAULT_REGIONS


def get_insight_client() -> Optional[InsightClient]:
    settings = get_settings()
    if not settings.openai_api_key:
        return None
    return OpenAIInsightClient(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        base_url=settings.openai_base_url,
        max_tokens=settings.insight_max_tokens,
    )
