from __future__ import annotations

import json
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from app.domain.entities.units import NATIVE_TOKEN_ID


load_dotenv()


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


def _json(name: str) -> dict:
    value = _env(name)
    if not value:
        return {}
    return json.loads(value)


def _csv(name: str) -> frozenset[str]:
    value = _env(name, "") or ""
    return frozenset(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    postgres_dsn: str
    coingecko_api_base: str
    coingecko_timeout_seconds: float
    coingecko_cache_ttl_seconds: float
    native_coingecko_id: str
    price_overrides: dict
    token_list_url: str
    token_list_timeout_seconds: float
    token_list_cache_ttl_seconds: float
    always_valid_tokens: frozenset[str]
    node_api_base: str
    node_timeout_seconds: float
    slippage_bucket_width: int
    fee_projection_days: int
    pools_summary_window_hours: int
    recent_pools_days: int
    pools_stats_strategy: str
    log_level: str


def get_settings() -> Settings:
    return Settings(
        postgres_dsn=_env("POSTGRES_DSN", ""),
        coingecko_api_base=_env("COINGECKO_API_BASE", "https://api.coingecko.com/api/v3"),
        coingecko_timeout_seconds=float(_env("COINGECKO_TIMEOUT_SECONDS", "10")),
        coingecko_cache_ttl_seconds=float(_env("COINGECKO_CACHE_TTL_SECONDS", "300")),
        native_coingecko_id=_env("NATIVE_COINGECKO_ID", "ergo"),
        price_overrides=_json("PRICE_OVERRIDES"),
        token_list_url=_env(
            "TOKEN_LIST_URL",
            "https://raw.githubusercontent.com/spectrum-finance/default-token-list/master/src/tokens/ergo.json",
        ),
        token_list_timeout_seconds=float(_env("TOKEN_LIST_TIMEOUT_SECONDS", "10")),
        token_list_cache_ttl_seconds=float(_env("TOKEN_LIST_CACHE_TTL_SECONDS", "600")),
        always_valid_tokens=_csv("ALWAYS_VALID_TOKENS") | {NATIVE_TOKEN_ID},
        node_api_base=_env("NODE_API_BASE", "http://127.0.0.1:9053"),
        node_timeout_seconds=float(_env("NODE_TIMEOUT_SECONDS", "10")),
        slippage_bucket_width=int(_env("SLIPPAGE_BUCKET_WIDTH", "2")),
        fee_projection_days=int(_env("FEE_PROJECTION_DAYS", "365")),
        pools_summary_window_hours=int(_env("POOLS_SUMMARY_WINDOW_HOURS", "24")),
        recent_pools_days=int(_env("RECENT_POOLS_DAYS", "30")),
        pools_stats_strategy=_env("POOLS_STATS_STRATEGY", "naive"),
        log_level=_env("LOG_LEVEL", "INFO"),
    )
