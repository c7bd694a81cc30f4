"""Environment-driven settings."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the dashboard backend."""

    app_name: str = "investment-dashboard"
    app_version: str = "1.0.0"
    transport_mode: str = "auto"
    http_transport: str = "sse"
    host: str = "0.0.0.0"
    port: int = 3001
    api_prefix: str = "/api"
    mcp_path: str = "/mcp"
    health_path: str = "/health"
    data_file: str = "investments.json"
    encryption_key: str | None = None
    alphavantage_api_key: str | None = None
    gold_api_key: str | None = None
    request_timeout_seconds: float = 15.0
    price_cache_ttl_seconds: int = 300
    provider_min_interval_seconds: float = 1.0
    cors_origins: tuple[str, ...] = field(default_factory=lambda: ("*",))
    log_level: str = "INFO"


def _as_int(value: str | None, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _as_float(value: str | None, default: float) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _as_optional(value: str | None) -> str | None:
    if value is None:
        return None
    clean = value.strip()
    return clean or None


def _as_origins(value: str | None) -> tuple[str, ...]:
    if not value:
        return ("*",)
    origins = tuple(item.strip() for item in value.split(",") if item.strip())
    return origins or ("*",)


def _normalize_prefix(value: str) -> str:
    clean = "/" + value.strip().strip("/")
    return "" if clean == "/" else clean


def get_settings() -> Settings:
    """Load runtime settings from environment variables."""
    load_dotenv()

    return Settings(
        transport_mode=os.getenv("TRANSPORT_MODE", "auto").strip().lower(),
        http_transport=os.getenv("HTTP_TRANSPORT", "sse").strip().lower(),
        host=os.getenv("HOST", "0.0.0.0"),
        port=_as_int(os.getenv("PORT"), 3001),
        api_prefix=_normalize_prefix(os.getenv("API_PREFIX", "/api")),
        mcp_path=os.getenv("MCP_PATH", "/mcp"),
        health_path=os.getenv("HEALTH_PATH", "/health"),
        data_file=os.getenv("DATA_FILE", "investments.json"),
        encryption_key=_as_optional(os.getenv("ENCRYPTION_KEY")),
        alphavantage_api_key=_as_optional(
            os.getenv("ALPHAVANTAGE_API_KEY") or os.getenv("REACT_APP_ALPHA_VANTAGE_KEY")
        ),
        gold_api_key=_as_optional(os.getenv("GOLD_API_KEY") or os.getenv("REACT_APP_GOLD_API_KEY")),
        request_timeout_seconds=_as_float(os.getenv("REQUEST_TIMEOUT_SECONDS"), 15.0),
        price_cache_ttl_seconds=_as_int(os.getenv("PRICE_CACHE_TTL_SECONDS"), 300),
        provider_min_interval_seconds=_as_float(os.getenv("PROVIDER_MIN_INTERVAL_SECONDS"), 1.0),
        cors_origins=_as_origins(os.getenv("CORS_ORIGINS")),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO",
    )
