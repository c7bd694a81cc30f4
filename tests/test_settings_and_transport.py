from investment_dashboard.config import settings as settings_module
from investment_dashboard.config.settings import get_settings
from investment_dashboard.main import resolve_http_transport, resolve_transport_mode

_ENV_KEYS = (
    "PORT",
    "API_PREFIX",
    "ENCRYPTION_KEY",
    "ALPHAVANTAGE_API_KEY",
    "REACT_APP_ALPHA_VANTAGE_KEY",
    "GOLD_API_KEY",
    "REACT_APP_GOLD_API_KEY",
    "PRICE_CACHE_TTL_SECONDS",
    "CORS_ORIGINS",
)


def _clean_env(monkeypatch) -> None:
    monkeypatch.setattr(settings_module, "load_dotenv", lambda: False)
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_settings_defaults(monkeypatch) -> None:
    _clean_env(monkeypatch)
    settings = get_settings()
    assert settings.port == 3001
    assert settings.api_prefix == "/api"
    assert settings.encryption_key is None
    assert settings.price_cache_ttl_seconds == 300
    assert settings.cors_origins == ("*",)


def test_settings_read_environment(monkeypatch) -> None:
    _clean_env(monkeypatch)
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("API_PREFIX", "v1/")
    monkeypatch.setenv("ENCRYPTION_KEY", "  abc123  ")
    monkeypatch.setenv("REACT_APP_ALPHA_VANTAGE_KEY", "legacy-alpha")
    monkeypatch.setenv("GOLD_API_KEY", "gold")
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost:3000, https://dash.example")
    settings = get_settings()
    assert settings.port == 8080
    assert settings.api_prefix == "/v1"
    assert settings.encryption_key == "abc123"
    assert settings.alphavantage_api_key == "legacy-alpha"
    assert settings.gold_api_key == "gold"
    assert settings.cors_origins == ("http://localhost:3000", "https://dash.example")


def test_malformed_numbers_fall_back_to_defaults(monkeypatch) -> None:
    _clean_env(monkeypatch)
    monkeypatch.setenv("PORT", "not-a-port")
    monkeypatch.setenv("PRICE_CACHE_TTL_SECONDS", "")
    settings = get_settings()
    assert settings.port == 3001
    assert settings.price_cache_ttl_seconds == 300


def test_resolve_transport_mode() -> None:
    assert resolve_transport_mode("auto") == "http"
    assert resolve_transport_mode("stdio") == "stdio"
    assert resolve_transport_mode("http") == "http"


def test_resolve_http_transport_default() -> None:
    assert resolve_http_transport("invalid") == "sse"
    assert resolve_http_transport("streamable") == "streamable"
