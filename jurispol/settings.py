from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    v = os.getenv(name)
    if v is None:
        return default
    try:
        return int(v)
    except ValueError:
        return default


def _env_list(name: str, default: str) -> List[str]:
    v = os.getenv(name, default)
    return [item.strip() for item in v.split(",") if item.strip()]


def _api_key() -> str:
    # API_KEY is the historical name; the SDK itself reads the other two.
    return os.getenv("API_KEY") or os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY") or ""


@dataclass(frozen=True)
class Settings:
    # LLM
    gemini_api_key: str = field(default_factory=_api_key)
    gemini_model: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")

    # Relay
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = _env_int("PORT", 3001)
    frontend_dir: str = os.getenv("FRONTEND_DIR", "dist")
    cors_origins: List[str] = field(default_factory=lambda: _env_list("CORS_ORIGINS", "*"))

    # Client
    api_url: str = os.getenv("API_URL", "http://localhost:3001")
    request_timeout: int = _env_int("REQUEST_TIMEOUT", 120)

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Observability
    otel_enabled: bool = _env_bool("OTEL_ENABLED", True)
    otel_endpoint: str = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4318")
    otel_service_name: str = os.getenv("OTEL_SERVICE_NAME", "jurispol-relay")


settings = Settings()
