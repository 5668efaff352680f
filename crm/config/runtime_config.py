"""Runtime configuration helpers for the CRM engines."""
from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional

STORE_BACKEND_MEMORY = "memory"
STORE_BACKEND_MONGO = "mongo"


def _get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(name, default)


def _require_env(name: str, default: Optional[str] = None) -> str:
    value = _get_env(name, default)
    if not value:
        raise RuntimeError(f"Missing env {name}")
    return value


def get_port() -> int:
    return int(_get_env("PORT") or "8080")


def get_store_backend() -> str:
    backend = (_get_env("CRM_STORE_BACKEND") or STORE_BACKEND_MEMORY).lower()
    if backend not in {STORE_BACKEND_MEMORY, STORE_BACKEND_MONGO}:
        raise RuntimeError(f"Unsupported CRM_STORE_BACKEND: {backend}")
    return backend


def get_mongo_uri() -> str:
    return _get_env("MONGO_URI") or "mongodb://localhost:27017"


def get_mongo_db() -> str:
    return _get_env("MONGO_DB") or "crm"


def get_dev_tenant_id() -> str:
    return _get_env("DEV_TENANT_ID") or "tenant-A"


def get_dev_user_id() -> str:
    return _get_env("DEV_USER_ID") or "dev-user"


def get_vertex_project() -> str:
    return _require_env("VERTEX_PROJECT")


def get_vertex_location() -> str:
    return _require_env("VERTEX_LOCATION", "us-central1")


def get_vertex_model() -> str:
    return _require_env("VERTEX_MODEL", "gemini-1.5-flash-002")


def get_vertex_image_model() -> str:
    return _get_env("VERTEX_IMAGE_MODEL") or "imagen-3.0-fast-generate-001"


def get_youtube_api_key() -> Optional[str]:
    return _get_env("YT_API_KEY")


def get_eleven_api_key() -> Optional[str]:
    return _get_env("ELEVEN_API_KEY")


def get_eleven_voice_id() -> str:
    return _get_env("ELEVEN_VOICE_ID") or "21m00Tcm4TlvDq8ikWAM"


def get_eleven_model() -> str:
    return _get_env("ELEVEN_MODEL") or "eleven_multilingual_v2"


@lru_cache(maxsize=1)
def config_snapshot() -> dict:
    """Return a cached snapshot of env-driven config (secrets reported as presence only)."""
    return {
        "store_backend": get_store_backend(),
        "mongo_db": get_mongo_db(),
        "dev_tenant_id": get_dev_tenant_id(),
        "vertex_project": _get_env("VERTEX_PROJECT"),
        "vertex_location": _get_env("VERTEX_LOCATION") or "us-central1",
        "vertex_model": _get_env("VERTEX_MODEL") or "gemini-1.5-flash-002",
        "vertex_image_model": get_vertex_image_model(),
        "youtube_search_enabled": bool(get_youtube_api_key()),
        "eleven_enabled": bool(get_eleven_api_key()),
    }
