"""
Process configuration read from environment variables.

Each setting is a small function so tests can change the environment with
`monkeypatch.setenv` and the next call picks it up.
"""

from __future__ import annotations

import os
from pathlib import Path

DEFAULT_DATA_FILE = Path(__file__).resolve().parent.parent / "storage" / "locations.json"


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_bool(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() == "true"


def port() -> int:
    return _env_int("PORT", 3000)


def host() -> str:
    return os.environ.get("HOST", "0.0.0.0").strip() or "0.0.0.0"


def base_path() -> str:
    # "/petone/" and "/petone" both mean the same prefix.
    return os.environ.get("BASE_PATH", "").strip().rstrip("/")


def data_file() -> Path:
    raw = os.environ.get("DATA_FILE", "").strip()
    return Path(raw) if raw else DEFAULT_DATA_FILE


def auth_disabled() -> bool:
    return _env_bool("AUTH_DISABLED")


def jwt_secret() -> str:
    # No default: an unset secret means tokens cannot be verified.
    return os.environ.get("JWT_SECRET", "").strip()


def jwt_algorithm() -> str:
    return os.environ.get("JWT_ALG", "HS256").strip() or "HS256"


def access_token_expire_minutes() -> int:
    return _env_int("ACCESS_TOKEN_EXPIRE_MIN", 60)
