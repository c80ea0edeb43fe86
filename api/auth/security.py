"""
Access token helpers (PyJWT).

Tokens carry the tenant id in `sub`. Issuing tokens to users is handled by the
identity provider; `build_access_token` exists for tooling and tests.
"""

from __future__ import annotations

import time
from typing import Any

import jwt
from jwt.algorithms import get_default_algorithms

from core import settings


class AuthSecurityError(RuntimeError):
    pass


class VerifierUnavailableError(AuthSecurityError):
    """Tokens cannot be verified at all (missing secret, unusable algorithm or key)."""


def now_epoch_s() -> int:
    return int(time.time())


def build_access_token(
    tenant_id: str,
    *,
    secret: str | None = None,
    algorithm: str | None = None,
    expires_in_s: int | None = None,
) -> str:
    issued_at = now_epoch_s()
    if expires_in_s is None:
        expires_in_s = settings.access_token_expire_minutes() * 60

    payload = {
        "sub": str(tenant_id),
        "type": "access",
        "iat": issued_at,
        "exp": issued_at + expires_in_s,
    }
    return jwt.encode(
        payload,
        secret if secret is not None else settings.jwt_secret(),
        algorithm=algorithm or settings.jwt_algorithm(),
    )


def decode_access_token(token: str, *, secret: str, algorithm: str) -> dict[str, Any]:
    raw = (token or "").strip()
    if not raw:
        raise AuthSecurityError("Access token is empty.")
    if not secret:
        raise VerifierUnavailableError("JWT_SECRET is not set.")
    if algorithm not in get_default_algorithms():
        raise VerifierUnavailableError(f"Unsupported JWT algorithm: {algorithm}")

    try:
        payload = jwt.decode(raw, secret, algorithms=[algorithm])
    except jwt.InvalidKeyError as exc:
        raise VerifierUnavailableError(f"JWT key is unusable: {exc}") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthSecurityError("Invalid access token.") from exc

    token_type = str(payload.get("type") or "").strip().lower()
    if token_type != "access":
        raise AuthSecurityError("Token is not an access token.")

    return payload


def tenant_from_payload(payload: dict[str, Any]) -> str:
    subject = str(payload.get("sub") or "").strip()
    if not subject:
        raise AuthSecurityError("Invalid access token subject.")
    return subject
