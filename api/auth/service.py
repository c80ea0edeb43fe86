"""
Tenant resolution.

Turns request credentials into a tenant id. When tokens cannot be verified
(auth disabled, no secret, or the verifier breaks at runtime) every request
resolves to the shared "default" tenant. The resolver instance carries that
state; it lives on `app.state` and reaches handlers through a dependency.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from core import settings
from core.tenants import DEFAULT_TENANT

from . import security

logger = logging.getLogger(__name__)


class TenantResolver:
    def __init__(self, *, enabled: bool, secret: str, algorithm: str) -> None:
        self.secret = secret
        self.algorithm = algorithm
        self.verification_available = bool(enabled and secret)
        if enabled and not secret:
            logger.warning("auth_degraded reason=%s tenant=%s", "JWT_SECRET not set", DEFAULT_TENANT)

    @classmethod
    def from_settings(cls) -> "TenantResolver":
        return cls(
            enabled=not settings.auth_disabled(),
            secret=settings.jwt_secret(),
            algorithm=settings.jwt_algorithm(),
        )

    def _degrade(self, reason: str) -> str:
        if self.verification_available:
            self.verification_available = False
            logger.warning("auth_degraded reason=%s tenant=%s", reason, DEFAULT_TENANT)
        return DEFAULT_TENANT

    def resolve(self, access_token: str | None) -> str:
        if not self.verification_available:
            return DEFAULT_TENANT

        if not access_token:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Missing Authorization header.",
            )

        try:
            payload = security.decode_access_token(
                access_token,
                secret=self.secret,
                algorithm=self.algorithm,
            )
            return security.tenant_from_payload(payload)
        except security.VerifierUnavailableError as exc:
            return self._degrade(str(exc))
        except security.AuthSecurityError as exc:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=str(exc),
            ) from exc
