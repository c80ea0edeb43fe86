"""
Auth dependencies for protected FastAPI routes.
"""

from __future__ import annotations

from fastapi import Depends, Header, HTTPException, Request, status

from core.tenants import DEFAULT_TENANT

from .service import TenantResolver


def _extract_bearer_token(authorization: str | None) -> str | None:
    raw = (authorization or "").strip()
    if not raw:
        return None

    parts = raw.split(" ", 1)
    if len(parts) != 2:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid Authorization header format.",
        )

    scheme, token = parts[0].strip().lower(), parts[1].strip()
    if scheme != "bearer" or not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization must be: Bearer <token>.",
        )
    return token


def get_tenant_resolver(request: Request) -> TenantResolver:
    return request.app.state.tenant_resolver


async def get_current_tenant(
    authorization: str | None = Header(default=None),
    resolver: TenantResolver = Depends(get_tenant_resolver),
) -> str:
    # Headers are ignored entirely once verification is unavailable.
    if not resolver.verification_available:
        return DEFAULT_TENANT
    return resolver.resolve(_extract_bearer_token(authorization))
