"""
Tenant partitions inside the store.
"""

from __future__ import annotations

from typing import Any

# Shared tenant used when credentials cannot be verified.
DEFAULT_TENANT = "default"


def get_tenant(data: dict[str, Any], tenant_id: str) -> dict[str, Any]:
    """
    Return the partition for `tenant_id`, creating it on first reference.
    """
    tenant_id = (tenant_id or "").strip()
    if not tenant_id:
        raise ValueError("Tenant id is empty.")

    tenants = data.setdefault("tenants", {})
    tenant = tenants.get(tenant_id)
    if not isinstance(tenant, dict):
        tenant = {}
        tenants[tenant_id] = tenant
    if not isinstance(tenant.get("locations"), list):
        tenant["locations"] = []
    if not isinstance(tenant.get("devices"), list):
        tenant["devices"] = []
    return tenant


def peek_tenant(data: dict[str, Any], tenant_id: str) -> dict[str, Any]:
    """
    Read-only view of a partition. Does not add the tenant to `data`.
    """
    tenant = data.get("tenants", {}).get(tenant_id)
    if not isinstance(tenant, dict):
        return {"locations": [], "devices": []}
    return {
        "locations": tenant["locations"] if isinstance(tenant.get("locations"), list) else [],
        "devices": tenant["devices"] if isinstance(tenant.get("devices"), list) else [],
    }
