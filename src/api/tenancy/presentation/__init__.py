"""Tenancy presentation layer.

Tenant management (unscoped) and the current-tenant endpoint (scoped) are
separate routers so each can be read on its own.
"""

from __future__ import annotations

from fastapi import APIRouter

from tenancy.presentation import context, tenants

router = APIRouter()

router.include_router(tenants.router)
router.include_router(context.router)

__all__ = ["router"]
