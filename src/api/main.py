"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from infrastructure.database.dependencies import close_database_connections
from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultStartupProbe
from infrastructure.settings import get_settings
from infrastructure.version import __version__
from organizations.presentation import router as organizations_router
from shared_kernel.tenant_scoping import (
    MissingTenantContextError,
    TenantScopeViolation,
    registered_models,
)
from tenancy.presentation import router as tenancy_router


@asynccontextmanager
async def bulwark_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Logging configuration
    - Database engine lifecycle (created lazily, disposed on shutdown)
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    probe = DefaultStartupProbe()
    probe.application_started(
        settings.app_name,
        sorted(model.__name__ for model in registered_models()),
    )

    yield

    await close_database_connections()
    probe.application_stopped(settings.app_name)


app = FastAPI(
    title="Bulwark API",
    description="Multi-tenant isolation for organization hierarchies",
    version=__version__,
    lifespan=bulwark_lifespan,
)


@app.exception_handler(TenantScopeViolation)
async def tenant_scope_violation_handler(
    request: Request, exc: TenantScopeViolation
) -> JSONResponse:
    """Report rows of another tenant exactly like missing rows."""
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": "Not found"},
    )


@app.exception_handler(MissingTenantContextError)
async def missing_tenant_context_handler(
    request: Request, exc: MissingTenantContextError
) -> JSONResponse:
    """A scoped operation reached the database without a tenant context."""
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Tenant context required"},
    )


app.include_router(tenancy_router, prefix="/v1")
app.include_router(organizations_router, prefix="/v1")


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}
