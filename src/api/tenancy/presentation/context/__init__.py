"""Current-tenant route and models."""

from tenancy.presentation.context.routes import router

__all__ = ["router"]
