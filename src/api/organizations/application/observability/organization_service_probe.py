"""Domain probe for organization management operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class OrganizationServiceProbe(Protocol):
    """Domain probe for organization service operations."""

    def organization_created(
        self, organization_id: str, parent_id: str | None, level: int
    ) -> None:
        """Record that an organization was created."""
        ...

    def organization_updated(self, organization_id: str, operation: str) -> None:
        """Record a rename, settings update or status change."""
        ...

    def parent_not_found(self, parent_id: str) -> None:
        """Record that a child was requested under an invisible parent."""
        ...

    def cross_tenant_parent_rejected(self, parent_id: str) -> None:
        """Record that a parent of another tenant was refused."""
        ...

    def duplicate_organization_code(self, code: str) -> None:
        ...

    def with_context(self, context: ObservationContext) -> OrganizationServiceProbe:
        ...


class DefaultOrganizationServiceProbe:
    """Default implementation of OrganizationServiceProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(
        self, context: ObservationContext
    ) -> DefaultOrganizationServiceProbe:
        return DefaultOrganizationServiceProbe(logger=self._logger, context=context)

    def organization_created(
        self, organization_id: str, parent_id: str | None, level: int
    ) -> None:
        self._logger.info(
            "organization_created",
            organization_id=organization_id,
            parent_id=parent_id,
            level=level,
            **self._get_context_kwargs(),
        )

    def organization_updated(self, organization_id: str, operation: str) -> None:
        self._logger.info(
            "organization_updated",
            organization_id=organization_id,
            operation=operation,
            **self._get_context_kwargs(),
        )

    def parent_not_found(self, parent_id: str) -> None:
        self._logger.warning(
            "organization_parent_not_found",
            parent_id=parent_id,
            **self._get_context_kwargs(),
        )

    def cross_tenant_parent_rejected(self, parent_id: str) -> None:
        self._logger.warning(
            "organization_cross_tenant_parent_rejected",
            parent_id=parent_id,
            **self._get_context_kwargs(),
        )

    def duplicate_organization_code(self, code: str) -> None:
        self._logger.warning(
            "duplicate_organization_code",
            code=code,
            **self._get_context_kwargs(),
        )
