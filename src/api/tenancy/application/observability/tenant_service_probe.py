"""Domain probe for tenant management operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantServiceProbe(Protocol):
    """Domain probe for tenant service operations."""

    def tenant_created(self, tenant_id: str, domain: str, status: str) -> None:
        """Record that a tenant was provisioned."""
        ...

    def tenant_status_changed(
        self, tenant_id: str, operation: str, status: str
    ) -> None:
        """Record a state transition (activate, deactivate, suspend, expire)."""
        ...

    def tenant_updated(self, tenant_id: str, operation: str) -> None:
        """Record a rename or settings update."""
        ...

    def transition_rejected(self, tenant_id: str, operation: str, status: str) -> None:
        """Record that an illegal state transition was attempted."""
        ...

    def duplicate_tenant_domain(self, domain: str) -> None:
        """Record that provisioning failed on a taken domain."""
        ...

    def trials_expired(self, count: int) -> None:
        """Record the outcome of a trial expiry sweep."""
        ...

    def with_context(self, context: ObservationContext) -> TenantServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantServiceProbe:
    """Default implementation of TenantServiceProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultTenantServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantServiceProbe(logger=self._logger, context=context)

    def tenant_created(self, tenant_id: str, domain: str, status: str) -> None:
        self._logger.info(
            "tenant_created",
            tenant_id=tenant_id,
            domain=domain,
            status=status,
            **self._get_context_kwargs(),
        )

    def tenant_status_changed(
        self, tenant_id: str, operation: str, status: str
    ) -> None:
        self._logger.info(
            "tenant_status_changed",
            tenant_id=tenant_id,
            operation=operation,
            status=status,
            **self._get_context_kwargs(),
        )

    def tenant_updated(self, tenant_id: str, operation: str) -> None:
        self._logger.info(
            "tenant_updated",
            tenant_id=tenant_id,
            operation=operation,
            **self._get_context_kwargs(),
        )

    def transition_rejected(self, tenant_id: str, operation: str, status: str) -> None:
        self._logger.warning(
            "tenant_transition_rejected",
            tenant_id=tenant_id,
            operation=operation,
            status=status,
            **self._get_context_kwargs(),
        )

    def duplicate_tenant_domain(self, domain: str) -> None:
        self._logger.warning(
            "duplicate_tenant_domain",
            domain=domain,
            **self._get_context_kwargs(),
        )

    def trials_expired(self, count: int) -> None:
        self._logger.info(
            "tenant_trials_expired",
            count=count,
            **self._get_context_kwargs(),
        )
