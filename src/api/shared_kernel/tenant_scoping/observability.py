"""Domain probe for tenant scope enforcement.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ScopeEnforcerProbe(Protocol):
    """Domain probe for ScopeEnforcer decisions."""

    def tenant_id_populated(self, entity: str, tenant_id: str) -> None:
        """Record that a new row received the current tenant id."""
        ...

    def missing_tenant_context(self, operation: str, entity: str) -> None:
        """Record that a scoped operation was refused for lack of a tenant."""
        ...

    def scope_violation(
        self,
        operation: str,
        entity: str,
        expected_tenant_id: str,
        actual_tenant_id: str | None,
    ) -> None:
        """Record that a write targeted a row outside the current tenant."""
        ...

    def with_context(self, context: ObservationContext) -> ScopeEnforcerProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultScopeEnforcerProbe:
    """Default implementation of ScopeEnforcerProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultScopeEnforcerProbe:
        """Create a new probe with observation context bound."""
        return DefaultScopeEnforcerProbe(logger=self._logger, context=context)

    def tenant_id_populated(self, entity: str, tenant_id: str) -> None:
        self._logger.debug(
            "tenant_scope_tenant_id_populated",
            entity=entity,
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def missing_tenant_context(self, operation: str, entity: str) -> None:
        self._logger.error(
            "tenant_scope_missing_context",
            operation=operation,
            entity=entity,
            **self._get_context_kwargs(),
        )

    def scope_violation(
        self,
        operation: str,
        entity: str,
        expected_tenant_id: str,
        actual_tenant_id: str | None,
    ) -> None:
        self._logger.warning(
            "tenant_scope_violation",
            operation=operation,
            entity=entity,
            expected_tenant_id=expected_tenant_id,
            actual_tenant_id=actual_tenant_id,
            **self._get_context_kwargs(),
        )
