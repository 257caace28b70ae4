"""Domain probes for tenant resolution and admission.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantResolutionProbe(Protocol):
    """Domain probe for TenantResolver decisions."""

    def tenant_resolved(self, source: str, tenant_id: str) -> None:
        """Record that a request signal produced a candidate tenant."""
        ...

    def host_domain_unmatched(self, host: str, domain: str) -> None:
        """Record that a subdomain matched no tenant."""
        ...

    def no_tenant_signal(self, host: str | None) -> None:
        """Record that no request signal identified a tenant."""
        ...

    def with_context(self, context: ObservationContext) -> TenantResolutionProbe:
        """Create a new probe with observation context bound."""
        ...


class TenantAccessProbe(Protocol):
    """Domain probe for TenantAccessGuard decisions."""

    def tenant_admitted(self, tenant_id: str, source: str, status: str) -> None:
        """Record that a tenant passed the access guard."""
        ...

    def tenant_not_found(self, candidate: str | None) -> None:
        """Record that admission failed because no tenant matched."""
        ...

    def tenant_inactive(self, tenant_id: str, status: str) -> None:
        """Record that admission failed because the tenant is not accessible."""
        ...

    def with_context(self, context: ObservationContext) -> TenantAccessProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantResolutionProbe:
    """Default implementation of TenantResolutionProbe using structlog."""

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

    def with_context(
        self, context: ObservationContext
    ) -> DefaultTenantResolutionProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantResolutionProbe(logger=self._logger, context=context)

    def tenant_resolved(self, source: str, tenant_id: str) -> None:
        self._logger.debug(
            "tenant_resolved",
            source=source,
            candidate_tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def host_domain_unmatched(self, host: str, domain: str) -> None:
        self._logger.debug(
            "tenant_host_domain_unmatched",
            host=host,
            domain=domain,
            **self._get_context_kwargs(),
        )

    def no_tenant_signal(self, host: str | None) -> None:
        self._logger.info(
            "tenant_signal_missing",
            host=host,
            **self._get_context_kwargs(),
        )


class DefaultTenantAccessProbe:
    """Default implementation of TenantAccessProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTenantAccessProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantAccessProbe(logger=self._logger, context=context)

    def tenant_admitted(self, tenant_id: str, source: str, status: str) -> None:
        self._logger.debug(
            "tenant_admitted",
            tenant_id=tenant_id,
            source=source,
            status=status,
            **self._get_context_kwargs(),
        )

    def tenant_not_found(self, candidate: str | None) -> None:
        self._logger.warning(
            "tenant_admission_not_found",
            candidate_tenant_id=candidate,
            **self._get_context_kwargs(),
        )

    def tenant_inactive(self, tenant_id: str, status: str) -> None:
        self._logger.warning(
            "tenant_admission_inactive",
            tenant_id=tenant_id,
            status=status,
            **self._get_context_kwargs(),
        )
