"""Domain probe for organization repository operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class OrganizationRepositoryProbe(Protocol):
    """Domain probe for organization repository operations."""

    def organization_saved(self, organization_id: str, path: str) -> None:
        ...

    def organization_retrieved(self, organization_id: str) -> None:
        ...

    def organization_not_found(self, organization_id: str) -> None:
        ...

    def organizations_listed(self, query: str, count: int) -> None:
        ...

    def duplicate_organization_code(self, code: str) -> None:
        ...

    def with_context(
        self, context: ObservationContext
    ) -> OrganizationRepositoryProbe:
        ...


class DefaultOrganizationRepositoryProbe:
    """Default implementation of OrganizationRepositoryProbe using structlog."""

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
    ) -> DefaultOrganizationRepositoryProbe:
        return DefaultOrganizationRepositoryProbe(logger=self._logger, context=context)

    def organization_saved(self, organization_id: str, path: str) -> None:
        self._logger.info(
            "organization_saved",
            organization_id=organization_id,
            path=path,
            **self._get_context_kwargs(),
        )

    def organization_retrieved(self, organization_id: str) -> None:
        self._logger.debug(
            "organization_retrieved",
            organization_id=organization_id,
            **self._get_context_kwargs(),
        )

    def organization_not_found(self, organization_id: str) -> None:
        self._logger.debug(
            "organization_not_found",
            organization_id=organization_id,
            **self._get_context_kwargs(),
        )

    def organizations_listed(self, query: str, count: int) -> None:
        self._logger.debug(
            "organizations_listed",
            query=query,
            count=count,
            **self._get_context_kwargs(),
        )

    def duplicate_organization_code(self, code: str) -> None:
        self._logger.warning(
            "duplicate_organization_code",
            code=code,
            **self._get_context_kwargs(),
        )
