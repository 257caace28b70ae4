"""TenantResolver: derive a candidate tenant from request signals.

Signals are tried in a fixed order and the first match wins:

1. Host: with at least ``min_host_labels`` dot-separated labels, the leftmost
   label is looked up as a tenant domain (``acme.example.com`` -> ``acme``).
2. Explicit header: its value is used as the candidate id as-is.
3. Authenticated principal: its ``tenant_id`` attribute, if any.

The resolver only proposes a candidate. Existence and status are checked by
the TenantAccessGuard.
"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from typing import Any

from shared_kernel.tenant_scoping import TenantSource
from tenancy.application.observability import (
    DefaultTenantResolutionProbe,
    TenantResolutionProbe,
)
from tenancy.ports.repositories import ITenantDirectory


@dataclass(frozen=True)
class RequestSignals:
    """Tenant-identifying signals extracted from an inbound request.

    Attributes:
        host: The Host header, optionally with a port
        tenant_header: Value of the explicit tenant header, if present
        principal: Authenticated identity, if any; a ``tenant_id``
            attribute is used as a claim
    """

    host: str | None = None
    tenant_header: str | None = None
    principal: Any | None = None


@dataclass(frozen=True)
class TenantCandidate:
    """A tenant identifier proposed by the resolver, not yet validated."""

    tenant_id: str
    source: TenantSource


def _strip_port(host: str) -> str:
    host = host.strip()
    if host.startswith("["):
        # Bracketed IPv6 literal, optionally followed by a port
        return host[1 : host.find("]")] if "]" in host else host
    return host.rsplit(":", 1)[0] if host.count(":") == 1 else host


def _is_ip_address(host: str) -> bool:
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True


class TenantResolver:
    """Resolves at most one candidate tenant per request."""

    def __init__(
        self,
        directory: ITenantDirectory,
        min_host_labels: int = 3,
        probe: TenantResolutionProbe | None = None,
    ):
        self._directory = directory
        self._min_host_labels = min_host_labels
        self._probe = probe or DefaultTenantResolutionProbe()

    async def resolve(self, signals: RequestSignals) -> TenantCandidate | None:
        """Return the candidate tenant for a request, or None."""
        candidate = await self._from_host(signals.host)
        if candidate is None:
            candidate = self._from_header(signals.tenant_header)
        if candidate is None:
            candidate = self._from_principal(signals.principal)

        if candidate is None:
            self._probe.no_tenant_signal(signals.host)
        else:
            self._probe.tenant_resolved(candidate.source, candidate.tenant_id)
        return candidate

    def subdomain_of(self, host: str | None) -> str | None:
        """Return the leftmost host label when the host is long enough."""
        if not host:
            return None
        hostname = _strip_port(host).rstrip(".").lower()
        if not hostname or _is_ip_address(hostname):
            return None
        labels = hostname.split(".")
        if len(labels) < self._min_host_labels or not labels[0]:
            return None
        return labels[0]

    async def _from_host(self, host: str | None) -> TenantCandidate | None:
        domain = self.subdomain_of(host)
        if domain is None:
            return None
        tenant = await self._directory.get_by_domain(domain)
        if tenant is None:
            assert host is not None
            self._probe.host_domain_unmatched(host, domain)
            return None
        return TenantCandidate(tenant_id=tenant.id.value, source="host")

    @staticmethod
    def _from_header(value: str | None) -> TenantCandidate | None:
        if value is None or not value.strip():
            return None
        return TenantCandidate(tenant_id=value.strip(), source="header")

    @staticmethod
    def _from_principal(principal: Any | None) -> TenantCandidate | None:
        if principal is None:
            return None
        tenant_id = getattr(principal, "tenant_id", None)
        if not tenant_id:
            return None
        return TenantCandidate(tenant_id=str(tenant_id), source="principal")
