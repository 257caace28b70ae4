"""Shared kernel for the Bulwark bounded contexts.

Holds what every tenant-owned context depends on: the request-scoped tenant
context, the ScopeEnforcer that filters tenant-scoped models, and the domain
event dispatch port. Nothing here may import from ``tenancy`` or
``organizations``.
"""
