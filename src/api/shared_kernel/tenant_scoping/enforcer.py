"""ScopeEnforcer: implicit tenant filtering for tenant-scoped models.

A model opts in by declaring the capability with :func:`tenant_scoped`.
The enforcer never relies on a base class; it consults that declaration at
every ORM operation of a :class:`TenantScopedSession`:

* SELECT statements get ``tenant_id = <current tenant>`` criteria for every
  tenant-scoped entity, including joined and aliased ones.
* ORM-enabled UPDATE and DELETE statements get the same WHERE clause, and
  an UPDATE may not assign the scope column to any other tenant.
* The unit of work populates ``tenant_id`` on new objects and refuses to
  flush objects that belong to another tenant.

Without an established tenant context any scoped operation raises
:class:`MissingTenantContextError`. Models that are not declared scoped
(the tenant registry itself) are untouched.
"""

from __future__ import annotations

from itertools import chain
from typing import Any, Callable, TypeVar, overload

from sqlalchemy import Table, event, false, inspect
from sqlalchemy.orm import ORMExecuteState, Session, with_loader_criteria
from sqlalchemy.orm.attributes import get_history

from shared_kernel.tenant_scoping.context import current_tenant_id, require_tenant_id
from shared_kernel.tenant_scoping.exceptions import (
    MissingTenantContextError,
    TenantScopeViolation,
)
from shared_kernel.tenant_scoping.observability import (
    DefaultScopeEnforcerProbe,
    ScopeEnforcerProbe,
)

T = TypeVar("T", bound=type)

_SCOPE_ATTRIBUTE = "__tenant_scope_column__"

_scoped_models: dict[type, str] = {}


@overload
def tenant_scoped(cls: T) -> T: ...


@overload
def tenant_scoped(*, column: str = "tenant_id") -> Callable[[T], T]: ...


def tenant_scoped(cls: Any = None, *, column: str = "tenant_id") -> Any:
    """Declare a mapped class as tenant-scoped.

    Usable bare (``@tenant_scoped``) or with the name of the attribute that
    holds the owning tenant (``@tenant_scoped(column="owner_tenant_id")``).

    Raises:
        TypeError: If the class has no mapped attribute named ``column``.
    """

    def decorate(model: T) -> T:
        if column not in inspect(model).attrs:
            raise TypeError(
                f"{model.__name__} has no mapped attribute {column!r} "
                "and cannot be tenant scoped"
            )
        setattr(model, _SCOPE_ATTRIBUTE, column)
        _scoped_models[model] = column
        return model

    if cls is None:
        return decorate
    return decorate(cls)


def scope_column(model: type) -> str | None:
    """Return the tenant attribute of a scoped model, or None if unscoped."""
    return getattr(model, _SCOPE_ATTRIBUTE, None)


def registered_models() -> tuple[type, ...]:
    """All classes declared with :func:`tenant_scoped`."""
    return tuple(_scoped_models)


def with_tenant_scope(statement: Any, *entities: Any) -> Any:
    """Explicitly restrict ``statement`` to the current tenant.

    ORM statements on a TenantScopedSession are filtered automatically. This
    hook covers Core statements (and sessions outside the enforcer) by adding
    ``<entity>.tenant_id = <current tenant>`` for each given entity, which
    may be a tenant-scoped class or a Table with a ``tenant_id`` column.

    Raises:
        MissingTenantContextError: If no tenant context is established.
        ValueError: If an entity is not tenant scoped.
    """
    tenant_id = require_tenant_id("with_tenant_scope")
    for entity in entities:
        if isinstance(entity, Table):
            if "tenant_id" not in entity.c:
                raise ValueError(f"Table {entity.name!r} has no tenant_id column")
            statement = statement.where(entity.c.tenant_id == tenant_id)
            continue
        column = scope_column(entity)
        if column is None:
            raise ValueError(f"{entity!r} is not tenant scoped")
        statement = statement.where(getattr(entity, column) == tenant_id)
    return statement


class ScopeEnforcer:
    """Installs tenant filtering on a Session class via ORM events."""

    def __init__(self, probe: ScopeEnforcerProbe | None = None):
        self._probe = probe or DefaultScopeEnforcerProbe()

    def install(self, session_class: type[Session]) -> None:
        """Attach the enforcer's listeners to ``session_class``."""
        event.listen(session_class, "do_orm_execute", self._on_execute)
        event.listen(session_class, "before_flush", self._on_flush)

    def _on_execute(self, state: ORMExecuteState) -> None:
        if state.is_select:
            # Lazy and refresh loads inherit the criteria of the originating query.
            if state.is_column_load or state.is_relationship_load:
                return
            self._scope_select(state)
        elif state.is_update or state.is_delete:
            self._scope_bulk_write(state)
        elif state.is_insert:
            self._check_bulk_insert(state)

    def _scope_select(self, state: ORMExecuteState) -> None:
        tenant_id = current_tenant_id()
        if tenant_id is None:
            for mapper in state.all_mappers:
                if scope_column(mapper.class_) is not None:
                    self._probe.missing_tenant_context("select", mapper.class_.__name__)
                    raise MissingTenantContextError("select", mapper.class_.__name__)

        options = []
        for model, column in _scoped_models.items():
            if tenant_id is None:
                # Scoped entities reached only through joins or subqueries
                # match nothing without a tenant.
                criteria = false()
            else:
                criteria = getattr(model, column) == tenant_id
            options.append(with_loader_criteria(model, criteria, include_aliases=True))
        if options:
            state.statement = state.statement.options(*options)

    def _scope_bulk_write(self, state: ORMExecuteState) -> None:
        mapper = state.bind_mapper
        if mapper is None:
            return
        column = scope_column(mapper.class_)
        if column is None:
            return
        operation = "update" if state.is_update else "delete"
        entity = mapper.class_.__name__
        tenant_id = current_tenant_id()
        if tenant_id is None:
            self._probe.missing_tenant_context(operation, entity)
            raise MissingTenantContextError(operation, entity)
        if state.is_update:
            self._check_assigned_tenant(state, entity, column, tenant_id)
        state.statement = state.statement.where(
            getattr(mapper.class_, column) == tenant_id
        )

    def _check_assigned_tenant(
        self, state: ORMExecuteState, entity: str, column: str, tenant_id: str
    ) -> None:
        statement = state.statement
        assigned = list((getattr(statement, "_values", None) or {}).items())
        assigned.extend(getattr(statement, "_ordered_values", None) or ())
        params = state.parameters
        rows = params if isinstance(params, list) else [params] if params else []
        for row in rows:
            assigned.extend(row.items())

        for key, value in assigned:
            if getattr(key, "key", key) != column:
                continue
            # Only a bound literal equal to the current tenant is accepted.
            value = getattr(value, "effective_value", value)
            if value != tenant_id:
                offending = value if isinstance(value, str) else None
                self._probe.scope_violation("update", entity, tenant_id, offending)
                raise TenantScopeViolation(entity, tenant_id, offending)

    def _check_bulk_insert(self, state: ORMExecuteState) -> None:
        mapper = state.bind_mapper
        if mapper is None:
            return
        column = scope_column(mapper.class_)
        if column is None:
            return
        entity = mapper.class_.__name__
        tenant_id = current_tenant_id()
        if tenant_id is None:
            self._probe.missing_tenant_context("insert", entity)
            raise MissingTenantContextError("insert", entity)

        params = state.parameters
        rows = params if isinstance(params, list) else [params] if params else []
        # Inline VALUES cannot be inspected, so scoped bulk inserts must pass
        # their rows as parameters.
        if not rows:
            self._probe.scope_violation("insert", entity, tenant_id, None)
            raise TenantScopeViolation(entity, tenant_id, None)
        for row in rows:
            if row.get(column) != tenant_id:
                self._probe.scope_violation("insert", entity, tenant_id, row.get(column))
                raise TenantScopeViolation(entity, tenant_id, row.get(column))

    def _on_flush(self, session: Session, flush_context: Any, instances: Any) -> None:
        tenant_id = current_tenant_id()

        for obj in session.new:
            column = scope_column(type(obj))
            if column is None:
                continue
            entity = type(obj).__name__
            if tenant_id is None:
                self._probe.missing_tenant_context("insert", entity)
                raise MissingTenantContextError("insert", entity)
            value = getattr(obj, column)
            if value is None:
                setattr(obj, column, tenant_id)
                self._probe.tenant_id_populated(entity, tenant_id)
            elif value != tenant_id:
                self._probe.scope_violation("insert", entity, tenant_id, value)
                raise TenantScopeViolation(entity, tenant_id, value)

        for obj in chain(session.dirty, session.deleted):
            column = scope_column(type(obj))
            if column is None:
                continue
            operation = "delete" if obj in session.deleted else "update"
            entity = type(obj).__name__
            if tenant_id is None:
                self._probe.missing_tenant_context(operation, entity)
                raise MissingTenantContextError(operation, entity)
            history = get_history(obj, column)
            # The owning tenant is immutable once persisted.
            original = history.deleted[0] if history.deleted else getattr(obj, column)
            offending = original if original != tenant_id else getattr(obj, column)
            if offending != tenant_id:
                self._probe.scope_violation(operation, entity, tenant_id, offending)
                raise TenantScopeViolation(entity, tenant_id, offending)


class TenantScopedSession(Session):
    """Session whose ORM operations pass through the ScopeEnforcer."""


ScopeEnforcer().install(TenantScopedSession)
