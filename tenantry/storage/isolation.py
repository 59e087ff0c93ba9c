# Copyright (c) 2026 Tenantry Contributors. All Rights Reserved.

"""
Tenant Isolation — Read filtering and write stamping for tenant-scoped models.

Two SQLAlchemy session hooks do all the work:

  - do_orm_execute: every ORM SELECT / UPDATE / DELETE gets
    ``tenant_id == <active tenant>`` for each registered model, computed from
    the session's context at execution time. No tenant → no criteria.
    ORM INSERT statements on scoped models have their tenant_id resolved
    with the same rules as flushed objects.
  - before_flush: new tenant-scoped objects receive the active tenant_id,
    existing ones may never change owner, and audit timestamps are filled.

Handlers never write tenant predicates themselves.
"""

from __future__ import annotations

import logging
import re
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import event
from sqlalchemy.exc import InvalidRequestError
from sqlalchemy.orm import ORMExecuteState, Session, with_loader_criteria
from sqlalchemy.orm.attributes import get_history

from tenantry.core.config import StampPolicy, settings
from tenantry.core.errors import (
    MissingTenantContextError,
    TenantMismatchError,
    TenantReassignmentError,
)
from tenantry.core.tenant import RequestTenantContext, TenantId
from tenantry.storage.registry import TENANT_SCOPED_MODELS, is_tenant_scoped

logger = logging.getLogger("tenantry.isolation")

# Bind names of tenant_id in a compiled INSERT (single or multi-row VALUES)
_TENANT_BIND = re.compile(r"^tenant_id(_m\d+)?$")


class TenantSyncSession(Session):
    """Sync session carrying the request's tenant context and stamp policy."""

    def __init__(
        self,
        *args: Any,
        tenant_context: RequestTenantContext,
        stamp_policy: Optional[StampPolicy] = None,
        **kw: Any,
    ) -> None:
        if not isinstance(tenant_context, RequestTenantContext):
            raise TypeError("TenantSyncSession requires a RequestTenantContext")
        super().__init__(*args, **kw)
        self.info["tenant_context"] = tenant_context
        self.info["stamp_policy"] = StampPolicy(stamp_policy or settings.TENANT_STAMP_POLICY)

    @property
    def tenant_context(self) -> RequestTenantContext:
        return self.info["tenant_context"]

    @property
    def stamp_policy(self) -> StampPolicy:
        return self.info["stamp_policy"]


def _coerce_tenant_id(entity: str, value: Any) -> Optional[uuid.UUID]:
    if value is None or isinstance(value, uuid.UUID):
        return value
    if isinstance(value, str):
        try:
            return uuid.UUID(value)
        except ValueError:
            pass
    raise TypeError(f"{entity}.tenant_id must be a UUID, got {value!r}")


def _is_empty(tenant_id: Optional[uuid.UUID]) -> bool:
    return tenant_id is None or tenant_id.int == 0


def tenant_criteria(tenant_id: TenantId) -> list:
    """Loader criteria constraining every registered model to tenant_id."""
    return [
        with_loader_criteria(
            model,
            lambda cls: cls.tenant_id == tenant_id,
            include_aliases=True,
        )
        for model in TENANT_SCOPED_MODELS
    ]


def resolve_owner(
    entity: str,
    supplied: Any,
    active: Optional[TenantId],
    policy: StampPolicy,
) -> TenantId:
    """The tenant_id a new row of `entity` is stored under."""
    supplied = _coerce_tenant_id(entity, supplied)

    if _is_empty(supplied):
        if active is None:
            raise MissingTenantContextError(entity)
        return active

    if active is None or supplied == active:
        return supplied

    logger.warning(
        "New %s carries tenant_id %s different from the active tenant (policy=%s)",
        entity, supplied, policy.value,
        extra={"tenant_id": active, "stamp_policy": policy.value},
    )
    if policy is StampPolicy.REJECT_FOREIGN:
        raise TenantMismatchError(entity, supplied, active)
    if policy is StampPolicy.OVERWRITE:
        return active
    return supplied


def stamp_tenant(obj: Any, active: Optional[TenantId], policy: StampPolicy) -> None:
    """Assign or check the owner of a new tenant-scoped object."""
    obj.tenant_id = resolve_owner(type(obj).__name__, obj.tenant_id, active, policy)


def _stamp_insert_statement(
    state: ORMExecuteState,
    active: Optional[TenantId],
    policy: StampPolicy,
) -> None:
    """Apply the flush-time ownership rules to an ORM INSERT statement."""
    entity = state.bind_mapper.class_.__name__
    params = state.parameters

    # insert(Model) with parameter dictionaries (single row or executemany)
    if params:
        rows = params if isinstance(params, (list, tuple)) else [params]
        for row in rows:
            row["tenant_id"] = resolve_owner(entity, row.get("tenant_id"), active, policy)
        return

    # insert(Model).values(...)
    supplied = [
        value for key, value in state.statement.compile().params.items()
        if _TENANT_BIND.match(key)
    ]
    if len(supplied) > 1:
        raise InvalidRequestError(
            f"Multi-row VALUES inserts into {entity} are not supported; "
            "pass a list of parameter dictionaries instead"
        )
    current = supplied[0] if supplied else None
    owner = resolve_owner(entity, current, active, policy)
    if owner != current:
        state.statement = state.statement.values(tenant_id=owner)


@event.listens_for(TenantSyncSession, "do_orm_execute")
def _enforce_tenant(state: ORMExecuteState) -> None:
    if state.is_insert:
        mapper = state.bind_mapper
        if mapper is not None and is_tenant_scoped(mapper.class_):
            session = state.session
            _stamp_insert_statement(state, session.tenant_context.get(), session.stamp_policy)
        return
    if not (state.is_select or state.is_update or state.is_delete):
        return
    # Refreshing columns of an already-loaded row needs no extra criteria
    if state.is_column_load:
        return
    tenant_id = state.session.info["tenant_context"].get()
    if tenant_id is None:
        return
    state.statement = state.statement.options(*tenant_criteria(tenant_id))


@event.listens_for(TenantSyncSession, "before_flush")
def _stamp_on_flush(session: TenantSyncSession, flush_context, instances) -> None:
    active = session.tenant_context.get()
    policy = session.stamp_policy
    now = datetime.now(timezone.utc)

    for obj in session.new:
        if is_tenant_scoped(obj):
            stamp_tenant(obj, active, policy)
        if hasattr(obj, "created_at"):
            obj.created_at = now

    for obj in session.dirty:
        if not session.is_modified(obj, include_collections=False):
            continue
        if is_tenant_scoped(obj) and get_history(obj, "tenant_id").has_changes():
            raise TenantReassignmentError(type(obj).__name__)
        if hasattr(obj, "updated_at"):
            obj.updated_at = now
