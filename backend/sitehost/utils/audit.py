from flask import g
from sitehost.extensions import db
from sitehost.models.audit_log import AuditLog
from typing import Optional

def log_action(
    *,
    action: str,
    entity_type: str,
    entity_id: Optional[str],
    payload: dict | None = None,
    tenant_id: Optional[str] = None,
    actor_id: Optional[str] = None,
):
    """
    Add an audit entry to the current session; the caller commits it.
    Tenant and actor default to the ones of the current request.
    """
    current_tenant = g.get("current_tenant")
    current_user = g.get("current_user")

    tenant_id = tenant_id or (current_tenant.id if current_tenant else None)
    actor_id = actor_id or (current_user.id if current_user else None)
    if not tenant_id or not actor_id:
        return  # Skip logging outside a tenant/user context (CLI, tests)

    log = AuditLog()
    log.actor_id = actor_id
    log.tenant_id = tenant_id
    log.action = action
    log.entity_type = entity_type
    log.entity_id = entity_id
    log.payload = payload or {}

    db.session.add(log)
