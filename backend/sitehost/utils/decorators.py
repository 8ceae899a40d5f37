from functools import wraps
from flask import g, jsonify
from flask_jwt_extended import get_jwt, get_jwt_identity
from sitehost.models.user import User
from sitehost.domain.access import CapabilitySet, SiteContext

def tenant_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        tenant = g.get("current_tenant")
        if not tenant:
            return jsonify({"error": "Tenant context missing"}), 400

        if get_jwt().get("tenant_id") != tenant.id:
            return jsonify({"error": "Tenant mismatch"}), 403

        user = User.query.filter_by(
            id=get_jwt_identity(),
            tenant_id=tenant.id,
            is_active=True,
        ).first()
        if not user:
            return jsonify({"error": "User not found or disabled"}), 403

        g.current_user = user
        return fn(*args, **kwargs)
    return wrapper

def roles_required(*allowed_roles):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            if get_jwt().get("role") not in allowed_roles:
                return jsonify({"error": "Insufficient permissions"}), 403

            return fn(*args, **kwargs)
        return wrapper
    return decorator

def site_context(fn):
    """
    Resolve the caller's capabilities once and pass a SiteContext
    for the <site_id> in the URL as `ctx`. Needs tenant_required first.
    """
    @wraps(fn)
    def wrapper(*args, site_id, **kwargs):
        tenant = g.current_tenant
        user = g.current_user

        ctx = SiteContext(
            tenant_id=tenant.id,
            site_id=site_id,
            capabilities=CapabilitySet.for_user(tenant, user),
            actor_id=user.id,
            is_admin=user.is_admin,
        )
        return fn(*args, ctx=ctx, **kwargs)
    return wrapper
