from flask import request, jsonify, g
from flask_jwt_extended import (
    create_access_token,
    create_refresh_token
)
from sitehost.models.user import User
from . import v1_bp


def issue_tokens(user):
    # JWT subjects must be strings; tenant and role travel as claims
    claims = {
        "tenant_id": user.tenant_id,
        "role": user.role
    }
    return {
        "access_token": create_access_token(identity=user.id, additional_claims=claims),
        "refresh_token": create_refresh_token(identity=user.id, additional_claims=claims),
    }


@v1_bp.route("/auth/login", methods=["POST"])
def login():
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"error": "Invalid request body"}), 400

    email = data.get("email")
    password = data.get("password")

    if not email or not password:
        return jsonify({"error": "Email and password required"}), 400

    tenant = g.current_tenant

    user = User.query.filter_by(
        email=email,
        tenant_id=tenant.id
    ).first()

    if not user or not user.check_password(password):
        return jsonify({"error": "Invalid credentials"}), 401

    if not user.is_active:
        return jsonify({"error": "User account disabled"}), 403

    return jsonify(issue_tokens(user)), 200
