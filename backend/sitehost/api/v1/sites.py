# sitehost/api/v1/sites.py
from flask import Response, g, request, jsonify, redirect, stream_with_context, url_for
from flask_jwt_extended import jwt_required
from sitehost.utils.decorators import tenant_required, site_context
from sitehost.utils.optimistic_lock import if_unmodified_since
from sitehost.application.sites.lookup import load_site
from sitehost.application.sites.create_site import create_site
from sitehost.application.sites.save_content import save_content
from sitehost.application.sites.read_content import read_content
from sitehost.application.site_history.history import get_history
from sitehost.application.site_history.view_version import view_version
from sitehost.application.site_history.download_version import download_version
from sitehost.application.site_history.restore_version import restore_version
from sitehost.application.site_history.discard_version import discard_version
from sitehost.normalizers.site import normalize_site, normalize_history
from . import v1_bp

DEFAULT_CONTENT_TYPE = "text/html"


def _request_content():
    content = request.get_data(cache=False)
    content_type = request.mimetype or DEFAULT_CONTENT_TYPE
    return content, content_type


def _redirect_to_history(ctx):
    return redirect(url_for("v1.site_history", site_id=ctx.site_id), code=303)

# ------------------------
# Sites
# ------------------------

@v1_bp.route("/sites", methods=["POST"])
@jwt_required()
@tenant_required
def create_site_route():
    name = request.args.get("name")
    if not name:
        return jsonify({"error": "Site name is required"}), 400

    keep_count = request.args.get("keep_count", type=int)
    content, content_type = _request_content()

    result = create_site(
        tenant_id=g.current_tenant.id,
        owner_id=g.current_user.id,
        name=name,
        content=content,
        content_type=content_type,
        keep_count=keep_count,
    )

    return jsonify({
        "id": result["site_id"],
        "blob_id": result["blob_id"],
        "message": "Site created successfully"
    }), 201

@v1_bp.route("/sites/<site_id>", methods=["GET"])
@jwt_required()
@tenant_required
@site_context
def get_site(ctx):
    site = load_site(ctx)
    return jsonify(normalize_site(site, admin=ctx.is_admin))

@v1_bp.route("/sites/<site_id>/content", methods=["GET"])
@jwt_required()
@tenant_required
@site_context
def get_site_content(ctx):
    current = read_content(ctx=ctx)
    return Response(current.content, mimetype=current.content_type)

@v1_bp.route("/sites/<site_id>/content", methods=["PUT"])
@jwt_required()
@tenant_required
@site_context
def upload_site_content(ctx):
    # Checked against the current content once the site is locked
    unmodified_since = if_unmodified_since()

    content, content_type = _request_content()
    result = save_content(
        ctx=ctx,
        content=content,
        content_type=content_type,
        autosave=request.args.get("autosave", type=int) == 1,
        unmodified_since=unmodified_since,
    )

    return jsonify({
        "blob_id": result["blob_id"],
        "evicted": result["evicted"],
        "message": "Content saved"
    }), 200

# ------------------------
# History
# ------------------------

@v1_bp.route("/sites/<site_id>/history", methods=["GET"])
@jwt_required()
@tenant_required
@site_context
def site_history(ctx):
    return jsonify(normalize_history(get_history(ctx=ctx)))

@v1_bp.route("/sites/<site_id>/history/<blob_id>", methods=["GET"])
@jwt_required()
@tenant_required
@site_context
def view_site_version(ctx, blob_id):
    version = view_version(ctx=ctx, blob_id=blob_id)
    return Response(version.content, mimetype=version.content_type)

@v1_bp.route("/sites/<site_id>/history/<blob_id>/download", methods=["GET"])
@jwt_required()
@tenant_required
@site_context
def download_site_version(ctx, blob_id):
    download = download_version(ctx=ctx, blob_id=blob_id)

    response = Response(
        stream_with_context(download.chunks),
        mimetype=download.content_type,
    )
    response.headers.set("Content-Disposition", "attachment", filename=download.filename)
    response.headers["Content-Length"] = str(download.content_length)
    return response

@v1_bp.route("/sites/<site_id>/history/<blob_id>/restore", methods=["POST"])
@jwt_required()
@tenant_required
@site_context
def restore_site_version(ctx, blob_id):
    restore_version(ctx=ctx, blob_id=blob_id)
    return _redirect_to_history(ctx)

@v1_bp.route("/sites/<site_id>/history/<blob_id>/discard", methods=["POST"])
@jwt_required()
@tenant_required
@site_context
def discard_site_version(ctx, blob_id):
    discard_version(ctx=ctx, blob_id=blob_id)
    return _redirect_to_history(ctx)
