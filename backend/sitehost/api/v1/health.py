from flask import current_app, jsonify
from sqlalchemy import text
from sitehost.extensions import db
from . import v1_bp

@v1_bp.route('/health', methods=['GET'])
def health_check():
    db.session.execute(text("SELECT 1"))

    return jsonify({
        "status": "ok",
        "service": "sitehost",
        "blob_store": current_app.config["BLOB_STORE_BACKEND"],
    })
