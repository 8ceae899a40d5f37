# sitehost/normalizers/site.py
from __future__ import annotations

from typing import Any, Dict


def _isoformat(ts):
    return ts.isoformat() if ts else None


def normalize_site(site, admin: bool = False) -> Dict[str, Any]:
    data = {
        "id": site.id,
        "name": site.name,
        "current_blob_id": site.current_blob_id,
        "content_type": site.content_type,
        "blob_created_at": _isoformat(site.blob_created_at),
        "save_count": site.save_count,
        "view_count": site.view_count,
        "keep_count": site.effective_keep_count,
    }
    if admin:
        data["owner_id"] = site.owner_id
    return data


def normalize_version(version, current_blob_id=None) -> Dict[str, Any]:
    """
    Normalizes a SiteVersion into API-safe JSON.

    Notes:
    - is_current marks the entry backing the live content
    """
    return {
        "blob_id": version.blob_id,
        "seq": version.seq,
        "created_at": _isoformat(version.created_at),
        "byte_size": version.byte_size,
        "content_type": version.content_type,
        "save_kind": version.save_kind,
        "restored_from": version.restored_from,
        "is_current": version.blob_id == current_blob_id,
    }


def normalize_history(history) -> Dict[str, Any]:
    return {
        "site_id": history.site_id,
        "site_name": history.site_name,
        "current_blob_id": history.current_blob_id,
        "saved_version_count": history.saved_version_count,
        "keep_count": history.keep_count,
        "versions": [
            normalize_version(v, history.current_blob_id)
            for v in history.versions
        ],
    }
