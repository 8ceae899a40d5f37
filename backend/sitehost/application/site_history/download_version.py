# sitehost/application/site_history/download_version.py
import mimetypes
from dataclasses import dataclass
from typing import Iterator
from flask import current_app
from sitehost.domain.access import SiteContext, require_full_history
from sitehost.domain.ledger import VersionLedger
from sitehost.storage import get_blob_store
from sitehost.application.sites.lookup import load_site


@dataclass(frozen=True)
class VersionDownload:
    blob_id: str
    filename: str
    content_type: str
    content_length: int
    chunks: Iterator[bytes]


def download_filename(site_name: str, content_type: str) -> str:
    # guess_extension("text/html") may give ".htm"
    if content_type.split(";")[0].strip() == "text/html":
        return f"{site_name}.html"
    return f"{site_name}{mimetypes.guess_extension(content_type) or ''}"


def download_version(*, ctx: SiteContext, blob_id: str) -> VersionDownload:
    """
    A saved version as a chunked stream, named after the site.
    """
    require_full_history(ctx.capabilities)

    site = load_site(ctx)
    entry = VersionLedger(site).find(blob_id)

    chunks = get_blob_store().iter_chunks(
        entry.blob_id,
        current_app.config["BLOB_STREAM_CHUNK_SIZE"],
    )

    return VersionDownload(
        blob_id=entry.blob_id,
        filename=download_filename(site.name, entry.content_type),
        content_type=entry.content_type,
        content_length=entry.byte_size,
        chunks=chunks,
    )
