from flask import request, abort
from datetime import timezone
from dateutil.parser import parse, ParserError
from sitehost.domain.invariants.exceptions import StaleContentError


def normalize_ts(ts):
    """
    Ensure datetime is timezone-aware.
    Defaults to UTC if naive.
    """
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def if_unmodified_since():
    """
    Parse the If-Unmodified-Since request header.
    Returns None when no optimistic lock is requested.
    """
    client_ts = request.headers.get("If-Unmodified-Since")
    if not client_ts:
        return None

    try:
        return normalize_ts(parse(client_ts))
    except (ParserError, ValueError, OverflowError):
        abort(400, description="Invalid If-Unmodified-Since header")


def enforce_optimistic_lock(last_modified, client_ts):
    """
    Raises StaleContentError if the content changed after `client_ts`.
    Must run while the site is locked, or a concurrent save can slip in
    between the check and the write.
    """
    if client_ts is None or last_modified is None:
        return

    # HTTP dates have second precision
    server_ts = normalize_ts(last_modified).replace(microsecond=0)

    if server_ts > normalize_ts(client_ts):
        raise StaleContentError(
            "Conflict detected. Site content has been modified."
        )
