from flask import current_app, jsonify
from sitehost.domain.invariants.exceptions import (
    AuthorizationError,
    CurrentVersionError,
    DuplicateVersionError,
    InvariantViolation,
    SiteNotFoundError,
    StaleContentError,
    VersionNotFoundError,
)
from sitehost.storage import StorageError

STORAGE_RETRY_AFTER_SECONDS = 5


def _error_response(error_name, error, status_code):
    response = jsonify({
        "error": error_name,
        "message": str(error)
    })
    response.status_code = status_code
    return response


def register_error_handlers(app):
    @app.errorhandler(InvariantViolation)
    def handle_invariant_violation(error):
        return _error_response("InvariantViolation", error, 400)

    @app.errorhandler(AuthorizationError)
    def handle_authorization_error(error):
        return _error_response("AuthorizationError", error, 403)

    @app.errorhandler(SiteNotFoundError)
    def handle_site_not_found(error):
        return _error_response("SiteNotFound", error, 404)

    @app.errorhandler(VersionNotFoundError)
    def handle_version_not_found(error):
        return _error_response("VersionNotFound", error, 404)

    @app.errorhandler(CurrentVersionError)
    def handle_current_version(error):
        return _error_response("CurrentVersion", error, 409)

    @app.errorhandler(StaleContentError)
    def handle_stale_content(error):
        return _error_response("Conflict", error, 409)

    @app.errorhandler(DuplicateVersionError)
    def handle_duplicate_version(error):
        current_app.logger.error(f"Version ledger invariant broken: {error}")
        return _error_response("DuplicateVersion", error, 500)

    @app.errorhandler(StorageError)
    def handle_storage_error(error):
        current_app.logger.error(f"Blob store failure: {error}")
        response = _error_response("StorageError", error, 503)
        response.headers["Retry-After"] = str(STORAGE_RETRY_AFTER_SECONDS)
        return response
