class InvariantViolation(Exception):
    """Raised when a domain invariant does not hold."""


class AuthorizationError(Exception):
    """The caller lacks the capability needed for the operation."""


class SiteNotFoundError(LookupError):
    pass


class VersionNotFoundError(LookupError):
    """The blob id is not part of the site's version ledger."""

    def __init__(self, blob_id):
        super().__init__(f"Version {blob_id} not found")
        self.blob_id = blob_id


class DuplicateVersionError(InvariantViolation):
    """A blob id was appended to a ledger that already holds it."""

    def __init__(self, blob_id):
        super().__init__(f"Version {blob_id} is already in the ledger")
        self.blob_id = blob_id


class CurrentVersionError(InvariantViolation):
    """The current content of a site cannot be discarded."""


class StaleContentError(InvariantViolation):
    """The content changed after the timestamp the client based its edit on."""
