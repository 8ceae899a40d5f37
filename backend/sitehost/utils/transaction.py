from contextlib import contextmanager
from flask import current_app
from sitehost.extensions import db

@contextmanager
def transactional():
    """
    Commit on success, roll back and re-raise on any error.

    Blob store calls made inside the block run before the commit, so a
    failing purge or upload undoes the database changes made with it.
    """
    try:
        yield db.session
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.debug(f"Transaction rolled back: {e!r}")
        raise
