from contextlib import contextmanager
from external.database import db


@contextmanager
def session_scope(read_only=False):
    """Provide a transactional scope around a series of operations.

    Read-only scopes skip the commit so lookups nested inside a larger unit
    of work leave its pending changes alone.
    """
    try:
        yield db.session
        if not read_only:
            db.session.commit()
    except Exception:
        db.session.rollback()
        raise
