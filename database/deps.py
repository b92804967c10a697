"""FastAPI dependencies exposing request-scoped DB sessions.

`get_db_write` is for endpoints that persist anything (including endpoints
that only schedule achievement checks); `get_db_read` routes pure reads to
the read engine.
"""

from .database import get_read_session, get_write_session


def get_db_write():
    """Yield a write-capable DB session for FastAPI dependency injection."""
    yield from get_write_session()


def get_db_read():
    """Yield a read-only DB session for FastAPI dependency injection."""
    yield from get_read_session()
