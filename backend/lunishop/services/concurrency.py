# Overview: Transaction scope and row-locking helpers shared by the write paths.

from __future__ import annotations

from contextlib import contextmanager

from ..extensions import db


def lock_for_update(query):
    """
    Apply row-level locking for critical operations.

    NOTE: SQLite ignores SELECT ... FOR UPDATE, but other DBs will honor it.
    Writers that must not race also guard the UPDATE itself.
    """
    return query.with_for_update()


@contextmanager
def transaction():
    """
    Run a block as one unit of work on the request session.

    Commits when the block finishes, rolls back and re-raises on any
    exception. Failed writes are never retried.
    """
    try:
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
