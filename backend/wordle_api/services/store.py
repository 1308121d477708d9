from contextlib import contextmanager

from sqlalchemy.exc import DisconnectionError, OperationalError

from wordle_api.errors import TransientStoreError


@contextmanager
def transaction(session):
    """Commit on success; roll back and re-raise on any error.

    Connectivity failures are re-raised as ``TransientStoreError`` so the
    API can answer 503 instead of 500.
    """
    try:
        yield session
        session.commit()
    except (OperationalError, DisconnectionError) as exc:
        session.rollback()
        raise TransientStoreError('database unavailable') from exc
    except Exception:
        session.rollback()
        raise
