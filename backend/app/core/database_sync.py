"""
Synchronous database engine and session for Celery workers.

Mirrors database.py but uses psycopg2 (sync) instead of asyncpg. The engine
is created lazily on first use and disposed by ``dispose_sync_engine`` when
the worker process shuts down.
"""
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import settings

_engine_sync: Optional[Engine] = None
_SyncSessionLocal: Optional[sessionmaker] = None


def init_sync_engine(url: Optional[str] = None) -> Engine:
    """
    Create the worker engine if it does not exist yet.

    Args:
        url: Override of the sync database URL (tests).

    Returns:
        The process-wide sync engine.
    """
    global _engine_sync, _SyncSessionLocal
    if _engine_sync is None:
        target = url or settings.database_url_sync
        engine_kwargs: dict = {"pool_pre_ping": True}
        if not target.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=settings.DATABASE_SYNC_POOL_SIZE,
                max_overflow=0,
            )
        _engine_sync = create_engine(target, **engine_kwargs)
        _SyncSessionLocal = sessionmaker(
            bind=_engine_sync,
            expire_on_commit=False,
            autocommit=False,
            autoflush=False,
        )
    return _engine_sync


def dispose_sync_engine() -> None:
    """Dispose the worker engine and drop pooled connections."""
    global _engine_sync, _SyncSessionLocal
    if _engine_sync is not None:
        _engine_sync.dispose()
    _engine_sync = None
    _SyncSessionLocal = None


@contextmanager
def get_sync_db() -> Generator[Session, None, None]:
    """
    Context manager para sessao sincrona do banco.

    Uso:
        with get_sync_db() as db:
            db.execute(...)
    """
    init_sync_engine()
    session = _SyncSessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
