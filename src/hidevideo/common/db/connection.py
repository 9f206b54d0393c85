"""
Database connection utilities.
"""

from contextlib import contextmanager
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, scoped_session

from hidevideo.common import settings

# Cached engine and session factory for connection pooling
_engine = None
_session_factory = None
_scoped_session = None


def get_engine():
    """Get or create the SQLAlchemy engine.

    The engine is cached so every session shares one connection pool.
    SQLite connections are allowed to cross threads since sessions are
    handed out per thread by the scoped session.
    """
    global _engine
    if _engine is None:
        connect_args = {}
        if settings.DB_URL.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        _engine = create_engine(
            settings.DB_URL,
            echo=settings.DB_ECHO,
            pool_pre_ping=True,
            connect_args=connect_args,
        )
    return _engine


def get_session_factory():
    """Get or create a cached session factory for SQLAlchemy sessions."""
    global _session_factory
    if _session_factory is None:
        engine = get_engine()
        _session_factory = sessionmaker(bind=engine)
    return _session_factory


def get_scoped_session():
    """Get or create a thread-local scoped session factory."""
    global _scoped_session
    if _scoped_session is None:
        _scoped_session = scoped_session(get_session_factory())
    return _scoped_session


@contextmanager
def make_session():
    """
    Context manager for database sessions.

    Yields:
        SQLAlchemy session that will be automatically closed
    """
    session = get_scoped_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.remove()


def reset_connection() -> None:
    """Drop the cached engine and factories, e.g. after DB_URL changes."""
    global _engine, _session_factory, _scoped_session
    if _scoped_session is not None:
        _scoped_session.remove()
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None
    _scoped_session = None
