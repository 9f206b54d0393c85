"""
Database utilities package.
"""
from hidevideo.common.db.models import Base
from hidevideo.common.db.connection import (
    get_engine,
    get_session_factory,
    get_scoped_session,
    make_session,
)

__all__ = [
    "Base",
    "get_engine",
    "get_session_factory",
    "get_scoped_session",
    "make_session",
]
