import os
import subprocess
import sys
from datetime import datetime
from pathlib import Path
from unittest.mock import patch

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from hidevideo.common import settings
from hidevideo.common.db import connection
from hidevideo.common.db.models import Tag, Video, VideoLibrary


def run_alembic_migrations(db_url: str, data_dir: Path) -> None:
    """Run all Alembic migrations on the test database."""
    project_root = Path(__file__).parent.parent
    alembic_ini = project_root / "db" / "migrations" / "alembic.ini"

    subprocess.run(
        [sys.executable, "-m", "alembic", "-c", str(alembic_ini), "upgrade", "head"],
        env={**os.environ, "DATABASE_URL": db_url, "DATA_DIR": str(data_dir)},
        check=True,
        capture_output=True,
    )


@pytest.fixture
def test_db(tmp_path: Path):
    """
    Create a fresh SQLite database, run migrations, and point settings at it.

    Returns:
        The URL to the test database
    """
    test_db_url = settings.make_db_url(tmp_path / "test.db")
    run_alembic_migrations(test_db_url, tmp_path)

    connection.reset_connection()
    try:
        with patch("hidevideo.common.settings.DB_URL", test_db_url):
            yield test_db_url
    finally:
        connection.reset_connection()


@pytest.fixture
def db_engine(test_db):
    engine = create_engine(test_db)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    SessionLocal = sessionmaker(bind=db_engine, autocommit=False, autoflush=False)
    session = SessionLocal()

    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def library(db_session):
    library = VideoLibrary(name="Movies", path="/mnt/movies")
    db_session.add(library)
    db_session.flush()
    return library


@pytest.fixture
def add_tag(db_session):
    def make(name: str, **kwargs) -> Tag:
        tag = Tag(name=name, **kwargs)
        db_session.add(tag)
        db_session.flush()
        return tag

    return make


@pytest.fixture
def add_video(db_session, library):
    """Factory adding a video to the default library."""

    def make(filename: str, **kwargs) -> Video:
        defaults = {
            "library_id": library.id,
            "filepath": f"{library.path}/{filename}",
            "created_at": datetime(2024, 1, 1),
            "play_count": 0,
        }
        defaults.update(kwargs)
        video = Video(filename=filename, **defaults)
        db_session.add(video)
        db_session.flush()
        return video

    return make
