"""
Pytest fixtures for testing
"""
import uuid

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

from app.infrastructure.db.session import Base
from app.infrastructure.db import models  # noqa: F401  (registers tables on Base.metadata)


@pytest.fixture
def db_engine(tmp_path):
    """
    File-backed SQLite engine with a regular pool.

    Every session gets its own connection, so one session only sees what
    another has committed. check_same_thread is off because TestClient runs
    routes in a worker thread.
    """
    engine = create_engine(
        f"sqlite:///{tmp_path / 'subs.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine) -> Session:
    """Create database session for tests"""
    SessionLocal = sessionmaker(bind=db_engine, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def user_id():
    """Owner of the sample subscriptions"""
    return uuid.UUID("7c9e6679-7425-40de-944b-e07fc1f90ae7")


@pytest.fixture
def other_user_id():
    return uuid.UUID("1b4e28ba-2fa1-11d2-883f-0016d3cca427")
