import os

# settings are read at import time; point them at an in-memory database
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("APP_ENV", "test")

import pytest
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from faculty_eval.main import app
from faculty_eval.db.base import Base
from faculty_eval.db.session import get_db, make_engine


@pytest.fixture()
def engine():
    """
    Fresh in-memory SQLite database per test.

    StaticPool keeps the single connection alive so the schema survives
    across the TestClient worker thread and the test thread.
    """
    engine = make_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def db_session(engine):
    TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def override_get_db(db_session):
    def _get_db_override():
        try:
            yield db_session
            db_session.commit()
        except Exception:
            db_session.rollback()
            raise

    app.dependency_overrides[get_db] = _get_db_override
    yield
    app.dependency_overrides.clear()
