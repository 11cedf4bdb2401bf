import pytest
from fastapi.testclient import TestClient

from miniapp.core.database import get_engine, get_session_factory, init_db, reset_db_state
from miniapp.main import app


@pytest.fixture(autouse=True)
def _env(monkeypatch):
    monkeypatch.setenv("MINIAPP_DATABASE_URL", "sqlite://")
    # Disable API key during tests
    monkeypatch.delenv("MINIAPP_API_KEY", raising=False)


@pytest.fixture
def engine(_env):
    """Fresh in-memory database with the schema, one per test."""
    reset_db_state()
    engine = get_engine()
    init_db(engine)
    yield engine
    reset_db_state()


@pytest.fixture
def session(engine):
    with get_session_factory()() as session:
        yield session


@pytest.fixture
def client(engine):
    return TestClient(app)
