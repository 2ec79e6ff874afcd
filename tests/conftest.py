# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from life_dashboards import db
from life_dashboards.settings import get_settings, reset_settings


@pytest.fixture
def settings(tmp_path, monkeypatch):
    """Point the database and upload directories at a per-test temp dir."""
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("UPLOADS_DIR", str(tmp_path / "uploads"))
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'data' / 'app.sqlite'}")
    monkeypatch.delenv("DEFAULT_USER_ID", raising=False)
    monkeypatch.delenv("HEATMAP_WINDOW_DAYS", raising=False)
    reset_settings()
    db._engine = None
    db._session_factory = None
    yield get_settings()
    reset_settings()


@pytest.fixture
def app(settings):
    from life_dashboards.main import create_app
    return create_app()


@pytest.fixture
def client(app):
    """FastAPI test client; entering the context runs startup (schema + dirs)."""
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def run(client):
    """Call an async helper on the client's event loop."""
    def _run(func, *args, **kwargs):
        return client.portal.call(lambda: func(*args, **kwargs))
    return _run
