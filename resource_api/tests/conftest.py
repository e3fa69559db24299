import os
import sys
import pytest
from pathlib import Path

# Ensure project root on sys.path
_THIS_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _THIS_DIR.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from resource_api.db import Database


@pytest.fixture()
def tmp_db_path(tmp_path, monkeypatch):
    path = tmp_path / "resources_test.db"
    # Point the app to this temp DB
    monkeypatch.setenv("RESOURCE_DB_PATH", str(path))
    monkeypatch.delenv("APP_ENV", raising=False)
    return str(path)


@pytest.fixture()
def db(tmp_db_path):
    database = Database(tmp_db_path)
    database.initialize_schema()
    yield database
    database.close()


@pytest.fixture()
def client(tmp_db_path):
    # Import app after DB path is set so the lifespan opens the temp DB
    from resource_api.api import app
    from fastapi.testclient import TestClient
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def app_db(client):
    """The Database instance owned by the running app."""
    return client.app.state.db


@pytest.fixture()
def laptop():
    return {
        "name": "Laptop",
        "description": "High-performance laptop",
        "category": "Electronics",
        "price": 999.99,
        "quantity": 5,
    }
