import shutil

import pytest
from fastapi.testclient import TestClient

from petite_treats.config import DATA_DIR, Settings
from petite_treats.database import Database
from petite_treats.main import create_app
from petite_treats.storefront import CartManager, InMemorySessionStore, StorefrontClient


@pytest.fixture()
def settings():
    return Settings(database_url="sqlite://")


@pytest.fixture()
def app(settings):
    return create_app(settings)


@pytest.fixture()
def client(app):
    # Entering the client runs the lifespan: tables created and seeded
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def database(settings):
    db = Database(settings.database_url)
    db.create_all()
    db.seed(settings.seed_path)
    yield db
    db.dispose()


@pytest.fixture()
def session(database):
    with database.session() as s:
        yield s


@pytest.fixture()
def data_dir(tmp_path):
    """A writable copy of the packaged data files."""
    for path in DATA_DIR.iterdir():
        shutil.copy(path, tmp_path / path.name)
    return tmp_path


@pytest.fixture()
def storefront(client):
    return StorefrontClient(client)


@pytest.fixture()
def session_store():
    return InMemorySessionStore()


@pytest.fixture()
def cart(session_store):
    return CartManager(session_store)
