from collections.abc import Callable, Iterator

import mongomock
import pytest
from fastapi.testclient import TestClient
from pymongo.database import Database

from config import Settings
from database import ensure_indexes, get_db
from main import create_app


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        database_url=None,
        database_name=None,
        jwt_secret="test-secret",
        bcrypt_rounds=4,
        env="test",
        log_level="WARNING",
    )


@pytest.fixture
def mongo_db() -> Iterator[Database]:
    client = mongomock.MongoClient()
    db = client["devconnector_test"]
    ensure_indexes(db)
    yield db
    client.close()


@pytest.fixture
def app(settings, mongo_db):
    app = create_app(settings)
    app.dependency_overrides[get_db] = lambda: mongo_db
    return app


@pytest.fixture
def client(app) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def register(client) -> Callable[..., str]:
    def _register(name: str = "Ada Lovelace", email: str = "ada@example.com", password: str = "secret123") -> str:
        resp = client.post("/api/users", json={"name": name, "email": email, "password": password})
        assert resp.status_code == 200, resp.text
        return resp.json()["token"]

    return _register


@pytest.fixture
def auth_headers(register) -> dict:
    return {"Authorization": f"Bearer {register()}"}
