from __future__ import annotations

from datetime import UTC, datetime, timedelta

import mongomock
import pytest
from fastapi.testclient import TestClient

from devicesync.config import Config
from devicesync.main import create_app
from devicesync.services import AuthService, IngestionService, QueryService, RecordStore

PROVISIONING_SECRET = "let-me-in-please"
TOKEN_SECRET = "test-signing-secret-0123456789-abcdefghijklmnop"


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


@pytest.fixture
def config() -> Config:
    return Config(
        mongo_uri="mongodb://unused",
        database_name="devicesync_test",
        provisioning_secret=PROVISIONING_SECRET,
        token_secret=TOKEN_SECRET,
        cors_origins=["*"],
    )


@pytest.fixture
def mongo_client() -> mongomock.MongoClient:
    return mongomock.MongoClient()


@pytest.fixture
def store(mongo_client: mongomock.MongoClient) -> RecordStore:
    record_store = RecordStore(mongo_client["devicesync_test"])
    record_store.ensure_indexes()
    return record_store


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 1, 1, 12, 0, tzinfo=UTC))


@pytest.fixture
def ingestion(store: RecordStore) -> IngestionService:
    return IngestionService(store)


@pytest.fixture
def query(store: RecordStore) -> QueryService:
    return QueryService(store)


@pytest.fixture
def auth(store: RecordStore, clock: FakeClock) -> AuthService:
    return AuthService(
        store,
        provisioning_secret=PROVISIONING_SECRET,
        token_secret=TOKEN_SECRET,
        clock=clock,
    )


@pytest.fixture
def client(config: Config, mongo_client: mongomock.MongoClient):
    app = create_app(config, mongo_client=mongo_client)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(client: TestClient) -> dict[str, str]:
    response = client.post(
        "/api/register",
        json={"username": "operator", "password": "s3cret-pass", "provisioningSecret": PROVISIONING_SECRET},
    )
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.json()['token']}"}
