# tests/conftest.py
# Shared fixtures: in-memory stand-ins for the metadata and blob stores,
# a controllable clock, and a FastAPI test client wired to them.

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from folder_share.main import create_app
from folder_share.routers.share import get_share_service
from folder_share.services.integrity import IntegrityVerifier
from folder_share.services.share_service import ShareService

TEST_SECRET = "test-secret-value"


class FakeClock:
    """Callable clock the tests can move forward."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


class InMemoryShareRepository:
    def __init__(self):
        self.rows = {}
        self.insert_calls = 0

    async def find_live_by_hmac(self, hmac_code, now):
        live = [r for r in self.rows.values() if r.hmac == hmac_code and r.expiration > now]
        return max(live, key=lambda r: r.created_at) if live else None

    async def get(self, share_id):
        return self.rows.get(share_id)

    async def insert(self, record):
        self.insert_calls += 1
        self.rows[record.id] = record

    async def list_expired_ids(self, now, limit=500):
        return [r.id for r in self.rows.values() if r.expiration <= now][:limit]

    async def delete(self, share_id):
        self.rows.pop(share_id, None)

    async def ping(self):
        return True


class InMemoryBlobStore:
    def __init__(self):
        self.blobs = {}
        self.put_calls = 0

    async def put(self, share_id, data):
        self.put_calls += 1
        self.blobs[share_id] = data

    async def get(self, share_id):
        return self.blobs.get(share_id)

    async def delete(self, share_id):
        self.blobs.pop(share_id, None)

    async def ping(self):
        return True


def make_world(world_id: str = "wrld_4cf554b4-430c-4f8f-b53e-1f294eed230b", **overrides) -> dict:
    world = {
        "imageUrl": "https://api.vrchat.cloud/api/1/file/file_1/1/file",
        "name": "The Great Pug",
        "id": world_id,
        "authorName": "owlboy",
        "authorId": "usr_1",
        "capacity": 40,
        "recommendedCapacity": 20,
        "tags": ["system_approved", "author_tag_chill"],
        "publicationDate": "2017-02-22T01:05:43.613Z",
        "updatedAt": "2024-11-10T12:00:00.000Z",
        "description": "Hang out.",
        "visits": 10000,
        "favorites": 3210,
        "platform": ["standalonewindows", "android"],
    }
    world.update(overrides)
    return world


@pytest.fixture(name="make_world")
def make_world_fixture():
    return make_world


@pytest.fixture
def secret():
    return TEST_SECRET


@pytest.fixture
def worlds():
    return [
        make_world(),
        make_world("wrld_0b4f3c2a-1111-2222-3333-444455556666", name="Midnight Rooftop", visits=None),
    ]


@pytest.fixture
def clock():
    return FakeClock(datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def verifier():
    return IntegrityVerifier(TEST_SECRET)


@pytest.fixture
def repository():
    return InMemoryShareRepository()


@pytest.fixture
def blob_store():
    return InMemoryBlobStore()


@pytest.fixture
def share_service(repository, blob_store, verifier, clock):
    return ShareService(repository=repository, blob_store=blob_store, verifier=verifier, clock=clock)


@pytest.fixture
def app(share_service):
    application = create_app()
    application.dependency_overrides[get_share_service] = lambda: share_service
    return application


@pytest.fixture
def client(app):
    return TestClient(app)
