"""
Shared fixtures: a JSON store in a temporary directory, a registry with a
controllable clock, a seeded short code generator and an HTTP test client.
"""

import random
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from shortlink.core.setting import Settings
from shortlink.db.json_store import JsonFileStore
from shortlink.db.registry import Registry
from shortlink.main import create_app
from shortlink.services.short_code_generator import ShortCodeGenerator
from shortlink.services.url_service import URLService

ADMIN_TOKEN = "test-admin-token"


class FakeClock:
    """Clock returning a fixed time that tests move forward explicitly."""

    def __init__(self, start: datetime = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)):
        self.now = start
        self.calls = []

    def __call__(self) -> datetime:
        self.calls.append(self.now)
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "urls.json"


@pytest.fixture
def store(store_path):
    return JsonFileStore(store_path)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def registry(store, clock):
    return Registry.load(store, clock=clock)


@pytest.fixture
def generator():
    return ShortCodeGenerator(rng=random.Random(1234))


@pytest.fixture
def url_service(registry, generator):
    return URLService(registry, generator)


@pytest.fixture
def settings(store_path):
    return Settings(
        admin_token=ADMIN_TOKEN,
        store_path=str(store_path),
        api_prefix="/api",
        redirect_prefix="",
        short_code_length=6,
        short_code_max_attempts=32,
    )


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def admin_headers():
    return {"Authorization": ADMIN_TOKEN}
