import pytest

from healthcheck.metrics import HealthMetrics
from healthcheck.settings import Settings

from tests.helpers.fakes import FakeMongoServer


@pytest.fixture
def fake_mongo(monkeypatch: pytest.MonkeyPatch) -> FakeMongoServer:
    """Route every AsyncMongoClient the checker builds to an in-memory server."""
    server = FakeMongoServer()
    monkeypatch.setattr("healthcheck.checkers.mongo.AsyncMongoClient", server.connect)
    return server


@pytest.fixture
def metrics(test_settings: Settings) -> HealthMetrics:
    return HealthMetrics(test_settings)
