"""
API fixtures: the app wired to the per-test database, clock, randomness,
scripted provider and in-memory cache.
"""
import pytest
from fastapi.testclient import TestClient

from quoteday.core.dependencies import (
    get_cache,
    get_clock,
    get_generation_provider,
    get_rng,
    get_session_factory,
)
from quoteday.main import create_app

from tests.helpers import FakeProvider


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def app(session_factory, clock, rng, provider, fake_cache):
    application = create_app()
    application.dependency_overrides[get_session_factory] = lambda: session_factory
    application.dependency_overrides[get_clock] = lambda: clock
    application.dependency_overrides[get_rng] = lambda: rng
    application.dependency_overrides[get_generation_provider] = lambda: provider
    application.dependency_overrides[get_cache] = lambda: fake_cache
    return application


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def registered(client):
    """Register a reader through the API and return the session body."""

    def _register(email="reader@example.com", password="correct horse battery"):
        r = client.post("/auth/register", json={"email": email, "password": password, "name": "Reader"})
        assert r.status_code == 201, r.text
        return r.json()

    return _register
