"""
Shared fixtures for the wedding guest API tests
"""
import asyncio
import uuid

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from server import create_app


@pytest.fixture
def mongo_db():
    """Fresh in-memory database per test"""
    client = AsyncMongoMockClient()
    return client[f"wedding_test_{uuid.uuid4().hex[:8]}"]


@pytest.fixture
def api_client(mongo_db):
    """TestClient running the app lifespan against the mock database"""
    app = create_app(database=mongo_db)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def run():
    """Run a database coroutine from a synchronous test"""
    def _run(coroutine):
        return asyncio.run(coroutine)
    return _run


@pytest.fixture
def guest_factory(api_client):
    """Create guests through the API and return their records"""
    def create(name="Jane Doe", whatsapp="081234567890", **extra):
        payload = {"name": name, "whatsapp": whatsapp, **extra}
        response = api_client.post("/api/guests", json=payload)
        assert response.status_code == 201, f"Guest creation failed: {response.status_code} - {response.text}"
        return response.json()["data"]
    return create
