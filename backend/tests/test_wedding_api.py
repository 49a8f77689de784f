"""
Tests for the wedding data endpoint, health check and app wiring
"""
import json

import pytest
from fastapi.testclient import TestClient
from pymongo.errors import DuplicateKeyError

from server import create_app
from services.wedding import DEFAULT_WEDDING_DATA, load_wedding_data


class TestWeddingData:
    """GET /api/wedding"""

    def test_default_wedding_data(self, api_client):
        response = api_client.get("/api/wedding")
        assert response.status_code == 200
        data = response.json()["data"]

        assert data["couple"]["groom"]["name"] == "Bambang"
        assert data["couple"]["bride"]["fullName"] == "Partini Wulandari, S.E"
        assert [event["name"] for event in data["events"]] == ["Pemberkatan Nikah", "Resepsi"]
        assert data["events"][1]["mapUrl"].startswith("https://maps.google.com/")
        assert data["theme"]["primaryColor"] == "#D4AF37"

    def test_injected_wedding_data(self, mongo_db):
        wedding = load_wedding_data("").model_copy(update={"slug": "custom-couple"})
        app = create_app(database=mongo_db, wedding_data=wedding)
        with TestClient(app) as client:
            assert client.get("/api/wedding").json()["data"]["slug"] == "custom-couple"

    def test_load_from_file(self, tmp_path):
        data = dict(DEFAULT_WEDDING_DATA, events=DEFAULT_WEDDING_DATA["events"][:1])
        path = tmp_path / "wedding.json"
        path.write_text(json.dumps(data), encoding="utf-8")

        wedding = load_wedding_data(str(path))
        assert len(wedding.events) == 1
        assert wedding.events[0].venue == "Gereja Santo Yakobus"


class TestHealthAndErrors:
    """Health endpoint and the shared error envelope"""

    def test_health(self, api_client, guest_factory):
        guest_factory("Jane")
        response = api_client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["guests"] == 1

    def test_unknown_route_uses_envelope(self, api_client):
        response = api_client.get("/api/does/not/exist")
        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_malformed_json_is_a_bad_request(self, api_client):
        response = api_client.post(
            "/api/guests", content="{not json", headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_slug_index_is_unique(self, api_client, mongo_db, run):
        run(mongo_db.guests.insert_one({"id": "a", "slug": "taken"}))
        with pytest.raises(DuplicateKeyError):
            run(mongo_db.guests.insert_one({"id": "b", "slug": "taken"}))
