"""
Test suite for the guest list admin API
Tests: create, list/filter/paginate, update, bulk message-sent, delete, stats,
export, slug changes and invitation messages
"""
import csv
import io

import services.guests as guest_service


def delete_with_body(client, url, payload):
    return client.request("DELETE", url, json=payload)


class TestCreateGuest:
    """Guest creation, normalization and slug allocation"""

    def test_create_guest_defaults(self, api_client):
        response = api_client.post("/api/guests", json={"name": "Jane Doe", "whatsapp": "0812"})
        assert response.status_code == 201, f"Expected 201, got {response.status_code}: {response.text}"

        body = response.json()
        assert body["success"] is True
        guest = body["data"]
        assert guest["whatsapp"] == "62812"
        assert guest["slug"] == "jane-doe"
        assert guest["rsvpStatus"] == "not_responded"
        assert guest["language"] == "id"
        assert guest["country"] == "Indonesia"
        assert guest["invited"] is False
        assert guest["isGroup"] is False
        assert guest["messageSent"] is False
        assert guest["createdAt"] and guest["updatedAt"]
        print(f"✓ Created guest {guest['id']} with slug {guest['slug']}")

    def test_duplicate_names_get_numbered_slugs(self, guest_factory):
        first = guest_factory("Jane Doe")
        second = guest_factory("Jane Doe")
        third = guest_factory("jane  doe!")

        assert first["slug"] == "jane-doe"
        assert second["slug"] == "jane-doe-2"
        assert third["slug"] == "jane-doe-3"

    def test_slug_taken_before_insert_is_retried(self, api_client, guest_factory, monkeypatch):
        guest_factory("Jane Doe")
        real_ensure_unique_slug = guest_service.ensure_unique_slug
        calls = []

        async def stale_ensure_unique_slug(db, base, exclude_id=None):
            calls.append(base)
            if len(calls) == 1:
                return "jane-doe"
            return await real_ensure_unique_slug(db, base, exclude_id)

        monkeypatch.setattr(guest_service, "ensure_unique_slug", stale_ensure_unique_slug)

        response = api_client.post("/api/guests", json={"name": "Jane Doe", "whatsapp": "0813"})
        assert response.status_code == 201, response.text
        assert response.json()["data"]["slug"] == "jane-doe-2"
        assert len(calls) == 2, "Insert should retry once after the duplicate key"

        data = api_client.get("/api/guests").json()["data"]
        assert sorted(item["slug"] for item in data["items"]) == ["jane-doe", "jane-doe-2"]

    def test_whatsapp_is_stored_normalized(self, api_client, guest_factory):
        guest = guest_factory("Budi", whatsapp="081234")

        response = api_client.get(f"/api/guests/{guest['id']}/detail")
        assert response.status_code == 200
        assert response.json()["data"]["whatsapp"] == "6281234", "Raw input must never be stored"

    def test_country_drives_normalization_and_language(self, guest_factory):
        guest = guest_factory("Wei Ling", whatsapp="0 9123 4567", country="Singapore")
        assert guest["whatsapp"] == "6591234567"
        assert guest["language"] == "en"

    def test_explicit_language_wins(self, guest_factory):
        guest = guest_factory("Pieter", whatsapp="0612345678", country="Netherlands", language="id")
        assert guest["whatsapp"] == "31612345678"
        assert guest["language"] == "id"

    def test_optional_fields(self, guest_factory):
        guest = guest_factory("Smith Family", title="Mr. & Mrs.", invited=True,
                              isGroup=True, rsvpStatus="attending")
        assert guest["title"] == "Mr. & Mrs."
        assert guest["invited"] is True
        assert guest["isGroup"] is True
        assert guest["rsvpStatus"] == "attending"

    def test_missing_name_or_whatsapp(self, api_client):
        for payload in ({"whatsapp": "0812"}, {"name": "Jane"}, {"name": "  ", "whatsapp": "0812"}):
            response = api_client.post("/api/guests", json=payload)
            assert response.status_code == 400, f"Expected 400 for {payload}, got {response.status_code}"
            body = response.json()
            assert body["success"] is False
            assert body["error"] == "Name and WhatsApp number are required"

    def test_unnormalizable_whatsapp(self, api_client):
        response = api_client.post("/api/guests", json={"name": "Jane", "whatsapp": "n/a"})
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid WhatsApp number"

    def test_invalid_enum_value_is_rejected(self, api_client):
        response = api_client.post("/api/guests", json={
            "name": "Jane", "whatsapp": "0812", "rsvpStatus": "maybe"
        })
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert "rsvpStatus" in body["error"]

        response = api_client.post("/api/guests", json={
            "name": "Jane", "whatsapp": "0812", "country": "France"
        })
        assert response.status_code == 400


class TestListGuests:
    """Filtering, search, sorting and pagination"""

    def test_empty_list(self, api_client):
        response = api_client.get("/api/guests")
        assert response.status_code == 200
        assert response.json()["data"] == {"items": [], "page": 1, "pageSize": 20, "total": 0}

    def test_filter_by_rsvp_status_on_every_page(self, api_client, guest_factory):
        for index in range(25):
            guest_factory(f"Attending {index}", rsvpStatus="attending")
        for index in range(5):
            guest_factory(f"Pending {index}")

        seen = []
        for page in (1, 2):
            response = api_client.get("/api/guests", params={"rsvpStatus": "attending", "page": page})
            data = response.json()["data"]
            assert data["total"] == 25
            assert all(item["rsvpStatus"] == "attending" for item in data["items"])
            seen.extend(item["id"] for item in data["items"])
        assert len(seen) == 25

    def test_pages_cover_every_guest_exactly_once(self, api_client, guest_factory):
        created = {guest_factory(f"Guest {index:02d}")["id"] for index in range(45)}

        collected = []
        first = api_client.get("/api/guests", params={"pageSize": 20}).json()["data"]
        total = first["total"]
        pages = -(-total // first["pageSize"])
        for page in range(1, pages + 1):
            data = api_client.get("/api/guests", params={"page": page, "pageSize": 20}).json()["data"]
            collected.extend(item["id"] for item in data["items"])

        assert total == 45
        assert len(collected) == len(set(collected)) == 45, "Pages must not overlap"
        assert set(collected) == created

    def test_boolean_filters(self, api_client, guest_factory):
        invited = guest_factory("Invited", invited=True)
        guest_factory("Not Invited")

        data = api_client.get("/api/guests", params={"invited": "true"}).json()["data"]
        assert [item["id"] for item in data["items"]] == [invited["id"]]

        data = api_client.get("/api/guests", params={"invited": "false"}).json()["data"]
        assert data["total"] == 1 and data["items"][0]["name"] == "Not Invited"

        data = api_client.get("/api/guests", params={"messageSent": "false"}).json()["data"]
        assert data["total"] == 2

        data = api_client.get("/api/guests", params={"invited": "all"}).json()["data"]
        assert data["total"] == 2, "Unrecognized flag values are ignored"

    def test_search_is_case_insensitive(self, api_client, guest_factory):
        guest_factory("Siti Nurhaliza")
        guest_factory("Ahmad Fauzi")
        guest_factory("Nur (Cousin)")

        data = api_client.get("/api/guests", params={"search": "NUR"}).json()["data"]
        assert sorted(item["name"] for item in data["items"]) == ["Nur (Cousin)", "Siti Nurhaliza"]

        data = api_client.get("/api/guests", params={"search": "(cousin"}).json()["data"]
        assert data["total"] == 1, "Search text is matched literally"

    def test_sort_by_name(self, api_client, guest_factory):
        for name in ("Charlie", "Alice", "Bob"):
            guest_factory(name)

        data = api_client.get("/api/guests", params={"sortBy": "name", "sortOrder": "asc"}).json()["data"]
        assert [item["name"] for item in data["items"]] == ["Alice", "Bob", "Charlie"]

        data = api_client.get("/api/guests", params={"sortBy": "name", "sortOrder": "desc"}).json()["data"]
        assert [item["name"] for item in data["items"]] == ["Charlie", "Bob", "Alice"]

    def test_page_size_allow_list(self, api_client, guest_factory):
        guest_factory("Only Guest")
        assert api_client.get("/api/guests", params={"pageSize": 50}).json()["data"]["pageSize"] == 50
        assert api_client.get("/api/guests", params={"pageSize": 7}).json()["data"]["pageSize"] == 20
        data = api_client.get("/api/guests", params={"page": "abc", "pageSize": "x"}).json()["data"]
        assert data["page"] == 1 and data["pageSize"] == 20

    def test_page_past_the_end_is_empty(self, api_client, guest_factory):
        guest_factory("Only Guest")

        data = api_client.get("/api/guests", params={"page": 2}).json()["data"]
        assert data["items"] == [] and data["total"] == 1

        response = api_client.get("/api/guests", params={"page": "99999999999999999999"})
        assert response.status_code == 200, response.text
        data = response.json()["data"]
        assert data["items"] == []
        assert data["total"] == 1

    def test_stats(self, api_client, guest_factory):
        guest_factory("A", invited=True, rsvpStatus="attending")
        guest_factory("B", rsvpStatus="not_attending")
        guest_factory("C", invited=True)

        stats = api_client.get("/api/guests/stats").json()["data"]
        assert stats == {
            "total": 3, "invited": 2, "messaged": 0,
            "attending": 1, "notAttending": 1, "notResponded": 1
        }

        stats = api_client.get("/api/guests/stats", params={"invited": "true"}).json()["data"]
        assert stats["total"] == 2 and stats["attending"] == 1 and stats["notAttending"] == 0


class TestUpdateGuest:
    """Partial updates and bulk message-sent toggles"""

    def test_partial_update_changes_only_supplied_fields(self, api_client, guest_factory):
        guest = guest_factory("Jane Doe", title="Ms.")

        response = api_client.patch(f"/api/guests/{guest['id']}", json={"invited": True})
        assert response.status_code == 200, response.text
        updated = response.json()["data"]

        assert updated["invited"] is True
        assert updated["title"] == "Ms."
        assert updated["name"] == "Jane Doe"
        assert updated["slug"] == guest["slug"]
        assert updated["updatedAt"] >= guest["updatedAt"]

    def test_name_change_keeps_slug(self, api_client, guest_factory):
        guest = guest_factory("Jane Doe")
        updated = api_client.patch(f"/api/guests/{guest['id']}", json={"name": "Jane Smith"}).json()["data"]
        assert updated["name"] == "Jane Smith"
        assert updated["slug"] == "jane-doe", "Slug only changes through the slug endpoint"

    def test_title_can_be_cleared(self, api_client, guest_factory):
        guest = guest_factory("Jane", title="Dr.")
        updated = api_client.patch(f"/api/guests/{guest['id']}", json={"title": None}).json()["data"]
        assert updated["title"] is None

    def test_country_change_rederives_language(self, api_client, guest_factory):
        guest = guest_factory("Jane")
        updated = api_client.patch(f"/api/guests/{guest['id']}", json={"country": "Singapore"}).json()["data"]
        assert updated["country"] == "Singapore"
        assert updated["language"] == "en"

        updated = api_client.patch(f"/api/guests/{guest['id']}", json={"whatsapp": "0812"}).json()["data"]
        assert updated["whatsapp"] == "65812", "Number is normalized with the stored country"

    def test_invalid_whatsapp_update(self, api_client, guest_factory):
        guest = guest_factory("Jane")
        response = api_client.patch(f"/api/guests/{guest['id']}", json={"whatsapp": "---"})
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid WhatsApp number"

    def test_message_sent_toggle(self, api_client, guest_factory):
        guest = guest_factory("Jane")

        updated = api_client.patch(f"/api/guests/{guest['id']}", json={"messageSent": True}).json()["data"]
        assert updated["messageSent"] is True
        assert updated["messageSentAt"], "Sending stamps the time"

        again = api_client.patch(f"/api/guests/{guest['id']}", json={
            "messageSent": True, "messageSentAt": updated["messageSentAt"]
        }).json()["data"]
        assert again["messageSent"] is True
        assert again["messageSentAt"] == updated["messageSentAt"]

        cleared = api_client.patch(f"/api/guests/{guest['id']}", json={"messageSent": False}).json()["data"]
        assert cleared["messageSent"] is False
        assert cleared["messageSentAt"] is None

    def test_update_unknown_guest(self, api_client):
        response = api_client.patch("/api/guests/does-not-exist", json={"invited": True})
        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Guest not found"}

    def test_admin_rsvp_override_is_logged(self, api_client, guest_factory, mongo_db, run):
        guest = guest_factory("Jane")

        updated = api_client.patch(f"/api/guests/{guest['id']}", json={"rsvpStatus": "attending"}).json()["data"]
        assert updated["rsvpStatus"] == "attending"

        logs = run(mongo_db.activity_logs.find({"guest_id": guest["id"]}, {"_id": 0}).to_list(None))
        assert len(logs) == 1
        assert logs[0]["action"] == "rsvp_status_override"
        assert logs[0]["details"] == {"from": "not_responded", "to": "attending"}

        response = api_client.get(f"/api/guests/{guest['id']}/activity")
        assert response.status_code == 200
        activity = response.json()["data"]
        assert [entry["action"] for entry in activity] == ["rsvp_status_override"]
        assert activity[0]["guestSlug"] == guest["slug"]

    def test_same_status_is_not_logged(self, api_client, guest_factory):
        guest = guest_factory("Jane")
        api_client.patch(f"/api/guests/{guest['id']}", json={"rsvpStatus": "not_responded"})
        assert api_client.get(f"/api/guests/{guest['id']}/activity").json()["data"] == []

    def test_bulk_message_sent(self, api_client, guest_factory):
        first = guest_factory("First")
        second = guest_factory("Second")
        untouched = guest_factory("Third")

        response = api_client.patch("/api/guests", json={
            "ids": [first["id"], second["id"]], "messageSent": True
        })
        assert response.status_code == 200, response.text
        updated = response.json()["data"]
        assert {item["id"] for item in updated} == {first["id"], second["id"]}
        assert all(item["messageSent"] and item["messageSentAt"] for item in updated)

        remaining = api_client.get("/api/guests", params={"messageSent": "false"}).json()["data"]
        assert [item["id"] for item in remaining["items"]] == [untouched["id"]]

    def test_bulk_update_validation(self, api_client, guest_factory):
        guest = guest_factory("Jane")

        response = api_client.patch("/api/guests", json={"ids": [], "messageSent": True})
        assert response.status_code == 400
        assert response.json()["error"] == "Guest id is required"

        response = api_client.patch("/api/guests", json={"ids": [guest["id"]]})
        assert response.status_code == 400
        assert response.json()["error"] == "messageSent is required"


class TestSlugChange:
    """Deliberate slug regeneration"""

    def test_change_slug(self, api_client, guest_factory, mongo_db, run):
        guest = guest_factory("Jane Doe")
        guest_factory("Janie")

        response = api_client.put(f"/api/guests/{guest['id']}/slug", json={"slug": "Janie"})
        assert response.status_code == 200, response.text
        assert response.json()["data"]["slug"] == "janie-2"

        assert api_client.get("/api/guests/jane-doe").status_code == 404
        assert api_client.get("/api/guests/janie-2").status_code == 200

        logs = run(mongo_db.activity_logs.find({"action": "slug_change"}, {"_id": 0}).to_list(None))
        assert logs[0]["details"] == {"from": "jane-doe", "to": "janie-2"}

    def test_slug_taken_concurrently_is_retried(self, api_client, guest_factory, monkeypatch, mongo_db, run):
        guest = guest_factory("Jane Doe")
        guest_factory("Janie")
        real_ensure_unique_slug = guest_service.ensure_unique_slug
        calls = []

        async def stale_ensure_unique_slug(db, base, exclude_id=None):
            calls.append(base)
            if len(calls) == 1:
                return "janie"
            return await real_ensure_unique_slug(db, base, exclude_id)

        monkeypatch.setattr(guest_service, "ensure_unique_slug", stale_ensure_unique_slug)

        response = api_client.put(f"/api/guests/{guest['id']}/slug", json={"slug": "Janie"})
        assert response.status_code == 200, response.text
        assert response.json()["data"]["slug"] == "janie-2"

        logs = run(mongo_db.activity_logs.find({"action": "slug_change"}, {"_id": 0}).to_list(None))
        assert [log["details"]["to"] for log in logs] == ["janie-2"]

    def test_regenerate_from_name(self, api_client, guest_factory):
        guest = guest_factory("Jane Doe")
        api_client.patch(f"/api/guests/{guest['id']}", json={"name": "Jane Smith"})

        response = api_client.put(f"/api/guests/{guest['id']}/slug", json={})
        assert response.json()["data"]["slug"] == "jane-smith"

    def test_same_slug_is_a_no_op(self, api_client, guest_factory):
        guest = guest_factory("Jane Doe")
        response = api_client.put(f"/api/guests/{guest['id']}/slug", json={"slug": "jane doe"})
        assert response.json()["data"]["slug"] == "jane-doe"


class TestDeleteGuests:
    """Single and bulk deletion"""

    def test_delete_single(self, api_client, guest_factory):
        guest = guest_factory("Jane")

        response = api_client.delete(f"/api/guests/{guest['id']}")
        assert response.status_code == 200
        assert response.json()["data"] == 1

        response = api_client.delete(f"/api/guests/{guest['id']}")
        assert response.status_code == 404
        assert response.json()["error"] == "Guest not found"

    def test_bulk_delete_ignores_missing_ids(self, api_client, guest_factory):
        first = guest_factory("First")
        kept = guest_factory("Kept")

        response = delete_with_body(api_client, "/api/guests", {"ids": [first["id"], "missing-id"]})
        assert response.status_code == 200, response.text
        body = response.json()
        assert body["success"] is True
        assert body["data"] == 1

        data = api_client.get("/api/guests").json()["data"]
        assert [item["id"] for item in data["items"]] == [kept["id"]]

    def test_bulk_delete_requires_ids(self, api_client):
        response = delete_with_body(api_client, "/api/guests", {"ids": []})
        assert response.status_code == 400


class TestExportAndMessages:
    """CSV export and invitation message generation"""

    def test_export_csv(self, api_client, guest_factory):
        guest_factory("Jane, Doe", title="Ms.", invited=True)
        guest_factory("Budi")

        response = api_client.get("/api/guests/export", params={"invited": "true"})
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "attachment" in response.headers["content-disposition"]

        rows = list(csv.DictReader(io.StringIO(response.text)))
        assert len(rows) == 1
        assert rows[0]["name"] == "Jane, Doe"
        assert rows[0]["invited"] == "true"
        assert rows[0]["message_sent_at"] == ""
        assert response.text.startswith('"name","title","whatsapp"')

    def test_invitation_message(self, api_client, guest_factory):
        guest = guest_factory("Jane Doe", title="Ms.")

        response = api_client.get(f"/api/guests/{guest['id']}/message")
        assert response.status_code == 200, response.text
        data = response.json()["data"]
        assert data["language"] == "id"
        assert "*Ms. Jane Doe*" in data["message"]
        assert "/guest/jane-doe" in data["message"]
        assert data["whatsappUrl"].startswith("https://api.whatsapp.com/send?phone=6281234567890&")

    def test_message_for_unknown_guest(self, api_client):
        response = api_client.get("/api/guests/nope/message")
        assert response.status_code == 404
