"""Tests for event creation, lookup, RSVP and booked users.

Covers:
- Mandatory form fields → 400
- Optional image upload stored in the blob store
- RSVP idempotency → AlreadyRegistered on the second attempt
- Booked-user projection, malformed id → 400, absent id → 404
"""
import uuid

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from tests.conftest import create_logged_in_user, create_test_event, register_user

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def _owner(client, email="owner@x.com"):
    return create_logged_in_user(client, email=email, first_name="Olive", last_name="Owner")["user"]


class TestEventCreate:
    """POST /addevent."""

    def test_create_event(self, client):
        owner = _owner(client)
        resp = create_test_event(client, owner["user_id"], name="Blues Jam", slots=5)
        assert resp.status_code == 201
        body = resp.json()
        assert body["success"] is True
        event = body["event"]
        assert event["name"] == "Blues Jam"
        assert event["slots"] == 5
        assert event["user_id"] == owner["user_id"]
        assert event["image"] is None
        assert event["booked_user_ids"] == []

    def test_create_event_missing_fields(self, client):
        owner = _owner(client)
        resp = client.post("/addevent", data={"name": "Half an event", "user_id": owner["user_id"]})
        assert resp.status_code == 400
        body = resp.json()
        assert body["success"] is False
        assert body["message"] == "Missing required fields"

    def test_create_event_unknown_owner(self, client):
        resp = create_test_event(client, str(uuid.uuid4()))
        assert resp.status_code == 400

    def test_create_event_invalid_slots(self, client):
        owner = _owner(client)
        resp = client.post("/addevent", data={
            "name": "n", "genre": "g", "host": "h", "date": "2026-12-01T19:30:00",
            "description": "d", "location": "l", "user_id": owner["user_id"],
            "slots": "plenty", "link": "https://example.com",
        })
        assert resp.status_code == 400

    def test_create_event_with_image(self, client, upload_dir):
        owner = _owner(client)
        resp = create_test_event(
            client, owner["user_id"],
            files={"image": ("poster.png", PNG_BYTES, "image/png")},
        )
        assert resp.status_code == 201
        filename = resp.json()["event"]["image"]
        assert filename.endswith(".png")
        assert (upload_dir / filename).read_bytes() == PNG_BYTES

    def test_create_event_rejects_non_image(self, client, upload_dir):
        owner = _owner(client)
        resp = create_test_event(
            client, owner["user_id"],
            files={"image": ("notes.txt", b"hello", "text/plain")},
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == "Only image files are allowed!"
        assert not upload_dir.exists() or not any(upload_dir.iterdir())

    def test_create_event_rejects_oversized_image(self, client):
        owner = _owner(client)
        resp = create_test_event(
            client, owner["user_id"],
            files={"image": ("huge.jpg", b"\xff" * 4096, "image/jpeg")},
        )
        assert resp.status_code == 400

    def test_unknown_owner_leaves_no_upload(self, client, upload_dir):
        resp = create_test_event(
            client, str(uuid.uuid4()),
            files={"image": ("poster.png", PNG_BYTES, "image/png")},
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == "Event owner does not exist"
        assert not upload_dir.exists() or not any(upload_dir.iterdir())

    def test_bad_date_leaves_no_upload(self, client, upload_dir):
        owner = _owner(client)
        resp = client.post("/addevent", data={
            "name": "n", "genre": "g", "host": "h", "date": "next friday",
            "description": "d", "location": "l", "user_id": owner["user_id"],
            "slots": "5", "link": "https://example.com",
        }, files={"image": ("poster.png", PNG_BYTES, "image/png")})
        assert resp.status_code == 400
        assert resp.json()["message"] == "Invalid date or slots"
        assert not upload_dir.exists() or not any(upload_dir.iterdir())

    def test_failed_insert_removes_upload(self, client, upload_dir, monkeypatch):
        owner = _owner(client)

        def broken_commit(self):
            raise OperationalError("INSERT INTO events", {}, Exception("disk I/O error"))

        monkeypatch.setattr(Session, "commit", broken_commit)
        resp = create_test_event(
            client, owner["user_id"],
            files={"image": ("poster.png", PNG_BYTES, "image/png")},
        )
        assert resp.status_code == 500
        assert not any(upload_dir.iterdir())


class TestEventRead:
    """GET /eventsdata and /eventsdata/{id}."""

    def test_list_events(self, client):
        owner = _owner(client)
        create_test_event(client, owner["user_id"], name="First")
        create_test_event(client, owner["user_id"], name="Second")
        resp = client.get("/eventsdata")
        assert resp.status_code == 200
        names = {e["name"] for e in resp.json()["events"]}
        assert names == {"First", "Second"}

    def test_list_events_empty(self, client):
        resp = client.get("/eventsdata")
        assert resp.status_code == 200
        assert resp.json() == {"success": True, "events": []}

    def test_get_event(self, client):
        owner = _owner(client)
        event = create_test_event(client, owner["user_id"]).json()["event"]
        resp = client.get(f"/eventsdata/{event['event_id']}")
        assert resp.status_code == 200
        assert resp.json()["event"]["event_id"] == event["event_id"]

    def test_get_event_not_found(self, client):
        resp = client.get(f"/eventsdata/{uuid.uuid4()}")
        assert resp.status_code == 404
        assert resp.json()["error"] == "NotFound"

    def test_get_event_malformed_id(self, client):
        resp = client.get("/eventsdata/not-an-id")
        assert resp.status_code == 404


class TestRSVP:
    """POST /eventsdata/{id}/rsvp and GET /event/{id}/booked-users."""

    def test_rsvp(self, client):
        owner = _owner(client)
        guest = create_logged_in_user(client, email="guest@x.com")["user"]
        event = create_test_event(client, owner["user_id"]).json()["event"]

        resp = client.post(f"/eventsdata/{event['event_id']}/rsvp", json={"user_id": guest["user_id"]})
        assert resp.status_code == 200
        body = resp.json()
        assert body["message"] == "RSVP successful"
        assert body["event"]["booked_user_ids"] == [guest["user_id"]]

    def test_rsvp_twice_is_rejected(self, client):
        owner = _owner(client)
        event = create_test_event(client, owner["user_id"]).json()["event"]
        url = f"/eventsdata/{event['event_id']}/rsvp"

        assert client.post(url, json={"user_id": owner["user_id"]}).status_code == 200
        resp = client.post(url, json={"user_id": owner["user_id"]})
        assert resp.status_code == 400
        assert resp.json()["error"] == "AlreadyRegistered"

        # Attendee set is unchanged by the rejected attempt
        event = client.get(f"/eventsdata/{event['event_id']}").json()["event"]
        assert event["booked_user_ids"] == [owner["user_id"]]

    def test_rsvp_unknown_event(self, client):
        owner = _owner(client)
        resp = client.post(f"/eventsdata/{uuid.uuid4()}/rsvp", json={"user_id": owner["user_id"]})
        assert resp.status_code == 404

    def test_rsvp_unknown_user(self, client):
        owner = _owner(client)
        event = create_test_event(client, owner["user_id"]).json()["event"]
        resp = client.post(f"/eventsdata/{event['event_id']}/rsvp", json={"user_id": str(uuid.uuid4())})
        assert resp.status_code == 404

    def test_booked_users_projection(self, client):
        owner = _owner(client)
        register_user(client, email="fan@x.com", first_name="Fay", last_name="Fan")
        fan = create_logged_in_user(client, email="fan2@x.com", first_name="Finn", last_name="Fan")["user"]
        event = create_test_event(client, owner["user_id"]).json()["event"]
        client.post(f"/eventsdata/{event['event_id']}/rsvp", json={"user_id": fan["user_id"]})

        resp = client.get(f"/event/{event['event_id']}/booked-users")
        assert resp.status_code == 200
        booked = resp.json()["booked_users"]
        assert booked == [{
            "user_id": fan["user_id"],
            "first_name": "Finn",
            "last_name": "Fan",
            "email": "fan2@x.com",
            "phone": "555-0100",
        }]

    def test_booked_users_malformed_id(self, client):
        resp = client.get("/event/not-an-id/booked-users")
        assert resp.status_code == 400
        assert resp.json()["message"] == "Invalid event ID"

    def test_booked_users_absent_event(self, client):
        resp = client.get(f"/event/{uuid.uuid4()}/booked-users")
        assert resp.status_code == 404


class TestBookingWalkthrough:
    def test_register_login_event_rsvp_booked_users(self, client):
        """Register A → login A → event (slots=5) → RSVP twice → booked-users is exactly [A]."""
        a = create_logged_in_user(client, email="a@x.com", first_name="Amy", last_name="A")["user"]
        event = create_test_event(client, a["user_id"], slots=5).json()["event"]
        url = f"/eventsdata/{event['event_id']}/rsvp"

        assert client.post(url, json={"user_id": a["user_id"]}).status_code == 200
        second = client.post(url, json={"user_id": a["user_id"]})
        assert second.json()["error"] == "AlreadyRegistered"

        booked = client.get(f"/event/{event['event_id']}/booked-users").json()["booked_users"]
        assert [u["user_id"] for u in booked] == [a["user_id"]]


class TestUploads:
    """GET /uploads/{filename} serves what the blob store wrote."""

    def test_event_image_is_served(self, client):
        owner = _owner(client)
        event = create_test_event(
            client, owner["user_id"],
            files={"image": ("poster.png", PNG_BYTES, "image/png")},
        ).json()["event"]
        resp = client.get(f"/uploads/{event['image']}")
        assert resp.status_code == 200
        assert resp.content == PNG_BYTES
        assert resp.headers["content-type"] == "image/png"

    def test_missing_upload_is_404(self, client):
        resp = client.get("/uploads/1700000000000-deadbeef.png")
        assert resp.status_code == 404
        assert resp.json()["error"] == "NotFound"

    def test_hidden_names_are_not_served(self, client, upload_dir):
        upload_dir.mkdir(parents=True)
        (upload_dir / ".secret").write_text("x")
        resp = client.get("/uploads/.secret")
        assert resp.status_code == 404
