import pytest
from sqlalchemy import text

from conftest import create_listing


def open_thread(client, **overrides):
    payload = {
        "participantName": "Landlord Larry",
        "participantEmail": "larry@rentals.com",
        "message": "Hi! Is the unit still available?",
    }
    payload.update(overrides)
    return client.post("/api/threads", json=payload)


@pytest.mark.api
class TestApplications:
    def test_apply_uses_token_identity(self, alice, bob, listing_payload):
        owner, _ = alice
        renter, user = bob
        listing = create_listing(owner, listing_payload)

        response = renter.post(
            "/api/applications",
            json={"listingId": listing["id"], "phone": " 555 ", "message": "Quiet student"},
        )
        assert response.status_code == 201
        body = response.json()
        assert body["listingId"] == listing["id"]
        assert body["name"] == user["name"]
        assert body["email"] == user["email"]
        assert body["phone"] == "555"
        assert body["applicantUserId"] == int(user["id"])

    def test_unknown_listing(self, alice):
        client, _ = alice
        response = client.post("/api/applications", json={"listingId": 9999})
        assert response.status_code == 404

    def test_missing_listing_id(self, alice):
        client, _ = alice
        response = client.post("/api/applications", json={})
        assert response.status_code == 400
        assert "listingId must be a valid listing id" in response.json()["errors"]

    def test_lists_only_own_applications(self, alice, bob, listing_payload):
        owner, _ = alice
        renter, _ = bob
        first = create_listing(owner, listing_payload)
        second = create_listing(owner, dict(listing_payload, title="Second"))
        renter.post("/api/applications", json={"listingId": first["id"]})
        renter.post("/api/applications", json={"listingId": second["id"]})
        owner.post("/api/applications", json={"listingId": first["id"]})

        assert len(renter.get("/api/applications").json()) == 2
        filtered = renter.get("/api/applications", params={"listingId": first["id"]}).json()
        assert [a["listingId"] for a in filtered] == [first["id"]]

    def test_requires_auth(self, client):
        assert client.get("/api/applications").status_code == 401


@pytest.mark.api
class TestThreads:
    def test_create_thread_with_first_message(self, alice, listing_payload):
        client, user = alice
        listing = create_listing(client, listing_payload)

        response = open_thread(client, propertyId=listing["id"], propertyTitle=listing["title"])
        assert response.status_code == 201
        thread = response.json()
        assert thread["id"].startswith("thread-")
        assert thread["propertyId"] == listing["id"]
        assert thread["participantEmail"] == "larry@rentals.com"

        [message] = thread["messages"]
        assert message["id"].startswith("msg-")
        assert message["sender"] == user["name"]
        assert message["senderEmail"] == user["email"]
        assert message["recipientEmail"] == "larry@rentals.com"
        assert message["read"] is True

    def test_client_supplied_id(self, alice):
        client, _ = alice
        response = open_thread(client, id="thread-custom")
        assert response.status_code == 201
        assert response.json()["id"] == "thread-custom"

    def test_duplicate_id_conflicts(self, alice, app):
        client, _ = alice
        assert open_thread(client, id="thread-dup").status_code == 201
        response = open_thread(client, id="thread-dup", message="again")
        assert response.status_code == 409

        with app.state.engine.connect() as conn:
            assert conn.execute(text("SELECT COUNT(*) FROM messages")).scalar_one() == 1

    def test_unknown_property_creates_nothing(self, alice, app):
        client, _ = alice
        response = open_thread(client, propertyId="9999")
        assert response.status_code == 404

        with app.state.engine.connect() as conn:
            assert conn.execute(text("SELECT COUNT(*) FROM threads")).scalar_one() == 0
            assert conn.execute(text("SELECT COUNT(*) FROM messages")).scalar_one() == 0

    @pytest.mark.parametrize(
        "overrides,error",
        [
            ({"participantName": ""}, "participantName is required"),
            ({"participantEmail": "larry"}, "participantEmail is invalid"),
            ({"message": "  "}, "message is required"),
            ({"propertyId": "abc"}, "propertyId must be a valid listing id"),
        ],
    )
    def test_validation(self, alice, overrides, error):
        client, _ = alice
        response = open_thread(client, **overrides)
        assert response.status_code == 400
        assert error in response.json()["errors"]

    def test_threads_are_private(self, alice, bob):
        owner, _ = alice
        other, _ = bob
        thread = open_thread(owner).json()

        assert other.get(f"/api/threads/{thread['id']}").status_code == 404
        assert other.get("/api/threads").json() == []
        assert other.post(
            f"/api/threads/{thread['id']}/messages", json={"content": "hi"}
        ).status_code == 404
        assert other.post(f"/api/threads/{thread['id']}/read").status_code == 404

    def test_send_message_bumps_thread(self, alice):
        client, _ = alice
        older = open_thread(client, participantName="First").json()
        newer = open_thread(client, participantName="Second").json()

        order = [t["id"] for t in client.get("/api/threads").json()]
        assert order == [newer["id"], older["id"]]

        response = client.post(
            f"/api/threads/{older['id']}/messages", json={"content": "  Following up  "}
        )
        assert response.status_code == 201
        assert response.json()["content"] == "Following up"
        assert response.json()["threadId"] == older["id"]

        threads = client.get("/api/threads").json()
        assert [t["id"] for t in threads] == [older["id"], newer["id"]]
        contents = [m["content"] for m in threads[0]["messages"]]
        assert contents == ["Hi! Is the unit still available?", "Following up"]

    def test_empty_message_rejected(self, alice):
        client, _ = alice
        thread = open_thread(client).json()
        response = client.post(f"/api/threads/{thread['id']}/messages", json={"content": " "})
        assert response.status_code == 400
        assert response.json()["errors"] == ["content is required"]

    def test_mark_read(self, alice, app):
        client, _ = alice
        thread = open_thread(client).json()
        with app.state.engine.begin() as conn:
            conn.execute(text("UPDATE messages SET read = 0"))

        response = client.post(f"/api/threads/{thread['id']}/read")
        assert response.json() == {"ok": True}
        detail = client.get(f"/api/threads/{thread['id']}").json()
        assert all(m["read"] for m in detail["messages"])
