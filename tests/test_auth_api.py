import pytest
from sqlalchemy import select

from campuslease.core.auth import create_token, hash_password, verify_password
from campuslease.core.config import USER_COOKIE
from campuslease.models.user import LoginEvent, User

from conftest import register


class TestPasswords:
    def test_hash_format(self):
        stored = hash_password("password123")
        scheme, salt, digest = stored.split("$")
        assert scheme == "scrypt"
        assert len(salt) == 32
        assert len(digest) == 128

    def test_verify(self):
        stored = hash_password("password123")
        assert verify_password("password123", stored)
        assert not verify_password("password124", stored)

    @pytest.mark.parametrize("stored", ["", "plain", "bcrypt$x$y", "scrypt$salt$", "scrypt$salt$zz"])
    def test_malformed_hash_never_verifies(self, stored):
        assert not verify_password("password123", stored)

    def test_salts_differ(self):
        assert hash_password("same-password") != hash_password("same-password")


@pytest.mark.api
class TestRegister:
    def test_register_sets_cookie_and_returns_user(self, client):
        response = client.post(
            "/api/auth/register",
            json={"name": " Alice ", "email": " Alice@UW.edu ", "password": "password123"},
        )
        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "Alice"
        assert body["email"] == "alice@uw.edu"
        assert body["id"].isdigit()
        assert USER_COOKIE in response.cookies

    def test_register_records_event_and_hash(self, client, app):
        user = register(client)
        with app.state.session_factory() as db:
            stored = db.get(User, int(user["id"]))
            events = db.scalars(select(LoginEvent)).all()
        assert stored.password_hash.startswith("scrypt$")
        assert [(e.event_type, e.user_id) for e in events] == [("register", stored.id)]

    @pytest.mark.parametrize(
        "payload,error",
        [
            ({"name": "", "email": "a@b.c", "password": "password123"}, "name is required"),
            ({"name": "A", "email": "nope", "password": "password123"}, "email is invalid"),
            ({"name": "A", "email": "a@b.c", "password": "short"}, "password must be at least 8 characters"),
        ],
    )
    def test_invalid_payload(self, client, payload, error):
        response = client.post("/api/auth/register", json=payload)
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid payload"
        assert error in response.json()["errors"]

    def test_duplicate_email(self, client, make_client):
        register(client)
        response = make_client().post(
            "/api/auth/register",
            json={"name": "Other", "email": "ALICE@uw.edu", "password": "password123"},
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Email already registered"


@pytest.mark.api
class TestSession:
    def test_me_requires_auth(self, client):
        assert client.get("/api/auth/me").status_code == 401

    def test_me_after_register(self, alice):
        client, user = alice
        response = client.get("/api/auth/me")
        assert response.status_code == 200
        assert response.json() == user

    def test_login(self, alice, make_client, app):
        _, user = alice
        other = make_client()
        response = other.post(
            "/api/auth/login",
            json={"email": "alice@uw.edu", "password": "password123"},
        )
        assert response.status_code == 200
        assert response.json() == user
        assert other.get("/api/auth/me").status_code == 200

        with app.state.session_factory() as db:
            kinds = [e.event_type for e in db.scalars(select(LoginEvent)).all()]
        assert kinds == ["register", "login"]

    def test_login_wrong_password(self, alice, make_client):
        response = make_client().post(
            "/api/auth/login",
            json={"email": "alice@uw.edu", "password": "wrong-password"},
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid email or password"

    def test_login_unknown_user(self, client):
        response = client.post(
            "/api/auth/login",
            json={"email": "ghost@uw.edu", "password": "password123"},
        )
        assert response.status_code == 401

    def test_logout_clears_cookie(self, alice):
        client, _ = alice
        assert client.post("/api/auth/logout").json() == {"ok": True}
        assert client.get("/api/auth/me").status_code == 401

    def test_bearer_header(self, alice, make_client):
        _, user = alice
        token = create_token({"sub": user["id"], "name": user["name"], "email": user["email"]})
        response = make_client().get(
            "/api/auth/me", headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 200
        assert response.json()["email"] == "alice@uw.edu"

    def test_tampered_token_rejected(self, make_client):
        response = make_client().get(
            "/api/auth/me", headers={"Authorization": "Bearer not.a.jwt"}
        )
        assert response.status_code == 401

    def test_expired_token_rejected(self, alice, make_client):
        _, user = alice
        token = create_token({"sub": user["id"], "name": "A", "email": "a@b.c"}, expires_days=-1)
        response = make_client().get(
            "/api/auth/me", headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 401


@pytest.mark.api
def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True}
