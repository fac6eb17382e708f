"""Integration tests for the /api/auth endpoints."""

from datetime import timedelta

from flask_jwt_extended import create_access_token

from conftest import signup


class TestSignup:
    def test_signup_returns_user_and_cookie(self, client):
        resp = signup(client)

        assert resp.status_code == 201
        user = resp.get_json()["user"]
        assert set(user) == {"id", "username", "email", "createdAt", "updatedAt"}
        assert user["username"] == "alice"
        assert user["email"] == "alice@example.com"
        assert user["createdAt"] == user["updatedAt"]
        assert client.get_cookie("auth_token") is not None

    def test_signup_cookie_authenticates(self, client):
        user = signup(client).get_json()["user"]

        resp = client.get("/api/auth/me")
        assert resp.status_code == 200
        assert resp.get_json()["user"]["id"] == user["id"]

    def test_short_username(self, client):
        resp = signup(client, username="ab")

        assert resp.status_code == 400
        assert resp.get_json() == {"error": "Username must be between 3 and 32 characters"}

    def test_duplicate_email(self, client):
        assert signup(client).status_code == 201
        resp = signup(client, username="alice2", email="ALICE@example.com")

        assert resp.status_code == 409
        assert resp.get_json() == {"error": "Email is already in use"}

    def test_duplicate_username(self, client):
        assert signup(client).status_code == 201
        resp = signup(client, username="Alice", email="other@example.com")

        assert resp.status_code == 409
        assert resp.get_json() == {"error": "Username is already in use"}

    def test_race_on_insert_is_still_409(self, client, monkeypatch):
        assert signup(client).status_code == 201
        # Pre-checks miss the existing user, the unique index catches it
        monkeypatch.setattr(
            "taskboard.repositories.user_repository.UserRepository.is_email_taken", lambda self, email: False
        )
        resp = signup(client, username="alice2")

        assert resp.status_code == 409
        assert resp.get_json() == {"error": "Email is already in use"}

    def test_malformed_json(self, client):
        resp = client.post("/api/auth/signup", data="{not json", content_type="application/json")

        assert resp.status_code == 400
        assert resp.get_json() == {"error": "Invalid JSON body"}

    def test_password_hash_never_returned(self, client):
        body = signup(client).get_data(as_text=True)
        assert "passwordHash" not in body
        assert "correct-horse" not in body


class TestLogin:
    def test_login_with_username_or_email(self, app):
        signup(app.test_client())

        for identifier in ("alice", "ALICE@example.com"):
            client = app.test_client()
            resp = client.post("/api/auth/login", json={"identifier": identifier, "password": "correct-horse"})

            assert resp.status_code == 200
            assert resp.get_json()["user"]["username"] == "alice"
            assert client.get("/api/tasks").status_code == 200

    def test_wrong_password(self, client):
        signup(client)
        resp = client.post("/api/auth/login", json={"identifier": "alice", "password": "wrong-password"})

        assert resp.status_code == 401
        assert resp.get_json() == {"error": "Invalid credentials"}

    def test_unknown_user(self, client):
        resp = client.post("/api/auth/login", json={"identifier": "nobody", "password": "whatever123"})

        assert resp.status_code == 401
        assert resp.get_json() == {"error": "Invalid credentials"}

    def test_missing_identifier(self, client):
        resp = client.post("/api/auth/login", json={"password": "whatever123"})

        assert resp.status_code == 400
        assert resp.get_json() == {"error": "Email or username is required"}


class TestLogout:
    def test_logout_clears_cookie(self, auth_client):
        resp = auth_client.post("/api/auth/logout")

        assert resp.status_code == 204
        assert resp.data == b""
        assert "Max-Age=0" in resp.headers["Set-Cookie"]
        assert auth_client.get("/api/tasks").status_code == 401

    def test_logout_without_session(self, client):
        assert client.post("/api/auth/logout").status_code == 204


class TestMe:
    def test_requires_session(self, client):
        resp = client.get("/api/auth/me")

        assert resp.status_code == 401
        assert resp.get_json() == {"error": "Unauthorized"}

    def test_deleted_user_is_unauthenticated(self, auth_client, db):
        db.users.delete_many({})

        assert auth_client.get("/api/auth/me").status_code == 401

    def test_garbage_cookie(self, client):
        client.set_cookie("auth_token", "not-a-token")
        resp = client.get("/api/auth/me")

        assert resp.status_code == 401
        assert resp.get_json() == {"error": "Unauthorized"}

    def test_expired_cookie(self, app, client):
        with app.app_context():
            token = create_access_token(identity="64b7f0c2a1b2c3d4e5f60718", expires_delta=timedelta(seconds=-5))
        client.set_cookie("auth_token", token)

        assert client.get("/api/auth/me").status_code == 401

    def test_session_is_checked_with_validate_token(self, auth_client, monkeypatch):
        seen = []

        def reject(token):
            seen.append(token)
            return None

        monkeypatch.setattr("taskboard.routes.auth_routes.validate_token", reject)
        resp = auth_client.get("/api/auth/me")

        assert resp.status_code == 401
        assert seen == [auth_client.get_cookie("auth_token").value]
