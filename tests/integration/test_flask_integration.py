"""
Flask integration tests using the Flask test client.
"""

import pytest
from flask import Flask, g, jsonify

from fineauth.integrations.flask import FlaskAuth, create_auth_blueprint


@pytest.fixture
def app(auth):
    app = Flask(__name__)
    app.config["TESTING"] = True
    flask_auth = FlaskAuth(auth, app=app)
    app.register_blueprint(create_auth_blueprint(flask_auth))

    @app.route("/api/profile")
    @flask_auth.login_required
    def profile():
        return jsonify({"email": g.user.email, "session": g.auth_session.user_id})

    return app


@pytest.fixture
def client(app):
    return app.test_client()


def _signup(client, email="web@example.com", password="pw123456"):
    return client.post("/api/auth/signup", json={"email": email, "password": password})


class TestAuthBlueprint:

    def test_signup(self, client, app):
        response = _signup(client, email="Web@Example.com")

        assert response.status_code == 201
        body = response.get_json()
        assert body["user"]["email"] == "web@example.com"
        assert "password_hash" not in body["user"]
        assert "." in body["token"]
        assert client.get_cookie("session").value == body["token"]
        assert app.extensions["fineauth"].cookie_name == "session"

    def test_signup_duplicate(self, client):
        _signup(client)
        response = _signup(client, email="WEB@example.com")

        assert response.status_code == 409
        assert response.get_json()["code"] == "USER_ALREADY_EXISTS"

    def test_signup_missing_fields(self, client):
        response = client.post("/api/auth/signup", json={"email": "x@example.com"})

        assert response.status_code == 400
        assert response.get_json()["code"] == "VALIDATION_ERROR"

    @pytest.mark.parametrize("route", ["/api/auth/signup", "/api/auth/signin"])
    @pytest.mark.parametrize("body", [
        ["x"],
        "web@example.com",
        42,
        {"email": None, "password": "pw123456"},
        {"email": "web@example.com", "password": 123456},
        {"email": ["web@example.com"], "password": "pw123456"},
    ])
    def test_malformed_bodies_are_rejected(self, client, route, body):
        response = client.post(route, json=body)

        assert response.status_code == 400
        assert response.get_json()["code"] == "VALIDATION_ERROR"

    def test_non_json_body(self, client):
        response = client.post("/api/auth/signup", data="email=a@b.com", content_type="text/plain")
        assert response.status_code == 400

    def test_null_email_does_not_create_user(self, client, auth):
        client.post("/api/auth/signup", json={"email": None, "password": "pw123456"})
        assert auth.storage.get_user_by_email("none") is None

    def test_signin(self, client):
        _signup(client)
        response = client.post("/api/auth/signin", json={"email": "web@example.com", "password": "pw123456"})

        assert response.status_code == 200
        assert response.get_json()["user"]["email"] == "web@example.com"

    def test_signin_failures_look_the_same(self, client):
        _signup(client)
        unknown = client.post("/api/auth/signin", json={"email": "no@example.com", "password": "pw123456"})
        wrong = client.post("/api/auth/signin", json={"email": "web@example.com", "password": "bad"})

        assert unknown.status_code == wrong.status_code == 401
        assert unknown.get_json() == wrong.get_json()

    def test_me_with_bearer_token(self, client):
        token = _signup(client).get_json()["token"]
        client.delete_cookie("session")

        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        assert response.get_json()["user"]["email"] == "web@example.com"

    def test_me_with_cookie(self, client):
        _signup(client)
        assert client.get("/api/auth/me").status_code == 200

    def test_me_unauthenticated(self, client):
        response = client.get("/api/auth/me")

        assert response.status_code == 401
        assert response.get_json() == {"error": "Unauthorized"}

    def test_me_tampered_token(self, client):
        token = _signup(client).get_json()["token"]
        client.delete_cookie("session")

        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}x"})

        assert response.status_code == 401

    def test_signout(self, client, auth):
        token = _signup(client).get_json()["token"]

        response = client.post("/api/auth/signout")

        assert response.status_code == 200
        assert response.get_json() == {"message": "Signed out"}
        assert client.get_cookie("session") is None
        assert auth.validate_session(token) is None

    def test_login_required_sets_g(self, client):
        result = _signup(client).get_json()

        response = client.get("/api/profile")

        assert response.get_json() == {"email": "web@example.com", "session": result["user"]["id"]}
