"""Tests for registration, login and token handling."""

from linkku.models import User


def test_register_returns_token(client):
    """Sign-up creates a USER and signs them in."""
    response = client.post(
        "/api/auth/register",
        json={"name": "Alice", "email": "Alice@Example.com", "password": "secret123"},
    )

    assert response.status_code == 201
    data = response.get_json()["data"]
    assert data["user"]["email"] == "alice@example.com"
    assert data["user"]["role"] == "USER"
    assert data["access_token"]


def test_register_duplicate_email(client, user):
    """Emails are unique."""
    response = client.post(
        "/api/auth/register",
        json={"name": "Owner Again", "email": "OWNER@example.com", "password": "secret123"},
    )

    assert response.status_code == 409


def test_register_validation(client):
    """Invalid fields are reported together."""
    response = client.post("/api/auth/register", json={"name": "A", "email": "bad", "password": "1"})

    assert response.status_code == 400
    assert set(response.get_json()["error"]["fields"]) == {"name", "email", "password"}
    assert User.query.count() == 0


def test_login_and_me(client, user):
    """A login token authenticates /me."""
    login = client.post("/api/auth/login", json={"email": "owner@example.com", "password": "secret123"})
    assert login.status_code == 200
    token = login.get_json()["data"]["access_token"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert me.status_code == 200
    assert me.get_json()["data"]["user"]["id"] == user.id


def test_login_wrong_password(client, user):
    """Bad credentials are a 401."""
    response = client.post("/api/auth/login", json={"email": "owner@example.com", "password": "nope"})

    assert response.status_code == 401
    assert response.get_json()["error"]["code"] == "INVALID_CREDENTIALS"


def test_me_requires_token(client):
    """Missing tokens use the error envelope."""
    response = client.get("/api/auth/me")

    assert response.status_code == 401
    assert response.get_json() == {
        "success": False,
        "error": {"message": "Authentication required", "code": "AUTH_REQUIRED"},
    }


def test_garbage_token(client):
    """Malformed tokens are rejected."""
    response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401


def test_profile_update(client, auth_headers, user):
    """Users change their own name and password."""
    headers = auth_headers(user)

    response = client.patch(
        "/api/profile",
        json={"name": "Renamed", "currentPassword": "secret123", "newPassword": "another456"},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.get_json()["data"]["user"]["name"] == "Renamed"

    login = client.post("/api/auth/login", json={"email": "owner@example.com", "password": "another456"})
    assert login.status_code == 200


def test_profile_password_needs_current(client, auth_headers, user):
    """A new password requires the current one."""
    response = client.patch(
        "/api/profile",
        json={"currentPassword": "wrong", "newPassword": "another456"},
        headers=auth_headers(user),
    )

    assert response.status_code == 400
    assert "currentPassword" in response.get_json()["error"]["fields"]


def test_login_with_array_body(client):
    """Non-object JSON bodies are rejected, not crashed on."""
    response = client.post("/api/auth/login", json=["owner@example.com", "secret123"])

    assert response.status_code == 400
    assert response.get_json()["error"]["code"] == "VALIDATION_ERROR"
