"""
Tests for user registration, login and profile endpoints.
"""

from datetime import datetime

import pytest

from barberin.core.clock import utcnow
from barberin.core.security import ROLE_USER, decode_access_token


class TestRegister:
    def test_register_returns_user_without_password(self, client, user_payload):
        response = client.post("/api/users/register", json=user_payload)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "User registered successfully"
        assert body["data"]["email"] == "ana@x.com"
        assert body["data"]["first_name"] == "Ana"
        assert "password" not in body["data"]
        assert "password_hash" not in body["data"]

    def test_created_at_is_stored_and_read_back(self, client, user_payload, auth_header):
        created = client.post("/api/users/register", json=user_payload).json()["data"]
        token = client.post(
            "/api/users/login", json={"email": user_payload["email"], "password": user_payload["password"]}
        ).json()["data"]["token"]

        user = client.get("/api/users/profile", headers=auth_header(token)).json()["data"]["user"]

        assert datetime.fromisoformat(user["created_at"]).year == utcnow().year
        assert user["created_at"][:19] == created["created_at"][:19]

    def test_register_same_email_twice_conflicts(self, client, user_payload):
        client.post("/api/users/register", json=user_payload)

        response = client.post("/api/users/register", json=user_payload)

        assert response.status_code == 409
        body = response.json()
        assert body["success"] is False
        assert "already exists" in body["message"]

    def test_email_is_normalized_before_uniqueness_check(self, client, user_payload):
        client.post("/api/users/register", json=user_payload)

        response = client.post("/api/users/register", json=dict(user_payload, email="  ANA@X.com "))

        assert response.status_code == 409

    @pytest.mark.parametrize(
        "field, message",
        [
            ("first_name", "First name required (minimum 2 characters)"),
            ("last_name", "Last name required (minimum 2 characters)"),
            ("email", "Invalid email"),
            ("password", "Password must have at least 6 characters"),
        ],
    )
    def test_missing_required_field(self, client, user_payload, field, message):
        payload = dict(user_payload)
        del payload[field]

        response = client.post("/api/users/register", json=payload)

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert message in body["errors"]

    def test_invalid_optional_phone(self, client, user_payload):
        response = client.post("/api/users/register", json=dict(user_payload, phone="abc"))

        assert response.status_code == 400
        assert response.json()["errors"] == ["Invalid phone number"]

    def test_free_text_is_sanitized(self, client, user_payload):
        payload = dict(user_payload, first_name="<script>Ana", address="  Calle   8 <b>")

        data = client.post("/api/users/register", json=payload).json()["data"]

        assert data["first_name"] == "scriptAna"
        assert data["address"] == "Calle 8 b"


class TestLogin:
    def test_login_returns_verifiable_token(self, client, user_payload):
        user = client.post("/api/users/register", json=user_payload).json()["data"]

        response = client.post("/api/users/login", json={"email": "ana@x.com", "password": "secret1"})

        assert response.status_code == 200
        data = response.json()["data"]
        payload = decode_access_token(data["token"])
        assert payload.subject_id == user["user_id"]
        assert payload.role == ROLE_USER
        assert "password_hash" not in data["user"]

    def test_wrong_password(self, client, user_payload):
        client.post("/api/users/register", json=user_payload)

        response = client.post("/api/users/login", json={"email": "ana@x.com", "password": "wrong-one"})

        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Invalid credentials"}

    def test_unknown_email(self, client):
        response = client.post("/api/users/login", json={"email": "nobody@x.com", "password": "secret1"})

        assert response.status_code == 401

    def test_missing_credentials(self, client):
        response = client.post("/api/users/login", json={"email": "ana@x.com"})

        assert response.status_code == 400
        assert response.json()["errors"] == ["Email and password are required"]


class TestProfile:
    def test_get_profile(self, client, user_token, auth_header):
        response = client.get("/api/users/profile", headers=auth_header(user_token))

        assert response.status_code == 200
        user = response.json()["data"]["user"]
        assert user["email"] == "ana@x.com"
        assert "password_hash" not in user

    def test_profile_requires_token(self, client):
        response = client.get("/api/users/profile")

        assert response.status_code == 401
        assert response.json()["message"] == "Token not provided"

    def test_profile_rejects_garbage_token(self, client, auth_header):
        response = client.get("/api/users/profile", headers=auth_header("not-a-token"))

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token"

    def test_profile_rejects_barbershop_token(self, client, barbershop_token, auth_header):
        response = client.get("/api/users/profile", headers=auth_header(barbershop_token))

        assert response.status_code == 403

    def test_partial_update_only_changes_given_fields(self, client, user_token, auth_header):
        headers = auth_header(user_token)

        response = client.put("/api/users/profile", json={"phone": "3009876543"}, headers=headers)
        assert response.status_code == 200
        assert response.json()["message"] == "Profile updated successfully"

        user = client.get("/api/users/profile", headers=headers).json()["data"]["user"]
        assert user["phone"] == "3009876543"
        assert user["first_name"] == "Ana"
        assert user["last_name"] == "Lopez"
        assert user["age_range"] == "18-25"
        assert user["updated_at"] is not None

    def test_update_validation(self, client, user_token, auth_header):
        response = client.put(
            "/api/users/profile",
            json={"first_name": "A", "phone": "xx"},
            headers=auth_header(user_token),
        )

        assert response.status_code == 400
        assert response.json()["errors"] == [
            "First name must have at least 2 characters",
            "Invalid phone number",
        ]


class TestListUsers:
    def test_pagination(self, client, user_token, auth_header, user_payload):
        for i in range(2):
            client.post("/api/users/register", json=dict(user_payload, email=f"user{i}@x.com"))

        response = client.get("/api/users", params={"page": 2, "limit": 2}, headers=auth_header(user_token))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["pagination"] == {"page": 2, "limit": 2, "total": 3, "pages": 2}
        assert len(data["users"]) == 1
        assert all("password_hash" not in u for u in data["users"])

    def test_requires_token(self, client):
        assert client.get("/api/users").status_code == 401

    def test_invalid_page(self, client, user_token, auth_header):
        response = client.get("/api/users", params={"page": 0}, headers=auth_header(user_token))

        assert response.status_code == 400
        assert response.json()["success"] is False
