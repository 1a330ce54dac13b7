"""
Pytest fixtures for the API tests.

The database URL and secret must be in place before the app is imported.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel

from barberin.database import engine
from barberin.main import app


@pytest.fixture
def client():
    """Test client with fresh tables for every test."""
    with TestClient(app) as test_client:
        yield test_client
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def auth_header():
    def build(token):
        return {"Authorization": f"Bearer {token}"}
    return build


@pytest.fixture
def user_payload():
    return {
        "first_name": "Ana",
        "last_name": "Lopez",
        "email": "ana@x.com",
        "password": "secret1",
        "age_range": "18-25",
    }


@pytest.fixture
def barbershop_payload():
    return {
        "name": "Barberia Central",
        "email": "central@barberin.com",
        "phone": "3001234567",
        "password": "secret1",
        "address": "Calle 72 # 45-10, Barranquilla",
        "latitude": 10.9878,
        "longitude": -74.7889,
        "responsible_person": "Carlos Mendoza",
        "id_document": "1234567890",
    }


@pytest.fixture
def user_login(client, user_payload):
    """Registers Ana and returns the login data ({token, user})."""
    client.post("/api/users/register", json=user_payload)
    response = client.post(
        "/api/users/login",
        json={"email": user_payload["email"], "password": user_payload["password"]},
    )
    return response.json()["data"]


@pytest.fixture
def user_token(user_login):
    return user_login["token"]


@pytest.fixture
def barbershop_login(client, barbershop_payload):
    """Registers the central barbershop and returns the login data ({token, barbershop})."""
    client.post("/api/barbershops/register", json=barbershop_payload)
    response = client.post(
        "/api/barbershops/login",
        json={"email": barbershop_payload["email"], "password": barbershop_payload["password"]},
    )
    return response.json()["data"]


@pytest.fixture
def barbershop_token(barbershop_login):
    return barbershop_login["token"]


@pytest.fixture
def barbershop_id(barbershop_login):
    return barbershop_login["barbershop"]["barbershop_id"]


@pytest.fixture
def other_barbershop_token(client, barbershop_payload):
    payload = dict(barbershop_payload, name="Barberia Norte", email="norte@barberin.com")
    client.post("/api/barbershops/register", json=payload)
    response = client.post(
        "/api/barbershops/login",
        json={"email": payload["email"], "password": payload["password"]},
    )
    return response.json()["data"]["token"]
