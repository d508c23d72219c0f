"""
Tests for client listing, lookup by id and profile updates.
"""
import io

import pytest

from client_service.clients.models import Client, Gender
from client_service.clients.repository import ClientRepository
from client_service.core.security import verify_password
from tests.conftest import API, PASSWORD, login, register, register_and_verify, stored_client

SECRET_FIELDS = ["password", "passwordHash", "refreshToken", "otp", "otpExpires", "verificationToken"]


@pytest.fixture
def authed(client, notifier):
    """A verified, logged-in client; its cookies authenticate later requests."""
    data = register_and_verify(client, notifier)
    login(client)
    return data["client"]


def seed_clients(db, count, start=0):
    genders = [Gender.MALE, Gender.FEMALE, Gender.OTHER]
    for i in range(start, start + count):
        db.add(Client(
            name=f"Client {i:02d}",
            email=f"client{i:02d}@example.com",
            phone=f"+1555000{i:04d}",
            age=20 + i,
            gender=genders[i % 3],
            password_hash="not-a-real-hash",
            verified=i % 2 == 0,
            refresh_token=f"refresh-{i}",
            otp="123456",
            verification_token="email-token",
        ))
    db.commit()


def test_second_page_of_twenty_five(client, db, authed):
    seed_clients(db, 24)  # plus the authenticated client

    response = client.get(f"{API}/", params={"page": 2, "limit": 10})
    assert response.status_code == 200
    data = response.json()["data"]
    assert len(data["clients"]) == 10
    assert data["pagination"] == {
        "currentPage": 2,
        "totalPages": 3,
        "totalClients": 25,
        "hasNextPage": True,
        "hasPrevPage": True,
    }


def test_listing_is_sanitized(client, db, authed):
    seed_clients(db, 3)
    for item in client.get(f"{API}/").json()["data"]["clients"]:
        for field in SECRET_FIELDS:
            assert field not in item


def test_filter_by_verified(client, db, authed):
    seed_clients(db, 6)
    data = client.get(f"{API}/", params={"verified": "false"}).json()["data"]
    assert data["pagination"]["totalClients"] == 3
    assert all(item["verified"] is False for item in data["clients"])


def test_filter_by_gender(client, db, authed):
    seed_clients(db, 6)
    data = client.get(f"{API}/", params={"gender": "Male"}).json()["data"]
    assert data["pagination"]["totalClients"] == 2
    assert all(item["gender"] == "Male" for item in data["clients"])


def test_sort_by_age_ascending(client, db, authed):
    seed_clients(db, 5)
    data = client.get(f"{API}/", params={"sortBy": "age", "sortOrder": "asc"}).json()["data"]
    ages = [item["age"] for item in data["clients"]]
    assert ages == sorted(ages)


def test_sort_by_unknown_field_is_rejected(client, authed):
    response = client.get(f"{API}/", params={"sortBy": "password_hash"})
    assert response.status_code == 400


def test_listing_requires_authentication(client):
    client.cookies.clear()
    assert client.get(f"{API}/").status_code == 401


def test_get_client_by_id(client, db, authed):
    seed_clients(db, 1)
    target = stored_client(db, "client00@example.com")

    response = client.get(f"{API}/{target.id}")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["email"] == "client00@example.com"
    for field in SECRET_FIELDS:
        assert field not in data


def test_get_missing_client_by_id(client, authed):
    response = client.get(f"{API}/9999")
    assert response.status_code == 404
    assert response.json()["message"] == "Client not found"


def test_update_profile_fields(client, db, authed):
    response = client.patch(f"{API}/me", data={"name": "Jane Q. Doe", "age": "30"})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["name"] == "Jane Q. Doe"
    assert data["age"] == 30
    assert data["email"] == "jane@example.com"


def test_update_password_is_rehashed(client, db, authed):
    client.patch(f"{API}/me", data={"password": "An0ther-one"})
    record = stored_client(db, "jane@example.com")
    assert verify_password("An0ther-one", record.password_hash)
    assert not verify_password(PASSWORD, record.password_hash)
    assert login(client, password="An0ther-one").status_code == 200


def test_update_to_taken_email_is_rejected(client, db, authed):
    seed_clients(db, 1)
    response = client.patch(f"{API}/me", data={"email": "client00@example.com"})
    assert response.status_code == 400
    assert response.json()["message"] == "Email or phone already in use"
    assert stored_client(db, "jane@example.com") is not None


def test_update_to_taken_phone_is_rejected(client, db, authed):
    seed_clients(db, 1)
    response = client.patch(f"{API}/me", data={"phone": "+15550000000"})
    assert response.status_code == 400
    assert stored_client(db, "jane@example.com").phone == "+15551234567"


def test_unique_index_guards_updates(client, db, authed, monkeypatch):
    seed_clients(db, 1)
    monkeypatch.setattr(ClientRepository, "find_by_email_or_phone", lambda self, *args, **kwargs: None)

    response = client.patch(f"{API}/me", data={"phone": "+15550000000"})
    assert response.status_code == 400
    assert response.json()["message"] == "Email or phone already in use"
    assert stored_client(db, "jane@example.com").phone == "+15551234567"


def test_update_keeping_own_email_is_allowed(client, authed):
    response = client.patch(f"{API}/me", data={"email": "jane@example.com", "phone": "+15551234567"})
    assert response.status_code == 200


def test_update_replaces_avatar(client, blob_store, authed):
    response = client.patch(
        f"{API}/me",
        files={"avatar": ("me.webp", io.BytesIO(b"RIFF fake"), "image/webp")}
    )
    assert response.status_code == 200
    assert response.json()["data"]["avatar"].endswith("avatar1.png")


def test_update_requires_authentication(client):
    register(client)
    client.cookies.clear()
    assert client.patch(f"{API}/me", data={"name": "X"}).status_code == 401
