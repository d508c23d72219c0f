"""
Tests for OTP and email-link verification.
"""
from datetime import timedelta

from client_service.core.security import utcnow
from tests.conftest import API, register, login, stored_client


def test_unverified_client_cannot_log_in(client):
    register(client)
    response = login(client)
    assert response.status_code == 401
    assert response.json()["message"] == "Please verify your email first"


def test_verify_email_with_correct_code(client, db, notifier):
    register(client)
    code = notifier.last_code_for("jane@example.com")

    response = client.post(f"{API}/verify-email", json={"email": "jane@example.com", "otp": code})
    assert response.status_code == 200
    assert response.json()["success"] is True

    record = stored_client(db, "jane@example.com")
    assert record.verified is True
    assert record.otp is None
    assert record.otp_expires is None
    assert login(client).status_code == 200


def test_repeating_verification_with_cleared_code_fails(client, notifier):
    register(client)
    code = notifier.last_code_for("jane@example.com")
    payload = {"email": "jane@example.com", "otp": code}

    assert client.post(f"{API}/verify-email", json=payload).status_code == 200
    response = client.post(f"{API}/verify-email", json=payload)
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid or expired OTP"


def test_wrong_code_fails(client, db, notifier):
    register(client)
    code = notifier.last_code_for("jane@example.com")
    wrong = "100000" if code != "100000" else "100001"

    response = client.post(f"{API}/verify-email", json={"email": "jane@example.com", "otp": wrong})
    assert response.status_code == 400
    assert stored_client(db, "jane@example.com").verified is False


def test_expired_code_fails_even_when_correct(client, db, notifier):
    register(client)
    record = stored_client(db, "jane@example.com")
    record.otp_expires = utcnow() - timedelta(minutes=6)
    db.commit()

    response = client.post(
        f"{API}/verify-email",
        json={"email": "jane@example.com", "otp": notifier.last_code_for("jane@example.com")}
    )
    assert response.status_code == 400
    assert stored_client(db, "jane@example.com").verified is False


def test_verify_email_requires_both_fields(client):
    response = client.post(f"{API}/verify-email", json={"email": "jane@example.com"})
    assert response.status_code == 400
    assert response.json()["message"] == "Email and OTP are required"


def test_verify_email_unknown_client(client):
    response = client.post(f"{API}/verify-email", json={"email": "ghost@example.com", "otp": "123456"})
    assert response.status_code == 404


def test_verify_otp_by_id_issues_persisted_tokens(client, db, notifier):
    client_id = register(client).json()["data"]["client"]["id"]
    code = notifier.last_code_for("jane@example.com")

    response = client.post(f"{API}/verify-otp", json={"clientId": client_id, "otp": code})
    assert response.status_code == 200
    assert response.json()["data"]["clientId"] == client_id

    record = stored_client(db, "jane@example.com")
    assert record.verified is True
    assert response.cookies.get("refreshToken") == record.refresh_token


def test_verify_otp_unknown_id(client):
    response = client.post(f"{API}/verify-otp", json={"clientId": 999, "otp": "123456"})
    assert response.status_code == 404


def test_verify_otp_requires_both_fields(client):
    response = client.post(f"{API}/verify-otp", json={"otp": "123456"})
    assert response.status_code == 400


def test_email_link_token_verifies_once(client, db):
    register(client)
    token = stored_client(db, "jane@example.com").verification_token

    response = client.post(f"{API}/verify-email-token", json={"token": token})
    assert response.status_code == 200
    record = stored_client(db, "jane@example.com")
    assert record.verified is True
    assert record.verification_token is None
    assert record.otp is None and record.otp_expires is None

    assert client.post(f"{API}/verify-email-token", json={"token": token}).status_code == 400


def test_email_link_rejects_forged_token(client):
    register(client)
    response = client.post(f"{API}/verify-email-token", json={"token": "forged"})
    assert response.status_code == 400


def test_resend_otp_replaces_code(client, db, notifier):
    register(client)
    first = stored_client(db, "jane@example.com").otp

    response = client.post(f"{API}/resend-otp", json={"email": "jane@example.com"})
    assert response.status_code == 200
    assert len(notifier.otps) == 2

    record = stored_client(db, "jane@example.com")
    assert record.otp == notifier.last_code_for("jane@example.com")
    if record.otp != first:
        failed = client.post(f"{API}/verify-email", json={"email": "jane@example.com", "otp": first})
        assert failed.status_code == 400


def test_resend_otp_for_verified_client_is_rejected(client, notifier):
    register(client)
    client.post(f"{API}/verify-email", json={"email": "jane@example.com", "otp": notifier.last_code_for("jane@example.com")})
    response = client.post(f"{API}/resend-otp", json={"email": "jane@example.com"})
    assert response.status_code == 400
