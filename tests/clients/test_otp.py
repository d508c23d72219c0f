"""
Unit tests for one-time code generation and checking.
"""
from datetime import datetime, timedelta, timezone

from client_service.clients.models import Client
from client_service.clients.otp import generate_otp, otp_expiry, is_otp_valid, assign_otp

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def test_generated_codes_are_six_digits_in_range():
    for _ in range(200):
        code = generate_otp()
        assert len(code) == 6
        assert code.isdigit()
        assert 100000 <= int(code) <= 999999


def test_expiry_is_five_minutes_out():
    assert otp_expiry(NOW) == NOW + timedelta(minutes=5)


def test_matching_code_before_expiry_is_valid():
    client = Client(otp="123456", otp_expires=NOW + timedelta(minutes=1))
    assert is_otp_valid(client, "123456", now=NOW)


def test_wrong_code_is_invalid():
    client = Client(otp="123456", otp_expires=NOW + timedelta(minutes=1))
    assert not is_otp_valid(client, "654321", now=NOW)


def test_code_after_expiry_is_invalid():
    client = Client(otp="123456", otp_expires=NOW - timedelta(seconds=1))
    assert not is_otp_valid(client, "123456", now=NOW)


def test_cleared_code_never_validates():
    client = Client(otp=None, otp_expires=None)
    assert not is_otp_valid(client, None, now=NOW)
    assert not is_otp_valid(client, "123456", now=NOW)


def test_naive_expiry_from_store_is_read_as_utc():
    client = Client(otp="123456", otp_expires=(NOW + timedelta(minutes=1)).replace(tzinfo=None))
    assert is_otp_valid(client, "123456", now=NOW)


def test_assign_sets_code_and_expiry_together():
    client = Client()
    code = assign_otp(client, now=NOW)
    assert client.otp == code
    assert client.otp_expires == NOW + timedelta(minutes=5)
    client.clear_otp()
    assert client.otp is None and client.otp_expires is None
