"""
Test configuration for the client service backend.
"""
import os

# Settings are read at import time, so the environment must be ready first
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ACCESS_TOKEN_SECRET", "test-access-secret")
os.environ.setdefault("REFRESH_TOKEN_SECRET", "test-refresh-secret")
os.environ.setdefault("EMAIL_SECRET", "test-email-secret")
os.environ.setdefault("MAIL_USERNAME", "noreply@example.com")
os.environ.setdefault("MAIL_PASSWORD", "password")
os.environ.setdefault("MAIL_FROM", "noreply@example.com")
os.environ.setdefault("MAIL_SERVER", "smtp.example.com")
os.environ.setdefault("SMS_ACCOUNT_SID", "ACtest")
os.environ.setdefault("SMS_AUTH_TOKEN", "sms-token")
os.environ.setdefault("SMS_FROM_NUMBER", "+15550000000")
os.environ.setdefault("CLOUDINARY_CLOUD_NAME", "demo")
os.environ.setdefault("CLOUDINARY_API_KEY", "key")
os.environ.setdefault("CLOUDINARY_API_SECRET", "secret")
# TestClient talks plain http, so Secure cookies would never be sent back
os.environ.setdefault("COOKIE_SECURE", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from client_service.database import Base, get_db
from client_service.main import app
from client_service.clients.dependencies import get_notification_service, get_blob_store
from client_service.clients.exceptions import NotificationDeliveryException
from client_service.clients.models import Client

# Test database URL
TEST_DATABASE_URL = "sqlite://"

# Create test database engine
engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

# Create test session factory
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

API = "/api/v1/clients"
PASSWORD = "Sup3rSecret!"


class FakeNotificationService:
    """Records every code it is asked to deliver."""
    def __init__(self):
        self.otps = []
        self.emails = []
        self.sms = []

    async def send_email(self, to, subject, html):
        self.emails.append((to, subject, html))

    async def send_sms(self, phone, code):
        self.sms.append((phone, code))

    async def send_otp(self, email, phone, code):
        self.otps.append((email, phone, code))
        await self.send_sms(phone, code)
        await self.send_email(email, "Your OTP for Email Verification", code)

    def last_code_for(self, email):
        return [code for to, _, code in self.otps if to == email][-1]


class FailingNotificationService(FakeNotificationService):
    async def send_otp(self, email, phone, code):
        raise NotificationDeliveryException("Failed to send verification SMS")


class FakeBlobStore:
    """Pretends to upload avatars and returns a predictable URL."""
    def __init__(self):
        self.uploads = 0

    def upload(self, file):
        self.uploads += 1
        return f"https://res.cloudinary.com/demo/image/upload/avatar{self.uploads}.png"


@pytest.fixture(scope="function")
def db():
    """
    Create a fresh database for each test.
    """
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def notifier():
    return FakeNotificationService()


@pytest.fixture
def blob_store():
    return FakeBlobStore()


@pytest.fixture(scope="function")
def client(db, notifier, blob_store):
    """
    Create a test client with a test database session and fake collaborators.
    """
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notification_service] = lambda: notifier
    app.dependency_overrides[get_blob_store] = lambda: blob_store

    with TestClient(app) as client:
        yield client

    app.dependency_overrides = {}


def registration_form(**overrides):
    form = {
        "name": "Jane Doe",
        "email": "jane@example.com",
        "phone": "+15551234567",
        "password": PASSWORD,
        "age": "29",
        "gender": "Female",
    }
    form.update(overrides)
    return form


def register(client, **overrides):
    return client.post(f"{API}/register", data=registration_form(**overrides))


def register_and_verify(client, notifier, **overrides):
    """Register a client and complete its email OTP verification."""
    response = register(client, **overrides)
    assert response.status_code == 201, response.text
    email = response.json()["data"]["client"]["email"]
    verify = client.post(f"{API}/verify-email", json={"email": email, "otp": notifier.last_code_for(email)})
    assert verify.status_code == 200, verify.text
    return response.json()["data"]


def login(client, email="jane@example.com", password=PASSWORD):
    return client.post(f"{API}/login", json={"email": email, "password": password})


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


def stored_client(db, email):
    db.expire_all()
    return db.query(Client).filter(Client.email == email).first()
