"""
Client Model - Stores identity, credentials and verification state of a client.
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum
from sqlalchemy.sql import func
import enum
from ..database import Base

class Gender(str, enum.Enum):
    """
    Enumeration for client genders.
    """
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"

class Client(Base):
    """
    Client Model - Stores all client information in the system

    Fields:
    - id: Primary key, embedded as subject id in tokens
    - name: Client's name
    - email: Unique email address for login and OTP delivery
    - age: Client's age
    - gender: Client's gender
    - password_hash: Securely hashed password (never store raw passwords)
    - phone: Unique phone number for OTP delivery
    - avatar: URL of the uploaded avatar ("" when none)
    - verified: Whether the OTP verification has been completed
    - refresh_token: Last issued refresh token; None once logged out
    - verification_token: Signed token for the email-link verification flow
    - token_version: Counter embedded in access tokens
    - otp: Pending one-time code; None once cleared
    - otp_expires: Expiry of the pending code; None once cleared
    - created_at: Timestamp when client was created
    - updated_at: Timestamp when client was last updated
    """
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    age = Column(Integer, nullable=False)
    gender = Column(Enum(Gender, values_callable=lambda e: [member.value for member in e]), nullable=False)
    password_hash = Column(String, nullable=False)
    phone = Column(String, unique=True, index=True, nullable=False)
    avatar = Column(String, nullable=False, default="")
    verified = Column(Boolean, nullable=False, default=False)
    refresh_token = Column(String, nullable=True, default=None)
    verification_token = Column(String, nullable=True)
    token_version = Column(Integer, nullable=False, default=0)
    otp = Column(String, nullable=True)
    otp_expires = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        """String representation of the Client model"""
        return f"<Client(id={self.id}, email='{self.email}', verified={self.verified})>"

    def clear_otp(self) -> None:
        """Clear the pending code and its expiry together."""
        self.otp = None
        self.otp_expires = None

    @property
    def is_logged_in(self) -> bool:
        return self.refresh_token is not None
