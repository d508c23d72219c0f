"""
Client Schemas - Pydantic models for client data validation and serialization.

Request bodies accept both snake_case and camelCase keys; responses are
rendered with camelCase keys.
"""
from typing import List, Optional
from pydantic import BaseModel, EmailStr, Field
from pydantic.alias_generators import to_camel
from datetime import datetime
from .models import Gender
from ..core.pagination import PageMeta

class CamelModel(BaseModel):
    """Base schema that reads snake_case or camelCase and writes camelCase."""
    class Config:
        alias_generator = to_camel
        populate_by_name = True

class ClientLogin(CamelModel):
    """
    Client Login Schema - Used for authentication

    Fields:
    - email: Client's email address
    - password: Client's plain text password
    """
    email: EmailStr
    password: str

class EmailOtpVerify(CamelModel):
    """
    Email-keyed OTP verification

    Fields:
    - email: Client's email address
    - otp: Code sent by email and SMS
    """
    email: Optional[EmailStr] = None
    otp: Optional[str] = None

class ClientOtpVerify(CamelModel):
    """
    Id-keyed OTP verification

    Fields:
    - client_id: Client's id as returned on registration
    - otp: Code sent by email and SMS
    """
    client_id: Optional[int] = None
    otp: Optional[str] = None

class EmailTokenVerify(CamelModel):
    """Signed email-link verification token."""
    token: str

class ResendOtp(CamelModel):
    """Email address whose verification code should be re-sent."""
    email: EmailStr

class RefreshTokenRequest(CamelModel):
    """Refresh token supplied in the body when no cookie is present."""
    refresh_token: Optional[str] = None

class ClientResponse(CamelModel):
    """
    Client Response Schema - Used when returning client data

    Password hash, refresh token, OTP fields and verification token are
    never part of this schema.
    """
    id: int
    name: str
    email: str
    age: int
    gender: Gender
    phone: str
    avatar: Optional[str] = ""
    verified: bool
    token_version: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        """Configuration for Pydantic model to enable ORM mode"""
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True

class TokenPair(CamelModel):
    """Access and refresh tokens issued together."""
    access_token: str
    refresh_token: str

class AuthResponse(CamelModel):
    """Client plus the token pair issued for it."""
    client: ClientResponse
    access_token: str
    refresh_token: str

class OtpVerifiedResponse(CamelModel):
    """Result of a successful id-keyed OTP verification."""
    client_id: int
    message: str = "OTP verified successfully!"

class ClientListResponse(CamelModel):
    """A page of clients plus pagination metadata."""
    clients: List[ClientResponse]
    pagination: PageMeta

class ClientListFilters(BaseModel):
    """
    Filters and ordering for client listing

    Fields:
    - verified: Only clients with this verification state
    - gender: Only clients of this gender
    - sort_by: Column to sort on
    - sort_order: asc or desc
    """
    verified: Optional[bool] = None
    gender: Optional[Gender] = None
    sort_by: str = Field(default="created_at")
    sort_order: str = Field(default="desc", pattern="^(asc|desc)$")
