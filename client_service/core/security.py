"""
Core security utilities for password hashing and JWT signing.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import jwt, JWTError
from passlib.context import CryptContext
import logging

from ..config import settings

# Set up logging
logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password

    Returns:
        str: Hashed password
    """
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against a hash.

    Args:
        plain_password: Plain text password
        hashed_password: Hashed password to compare against

    Returns:
        bool: True if password matches hash
    """
    if not plain_password or not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)

def create_token(data: Dict[str, Any], secret: str, expires_delta: timedelta) -> str:
    """
    Sign a JWT carrying ``data`` that expires after ``expires_delta``.

    Args:
        data: Claims to encode in the token
        secret: Signing secret
        expires_delta: Token lifetime

    Returns:
        str: Encoded JWT token
    """
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    to_encode.update({"iat": now, "exp": now + expires_delta})
    return jwt.encode(to_encode, secret, algorithm=settings.algorithm)

def decode_token(token: str, secret: str) -> Optional[Dict[str, Any]]:
    """
    Verify and decode a JWT token.

    Args:
        token: JWT token string
        secret: Secret the token was signed with

    Returns:
        Dict containing token payload if valid, None if invalid or expired
    """
    try:
        return jwt.decode(token, secret, algorithms=[settings.algorithm])
    except JWTError as e:
        logger.debug(f"Token rejected: {str(e)}")
        return None

def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)

def as_utc(value: datetime) -> datetime:
    """
    Interpret ``value`` as UTC.

    Some stores (SQLite) drop tzinfo on read; such naive timestamps were written as UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
