"""
One-time verification codes sent to a client's email and phone.
"""
from datetime import datetime, timedelta
from typing import Optional
import logging
import secrets

from ..config import settings
from ..core.security import utcnow, as_utc
from .models import Client
from .repository import ClientRepository
from .exceptions import InvalidOtpException

# Set up logging
logger = logging.getLogger(__name__)

OTP_MIN = 100000
OTP_MAX = 999999

def generate_otp() -> str:
    """Six digit numeric code drawn uniformly from [100000, 999999]."""
    return str(OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1))

def otp_expiry(now: Optional[datetime] = None) -> datetime:
    """Expiry of a code generated at ``now``."""
    return (now or utcnow()) + timedelta(minutes=settings.otp_expire_minutes)

def is_otp_valid(client: Client, code: Optional[str], now: Optional[datetime] = None) -> bool:
    """
    Check ``code`` against the client's pending code.

    The comparison is an exact match; a cleared code never validates.
    """
    if not code or client.otp is None or client.otp_expires is None:
        return False
    if client.otp != str(code):
        return False
    return as_utc(client.otp_expires) >= (now or utcnow())

def assign_otp(client: Client, now: Optional[datetime] = None) -> str:
    """Give ``client`` a fresh code and expiry; returns the code."""
    code = generate_otp()
    client.otp = code
    client.otp_expires = otp_expiry(now)
    return code

async def verify_client_otp(repo: ClientRepository, client: Client, code: Optional[str]) -> Client:
    """
    Complete verification of ``client`` with ``code``.

    On success the pending code is cleared and the client marked verified.

    Raises:
        InvalidOtpException: If the code does not match or has expired
    """
    if not is_otp_valid(client, code):
        logger.warning(f"OTP verification failed for client {client.id}")
        raise InvalidOtpException()

    client.verified = True
    client.clear_otp()
    repo.save(client)
    logger.info(f"Client {client.id} verified")
    return client
