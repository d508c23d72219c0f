"""
Token service: issues, verifies and rotates client access/refresh tokens.

Only one refresh token is active per client; issuing a new one overwrites the
stored value, which invalidates the previous session.
"""
from datetime import timedelta
from typing import Any, Dict, Optional
import logging
import uuid

from ..config import settings
from ..core.security import create_token, decode_token
from .models import Client
from .repository import ClientRepository
from .schemas import TokenPair
from .exceptions import ValidationException, InvalidTokenException

# Set up logging
logger = logging.getLogger(__name__)

CLIENT_USER_TYPE = "Client"
ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

def issue_access_token(client: Client) -> str:
    """
    Create a short-lived access token for ``client``.

    The token carries the client id, email, a fixed user type, the
    client's token version and an ``access`` type marker.
    """
    return create_token(
        {
            "id": client.id,
            "email": client.email,
            "user_type": CLIENT_USER_TYPE,
            "token_version": client.token_version or 0,
            "type": ACCESS_TOKEN_TYPE,
        },
        settings.access_token_secret,
        timedelta(minutes=settings.access_token_expire_minutes)
    )

def issue_refresh_token(client: Client) -> str:
    """Create a long-lived refresh token that only identifies ``client``."""
    return create_token(
        {"id": client.id, "type": REFRESH_TOKEN_TYPE, "jti": uuid.uuid4().hex},
        settings.refresh_token_secret,
        timedelta(days=settings.refresh_token_expire_days)
    )

def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Return the access token claims, or None if the token is invalid or expired."""
    payload = decode_token(token, settings.access_token_secret)
    if not payload or payload.get("type") != ACCESS_TOKEN_TYPE or payload.get("id") is None:
        return None
    return payload

def verify_refresh_token(token: str) -> int:
    """
    Check signature and expiry of a refresh token.

    Returns:
        int: Id of the client the token was issued to

    Raises:
        InvalidTokenException: If the token cannot be trusted
    """
    payload = decode_token(token, settings.refresh_token_secret)
    if not payload or payload.get("type") != REFRESH_TOKEN_TYPE or payload.get("id") is None:
        raise InvalidTokenException()
    return payload["id"]

async def generate_access_and_refresh_tokens(repo: ClientRepository, client_id: Optional[int]) -> TokenPair:
    """
    Issue a token pair for the client and persist the refresh token on it.

    Args:
        repo: Client repository
        client_id: Id of the client

    Returns:
        TokenPair: Newly issued tokens

    Raises:
        ValidationException: If no id is given or no client has it
    """
    if not client_id:
        raise ValidationException("Client ID is required")

    client = repo.find_by_id(client_id)
    if not client:
        raise ValidationException("No client found with that ID")

    access_token = issue_access_token(client)
    refresh_token = issue_refresh_token(client)

    client.refresh_token = refresh_token
    repo.save(client)
    logger.info(f"Issued token pair for client {client.id}")

    return TokenPair(access_token=access_token, refresh_token=refresh_token)

async def rotate_refresh_token(repo: ClientRepository, presented_token: str) -> TokenPair:
    """
    Exchange a refresh token for a new token pair.

    The presented token must equal the one stored on the client. The swap is a
    conditional update on the previous value, so of two concurrent refreshes
    with the same token only one can succeed.

    Raises:
        InvalidTokenException: If the token is invalid, stale or lost the race
    """
    client_id = verify_refresh_token(presented_token)
    client = repo.find_by_id(client_id)
    if not client or client.refresh_token != presented_token:
        logger.warning(f"Refresh rejected: token does not match stored token for client {client_id}")
        raise InvalidTokenException()

    access_token = issue_access_token(client)
    refresh_token = issue_refresh_token(client)

    if not repo.compare_and_set_refresh_token(client.id, presented_token, refresh_token):
        logger.warning(f"Refresh rejected: token for client {client.id} was rotated concurrently")
        raise InvalidTokenException()

    logger.info(f"Token refreshed for client {client.id}")
    return TokenPair(access_token=access_token, refresh_token=refresh_token)

def create_email_verification_token(email: str) -> str:
    """Sign the token used by the email-link verification flow."""
    return create_token(
        {"email": email},
        settings.email_secret,
        timedelta(days=settings.email_token_expire_days)
    )

def decode_email_verification_token(token: str) -> Optional[str]:
    """Return the email a verification token was issued for, or None if invalid."""
    payload = decode_token(token, settings.email_secret)
    if not payload:
        return None
    return payload.get("email")
