"""
FastAPI dependencies for client authentication and collaborator injection.
"""
from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from ..database import get_db
from ..core.cloudinary import CloudinaryBlobStore
from ..notifications.service import NotificationService
from .models import Client
from .repository import ClientRepository
from .tokens import decode_access_token
from .exceptions import UnauthorizedException

ACCESS_TOKEN_COOKIE = "accessToken"
REFRESH_TOKEN_COOKIE = "refreshToken"

# Bearer scheme; auto_error is off because the cookie is checked first
bearer_scheme = HTTPBearer(auto_error=False)

def get_client_repository(db: Session = Depends(get_db)) -> ClientRepository:
    """Request-scoped repository over the current database session."""
    return ClientRepository(db)

def get_notification_service(request: Request) -> NotificationService:
    """Notification service built once at startup."""
    return request.app.state.notification_service

def get_blob_store(request: Request) -> CloudinaryBlobStore:
    """Avatar blob store built once at startup."""
    return request.app.state.blob_store

def get_current_client(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    repo: ClientRepository = Depends(get_client_repository)
) -> Client:
    """
    Get current authenticated client from the access token.

    The token is read from the ``accessToken`` cookie, falling back to the
    ``Authorization: Bearer`` header.

    Raises:
        UnauthorizedException: If no token is present, it is invalid, or the client is gone
    """
    token = request.cookies.get(ACCESS_TOKEN_COOKIE)
    if not token and credentials:
        token = credentials.credentials
    if not token:
        raise UnauthorizedException()

    payload = decode_access_token(token)
    if not payload:
        raise UnauthorizedException("Invalid access token")

    client = repo.find_by_id(payload["id"])
    if not client:
        raise UnauthorizedException("Invalid access token")

    return client
