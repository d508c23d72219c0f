"""
Client routes: registration, verification, login/logout, token refresh,
profile management and listing.
"""
from typing import Optional
from fastapi import APIRouter, Body, Depends, File, Form, Query, Request, UploadFile, status
from fastapi.responses import JSONResponse
import logging

from ..config import settings
from ..core.cloudinary import CloudinaryBlobStore
from ..core.pagination import PageParams
from ..core.responses import api_response
from ..notifications.service import NotificationService
from .models import Client, Gender
from .repository import ClientRepository
from .schemas import (
    ClientLogin, EmailOtpVerify, ClientOtpVerify, EmailTokenVerify, ResendOtp,
    RefreshTokenRequest, ClientListFilters, ClientResponse, TokenPair
)
from .dependencies import (
    ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE,
    get_client_repository, get_notification_service, get_blob_store, get_current_client
)
from . import service

# Set up logging
logger = logging.getLogger(__name__)

# Create API router
router = APIRouter()

def set_auth_cookies(response: JSONResponse, tokens: TokenPair) -> JSONResponse:
    """Attach both tokens as http-only cookies."""
    response.set_cookie(ACCESS_TOKEN_COOKIE, tokens.access_token, httponly=True, secure=settings.cookie_secure)
    response.set_cookie(REFRESH_TOKEN_COOKIE, tokens.refresh_token, httponly=True, secure=settings.cookie_secure)
    return response

def clear_auth_cookies(response: JSONResponse) -> JSONResponse:
    response.delete_cookie(ACCESS_TOKEN_COOKIE, httponly=True, secure=settings.cookie_secure)
    response.delete_cookie(REFRESH_TOKEN_COOKIE, httponly=True, secure=settings.cookie_secure)
    return response

# ============================================================================
# REGISTRATION & VERIFICATION ROUTES
# ============================================================================

@router.post("/register", status_code=status.HTTP_201_CREATED, summary="Client Registration")
async def register_client_route(
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    age: Optional[str] = Form(None),
    gender: Optional[str] = Form(None),
    avatar: Optional[UploadFile] = File(None),
    repo: ClientRepository = Depends(get_client_repository),
    notifier: NotificationService = Depends(get_notification_service),
    blob_store: CloudinaryBlobStore = Depends(get_blob_store)
):
    """
    Client registration endpoint.

    Creates an unverified client, sends a verification code by SMS and email,
    and logs the client in. The client must verify before it can log in again.
    """
    result, tokens = await service.register_client(
        repo=repo,
        notifier=notifier,
        blob_store=blob_store,
        name=name,
        email=email,
        phone=phone,
        password=password,
        age=age,
        gender=gender,
        avatar=avatar
    )
    response = api_response(result, "Client registered successfully!", status.HTTP_201_CREATED)
    return set_auth_cookies(response, tokens)

@router.post("/verify-email", summary="Verify Client by Email and OTP")
async def verify_email_route(
    verification_data: EmailOtpVerify,
    repo: ClientRepository = Depends(get_client_repository)
):
    result = await service.verify_email(repo, verification_data.email, verification_data.otp)
    return api_response(result, "Email verified successfully")

@router.post("/verify-otp", summary="Verify Client by Id and OTP")
async def verify_otp_route(
    verification_data: ClientOtpVerify,
    repo: ClientRepository = Depends(get_client_repository)
):
    """
    Id-keyed verification endpoint. Issues a token pair on success.
    """
    result, tokens = await service.verify_otp(repo, verification_data.client_id, verification_data.otp)
    return set_auth_cookies(api_response(result, "OTP verified successfully!"), tokens)

@router.post("/verify-email-token", summary="Verify Client by Email Link Token")
async def verify_email_token_route(
    verification_data: EmailTokenVerify,
    repo: ClientRepository = Depends(get_client_repository)
):
    result = await service.verify_email_token(repo, verification_data.token)
    return api_response(result, "Email verified successfully")

@router.post("/resend-otp", summary="Resend Verification Code")
async def resend_otp_route(
    resend_data: ResendOtp,
    repo: ClientRepository = Depends(get_client_repository),
    notifier: NotificationService = Depends(get_notification_service)
):
    result = await service.resend_otp(repo, notifier, resend_data.email)
    return api_response(result, "OTP sent successfully")

# ============================================================================
# SESSION ROUTES
# ============================================================================

@router.post("/login", summary="Client Login")
async def login_route(
    login_data: ClientLogin,
    repo: ClientRepository = Depends(get_client_repository)
):
    """
    Client login endpoint.

    Returns the client (without credentials) plus a fresh token pair, also
    set as http-only cookies.
    """
    result, tokens = await service.login_client(repo, login_data.email, login_data.password)
    return set_auth_cookies(api_response(result, "Client logged in successfully!"), tokens)

@router.post("/logout", summary="Client Logout")
async def logout_route(
    current_client: Client = Depends(get_current_client),
    repo: ClientRepository = Depends(get_client_repository)
):
    await service.logout_client(repo, current_client)
    return clear_auth_cookies(api_response({}, "Client logged out successfully"))

@router.post("/refresh-token", summary="Refresh Access Token")
async def refresh_token_route(
    request: Request,
    refresh_data: Optional[RefreshTokenRequest] = Body(None),
    repo: ClientRepository = Depends(get_client_repository)
):
    """
    Refresh access token endpoint.

    Reads the refresh token from the ``refreshToken`` cookie, or from the body.
    The token must be the one currently stored for the client.
    """
    incoming_token = request.cookies.get(REFRESH_TOKEN_COOKIE)
    if not incoming_token and refresh_data:
        incoming_token = refresh_data.refresh_token

    tokens = await service.refresh_access_token(repo, incoming_token)
    return set_auth_cookies(api_response(tokens, "Token refreshed"), tokens)

# ============================================================================
# PROFILE ROUTES
# ============================================================================

@router.get("/me", summary="Get Current Client Profile")
async def get_current_client_route(current_client: Client = Depends(get_current_client)):
    return api_response(ClientResponse.model_validate(current_client), "Current Client Data")

@router.patch("/me", summary="Update Current Client Profile")
async def update_client_route(
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    age: Optional[str] = Form(None),
    gender: Optional[str] = Form(None),
    avatar: Optional[UploadFile] = File(None),
    current_client: Client = Depends(get_current_client),
    repo: ClientRepository = Depends(get_client_repository),
    blob_store: CloudinaryBlobStore = Depends(get_blob_store)
):
    """
    Update the authenticated client's profile.

    Only supplied fields change; a new password is re-hashed and a new avatar
    replaces the old URL.
    """
    result = await service.update_client(
        repo=repo,
        blob_store=blob_store,
        client=current_client,
        name=name,
        email=email,
        phone=phone,
        password=password,
        age=age,
        gender=gender,
        avatar=avatar
    )
    return api_response(result, "Client updated successfully")

# ============================================================================
# LISTING ROUTES
# ============================================================================

@router.get("/", summary="List Clients")
async def list_clients_route(
    page_params: PageParams = Depends(),
    verified: Optional[bool] = Query(None, description="Filter by verification state"),
    gender: Optional[Gender] = Query(None, description="Filter by gender"),
    sort_by: str = Query("created_at", alias="sortBy", description="Field to sort by"),
    sort_order: str = Query("desc", alias="sortOrder", pattern="^(asc|desc)$", description="asc or desc"),
    current_client: Client = Depends(get_current_client),
    repo: ClientRepository = Depends(get_client_repository)
):
    """
    Get a paginated list of clients with optional filtering and sorting.
    """
    filters = ClientListFilters(verified=verified, gender=gender, sort_by=sort_by, sort_order=sort_order)
    result = await service.list_clients(repo, page_params, filters)
    return api_response(result, "Clients retrieved successfully")

@router.get("/{client_id}", summary="Get Client by Id")
async def get_client_route(
    client_id: int,
    current_client: Client = Depends(get_current_client),
    repo: ClientRepository = Depends(get_client_repository)
):
    result = await service.get_client_by_id(repo, client_id)
    return api_response(result, "Client retrieved successfully")
