"""
Client account service layer: registration, verification, login, logout,
profile updates, token refresh and read-only listing.
"""
import logging
import re
from typing import Any, Dict, Optional, Tuple
from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from ..core.security import hash_password, verify_password
from ..core.cloudinary import CloudinaryBlobStore, validate_image
from ..core.pagination import PageParams, build_page_meta
from ..notifications.service import NotificationService
from .models import Client, Gender
from .repository import ClientRepository, filter_criteria, sort_clause
from .schemas import (
    AuthResponse, ClientResponse, ClientListFilters, ClientListResponse,
    OtpVerifiedResponse, TokenPair
)
from .otp import assign_otp, generate_otp, otp_expiry, verify_client_otp
from .tokens import (
    generate_access_and_refresh_tokens,
    rotate_refresh_token,
    create_email_verification_token,
    decode_email_verification_token
)
from .exceptions import (
    ValidationException,
    DuplicateClientException,
    ClientNotFoundException,
    InvalidCredentialsException,
    ClientNotVerifiedException,
    UnauthorizedException
)

# Set up logging
logger = logging.getLogger(__name__)

PHONE_PATTERN = re.compile(r"^\+?[1-9]\d{1,14}$")

def _is_blank(value: Any) -> bool:
    return value is None or not str(value).strip()

def _parse_age(age: Any) -> int:
    try:
        return int(str(age).strip())
    except ValueError:
        raise ValidationException("Age must be a whole number")

def _parse_gender(gender: Any) -> Gender:
    try:
        return Gender(str(gender).strip())
    except ValueError:
        raise ValidationException("Gender must be one of Male, Female, Other")

def _parse_phone(phone: str) -> str:
    phone = phone.strip()
    if not PHONE_PATTERN.match(phone):
        raise ValidationException("Please enter a valid phone number")
    return phone

async def _upload_avatar(blob_store: CloudinaryBlobStore, avatar: UploadFile) -> str:
    validate_image(avatar)
    return await run_in_threadpool(blob_store.upload, avatar.file)

async def register_client(
    repo: ClientRepository,
    notifier: NotificationService,
    blob_store: CloudinaryBlobStore,
    name: Optional[str],
    email: Optional[str],
    phone: Optional[str],
    password: Optional[str],
    age: Optional[Any],
    gender: Optional[str],
    avatar: Optional[UploadFile] = None
) -> Tuple[AuthResponse, TokenPair]:
    """
    Register a new, unverified client and send it a verification code.

    Args:
        repo: Client repository
        notifier: Notification service for OTP delivery
        blob_store: Blob store for the optional avatar
        name, email, phone, password, age, gender: Required client fields
        avatar: Optional avatar image

    Returns:
        The created client with its tokens, and the token pair for cookies

    Raises:
        ValidationException: If a required field is missing or blank
        DuplicateClientException: If email or phone already exists
        NotificationDeliveryException: If the code cannot be delivered
        ClientCreationException: If the store refuses the record
    """
    logger.info(f"Client registration attempt for email: {email}")

    if any(_is_blank(field) for field in [name, email, phone, password, age, gender]):
        raise ValidationException("All fields are required")

    name, email = name.strip(), email.strip()
    phone = _parse_phone(phone)
    age = _parse_age(age)
    gender = _parse_gender(gender)

    if repo.find_by_email_or_phone(email, phone):
        logger.warning(f"Registration failed: Email {email} or phone already registered")
        raise DuplicateClientException()

    avatar_url = await _upload_avatar(blob_store, avatar) if avatar is not None else ""

    otp = generate_otp()
    otp_expires = otp_expiry()
    verification_token = create_email_verification_token(email)

    await notifier.send_otp(email, phone, otp)

    client = repo.create(
        name=name,
        email=email,
        phone=phone,
        password_hash=hash_password(password),
        age=age,
        gender=gender,
        avatar=avatar_url,
        verified=False,
        verification_token=verification_token,
        otp=otp,
        otp_expires=otp_expires
    )
    logger.info(f"Client account created: {client.id}")

    tokens = await generate_access_and_refresh_tokens(repo, client.id)

    return AuthResponse(
        client=ClientResponse.model_validate(client),
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token
    ), tokens

async def login_client(repo: ClientRepository, email: str, password: str) -> Tuple[AuthResponse, TokenPair]:
    """
    Authenticate a verified client and issue a fresh token pair.

    Raises:
        ClientNotFoundException: If no client has this email
        InvalidCredentialsException: If the password is wrong
        ClientNotVerifiedException: If the client has not completed verification
    """
    client = repo.find_by_email(email)
    if not client:
        logger.warning(f"Login failed: No client with email {email}")
        raise ClientNotFoundException("Requested client doesn't exist")

    if not verify_password(password, client.password_hash):
        logger.warning(f"Login failed: Invalid credentials for {email}")
        raise InvalidCredentialsException()

    if not client.verified:
        logger.warning(f"Login failed: Client {client.id} not verified")
        raise ClientNotVerifiedException()

    tokens = await generate_access_and_refresh_tokens(repo, client.id)
    logger.info(f"Login successful: Client {client.id} ({email})")

    return AuthResponse(
        client=ClientResponse.model_validate(client),
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token
    ), tokens

async def _verify_otp_for(repo: ClientRepository, otp: str, **lookup: Any) -> Client:
    """Look a client up by ``email`` or ``client_id`` and verify its code."""
    if "email" in lookup:
        client = repo.find_by_email(lookup["email"])
    else:
        client = repo.find_by_id(lookup["client_id"])
    if not client:
        raise ClientNotFoundException()
    return await verify_client_otp(repo, client, otp)

async def verify_email(repo: ClientRepository, email: Optional[str], otp: Optional[str]) -> Dict[str, str]:
    """
    Verify a client by email and code.

    Raises:
        ValidationException: If email or code is missing
        ClientNotFoundException: If no client has this email
        InvalidOtpException: If the code is wrong or expired
    """
    if _is_blank(email) or _is_blank(otp):
        raise ValidationException("Email and OTP are required")

    await _verify_otp_for(repo, otp.strip(), email=email.strip())
    return {"message": "Email verified successfully"}

async def verify_otp(
    repo: ClientRepository,
    client_id: Optional[int],
    otp: Optional[str]
) -> Tuple[OtpVerifiedResponse, TokenPair]:
    """
    Verify a client by id and code, then issue a token pair.

    Raises:
        ValidationException: If id or code is missing
        ClientNotFoundException: If no client has this id
        InvalidOtpException: If the code is wrong or expired
    """
    if not client_id or _is_blank(otp):
        raise ValidationException("Client ID and OTP are required")

    client = await _verify_otp_for(repo, otp.strip(), client_id=client_id)
    tokens = await generate_access_and_refresh_tokens(repo, client.id)
    return OtpVerifiedResponse(client_id=client.id), tokens

async def verify_email_token(repo: ClientRepository, token: str) -> Dict[str, str]:
    """
    Verify a client through the signed email-link token issued at registration.

    Raises:
        ValidationException: If the token is invalid, expired or already used
    """
    email = decode_email_verification_token(token)
    client = repo.find_by_email(email) if email else None
    if not client or client.verification_token != token:
        raise ValidationException("Invalid or expired verification token")

    client.verified = True
    client.verification_token = None
    client.clear_otp()
    repo.save(client)
    logger.info(f"Client {client.id} verified via email link")
    return {"message": "Email verified successfully"}

async def resend_otp(repo: ClientRepository, notifier: NotificationService, email: str) -> Dict[str, str]:
    """
    Issue and deliver a new verification code.

    Raises:
        ClientNotFoundException: If no client has this email
        ValidationException: If the client is already verified
    """
    client = repo.find_by_email(email.strip())
    if not client:
        raise ClientNotFoundException()
    if client.verified:
        raise ValidationException("Client is already verified")

    otp = assign_otp(client)
    await notifier.send_otp(client.email, client.phone, otp)
    repo.save(client)
    logger.info(f"Verification code re-sent to client {client.id}")
    return {"message": "OTP sent successfully"}

async def logout_client(repo: ClientRepository, client: Client) -> None:
    """Forget the client's refresh token, ending its session."""
    repo.find_by_id_and_update(client.id, {"refresh_token": None})
    logger.info(f"Client {client.id} logged out")

async def update_client(
    repo: ClientRepository,
    blob_store: CloudinaryBlobStore,
    client: Client,
    name: Optional[str] = None,
    email: Optional[str] = None,
    phone: Optional[str] = None,
    password: Optional[str] = None,
    age: Optional[Any] = None,
    gender: Optional[str] = None,
    avatar: Optional[UploadFile] = None
) -> ClientResponse:
    """
    Update the authenticated client's profile. Blank fields are left unchanged.

    Raises:
        DuplicateClientException: If the new email or phone belongs to another client
        ValidationException: If a supplied field is malformed
    """
    email = None if _is_blank(email) else email.strip()
    phone = None if _is_blank(phone) else _parse_phone(phone)

    if (email and email != client.email) or (phone and phone != client.phone):
        existing = repo.find_by_email_or_phone(
            email or client.email,
            phone or client.phone,
            exclude_id=client.id
        )
        if existing:
            raise DuplicateClientException("Email or phone already in use")

    patch: Dict[str, Any] = {}
    if not _is_blank(name):
        patch["name"] = name.strip()
    if email:
        patch["email"] = email
    if phone:
        patch["phone"] = phone
    if not _is_blank(age):
        patch["age"] = _parse_age(age)
    if not _is_blank(gender):
        patch["gender"] = _parse_gender(gender)
    if password:
        patch["password_hash"] = hash_password(password)
    if avatar is not None:
        patch["avatar"] = await _upload_avatar(blob_store, avatar)

    updated = repo.find_by_id_and_update(client.id, patch)
    if not updated:
        raise ClientNotFoundException()
    logger.info(f"Client {client.id} updated fields: {sorted(patch)}")
    return ClientResponse.model_validate(updated)

async def refresh_access_token(repo: ClientRepository, incoming_token: Optional[str]) -> TokenPair:
    """
    Exchange the presented refresh token for a new pair.

    Raises:
        UnauthorizedException: If no token is presented
        InvalidTokenException: If the token is invalid or no longer current
    """
    if not incoming_token:
        raise UnauthorizedException()
    return await rotate_refresh_token(repo, incoming_token)

async def get_client_by_id(repo: ClientRepository, client_id: int) -> ClientResponse:
    """
    Raises:
        ClientNotFoundException: If no client has this id
    """
    client = repo.find_by_id(client_id)
    if not client:
        raise ClientNotFoundException()
    return ClientResponse.model_validate(client)

async def list_clients(
    repo: ClientRepository,
    page_params: PageParams,
    filters: ClientListFilters
) -> ClientListResponse:
    """
    Get a page of clients matching ``filters``.

    Returns:
        ClientListResponse: Clients of the requested page and pagination metadata
    """
    criteria = filter_criteria(filters)
    order_by = sort_clause(filters)

    total = repo.count(*criteria)
    clients = repo.find(*criteria, order_by=order_by, skip=page_params.offset, limit=page_params.limit)

    return ClientListResponse(
        clients=[ClientResponse.model_validate(client) for client in clients],
        pagination=build_page_meta(total, page_params)
    )
