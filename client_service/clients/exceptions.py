"""
Client-specific exceptions.
"""
from fastapi import status
from ..exceptions import AppException

class ClientException(AppException):
    """Base class for client account exceptions."""
    def __init__(self, status_code: int, detail: str):
        super().__init__(status_code=status_code, detail=detail)

class ValidationException(ClientException):
    """Exception raised when required input is missing or blank."""
    def __init__(self, detail: str = "All fields are required"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

class DuplicateClientException(ClientException):
    """Exception raised when email or phone is already registered."""
    def __init__(self, detail: str = "Email or phone already exists"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

class ClientNotFoundException(ClientException):
    """Exception raised when no client matches the lookup."""
    def __init__(self, detail: str = "Client not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)

class InvalidOtpException(ClientException):
    """Exception raised when an OTP does not match or has expired."""
    def __init__(self, detail: str = "Invalid or expired OTP"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

class UnauthorizedException(ClientException):
    """Exception raised when the caller is not authenticated."""
    def __init__(self, detail: str = "Unauthorized request"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)

class InvalidCredentialsException(UnauthorizedException):
    """Exception raised when credentials are invalid."""
    def __init__(self, detail: str = "Invalid client credentials"):
        super().__init__(detail=detail)

class ClientNotVerifiedException(UnauthorizedException):
    """Exception raised when an unverified client tries to log in."""
    def __init__(self, detail: str = "Please verify your email first"):
        super().__init__(detail=detail)

class InvalidTokenException(UnauthorizedException):
    """Exception raised when a token is invalid, expired or stale."""
    def __init__(self, detail: str = "Invalid or expired refresh token"):
        super().__init__(detail=detail)

class ClientCreationException(ClientException):
    """Exception raised when the store refuses to create a client."""
    def __init__(self, detail: str = "Could not create client"):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)

class NotificationDeliveryException(ClientException):
    """Exception raised when an OTP cannot be delivered."""
    def __init__(self, detail: str = "Failed to send verification code"):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)

class AvatarUploadException(ClientException):
    """Exception raised when the avatar cannot be stored."""
    def __init__(self, detail: str = "Failed to upload avatar"):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
