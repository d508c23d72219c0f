"""
Application configuration settings loaded from environment variables.
Uses pydantic_settings for validation and type conversion.
"""
from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    """
    Application settings class with environment variable validation.

    Attributes:
        database_url: Connection string of the client record store
        database_name: Optional database name appended to database_url
        access_token_secret: Secret used to sign access tokens
        refresh_token_secret: Secret used to sign refresh tokens
        email_secret: Secret used to sign email verification tokens
        algorithm: Algorithm used for JWT encoding (typically HS256)
        access_token_expire_minutes: Access token lifetime in minutes
        refresh_token_expire_days: Refresh token lifetime in days
        email_token_expire_days: Email verification token lifetime in days
        otp_expire_minutes: Lifetime of a one-time verification code

        # Email settings
        mail_username: SMTP server username
        mail_password: SMTP server password
        mail_from: Sender email address
        mail_port: SMTP server port
        mail_server: SMTP server hostname
        mail_starttls: Whether to use STARTTLS
        mail_ssl_tls: Whether to use SSL/TLS
        use_credentials: Whether to use credentials for SMTP
        validate_certs: Whether to validate certificates

        # SMS settings
        sms_account_sid: Account identifier of the SMS gateway
        sms_auth_token: Auth token of the SMS gateway
        sms_from_number: Sender phone number
        sms_api_url: Messages endpoint, formatted with the account sid

        # HTTP settings
        cookie_secure: Whether auth cookies carry the Secure flag
        cors_origins: Origins allowed by the CORS middleware
        log_level: Root logging level
    """
    # Database settings
    database_url: str
    database_name: Optional[str] = None

    # JWT settings
    access_token_secret: str
    refresh_token_secret: str
    email_secret: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 15
    refresh_token_expire_days: int = 10
    email_token_expire_days: int = 1
    otp_expire_minutes: int = 5

    # Email settings
    mail_username: str
    mail_password: str
    mail_from: str
    mail_port: int = 587
    mail_server: str
    mail_starttls: bool = True
    mail_ssl_tls: bool = False
    use_credentials: bool = True
    validate_certs: bool = True

    # SMS settings
    sms_account_sid: str
    sms_auth_token: str
    sms_from_number: str
    sms_api_url: str = "https://api.twilio.com/2010-04-01/Accounts/{account_sid}/Messages.json"

    # HTTP settings
    cookie_secure: bool = True
    cors_origins: List[str] = ["http://localhost:3000"]
    log_level: str = "INFO"

    class Config:
        """Configuration for environment variables loading"""
        env_file = ".env"
        case_sensitive = False

    # Cloudinary settings
    cloudinary_cloud_name: str
    cloudinary_api_key: str
    cloudinary_api_secret: str

    @property
    def sqlalchemy_database_url(self) -> str:
        """Full connection URL, with the database name appended when configured."""
        if self.database_name:
            return f"{self.database_url.rstrip('/')}/{self.database_name}"
        return self.database_url

# Create settings instance
settings = Settings()
