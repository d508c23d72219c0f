"""
Email channel backed by FastAPI-Mail.
"""
import logging
from datetime import datetime
from fastapi_mail import FastMail, MessageSchema, ConnectionConfig, MessageType

from ..config import settings

# Set up logging
logger = logging.getLogger(__name__)

def build_connection_config(app_settings=settings) -> ConnectionConfig:
    """Build the SMTP connection configuration from application settings."""
    return ConnectionConfig(
        MAIL_USERNAME=app_settings.mail_username,
        MAIL_PASSWORD=app_settings.mail_password,
        MAIL_FROM=app_settings.mail_from,
        MAIL_PORT=app_settings.mail_port,
        MAIL_SERVER=app_settings.mail_server,
        MAIL_STARTTLS=app_settings.mail_starttls,
        MAIL_SSL_TLS=app_settings.mail_ssl_tls,
        USE_CREDENTIALS=app_settings.use_credentials,
        VALIDATE_CERTS=app_settings.validate_certs
    )

def otp_email_html(code: str, valid_minutes: int) -> str:
    """HTML body of the verification email."""
    return f"""
    <html>
        <body style="font-family: Arial, sans-serif; line-height: 1.6;">
            <p>Your OTP is: <strong>{code}</strong></p>
            <p>This OTP is valid for {valid_minutes} minutes.</p>
            <p>If you did not request this code, please ignore this email.</p>
            <p style="font-size: 12px; color: #777;">&copy; {datetime.now().year}</p>
        </body>
    </html>
    """

class EmailSender:
    """
    Sends HTML emails through a single FastMail instance.

    Args:
        config: SMTP connection configuration
    """

    def __init__(self, config: ConnectionConfig):
        self.mail = FastMail(config)

    async def send(self, to: str, subject: str, html: str) -> None:
        message = MessageSchema(
            subject=subject,
            recipients=[to],
            body=html,
            subtype=MessageType.html
        )
        logger.info(f"Sending email '{subject}' to {to}")
        await self.mail.send_message(message)
        logger.info(f"Email sent successfully to {to}")
