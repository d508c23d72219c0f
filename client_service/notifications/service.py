"""
Notification service delivering verification codes over email and SMS.

Constructed once at application startup and injected into request handlers.
"""
import logging

from ..config import settings
from ..clients.exceptions import NotificationDeliveryException
from .email import EmailSender, build_connection_config, otp_email_html
from .sms import SmsSender

# Set up logging
logger = logging.getLogger(__name__)

OTP_EMAIL_SUBJECT = "Your OTP for Email Verification"

class NotificationService:
    """
    Sends OTP codes through the email and SMS channels.

    Delivery failures are not retried; they surface as
    NotificationDeliveryException and abort the calling flow.
    """

    def __init__(self, email_sender: EmailSender, sms_sender: SmsSender):
        self.email_sender = email_sender
        self.sms_sender = sms_sender

    @classmethod
    def from_settings(cls, app_settings=settings) -> "NotificationService":
        return cls(
            email_sender=EmailSender(build_connection_config(app_settings)),
            sms_sender=SmsSender.from_settings(app_settings)
        )

    async def send_email(self, to: str, subject: str, html: str) -> None:
        try:
            await self.email_sender.send(to, subject, html)
        except Exception as e:
            logger.error(f"Failed to send email to {to}: {str(e)}")
            raise NotificationDeliveryException("Failed to send verification email") from e

    async def send_sms(self, phone: str, code: str) -> None:
        try:
            await self.sms_sender.send(phone, f"Your verification code is {code}")
        except Exception as e:
            logger.error(f"Failed to send SMS to {phone}: {str(e)}")
            raise NotificationDeliveryException("Failed to send verification SMS") from e

    async def send_otp(self, email: str, phone: str, code: str) -> None:
        """Deliver ``code`` by SMS, then by email."""
        await self.send_sms(phone, code)
        await self.send_email(
            email,
            OTP_EMAIL_SUBJECT,
            otp_email_html(code, settings.otp_expire_minutes)
        )
