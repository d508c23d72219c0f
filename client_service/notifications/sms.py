"""
SMS channel talking to a Twilio-compatible messages API over HTTP.
"""
import logging
import httpx

from ..config import settings

# Set up logging
logger = logging.getLogger(__name__)

SMS_TIMEOUT = 10  # seconds

class SmsSender:
    """
    Sends text messages through the configured SMS gateway.

    Args:
        account_sid: Gateway account identifier (also used as basic-auth user)
        auth_token: Gateway auth token
        from_number: Sender phone number
        api_url: Messages endpoint; ``{account_sid}`` is substituted
    """

    def __init__(self, account_sid: str, auth_token: str, from_number: str, api_url: str):
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_number = from_number
        self.api_url = api_url.format(account_sid=account_sid)

    @classmethod
    def from_settings(cls, app_settings=settings) -> "SmsSender":
        return cls(
            account_sid=app_settings.sms_account_sid,
            auth_token=app_settings.sms_auth_token,
            from_number=app_settings.sms_from_number,
            api_url=app_settings.sms_api_url
        )

    async def send(self, phone: str, body: str) -> None:
        """
        Send ``body`` to ``phone``.

        Raises:
            httpx.HTTPError: If the gateway is unreachable or rejects the message
        """
        logger.info(f"Sending SMS to {phone}")
        async with httpx.AsyncClient(timeout=SMS_TIMEOUT) as client:
            response = await client.post(
                self.api_url,
                data={"To": phone, "From": self.from_number, "Body": body},
                auth=(self.account_sid, self.auth_token)
            )
            response.raise_for_status()
        logger.info(f"SMS sent successfully to {phone}")
