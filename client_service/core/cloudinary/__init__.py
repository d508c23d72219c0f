import cloudinary
import cloudinary.uploader
import cloudinary.exceptions
import logging
from ...config import settings
from ...clients.exceptions import AvatarUploadException, ValidationException

# Set up logger for this module
logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = ["image/jpeg", "image/png", "image/webp"]
MAX_IMAGE_SIZE = 2 * 1024 * 1024


def validate_image(upload) -> None:
    """Reject avatars that are not jpg/png/webp or are larger than 2MB."""
    if upload.content_type not in ALLOWED_IMAGE_TYPES:
        raise ValidationException("Invalid image type. Only jpg, png, webp allowed.")
    if upload.size and upload.size > MAX_IMAGE_SIZE:
        raise ValidationException("Image too large. Max 2MB allowed.")


class CloudinaryBlobStore:
    """
    Uploads avatar images to Cloudinary and hands back their public URL.

    Credentials are passed on every upload instead of through
    ``cloudinary.config`` so the store carries no module-level state.
    """

    def __init__(self, cloud_name: str, api_key: str, api_secret: str, folder: str = "client_avatars"):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.folder = folder

    @classmethod
    def from_settings(cls, app_settings=settings) -> "CloudinaryBlobStore":
        return cls(
            cloud_name=app_settings.cloudinary_cloud_name,
            api_key=app_settings.cloudinary_api_key,
            api_secret=app_settings.cloudinary_api_secret
        )

    def upload(self, file) -> str:
        """
        Uploads an image to Cloudinary and returns the URL.

        Raises:
            AvatarUploadException: If Cloudinary rejects the upload or returns no URL
        """
        try:
            result = cloudinary.uploader.upload(
                file,
                folder=self.folder,
                overwrite=True,
                resource_type="image",
                cloud_name=self.cloud_name,
                api_key=self.api_key,
                api_secret=self.api_secret
            )
        except cloudinary.exceptions.Error as e:
            logger.error(f"Cloudinary API error during avatar upload: {str(e)}")
            raise AvatarUploadException() from e

        secure_url = result.get("secure_url") or result.get("url")
        if not secure_url:
            logger.error("Cloudinary upload result did not contain a URL.")
            raise AvatarUploadException()
        logger.info(f"Successfully uploaded image to Cloudinary. URL: {secure_url}")
        return secure_url
