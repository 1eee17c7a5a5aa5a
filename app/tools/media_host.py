"""Photo storage on the media host (Supabase Storage or Cloudinary)"""
import hashlib
import logging
import time
from typing import List, Optional

import httpx
from pydantic import BaseModel, Field

from ..config import settings
from ..utils.database import SupabaseClient
from ..utils.exceptions import UploadError

logger = logging.getLogger(__name__)


class PhotoFile(BaseModel):
    """A user-selected image waiting to be uploaded"""
    filename: str
    content: bytes = Field(repr=False)
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)


class UploadBatch(BaseModel):
    """Outcome of uploading several photos one after another"""
    urls: List[str] = Field(default_factory=list)
    failures: List[str] = Field(default_factory=list, description="Filenames that failed to upload")


def owner_folder(owner_id: str) -> str:
    """Folder key all of an owner's photos are stored under"""
    return f"itineraries/{owner_id}"


class MediaUploader:
    """Base class for media hosts. `upload` returns a durable public URL."""

    async def upload(self, photo: PhotoFile, folder: str) -> str:
        raise NotImplementedError

    async def close(self):
        """Release any held connections"""


class SupabaseStorageUploader(MediaUploader):
    """Direct object storage in a public Supabase Storage bucket"""

    def __init__(self, bucket: Optional[str] = None):
        self.bucket = bucket or settings.storage_bucket

    async def upload(self, photo: PhotoFile, folder: str) -> str:
        path = f"{folder}/{int(time.time() * 1000)}_{photo.filename}"
        storage = SupabaseClient.get_client().storage.from_(self.bucket)
        try:
            storage.upload(
                path,
                photo.content,
                {"content-type": photo.content_type or "application/octet-stream"}
            )
        except Exception as e:
            raise UploadError(photo.filename, f"Storage upload failed: {e}") from e

        return storage.get_public_url(path)


class CloudinaryUploader(MediaUploader):
    """
    Cloudinary image CDN via its signed upload REST endpoint
    Docs: https://cloudinary.com/documentation/image_upload_api_reference
    """

    BASE_URL = "https://api.cloudinary.com/v1_1"

    def __init__(self):
        self.cloud_name = settings.cloudinary_cloud_name
        self.api_key = settings.cloudinary_api_key
        self.api_secret = settings.cloudinary_api_secret
        self.client = httpx.AsyncClient(timeout=settings.media_upload_timeout_seconds)

    async def close(self):
        """Close HTTP client"""
        await self.client.aclose()

    def sign(self, params: dict) -> str:
        """SHA-1 signature over the sorted upload parameters and the API secret"""
        to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params))
        return hashlib.sha1(f"{to_sign}{self.api_secret}".encode()).hexdigest()

    async def upload(self, photo: PhotoFile, folder: str) -> str:
        params = {"folder": folder, "timestamp": int(time.time())}
        data = {
            "folder": folder,
            "timestamp": str(params["timestamp"]),
            "api_key": self.api_key,
            "signature": self.sign(params),
        }
        files = {"file": (photo.filename, photo.content, photo.content_type or "application/octet-stream")}

        try:
            response = await self.client.post(
                f"{self.BASE_URL}/{self.cloud_name}/image/upload",
                data=data,
                files=files
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise UploadError(photo.filename, f"Cloudinary upload failed: {e}") from e

        try:
            body = response.json()
        except ValueError as e:
            raise UploadError(photo.filename, "Cloudinary returned a non-JSON response") from e

        secure_url = body.get("secure_url") if isinstance(body, dict) else None
        if not secure_url:
            raise UploadError(photo.filename, "Cloudinary response did not include a URL")
        return secure_url


def get_media_uploader() -> MediaUploader:
    """Build the uploader selected by MEDIA_BACKEND"""
    if settings.media_backend == "cloudinary":
        return CloudinaryUploader()
    if settings.media_backend == "supabase":
        return SupabaseStorageUploader()
    raise ValueError(f"Unknown media backend '{settings.media_backend}'")


async def upload_photos(uploader: MediaUploader, photos: List[PhotoFile], folder: str) -> UploadBatch:
    """
    Upload photos one at a time

    Empty files are skipped. A failed file is logged and left out of the
    returned URLs; the remaining files are still attempted.

    Args:
        uploader: Media host to store the files on
        photos: Files in the order they were selected
        folder: Owner-scoped folder key

    Returns:
        UploadBatch with stored URLs in upload order and failed filenames
    """
    batch = UploadBatch()
    for photo in photos:
        if photo.size == 0:
            continue
        try:
            batch.urls.append(await uploader.upload(photo, folder))
        except UploadError as e:
            logger.error(f"Photo upload error for {e.filename}: {e.message}")
            batch.failures.append(e.filename)
        except Exception as e:
            logger.error(f"Unexpected photo upload error for {photo.filename}: {e}")
            batch.failures.append(photo.filename)
    return batch
