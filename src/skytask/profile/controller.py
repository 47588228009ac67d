# src/skytask/profile/controller.py

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from ..core.ports import BlobStore, ProfileRepo

logger = logging.getLogger(__name__)

MAX_PICTURE_BYTES = 5 * 1024 * 1024  # 5MB
ALLOWED_PICTURE_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp")

TOO_LARGE_MESSAGE = "File size must be less than 5MB"
BAD_TYPE_MESSAGE = "Only image files (JPEG, PNG, GIF, WebP) are allowed"
UPLOAD_FAILED_MESSAGE = "Failed to upload profile picture"


@dataclass(frozen=True, slots=True)
class UploadFile:
    name: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def extension(self) -> str:
        return self.name.rsplit(".", 1)[-1]


class ProfileController:
    """Profile picture of the signed-in user: load, validate, upload, persist."""

    def __init__(self, profiles: ProfileRepo, pictures: BlobStore, *, user_id: str) -> None:
        self._profiles = profiles
        self._pictures = pictures
        self.user_id = user_id

        self.picture_url: str | None = None
        self.uploading = False
        self.error: str | None = None

    def load(self) -> str | None:
        try:
            url = self._profiles.get_picture_url(self.user_id)
        except Exception:
            logger.exception("Error loading profile user=%s", self.user_id)
            return self.picture_url

        if url:
            self.picture_url = url
        return self.picture_url

    def validate(self, file: UploadFile) -> str | None:
        if file.size > MAX_PICTURE_BYTES:
            return TOO_LARGE_MESSAGE
        if file.content_type not in ALLOWED_PICTURE_TYPES:
            return BAD_TYPE_MESSAGE
        return None

    def upload(self, file: UploadFile) -> bool:
        problem = self.validate(file)
        if problem is not None:
            self.error = problem
            return False

        self.uploading = True
        self.error = None
        try:
            path = f"{self.user_id}/{int(time.time() * 1000)}.{file.extension}"
            self._pictures.upload(path, file.data, content_type=file.content_type)
            url = self._pictures.public_url(path)
            self._profiles.upsert_picture_url(self.user_id, url)
            self.picture_url = url
            logger.info("Profile picture updated user=%s path=%s", self.user_id, path)
            return True
        except Exception as e:
            logger.exception("Error uploading file user=%s", self.user_id)
            self.error = str(e).strip() or UPLOAD_FAILED_MESSAGE
            return False
        finally:
            self.uploading = False
