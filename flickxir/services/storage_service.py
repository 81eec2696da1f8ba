"""
File uploads for product images, prescriptions and avatars
"""
import logging
import random
import string
import time
from dataclasses import dataclass
from typing import List, Optional

from flickxir.config import BUCKETS
from flickxir.exceptions import ValidationError, StorageError
from flickxir.utils.storage import MinioClient

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = ["image/jpeg", "image/jpg", "image/png", "image/webp", "image/gif"]
ALLOWED_DOCUMENT_TYPES = ["application/pdf", "image/jpeg", "image/jpg", "image/png"]
MAX_FILE_SIZE = 10 * 1024 * 1024
MAX_AVATAR_SIZE = 5 * 1024 * 1024


@dataclass
class UploadedFile:
    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


def generate_unique_filename(original_name: str, prefix: str = "") -> str:
    """Build `{prefix}{stem}_{millis}_{random}.{ext}` from an uploaded file name"""
    timestamp = int(time.time() * 1000)
    random_string = "".join(random.choices(string.ascii_lowercase + string.digits, k=13))
    if "." in original_name:
        stem, extension = original_name.rsplit(".", 1)
    else:
        stem, extension = original_name, ""
    name = f"{prefix}{stem}_{timestamp}_{random_string}"
    return f"{name}.{extension}" if extension else name


def validate_file_type(file: UploadedFile, allowed_types: list) -> bool:
    return file.content_type in allowed_types


def validate_file_size(file: UploadedFile, max_size: int = MAX_FILE_SIZE) -> bool:
    return file.size <= max_size


class StorageService:
    def __init__(self, client: MinioClient, buckets: dict = None):
        self.client = client
        self.buckets = buckets or dict(BUCKETS)

    def _check(self, file: UploadedFile, allowed_types: list, type_message: str, max_size: int = MAX_FILE_SIZE):
        if not validate_file_type(file, allowed_types):
            raise ValidationError(type_message)
        if not validate_file_size(file, max_size):
            raise ValidationError(f"File size too large. Maximum size is {max_size // (1024 * 1024)}MB.")

    def _store(self, bucket: str, path: str, file: UploadedFile) -> str:
        self.client.upload(bucket, path, file.data, file.content_type)
        return self.client.get_public_url(bucket, path)

    # Product images

    def upload_product_image(self, file: UploadedFile, product_id: int) -> str:
        self._check(
            file,
            ALLOWED_IMAGE_TYPES,
            "Invalid file type. Only JPEG, PNG, WebP, and GIF images are allowed.",
        )
        filename = generate_unique_filename(file.filename, f"product_{product_id}_")
        return self._store(self.buckets["products"], f"products/{product_id}/{filename}", file)

    def upload_multiple_product_images(self, files: List[UploadedFile], product_id: int) -> List[str]:
        """Upload every file, returning the URLs of the ones that succeeded"""
        urls = []
        failures = []
        for file in files:
            try:
                urls.append(self.upload_product_image(file, product_id))
            except (ValidationError, StorageError) as e:
                failures.append(f"{file.filename}: {e.message}")
        if failures:
            logger.warning(f"Some product images failed to upload: {failures}")
        return urls

    def delete_product_image(self, file_path: str):
        self.client.remove(self.buckets["products"], file_path)

    # Medicine images

    def upload_medicine_image(self, file: UploadedFile) -> str:
        self._check(
            file,
            ALLOWED_IMAGE_TYPES,
            "Invalid file type. Only JPEG, PNG, WebP, and GIF images are allowed.",
        )
        return self._store(self.buckets["products"], f"medicines/{generate_unique_filename(file.filename)}", file)

    # Prescriptions

    def upload_prescription(self, file: UploadedFile, user_id: int) -> tuple:
        """Store a prescription document, returning (object path, public url)"""
        self._check(
            file,
            ALLOWED_DOCUMENT_TYPES,
            "Invalid file type. Only PDF, JPEG, and PNG files are allowed.",
        )
        filename = generate_unique_filename(file.filename, f"prescription_{user_id}_")
        path = f"prescriptions/{user_id}/{filename}"
        return path, self._store(self.buckets["prescriptions"], path, file)

    def delete_prescription(self, file_path: str):
        self.client.remove(self.buckets["prescriptions"], file_path)

    # Avatars

    def upload_avatar(self, file: UploadedFile, user_id: int) -> str:
        self._check(
            file,
            ALLOWED_IMAGE_TYPES,
            "Invalid file type. Only JPEG, PNG, WebP, and GIF images are allowed.",
            max_size=MAX_AVATAR_SIZE,
        )
        filename = generate_unique_filename(file.filename, f"avatar_{user_id}_")
        return self._store(self.buckets["avatars"], f"avatars/{user_id}/{filename}", file)

    # General file and bucket management

    def list_files(self, bucket: str, folder: str = "") -> list:
        return self.client.list(bucket, folder)

    def get_file_metadata(self, bucket: str, file_path: str) -> dict:
        return self.client.stat(bucket, file_path)

    def download_file(self, bucket: str, file_path: str) -> bytes:
        return self.client.download(bucket, file_path)

    def get_public_url(self, bucket: str, file_path: str) -> str:
        return self.client.get_public_url(bucket, file_path)

    def create_bucket(self, bucket_name: str) -> bool:
        return self.client.create_bucket_if_not_exists(bucket_name)

    def delete_bucket(self, bucket_name: str) -> bool:
        return self.client.delete_bucket_if_exists(bucket_name)

    def get_bucket_info(self, bucket_name: str) -> Optional[dict]:
        if not self.client.bucket_exists(bucket_name):
            return None
        files = self.client.list(bucket_name)
        return {
            "name": bucket_name,
            "file_count": len(files),
            "total_size": sum(f["size"] or 0 for f in files),
        }
