"""
Thin wrapper around the MinIO client used for product images,
prescriptions and avatars
"""
import io
import logging

from minio import Minio
from minio.error import S3Error

from flickxir.config import (
    MINIO_ENDPOINT,
    MINIO_ACCESS_KEY,
    MINIO_SECRET_KEY,
    MINIO_SECURE,
    MINIO_PUBLIC_URL,
)
from flickxir.exceptions import StorageError

logger = logging.getLogger(__name__)


class MinioClient:
    def __init__(self, client=None, public_url: str = MINIO_PUBLIC_URL):
        self.client = client or Minio(
            endpoint=MINIO_ENDPOINT,
            access_key=MINIO_ACCESS_KEY,
            secret_key=MINIO_SECRET_KEY,
            secure=MINIO_SECURE,
        )
        self.public_url = public_url.rstrip("/")

    def create_bucket_if_not_exists(self, bucket_name: str) -> bool:
        """Return True when the bucket was created by this call"""
        try:
            if self.client.bucket_exists(bucket_name):
                logger.info(f"Bucket {bucket_name} already exists")
                return False
            self.client.make_bucket(bucket_name)
            logger.info(f"Created bucket: {bucket_name}")
            return True
        except S3Error as e:
            raise StorageError(f"Could not create bucket {bucket_name}: {e}") from e

    def delete_bucket_if_exists(self, bucket_name: str) -> bool:
        try:
            if not self.client.bucket_exists(bucket_name):
                logger.info(f"Bucket {bucket_name} does not exist")
                return False
            self.client.remove_bucket(bucket_name)
            logger.info(f"Deleted bucket: {bucket_name}")
            return True
        except S3Error as e:
            raise StorageError(f"Could not delete bucket {bucket_name}: {e}") from e

    def bucket_exists(self, bucket_name: str) -> bool:
        try:
            return self.client.bucket_exists(bucket_name)
        except S3Error as e:
            raise StorageError(f"Could not read bucket {bucket_name}: {e}") from e

    def upload(self, bucket_name: str, object_name: str, data: bytes, content_type: str,
               cache_control: str = "3600") -> str:
        self.create_bucket_if_not_exists(bucket_name)
        try:
            self.client.put_object(
                bucket_name,
                object_name,
                io.BytesIO(data),
                length=len(data),
                content_type=content_type,
                metadata={"Cache-Control": f"max-age={cache_control}"},
            )
        except S3Error as e:
            raise StorageError(f"Upload of {object_name} failed: {e}") from e
        logger.info(f"Uploaded {object_name} to {bucket_name} ({len(data)} bytes)")
        return object_name

    def remove(self, bucket_name: str, object_name: str):
        try:
            self.client.remove_object(bucket_name, object_name)
        except S3Error as e:
            raise StorageError(f"Removal of {object_name} failed: {e}") from e

    def list(self, bucket_name: str, prefix: str = "") -> list:
        try:
            objects = self.client.list_objects(bucket_name, prefix=prefix or None, recursive=True)
            return [
                {
                    "name": obj.object_name,
                    "size": obj.size,
                    "last_modified": obj.last_modified,
                }
                for obj in objects
            ]
        except S3Error as e:
            raise StorageError(f"Listing {bucket_name}/{prefix} failed: {e}") from e

    def stat(self, bucket_name: str, object_name: str) -> dict:
        try:
            stat = self.client.stat_object(bucket_name, object_name)
        except S3Error as e:
            raise StorageError(f"Stat of {object_name} failed: {e}") from e
        return {
            "name": object_name,
            "size": stat.size,
            "content_type": stat.content_type,
            "last_modified": stat.last_modified,
            "etag": stat.etag,
        }

    def download(self, bucket_name: str, object_name: str) -> bytes:
        response = None
        try:
            response = self.client.get_object(bucket_name, object_name)
            return response.read()
        except S3Error as e:
            raise StorageError(f"Download of {object_name} failed: {e}") from e
        finally:
            if response is not None:
                response.close()
                response.release_conn()

    def get_public_url(self, bucket_name: str, object_name: str) -> str:
        return f"{self.public_url}/{bucket_name}/{object_name}"
