"""Amazon S3 implementation of BlobStorePort."""

import logging
from typing import BinaryIO
from urllib.parse import quote

import boto3  # type: ignore[import-untyped]
from botocore.config import Config  # type: ignore[import-untyped]
from botocore.exceptions import BotoCoreError, ClientError  # type: ignore[import-untyped]

from domain.model.errors import UploadError

logger = logging.getLogger(__name__)


def create_s3_client(region: str | None, access_key_id: str | None, secret_access_key: str | None):
    """Build an S3 client. Missing credentials fall back to boto3's default chain."""
    return boto3.client(
        's3',
        region_name=region,
        aws_access_key_id=access_key_id,
        aws_secret_access_key=secret_access_key,
        config=Config(signature_version='s3v4'),
    )


class S3BlobStore:
    def __init__(self, client, bucket: str | None, region: str | None = None,
                 public_url: str | None = None):
        self.client = client
        self.bucket = bucket
        self.region = region
        self.public_url = public_url.rstrip('/') if public_url else None

    def object_url(self, key: str) -> str:
        """Public URL for key, in the same form S3 reports as an object location."""
        quoted = quote(key)
        if self.public_url:
            return f"{self.public_url}/{quoted}"
        if self.region:
            return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{quoted}"
        return f"https://{self.bucket}.s3.amazonaws.com/{quoted}"

    def store(self, stream: BinaryIO, key: str, content_type: str | None = None) -> str:
        """Stream the file to the bucket under key and return its URL.

        Raises:
            UploadError: bucket not configured, or S3 rejected the request
        """
        if not self.bucket:
            raise UploadError("AWS_S3_BUCKET is not configured")

        extra_args = {'ContentType': content_type} if content_type else None
        try:
            self.client.upload_fileobj(stream, self.bucket, key, ExtraArgs=extra_args)
        except (BotoCoreError, ClientError) as e:
            logger.error("Error uploading to S3", extra={"bucket": self.bucket, "key": key, "error": str(e)})
            raise UploadError(str(e)) from e

        logger.info("Uploaded object", extra={"bucket": self.bucket, "key": key})
        return self.object_url(key)

    def ping(self) -> bool:
        if not self.bucket:
            return False
        try:
            self.client.head_bucket(Bucket=self.bucket)
            return True
        except (BotoCoreError, ClientError) as e:
            logger.warning("S3 bucket check failed", extra={"bucket": self.bucket, "error": str(e)})
            return False
