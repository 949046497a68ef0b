# saivd/infra/s3.py

"""S3-compatible object storage (Wasabi) used for videos and QR codes."""

import logging
from urllib.parse import urlparse

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from saivd.core.config import (
    URL_EXPIRATION_SECONDS,
    WASABI_ACCESS_KEY_ID,
    WASABI_BUCKET_NAME,
    WASABI_ENDPOINT,
    WASABI_REGION,
    WASABI_SECRET_ACCESS_KEY,
)

logger = logging.getLogger(__name__)

_MISSING_CODES = {"404", "NoSuchKey", "NotFound"}


class ObjectStorage:
    def __init__(self, bucket: str = WASABI_BUCKET_NAME, client=None):
        self.bucket = bucket
        self._client = client

    @property
    def client(self):
        if self._client is None:
            if not (WASABI_ACCESS_KEY_ID and WASABI_SECRET_ACCESS_KEY and self.bucket):
                logger.error("Missing required Wasabi environment variables")
            self._client = boto3.client(
                "s3",
                region_name=WASABI_REGION,
                endpoint_url=WASABI_ENDPOINT,
                aws_access_key_id=WASABI_ACCESS_KEY_ID,
                aws_secret_access_key=WASABI_SECRET_ACCESS_KEY,
                # Wasabi requires path-style addressing
                config=Config(signature_version="s3v4", s3={"addressing_style": "path"}),
            )
        return self._client

    # ── Presigned URLs ────────────────────────────────────────────────────────

    def presigned_post(self, key: str, content_type: str, max_size: int,
                       expires_in: int = URL_EXPIRATION_SECONDS) -> dict:
        return self.client.generate_presigned_post(
            Bucket=self.bucket,
            Key=key,
            Fields={"Content-Type": content_type},
            Conditions=[
                ["content-length-range", 0, max_size],
                ["starts-with", "$Content-Type", content_type.split("/")[0]],
            ],
            ExpiresIn=expires_in,
        )

    def presigned_get(self, key: str, expires_in: int = URL_EXPIRATION_SECONDS) -> str:
        return self.client.generate_presigned_url(
            ClientMethod="get_object",
            Params={"Bucket": self.bucket, "Key": key},
            ExpiresIn=expires_in,
        )

    # ── Objects ───────────────────────────────────────────────────────────────

    def exists(self, key: str) -> bool:
        try:
            self.client.head_object(Bucket=self.bucket, Key=key)
            return True
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in _MISSING_CODES:
                return False
            raise

    def put_bytes(self, key: str, data: bytes, content_type: str) -> None:
        self.client.put_object(Bucket=self.bucket, Key=key, Body=data, ContentType=content_type)

    def get_bytes(self, key: str) -> bytes | None:
        try:
            result = self.client.get_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in _MISSING_CODES:
                return None
            raise
        body = result.get("Body")
        if body is None:
            return None
        return body.read()

    def delete(self, key: str) -> None:
        self.client.delete_object(Bucket=self.bucket, Key=key)

    # ── Bucket ────────────────────────────────────────────────────────────────

    def put_cors(self, rules: list[dict]) -> None:
        self.client.put_bucket_cors(Bucket=self.bucket, CORSConfiguration={"CORSRules": rules})

    def get_cors(self) -> list[dict]:
        return self.client.get_bucket_cors(Bucket=self.bucket).get("CORSRules", [])


def extract_key_from_url(url: str) -> str | None:
    """https://bucket.host/a/b.mp4 -> a/b.mp4; None when url has no usable path."""
    try:
        parsed = urlparse(url)
    except (ValueError, AttributeError, TypeError):
        return None
    if not parsed.scheme or not parsed.netloc:
        return None
    key = parsed.path[1:]
    return key or None


def resolve_storage_key(value: str | None) -> str | None:
    """Stored video locations are keys; older rows hold full URLs."""
    if not value:
        return None
    if value.startswith("http"):
        return extract_key_from_url(value)
    return value


storage = ObjectStorage()
