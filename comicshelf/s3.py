import re
from typing import Optional
from urllib.parse import quote, unquote, urlparse

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import Request

from comicshelf.config import (
    AWS_ACCESS_KEY_ID,
    AWS_SECRET_ACCESS_KEY,
    AWS_REGION,
    S3_ENDPOINT_URL,
    CHAPTERS_BUCKET,
    STORAGE_PUBLIC_BASE,
)
from comicshelf.errors import ObjectStorageError

_SAFE_SEGMENT_RE = re.compile(r'[^a-zA-Z0-9._-]+')


def sanitize_key_segment(name: str) -> str:
    """
    Make a single key segment URL-safe and S3-friendly:
    - Trim whitespace
    - Replace unsafe chars with '-'
    - Collapse repeats
    """
    name = _SAFE_SEGMENT_RE.sub('-', name.strip())
    name = re.sub(r'-{2,}', '-', name)
    return name or "file"


class ObjectStorage:
    """Upload / public URL / delete by key against one S3 bucket."""

    def __init__(self, bucket: str = CHAPTERS_BUCKET, public_base: Optional[str] = STORAGE_PUBLIC_BASE, client=None):
        self.bucket = bucket
        self.public_base = (public_base or "").rstrip("/")
        self.client = client or boto3.client(
            "s3",
            region_name=AWS_REGION,
            endpoint_url=S3_ENDPOINT_URL,
            aws_access_key_id=AWS_ACCESS_KEY_ID,
            aws_secret_access_key=AWS_SECRET_ACCESS_KEY,
        )

    def upload(self, key: str, data: bytes, content_type: str) -> None:
        # IfNoneMatch makes the write fail instead of overwriting an existing object
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
                IfNoneMatch="*",
            )
        except (BotoCoreError, ClientError) as e:
            raise ObjectStorageError(f"Upload of {key} failed: {e}") from e

    def public_url(self, key: str) -> Optional[str]:
        if not self.public_base or not key:
            return None
        return f"{self.public_base}/{quote(key, safe='/-._')}"

    def key_from_url(self, url: str) -> Optional[str]:
        if not url:
            return None
        if self.public_base and url.startswith(self.public_base + "/"):
            key = url[len(self.public_base) + 1:]
        else:
            key = urlparse(url).path.lstrip("/")
            # path-style S3 URLs carry the bucket as the first segment
            if key.startswith(self.bucket + "/"):
                key = key[len(self.bucket) + 1:]
        return unquote(key) or None

    def delete(self, key: str) -> None:
        self.client.delete_object(Bucket=self.bucket, Key=key)


# Dependency for FastAPI routes
def get_object_storage(request: Request) -> ObjectStorage:
    return request.app.state.storage
