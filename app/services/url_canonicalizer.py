from typing import Optional
from urllib.parse import quote
from app.utils.errors import InvalidReferenceError

S3_VIRTUAL_HOST_TEMPLATE = "https://{bucket}.s3.amazonaws.com"


def escape_object_key(object_key: str) -> str:
    """Percent-encode a key as a single path segment; only A-Z a-z 0-9 - _ . ~ survive."""
    return quote(object_key, safe="")


def canonicalize(container_name: str, object_key: str, base_url: Optional[str] = None) -> str:
    """
    Build the resource URL that gets signed.

    Defaults to the S3 virtual-host form `https://<bucket>.s3.amazonaws.com/<key>`.
    `base_url` (e.g. a CloudFront domain) replaces the host part when given.
    """
    if not container_name or not object_key:
        raise InvalidReferenceError("bucket and key must be provided")

    base = (base_url or S3_VIRTUAL_HOST_TEMPLATE.format(bucket=container_name)).rstrip("/")
    return f"{base}/{escape_object_key(object_key)}"
