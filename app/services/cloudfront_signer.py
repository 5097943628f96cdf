"""
CloudFront canned-policy URL signing.

A signed URL looks like::

    <resource>?Expires=<epoch>&Signature=<sig>&Key-Pair-Id=<id>

where <sig> is an RSA PKCS#1 v1.5 / SHA-1 signature over the canned policy
``{"Statement":[{"Resource":<resource>,"Condition":{"DateLessThan":{"AWS:EpochTime":<epoch>}}}]}``
in CloudFront's URL-safe base64 alphabet. The policy JSON and the query
layout come from botocore's CloudFrontSigner so any CloudFront edge (or
``verify_signed_url`` below) can check it.
"""
import base64
import binascii
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from urllib.parse import urlsplit
from botocore.signers import CloudFrontSigner
from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from app.utils.errors import SigningError
from app.utils.logger import logger

SIGNED_QUERY_PARAMS = ("Expires", "Signature", "Key-Pair-Id")


class VerificationResult(str, Enum):
    VALID = "valid"
    EXPIRED = "expired"
    INVALID = "invalid"


def _utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def _rsa_signer(private_key: rsa.RSAPrivateKey):
    def _sign(message: bytes) -> bytes:
        return private_key.sign(message, padding.PKCS1v15(), hashes.SHA1())
    return _sign


def sign(url: str, private_key: rsa.RSAPrivateKey, public_key_id: str,
         expires_at: datetime, now: Optional[datetime] = None) -> str:
    """Sign `url` with a canned policy valid until `expires_at`."""
    parts = urlsplit(url)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise SigningError("Resource URL must be an absolute http(s) URL")
    if not public_key_id:
        raise SigningError("Public key id cannot be empty")

    # Expires= carries whole seconds only
    expires_at = _utc(expires_at).replace(microsecond=0)
    now = _utc(now) if now is not None else datetime.now(timezone.utc)
    if expires_at <= now:
        raise SigningError("Expiration must be in the future")

    signer = CloudFrontSigner(public_key_id, _rsa_signer(private_key))
    try:
        return signer.generate_presigned_url(url, date_less_than=expires_at)
    except (TypeError, ValueError, AttributeError, UnsupportedAlgorithm) as e:
        # Key/algorithm mismatch; the message never includes key data
        logger.error(f"Unable to sign the request: {type(e).__name__}")
        raise SigningError("Unable to sign the request") from None


def _url_b64decode(value: str) -> bytes:
    return base64.b64decode(
        value.replace("-", "+").replace("_", "=").replace("~", "/"),
        validate=True,
    )


def verify_signed_url(signed_url: str, public_key: rsa.RSAPublicKey,
                      now: Optional[datetime] = None) -> VerificationResult:
    """Check a canned-policy signed URL the way CloudFront does."""
    base, sep, query = signed_url.partition("?")
    if not sep:
        return VerificationResult.INVALID

    kept, signed = [], {}
    for pair in query.split("&"):
        name, _, value = pair.partition("=")
        if name in SIGNED_QUERY_PARAMS:
            signed[name] = value
        else:
            kept.append(pair)
    if set(signed) != set(SIGNED_QUERY_PARAMS):
        return VerificationResult.INVALID

    resource = base + ("?" + "&".join(kept) if kept else "")
    try:
        expires = int(signed["Expires"])
        signature = _url_b64decode(signed["Signature"])
        expires_moment = datetime.fromtimestamp(expires, tz=timezone.utc)
    except (ValueError, OverflowError, OSError, binascii.Error):
        return VerificationResult.INVALID

    policy = CloudFrontSigner(signed["Key-Pair-Id"], None).build_policy(resource, expires_moment)
    try:
        public_key.verify(signature, policy.encode("utf8"), padding.PKCS1v15(), hashes.SHA1())
    except InvalidSignature:
        return VerificationResult.INVALID

    now = _utc(now) if now is not None else datetime.now(timezone.utc)
    if now.timestamp() >= expires:
        return VerificationResult.EXPIRED
    return VerificationResult.VALID
