import base64
import binascii
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from app.utils.errors import MalformedKeyError

PEM_MARKER = "-----BEGIN"


def _load_key(raw: str):
    if raw.startswith(PEM_MARKER):
        return serialization.load_pem_private_key(raw.encode("utf-8"), password=None)

    # No PEM armor: expect base64 of a DER key
    try:
        der = base64.b64decode("".join(raw.split()), validate=True)
    except (binascii.Error, ValueError):
        raise ValueError("not a PEM block or base64 DER")
    return serialization.load_der_private_key(der, password=None)


def parse_private_key(raw: str) -> rsa.RSAPrivateKey:
    """
    Decode a PEM (PKCS#1 or PKCS#8) or base64 DER private key.

    Only a complete RSA key is ever returned. Error messages state the
    reason and never include any part of the input.
    """
    if not isinstance(raw, str):
        raise MalformedKeyError("Private key must be text")

    raw = raw.strip()
    if not raw:
        raise MalformedKeyError("Private key is empty")

    try:
        key = _load_key(raw)
    except TypeError:
        raise MalformedKeyError("Private key is encrypted; an unencrypted key is required") from None
    except (ValueError, UnsupportedAlgorithm):
        raise MalformedKeyError("Failed to parse PEM block containing private key") from None

    if not isinstance(key, rsa.RSAPrivateKey):
        raise MalformedKeyError(
            f"Expected an RSA private key, got {type(key).__name__}"
        )

    return key
