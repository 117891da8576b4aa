"""HMAC-SHA256 tagging and constant-time verification of envelope fields."""

import binascii
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, hmac
from datahunter.common.utils import b64d, b64e
from datahunter.common.errors import AuthenticationError


def sign(data: bytes, key: bytes) -> str:
    """
    Compute HMAC-SHA256 over data.

    Args:
        data: Authenticated-data bytes
        key: HMAC key

    Returns:
        Base64 encoded tag string
    """
    h = hmac.HMAC(key, hashes.SHA256())
    h.update(data)
    return b64e(h.finalize())


def verify(data: bytes, mac_b64: str, key: bytes) -> None:
    """
    Verify a base64 HMAC-SHA256 tag in constant time.

    Args:
        data: Authenticated-data bytes as received
        mac_b64: Base64 encoded tag as received
        key: HMAC key

    Raises:
        AuthenticationError: If the tag is not valid base64 or does not match
    """
    try:
        tag = b64d(mac_b64)
    except (binascii.Error, ValueError):
        raise AuthenticationError("invalid hmac") from None

    h = hmac.HMAC(key, hashes.SHA256())
    h.update(data)
    try:
        h.verify(tag)
    except InvalidSignature:
        raise AuthenticationError("invalid hmac") from None
