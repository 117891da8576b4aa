"""Helper functions: timestamp, base64 encoding/decoding, SHA-256 hashing, URL handling."""

import time
import base64
import hashlib
from urllib.parse import urlsplit, quote


def now_s() -> int:
    """Return current Unix timestamp in seconds."""
    return int(time.time())


def b64e(b: bytes) -> str:
    """Base64 encode bytes to string for wire transmission."""
    return base64.b64encode(b).decode('utf-8')


def b64d(s: str) -> bytes:
    """Base64 decode string to bytes, rejecting characters outside the alphabet."""
    return base64.b64decode(s, validate=True)


def sha256_hex(data: bytes) -> str:
    """Compute SHA-256 hash and return hex string."""
    return hashlib.sha256(data).hexdigest()


def base_origin(url: str) -> str:
    """Reduce a full endpoint URL to its scheme://host[:port] origin."""
    parts = urlsplit(url)
    if not parts.scheme or not parts.netloc:
        raise ValueError(f"Invalid URL: {url!r}")
    return f"{parts.scheme}://{parts.netloc}"


def append_query_param(url: str, name: str, value: str) -> str:
    """Append a single URL-escaped query parameter to url."""
    separator = '&' if urlsplit(url).query else '?'
    return f"{url}{separator}{name}={quote(value, safe='')}"
