"""Exception hierarchy raised by the envelope codec, handshake and request layers."""

from typing import Optional


class DataHunterError(Exception):
    """Base class for every error raised by the SDK."""


class UnsupportedCurveError(DataHunterError, ValueError):
    """Configured curve name is not known to the crypto provider."""

    def __init__(self, curve: str):
        self.curve = curve
        super().__init__(f"unsupported curve: {curve}")


class MissingPeerKeyError(DataHunterError):
    """Encryption was requested without a peer public key."""

    def __init__(self, message: str = "server public key not provided"):
        super().__init__(message)


class EnvelopeError(DataHunterError):
    """An encrypted envelope could not be accepted."""


class MalformedEnvelopeError(EnvelopeError):
    """Envelope does not decode to exactly seven colon-separated fields."""

    def __init__(self, parts_count: int, message: Optional[str] = None):
        self.parts_count = parts_count
        super().__init__(message or f"invalid format: {parts_count} parts")


class ExpiredEnvelopeError(EnvelopeError):
    """Envelope timestamp is older than the replay window."""

    def __init__(self, timestamp: int, age: int):
        self.timestamp = timestamp
        self.age = age
        super().__init__(f"data expired: envelope is {age}s old")


class AuthenticationError(EnvelopeError):
    """HMAC over the envelope fields did not verify."""

    def __init__(self, message: str = "invalid hmac"):
        super().__init__(message)


class DecryptionError(EnvelopeError):
    """AES-GCM decryption failed after the HMAC check passed."""


class RequestFailedError(DataHunterError):
    """An HTTP exchange with the API failed."""

    def __init__(self, status: Optional[int], body: str, message: Optional[str] = None):
        self.status = status
        self.body = body
        if message is None:
            message = f"error {status}: {body}" if status is not None else body
        super().__init__(message)


class HandshakeError(RequestFailedError):
    """Fetching the server public key failed."""


class TransportError(RequestFailedError):
    """The encrypted request returned a non-success status or never completed."""
