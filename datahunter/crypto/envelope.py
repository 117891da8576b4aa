"""
Encrypted envelope codec.

Wire format, base64 encoded as a whole:

    clientId:ephemeralPublicKey:iv:ciphertext:authTag:timestamp:hmac

The HMAC covers the first six fields exactly as transmitted. Keys come from
an ECDH exchange between a per-message ephemeral key and the recipient's
long-term key.
"""

import json
import binascii
from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional
from datahunter.common.constants import (
    CLIENT_ID_LENGTH, ENVELOPE_PARTS, TOKEN_EXPIRATION_TIME
)
from datahunter.common.errors import (
    AuthenticationError, DecryptionError, ExpiredEnvelopeError,
    MalformedEnvelopeError, MissingPeerKeyError
)
from datahunter.common.logger import LogContext
from datahunter.common.utils import now_s, b64e, b64d, sha256_hex
from datahunter.crypto import aes, ecdh, mac
from datahunter.crypto.ecdh import KeyPair


@dataclass(frozen=True)
class Envelope:
    """The seven envelope fields, kept as transmitted text."""
    client_id: str
    ephemeral_public_key: str
    iv: str
    ciphertext: str
    auth_tag: str
    timestamp: str
    mac: str = ''

    @property
    def authenticated_data(self) -> bytes:
        return ':'.join((
            self.client_id,
            self.ephemeral_public_key,
            self.iv,
            self.ciphertext,
            self.auth_tag,
            self.timestamp,
        )).encode('utf-8')

    def encode(self) -> str:
        return b64e(self.authenticated_data + b':' + self.mac.encode('utf-8'))

    @classmethod
    def decode(cls, envelope: str) -> 'Envelope':
        """
        Split an outer-base64 envelope into its fields.

        Raises:
            MalformedEnvelopeError: If decoding fails or the field count is not seven
        """
        try:
            text = b64d(envelope).decode('utf-8')
        except (binascii.Error, ValueError, TypeError) as e:
            raise MalformedEnvelopeError(0, f"invalid format: not a base64 envelope - {e}") from e

        parts = text.split(':')
        if len(parts) != ENVELOPE_PARTS:
            raise MalformedEnvelopeError(len(parts))
        return cls(*parts)


def client_id_for(public_hex: str) -> str:
    """Short fingerprint of a long-term public key."""
    return sha256_hex(public_hex.encode('utf-8'))[:CLIENT_ID_LENGTH]


def _serialize(payload: Mapping[str, Any], sender_public_hex: str) -> bytes:
    body = dict(payload)
    body['clientPublicKey'] = sender_public_hex
    return json.dumps(body, separators=(',', ':'), ensure_ascii=False).encode('utf-8')


def encrypt(
    payload: Mapping[str, Any],
    peer_public_hex: str,
    sender: KeyPair,
    log: Optional[LogContext] = None,
) -> str:
    """
    Encrypt payload to the holder of peer_public_hex.

    Args:
        payload: JSON-serializable mapping; sender's public key is added as clientPublicKey
        peer_public_hex: Recipient's long-term public key (hex)
        sender: Sender's long-term key pair
        log: Optional log context

    Returns:
        Base64 envelope string

    Raises:
        MissingPeerKeyError: If peer_public_hex is empty
    """
    if not peer_public_hex:
        raise MissingPeerKeyError()

    if log:
        log.debug('starting data encryption')

    ephemeral = ecdh.generate_key_pair(sender.curve_name)
    shared_secret = ecdh.compute_shared_secret(ephemeral.private_key, peer_public_hex)
    aes_key, hmac_key = ecdh.derive_keys(shared_secret)

    iv, ciphertext, tag = aes.encrypt(_serialize(payload, sender.public_hex), aes_key)

    envelope = Envelope(
        client_id=client_id_for(sender.public_hex),
        ephemeral_public_key=ephemeral.public_hex,
        iv=b64e(iv),
        ciphertext=b64e(ciphertext),
        auth_tag=b64e(tag),
        timestamp=str(now_s()),
    )
    sealed = replace(envelope, mac=mac.sign(envelope.authenticated_data, hmac_key))

    if log:
        log.debug('encryption completed')
    return sealed.encode()


def decrypt(envelope_b64: str, recipient: KeyPair, log: Optional[LogContext] = None) -> Any:
    """
    Verify and decrypt an envelope addressed to recipient.

    Args:
        envelope_b64: Base64 envelope string
        recipient: Recipient's long-term key pair
        log: Optional log context

    Returns:
        Parsed JSON value, or the raw text if the plaintext is not JSON
        Invalid UTF-8 in the plaintext is replaced with U+FFFD rather than raised

    Raises:
        MalformedEnvelopeError: Wrong field count or unparseable timestamp
        ExpiredEnvelopeError: Timestamp older than the replay window
        AuthenticationError: HMAC mismatch or unusable ephemeral key
        DecryptionError: AES-GCM failure after a valid HMAC
    """
    if log:
        log.debug('starting decryption')

    envelope = Envelope.decode(envelope_b64)

    try:
        timestamp = int(envelope.timestamp)
    except ValueError:
        raise MalformedEnvelopeError(
            ENVELOPE_PARTS, f"invalid format: bad timestamp {envelope.timestamp!r}"
        ) from None

    if log:
        log.debug(f"client id: {envelope.client_id}")
        log.debug(f"timestamp: {timestamp}")

    # Only stale envelopes are rejected; future timestamps pass
    age = now_s() - timestamp
    if age > TOKEN_EXPIRATION_TIME:
        raise ExpiredEnvelopeError(timestamp, age)

    try:
        shared_secret = ecdh.compute_shared_secret(recipient.private_key, envelope.ephemeral_public_key)
    except ValueError as e:
        raise AuthenticationError(f"invalid ephemeral public key - {e}") from e
    aes_key, hmac_key = ecdh.derive_keys(shared_secret)

    mac.verify(envelope.authenticated_data, envelope.mac, hmac_key)
    if log:
        log.debug('hmac validated successfully')

    try:
        iv = b64d(envelope.iv)
        ciphertext = b64d(envelope.ciphertext)
        tag = b64d(envelope.auth_tag)
    except (binascii.Error, ValueError) as e:
        raise DecryptionError(f"Decryption failed - invalid field encoding - {e}") from e

    text = aes.decrypt(iv, ciphertext, tag, aes_key).decode('utf-8', errors='replace')

    try:
        result = json.loads(text)
    except ValueError:
        if log:
            log.debug('could not convert to json, returning raw text')
        return text

    if log:
        log.debug('decryption completed successfully')
    return result
