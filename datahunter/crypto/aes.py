"""AES-256 GCM mode encryption/decryption."""

import secrets
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from datahunter.common.constants import IV_LENGTH, TAG_LENGTH
from datahunter.common.errors import DecryptionError


def encrypt(plaintext: bytes, key: bytes) -> tuple:
    """
    Encrypt plaintext using AES-256 GCM mode under a fresh random IV.

    Args:
        plaintext: Data bytes to encrypt
        key: 32-byte AES key

    Returns:
        (iv, ciphertext, tag) tuple of raw bytes

    Raises:
        ValueError: If key length is not 32 bytes
    """
    if len(key) != 32:
        raise ValueError("AES key must be exactly 32 bytes")

    iv = secrets.token_bytes(IV_LENGTH)
    encryptor = Cipher(algorithms.AES(key), modes.GCM(iv)).encryptor()
    ciphertext = encryptor.update(plaintext) + encryptor.finalize()

    return iv, ciphertext, encryptor.tag


def decrypt(iv: bytes, ciphertext: bytes, tag: bytes, key: bytes) -> bytes:
    """
    Decrypt and authenticate AES-256 GCM ciphertext.

    Args:
        iv: 12-byte initialization vector
        ciphertext: Encrypted bytes
        tag: 16-byte GCM authentication tag
        key: 32-byte AES key

    Returns:
        Decrypted plaintext bytes

    Raises:
        DecryptionError: If the tag does not match or the parameters are invalid
    """
    if len(key) != 32:
        raise ValueError("AES key must be exactly 32 bytes")
    if len(tag) != TAG_LENGTH:
        raise DecryptionError(f"Decryption failed - tag must be {TAG_LENGTH} bytes, got {len(tag)}")

    try:
        decryptor = Cipher(algorithms.AES(key), modes.GCM(iv, tag)).decryptor()
        return decryptor.update(ciphertext) + decryptor.finalize()
    except InvalidTag:
        raise DecryptionError("Decryption failed - authentication tag mismatch") from None
    except ValueError as e:
        raise DecryptionError(f"Decryption failed - {e}") from e
