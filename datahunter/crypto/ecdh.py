"""Elliptic-curve key pairs, hex key encoding and ECDH shared secret derivation."""

import hashlib
from dataclasses import dataclass
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives import serialization
from datahunter.common.constants import HMAC_KEY_SUFFIX
from datahunter.common.errors import UnsupportedCurveError


# OpenSSL / NIST names accepted alongside the provider's own class names
CURVE_ALIASES = {
    'prime192v1': ec.SECP192R1,
    'secp192r1': ec.SECP192R1,
    'p-192': ec.SECP192R1,
    'secp224r1': ec.SECP224R1,
    'p-224': ec.SECP224R1,
    'prime256v1': ec.SECP256R1,
    'secp256r1': ec.SECP256R1,
    'p-256': ec.SECP256R1,
    'secp256k1': ec.SECP256K1,
    'secp384r1': ec.SECP384R1,
    'p-384': ec.SECP384R1,
    'secp521r1': ec.SECP521R1,
    'p-521': ec.SECP521R1,
    'brainpoolp256r1': ec.BrainpoolP256R1,
    'brainpoolp384r1': ec.BrainpoolP384R1,
    'brainpoolp512r1': ec.BrainpoolP512R1,
}


def resolve_curve(name: str) -> ec.EllipticCurve:
    """
    Resolve a curve name to a curve instance.

    Args:
        name: Curve name such as 'prime256v1', 'P-384' or 'SECP256K1'

    Returns:
        Curve instance

    Raises:
        UnsupportedCurveError: If the name is unknown
    """
    if not name:
        raise UnsupportedCurveError(name)
    curve_cls = CURVE_ALIASES.get(name.lower())
    if curve_cls is None:
        curve_cls = getattr(ec, name.upper(), None)
        if not (isinstance(curve_cls, type) and issubclass(curve_cls, ec.EllipticCurve)):
            raise UnsupportedCurveError(name)
    return curve_cls()


def _scalar_length(curve: ec.EllipticCurve) -> int:
    return (curve.key_size + 7) // 8


@dataclass(frozen=True)
class KeyPair:
    """EC key pair with hex encodings of both halves."""
    private_key: ec.EllipticCurvePrivateKey
    curve_name: str

    @property
    def curve(self) -> ec.EllipticCurve:
        return self.private_key.curve

    @property
    def public_key(self) -> ec.EllipticCurvePublicKey:
        return self.private_key.public_key()

    @property
    def private_hex(self) -> str:
        """Big-endian private scalar, zero-padded to the curve size."""
        value = self.private_key.private_numbers().private_value
        return value.to_bytes(_scalar_length(self.curve), byteorder='big').hex()

    @property
    def public_hex(self) -> str:
        """Uncompressed X9.62 point (04 || X || Y)."""
        return encode_public_key(self.public_key)


def generate_key_pair(curve_name: str) -> KeyPair:
    """Generate a fresh key pair on the named curve."""
    curve = resolve_curve(curve_name)
    return KeyPair(ec.generate_private_key(curve), curve_name)


def load_private_key(private_hex: str, curve_name: str) -> KeyPair:
    """Rebuild a key pair from a hex private scalar."""
    curve = resolve_curve(curve_name)
    private_key = ec.derive_private_key(int(private_hex, 16), curve)
    return KeyPair(private_key, curve_name)


def encode_public_key(public_key: ec.EllipticCurvePublicKey) -> str:
    """Hex encode a public key as an uncompressed point."""
    return public_key.public_bytes(
        serialization.Encoding.X962,
        serialization.PublicFormat.UncompressedPoint
    ).hex()


def decode_public_key(public_hex: str, curve: ec.EllipticCurve) -> ec.EllipticCurvePublicKey:
    """
    Load a hex encoded point on the given curve.

    Raises:
        ValueError: If the hex is invalid or the point is not on the curve
    """
    return ec.EllipticCurvePublicKey.from_encoded_point(curve, bytes.fromhex(public_hex))


def compute_shared_secret(private_key: ec.EllipticCurvePrivateKey, peer_public_hex: str) -> bytes:
    """
    Compute ECDH shared secret (x-coordinate of the shared point).

    Args:
        private_key: Own private key
        peer_public_hex: Peer's hex encoded public key on the same curve

    Returns:
        Raw shared secret bytes
    """
    peer_public = decode_public_key(peer_public_hex, private_key.curve)
    return private_key.exchange(ec.ECDH(), peer_public)


def derive_keys(shared_secret: bytes) -> tuple:
    """
    Derive AES and HMAC keys: D = SHA256(Ks), K_aes = D[:32], K_mac = D || "HMAC_KEY".

    Args:
        shared_secret: Shared secret from ECDH

    Returns:
        (aes_key, hmac_key) tuple
    """
    digest = hashlib.sha256(shared_secret).digest()
    return digest[:32], digest + HMAC_KEY_SUFFIX
