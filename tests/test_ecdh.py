"""Key pair generation, curve resolution and key derivation."""

import hashlib

import pytest
from cryptography.hazmat.primitives.asymmetric import ec

from datahunter.common.errors import UnsupportedCurveError
from datahunter.common.protocol import CryptoOptions
from datahunter.crypto import ecdh
from datahunter.crypto.ecc_client import ECCClient


@pytest.mark.parametrize('name, expected', [
    ('prime256v1', ec.SECP256R1),
    ('P-256', ec.SECP256R1),
    ('secp256k1', ec.SECP256K1),
    ('SECP384R1', ec.SECP384R1),
    ('secp521r1', ec.SECP521R1),
])
def test_resolve_curve_aliases(name, expected):
    assert isinstance(ecdh.resolve_curve(name), expected)


@pytest.mark.parametrize('name', ['', 'not-a-curve', 'ECDH', 'EllipticCurve'])
def test_resolve_curve_rejects_unknown(name):
    with pytest.raises(UnsupportedCurveError):
        ecdh.resolve_curve(name)


@pytest.mark.parametrize('name', ['bogus', ''])
def test_unknown_curve_fails_construction(name):
    with pytest.raises(UnsupportedCurveError):
        ECCClient(CryptoOptions(curve=name, log_level='silent'))


def test_key_pair_hex_encoding():
    pair = ecdh.generate_key_pair('prime256v1')

    assert len(pair.private_hex) == 64
    assert len(pair.public_hex) == 130
    assert pair.public_hex.startswith('04')


def test_public_key_derives_from_private_key():
    pair = ecdh.generate_key_pair('secp256k1')
    reloaded = ecdh.load_private_key(pair.private_hex, 'secp256k1')

    assert reloaded.public_hex == pair.public_hex


def test_shared_secret_agrees_both_ways():
    alice = ecdh.generate_key_pair('prime256v1')
    bob = ecdh.generate_key_pair('prime256v1')

    assert ecdh.compute_shared_secret(alice.private_key, bob.public_hex) == \
        ecdh.compute_shared_secret(bob.private_key, alice.public_hex)


def test_shared_secret_rejects_point_off_curve():
    alice = ecdh.generate_key_pair('prime256v1')
    with pytest.raises(ValueError):
        ecdh.compute_shared_secret(alice.private_key, '04' + '00' * 64)


def test_derive_keys_layout():
    aes_key, hmac_key = ecdh.derive_keys(b'shared')
    digest = hashlib.sha256(b'shared').digest()

    assert aes_key == digest
    assert hmac_key == digest + b'HMAC_KEY'


def test_generate_key_pair_replaces_keys():
    client = ECCClient(CryptoOptions(log_level='silent'))
    before = (client.private_key, client.public_key)

    client.generate_key_pair()

    assert (client.private_key, client.public_key) != before
    assert ecdh.load_private_key(client.private_key, client.curve).public_hex == client.public_key


def test_clients_do_not_share_keys():
    a = ECCClient(CryptoOptions(log_level='silent'))
    b = ECCClient(CryptoOptions(log_level='silent'))

    assert a.get_public_key() != b.get_public_key()
