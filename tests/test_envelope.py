"""Envelope encryption, decryption and format handling."""

from dataclasses import replace
from unittest.mock import MagicMock

import pytest

from datahunter.common.errors import (
    AuthenticationError, DecryptionError, MalformedEnvelopeError, MissingPeerKeyError
)
from datahunter.common.protocol import CryptoOptions, QueryParameter, RequestData
from datahunter.common.utils import b64d, b64e, now_s, sha256_hex
from datahunter.crypto import aes, ecdh, mac
from datahunter.crypto.ecc_client import ECCClient
from datahunter.crypto.envelope import Envelope


def make_client(curve='prime256v1'):
    return ECCClient(CryptoOptions(curve=curve, log_level='silent'))


def seal_raw(plaintext: bytes, recipient, tag=None) -> str:
    """Build an envelope by hand, optionally with a forged GCM tag under a valid HMAC."""
    ephemeral = ecdh.generate_key_pair(recipient.curve_name)
    aes_key, hmac_key = ecdh.derive_keys(
        ecdh.compute_shared_secret(ephemeral.private_key, recipient.public_hex)
    )
    iv, ciphertext, real_tag = aes.encrypt(plaintext, aes_key)
    fields = Envelope(
        client_id='deadbeef',
        ephemeral_public_key=ephemeral.public_hex,
        iv=b64e(iv),
        ciphertext=b64e(ciphertext),
        auth_tag=b64e(tag if tag is not None else real_tag),
        timestamp=str(now_s()),
    )
    return replace(fields, mac=mac.sign(fields.authenticated_data, hmac_key)).encode()


@pytest.mark.parametrize('curve', ['prime256v1', 'secp256k1', 'secp384r1'])
def test_round_trip(curve):
    client = make_client(curve)
    server = make_client(curve)
    payload = {
        'apikey': 'k-123',
        'parameters': [{'name': 'cpf', 'value': '12345678901'}],
        'nested': {'list': [1, 2.5, None, True], 'text': 'ção'},
    }

    decrypted = server.decrypt(client.encrypt(payload, server.get_public_key()))

    assert decrypted == {**payload, 'clientPublicKey': client.get_public_key()}


def test_round_trip_with_request_model():
    client = make_client()
    server = make_client()
    data = RequestData(apikey='abc', parameters=[QueryParameter(name='id', value=7)])

    decrypted = server.decrypt(client.encrypt(data, server.get_public_key()))

    assert decrypted == {
        'apikey': 'abc',
        'parameters': [{'name': 'id', 'value': 7}],
        'clientPublicKey': client.get_public_key(),
    }


def test_envelope_fields():
    client = make_client()
    server = make_client()

    fields = Envelope.decode(client.encrypt({'a': 1}, server.get_public_key()))

    assert fields.client_id == sha256_hex(client.get_public_key().encode())[:8]
    assert len(fields.client_id) == 8
    assert fields.ephemeral_public_key != client.get_public_key()
    assert len(b64d(fields.iv)) == 12
    assert len(b64d(fields.auth_tag)) == 16
    assert abs(int(fields.timestamp) - now_s()) <= 2


def test_each_message_uses_fresh_ephemeral_key():
    client = make_client()
    server = make_client()

    first = Envelope.decode(client.encrypt({'a': 1}, server.get_public_key()))
    second = Envelope.decode(client.encrypt({'a': 1}, server.get_public_key()))

    assert first.ephemeral_public_key != second.ephemeral_public_key
    assert first.iv != second.iv


def test_payload_is_not_mutated():
    client = make_client()
    server = make_client()
    payload = {'apikey': 'x'}

    client.encrypt(payload, server.get_public_key())

    assert payload == {'apikey': 'x'}


@pytest.mark.parametrize('peer_key', ['', None])
def test_missing_peer_key_skips_ecdh(monkeypatch, peer_key):
    client = make_client()
    exchange = MagicMock()
    generate = MagicMock()
    monkeypatch.setattr(ecdh, 'compute_shared_secret', exchange)
    monkeypatch.setattr(ecdh, 'generate_key_pair', generate)

    with pytest.raises(MissingPeerKeyError):
        client.encrypt({'apikey': 'x'}, peer_key)

    exchange.assert_not_called()
    generate.assert_not_called()


@pytest.mark.parametrize('count', [1, 3, 6, 8, 10])
def test_wrong_field_count_is_malformed(count):
    client = make_client()
    bundle = b64e(':'.join(['x'] * count).encode())

    with pytest.raises(MalformedEnvelopeError, match=str(count)) as exc:
        client.decrypt(bundle)

    assert exc.value.parts_count == count


def test_three_parts_message():
    client = make_client()

    with pytest.raises(MalformedEnvelopeError, match='invalid format: 3 parts'):
        client.decrypt(b64e(b'a:b:c'))


def test_non_base64_is_malformed():
    with pytest.raises(MalformedEnvelopeError):
        make_client().decrypt('not base64 at all!')


def test_non_numeric_timestamp_is_malformed():
    client = make_client()
    bundle = b64e(b'deadbeef:04ab:aXY=:Y3Q=:dGFn:yesterday:bWFj')

    with pytest.raises(MalformedEnvelopeError, match='timestamp'):
        client.decrypt(bundle)


def test_non_json_plaintext_returns_text():
    server = make_client()

    assert server.decrypt(seal_raw(b'plain text body', server.key_pair)) == 'plain text body'


def test_invalid_utf8_plaintext_is_replaced():
    server = make_client()

    assert server.decrypt(seal_raw(b'caf\xe9', server.key_pair)) == 'caf\ufffd'


def test_json_scalar_plaintext_is_parsed():
    server = make_client()

    assert server.decrypt(seal_raw(b'[1, 2, 3]', server.key_pair)) == [1, 2, 3]


def test_gcm_tag_mismatch_after_valid_hmac():
    server = make_client()
    bundle = seal_raw(b'{"a": 1}', server.key_pair, tag=bytes(16))

    with pytest.raises(DecryptionError):
        server.decrypt(bundle)


def test_envelope_for_other_recipient_fails_authentication():
    client = make_client()
    server = make_client()
    eavesdropper = make_client()

    bundle = client.encrypt({'a': 1}, server.get_public_key())

    with pytest.raises(AuthenticationError):
        eavesdropper.decrypt(bundle)
