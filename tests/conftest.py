"""Shared fixtures: canned HTTP responses and an in-process fake of the API."""

import json
from urllib.parse import parse_qs, urlsplit
from unittest.mock import MagicMock

import pytest
import requests

from datahunter.common.protocol import CryptoOptions
from datahunter.crypto.ecc_client import ECCClient


def make_response(status: int, body) -> requests.Response:
    """Build a requests.Response; non-str bodies are JSON encoded."""
    response = requests.Response()
    response.status_code = status
    text = body if isinstance(body, str) else json.dumps(body)
    response._content = text.encode('utf-8')
    response.encoding = 'utf-8'
    return response


class FakeApi:
    """
    Stands in for requests.Session and plays the server side of the protocol.

    POST serves the public key endpoint; GET decrypts the ENC parameter with
    the server key pair and answers with whatever `reply` returns.
    """

    def __init__(self, curve: str = 'prime256v1'):
        self.server = ECCClient(CryptoOptions(curve=curve, log_level='silent'), session=MagicMock())
        self.post_calls = []
        self.get_calls = []
        self.last_request = None
        self.handshake_status = 200
        self.handshake_body = None
        self.status = 200
        self.reply = lambda request: {'success': True}

    def post(self, url, data=None, headers=None, timeout=None):
        self.post_calls.append({'url': url, 'body': json.loads(data), 'headers': headers})
        if self.handshake_body is not None:
            return make_response(self.handshake_status, self.handshake_body)
        return make_response(self.handshake_status, {'serverPublicKey': self.server.get_public_key()})

    def get(self, url, headers=None, timeout=None):
        self.get_calls.append(url)
        envelope = parse_qs(urlsplit(url).query)['ENC'][0]
        self.last_request = self.server.decrypt(envelope)
        return make_response(self.status, self.reply(self.last_request))

    def encrypted_reply(self, payload):
        """Reply factory that encrypts payload back to the requesting client."""
        return lambda request: {'ENC': self.server.encrypt(payload, request['clientPublicKey'])}


@pytest.fixture(name="make_response")
def make_response_fixture():
    return make_response


@pytest.fixture
def api():
    return FakeApi()


@pytest.fixture
def ecc_client(api):
    return ECCClient(CryptoOptions(log_level='silent'), session=api)


@pytest.fixture
def frozen_time(monkeypatch):
    """Pin the envelope clock; returns a setter for the current second."""
    state = {'now': 1_700_000_000}
    monkeypatch.setattr('datahunter.crypto.envelope.now_s', lambda: state['now'])

    def set_now(value: int):
        state['now'] = value

    set_now.start = state['now']
    return set_now
