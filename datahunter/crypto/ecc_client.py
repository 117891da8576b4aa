"""
ECC client: owns the long-term key pair, fetches the server public key and
runs encrypted requests against the API.
"""

import json
import time
import requests
from typing import Any, Mapping, Optional, Union
from pydantic import ValidationError
from datahunter.common.constants import (
    ENVELOPE_FIELD, KEYS_PUBLIC_PATH
)
from datahunter.common.errors import HandshakeError, TransportError
from datahunter.common.logger import LogContext
from datahunter.common.protocol import (
    CryptoOptions, KeyExchangeRequest, KeyExchangeResponse, RequestData, RequestResponse
)
from datahunter.common.utils import append_query_param, base_origin
from datahunter.crypto import ecdh, envelope
from datahunter.crypto.ecdh import KeyPair

JSON_HEADERS = {'Content-Type': 'application/json'}

Payload = Union[RequestData, Mapping[str, Any]]


def payload_to_dict(payload: Payload) -> dict:
    """Flatten a RequestData model (or plain mapping) into JSON-ready data."""
    if isinstance(payload, RequestData):
        return payload.model_dump(mode='json', exclude_none=True)
    return dict(payload)


class ECCClient:
    """Client for encrypted communication using elliptic-curve cryptography."""

    def __init__(
        self,
        options: Optional[CryptoOptions] = None,
        log: Optional[LogContext] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Create a client with a freshly generated key pair.

        Args:
            options: Curve, debug, log level and HTTP timeout
            log: Log context; built from options when omitted
            session: HTTP session, a new one is created when omitted

        Raises:
            UnsupportedCurveError: If the configured curve is unknown
        """
        self.options = options or CryptoOptions()
        self.curve = self.options.curve
        self.log = log or LogContext(
            'datahunter.crypto',
            self.options.log_level or 'debug',
            bool(self.options.debug),
        )
        self.session = session or requests.Session()
        self.server_public_key: Optional[str] = None
        self.key_pair: Optional[KeyPair] = None
        self.generate_key_pair()

    # ------------------------------------------------------------------
    # Key pair
    # ------------------------------------------------------------------

    def generate_key_pair(self) -> None:
        """Replace the long-term key pair with a new one."""
        self.key_pair = ecdh.generate_key_pair(self.curve)

        self.log.debug('new key pair generated')
        self.log.debug(f"private key (first 10 chars): {self.private_key[:10]}...")
        self.log.debug(f"public key (first 10 chars): {self.public_key[:10]}...")

    @property
    def private_key(self) -> str:
        return self.key_pair.private_hex

    @property
    def public_key(self) -> str:
        return self.key_pair.public_hex

    def get_public_key(self) -> str:
        return self.public_key

    def has_server_public_key(self) -> bool:
        return self.server_public_key is not None

    def clear_server_public_key(self) -> None:
        self.server_public_key = None

    # ------------------------------------------------------------------
    # Envelope codec
    # ------------------------------------------------------------------

    def encrypt(self, data: Payload, server_public_key: str) -> str:
        """Encrypt data for the holder of server_public_key."""
        return envelope.encrypt(payload_to_dict(data), server_public_key, self.key_pair, self.log)

    def decrypt(self, encrypted_bundle: str) -> Any:
        """Decrypt an envelope addressed to this client's key pair."""
        return envelope.decrypt(encrypted_bundle, self.key_pair, self.log)

    # ------------------------------------------------------------------
    # Network
    # ------------------------------------------------------------------

    def get_server_public_key(self, base_url: str) -> str:
        """
        Fetch and cache the server public key.

        Args:
            base_url: API origin, e.g. https://api.example.com

        Returns:
            Server public key (hex)

        Raises:
            HandshakeError: On network failure, non-success status or a reply without a key
        """
        self.log.debug(f"getting server public key from {base_url}")
        key_endpoint = f"{base_url.rstrip('/')}{KEYS_PUBLIC_PATH}"

        try:
            try:
                response = self.session.post(
                    key_endpoint,
                    data=KeyExchangeRequest(clientPublicKey=self.public_key).model_dump_json(),
                    headers=JSON_HEADERS,
                    timeout=self.options.timeout,
                )
            except requests.RequestException as e:
                raise HandshakeError(None, str(e), f"handshake request failed - {e}") from e

            if not response.ok:
                raise HandshakeError(response.status_code, response.text)

            try:
                reply = KeyExchangeResponse.model_validate(response.json())
            except (ValueError, ValidationError) as e:
                raise HandshakeError(
                    response.status_code, response.text, "invalid handshake response"
                ) from e

            if not reply.serverPublicKey:
                raise HandshakeError(
                    response.status_code, response.text, "response missing public key"
                )
        except HandshakeError as e:
            self.log.error(f"error getting public key: {e}")
            raise

        self.server_public_key = reply.serverPublicKey
        self.log.debug(f"server public key obtained: {self.server_public_key[:10]}...")
        return self.server_public_key

    def make_request(self, endpoint: str, data: Payload) -> RequestResponse:
        """
        Execute an encrypted request.

        Args:
            endpoint: Full endpoint URL
            data: Payload to encrypt into the ENC query parameter

        Returns:
            RequestResponse with either response_data or response_text populated

        Raises:
            HandshakeError: If the server key could not be fetched
            TransportError: On network failure or non-success status
            EnvelopeError: If an encrypted response cannot be decrypted
        """
        self.log.debug(f"making request to {endpoint}")

        try:
            if not self.has_server_public_key():
                self.get_server_public_key(base_origin(endpoint))

            encrypted = self.encrypt(data, self.server_public_key)
            url = append_query_param(endpoint, ENVELOPE_FIELD, encrypted)

            start = time.perf_counter()
            try:
                response = self.session.get(url, headers=JSON_HEADERS, timeout=self.options.timeout)
            except requests.RequestException as e:
                raise TransportError(None, str(e), f"request failed - {e}") from e
            duration = time.perf_counter() - start

            if not response.ok:
                raise TransportError(response.status_code, response.text)

            return self._process_response(response, duration)
        except Exception as e:
            self.log.error(f"error during request: {e}")
            raise

    def _process_response(self, response: requests.Response, duration: float) -> RequestResponse:
        """Classify the body as encrypted JSON, plain JSON or raw text."""
        body = response.text

        try:
            parsed = json.loads(body)
        except ValueError:
            return RequestResponse(status=response.status_code, duration=duration, response_text=body)

        if isinstance(parsed, dict) and parsed.get(ENVELOPE_FIELD):
            self.log.debug('encrypted response detected, decrypting...')
            parsed = self.decrypt(parsed[ENVELOPE_FIELD])

        # JSON null carries no data, so the body is reported as text
        if parsed is None:
            return RequestResponse(status=response.status_code, duration=duration, response_text=body)

        return RequestResponse(status=response.status_code, duration=duration, response_data=parsed)
