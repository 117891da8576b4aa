"""
DataHunter API Client
Wraps the ECC client with base URL and API key handling, query and key
endpoints, and optional persistence of responses.
"""

import os
import requests
from typing import Iterable, Optional
from datahunter.common.constants import API_KEY_ENV
from datahunter.common.logger import LogContext
from datahunter.common.protocol import ClientOptions, CryptoOptions, RequestResponse
from datahunter.crypto.ecc_client import ECCClient, Payload
from datahunter.endpoints import keys, query
from datahunter.storage.results import ensure_results_dir, save_response


class QueryEndpoints:
    """Query endpoints bound to a client."""

    def __init__(self, client: 'DataHunterClient'):
        self._client = client

    def exec(self, path: str, parameters: Optional[Iterable] = None) -> RequestResponse:
        return query.exec_path(self._client, path, parameters)

    def execute_by_id(self, query_id: str, parameters: Optional[Iterable] = None,
                      api_key: Optional[str] = None) -> RequestResponse:
        return query.execute_by_id(self._client, query_id, parameters, api_key)

    def execute_by_name(self, query_name: str, parameters: Optional[Iterable] = None,
                        api_key: Optional[str] = None) -> RequestResponse:
        return query.execute_by_name(self._client, query_name, parameters, api_key)


class KeyEndpoints:
    """Key management endpoints bound to a client."""

    def __init__(self, client: 'DataHunterClient'):
        self._client = client

    def get_public_key(self) -> str:
        return keys.get_public_key(self._client)

    def reset_keys(self) -> dict:
        return keys.reset_keys(self._client)


class DataHunterClient:
    """Main client for communicating with the DataHunter API."""

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        options: Optional[ClientOptions] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Create a client.

        Args:
            base_url: API base URL, e.g. https://api-dh.ciphers.systems
            api_key: API key; defaults to the DH_API_KEY environment variable
            options: Client options
            session: HTTP session handed to the ECC client
        """
        self.base_url = base_url[:-1] if base_url.endswith('/') else base_url
        self.api_key = api_key if api_key is not None else os.getenv(API_KEY_ENV, '')

        self.options = options or ClientOptions()
        crypto_options = self.options.crypto_options
        self.crypto_options = CryptoOptions(
            curve=crypto_options.curve,
            debug=crypto_options.debug if crypto_options.debug is not None else self.options.debug,
            log_level=crypto_options.log_level or self.options.log_level,
            timeout=crypto_options.timeout,
        )

        self.log = LogContext('datahunter.client', self.options.log_level, self.options.debug)

        ensure_results_dir(self.options.results_dir)

        self.crypto = ECCClient(
            self.crypto_options,
            LogContext('datahunter.crypto', self.crypto_options.log_level, self.crypto_options.debug),
            session,
        )

        self.query = QueryEndpoints(self)
        self.keys = KeyEndpoints(self)

    def resolve_url(self, url: str) -> str:
        """Prefix base_url onto a path; absolute URLs pass through."""
        if url.startswith('/'):
            return f"{self.base_url}{url}"
        return url

    def request(self, url: str, data: Payload) -> RequestResponse:
        """
        Execute an encrypted request and optionally persist the response.

        Args:
            url: Full URL, or a path relative to base_url
            data: Payload to encrypt

        Returns:
            RequestResponse
        """
        full_url = self.resolve_url(url)
        self.log.debug(f"starting request to: {full_url}")

        if not self.crypto.has_server_public_key():
            self.keys.get_public_key()

        response = self.crypto.make_request(full_url, data)

        if response.response_data is not None and self.options.save_responses:
            response.file_path = save_response(
                response.response_data,
                self.options.results_dir,
                'response'
            )
            self.log.debug(f"response saved to: {response.file_path}")

        return response

    def get_crypto_utils(self) -> dict:
        """Direct access to the crypto operations of this client."""
        return {
            'encrypt': lambda data, server_public_key: self.crypto.encrypt(data, server_public_key),
            'decrypt': lambda encrypted_bundle: self.crypto.decrypt(encrypted_bundle),
            'generate_key_pair': lambda: self.crypto.generate_key_pair(),
        }
