"""Protocol constants and environment-sourced defaults."""

import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

# Replay window for incoming envelopes, in seconds
TOKEN_EXPIRATION_TIME = 300

DEFAULT_ECC_CURVE = 'prime256v1'

DEFAULT_LOG_LEVEL = os.getenv('DH_LOG_LEVEL', 'debug')

DEFAULT_RESULTS_DIR = Path(os.getenv('DH_RESULTS_DIR', Path.cwd() / 'results'))

API_KEY_ENV = 'DH_API_KEY'

KEYS_PUBLIC_PATH = '/api/v4/keys/public'
QUERY_PATH = '/api/v4/query'

# Query parameter (and response field) carrying an envelope
ENVELOPE_FIELD = 'ENC'

HMAC_KEY_SUFFIX = b'HMAC_KEY'
IV_LENGTH = 12
TAG_LENGTH = 16
CLIENT_ID_LENGTH = 8
ENVELOPE_PARTS = 7
