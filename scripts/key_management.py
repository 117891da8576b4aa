"""
Key Management Example
Performs the public key handshake, then resets the client key pair.
"""

import os
import sys
import argparse
from dotenv import load_dotenv
from datahunter.client import DataHunterClient
from datahunter.common.errors import HandshakeError
from datahunter.common.protocol import ClientOptions

load_dotenv()


def manage_keys(base_url: str, log_level: str):
    """Show the client key, fetch the server key, then rotate the client key."""
    client = DataHunterClient(base_url, options=ClientOptions(log_level=log_level, debug=True))

    print(f"Client public key: {client.crypto.get_public_key()[:20]}...")

    server_key = client.keys.get_public_key()
    print(f"Server public key: {server_key[:20]}...")
    print(f"Server key cached: {client.crypto.has_server_public_key()}")

    reset = client.keys.reset_keys()
    print("Keys reset:")
    print(f"  New public key: {reset['publicKey'][:20]}...")
    print(f"  Server key cached: {reset['hasServerKey']}")


def parse_arguments():
    """Handle command-line argument parsing."""
    arg_parser = argparse.ArgumentParser(
        description="Demonstrate DataHunter key exchange and key reset"
    )
    arg_parser.add_argument(
        "--base-url",
        default=os.getenv('DH_BASE_URL', 'https://api-dh.ciphers.systems'),
        help="API base URL (default: $DH_BASE_URL)"
    )
    arg_parser.add_argument(
        "--log-level",
        default="info",
        choices=["trace", "debug", "info", "warn", "error", "fatal", "silent"],
        help="Log level (default: info)"
    )
    return arg_parser.parse_args()


if __name__ == "__main__":
    parsed_args = parse_arguments()
    try:
        manage_keys(parsed_args.base_url, parsed_args.log_level)
    except HandshakeError as e:
        print(f"Handshake failed: {e}")
        sys.exit(1)
