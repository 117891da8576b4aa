"""
Crypto Operations Example
Local encrypt/decrypt round trip between two ECC clients, no network involved.
"""

import json
import argparse
from datahunter.common.protocol import CryptoOptions
from datahunter.crypto.ecc_client import ECCClient
from datahunter.crypto.envelope import Envelope


def demonstrate_round_trip(curve: str, message: str):
    """Encrypt from a 'client' to a 'server' key pair and decrypt it back."""
    options = CryptoOptions(curve=curve, log_level='info')
    client = ECCClient(options)
    server = ECCClient(options)

    payload = {
        'apikey': 'demo-key',
        'parameters': [{'name': 'message', 'value': message}],
    }

    encrypted = client.encrypt(payload, server.get_public_key())
    fields = Envelope.decode(encrypted)

    print(f"Curve: {curve}")
    print(f"Envelope length: {len(encrypted)} chars")
    print(f"  Client id: {fields.client_id}")
    print(f"  Ephemeral key: {fields.ephemeral_public_key[:20]}...")
    print(f"  Timestamp: {fields.timestamp}")

    decrypted = server.decrypt(encrypted)
    print("Decrypted payload:")
    print(json.dumps(decrypted, indent=2))


def parse_arguments():
    """Handle command-line argument parsing."""
    arg_parser = argparse.ArgumentParser(
        description="Encrypt and decrypt a payload locally"
    )
    arg_parser.add_argument(
        "--curve",
        default="prime256v1",
        help="Elliptic curve (default: prime256v1)"
    )
    arg_parser.add_argument(
        "--message",
        default="hello from datahunter",
        help="Value to place in the payload"
    )
    return arg_parser.parse_args()


if __name__ == "__main__":
    parsed_args = parse_arguments()
    demonstrate_round_trip(parsed_args.curve, parsed_args.message)
