"""Key management endpoints."""

from datahunter.common.errors import HandshakeError


def get_public_key(client) -> str:
    """
    Fetch the server public key for client's base URL and cache it on its ECC client.

    Args:
        client: DataHunterClient instance

    Returns:
        Server public key (hex)
    """
    try:
        return client.crypto.get_server_public_key(client.base_url)
    except HandshakeError as e:
        client.log.error(f"error getting public key: {e}")
        raise


def reset_keys(client) -> dict:
    """
    Drop the cached server key and generate a new client key pair.

    Args:
        client: DataHunterClient instance

    Returns:
        {'publicKey': <new public key>, 'hasServerKey': False}
    """
    client.crypto.clear_server_public_key()
    client.crypto.generate_key_pair()

    return {
        'publicKey': client.crypto.get_public_key(),
        'hasServerKey': client.crypto.has_server_public_key(),
    }
