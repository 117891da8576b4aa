"""Query endpoints."""

from typing import Iterable, Optional
from datahunter.common.constants import QUERY_PATH
from datahunter.common.protocol import QueryParameter, RequestData, RequestResponse


def _parameters(parameters) -> list:
    if not parameters:
        return []
    return [
        p if isinstance(p, QueryParameter) else QueryParameter.model_validate(p)
        for p in parameters
    ]


def exec_path(client, path: str, parameters: Optional[Iterable] = None) -> RequestResponse:
    """
    Run a query against an arbitrary API path.

    Args:
        client: DataHunterClient instance
        path: Path relative to the base URL, leading slash optional
        parameters: QueryParameter models or {'name', 'value'} mappings

    Returns:
        RequestResponse
    """
    normalized = path if path.startswith('/') else f"/{path}"
    data = RequestData(parameters=_parameters(parameters), apikey=client.api_key)

    full_url = f"{client.base_url}{normalized}"
    client.log.debug(f"executing query to path: {path}")
    client.log.debug(f"full URL: {full_url}")

    return client.request(full_url, data)


def execute_by_id(
    client,
    query_id: str,
    parameters: Optional[Iterable] = None,
    api_key: Optional[str] = None
) -> RequestResponse:
    """Execute a stored query by its id."""
    if not query_id:
        raise ValueError("query id is required")

    data = RequestData(
        parameters=_parameters(parameters),
        apikey=api_key or client.api_key
    )
    return client.request(f"{QUERY_PATH}/{query_id}", data)


def execute_by_name(
    client,
    query_name: str,
    parameters: Optional[Iterable] = None,
    api_key: Optional[str] = None
) -> RequestResponse:
    """Execute a stored query by its name."""
    if not query_name:
        raise ValueError("query name is required")

    data = RequestData(
        queryName=query_name,
        parameters=_parameters(parameters),
        apikey=api_key or client.api_key
    )
    return client.request(QUERY_PATH, data)
