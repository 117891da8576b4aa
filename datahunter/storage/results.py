"""Results directory handling and JSON persistence of query responses."""

import json
import secrets
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Union
from datahunter.common.constants import DEFAULT_RESULTS_DIR


def ensure_results_dir(directory: Union[str, Path] = DEFAULT_RESULTS_DIR) -> Path:
    """
    Create the results directory if it does not exist.

    Args:
        directory: Directory to create

    Returns:
        Path to the directory
    """
    path = Path(directory)
    path.mkdir(parents=True, exist_ok=True)
    return path


def response_filename(prefix: str = 'response') -> str:
    """Build '{prefix}-{ISO timestamp}.json' with ':' and '.' replaced by '-'."""
    stamp = datetime.now(timezone.utc).strftime('%Y-%m-%dT%H:%M:%S.%f')[:-3] + 'Z'
    return f"{prefix}-{stamp.replace(':', '-').replace('.', '-')}.json"


def save_response(
    data: Any,
    directory: Union[str, Path] = DEFAULT_RESULTS_DIR,
    prefix: str = 'response'
) -> Path:
    """
    Save response data as pretty-printed JSON.

    Args:
        data: JSON-serializable response data
        directory: Target directory (created if missing)
        prefix: Filename prefix

    Returns:
        Path to the written file
    """
    file_path = ensure_results_dir(directory) / response_filename(prefix)

    with open(file_path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)

    return file_path


def generate_id(length: int = 8) -> str:
    """Random id of length bytes, hex encoded."""
    return secrets.token_hex(length)
