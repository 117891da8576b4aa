"""Pydantic models for the DataHunter API request/response protocol."""

from pathlib import Path
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, List, Literal, Optional, Union

from datahunter.common.constants import DEFAULT_ECC_CURVE, DEFAULT_LOG_LEVEL, DEFAULT_RESULTS_DIR

LogLevel = Literal['trace', 'debug', 'info', 'warn', 'error', 'fatal', 'silent']


class KeyExchangeRequest(BaseModel):
    """Handshake body sent to the public key endpoint."""
    clientPublicKey: str = Field(..., description="Hex encoded uncompressed client public key")


class KeyExchangeResponse(BaseModel):
    """Handshake reply from the public key endpoint."""
    model_config = ConfigDict(extra='allow')

    serverPublicKey: Optional[str] = Field(None, description="Hex encoded server public key")


class QueryParameter(BaseModel):
    """Named parameter passed to a query."""
    name: str
    value: Union[str, int, float, bool]


class RequestData(BaseModel):
    """Payload encrypted into the ENC envelope; extra fields are carried through."""
    model_config = ConfigDict(extra='allow')

    apikey: Optional[str] = Field(None, description="API key for the query")
    parameters: List[QueryParameter] = Field(default_factory=list)


class RequestResponse(BaseModel):
    """Result of an encrypted request."""
    status: int
    duration: float = Field(..., description="Request duration in seconds")
    response_data: Any = Field(None, description="Parsed JSON or decrypted payload")
    response_text: Optional[str] = Field(None, description="Raw body when it is not JSON")
    file_path: Optional[Path] = Field(None, description="Where the response was saved")


class CryptoOptions(BaseModel):
    """Options for the ECC client; unset debug/log_level fall back to ClientOptions."""
    curve: str = DEFAULT_ECC_CURVE
    debug: Optional[bool] = None
    log_level: Optional[LogLevel] = None
    timeout: Optional[float] = Field(None, description="Seconds passed to the HTTP layer, None waits forever")


class ClientOptions(BaseModel):
    """Options for the DataHunter client."""
    results_dir: Path = DEFAULT_RESULTS_DIR
    debug: bool = False
    log_level: LogLevel = DEFAULT_LOG_LEVEL
    save_responses: bool = False
    crypto_options: CryptoOptions = Field(default_factory=CryptoOptions)
