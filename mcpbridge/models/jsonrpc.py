"""JSON-RPC 2.0 envelope helpers.

See: https://www.jsonrpc.org/specification
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from mcpbridge.infra.error_handler import ProtocolError

JSONRPC_VERSION = "2.0"

# Standard JSON-RPC error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


@dataclass
class JsonRpcRequest:
    """Decoded JSON-RPC 2.0 request."""
    method: str
    id: Any = None
    params: Dict[str, Any] = field(default_factory=dict)
    has_params: bool = False

    @classmethod
    def from_payload(cls, payload: Any) -> "JsonRpcRequest":
        """
        Decode a parsed JSON body into a request.

        Raises:
            ProtocolError: INVALID_REQUEST when the payload is not a request object
        """
        if not isinstance(payload, dict):
            raise ProtocolError(INVALID_REQUEST, "Invalid Request", "Request must be a JSON object")

        method = payload.get("method")
        if not isinstance(method, str) or not method:
            raise ProtocolError(INVALID_REQUEST, "Invalid Request", "Request is missing a method name")

        if not is_valid_id(payload.get("id")):
            raise ProtocolError(INVALID_REQUEST, "Invalid Request", "id must be a string, number or null")

        params = payload.get("params")
        if params is not None and not isinstance(params, dict):
            raise ProtocolError(INVALID_REQUEST, "Invalid Request", "params must be a JSON object")

        return cls(
            method=method,
            id=payload.get("id"),
            params=params or {},
            has_params=params is not None,
        )


def is_valid_id(value: Any) -> bool:
    """JSON-RPC ids are strings, numbers or null; booleans are not numbers here."""
    if isinstance(value, bool):
        return False
    return value is None or isinstance(value, (str, int, float))


def request_id(payload: Any) -> Any:
    """Id to echo in an error response: the request's id when valid, else null."""
    if isinstance(payload, dict) and is_valid_id(payload.get("id")):
        return payload.get("id")
    return None


def jsonrpc_response(id: Any, result: Any) -> dict:
    """Create a JSON-RPC 2.0 success response.

    Args:
        id: Request ID (must match the request)
        result: The result payload

    Returns:
        JSON-RPC 2.0 response dict
    """
    return {"jsonrpc": JSONRPC_VERSION, "id": id, "result": result}


def jsonrpc_error(id: Any, code: int, message: str, data: Optional[Any] = None) -> dict:
    """Create a JSON-RPC 2.0 error response.

    Args:
        id: Request ID (None for parse errors)
        code: Error code (negative integer)
        message: Human-readable error message
        data: Optional structured detail

    Returns:
        JSON-RPC 2.0 error response dict
    """
    error: Dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": JSONRPC_VERSION, "id": id, "error": error}


def invalid_params(detail: str, data: Optional[Any] = None) -> ProtocolError:
    """INVALID_PARAMS error whose message carries the detail, e.g. the offending parameter."""
    return ProtocolError(INVALID_PARAMS, f"Invalid params: {detail}", data)
