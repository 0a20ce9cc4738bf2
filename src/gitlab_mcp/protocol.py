"""JSON-RPC 2.0 message types for the MCP stdio transport.

Requests arrive one per line. MCP narrows plain JSON-RPC in two ways that
matter here: a response id is never null, and requests without an id are
notifications that receive no reply.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

RequestId = Union[int, str]

# JSON-RPC error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

# Id used when the request id cannot be recovered
UNKNOWN_REQUEST_ID = 0

MCP_PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "gitlab-mcp-server"

METHOD_INITIALIZE = "initialize"
METHOD_PING = "ping"
METHOD_TOOLS_LIST = "tools/list"
METHOD_TOOLS_CALL = "tools/call"


@dataclass
class JsonRpcRequest:
    """Inbound MCP request or notification.

    Args:
        method: Method name, e.g. ``tools/call``
        id: Request id; None marks a notification
        params: Named parameters
    """

    method: str
    id: Optional[RequestId] = None
    params: Optional[Dict[str, Any]] = None

    @property
    def is_notification(self) -> bool:
        return self.id is None


@dataclass
class JsonRpcError:
    """Error member of a failed response."""

    code: int
    message: str
    data: Optional[Any] = None

    def to_dict(self) -> dict:
        error: dict = {"code": self.code, "message": self.message}
        if self.data is not None:
            error["data"] = self.data
        return error


@dataclass
class JsonRpcResponse:
    """Outbound response carrying exactly one of ``result`` or ``error``."""

    id: RequestId
    result: Optional[Any] = None
    error: Optional[JsonRpcError] = None

    def __post_init__(self):
        if self.id is None:
            raise ValueError("MCP responses must not carry a null id")
        if self.result is not None and self.error is not None:
            raise ValueError("Response cannot have both result and error")
        if self.result is None and self.error is None:
            raise ValueError("Response must have either result or error")

    def to_dict(self) -> dict:
        message: dict = {"jsonrpc": "2.0", "id": self.id}
        if self.error is not None:
            message["error"] = self.error.to_dict()
        else:
            message["result"] = self.result
        return message


def parse_jsonrpc_request(line: str) -> JsonRpcRequest:
    """Decode one line of input into a request.

    Raises:
        json.JSONDecodeError: If the line is not JSON
        ValueError: If the message is not a well-formed JSON-RPC 2.0 request
    """
    data = json.loads(line)

    if not isinstance(data, dict):
        raise ValueError("Request must be a JSON object")
    if data.get("jsonrpc") is None:
        raise ValueError("Missing required field: jsonrpc")
    if data["jsonrpc"] != "2.0":
        raise ValueError(f"Invalid jsonrpc version: {data['jsonrpc']} (expected '2.0')")

    method = data.get("method")
    if method is None:
        raise ValueError("Missing required field: method")
    if not isinstance(method, str):
        raise ValueError("Field 'method' must be a string")

    params = data.get("params")
    if params is not None and not isinstance(params, dict):
        raise ValueError("Field 'params' must be an object")

    return JsonRpcRequest(method=method, id=data.get("id"), params=params)


def create_error_response(
    request_id: Optional[RequestId],
    code: int,
    message: str,
    data: Optional[Any] = None,
) -> JsonRpcResponse:
    """Build an error response; a missing id is replaced by 0."""
    if request_id is None:
        request_id = UNKNOWN_REQUEST_ID
    return JsonRpcResponse(
        id=request_id, error=JsonRpcError(code=code, message=message, data=data)
    )


def create_success_response(request_id: RequestId, result: Any) -> JsonRpcResponse:
    return JsonRpcResponse(id=request_id, result=result)
