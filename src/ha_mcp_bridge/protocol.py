"""JSON-RPC 2.0 message types and errors for the MCP stdio transport"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union

JSONRPC_VERSION = "2.0"
DEFAULT_PROTOCOL_VERSION = "2024-11-05"

RequestId = Optional[Union[str, int, float]]


class ErrorCode(int, Enum):
    """Standard JSON-RPC error codes"""
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603


class JsonRpcError(Exception):
    """Base class for errors that become a JSON-RPC error response"""
    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, request_id: RequestId = None, notification: bool = False):
        super().__init__(message)
        self.message = message
        self.request_id = request_id
        # raised while decoding a notification, so no response is written
        self.notification = notification

    def to_dict(self) -> Dict[str, Any]:
        return {"code": int(self.code), "message": self.message}


class ParseError(JsonRpcError):
    code = ErrorCode.PARSE_ERROR


class InvalidRequestError(JsonRpcError):
    code = ErrorCode.INVALID_REQUEST


class MethodNotFoundError(JsonRpcError):
    code = ErrorCode.METHOD_NOT_FOUND


class InvalidParamsError(JsonRpcError):
    code = ErrorCode.INVALID_PARAMS


class InternalError(JsonRpcError):
    code = ErrorCode.INTERNAL_ERROR


@dataclass(frozen=True)
class Request:
    """An inbound message; a missing id marks a notification"""
    method: str
    id: RequestId = None
    params: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_notification(self) -> bool:
        return self.id is None

    @classmethod
    def decode(cls, line: Union[str, bytes]) -> 'Request':
        """
        Decode one line of input

        Raises:
            ParseError: The line is not UTF-8 or not valid JSON
            InvalidRequestError: The JSON is not a request object
        """
        try:
            if isinstance(line, bytes):
                line = line.decode("utf-8")
            data = json.loads(line)
        except (ValueError, RecursionError) as e:
            raise ParseError(f"Parse error: {e}")

        if not isinstance(data, dict):
            raise InvalidRequestError("Invalid Request: message must be a JSON object")

        method = data.get('method')
        if not isinstance(method, str) or not method:
            raise InvalidRequestError("Invalid Request: missing or invalid method", data.get('id'))

        params = data.get('params')
        if params is None:
            params = {}
        elif not isinstance(params, dict):
            raise InvalidParamsError("Invalid params: params must be an object", data.get('id'),
                                     notification=data.get('id') is None)

        return cls(method=method, id=data.get('id'), params=params)


def success_response(request_id: RequestId, result: Any) -> Dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def error_response(request_id: RequestId, error: JsonRpcError) -> Dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "error": error.to_dict()}


def text_content(text: str) -> Dict[str, Any]:
    """Wrap plain text as an MCP tool result"""
    return {"content": [{"type": "text", "text": text}]}
