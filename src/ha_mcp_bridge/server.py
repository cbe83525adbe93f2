#!/usr/bin/env python3
"""
Home Assistant MCP Bridge server
Line-delimited JSON-RPC dispatcher for light and switch control
"""

import json
import logging
from enum import Enum
from typing import Any, Callable, Dict, Optional, TextIO, Union

from . import SERVER_NAME, __version__
from .config import BridgeConfig
from .protocol import (
    DEFAULT_PROTOCOL_VERSION,
    InternalError,
    InvalidParamsError,
    JsonRpcError,
    MethodNotFoundError,
    Request,
    error_response,
    success_response,
    text_content,
)
from .services.commands import CommandHandlers
from .services.formatter import StateFormatter
from .services.homeassistant import HomeAssistantService, UpstreamError
from .tools import (
    TOOL_CATALOG,
    LightStateArgs,
    ListEntitiesArgs,
    SwitchStateArgs,
    ToolName,
)

logger = logging.getLogger(__name__)


class Method(str, Enum):
    """Top-level methods the dispatcher understands"""
    INITIALIZE = "initialize"
    INITIALIZED = "initialized"
    NOTIFICATION_INITIALIZED = "notifications/initialized"
    NOTIFICATION_CANCELLED = "notifications/cancelled"
    PING = "ping"
    TOOLS_LIST = "tools/list"
    TOOLS_CALL = "tools/call"

    @classmethod
    def lookup(cls, name: str) -> Optional['Method']:
        try:
            return cls(name)
        except ValueError:
            return None


class Phase(Enum):
    """Lifecycle phase; informational only, every method is accepted in both"""
    UNINITIALIZED = "uninitialized"
    READY = "ready"


# Handlers returning NO_RESPONSE produce no output even when the message has an id
NO_RESPONSE = object()


class McpServer:
    """Single-threaded request/response loop over stdin/stdout"""

    def __init__(self, config: BridgeConfig,
                 service: Optional[HomeAssistantService] = None,
                 formatter: Optional[StateFormatter] = None,
                 commands: Optional[CommandHandlers] = None):
        self.config = config
        self.service = service or HomeAssistantService(config)
        self.formatter = formatter or StateFormatter(self.service)
        self.commands = commands or CommandHandlers(self.service)
        self.phase = Phase.UNINITIALIZED

        self._methods: Dict[Method, Callable[[Request], Any]] = {
            Method.INITIALIZE: self.handle_initialize,
            Method.INITIALIZED: self.handle_initialized,
            Method.NOTIFICATION_INITIALIZED: self.handle_initialized,
            Method.NOTIFICATION_CANCELLED: self.handle_cancelled,
            Method.PING: self.handle_ping,
            Method.TOOLS_LIST: self.handle_tools_list,
            Method.TOOLS_CALL: self.handle_tools_call,
        }
        self._tools: Dict[ToolName, Callable[[Dict[str, Any]], str]] = {
            ToolName.LIST_ENTITIES: self.tool_list_entities,
            ToolName.SET_LIGHT_STATE: self.tool_set_light_state,
            ToolName.SET_SWITCH_STATE: self.tool_set_switch_state,
        }

    # ========== METHOD HANDLERS ==========

    def handle_initialize(self, request: Request) -> Dict[str, Any]:
        requested = request.params.get('protocolVersion')
        if self.phase is Phase.READY:
            logger.info("Received initialize again; re-initializing")
        self.phase = Phase.READY
        logger.info(f"Client initialize (protocolVersion={requested or DEFAULT_PROTOCOL_VERSION})")
        return {
            "protocolVersion": requested if requested is not None else DEFAULT_PROTOCOL_VERSION,
            "capabilities": {"tools": {}},
            "serverInfo": {"name": SERVER_NAME, "version": __version__}
        }

    def handle_initialized(self, request: Request) -> Any:
        logger.info("MCP client initialized")
        return NO_RESPONSE if request.is_notification else {}

    def handle_cancelled(self, request: Request) -> Any:
        logger.debug(f"Client cancelled request {request.params.get('requestId')}")
        return NO_RESPONSE if request.is_notification else {}

    def handle_ping(self, request: Request) -> Dict[str, Any]:
        return {}

    def handle_tools_list(self, request: Request) -> Dict[str, Any]:
        return {"tools": TOOL_CATALOG}

    def handle_tools_call(self, request: Request) -> Dict[str, Any]:
        name = request.params.get('name')
        arguments = request.params.get('arguments') or {}

        tool = ToolName.lookup(name)
        if tool is None:
            raise MethodNotFoundError(f"Unknown tool: {name}")
        if not isinstance(arguments, dict):
            raise InvalidParamsError("Tool arguments must be an object")

        logger.info(f"Calling tool {tool.value}")
        return text_content(self._tools[tool](arguments))

    # ========== TOOL HANDLERS ==========

    def tool_list_entities(self, arguments: Dict[str, Any]) -> str:
        args = ListEntitiesArgs.from_arguments(arguments)
        try:
            return self.formatter.format_states(args.pattern)
        except UpstreamError as e:
            raise InternalError(f"Failed to read entity states: {e}")

    def tool_set_light_state(self, arguments: Dict[str, Any]) -> str:
        return self.commands.set_light_state(LightStateArgs.from_arguments(arguments))

    def tool_set_switch_state(self, arguments: Dict[str, Any]) -> str:
        return self.commands.set_switch_state(SwitchStateArgs.from_arguments(arguments))

    # ========== DISPATCH ==========

    def dispatch(self, request: Request) -> Optional[Dict[str, Any]]:
        """Route one decoded request; returns the response or None for notifications"""
        method = Method.lookup(request.method)
        if method is None:
            if request.is_notification:
                logger.warning(f"Ignoring unknown notification: {request.method}")
                return None
            return error_response(request.id, MethodNotFoundError(f"Method not found: {request.method}"))

        try:
            result = self._methods[method](request)
            response = success_response(request.id, result)
        except JsonRpcError as e:
            logger.warning(f"{request.method} failed: {e.message}")
            result, response = None, error_response(request.id, e)
        except Exception as e:
            logger.exception(f"Unexpected error in {request.method}")
            error = InternalError(f"Internal error in {request.method}: {e}")
            result, response = None, error_response(request.id, error)

        if result is NO_RESPONSE or request.is_notification:
            return None
        return response

    def handle_line(self, line: Union[str, bytes]) -> Optional[Dict[str, Any]]:
        """Decode and dispatch one input line"""
        logger.debug(f"<- {line!r}")
        try:
            request = Request.decode(line)
        except JsonRpcError as e:
            logger.warning(f"Rejected message: {e.message}")
            if e.notification:
                return None
            return error_response(e.request_id, e)

        logger.info(f"Received {request.method} (id: {request.id})")
        return self.dispatch(request)

    def serve(self, stdin: TextIO, stdout: TextIO) -> None:
        """
        Process input lines until end-of-input

        Lines are read from the underlying binary buffer when there is one, so
        bytes that are not UTF-8 fail only their own line.
        """
        logger.info(f"Starting {SERVER_NAME} {__version__} (phase: {self.phase.value})")
        for line in getattr(stdin, "buffer", stdin):
            line = line.strip()
            if not line:
                continue

            response = self.handle_line(line)
            if response is None:
                continue

            encoded = json.dumps(response)
            logger.debug(f"-> {encoded}")
            stdout.write(encoded + "\n")
            stdout.flush()

        logger.info("End of input, shutting down")
