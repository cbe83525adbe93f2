"""Home Assistant REST client for the MCP bridge, via Nabu Casa or local connection"""

import json
import logging
import ssl
from enum import Enum
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

import requests
import websocket

from ..config import BridgeConfig
from .models import ServiceCall

logger = logging.getLogger(__name__)


class ConnectionType(Enum):
    """Connection type to Home Assistant"""
    LOCAL = "local"
    NABU_CASA = "nabu_casa"


class Registry(Enum):
    """Configuration registries used to resolve rooms"""
    AREA = "area"
    DEVICE = "device"
    ENTITY = "entity"

    @property
    def endpoint(self) -> str:
        return f"config/{self.value}_registry"

    @property
    def websocket_command(self) -> str:
        return f"config/{self.value}_registry/list"


class UpstreamError(Exception):
    """A call to Home Assistant failed (network, HTTP status or JSON decoding)"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class HomeAssistantService:
    """Synchronous service for interacting with Home Assistant via REST API"""

    def __init__(self, config: BridgeConfig):
        """
        Initialize Home Assistant service

        Args:
            config: Bridge configuration carrying the URL, token and transport options
        """
        self.config = config
        self.url = config.url
        self.verify_ssl = config.verify_ssl
        self.timeout = config.timeout
        self.connection_type = self._detect_connection_type()
        self.headers = {
            "Authorization": f"Bearer {config.token}",
            "Content-Type": "application/json"
        }

        logger.info(f"Initialized Home Assistant service ({self.connection_type.value}): {self.url}")

    def _detect_connection_type(self) -> ConnectionType:
        """Detect if this is a local or Nabu Casa connection"""
        parsed = urlparse(self.url)
        if 'ui.nabu.casa' in parsed.netloc or 'remote.nabucasa.com' in parsed.netloc:
            return ConnectionType.NABU_CASA
        return ConnectionType.LOCAL

    def request(self, endpoint: str, method: str = "GET", payload: Optional[Dict[str, Any]] = None) -> Any:
        """
        Perform one REST call against the Home Assistant API

        Args:
            endpoint: Path below /api/ (e.g. 'states', 'services/light/turn_on')
            method: GET or POST
            payload: JSON body for POST requests

        Returns:
            The decoded JSON response

        Raises:
            UpstreamError: On network failure, non-2xx status or malformed JSON
        """
        url = f"{self.url}/api/{endpoint}"
        logger.debug(f"{method} {url}")

        try:
            if method == "GET":
                response = requests.get(
                    url,
                    headers=self.headers,
                    verify=self.verify_ssl,
                    timeout=self.timeout
                )
            elif method == "POST":
                response = requests.post(
                    url,
                    headers=self.headers,
                    json=payload if payload is not None else {},
                    verify=self.verify_ssl,
                    timeout=self.timeout
                )
            else:
                raise ValueError(f"Unsupported HTTP method: {method}")
        except requests.exceptions.RequestException as e:
            logger.error(f"{method} {endpoint} failed: {e}")
            raise UpstreamError(f"Cannot reach Home Assistant at {self.url}: {e}")

        if not 200 <= response.status_code < 300:
            logger.error(f"{method} {endpoint} returned HTTP {response.status_code}")
            raise UpstreamError(
                f"HTTP {response.status_code} from {method} {endpoint}: {response.text}",
                status_code=response.status_code
            )

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(f"Invalid JSON from {method} {endpoint}: {e}", status_code=response.status_code)

    def test_connection(self) -> Dict[str, Any]:
        """Test connection to Home Assistant"""
        try:
            data = self.request("")
            return {
                "status": "success",
                "message": data.get("message", "API running.") if isinstance(data, dict) else "API running.",
                "connection_type": self.connection_type.value,
                "url": self.url
            }
        except UpstreamError as e:
            return {
                "status": "error",
                "error": str(e),
                "connection_type": self.connection_type.value,
                "url": self.url
            }

    def get_states(self) -> List[Dict[str, Any]]:
        """Get the current state of every entity"""
        states = self.request("states")
        if not isinstance(states, list):
            raise UpstreamError(f"Unexpected states payload: {type(states).__name__}")
        return states

    def get_registry(self, registry: Registry) -> List[Dict[str, Any]]:
        """
        Read one configuration registry

        Falls back to the WebSocket API when the REST read fails and
        registry_websocket is enabled.
        """
        try:
            entries = self.request(registry.endpoint)
        except UpstreamError as e:
            if not self.config.registry_websocket:
                raise
            logger.info(f"REST {registry.endpoint} not available ({e}), using WebSocket API")
            entries = self._get_registry_via_websocket(registry)
            if entries is None:
                raise

        if not isinstance(entries, list):
            raise UpstreamError(f"Unexpected {registry.value} registry payload: {type(entries).__name__}")
        return entries

    def get_area_registry(self) -> List[Dict[str, Any]]:
        return self.get_registry(Registry.AREA)

    def get_device_registry(self) -> List[Dict[str, Any]]:
        return self.get_registry(Registry.DEVICE)

    def get_entity_registry(self) -> List[Dict[str, Any]]:
        return self.get_registry(Registry.ENTITY)

    def call_service(self, call: ServiceCall) -> Any:
        """
        Call a Home Assistant service

        Args:
            call: Domain, service, target entity and attribute data

        Returns:
            The states Home Assistant reports as changed
        """
        logger.info(f"Calling {call.domain}.{call.service} for {call.entity_id}")
        return self.request(call.endpoint, method="POST", payload=call.payload())

    def _get_registry_via_websocket(self, registry: Registry) -> Optional[List[Dict[str, Any]]]:
        """Get a registry via WebSocket API when REST is not available"""
        try:
            # Convert HTTP URL to WebSocket URL
            ws_url = self.url.replace('http://', 'ws://').replace('https://', 'wss://')
            ws_url = f"{ws_url}/api/websocket"

            sslopt = {"cert_reqs": ssl.CERT_NONE} if not self.verify_ssl else None

            ws = websocket.create_connection(ws_url, sslopt=sslopt, timeout=self.timeout)

            try:
                auth_data = json.loads(ws.recv())
                if auth_data.get('type') != 'auth_required':
                    logger.error(f"Unexpected initial message: {auth_data}")
                    return None

                ws.send(json.dumps({
                    "type": "auth",
                    "access_token": self.config.token
                }))

                result = json.loads(ws.recv())
                if result.get('type') != 'auth_ok':
                    logger.error(f"WebSocket authentication failed: {result.get('type')}")
                    return None

                ws.send(json.dumps({
                    "id": 1,
                    "type": registry.websocket_command
                }))

                data = json.loads(ws.recv())
                if data.get('success'):
                    entries = data.get('result', [])
                    logger.info(f"Retrieved {len(entries)} {registry.value} registry entries via WebSocket")
                    return entries

                error = data.get('error', {})
                logger.error(f"WebSocket {registry.value} registry request failed: {error.get('message', 'Unknown error')}")
                return None

            finally:
                ws.close()

        except (websocket.WebSocketException, OSError, ValueError) as e:
            logger.error(f"WebSocket connection failed: {e}")
            return None
