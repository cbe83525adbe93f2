"""
Services package for Home Assistant MCP Bridge
Contains the Home Assistant REST client, room resolution, formatting and command handlers.
"""

from .homeassistant import HomeAssistantService, UpstreamError
from .rooms import RoomResolver, RoomMap, UNASSIGNED_AREA
from .formatter import StateFormatter
from .commands import CommandHandlers

__all__ = [
    'HomeAssistantService',
    'UpstreamError',
    'RoomResolver',
    'RoomMap',
    'UNASSIGNED_AREA',
    'StateFormatter',
    'CommandHandlers',
]
