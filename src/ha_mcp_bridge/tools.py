"""Tool catalog and typed tool arguments"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .protocol import InvalidParamsError

VALID_STATES = ("on", "off")


class ToolName(str, Enum):
    """Tools exposed through tools/list and tools/call"""
    LIST_ENTITIES = "list_entities"
    SET_LIGHT_STATE = "set_light_state"
    SET_SWITCH_STATE = "set_switch_state"

    @classmethod
    def lookup(cls, name: Any) -> Optional['ToolName']:
        try:
            return cls(name)
        except ValueError:
            return None


# ========== ARGUMENT COERCION ==========

def _require_str(arguments: Mapping[str, Any], key: str) -> str:
    value = arguments.get(key)
    if value is None or value == "":
        raise InvalidParamsError(f"Missing required parameter: {key}")
    if not isinstance(value, str):
        raise InvalidParamsError(f"Parameter '{key}' must be a string")
    return value


def _require_state(arguments: Mapping[str, Any]) -> str:
    state = _require_str(arguments, 'state').lower()
    if state not in VALID_STATES:
        raise InvalidParamsError(f"Invalid state '{arguments['state']}'. State must be 'on' or 'off'")
    return state


def _optional_int(arguments: Mapping[str, Any], key: str,
                  low: Optional[int] = None, high: Optional[int] = None) -> Optional[int]:
    value = arguments.get(key)
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise InvalidParamsError(f"Parameter '{key}' must be an integer")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise InvalidParamsError(f"Parameter '{key}' must be an integer, got {value!r}")
    if (low is not None and number < low) or (high is not None and number > high):
        raise InvalidParamsError(f"Parameter '{key}' must be between {low} and {high}, got {number}")
    return number


def _optional_rgb(arguments: Mapping[str, Any], key: str) -> Optional[Tuple[int, int, int]]:
    value = arguments.get(key)
    if value is None or value == []:
        return None
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        raise InvalidParamsError(f"Parameter '{key}' must be an array of 3 integers")
    components = [_optional_int({key: c}, key, 0, 255) for c in value]
    if any(c is None for c in components):
        raise InvalidParamsError(f"Parameter '{key}' must be an array of 3 integers")
    return components[0], components[1], components[2]


# ========== TYPED ARGUMENTS ==========

@dataclass(frozen=True)
class ListEntitiesArgs:
    pattern: Optional[str] = None

    @classmethod
    def from_arguments(cls, arguments: Mapping[str, Any]) -> 'ListEntitiesArgs':
        pattern = arguments.get('pattern')
        if pattern is not None and not isinstance(pattern, str):
            raise InvalidParamsError("Parameter 'pattern' must be a string")
        return cls(pattern=pattern or None)


@dataclass(frozen=True)
class LightStateArgs:
    entity_id: str
    state: str
    brightness: Optional[int] = None
    color_temp: Optional[int] = None
    rgb_color: Optional[Tuple[int, int, int]] = None

    @classmethod
    def from_arguments(cls, arguments: Mapping[str, Any]) -> 'LightStateArgs':
        return cls(
            entity_id=_require_str(arguments, 'entity_id'),
            state=_require_state(arguments),
            brightness=_optional_int(arguments, 'brightness', 0, 255),
            color_temp=_optional_int(arguments, 'color_temp', 1),
            rgb_color=_optional_rgb(arguments, 'rgb_color'),
        )


@dataclass(frozen=True)
class SwitchStateArgs:
    entity_id: str
    state: str

    @classmethod
    def from_arguments(cls, arguments: Mapping[str, Any]) -> 'SwitchStateArgs':
        return cls(
            entity_id=_require_str(arguments, 'entity_id'),
            state=_require_state(arguments),
        )


# ========== CATALOG ==========

TOOL_CATALOG: List[Dict[str, Any]] = [
    {
        "name": ToolName.LIST_ENTITIES.value,
        "description": """List Home Assistant entities and their current state, grouped by room.

## Parameters
• pattern: Regular expression matched against entity IDs (default: lights and switches)

## Returns
• Entity count and the pattern used
• One section per room, entities sorted by name
• Brightness %, RGB color and color name, color temperature, device class where known""",
        "inputSchema": {
            "type": "object",
            "properties": {
                "pattern": {
                    "type": "string",
                    "description": "Regex over entity IDs, e.g. '^light\\.' or 'kitchen'"
                }
            }
        }
    },
    {
        "name": ToolName.SET_LIGHT_STATE.value,
        "description": """Turn a light on or off, optionally setting brightness and color.

## Parameters
• entity_id: Light entity ID (e.g., 'light.kitchen')
• state: 'on' or 'off'
• brightness: 0-255 (turn on only)
• color_temp: Color temperature in mireds (turn on only)
• rgb_color: [r, g, b] with 0-255 components (turn on only)""",
        "inputSchema": {
            "type": "object",
            "properties": {
                "entity_id": {"type": "string", "description": "Light entity ID"},
                "state": {"type": "string", "enum": list(VALID_STATES)},
                "brightness": {"type": "integer", "minimum": 0, "maximum": 255},
                "color_temp": {"type": "integer", "description": "Color temperature in mireds"},
                "rgb_color": {
                    "type": "array",
                    "items": {"type": "integer", "minimum": 0, "maximum": 255},
                    "minItems": 3,
                    "maxItems": 3
                }
            },
            "required": ["entity_id", "state"]
        }
    },
    {
        "name": ToolName.SET_SWITCH_STATE.value,
        "description": """Turn a switch on or off.

## Parameters
• entity_id: Switch entity ID (e.g., 'switch.garage')
• state: 'on' or 'off'""",
        "inputSchema": {
            "type": "object",
            "properties": {
                "entity_id": {"type": "string", "description": "Switch entity ID"},
                "state": {"type": "string", "enum": list(VALID_STATES)}
            },
            "required": ["entity_id", "state"]
        }
    },
]
