"""Typed views over Home Assistant REST payloads"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


def _optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(round(float(value)))
    except (TypeError, ValueError):
        return None


def _rgb_triple(value: Any) -> Optional[Tuple[int, int, int]]:
    """Only well-formed three-component colors are kept"""
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        return None
    components = [_optional_int(c) for c in value]
    if any(c is None for c in components):
        return None
    return components[0], components[1], components[2]


@dataclass(frozen=True)
class EntityState:
    """Snapshot of one entity from GET /api/states"""
    entity_id: str
    state: str
    friendly_name: str
    brightness: Optional[int] = None
    color_temp: Optional[int] = None
    rgb_color: Optional[Tuple[int, int, int]] = None
    device_class: Optional[str] = None
    last_changed: Optional[str] = None

    @property
    def domain(self) -> str:
        return self.entity_id.split('.', 1)[0]

    @property
    def brightness_percent(self) -> Optional[int]:
        """Brightness on a 0-100 scale, rounded from the 0-255 source"""
        if self.brightness is None:
            return None
        return round(self.brightness / 255 * 100)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EntityState':
        attrs = data.get('attributes') or {}
        entity_id = data.get('entity_id', '')
        return cls(
            entity_id=entity_id,
            state=str(data.get('state', 'unknown')),
            friendly_name=str(attrs.get('friendly_name') or entity_id),
            brightness=_optional_int(attrs.get('brightness')),
            color_temp=_optional_int(attrs.get('color_temp')),
            rgb_color=_rgb_triple(attrs.get('rgb_color')),
            device_class=attrs.get('device_class'),
            last_changed=data.get('last_changed'),
        )


@dataclass
class AreaGroup:
    """Entities that resolved to one area, assembled per request"""
    name: str
    entities: List[EntityState] = field(default_factory=list)

    def sorted_entities(self) -> List[EntityState]:
        return sorted(self.entities, key=lambda e: e.friendly_name)


@dataclass(frozen=True)
class ServiceCall:
    """A single service invocation against one entity"""
    domain: str
    service: str
    entity_id: str
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def endpoint(self) -> str:
        return f"services/{self.domain}/{self.service}"

    def payload(self) -> Dict[str, Any]:
        payload = {'entity_id': self.entity_id}
        payload.update(self.data)
        return payload
