"""Render entity states as a room-grouped text report"""

import re
import logging
from typing import Callable, Dict, List, Optional

from ..helpers.colors import classify_rgb
from ..protocol import InvalidParamsError
from .homeassistant import HomeAssistantService
from .models import AreaGroup, EntityState
from .rooms import RoomMap, RoomResolver

logger = logging.getLogger(__name__)

DEFAULT_PATTERN = r"^(light|switch)\."


def describe_entity(entity: EntityState) -> str:
    """One report line for an entity"""
    parts = [f"- {entity.friendly_name} ({entity.entity_id}): {entity.state}"]

    if entity.brightness_percent is not None:
        parts.append(f"Brightness: {entity.brightness_percent}%")

    if entity.rgb_color is not None:
        rgb = f"RGB: ({entity.rgb_color[0]}, {entity.rgb_color[1]}, {entity.rgb_color[2]})"
        color_name = classify_rgb(entity.rgb_color)
        parts.append(f"{rgb} {color_name}" if color_name else rgb)
    elif entity.color_temp is not None:
        parts.append(f"Color temp: {entity.color_temp} mireds")

    if entity.device_class:
        parts.append(f"Class: {entity.device_class}")

    return " | ".join(parts)


def group_by_area(entities: List[EntityState], room_map: RoomMap) -> List[AreaGroup]:
    """Group entities by resolved area, sorted by area name; empty areas never appear"""
    grouped: Dict[str, AreaGroup] = {}
    for entity in entities:
        area = room_map.area_for(entity.entity_id)
        if area not in grouped:
            grouped[area] = AreaGroup(area)
        grouped[area].entities.append(entity)
    return [grouped[name] for name in sorted(grouped)]


def render_report(groups: List[AreaGroup], pattern: str) -> str:
    total = sum(len(group.entities) for group in groups)
    if total == 0:
        return f"No entities found matching pattern '{pattern}'"

    lines = [f"Found {total} entities matching pattern '{pattern}':"]
    for group in groups:
        lines.append("")
        lines.append(f"## {group.name}")
        lines.extend(describe_entity(entity) for entity in group.sorted_entities())
    return "\n".join(lines)


class StateFormatter:
    """Builds the list_entities report from live states and registries"""

    def __init__(self, service: HomeAssistantService,
                 resolver_factory: Optional[Callable[[HomeAssistantService], RoomResolver]] = None):
        self.service = service
        self.resolver_factory = resolver_factory or RoomResolver

    def format_states(self, pattern: Optional[str] = None) -> str:
        """
        Report entities whose id matches pattern, grouped by room

        Args:
            pattern: Regular expression searched in entity ids (defaults to lights and switches)

        Returns:
            The text report

        Raises:
            InvalidParamsError: pattern is not a valid regular expression
            UpstreamError: the states could not be read
        """
        pattern = pattern or DEFAULT_PATTERN
        try:
            matcher = re.compile(pattern)
        except re.error as e:
            raise InvalidParamsError(f"Invalid pattern '{pattern}': {e}")

        states = [EntityState.from_dict(s) for s in self.service.get_states()]
        room_map = self.resolver_factory(self.service).resolve()

        matching = [s for s in states if matcher.search(s.entity_id)]
        logger.debug(f"{len(matching)} of {len(states)} entities match '{pattern}'")

        return render_report(group_by_area(matching, room_map), pattern)
