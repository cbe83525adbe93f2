"""Resolve which area (room) each entity belongs to"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

from .homeassistant import HomeAssistantService, Registry, UpstreamError

logger = logging.getLogger(__name__)

UNASSIGNED_AREA = "Unassigned"


@dataclass
class RoomMap:
    """entity_id -> area name lookup built for one read request"""
    entity_areas: Dict[str, str] = field(default_factory=dict)
    failed_registries: Set[Registry] = field(default_factory=set)

    def area_for(self, entity_id: str) -> str:
        return self.entity_areas.get(entity_id, UNASSIGNED_AREA)

    @property
    def degraded(self) -> bool:
        return bool(self.failed_registries)


def build_room_map(areas: List[Dict[str, Any]],
                   devices: List[Dict[str, Any]],
                   entities: List[Dict[str, Any]]) -> Dict[str, str]:
    """
    Join the three registries into entity_id -> area name

    An entity's own area assignment wins over its device's. Entities whose
    area id is unknown to the area registry are left out, so they fall
    through to Unassigned. Rows that are not objects are skipped.
    """
    area_names = {
        a['area_id']: a.get('name') or a['area_id']
        for a in areas if isinstance(a, dict) and a.get('area_id')
    }

    device_areas = {
        d['id']: d['area_id']
        for d in devices if isinstance(d, dict) and d.get('id') and d.get('area_id')
    }

    entity_areas: Dict[str, str] = {}
    for entity in entities:
        if not isinstance(entity, dict):
            continue
        entity_id = entity.get('entity_id')
        if not entity_id:
            continue

        area_id = entity.get('area_id')
        if not area_id and entity.get('device_id'):
            area_id = device_areas.get(entity['device_id'])

        if area_id and area_id in area_names:
            entity_areas[entity_id] = area_names[area_id]

    return entity_areas


class RoomResolver:
    """Fetches the area, device and entity registries and joins them"""

    def __init__(self, service: HomeAssistantService):
        self.service = service

    def _fetch(self, registry: Registry, failed: Set[Registry]) -> List[Dict[str, Any]]:
        try:
            return self.service.get_registry(registry)
        except UpstreamError as e:
            logger.warning(f"{registry.value} registry unavailable, treating as empty: {e}")
            failed.add(registry)
            return []

    def resolve(self) -> RoomMap:
        """Build the room map, degrading any failed registry to empty"""
        failed: Set[Registry] = set()
        areas = self._fetch(Registry.AREA, failed)
        devices = self._fetch(Registry.DEVICE, failed)
        entities = self._fetch(Registry.ENTITY, failed)

        room_map = RoomMap(build_room_map(areas, devices, entities), failed)
        if room_map.degraded:
            logger.info(f"Room resolution degraded, failed registries: "
                        f"{sorted(r.value for r in failed)}")
        return room_map

    def area_for(self, entity_id: str, room_map: Optional[RoomMap] = None) -> str:
        """Resolve a single entity, fetching the registries if no map is given"""
        return (room_map or self.resolve()).area_for(entity_id)
