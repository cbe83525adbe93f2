"""Shared fixtures and configuration for tests"""

import pytest
from unittest.mock import Mock
from typing import Any, Dict, List

from ha_mcp_bridge.config import BridgeConfig
from ha_mcp_bridge.services.homeassistant import HomeAssistantService


# ============================================================================
# Helpers
# ============================================================================

def make_response(payload: Any = None, status_code: int = 200, text: str = "") -> Mock:
    """Build a mock requests.Response"""
    response = Mock()
    response.status_code = status_code
    response.text = text
    response.json.return_value = payload
    return response


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def bridge_config():
    """Bridge configuration pointing at a local Home Assistant"""
    return BridgeConfig(url='http://localhost:8123/', token='test_token', log_file='')


@pytest.fixture
def ha_service(bridge_config):
    """HomeAssistantService with the test configuration"""
    return HomeAssistantService(bridge_config)


# ============================================================================
# Home Assistant Fixtures
# ============================================================================

@pytest.fixture
def sample_states() -> List[Dict[str, Any]]:
    """Mock GET /api/states payload"""
    return [
        {
            'entity_id': 'light.kitchen_ceiling',
            'state': 'on',
            'attributes': {
                'friendly_name': 'Kitchen Ceiling',
                'brightness': 128,
                'rgb_color': [255, 0, 0],
                'color_temp': 300
            },
            'last_changed': '2024-01-01T10:00:00+00:00'
        },
        {
            'entity_id': 'light.kitchen_counter',
            'state': 'on',
            'attributes': {
                'friendly_name': 'Counter Strip',
                'brightness': 255,
                'color_temp': 370
            },
            'last_changed': '2024-01-01T10:00:00+00:00'
        },
        {
            'entity_id': 'switch.coffee_maker',
            'state': 'off',
            'attributes': {
                'friendly_name': 'Coffee Maker',
                'device_class': 'outlet'
            },
            'last_changed': '2024-01-01T09:00:00+00:00'
        },
        {
            'entity_id': 'light.bedroom_lamp',
            'state': 'off',
            'attributes': {
                'friendly_name': 'Bedroom Lamp',
                'brightness': 0
            },
            'last_changed': '2024-01-01T08:00:00+00:00'
        },
        {
            'entity_id': 'light.porch',
            'state': 'unavailable',
            'attributes': {
                'friendly_name': 'Porch Light'
            },
            'last_changed': '2024-01-01T07:00:00+00:00'
        },
        {
            'entity_id': 'sensor.temperature',
            'state': '22.5',
            'attributes': {
                'unit_of_measurement': '°C',
                'friendly_name': 'Temperature',
                'device_class': 'temperature'
            },
            'last_changed': '2024-01-01T10:00:00+00:00'
        }
    ]


@pytest.fixture
def sample_areas() -> List[Dict[str, Any]]:
    return [
        {'area_id': 'kitchen', 'name': 'Kitchen'},
        {'area_id': 'bedroom', 'name': 'Bedroom'},
        {'area_id': 'garage', 'name': 'Garage'}
    ]


@pytest.fixture
def sample_devices() -> List[Dict[str, Any]]:
    return [
        {'id': 'dev_kitchen_hub', 'name': 'Kitchen Hub', 'area_id': 'kitchen'},
        {'id': 'dev_bedroom_lamp', 'name': 'Lamp', 'area_id': 'bedroom'},
        {'id': 'dev_no_area', 'name': 'Loose Device', 'area_id': None}
    ]


@pytest.fixture
def sample_entity_registry() -> List[Dict[str, Any]]:
    return [
        # Device says kitchen, entity override says garage
        {'entity_id': 'switch.coffee_maker', 'device_id': 'dev_kitchen_hub', 'area_id': 'garage'},
        {'entity_id': 'light.kitchen_ceiling', 'device_id': 'dev_kitchen_hub', 'area_id': None},
        {'entity_id': 'light.kitchen_counter', 'device_id': None, 'area_id': 'kitchen'},
        {'entity_id': 'light.bedroom_lamp', 'device_id': 'dev_bedroom_lamp', 'area_id': None},
        {'entity_id': 'light.porch', 'device_id': 'dev_no_area', 'area_id': None}
    ]


@pytest.fixture
def ha_api(sample_states, sample_areas, sample_devices, sample_entity_registry):
    """Route mocked GET requests to the sample payloads by URL suffix"""
    routes = {
        '/api/states': sample_states,
        '/api/config/area_registry': sample_areas,
        '/api/config/device_registry': sample_devices,
        '/api/config/entity_registry': sample_entity_registry,
    }

    def fake_get(url, *args, **kwargs):
        for suffix, payload in routes.items():
            if url.endswith(suffix):
                return make_response(payload)
        return make_response(None, status_code=404, text='404: Not Found')

    fake_get.routes = routes
    return fake_get
