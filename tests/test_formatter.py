"""Unit tests for the room-grouped state report"""

import pytest
from unittest.mock import Mock, patch

from ha_mcp_bridge.protocol import InvalidParamsError
from ha_mcp_bridge.services.formatter import (
    DEFAULT_PATTERN,
    StateFormatter,
    describe_entity,
    group_by_area,
    render_report,
)
from ha_mcp_bridge.services.homeassistant import UpstreamError
from ha_mcp_bridge.services.models import EntityState
from ha_mcp_bridge.services.rooms import RoomMap

from conftest import make_response


def entity(entity_id='light.test', state='on', **attributes):
    return EntityState.from_dict({'entity_id': entity_id, 'state': state, 'attributes': attributes})


class TestEntityState:
    """Parsing state payloads"""

    def test_from_dict(self, sample_states):
        light = EntityState.from_dict(sample_states[0])
        assert light.entity_id == 'light.kitchen_ceiling'
        assert light.friendly_name == 'Kitchen Ceiling'
        assert light.brightness == 128
        assert light.rgb_color == (255, 0, 0)
        assert light.color_temp == 300
        assert light.domain == 'light'
        assert light.last_changed == '2024-01-01T10:00:00+00:00'

    def test_friendly_name_falls_back_to_entity_id(self):
        assert entity('switch.fan').friendly_name == 'switch.fan'

    def test_non_string_friendly_name_is_text(self):
        assert entity('switch.fan', friendly_name=42).friendly_name == '42'

    @pytest.mark.parametrize("rgb", [[255, 0], [1, 2, 3, 4], "red", None, [1, "x", 3]])
    def test_malformed_rgb_is_dropped(self, rgb):
        assert entity(rgb_color=rgb).rgb_color is None

    @pytest.mark.parametrize("brightness,percent", [
        (128, 50),
        (0, 0),
        (255, 100),
        (1, 0),
        (3, 1),
        (None, None),
    ])
    def test_brightness_percent(self, brightness, percent):
        assert entity(brightness=brightness).brightness_percent == percent


class TestDescribeEntity:
    """Rendering a single entity line"""

    def test_plain(self):
        assert describe_entity(entity('switch.fan', 'off', friendly_name='Fan')) == "- Fan (switch.fan): off"

    def test_brightness_zero_still_rendered(self):
        line = describe_entity(entity(state='off', friendly_name='Lamp', brightness=0))
        assert line == "- Lamp (light.test): off | Brightness: 0%"

    def test_rgb_with_color_name(self):
        line = describe_entity(entity(friendly_name='Strip', brightness=128, rgb_color=[255, 0, 0]))
        assert line == "- Strip (light.test): on | Brightness: 50% | RGB: (255, 0, 0) Red"

    def test_rgb_without_color_name(self):
        line = describe_entity(entity(friendly_name='Strip', rgb_color=[1, 1, 1]))
        assert line == "- Strip (light.test): on | RGB: (1, 1, 1)"

    def test_color_temp_only_when_rgb_absent(self):
        with_rgb = describe_entity(entity(rgb_color=[0, 0, 255], color_temp=300))
        without_rgb = describe_entity(entity(color_temp=300))
        assert 'mireds' not in with_rgb
        assert without_rgb.endswith("| Color temp: 300 mireds")

    def test_device_class_last(self):
        line = describe_entity(entity('switch.plug', friendly_name='Plug', device_class='outlet', brightness=255))
        assert line == "- Plug (switch.plug): on | Brightness: 100% | Class: outlet"


class TestGrouping:
    """Grouping and report layout"""

    def test_every_entity_in_exactly_one_area(self):
        entities = [entity('light.a', friendly_name='A'), entity('light.b', friendly_name='B')]
        groups = group_by_area(entities, RoomMap({'light.a': 'Kitchen'}))

        assert [g.name for g in groups] == ['Kitchen', 'Unassigned']
        assert sum(len(g.entities) for g in groups) == 2

    def test_areas_sorted_by_name(self):
        entities = [entity('light.a'), entity('light.b'), entity('light.c')]
        groups = group_by_area(entities, RoomMap({'light.a': 'Office', 'light.b': 'Attic', 'light.c': 'Kitchen'}))
        assert [g.name for g in groups] == ['Attic', 'Kitchen', 'Office']

    def test_entities_sorted_case_sensitively(self):
        entities = [
            entity('light.a', friendly_name='banana'),
            entity('light.b', friendly_name='Cherry'),
            entity('light.c', friendly_name='Apple'),
        ]
        group = group_by_area(entities, RoomMap())[0]
        assert [e.friendly_name for e in group.sorted_entities()] == ['Apple', 'Cherry', 'banana']

    def test_mixed_friendly_name_types_sort(self):
        entities = [entity('light.a', friendly_name='Lamp'), entity('light.b', friendly_name=7)]
        group = group_by_area(entities, RoomMap())[0]
        assert [e.friendly_name for e in group.sorted_entities()] == ['7', 'Lamp']

    def test_empty_report(self):
        assert render_report([], 'climate') == "No entities found matching pattern 'climate'"


class TestStateFormatter:
    """End-to-end report over mocked REST calls"""

    @patch('requests.get')
    def test_default_report(self, mock_get, ha_service, ha_api):
        mock_get.side_effect = ha_api

        report = StateFormatter(ha_service).format_states()

        assert report == "\n".join([
            f"Found 5 entities matching pattern '{DEFAULT_PATTERN}':",
            "",
            "## Bedroom",
            "- Bedroom Lamp (light.bedroom_lamp): off | Brightness: 0%",
            "",
            "## Garage",
            "- Coffee Maker (switch.coffee_maker): off | Class: outlet",
            "",
            "## Kitchen",
            "- Counter Strip (light.kitchen_counter): on | Brightness: 100% | Color temp: 370 mireds",
            "- Kitchen Ceiling (light.kitchen_ceiling): on | Brightness: 50% | RGB: (255, 0, 0) Red",
            "",
            "## Unassigned",
            "- Porch Light (light.porch): unavailable",
        ])

    @patch('requests.get')
    def test_custom_pattern(self, mock_get, ha_service, ha_api):
        mock_get.side_effect = ha_api

        report = StateFormatter(ha_service).format_states('^sensor\\.')

        assert report.startswith("Found 1 entities matching pattern '^sensor\\.':")
        assert "## Unassigned" in report
        assert "Temperature (sensor.temperature): 22.5 | Class: temperature" in report

    @patch('requests.get')
    def test_pattern_is_searched_not_anchored(self, mock_get, ha_service, ha_api):
        mock_get.side_effect = ha_api

        report = StateFormatter(ha_service).format_states('kitchen')

        assert report.startswith("Found 2 entities matching pattern 'kitchen':")
        assert "## Garage" not in report

    @patch('requests.get')
    def test_no_matches(self, mock_get, ha_service, ha_api):
        mock_get.side_effect = ha_api

        report = StateFormatter(ha_service).format_states('^climate\\.')

        assert report == "No entities found matching pattern '^climate\\.'"

    def test_invalid_pattern(self, ha_service):
        with pytest.raises(InvalidParamsError, match="Invalid pattern"):
            StateFormatter(ha_service).format_states('light.(')

    @patch('requests.get')
    def test_registry_failure_degrades_to_unassigned(self, mock_get, ha_service, ha_api):
        del ha_api.routes['/api/config/area_registry']
        mock_get.side_effect = ha_api

        report = StateFormatter(ha_service).format_states()

        assert report.startswith("Found 5 entities")
        assert "## Unassigned" in report
        assert "## Kitchen" not in report

    @patch('requests.get')
    def test_states_failure_propagates(self, mock_get, ha_service):
        mock_get.return_value = make_response(None, status_code=502, text='Bad Gateway')

        with pytest.raises(UpstreamError, match="HTTP 502"):
            StateFormatter(ha_service).format_states()

    def test_custom_resolver_factory(self, sample_states):
        service = Mock()
        service.get_states.return_value = sample_states
        resolver = Mock()
        resolver.resolve.return_value = RoomMap({'light.porch': 'Outside'})

        report = StateFormatter(service, resolver_factory=lambda s: resolver).format_states('porch')

        assert "## Outside" in report
        resolver.resolve.assert_called_once()
