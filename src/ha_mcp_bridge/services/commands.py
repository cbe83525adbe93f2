"""Light and switch command handlers"""

import logging
from typing import Any, Dict

from ..protocol import InternalError
from ..tools import LightStateArgs, SwitchStateArgs
from .homeassistant import HomeAssistantService, UpstreamError
from .models import ServiceCall

logger = logging.getLogger(__name__)


def _service_for(state: str) -> str:
    return "turn_on" if state == "on" else "turn_off"


class CommandHandlers:
    """Turns validated tool arguments into service calls"""

    def __init__(self, service: HomeAssistantService):
        self.service = service

    def _invoke(self, call: ServiceCall) -> None:
        try:
            self.service.call_service(call)
        except UpstreamError as e:
            logger.error(f"{call.domain}.{call.service} failed for {call.entity_id}: {e}")
            raise InternalError(f"Failed to call {call.domain}.{call.service}: {e}")

    def set_light_state(self, args: LightStateArgs) -> str:
        """Turn a light on (with optional attributes) or off"""
        data: Dict[str, Any] = {}
        if args.state == "on":
            if args.brightness is not None:
                data['brightness'] = int(args.brightness)
            if args.color_temp is not None:
                data['color_temp'] = int(args.color_temp)
            if args.rgb_color is not None:
                data['rgb_color'] = [int(c) for c in args.rgb_color]

        self._invoke(ServiceCall("light", _service_for(args.state), args.entity_id, data))

        message = f"Light {args.entity_id} turned {args.state}"
        if args.brightness is not None:
            message += f" (brightness {args.brightness})"
        return message

    def set_switch_state(self, args: SwitchStateArgs) -> str:
        """Turn a switch on or off"""
        self._invoke(ServiceCall("switch", _service_for(args.state), args.entity_id))
        return f"Switch {args.entity_id} turned {args.state}"
