"""Vehicle climate control node."""

from __future__ import annotations

import copy

from .climate_events import (
    ClimateAirflowState,
    ClimateEvent,
    ClimateSystemMode,
    ClimateSystemState,
    ClimateTempState,
)
from .climate_frames import ClimateFanControlFrame, ClimateSystemControlFrame
from .core import (
    CANFrame,
    Clock,
    Event,
    MessageType,
    Node,
    RequestCommand,
    SubSystem,
    Ticker,
    Units,
    get_bit,
    message_type,
)

TEMP_FRAME_ID = 0x54A
SYSTEM_FRAME_ID = 0x54B

CONTROL_INIT_EXPIRE = 400
CONTROL_INIT_TICK = 100
CONTROL_FRAME_TICK = 200

_U32 = 0xFFFFFFFF
_METRIC_MARKER = 0x40
_MAX_FAN_SPEED = 7

# Airflow mode byte -> (face, feet, windshield).
_AIRFLOW_VENTS = {
    0x00: (False, False, False),
    0x04: (True, False, False),
    0x84: (True, False, False),
    0x08: (True, True, False),
    0x88: (True, True, False),
    0x0C: (False, True, False),
    0x8C: (False, True, False),
    0x10: (False, True, True),
    0x34: (False, False, True),
}

# Climate command -> (control frame attribute, method name, requires system on).
_COMMANDS = {
    ClimateEvent.TURN_OFF_CMD: ("_system_control", "turn_off", False),
    ClimateEvent.TOGGLE_AUTO_CMD: ("_system_control", "toggle_auto", False),
    ClimateEvent.TOGGLE_AC_CMD: ("_system_control", "toggle_ac", False),
    ClimateEvent.TOGGLE_DUAL_CMD: ("_system_control", "toggle_dual", False),
    ClimateEvent.TOGGLE_DEFOG_CMD: ("_system_control", "toggle_defog", False),
    ClimateEvent.INC_FAN_SPEED_CMD: ("_fan_control", "inc_fan_speed", False),
    ClimateEvent.DEC_FAN_SPEED_CMD: ("_fan_control", "dec_fan_speed", False),
    ClimateEvent.TOGGLE_RECIRCULATE_CMD: ("_fan_control", "toggle_recirculate", False),
    ClimateEvent.CYCLE_AIRFLOW_MODE_CMD: ("_system_control", "cycle_mode", False),
    ClimateEvent.INC_DRIVER_TEMP_CMD: ("_system_control", "inc_driver_temp", True),
    ClimateEvent.DEC_DRIVER_TEMP_CMD: ("_system_control", "dec_driver_temp", True),
    ClimateEvent.INC_PASSENGER_TEMP_CMD: ("_system_control", "inc_passenger_temp", True),
    ClimateEvent.DEC_PASSENGER_TEMP_CMD: ("_system_control", "dec_passenger_temp", True),
}


class Climate(Node):
    """Tracks climate state from vehicle frames and drives the control frames."""

    def __init__(self, tick_ms: int = 0, clock: Clock | None = None) -> None:
        self._clock = clock if clock is not None else Clock()
        self._startup = 0
        self._state_ticker = Ticker(tick_ms, tick_ms == 0, self._clock)
        self._control_ticker = Ticker(CONTROL_INIT_TICK, False, self._clock)
        self._control_init = False
        self._temp_state = ClimateTempState()
        self._airflow_state = ClimateAirflowState()
        self._system_state = ClimateSystemState()
        self._system_control = ClimateSystemControlFrame()
        self._fan_control = ClimateFanControlFrame()

    def handle(self, msg) -> list:
        """Update state from vehicle frames and apply climate commands."""
        out: list = []
        kind = message_type(msg)
        if kind is MessageType.CAN_FRAME:
            out.extend(self._handle_system_frame(msg))
            out.extend(self._handle_temp_frame(msg))
        elif kind is MessageType.EVENT:
            if msg.subsystem == SubSystem.CONTROLLER:
                out.extend(self._handle_controller_event(msg))
            elif msg.subsystem == SubSystem.CLIMATE:
                out.extend(self._handle_climate_event(msg))
        return out

    def _handle_temp_frame(self, frame: CANFrame) -> list:
        if frame.id != TEMP_FRAME_ID or frame.size < 8:
            return []
        data = frame.data
        changed = self._temp_state.update(
            driver_temp=data[4],
            passenger_temp=data[5],
            outside_temp=data[7],
            units=Units.METRIC if data[3] == _METRIC_MARKER else Units.US,
        )
        return [copy.deepcopy(self._temp_state)] if changed else []

    def _handle_system_frame(self, frame: CANFrame) -> list:
        if frame.id != SYSTEM_FRAME_ID or frame.size < 8:
            return []
        data = frame.data
        fan_speed = min(((data[2] & 0x0F) + 1) // 2, _MAX_FAN_SPEED)
        airflow_changed = self._airflow_state.update(
            fan_speed=fan_speed,
            recirculate=get_bit(data, 3, 4),
        )
        vents = _AIRFLOW_VENTS.get(data[1])
        if vents is not None:
            face, feet, windshield = vents
            airflow_changed |= self._airflow_state.update(
                face=face, feet=feet, windshield=windshield
            )

        if self._airflow_state.windshield:
            mode = ClimateSystemMode.DEFOG
        elif get_bit(data, 0, 7):
            mode = ClimateSystemMode.OFF
        elif get_bit(data, 0, 0):
            mode = ClimateSystemMode.AUTO
        else:
            mode = ClimateSystemMode.MANUAL
        # A mode change alone does not trigger a system state event; only
        # A/C and dual zone changes do.
        self._system_state.update(mode=mode)
        dual = not get_bit(data, 3, 7) and self._system_state.mode != ClimateSystemMode.OFF
        system_changed = self._system_state.update(ac=get_bit(data, 0, 3), dual=dual)

        out: list = []
        if system_changed:
            out.append(copy.deepcopy(self._system_state))
        if airflow_changed:
            out.append(copy.deepcopy(self._airflow_state))
        return out

    def _handle_controller_event(self, event: Event) -> list:
        out: list = []
        if RequestCommand.match(event, SubSystem.CLIMATE, ClimateEvent.TEMP_STATE):
            out.append(copy.deepcopy(self._temp_state))
        if RequestCommand.match(event, SubSystem.CLIMATE, ClimateEvent.SYSTEM_STATE):
            out.append(copy.deepcopy(self._system_state))
        if RequestCommand.match(event, SubSystem.CLIMATE, ClimateEvent.AIRFLOW_STATE):
            out.append(copy.deepcopy(self._airflow_state))
        return out

    def _handle_climate_event(self, event: Event) -> list:
        command = _COMMANDS.get(event.id)
        if command is None:
            return []
        attr, method, requires_on = command
        if requires_on and self._system_state.mode == ClimateSystemMode.OFF:
            return []
        control = getattr(self, attr)
        getattr(control, method)()
        return [copy.deepcopy(control)]

    def _control_frames(self) -> list:
        return [copy.deepcopy(self._system_control), copy.deepcopy(self._fan_control)]

    def emit(self) -> list:
        """Emit control frames and periodic climate state events."""
        out: list = []
        now = self._clock.millis()
        if self._startup == 0:
            self._startup = now
        if not self._control_init and ((now - self._startup) & _U32) >= CONTROL_INIT_EXPIRE:
            self._system_control.ready()
            self._fan_control.ready()
            out.extend(self._control_frames())
            self._control_ticker.reset(CONTROL_FRAME_TICK)
            self._control_init = True

        if self._control_ticker.active():
            out.extend(self._control_frames())
            self._control_ticker.reset()

        if self._state_ticker.active():
            out.append(copy.deepcopy(self._temp_state))
            out.append(copy.deepcopy(self._system_state))
            out.append(copy.deepcopy(self._airflow_state))
            self._state_ticker.reset()
        return out