"""Body control settings node: reads and changes BCM settings over CAN."""

from __future__ import annotations

import copy
from enum import IntEnum

from .core import (
    CANFrame,
    Clock,
    Event,
    MessageType,
    Node,
    RequestCommand,
    SubSystem,
    get_bit,
    message_type,
    set_bit,
)
from .settings_sequence import (
    SequenceState,
    SettingsFrameId,
    SettingsInit,
    SettingsReset,
    SettingsRetrieve,
    SettingsSequence,
    SettingsUpdate,
    response_id,
)


class SettingsEvent(IntEnum):
    STATE = 0x00

    TOGGLE_AUTO_INTERIOR_ILLUM_CMD = 0x10
    TOGGLE_SLIDE_DRIVER_SEAT_CMD = 0x11
    TOGGLE_SPEED_SENSING_WIPER_CMD = 0x12
    NEXT_AUTO_HEADLIGHT_SENS_CMD = 0x13
    PREV_AUTO_HEADLIGHT_SENS_CMD = 0x14
    NEXT_AUTO_HEADLIGHT_OFF_DELAY_CMD = 0x15
    PREV_AUTO_HEADLIGHT_OFF_DELAY_CMD = 0x16
    TOGGLE_SELECTIVE_DOOR_UNLOCK_CMD = 0x17
    NEXT_AUTO_RELOCK_TIME_CMD = 0x18
    PREV_AUTO_RELOCK_TIME_CMD = 0x19
    TOGGLE_REMOTE_KEY_RESP_HORN_CMD = 0x1A
    NEXT_REMOTE_KEY_RESP_LIGHTS_CMD = 0x1B
    PREV_REMOTE_KEY_RESP_LIGHTS_CMD = 0x1C
    FACTORY_RESET_CMD = 0x1D


_MIN_FRAME_SIZE = 8

# Incoming BCM encodings -> our representation.
_BCM_RELOCK = {0x00: 1, 0x01: 0, 0x02: 5}
_BCM_HL_SENS = {0x03: 0, 0x00: 1, 0x01: 2, 0x02: 3}
_BCM_HL_DELAY = {0x01: 0, 0x02: 2, 0x00: 3, 0x03: 4, 0x04: 6, 0x05: 8, 0x06: 10, 0x07: 12}

# Our representation -> value sent to the BCM.
_HL_SENS_PAYLOAD = {0: 0x03, 1: 0x00, 2: 0x01, 3: 0x02}
_NEXT_HL_DELAY = {0: 0x02, 2: 0x00, 3: 0x03, 4: 0x04, 6: 0x05, 8: 0x06, 10: 0x07}
_PREV_HL_DELAY = {2: 0x01, 3: 0x02, 4: 0x00, 6: 0x03, 8: 0x04, 10: 0x05, 12: 0x06}
_NEXT_RELOCK = {0: 0x00, 1: 0x02}
_PREV_RELOCK = {1: 0x01, 5: 0x00}


class _SettingsState(Event):
    """The SETTINGS STATE event with typed fields."""

    def __init__(self) -> None:
        super().__init__(SubSystem.SETTINGS, SettingsEvent.STATE, (0x00, 0x00, 0x00, 0x00))

    @property
    def auto_interior_illumination(self) -> bool:
        return get_bit(self.data, 0, 0)

    @auto_interior_illumination.setter
    def auto_interior_illumination(self, value: bool) -> None:
        set_bit(self.data, 0, 0, value)

    @property
    def slide_driver_seat_back_on_exit(self) -> bool:
        return get_bit(self.data, 0, 1)

    @slide_driver_seat_back_on_exit.setter
    def slide_driver_seat_back_on_exit(self, value: bool) -> None:
        set_bit(self.data, 0, 1, value)

    @property
    def speed_sensing_wiper_interval(self) -> bool:
        return get_bit(self.data, 0, 2)

    @speed_sensing_wiper_interval.setter
    def speed_sensing_wiper_interval(self, value: bool) -> None:
        set_bit(self.data, 0, 2, value)

    @property
    def auto_headlight_sensitivity(self) -> int:
        return self.data[1] & 0x03

    @auto_headlight_sensitivity.setter
    def auto_headlight_sensitivity(self, value: int) -> None:
        value = min(value, 3)
        self.data[1] = (self.data[1] & 0xFC) | (value & 0x03)

    @property
    def auto_headlight_off_delay(self) -> int:
        return (self.data[1] >> 4) & 0x0F

    @auto_headlight_off_delay.setter
    def auto_headlight_off_delay(self, value: int) -> None:
        self.data[1] = (self.data[1] & 0x0F) | ((value << 4) & 0xF0)

    @property
    def selective_door_unlock(self) -> bool:
        return get_bit(self.data, 2, 0)

    @selective_door_unlock.setter
    def selective_door_unlock(self, value: bool) -> None:
        set_bit(self.data, 2, 0, value)

    @property
    def auto_relock_time(self) -> int:
        return (self.data[2] >> 4) & 0x0F

    @auto_relock_time.setter
    def auto_relock_time(self, value: int) -> None:
        self.data[2] = (self.data[2] & 0x0F) | ((value << 4) & 0xF0)

    @property
    def remote_key_response_horn(self) -> bool:
        return get_bit(self.data, 3, 0)

    @remote_key_response_horn.setter
    def remote_key_response_horn(self, value: bool) -> None:
        set_bit(self.data, 3, 0, value)

    @property
    def remote_key_response_lights(self) -> int:
        return (self.data[3] >> 2) & 0x03

    @remote_key_response_lights.setter
    def remote_key_response_lights(self, value: int) -> None:
        self.data[3] = (self.data[3] & 0xF3) | ((value & 0x03) << 2)


class Settings(Node):
    """Retrieves and updates body control settings stored in the BCM."""

    def __init__(self, clock: Clock | None = None) -> None:
        clock = clock if clock is not None else Clock()
        e, f = SettingsFrameId.E, SettingsFrameId.F
        self._init_e = SettingsInit(e, clock)
        self._retrieve_e = SettingsRetrieve(e, clock)
        self._update_e = SettingsUpdate(e, clock)
        self._reset_e = SettingsReset(e, clock)
        self._init_f = SettingsInit(f, clock)
        self._retrieve_f = SettingsRetrieve(f, clock)
        self._update_f = SettingsUpdate(f, clock)
        self._reset_f = SettingsReset(f, clock)
        self._available = False
        self._event = _SettingsState()
        self._commands = {
            SettingsEvent.TOGGLE_AUTO_INTERIOR_ILLUM_CMD: self._toggle_auto_interior_illumination,
            SettingsEvent.TOGGLE_SLIDE_DRIVER_SEAT_CMD: self._toggle_slide_driver_seat,
            SettingsEvent.TOGGLE_SPEED_SENSING_WIPER_CMD: self._toggle_speed_sensing_wiper,
            SettingsEvent.NEXT_AUTO_HEADLIGHT_SENS_CMD: self._next_auto_headlight_sensitivity,
            SettingsEvent.PREV_AUTO_HEADLIGHT_SENS_CMD: self._prev_auto_headlight_sensitivity,
            SettingsEvent.NEXT_AUTO_HEADLIGHT_OFF_DELAY_CMD: self._next_auto_headlight_off_delay,
            SettingsEvent.PREV_AUTO_HEADLIGHT_OFF_DELAY_CMD: self._prev_auto_headlight_off_delay,
            SettingsEvent.TOGGLE_SELECTIVE_DOOR_UNLOCK_CMD: self._toggle_selective_door_unlock,
            SettingsEvent.NEXT_AUTO_RELOCK_TIME_CMD: self._next_auto_relock_time,
            SettingsEvent.PREV_AUTO_RELOCK_TIME_CMD: self._prev_auto_relock_time,
            SettingsEvent.TOGGLE_REMOTE_KEY_RESP_HORN_CMD: self._toggle_remote_key_horn,
            SettingsEvent.NEXT_REMOTE_KEY_RESP_LIGHTS_CMD: self._next_remote_key_lights,
            SettingsEvent.PREV_REMOTE_KEY_RESP_LIGHTS_CMD: self._prev_remote_key_lights,
            SettingsEvent.FACTORY_RESET_CMD: self._reset_to_default,
        }

    @property
    def _sequences_e(self) -> tuple[SettingsSequence, ...]:
        return (self._init_e, self._retrieve_e, self._update_e, self._reset_e)

    @property
    def _sequences_f(self) -> tuple[SettingsSequence, ...]:
        return (self._init_f, self._retrieve_f, self._update_f, self._reset_f)

    def init(self) -> list:
        """Start the init exchange with the BCM."""
        self._init_e.trigger()
        self._init_f.trigger()
        return []

    def handle(self, msg) -> list:
        """Handle BCM response frames and settings commands. Emits nothing."""
        kind = message_type(msg)
        if kind is MessageType.CAN_FRAME:
            self._handle_frame(msg)
        elif kind is MessageType.EVENT:
            self._handle_event(msg)
        return []

    def emit(self) -> list:
        """Return pending request frames and, when idle, a changed settings state."""
        out: list = []
        for sequence in (*self._sequences_e, *self._sequences_f):
            frame = sequence.read()
            if frame is not None:
                out.append(frame)
        if self._ready() and self._available:
            self._available = False
            out.append(copy.deepcopy(self._event))
        return out

    def _handle_event(self, event: Event) -> None:
        if RequestCommand.match(event, SubSystem.SETTINGS, SettingsEvent.STATE):
            self._request_current()
        if event.subsystem != SubSystem.SETTINGS:
            return
        command = self._commands.get(event.id)
        if command is not None:
            command()

    def _handle_frame(self, frame: CANFrame) -> None:
        if frame.size < _MIN_FRAME_SIZE:
            return
        if frame.id == response_id(SettingsFrameId.E):
            sequences = self._sequences_e
        elif frame.id == response_id(SettingsFrameId.F):
            sequences = self._sequences_f
        else:
            return
        for sequence in sequences:
            sequence.handle(frame)
        self._handle_state(frame.data)

    def _handle_state(self, data) -> None:
        handlers = {
            0x05: self._handle_state_05,
            0x10: self._handle_state_10,
            0x21: self._handle_state_21,
            0x22: self._handle_state_22,
        }
        handler = handlers.get(data[0])
        if handler is not None:
            handler(data)
            self._available = True

    def _handle_state_05(self, data) -> None:
        self._event.slide_driver_seat_back_on_exit = get_bit(data, 3, 0)

    def _handle_state_10(self, data) -> None:
        self._event.auto_interior_illumination = get_bit(data, 4, 5)
        self._event.selective_door_unlock = get_bit(data, 4, 7)
        self._event.remote_key_response_horn = get_bit(data, 7, 3)

    def _handle_state_21(self, data) -> None:
        # A zero value from the BCM usually denotes its default setting.
        self._event.remote_key_response_lights = (data[1] >> 6) & 0x03
        relock = _BCM_RELOCK.get((data[1] >> 4) & 0x03)
        if relock is not None:
            self._event.auto_relock_time = relock
        self._event.auto_headlight_sensitivity = _BCM_HL_SENS[(data[2] >> 2) & 0x03]
        delay_code = ((data[2] & 0x01) << 2) | ((data[3] >> 6) & 0x03)
        self._event.auto_headlight_off_delay = _BCM_HL_DELAY[delay_code]

    def _handle_state_22(self, data) -> None:
        self._event.speed_sensing_wiper_interval = not get_bit(data, 1, 7)

    def _ready_e(self) -> bool:
        return all(sequence.ready() for sequence in self._sequences_e)

    def _ready_f(self) -> bool:
        return all(sequence.ready() for sequence in self._sequences_f)

    def _ready(self) -> bool:
        return self._ready_e() and self._ready_f()

    def _update_e_setting(self, state: SequenceState, value: int) -> bool:
        if not self._ready_e():
            return False
        self._update_e.set_payload(state, value)
        return self._update_e.trigger()

    def _update_e_from_table(self, state: SequenceState, table: dict, current: int) -> bool:
        if not self._ready_e():
            return False
        value = table.get(current)
        if value is None:
            return False
        return self._update_e_setting(state, value)

    def _request_current(self) -> bool:
        if not self._ready():
            return False
        return self._retrieve_e.trigger() and self._retrieve_f.trigger()

    def _reset_to_default(self) -> bool:
        if not self._ready():
            return False
        return self._reset_e.trigger() and self._reset_f.trigger()

    def _toggle_auto_interior_illumination(self) -> bool:
        return self._update_e_setting(
            SequenceState.AUTO_INTERIOR_ILLUM, int(not self._event.auto_interior_illumination)
        )

    def _trigger_auto_headlight_sensitivity(self, value: int) -> bool:
        if not self._ready_e() or not 0 <= value <= 3:
            return False
        return self._update_e_setting(SequenceState.AUTO_HL_SENS, _HL_SENS_PAYLOAD[value])

    def _next_auto_headlight_sensitivity(self) -> bool:
        return self._trigger_auto_headlight_sensitivity(self._event.auto_headlight_sensitivity + 1)

    def _prev_auto_headlight_sensitivity(self) -> bool:
        return self._trigger_auto_headlight_sensitivity(self._event.auto_headlight_sensitivity - 1)

    def _next_auto_headlight_off_delay(self) -> bool:
        return self._update_e_from_table(
            SequenceState.AUTO_HL_DELAY, _NEXT_HL_DELAY, self._event.auto_headlight_off_delay
        )

    def _prev_auto_headlight_off_delay(self) -> bool:
        return self._update_e_from_table(
            SequenceState.AUTO_HL_DELAY, _PREV_HL_DELAY, self._event.auto_headlight_off_delay
        )

    def _toggle_speed_sensing_wiper(self) -> bool:
        # The BCM stores this setting inverted, so the current value toggles it.
        return self._update_e_setting(
            SequenceState.SPEED_SENS_WIPER, int(self._event.speed_sensing_wiper_interval)
        )

    def _toggle_remote_key_horn(self) -> bool:
        return self._update_e_setting(
            SequenceState.REMOTE_KEY_HORN, int(not self._event.remote_key_response_horn)
        )

    def _trigger_remote_key_lights(self, value: int) -> bool:
        if not self._ready_e() or not 0 <= value <= 3:
            return False
        return self._update_e_setting(SequenceState.REMOTE_KEY_LIGHT, value)

    def _next_remote_key_lights(self) -> bool:
        return self._trigger_remote_key_lights(self._event.remote_key_response_lights + 1)

    def _prev_remote_key_lights(self) -> bool:
        return self._trigger_remote_key_lights(self._event.remote_key_response_lights - 1)

    def _next_auto_relock_time(self) -> bool:
        return self._update_e_from_table(
            SequenceState.AUTO_RELOCK_TIME, _NEXT_RELOCK, self._event.auto_relock_time
        )

    def _prev_auto_relock_time(self) -> bool:
        return self._update_e_from_table(
            SequenceState.AUTO_RELOCK_TIME, _PREV_RELOCK, self._event.auto_relock_time
        )

    def _toggle_selective_door_unlock(self) -> bool:
        return self._update_e_setting(
            SequenceState.SELECT_DOOR_UNLOCK, int(not self._event.selective_door_unlock)
        )

    def _toggle_slide_driver_seat(self) -> bool:
        if not self._ready_f():
            return False
        self._update_f.set_payload(
            SequenceState.SLIDE_DRIVER_SEAT,
            int(not self._event.slide_driver_seat_back_on_exit),
        )
        return self._update_f.trigger()