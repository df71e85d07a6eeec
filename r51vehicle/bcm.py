"""Body control module nodes: dash illumination, rear defrost and tire pressure."""

from __future__ import annotations

import copy
from enum import IntEnum

from .core import (
    CANFrame,
    Clock,
    ConfigStore,
    Event,
    MessageType,
    Node,
    RequestCommand,
    SubSystem,
    Ticker,
    get_bit,
    message_type,
)
from .ipdm import IPDMEvent
from .momentary_output import GPIO, MomentaryOutput, OutputMode

TIRE_PRESSURE_FRAME_ID = 0x385
_TIRE_COUNT = 4


class BCMEvent(IntEnum):
    ILLUM_STATE = 0x00
    TIRE_PRESSURE_STATE = 0x01

    TOGGLE_DEFROST_CMD = 0x10
    TIRE_SWAP_CMD = 0x11


class IllumState(Event):
    """Dash illumination state event."""

    def __init__(self) -> None:
        super().__init__(SubSystem.BCM, BCMEvent.ILLUM_STATE, (0x00,))

    @property
    def illum(self) -> bool:
        return self.data[0] != 0x00

    @illum.setter
    def illum(self, value: bool) -> None:
        self.data[0] = int(bool(value))


class Illum(Node):
    """Derives dash illumination from the IPDM headlamp state.

    The dash lights are on whenever the high or low beams are powered.
    """

    def __init__(self) -> None:
        self._state = IllumState()

    def handle(self, msg) -> list:
        """Handle IPDM power events and illumination state requests."""
        if message_type(msg) is not MessageType.EVENT:
            return []
        if RequestCommand.match(msg, SubSystem.BCM, BCMEvent.ILLUM_STATE):
            return [copy.deepcopy(self._state)]
        if msg.subsystem == SubSystem.IPDM and msg.id == IPDMEvent.POWER_STATE:
            illum = get_bit(msg.data, 0, 0) or get_bit(msg.data, 0, 1)
            if self._state.illum != illum:
                self._state.illum = illum
                return [copy.deepcopy(self._state)]
        return []


class Defrost(Node):
    """Drives the rear defrost button input of the BCM.

    The pin is momentarily drained low to simulate a button press.
    """

    def __init__(
        self,
        output_pin: int,
        output_ms: int,
        gpio: GPIO,
        clock: Clock | None = None,
    ) -> None:
        self._output = MomentaryOutput(
            output_pin,
            output_ms,
            gpio,
            cooldown_ms=None,
            mode=OutputMode.MOMENTARILY_DRAIN,
            clock=clock,
        )

    def begin(self) -> None:
        """Initialize the output pin."""
        self._output.init()

    def handle(self, msg) -> list:
        """Trigger the defrost output on a toggle command."""
        if (
            message_type(msg) is MessageType.EVENT
            and msg.subsystem == SubSystem.BCM
            and msg.id == BCMEvent.TOGGLE_DEFROST_CMD
        ):
            self._output.trigger()
        return []

    def emit(self) -> list:
        """Update the output pin; emits nothing."""
        self._output.update()
        return []


class TirePressure(Node):
    """Tracks tire pressures reported in the 0x385 CAN frame."""

    def __init__(
        self,
        config: ConfigStore | None = None,
        tick_ms: int = 0,
        clock: Clock | None = None,
    ) -> None:
        self._config = config
        self._event = Event(SubSystem.BCM, BCMEvent.TIRE_PRESSURE_STATE, (0x00,) * _TIRE_COUNT)
        self._ticker = Ticker(tick_ms, tick_ms == 0, clock)
        self._map = list(range(_TIRE_COUNT))
        if config is not None:
            stored = config.load_tire_map()
            if stored is not None:
                self._map = list(stored)

    def handle(self, msg) -> list:
        """Handle pressure frames, state requests and tire swap commands."""
        kind = message_type(msg)
        if kind is MessageType.CAN_FRAME:
            return self._handle_frame(msg)
        if kind is MessageType.EVENT:
            return self._handle_event(msg)
        return []

    def _handle_frame(self, frame: CANFrame) -> list:
        if frame.id != TIRE_PRESSURE_FRAME_ID or frame.size != 8:
            return []
        changed = False
        for position, tire in enumerate(self._map):
            value = frame.data[2 + tire] if get_bit(frame.data, 7, 7 - tire) else 0
            if self._event.data[position] != value:
                self._event.data[position] = value
                changed = True
        return [self._yield_event()] if changed else []

    def _handle_event(self, event: Event) -> list:
        out: list = []
        if RequestCommand.match(event, SubSystem.BCM, BCMEvent.TIRE_PRESSURE_STATE):
            out.append(self._yield_event())
        if event.subsystem != SubSystem.BCM or event.id != BCMEvent.TIRE_SWAP_CMD:
            return out
        out.extend(self._swap_position(event.data[0] & 0x0F, (event.data[0] & 0xF0) >> 4))
        if self._config is not None:
            self._config.save_tire_map(list(self._map))
        return out

    def _swap_position(self, a: int, b: int) -> list:
        if a >= _TIRE_COUNT or b >= _TIRE_COUNT or a == b:
            return []
        self._map[a], self._map[b] = self._map[b], self._map[a]
        data = self._event.data
        data[a], data[b] = data[b], data[a]
        return [self._yield_event()]

    def emit(self) -> list:
        """Emit the pressure state on tick."""
        if self._ticker.active():
            return [self._yield_event()]
        return []

    def _yield_event(self) -> Event:
        self._ticker.reset()
        return copy.deepcopy(self._event)