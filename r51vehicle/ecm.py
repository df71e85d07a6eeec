"""Engine control module coolant temperature tracking."""

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
    Ticker,
    message_type,
)

ENGINE_TEMP_FRAME_ID = 0x551


class ECMEvent(IntEnum):
    ENGINE_TEMP_STATE = 0x00


class EngineTempState(Node):
    """Tracks coolant temperature reported in the 0x551 CAN frame."""

    def __init__(self, tick_ms: int = 0, clock: Clock | None = None) -> None:
        self._event = Event(SubSystem.ECM, ECMEvent.ENGINE_TEMP_STATE, (0x00,))
        self._ticker = Ticker(tick_ms, tick_ms == 0, clock)

    def handle(self, msg) -> list:
        """Handle 0x551 frames and state requests."""
        kind = message_type(msg)
        if kind is MessageType.CAN_FRAME:
            return self._handle_frame(msg)
        if kind is MessageType.EVENT:
            return self._handle_event(msg)
        return []

    def _handle_frame(self, frame: CANFrame) -> list:
        if frame.id != ENGINE_TEMP_FRAME_ID or frame.size < 1:
            return []
        # The ECM value and the event share the same -40 offset.
        value = frame.data[0]
        if value == self._event.data[0]:
            return []
        self._event.data[0] = value
        return [self._yield_event()]

    def _handle_event(self, event: Event) -> list:
        if RequestCommand.match(event, SubSystem.ECM, ECMEvent.ENGINE_TEMP_STATE):
            return [self._yield_event()]
        return []

    def emit(self) -> list:
        """Emit the temperature state on tick."""
        if self._ticker.active():
            return [self._yield_event()]
        return []

    def _yield_event(self) -> Event:
        self._ticker.reset()
        return copy.deepcopy(self._event)