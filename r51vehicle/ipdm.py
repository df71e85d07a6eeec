"""Intelligent power distribution module state tracking."""

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
    get_bit,
    message_type,
    set_bit,
)

IPDM_FRAME_ID = 0x625

# (source byte, source bit, state bit)
_POWER_BITS = (
    (1, 4, 0),  # high beams
    (1, 5, 1),  # low beams
    (1, 6, 2),  # running lights
    (1, 3, 3),  # fog lights
    (0, 0, 6),  # defrost heaters
    (1, 7, 7),  # a/c compressor
)


class IPDMEvent(IntEnum):
    POWER_STATE = 0x00


class IPDM(Node):
    """Tracks IPDM power state reported in the 0x625 CAN frame."""

    def __init__(self, tick_ms: int = 0, clock: Clock | None = None) -> None:
        self._event = Event(SubSystem.IPDM, IPDMEvent.POWER_STATE, (0x00,))
        self._ticker = Ticker(tick_ms, tick_ms == 0, clock)

    def handle(self, msg) -> list:
        """Handle 0x625 frames and state requests."""
        kind = message_type(msg)
        if kind is MessageType.CAN_FRAME:
            return self._handle_frame(msg)
        if kind is MessageType.EVENT:
            return self._handle_event(msg)
        return []

    def _handle_frame(self, frame: CANFrame) -> list:
        if frame.id != IPDM_FRAME_ID or frame.size < 6:
            return []
        state = bytearray(1)
        for offset, bit, target in _POWER_BITS:
            set_bit(state, 0, target, get_bit(frame.data, offset, bit))
        if state[0] == self._event.data[0]:
            return []
        self._event.data[0] = state[0]
        return [self._yield_event()]

    def _handle_event(self, event: Event) -> list:
        if RequestCommand.match(event, SubSystem.IPDM, IPDMEvent.POWER_STATE):
            return [self._yield_event()]
        return []

    def emit(self) -> list:
        """Emit the power state on tick."""
        if self._ticker.active():
            return [self._yield_event()]
        return []

    def _yield_event(self) -> Event:
        self._ticker.reset()
        return copy.deepcopy(self._event)