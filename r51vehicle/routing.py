"""Frame filtering and event routing rules used by the ECUs."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .core import CANFrame, Event, MessageType, SubSystem, message_type

BROADCAST_ADDRESS = 0xFF
DEFAULT_BRIDGE_ADDRESS = 0x18
DEFAULT_ROTARY_ENCODER_ID = 0x01

_PAIR_MASK = 0xFFFFFFFE
_EXACT_MASK = 0xFFFFFFFF


@dataclass(frozen=True)
class HardwareFilter:
    """An acceptance filter of a CAN controller: ID bits under ``mask`` must equal ``value``."""

    mask: int
    value: int


def vehicle_read_filter(frame: CANFrame) -> bool:
    """Accept climate, settings, tire pressure and IPDM state frames."""
    frame_id = frame.id
    return (
        (frame_id & _PAIR_MASK) == 0x54A
        or (frame_id & _PAIR_MASK) == 0x72E
        or frame_id == 0x385
        or frame_id == 0x625
    )


def vehicle_write_filter(frame: CANFrame) -> bool:
    """Accept climate and settings control frames."""
    frame_id = frame.id
    return (frame_id & _PAIR_MASK) == 0x540 or (frame_id & _PAIR_MASK) == 0x71E


def vehicle_hardware_filters() -> tuple[HardwareFilter, ...]:
    """Controller filters that pass the same vehicle frames as the read filter."""
    return (
        # Climate and settings frames.
        HardwareFilter(_PAIR_MASK, 0x54A),
        HardwareFilter(_PAIR_MASK, 0x72E),
        # BCM tire and IPDM power frames.
        HardwareFilter(_EXACT_MASK, 0x385),
        HardwareFilter(_EXACT_MASK, 0x625),
    )


def hardware_accepts(filters: Iterable[HardwareFilter], frame_id: int) -> bool:
    """Return True if any filter passes ``frame_id``.

    An empty filter set is promiscuous and passes everything.
    """
    filters = tuple(filters)
    if not filters:
        return True
    return any((frame_id & f.mask) == (f.value & f.mask) for f in filters)


def _is_bus_message(kind: MessageType) -> bool:
    return kind in (MessageType.CAN_FRAME, MessageType.J1939_MESSAGE)


def bridge_forward(msg) -> bool:
    """Bridge: forward CAN frames, J1939 messages and events to the I/O core."""
    kind = message_type(msg)
    return _is_bus_message(kind) or kind is MessageType.EVENT


def controller_forward(msg) -> bool:
    """Controller: forward only CAN frames and J1939 messages to the I/O core."""
    return _is_bus_message(message_type(msg))


def _is_bluetooth_event(event: Event, rotary_encoder_id: int) -> bool:
    subsystem = event.subsystem
    if subsystem == SubSystem.BLUETOOTH:
        return event.id >= 0x10
    if subsystem == SubSystem.KEYPAD:
        return event.data[0] == rotary_encoder_id
    if subsystem in (SubSystem.IPDM, SubSystem.BCM, SubSystem.CLIMATE, SubSystem.POWER):
        return event.id < 0x10
    return False


def standalone_forward(msg, rotary_encoder_id: int = DEFAULT_ROTARY_ENCODER_ID) -> bool:
    """Standalone: forward bus messages and the events sent over BLE serial."""
    kind = message_type(msg)
    if _is_bus_message(kind):
        return True
    return kind is MessageType.EVENT and _is_bluetooth_event(msg, rotary_encoder_id)


def controller_route(event: Event, bridge_address: int = DEFAULT_BRIDGE_ADDRESS) -> int | None:
    """Return the J1939 address to send ``event`` to, or None to drop it.

    Vehicle and Bluetooth events go to the bridge; other state events are broadcast.
    """
    if 0x10 <= event.subsystem <= 0x1F or event.subsystem == SubSystem.BLUETOOTH:
        return bridge_address
    if (event.id & 0xF0) == 0x00:
        return BROADCAST_ADDRESS
    return None