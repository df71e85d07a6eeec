"""Core message, timing and storage primitives shared by the vehicle nodes."""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import IntEnum

EVENT_DATA_SIZE = 6
CAN_MAX_DATA = 8
REQUEST_CMD = 0x01
_U32 = 0xFFFFFFFF


class Units(IntEnum):
    """Measurement units."""

    METRIC = 0
    US = 1


class SubSystem(IntEnum):
    """Subsystem an event belongs to. Vehicle subsystems live in 0x10-0x1F."""

    CONTROLLER = 0x00
    POWER = 0x01
    KEYPAD = 0x02
    SCREEN = 0x03
    AUDIO = 0x04
    BLUETOOTH = 0x05
    ECM = 0x10
    IPDM = 0x11
    BCM = 0x12
    CLIMATE = 0x13
    SETTINGS = 0x14


class MessageType(IntEnum):
    """Kind of message passed between nodes."""

    EMPTY = 0
    EVENT = 1
    CAN_FRAME = 2
    J1939_CLAIM = 3
    J1939_MESSAGE = 4


def get_bit(data, offset: int, bit: int) -> bool:
    """Return the value of ``bit`` in byte ``offset`` of ``data``."""
    return bool((data[offset] >> bit) & 0x01)


def set_bit(data: bytearray, offset: int, bit: int, value: bool) -> None:
    """Set or clear ``bit`` in byte ``offset`` of ``data``."""
    if value:
        data[offset] |= 1 << bit
    else:
        data[offset] &= ~(1 << bit) & 0xFF


def flip_bit(data: bytearray, offset: int, bit: int) -> None:
    """Invert ``bit`` in byte ``offset`` of ``data``."""
    data[offset] ^= 1 << bit


class Event:
    """A system event: subsystem, event id and a fixed-size payload.

    Payload bytes not given are filled with 0xFF.
    """

    def __init__(self, subsystem: int, event_id: int, data: Iterable[int] = ()) -> None:
        payload = bytes(data)
        if len(payload) > EVENT_DATA_SIZE:
            raise ValueError(f"event payload exceeds {EVENT_DATA_SIZE} bytes")
        self.subsystem = int(subsystem)
        self.id = int(event_id)
        self.data = bytearray(payload) + bytearray([0xFF] * (EVENT_DATA_SIZE - len(payload)))

    def copy(self) -> Event:
        """Return an independent plain copy of this event."""
        return Event(self.subsystem, self.id, self.data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Event):
            return NotImplemented
        return (self.subsystem, self.id, self.data) == (other.subsystem, other.id, other.data)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Event({self.subsystem:#04x}, {self.id:#04x}, {self.data.hex(':')})"


class CANFrame:
    """A CAN 2.0 frame with up to eight data bytes."""

    def __init__(self, frame_id: int = 0, data: Iterable[int] = b"", ext: bool = False) -> None:
        payload = bytearray(data)
        if len(payload) > CAN_MAX_DATA:
            raise ValueError(f"CAN frame payload exceeds {CAN_MAX_DATA} bytes")
        self.id = int(frame_id)
        self.ext = bool(ext)
        self.data = payload

    @property
    def size(self) -> int:
        return len(self.data)

    def resize(self, size: int) -> None:
        """Truncate or zero-extend the payload to ``size`` bytes."""
        if not 0 <= size <= CAN_MAX_DATA:
            raise ValueError(f"invalid CAN frame size {size}")
        if size < len(self.data):
            del self.data[size:]
        else:
            self.data.extend(bytes(size - len(self.data)))

    def copy(self) -> CANFrame:
        """Return an independent plain copy of this frame."""
        return CANFrame(self.id, self.data, self.ext)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CANFrame):
            return NotImplemented
        return (self.id, self.ext, self.data) == (other.id, other.ext, other.data)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"CANFrame({self.id:#x}, {self.data.hex(':')}, ext={self.ext})"


@dataclass
class J1939Message:
    """A J1939 message addressed by parameter group number."""

    pgn: int = 0
    source_address: int = 0xFF
    dest_address: int = 0xFF
    priority: int = 6
    data: bytearray = field(default_factory=bytearray)


def message_type(msg) -> MessageType:
    """Classify a message object passed between nodes."""
    if msg is None:
        return MessageType.EMPTY
    if isinstance(msg, Event):
        return MessageType.EVENT
    if isinstance(msg, CANFrame):
        return MessageType.CAN_FRAME
    if isinstance(msg, J1939Message):
        return MessageType.J1939_MESSAGE
    raise TypeError(f"not a message: {type(msg).__name__}")


class RequestCommand(Event):
    """Controller command asking a subsystem to broadcast a state event.

    An event id of 0xFF requests every state of the subsystem.
    """

    def __init__(self, subsystem: int, event_id: int = 0xFF) -> None:
        super().__init__(SubSystem.CONTROLLER, REQUEST_CMD, (int(subsystem), int(event_id)))

    @staticmethod
    def match(event: Event, subsystem: int, event_id: int) -> bool:
        """Return True if ``event`` requests state ``event_id`` of ``subsystem``."""
        return (
            event.subsystem == SubSystem.CONTROLLER
            and event.id == REQUEST_CMD
            and event.data[0] == int(subsystem)
            and event.data[1] in (int(event_id), 0xFF)
        )


class Clock:
    """Millisecond clock backed by the monotonic system timer."""

    def millis(self) -> int:
        return (time.monotonic_ns() // 1_000_000) & _U32

    def delay(self, ms: int) -> None:
        time.sleep(ms / 1000)


class FakeClock(Clock):
    """Manually driven clock for tests and simulation."""

    def __init__(self, ms: int = 0) -> None:
        self._now = ms

    def millis(self) -> int:
        return self._now & _U32

    def delay(self, ms: int) -> None:
        self.advance(ms)

    def set(self, ms: int) -> None:
        self._now = ms

    def advance(self, ms: int) -> None:
        self._now += ms


class Ticker:
    """Periodic timer that becomes active once its interval has elapsed."""

    def __init__(self, interval_ms: int, paused: bool = False, clock: Clock | None = None) -> None:
        self._clock = clock if clock is not None else Clock()
        self.interval_ms = interval_ms
        self.paused = paused
        self._last = self._clock.millis()

    def active(self) -> bool:
        if self.paused:
            return False
        return ((self._clock.millis() - self._last) & _U32) >= self.interval_ms

    def reset(self, interval_ms: int | None = None) -> None:
        """Restart the interval, optionally with a new length."""
        if interval_ms is not None:
            self.interval_ms = interval_ms
        self._last = self._clock.millis()


class ConfigStore(ABC):
    """Persistent storage for configuration values."""

    @abstractmethod
    def load_tire_map(self) -> list[int] | None:
        """Return the stored four-entry tire map, or None if unset."""

    @abstractmethod
    def save_tire_map(self, tire_map) -> bool:
        """Store a four-entry tire map. Return True when saved."""


class MemoryConfigStore(ConfigStore):
    """Config store kept in memory."""

    def __init__(self, tire_map=None) -> None:
        self._tire_map: list[int] | None = None
        if tire_map is not None:
            self.save_tire_map(tire_map)

    def load_tire_map(self) -> list[int] | None:
        return None if self._tire_map is None else list(self._tire_map)

    def save_tire_map(self, tire_map) -> bool:
        values = list(tire_map)
        if len(values) != 4:
            raise ValueError("tire map must have exactly 4 entries")
        self._tire_map = values
        return True


class Node:
    """A participant on the message bus.

    Each hook returns an iterable of messages to pass on.
    """

    def init(self) -> Iterable:
        return ()

    def handle(self, msg) -> Iterable:
        return ()

    def emit(self) -> Iterable:
        return ()