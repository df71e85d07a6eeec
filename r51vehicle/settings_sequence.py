"""Request/response sequences used to read and change BCM settings."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum

from .core import CANFrame, Clock

SEQUENCE_TIMEOUT_MS = 500
_U32 = 0xFFFFFFFF


class SettingsFrameId(IntEnum):
    """Request frame IDs used to talk to the BCM."""

    E = 0x71E
    F = 0x71F


class SequenceState(IntEnum):
    """Sequence states. Each state other than READY is a request on the bus."""

    READY = 0
    ENTER = 1
    EXIT = 2
    INIT_00 = 3
    INIT_20 = 4
    INIT_40 = 5
    INIT_60 = 6
    AUTO_INTERIOR_ILLUM = 7
    AUTO_HL_SENS = 8
    AUTO_HL_DELAY = 9
    SPEED_SENS_WIPER = 10
    REMOTE_KEY_HORN = 11
    REMOTE_KEY_LIGHT = 12
    AUTO_RELOCK_TIME = 13
    SELECT_DOOR_UNLOCK = 14
    SLIDE_DRIVER_SEAT = 15
    RETRIEVE_71E_10 = 16
    RETRIEVE_71E_2X = 17
    RETRIEVE_71F_05 = 18
    RESET = 19


S = SequenceState

# State -> (prefix bytes, fixed value byte or None to use the sequence value).
_REQUESTS = {
    S.ENTER: ((0x02, 0x10, 0xC0), 0xFF),
    S.EXIT: ((0x02, 0x10, 0x81), 0xFF),
    S.INIT_00: ((0x02, 0x3B, 0x00), 0xFF),
    S.INIT_20: ((0x02, 0x3B, 0x20), 0xFF),
    S.INIT_40: ((0x02, 0x3B, 0x40), 0xFF),
    S.INIT_60: ((0x02, 0x3B, 0x60), 0xFF),
    S.AUTO_INTERIOR_ILLUM: ((0x03, 0x3B, 0x10), None),
    S.AUTO_HL_SENS: ((0x03, 0x3B, 0x37), None),
    S.AUTO_HL_DELAY: ((0x03, 0x3B, 0x39), None),
    S.SPEED_SENS_WIPER: ((0x03, 0x3B, 0x47), None),
    S.REMOTE_KEY_HORN: ((0x03, 0x3B, 0x2A), None),
    S.REMOTE_KEY_LIGHT: ((0x03, 0x3B, 0x2E), None),
    S.AUTO_RELOCK_TIME: ((0x03, 0x3B, 0x2F), None),
    S.SELECT_DOOR_UNLOCK: ((0x03, 0x3B, 0x02), None),
    S.SLIDE_DRIVER_SEAT: ((0x03, 0x3B, 0x01), None),
    S.RETRIEVE_71E_10: ((0x02, 0x21, 0x01), 0xFF),
    S.RETRIEVE_71E_2X: ((0x30, 0x00, 0x0A), 0xFF),
    S.RETRIEVE_71F_05: ((0x02, 0x21, 0x01), 0xFF),
    S.RESET: ((0x03, 0x3B, 0x1F), 0x00),
}

# State -> accepted response prefixes.
_RESPONSES = {
    S.ENTER: ((0x02, 0x50, 0xC0),),
    S.EXIT: ((0x02, 0x50, 0x81),),
    S.INIT_00: ((0x06, 0x7B, 0x00),),
    S.INIT_20: ((0x06, 0x7B, 0x20),),
    S.INIT_40: ((0x06, 0x7B, 0x40),),
    S.INIT_60: ((0x06, 0x7B, 0x60),),
    S.AUTO_INTERIOR_ILLUM: ((0x02, 0x7B, 0x10),),
    S.AUTO_HL_SENS: ((0x02, 0x7B, 0x37),),
    S.AUTO_HL_DELAY: ((0x02, 0x7B, 0x39),),
    S.SPEED_SENS_WIPER: ((0x02, 0x7B, 0x47),),
    S.REMOTE_KEY_HORN: ((0x02, 0x7B, 0x2A),),
    S.REMOTE_KEY_LIGHT: ((0x02, 0x7B, 0x2E),),
    S.AUTO_RELOCK_TIME: ((0x02, 0x7B, 0x2F),),
    S.SELECT_DOOR_UNLOCK: ((0x02, 0x7B, 0x02),),
    S.SLIDE_DRIVER_SEAT: ((0x02, 0x7B, 0x01),),
    S.RETRIEVE_71E_10: ((0x10,),),
    S.RETRIEVE_71E_2X: ((0x21,), (0x22,)),
    S.RETRIEVE_71F_05: ((0x05,),),
    S.RESET: ((0x02, 0x7B, 0x1F),),
}


def response_id(request_id: int) -> int:
    """Return the ID of the BCM response frame for a request frame ID."""
    return (int(request_id) & ~0x010) | 0x020


def fill_request(frame_id: int, state: int, value: int = 0xFF) -> CANFrame | None:
    """Build the request frame sent when entering ``state``.

    Returns None for states that send nothing.
    """
    request = _REQUESTS.get(int(state))
    if request is None:
        return None
    prefix, fixed = request
    byte3 = fixed if fixed is not None else int(value) & 0xFF
    return CANFrame(frame_id, (*prefix, byte3, 0xFF, 0xFF, 0xFF, 0xFF))


def match_state(data, state: int) -> bool:
    """Return True if ``data`` is the expected response for ``state``."""
    prefixes = _RESPONSES.get(int(state), ())
    return any(tuple(data[: len(prefix)]) == prefix for prefix in prefixes)


class SettingsSequence(ABC):
    """A sequence of request frames, each advanced by the matching response.

    A sequence returns to READY when it completes or 500ms after it started.
    """

    def __init__(self, frame_id: SettingsFrameId, clock: Clock | None = None) -> None:
        self._request_id = int(frame_id)
        self._clock = clock if clock is not None else Clock()
        self._started = 0
        self._value = 0xFF
        self._state = int(S.READY)
        self._sent = False

    @property
    def request_id(self) -> int:
        return self._request_id

    @property
    def state(self) -> int:
        return self._state

    def trigger(self) -> bool:
        """Start the sequence. Return False if it is already running."""
        if self._state != S.READY:
            return False
        self._started = self._clock.millis()
        self._state = int(S.ENTER)
        self._sent = False
        return True

    def ready(self) -> bool:
        """Return True if the sequence is idle."""
        return self._state == S.READY

    def read(self) -> CANFrame | None:
        """Return the next request frame to send, if one is due."""
        if ((self._clock.millis() - self._started) & _U32) >= SEQUENCE_TIMEOUT_MS:
            self._state = int(S.READY)
            return None
        if self._state == S.READY or self._sent:
            return None
        self._sent = True
        return fill_request(self._request_id, self._state, self._value)

    def handle(self, frame: CANFrame) -> None:
        """Advance the sequence if ``frame`` is the expected response."""
        if frame.id != response_id(self._request_id):
            return
        if not match_state(frame.data, self._state):
            return
        next_state = int(self._next())
        if next_state != self._state:
            self._state = next_state
            self._sent = False

    def _set_value(self, value: int) -> None:
        self._value = int(value) & 0xFF

    def _next(self) -> int:
        if self._request_id == SettingsFrameId.E:
            return self._next_e()
        if self._request_id == SettingsFrameId.F:
            return self._next_f()
        return S.READY

    @abstractmethod
    def _next_e(self) -> int:
        """Next state for a sequence on the 0x71E frame."""

    @abstractmethod
    def _next_f(self) -> int:
        """Next state for a sequence on the 0x71F frame."""


class _MultiFrameRetrieve:
    """Tracks the two consecutive 0x71E continuation frames."""

    def __init__(self) -> None:
        self._second = False

    def after_first(self) -> int:
        self._second = False
        return S.RETRIEVE_71E_2X

    def after_continuation(self) -> int:
        if self._second:
            return S.EXIT
        self._second = True
        return S.RETRIEVE_71E_2X


class SettingsInit(SettingsSequence):
    """Initializes communication with the BCM."""

    _E = {
        S.ENTER: S.INIT_00,
        S.INIT_00: S.INIT_20,
        S.INIT_20: S.INIT_40,
        S.INIT_40: S.INIT_60,
        S.INIT_60: S.EXIT,
    }
    _F = {S.ENTER: S.INIT_00, S.INIT_00: S.EXIT}

    def _next_e(self) -> int:
        return self._E.get(self.state, S.READY)

    def _next_f(self) -> int:
        return self._F.get(self.state, S.READY)


class SettingsRetrieve(SettingsSequence):
    """Retrieves the current settings from the BCM."""

    def __init__(self, frame_id: SettingsFrameId, clock: Clock | None = None) -> None:
        super().__init__(frame_id, clock)
        self._retrieve = _MultiFrameRetrieve()

    def _next_e(self) -> int:
        state = self.state
        if state == S.ENTER:
            return S.RETRIEVE_71E_10
        if state == S.RETRIEVE_71E_10:
            return self._retrieve.after_first()
        if state == S.RETRIEVE_71E_2X:
            return self._retrieve.after_continuation()
        return S.READY

    def _next_f(self) -> int:
        state = self.state
        if state == S.ENTER:
            return S.RETRIEVE_71F_05
        if state == S.RETRIEVE_71F_05:
            return S.EXIT
        return S.READY


class SettingsUpdate(SettingsSequence):
    """Changes one setting in the BCM, then reads the settings back."""

    def __init__(self, frame_id: SettingsFrameId, clock: Clock | None = None) -> None:
        super().__init__(frame_id, clock)
        self._update = int(S.READY)
        self._retrieve = _MultiFrameRetrieve()

    def set_payload(self, update: int, value: int) -> None:
        """Set the setting state to send and its value."""
        self._update = int(update)
        self._set_value(value)

    def _next_e(self) -> int:
        state = self.state
        if state == S.ENTER:
            return self._update
        if state == self._update:
            return S.RETRIEVE_71E_10
        if state == S.RETRIEVE_71E_10:
            return self._retrieve.after_first()
        if state == S.RETRIEVE_71E_2X:
            return self._retrieve.after_continuation()
        return S.READY

    def _next_f(self) -> int:
        state = self.state
        if state == S.ENTER:
            return self._update
        if state == self._update:
            return S.RETRIEVE_71F_05
        if state == S.RETRIEVE_71F_05:
            return S.EXIT
        return S.READY


class SettingsReset(SettingsSequence):
    """Resets all settings to factory values, then reads them back."""

    def __init__(self, frame_id: SettingsFrameId, clock: Clock | None = None) -> None:
        super().__init__(frame_id, clock)
        self._retrieve = _MultiFrameRetrieve()

    def _next_e(self) -> int:
        state = self.state
        if state == S.ENTER:
            return S.RESET
        if state == S.RESET:
            return S.RETRIEVE_71E_10
        if state == S.RETRIEVE_71E_10:
            return self._retrieve.after_first()
        if state == S.RETRIEVE_71E_2X:
            return self._retrieve.after_continuation()
        return S.READY

    def _next_f(self) -> int:
        state = self.state
        if state == S.ENTER:
            return S.RESET
        if state == S.RESET:
            return S.RETRIEVE_71F_05
        if state == S.RETRIEVE_71F_05:
            return S.EXIT
        return S.READY