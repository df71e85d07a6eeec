"""Climate control CAN frames 0x540 and 0x541.

Controls work by toggling bits: independent changes may be combined before
a frame is sent, but changing the same setting twice is a no-op. Frames
start in an init state and ignore controls until ``ready`` is called.
"""

from __future__ import annotations

from .core import CANFrame, flip_bit

SYSTEM_CONTROL_ID = 0x540
FAN_CONTROL_ID = 0x541
_INIT_MARKER = 0x80


class _ControlFrame(CANFrame):
    def __init__(self, frame_id: int) -> None:
        super().__init__(frame_id, bytes(8))
        self.data[0] = _INIT_MARKER

    def _initializing(self) -> bool:
        return self.data[0] == _INIT_MARKER

    def _toggle(self, offset: int, bit: int) -> bool:
        if self._initializing():
            return False
        flip_bit(self.data, offset, bit)
        return True


class ClimateSystemControlFrame(_ControlFrame):
    """The 0x540 frame controlling climate system state."""

    def __init__(self, ready: bool = False) -> None:
        super().__init__(SYSTEM_CONTROL_ID)
        if ready:
            self.ready()

    def ready(self) -> None:
        """Leave the init state. No-op if already ready."""
        if not self._initializing():
            return
        self.data[0] = 0x60
        self.data[1] = 0x40
        self.data[6] = 0x04

    def turn_off(self) -> None:
        self._toggle(6, 7)

    def toggle_auto(self) -> None:
        self._toggle(6, 5)

    def toggle_ac(self) -> None:
        self._toggle(5, 3)

    def toggle_dual(self) -> None:
        self._toggle(6, 3)

    def cycle_mode(self) -> None:
        self._toggle(6, 0)

    def toggle_defog(self) -> None:
        self._toggle(6, 1)

    def _step_temp(self, offset: int, delta: int) -> None:
        if self._toggle(5, 5):
            self.data[offset] = (self.data[offset] + delta) & 0xFF

    def inc_driver_temp(self) -> None:
        self._step_temp(3, 1)

    def dec_driver_temp(self) -> None:
        self._step_temp(3, -1)

    def inc_passenger_temp(self) -> None:
        self._step_temp(4, 1)

    def dec_passenger_temp(self) -> None:
        self._step_temp(4, -1)


class ClimateFanControlFrame(_ControlFrame):
    """The 0x541 frame controlling fan speed and recirculation."""

    def __init__(self, ready: bool = False) -> None:
        super().__init__(FAN_CONTROL_ID)
        if ready:
            self.ready()

    def ready(self) -> None:
        """Leave the init state. No-op if already ready."""
        if not self._initializing():
            return
        self.data[0] = 0x00

    def toggle_recirculate(self) -> None:
        self._toggle(1, 6)

    def inc_fan_speed(self) -> None:
        self._toggle(0, 5)

    def dec_fan_speed(self) -> None:
        self._toggle(0, 4)