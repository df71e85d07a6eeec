"""Climate state events and their typed fields."""

from __future__ import annotations

from enum import IntEnum
from typing import Any

from .core import Event, SubSystem, Units, get_bit, set_bit


class ClimateEvent(IntEnum):
    SYSTEM_STATE = 0x01
    AIRFLOW_STATE = 0x02
    TEMP_STATE = 0x03

    TURN_OFF_CMD = 0x10
    TOGGLE_AUTO_CMD = 0x11
    TOGGLE_AC_CMD = 0x12
    TOGGLE_DUAL_CMD = 0x13
    TOGGLE_DEFOG_CMD = 0x14
    INC_FAN_SPEED_CMD = 0x15
    DEC_FAN_SPEED_CMD = 0x16
    TOGGLE_RECIRCULATE_CMD = 0x17
    CYCLE_AIRFLOW_MODE_CMD = 0x18
    INC_DRIVER_TEMP_CMD = 0x19
    DEC_DRIVER_TEMP_CMD = 0x1A
    INC_PASSENGER_TEMP_CMD = 0x1B
    DEC_PASSENGER_TEMP_CMD = 0x1C


class ClimateSystemMode(IntEnum):
    OFF = 0
    AUTO = 1
    MANUAL = 2
    DEFOG = 3


def _assign_fields(event: Event, fields: dict[str, Any]) -> bool:
    """Assign the given property values. Return True if any value changed."""
    changed = False
    for name, value in fields.items():
        if not isinstance(getattr(type(event), name, None), property):
            raise AttributeError(f"{type(event).__name__} has no field {name!r}")
        if getattr(event, name) != value:
            setattr(event, name, value)
            changed = True
    return changed


class ClimateTempState(Event):
    """Zone and outside temperatures with their units."""

    def __init__(self) -> None:
        super().__init__(SubSystem.CLIMATE, ClimateEvent.TEMP_STATE, (0x00, 0x00, 0x00, 0x00))

    def update(self, **kwargs) -> bool:
        """Assign the given fields. Return True if any value changed."""
        return _assign_fields(self, kwargs)

    @property
    def driver_temp(self) -> int:
        return self.data[0]

    @driver_temp.setter
    def driver_temp(self, value: int) -> None:
        self.data[0] = value & 0xFF

    @property
    def passenger_temp(self) -> int:
        return self.data[1]

    @passenger_temp.setter
    def passenger_temp(self, value: int) -> None:
        self.data[1] = value & 0xFF

    @property
    def outside_temp(self) -> int:
        return self.data[2]

    @outside_temp.setter
    def outside_temp(self, value: int) -> None:
        self.data[2] = value & 0xFF

    @property
    def units(self) -> Units:
        return Units(self.data[3])

    @units.setter
    def units(self, value: Units) -> None:
        self.data[3] = int(value) & 0xFF


class ClimateAirflowState(Event):
    """Fan speed and vent selection."""

    def __init__(self) -> None:
        super().__init__(SubSystem.CLIMATE, ClimateEvent.AIRFLOW_STATE, (0x00, 0x00))

    def update(self, **kwargs) -> bool:
        """Assign the given fields. Return True if any value changed."""
        return _assign_fields(self, kwargs)

    @property
    def fan_speed(self) -> int:
        return self.data[0]

    @fan_speed.setter
    def fan_speed(self, value: int) -> None:
        self.data[0] = value & 0xFF

    @property
    def face(self) -> bool:
        return get_bit(self.data, 1, 0)

    @face.setter
    def face(self, value: bool) -> None:
        set_bit(self.data, 1, 0, value)

    @property
    def feet(self) -> bool:
        return get_bit(self.data, 1, 1)

    @feet.setter
    def feet(self, value: bool) -> None:
        set_bit(self.data, 1, 1, value)

    @property
    def windshield(self) -> bool:
        return get_bit(self.data, 1, 2)

    @windshield.setter
    def windshield(self, value: bool) -> None:
        set_bit(self.data, 1, 2, value)

    @property
    def recirculate(self) -> bool:
        return get_bit(self.data, 1, 3)

    @recirculate.setter
    def recirculate(self, value: bool) -> None:
        set_bit(self.data, 1, 3, value)


class ClimateSystemState(Event):
    """Climate system mode, A/C and dual zone flags."""

    def __init__(self) -> None:
        super().__init__(SubSystem.CLIMATE, ClimateEvent.SYSTEM_STATE, (0x00,))

    def update(self, **kwargs) -> bool:
        """Assign the given fields. Return True if any value changed."""
        return _assign_fields(self, kwargs)

    @property
    def mode(self) -> ClimateSystemMode:
        return ClimateSystemMode(self.data[0] & 0x03)

    @mode.setter
    def mode(self, value: ClimateSystemMode) -> None:
        self.data[0] = (self.data[0] & 0xFC) | (int(value) & 0x03)

    @property
    def ac(self) -> bool:
        return get_bit(self.data, 0, 2)

    @ac.setter
    def ac(self, value: bool) -> None:
        set_bit(self.data, 0, 2, value)

    @property
    def dual(self) -> bool:
        return get_bit(self.data, 0, 3)

    @dual.setter
    def dual(self, value: bool) -> None:
        set_bit(self.data, 0, 3, value)