import pytest

from r51vehicle.climate_events import (
    ClimateAirflowState,
    ClimateEvent,
    ClimateSystemMode,
    ClimateSystemState,
    ClimateTempState,
)
from r51vehicle.core import Event, SubSystem, Units, get_bit


def test_event_identity():
    assert ClimateTempState().id == ClimateEvent.TEMP_STATE == 0x03
    assert ClimateAirflowState().id == ClimateEvent.AIRFLOW_STATE
    assert ClimateSystemState().id == ClimateEvent.SYSTEM_STATE
    assert ClimateTempState().subsystem == SubSystem.CLIMATE


def test_temp_state_defaults():
    state = ClimateTempState()
    assert state.data[:4] == bytearray(4)
    assert state.units is Units.METRIC


def test_temp_state_update_reports_change():
    state = ClimateTempState()
    assert state.update(driver_temp=70, passenger_temp=72, units=Units.US) is True
    assert state.driver_temp == 70
    assert state.passenger_temp == 72
    assert state.units is Units.US
    assert state.update(driver_temp=70, units=Units.US) is False


def test_temp_state_equals_plain_event_with_same_bytes():
    state = ClimateTempState()
    state.outside_temp = 50
    expected = Event(SubSystem.CLIMATE, ClimateEvent.TEMP_STATE, (0, 0, 50, 0))
    assert state == expected


def test_update_rejects_unknown_field():
    with pytest.raises(AttributeError):
        ClimateTempState().update(humidity=3)


@pytest.mark.parametrize("name, bit", [("face", 0), ("feet", 1), ("windshield", 2), ("recirculate", 3)])
def test_airflow_flag_bits(name, bit):
    state = ClimateAirflowState()
    assert state.update(**{name: True}) is True
    assert get_bit(state.data, 1, bit)
    assert getattr(state, name) is True
    assert state.update(**{name: True}) is False
    setattr(state, name, False)
    assert state.data[1] == 0


def test_airflow_fan_speed():
    state = ClimateAirflowState()
    assert state.update(fan_speed=5) is True
    assert state.data[0] == 5


def test_system_mode_keeps_other_bits():
    state = ClimateSystemState()
    state.update(ac=True, dual=True)
    before_flags = (state.ac, state.dual)
    for mode in ClimateSystemMode:
        state.mode = mode
        assert state.mode is mode
        assert (state.ac, state.dual) == before_flags


def test_system_flags_bits():
    state = ClimateSystemState()
    state.ac = True
    assert get_bit(state.data, 0, 2)
    state.dual = True
    assert get_bit(state.data, 0, 3)
    assert state.mode is ClimateSystemMode.OFF