import pytest

from r51vehicle.core import CANFrame, Event, J1939Message, SubSystem
from r51vehicle.routing import (
    HardwareFilter,
    bridge_forward,
    controller_forward,
    controller_route,
    hardware_accepts,
    standalone_forward,
    vehicle_hardware_filters,
    vehicle_read_filter,
    vehicle_write_filter,
)


@pytest.mark.parametrize("frame_id", [0x54A, 0x54B, 0x72E, 0x72F, 0x385, 0x625])
def test_read_filter_accepts(frame_id):
    assert vehicle_read_filter(CANFrame(frame_id)) is True


@pytest.mark.parametrize("frame_id", [0x54C, 0x549, 0x386, 0x384, 0x540, 0x626])
def test_read_filter_rejects(frame_id):
    assert vehicle_read_filter(CANFrame(frame_id)) is False


@pytest.mark.parametrize("frame_id", [0x540, 0x541, 0x71E, 0x71F])
def test_write_filter_accepts(frame_id):
    assert vehicle_write_filter(CANFrame(frame_id)) is True


@pytest.mark.parametrize("frame_id", [0x54A, 0x542, 0x720, 0x385])
def test_write_filter_rejects(frame_id):
    assert vehicle_write_filter(CANFrame(frame_id)) is False


def test_hardware_filters_match_software_read_filter():
    filters = vehicle_hardware_filters()
    for frame_id in range(0x800):
        assert hardware_accepts(filters, frame_id) == vehicle_read_filter(CANFrame(frame_id))


def test_empty_filters_are_promiscuous():
    assert hardware_accepts((), 0x123) is True


def test_exact_filter():
    filters = [HardwareFilter(0xFFFFFFFF, 0x385)]
    assert hardware_accepts(filters, 0x385) is True
    assert hardware_accepts(filters, 0x384) is False


def test_bridge_forward():
    assert bridge_forward(CANFrame(0x540)) is True
    assert bridge_forward(J1939Message()) is True
    assert bridge_forward(Event(SubSystem.AUDIO, 0x20)) is True
    assert bridge_forward(None) is False


def test_controller_forward():
    assert controller_forward(CANFrame(0x540)) is True
    assert controller_forward(J1939Message()) is True
    assert controller_forward(Event(SubSystem.IPDM, 0x00)) is False


def test_forward_rejects_non_messages():
    with pytest.raises(TypeError):
        controller_forward("frame")


@pytest.mark.parametrize(
    "event,expected",
    [
        (Event(SubSystem.BLUETOOTH, 0x10), True),
        (Event(SubSystem.BLUETOOTH, 0x0F), False),
        (Event(SubSystem.KEYPAD, 0x00, (0x01,)), True),
        (Event(SubSystem.KEYPAD, 0x00, (0x02,)), False),
        (Event(SubSystem.CLIMATE, 0x01), True),
        (Event(SubSystem.CLIMATE, 0x10), False),
        (Event(SubSystem.IPDM, 0x00), True),
        (Event(SubSystem.POWER, 0x00), True),
        (Event(SubSystem.BCM, 0x11), False),
        (Event(SubSystem.AUDIO, 0x00), False),
        (Event(SubSystem.ECM, 0x00), False),
    ],
)
def test_standalone_forward_events(event, expected):
    assert standalone_forward(event) is expected


def test_standalone_forward_custom_encoder():
    event = Event(SubSystem.KEYPAD, 0x00, (0x02,))
    assert standalone_forward(event, 0x02) is True
    assert standalone_forward(CANFrame(0x54A), 0x02) is True


def test_controller_route_vehicle_events_to_bridge():
    assert controller_route(Event(SubSystem.CLIMATE, 0x15)) == 0x18
    assert controller_route(Event(SubSystem.BLUETOOTH, 0x00)) == 0x18
    assert controller_route(Event(0x1F, 0x00), bridge_address=0x30) == 0x30


def test_controller_route_broadcasts_state_events():
    assert controller_route(Event(SubSystem.AUDIO, 0x01)) == 0xFF


def test_controller_route_drops_commands():
    assert controller_route(Event(SubSystem.AUDIO, 0x10)) is None
    assert controller_route(Event(SubSystem.SCREEN, 0x25)) is None