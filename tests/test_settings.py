import pytest

from r51vehicle.core import (
    CANFrame,
    Event,
    FakeClock,
    RequestCommand,
    SubSystem,
    get_bit,
)
from r51vehicle.settings import Settings, SettingsEvent

REQ_E = 0x71E
REQ_F = 0x71F
RESP_E = 0x72E
RESP_F = 0x72F

ENTER_REQUEST = bytearray([0x02, 0x10, 0xC0, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF])
ENTER_RESPONSE = [0x02, 0x50, 0xC0, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF]


def frames(messages):
    return [m for m in messages if isinstance(m, CANFrame)]


def events(messages):
    return [m for m in messages if isinstance(m, Event)]


def command(settings, cmd):
    settings.handle(Event(SubSystem.SETTINGS, cmd))


def load_state(settings, frame_id, data):
    settings.handle(CANFrame(frame_id, data))
    out = settings.emit()
    return events(out)


@pytest.fixture
def settings():
    return Settings(FakeClock(1000))


def test_fresh_node_emits_nothing(settings):
    assert settings.emit() == []


def test_init_sends_enter_on_both_frames(settings):
    assert settings.init() == []
    out = frames(settings.emit())
    assert [f.id for f in out] == [REQ_E, REQ_F]
    assert all(f.data == ENTER_REQUEST for f in out)
    # Already sent: nothing more until a response arrives.
    assert settings.emit() == []


def test_init_advances_on_response(settings):
    settings.init()
    settings.emit()
    settings.handle(CANFrame(RESP_E, ENTER_RESPONSE))
    out = frames(settings.emit())
    assert len(out) == 1
    assert out[0].id == REQ_E
    assert out[0].data == bytearray([0x02, 0x3B, 0x00, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF])


def test_commands_ignored_while_busy(settings):
    settings.init()
    settings.emit()
    command(settings, SettingsEvent.TOGGLE_AUTO_INTERIOR_ILLUM_CMD)
    assert settings.emit() == []


def test_sequences_time_out(settings):
    clock = FakeClock(1000)
    node = Settings(clock)
    node.init()
    node.emit()
    clock.advance(500)
    assert node.emit() == []
    node.handle(RequestCommand(SubSystem.SETTINGS, SettingsEvent.STATE))
    out = frames(node.emit())
    assert [f.id for f in out] == [REQ_E, REQ_F]


def test_request_current_triggers_retrieve(settings):
    settings.handle(RequestCommand(SubSystem.SETTINGS, SettingsEvent.STATE))
    out = frames(settings.emit())
    assert [f.id for f in out] == [REQ_E, REQ_F]
    settings.handle(CANFrame(RESP_F, ENTER_RESPONSE))
    out = frames(settings.emit())
    assert len(out) == 1
    assert out[0].id == REQ_F
    assert out[0].data[:3] == bytearray([0x02, 0x21, 0x01])


def test_state_withheld_until_all_sequences_ready(settings):
    settings.handle(RequestCommand(SubSystem.SETTINGS, SettingsEvent.STATE))
    settings.emit()
    settings.handle(CANFrame(RESP_F, ENTER_RESPONSE))
    settings.emit()
    settings.handle(CANFrame(RESP_F, [0x05, 0x00, 0x00, 0x01, 0x00, 0x00, 0x00, 0x00]))
    out = settings.emit()
    assert events(out) == []
    exit_frames = frames(out)
    assert len(exit_frames) == 1
    assert exit_frames[0].data[:3] == bytearray([0x02, 0x10, 0x81])


def test_state_05_slide_driver_seat(settings):
    out = load_state(settings, RESP_F, [0x05, 0x00, 0x00, 0x01, 0x00, 0x00, 0x00, 0x00])
    assert len(out) == 1
    state = out[0]
    assert state.subsystem == SubSystem.SETTINGS
    assert state.id == SettingsEvent.STATE
    assert get_bit(state.data, 0, 1) is True
    # Emitted only once per change.
    assert settings.emit() == []


def test_state_10_fields(settings):
    out = load_state(settings, RESP_E, [0x10, 0x00, 0x00, 0x00, 0xA0, 0x00, 0x00, 0x08])
    state = out[0]
    assert get_bit(state.data, 0, 0) is True  # auto interior illumination
    assert get_bit(state.data, 2, 0) is True  # selective door unlock
    assert get_bit(state.data, 3, 0) is True  # remote key horn


def test_short_frames_ignored(settings):
    settings.handle(CANFrame(RESP_E, [0x10, 0x00, 0x00, 0x00, 0xA0]))
    assert settings.emit() == []


def test_toggle_interior_illumination_sends_update(settings):
    load_state(settings, RESP_E, [0x10, 0x00, 0x00, 0x00, 0x20, 0x00, 0x00, 0x00])
    command(settings, SettingsEvent.TOGGLE_AUTO_INTERIOR_ILLUM_CMD)
    out = frames(settings.emit())
    assert len(out) == 1 and out[0].data == ENTER_REQUEST
    settings.handle(CANFrame(RESP_E, ENTER_RESPONSE))
    out = frames(settings.emit())
    assert out[0].id == REQ_E
    assert out[0].data == bytearray([0x03, 0x3B, 0x10, 0x00, 0xFF, 0xFF, 0xFF, 0xFF])


def _update_payload(settings, cmd, resp_id=RESP_E):
    command(settings, cmd)
    first = frames(settings.emit())
    if not first:
        return None
    settings.handle(CANFrame(resp_id, ENTER_RESPONSE))
    out = frames(settings.emit())
    return out[0]


def test_headlight_sensitivity_bounds(settings):
    # data[2] bits 2-3 == 0b11 maps to the lowest sensitivity.
    load_state(settings, RESP_E, [0x21, 0x00, 0x0C, 0x00, 0x00, 0x00, 0x00, 0x00])
    assert _update_payload(settings, SettingsEvent.PREV_AUTO_HEADLIGHT_SENS_CMD) is None
    frame = _update_payload(settings, SettingsEvent.NEXT_AUTO_HEADLIGHT_SENS_CMD)
    assert frame.data[:4] == bytearray([0x03, 0x3B, 0x37, 0x00])


def test_headlight_off_delay_bounds(settings):
    # Delay code 7 is the longest delay.
    load_state(settings, RESP_E, [0x21, 0x00, 0x01, 0xC0, 0x00, 0x00, 0x00, 0x00])
    assert _update_payload(settings, SettingsEvent.NEXT_AUTO_HEADLIGHT_OFF_DELAY_CMD) is None
    frame = _update_payload(settings, SettingsEvent.PREV_AUTO_HEADLIGHT_OFF_DELAY_CMD)
    assert frame.data[:4] == bytearray([0x03, 0x3B, 0x39, 0x06])


def test_relock_time_bounds(settings):
    load_state(settings, RESP_E, [0x21, 0x10, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00])
    assert _update_payload(settings, SettingsEvent.PREV_AUTO_RELOCK_TIME_CMD) is None
    frame = _update_payload(settings, SettingsEvent.NEXT_AUTO_RELOCK_TIME_CMD)
    assert frame.data[:4] == bytearray([0x03, 0x3B, 0x2F, 0x00])


def test_remote_key_lights_bounds(settings):
    load_state(settings, RESP_E, [0x21, 0xC0, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00])
    assert _update_payload(settings, SettingsEvent.NEXT_REMOTE_KEY_RESP_LIGHTS_CMD) is None
    frame = _update_payload(settings, SettingsEvent.PREV_REMOTE_KEY_RESP_LIGHTS_CMD)
    assert frame.data[:4] == bytearray([0x03, 0x3B, 0x2E, 0x02])


def test_speed_sensing_wiper_sent_inverted(settings):
    out = load_state(settings, RESP_E, [0x22, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00])
    assert get_bit(out[0].data, 0, 2) is True
    frame = _update_payload(settings, SettingsEvent.TOGGLE_SPEED_SENSING_WIPER_CMD)
    assert frame.data[:4] == bytearray([0x03, 0x3B, 0x47, 0x01])


def test_slide_driver_seat_uses_f_frame(settings):
    frame = _update_payload(settings, SettingsEvent.TOGGLE_SLIDE_DRIVER_SEAT_CMD, RESP_F)
    assert frame.id == REQ_F
    assert frame.data[:4] == bytearray([0x03, 0x3B, 0x01, 0x01])


def test_factory_reset(settings):
    command(settings, SettingsEvent.FACTORY_RESET_CMD)
    out = frames(settings.emit())
    assert [f.id for f in out] == [REQ_E, REQ_F]
    settings.handle(CANFrame(RESP_E, ENTER_RESPONSE))
    out = frames(settings.emit())
    assert out[0].data == bytearray([0x03, 0x3B, 0x1F, 0x00, 0xFF, 0xFF, 0xFF, 0xFF])


def test_unrelated_events_ignored(settings):
    settings.handle(Event(SubSystem.CLIMATE, SettingsEvent.FACTORY_RESET_CMD))
    settings.handle(CANFrame(0x123, [0x10] * 8))
    assert settings.emit() == []