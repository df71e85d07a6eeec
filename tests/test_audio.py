import pytest

from r51vehicle.audio import (
    BALANCE_MAX,
    BALANCE_MIN,
    FADE_MIN,
    TONE_MAX,
    TONE_MIN,
    VOLUME_MAX,
    AudioEvent,
    AudioFadeSetCommand,
    AudioInputGainSetCommand,
    AudioPlayback,
    AudioRadioState,
    AudioRadioTuneCommand,
    AudioSeek,
    AudioSettingsBackCommand,
    AudioSettingsExitCommand,
    AudioSettingsExitState,
    AudioSettingsItemState,
    AudioSettingsMenuState,
    AudioSettingsSelectCommand,
    AudioSettingsType,
    AudioSource,
    AudioSourceSetCommand,
    AudioSourceState,
    AudioSystem,
    AudioSystemState,
    AudioToneSetCommand,
    AudioToneState,
    AudioTrackPlaybackState,
    AudioTrackTitleState,
    AudioVolumeSetCommand,
    AudioVolumeState,
)
from r51vehicle.core import SubSystem


def test_system_state_defaults_and_roundtrip():
    event = AudioSystemState()
    assert event.subsystem == SubSystem.AUDIO
    assert event.id == AudioEvent.SYSTEM_STATE
    assert event.state is AudioSystem.UNAVAILABLE
    event.state = AudioSystem.ON
    assert event.state is AudioSystem.ON
    assert event.data[0] == AudioSystem.ON


def test_system_state_invalid_byte_raises():
    event = AudioSystemState()
    event.data[0] = 0x09
    with pytest.raises(ValueError):
        _ = event.state
    assert event.data[0] == 0x09
    event.state = AudioSystem.OFF
    assert event.state is AudioSystem.OFF


@pytest.mark.parametrize("fade", [FADE_MIN, 0, 5])
@pytest.mark.parametrize("balance", [BALANCE_MIN, 0, BALANCE_MAX])
def test_volume_state_signed_roundtrip(fade, balance):
    event = AudioVolumeState()
    event.volume = VOLUME_MAX
    event.fade = fade
    event.balance = balance
    event.mute = True
    assert (event.volume, event.fade, event.balance, event.mute) == (
        VOLUME_MAX,
        fade,
        balance,
        True,
    )


def test_volume_state_stores_twos_complement():
    event = AudioVolumeState()
    event.fade = -1
    assert event.data[1] == 0xFF


@pytest.mark.parametrize("value", [TONE_MIN, -1, 0, TONE_MAX])
def test_tone_state_roundtrip(value):
    event = AudioToneState()
    event.bass = value
    event.mid = -value
    event.treble = value
    assert (event.bass, event.mid, event.treble) == (value, -value, value)


def test_source_state_roundtrip():
    event = AudioSourceState()
    event.source = AudioSource.BLUETOOTH
    event.bt_connected = False
    assert event.source is AudioSource.BLUETOOTH
    assert event.bt_connected is False
    event.bt_connected = True
    assert event.bt_connected is True


def test_track_playback_big_endian_times():
    event = AudioTrackPlaybackState()
    event.playback = AudioPlayback.PAUSE
    event.time_elapsed = 0x0102
    event.time_total = 0xABCD
    assert event.playback is AudioPlayback.PAUSE
    assert event.time_elapsed == 0x0102
    assert event.time_total == 0xABCD
    assert bytes(event.data[1:5]) == bytes([0x01, 0x02, 0xAB, 0xCD])


def test_settings_menu_state_fields():
    event = AudioSettingsMenuState()
    assert event.id == AudioEvent.SETTINGS_MENU_STATE
    event.page = 3
    event.item = 4
    event.count = 5
    assert (event.page, event.item, event.count) == (3, 4, 5)


def test_settings_item_state_bitfields_are_independent():
    event = AudioSettingsItemState()
    event.item = 0x0A
    event.reload = True
    assert event.item == 0x0A
    assert event.reload is True
    event.item = 0x03
    assert event.reload is True
    event.reload = False
    assert event.item == 0x03
    event.type = AudioSettingsType.CHECKBOX_ON
    assert event.type is AudioSettingsType.CHECKBOX_ON


def test_settings_commands_ids():
    assert AudioSettingsBackCommand().id == AudioEvent.SETTINGS_BACK_CMD
    assert AudioSettingsExitCommand().id == AudioEvent.SETTINGS_EXIT_CMD
    assert AudioSettingsExitState().id == AudioEvent.SETTINGS_ITEM_STATE
    assert AudioTrackTitleState().id == AudioEvent.TRACK_TITLE_STATE


def test_settings_select_command_item():
    command = AudioSettingsSelectCommand(7)
    assert command.id == AudioEvent.SETTINGS_SELECT_CMD
    assert command.item == 7
    assert AudioSettingsSelectCommand().item == 0x00


def test_radio_state_seek_toggle():
    event = AudioRadioState()
    assert event.seek_mode is AudioSeek.AUTO
    event.toggle_seek_mode()
    assert event.seek_mode is AudioSeek.MANUAL
    event.toggle_seek_mode()
    assert event.seek_mode is AudioSeek.AUTO


def test_radio_state_frequency_does_not_touch_seek():
    event = AudioRadioState()
    event.seek_mode = AudioSeek.MANUAL
    event.frequency = 101_100_000
    assert event.frequency == 101_100_000
    assert event.seek_mode is AudioSeek.MANUAL


def test_radio_tune_command_frequency():
    command = AudioRadioTuneCommand()
    assert command.id == AudioEvent.RADIO_TUNE_CMD
    command.frequency = 0x11223344
    assert bytes(command.data[:4]) == bytes([0x11, 0x22, 0x33, 0x44])
    assert command.frequency == 0x11223344


def test_set_commands_roundtrip():
    source = AudioSourceSetCommand()
    source.source = AudioSource.FM
    assert source.source is AudioSource.FM

    gain = AudioInputGainSetCommand()
    gain.gain = -3
    assert gain.gain == -3

    volume = AudioVolumeSetCommand()
    volume.volume = VOLUME_MAX
    assert volume.volume == VOLUME_MAX

    tone = AudioToneSetCommand()
    tone.treble = TONE_MIN
    assert tone.treble == TONE_MIN


def test_fade_set_command_uses_balance_id():
    command = AudioFadeSetCommand()
    assert command.id == AudioEvent.BALANCE_SET_CMD
    command.fade = FADE_MIN
    assert command.fade == FADE_MIN