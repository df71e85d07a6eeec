"""Audio system events: state reports and control commands."""

from __future__ import annotations

from enum import IntEnum

from .core import Event, SubSystem, flip_bit, get_bit, set_bit

VOLUME_MIN = 0
VOLUME_MAX = 24
BALANCE_MIN = -7
BALANCE_MAX = 7
FADE_MIN = -8
FADE_MAX = 8
TONE_MIN = -15
TONE_MAX = 15


class AudioSystem(IntEnum):
    """System state of the audio device."""

    UNAVAILABLE = 0x00
    OFF = 0x01
    BOOT = 0x02
    ON = 0x03
    POWER_ON = 0x04


class AudioSource(IntEnum):
    AM = 0x00
    FM = 0x01
    AUX = 0x03
    BLUETOOTH = 0x07
    OPTICAL = 0x09


class AudioPlayback(IntEnum):
    """Playback state for Bluetooth."""

    NO_TRACK = 0x00
    PLAY = 0x01
    PAUSE = 0x02


class AudioSeek(IntEnum):
    """Seek mode for broadcast radio."""

    AUTO = 0x00
    MANUAL = 0x01


class AudioEvent(IntEnum):
    SYSTEM_STATE = 0x00
    VOLUME_STATE = 0x01
    TONE_STATE = 0x02
    SOURCE_STATE = 0x03
    TRACK_PLAYBACK_STATE = 0x04
    TRACK_TITLE_STATE = 0x05
    TRACK_ARTIST_STATE = 0x06
    TRACK_ALBUM_STATE = 0x07
    RADIO_STATE = 0x08
    INPUT_STATE = 0x09

    POWER_ON_CMD = 0x10
    POWER_OFF_CMD = 0x11
    POWER_TOGGLE_CMD = 0x12
    SOURCE_SET_CMD = 0x13
    SOURCE_NEXT_CMD = 0x14
    SOURCE_PREV_CMD = 0x15

    TRACK_PLAY_CMD = 0x20
    TRACK_PAUSE_CMD = 0x21
    TRACK_NEXT_CMD = 0x22
    TRACK_PREV_CMD = 0x23

    RADIO_TUNE_CMD = 0x30
    RADIO_NEXT_AUTO_CMD = 0x31
    RADIO_PREV_AUTO_CMD = 0x32
    RADIO_NEXT_MANUAL_CMD = 0x33
    RADIO_PREV_MANUAL_CMD = 0x34
    RADIO_TOGGLE_SEEK_CMD = 0x35
    RADIO_NEXT_CMD = 0x36
    RADIO_PREV_CMD = 0x37

    INPUT_GAIN_SET_CMD = 0x40
    INPUT_GAIN_INC_CMD = 0x41
    INPUT_GAIN_DEC_CMD = 0x42

    VOLUME_SET_CMD = 0x50
    VOLUME_INC_CMD = 0x51
    VOLUME_DEC_CMD = 0x52
    VOLUME_MUTE_CMD = 0x53
    VOLUME_UNMUTE_CMD = 0x54
    VOLUME_TOGGLE_MUTE_CMD = 0x55
    BALANCE_SET_CMD = 0x56
    BALANCE_LEFT_CMD = 0x57
    BALANCE_RIGHT_CMD = 0x58
    FADE_SET_CMD = 0x59
    FADE_FRONT_CMD = 0x5A
    FADE_REAR_CMD = 0x5B

    TONE_SET_CMD = 0x60
    TONE_BASS_INC_CMD = 0x61
    TONE_BASS_DEC_CMD = 0x62
    TONE_MID_INC_CMD = 0x63
    TONE_MID_DEC_CMD = 0x64
    TONE_TREBLE_INC_CMD = 0x65
    TONE_TREBLE_DEC_CMD = 0x66

    PLAYBACK_TOGGLE_CMD = 0xE0
    PLAYBACK_NEXT_CMD = 0xE1
    PLAYBACK_PREV_CMD = 0xE2

    SETTINGS_OPEN_CMD = 0xF0
    SETTINGS_BACK_CMD = 0xF1
    SETTINGS_EXIT_CMD = 0xF2
    SETTINGS_SELECT_CMD = 0xF3
    SETTINGS_MENU_STATE = 0x0A
    SETTINGS_ITEM_STATE = 0x0B
    SETTINGS_EXIT_STATE = 0x0C


class AudioSettingsType(IntEnum):
    SUBMENU = 1
    SELECT = 2
    CHECKBOX_OFF = 3
    CHECKBOX_ON = 4


def _u8(offset: int) -> property:
    def fget(self) -> int:
        return self.data[offset]

    def fset(self, value: int) -> None:
        self.data[offset] = int(value) & 0xFF

    return property(fget, fset)


def _i8(offset: int) -> property:
    def fget(self) -> int:
        raw = self.data[offset]
        return raw - 0x100 if raw & 0x80 else raw

    def fset(self, value: int) -> None:
        self.data[offset] = int(value) & 0xFF

    return property(fget, fset)


def _flag(offset: int) -> property:
    def fget(self) -> bool:
        return self.data[offset] != 0x00

    def fset(self, value: bool) -> None:
        self.data[offset] = int(bool(value))

    return property(fget, fset)


def _enum(offset: int, enum_cls: type[IntEnum]) -> property:
    def fget(self):
        return enum_cls(self.data[offset])

    def fset(self, value) -> None:
        self.data[offset] = int(value) & 0xFF

    return property(fget, fset)


def _uint(offset: int, size: int) -> property:
    def fget(self) -> int:
        return int.from_bytes(self.data[offset : offset + size], "big")

    def fset(self, value: int) -> None:
        mask = (1 << (8 * size)) - 1
        self.data[offset : offset + size] = (int(value) & mask).to_bytes(size, "big")

    return property(fget, fset)


class _AudioEvent(Event):
    def __init__(self, event_id: AudioEvent, data=()) -> None:
        super().__init__(SubSystem.AUDIO, event_id, data)


class AudioSystemState(_AudioEvent):
    def __init__(self) -> None:
        super().__init__(AudioEvent.SYSTEM_STATE, (0x00,))

    state = _enum(0, AudioSystem)


class AudioVolumeState(_AudioEvent):
    def __init__(self) -> None:
        super().__init__(AudioEvent.VOLUME_STATE, (0x00, 0x00, 0x00, 0x00))

    volume = _u8(0)
    fade = _i8(1)
    balance = _i8(2)
    mute = _flag(3)


class AudioToneState(_AudioEvent):
    def __init__(self) -> None:
        super().__init__(AudioEvent.TONE_STATE, (0x00, 0x00, 0x00))

    bass = _i8(0)
    mid = _i8(1)
    treble = _i8(2)


class AudioSourceState(_AudioEvent):
    def __init__(self) -> None:
        super().__init__(AudioEvent.SOURCE_STATE, (0x00,))

    source = _enum(0, AudioSource)
    bt_connected = _flag(1)


class AudioTrackPlaybackState(_AudioEvent):
    def __init__(self) -> None:
        super().__init__(AudioEvent.TRACK_PLAYBACK_STATE, (0x00,) * 5)

    playback = _enum(0, AudioPlayback)
    time_elapsed = _uint(1, 2)
    time_total = _uint(3, 2)


class AudioSettingsMenuState(_AudioEvent):
    def __init__(self) -> None:
        super().__init__(AudioEvent.SETTINGS_MENU_STATE, (0x00, 0x00))

    page = _u8(0)
    item = _u8(1)
    count = _u8(2)


class AudioSettingsItemState(_AudioEvent):
    def __init__(self) -> None:
        super().__init__(AudioEvent.SETTINGS_ITEM_STATE, (0x00,) * 6)

    @property
    def item(self) -> int:
        return self.data[1] & 0x0F

    @item.setter
    def item(self, value: int) -> None:
        self.data[1] = (self.data[1] & 0xF0) | (int(value) & 0x0F)

    @property
    def reload(self) -> bool:
        return get_bit(self.data, 1, 5)

    @reload.setter
    def reload(self, value: bool) -> None:
        set_bit(self.data, 1, 5, value)

    type = _enum(2, AudioSettingsType)


class AudioSettingsExitState(_AudioEvent):
    # Carries the item-state id, as the head unit protocol defines it.
    def __init__(self) -> None:
        super().__init__(AudioEvent.SETTINGS_ITEM_STATE)


class AudioSettingsOpenCommand(_AudioEvent):
    def __init__(self) -> None:
        super().__init__(AudioEvent.SETTINGS_OPEN_CMD)


class AudioSettingsSelectCommand(_AudioEvent):
    def __init__(self, item: int = 0x00) -> None:
        super().__init__(AudioEvent.SETTINGS_SELECT_CMD, (int(item) & 0xFF,))

    item = _u8(0)


class AudioSettingsBackCommand(_AudioEvent):
    def __init__(self) -> None:
        super().__init__(AudioEvent.SETTINGS_BACK_CMD)


class AudioSettingsExitCommand(_AudioEvent):
    def __init__(self) -> None:
        super().__init__(AudioEvent.SETTINGS_EXIT_CMD)


class AudioTrackTitleState(_AudioEvent):
    def __init__(self) -> None:
        super().__init__(AudioEvent.TRACK_TITLE_STATE)


class AudioTrackArtistState(_AudioEvent):
    def __init__(self) -> None:
        super().__init__(AudioEvent.TRACK_ARTIST_STATE)


class AudioTrackAlbumState(_AudioEvent):
    def __init__(self) -> None:
        super().__init__(AudioEvent.TRACK_ALBUM_STATE)


class AudioRadioState(_AudioEvent):
    def __init__(self) -> None:
        super().__init__(AudioEvent.RADIO_STATE, (0x00,) * 5)

    @property
    def seek_mode(self) -> AudioSeek:
        return AudioSeek(int(get_bit(self.data, 0, 0)))

    @seek_mode.setter
    def seek_mode(self, value: AudioSeek) -> None:
        set_bit(self.data, 0, 0, bool(value))

    frequency = _uint(1, 4)

    def toggle_seek_mode(self) -> None:
        """Switch between auto and manual seek."""
        flip_bit(self.data, 0, 0)


class AudioInputState(_AudioEvent):
    def __init__(self) -> None:
        super().__init__(AudioEvent.INPUT_STATE, (0x00,))

    gain = _i8(0)


class AudioSourceSetCommand(_AudioEvent):
    def __init__(self) -> None:
        super().__init__(AudioEvent.SOURCE_SET_CMD, (0x00,))

    source = _enum(0, AudioSource)


class AudioRadioTuneCommand(_AudioEvent):
    def __init__(self) -> None:
        super().__init__(AudioEvent.RADIO_TUNE_CMD, (0x00,) * 4)

    frequency = _uint(0, 4)


class AudioInputGainSetCommand(_AudioEvent):
    def __init__(self) -> None:
        super().__init__(AudioEvent.INPUT_GAIN_SET_CMD, (0x00,))

    gain = _i8(0)


class AudioVolumeSetCommand(_AudioEvent):
    def __init__(self) -> None:
        super().__init__(AudioEvent.VOLUME_SET_CMD, (0x00,))

    volume = _u8(0)


class AudioBalanceSetCommand(_AudioEvent):
    def __init__(self) -> None:
        super().__init__(AudioEvent.BALANCE_SET_CMD, (0x00,))

    balance = _i8(0)


class AudioFadeSetCommand(_AudioEvent):
    # Shares the balance command id on the wire.
    def __init__(self) -> None:
        super().__init__(AudioEvent.BALANCE_SET_CMD, (0x00,))

    fade = _i8(0)


class AudioToneSetCommand(_AudioEvent):
    def __init__(self) -> None:
        super().__init__(AudioEvent.TONE_SET_CMD, (0x00, 0x00, 0x00))

    bass = _i8(0)
    mid = _i8(1)
    treble = _i8(2)