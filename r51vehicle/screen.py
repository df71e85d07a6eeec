"""Screen page and power events."""

from __future__ import annotations

from enum import IntEnum

from .core import Event, SubSystem


class ScreenPage(IntEnum):
    SPLASH = 0
    HOME = 1
    CLIMATE = 2
    AUDIO = 3
    AUDIO_TRACK = 4
    AUDIO_RADIO = 5
    AUDIO_AUX = 6
    AUDIO_POWER_OFF = 7
    AUDIO_NO_STEREO = 8
    AUDIO_VOLUME = 9
    AUDIO_SOURCE = 10
    AUDIO_SETTINGS = 11
    AUDIO_EQ = 12
    VEHICLE = 13
    SETTINGS = 14
    SETTINGS_1 = 15
    SETTINGS_2 = 16
    SETTINGS_3 = 17
    SHARED = 18
    BLANK = 19


class ScreenEvent(IntEnum):
    POWER_STATE = 0x00
    PAGE_STATE = 0x01

    POWER_CMD = 0x10
    BRIGHTNESS_CMD = 0x11

    NAV_UP_CMD = 0x20
    NAV_DOWN_CMD = 0x21
    NAV_LEFT_CMD = 0x22
    NAV_RIGHT_CMD = 0x23
    NAV_ACTIVATE_CMD = 0x24
    NAV_HOME_CMD = 0x25
    NAV_PAGE_NEXT_CMD = 0x26
    NAV_PAGE_PREV_CMD = 0x27


class ScreenPageState(Event):
    """The page currently shown."""

    def __init__(self) -> None:
        super().__init__(SubSystem.SCREEN, ScreenEvent.PAGE_STATE, (0x00,))

    @property
    def page(self) -> ScreenPage:
        return ScreenPage(self.data[0])

    @page.setter
    def page(self, value: ScreenPage) -> None:
        self.data[0] = int(value) & 0xFF


class ScreenPowerState(Event):
    """Display power and brightness. Defaults to on at full brightness."""

    def __init__(self) -> None:
        super().__init__(SubSystem.SCREEN, ScreenEvent.POWER_STATE, (0x01, 0xFF))

    @property
    def power(self) -> bool:
        return self.data[0] != 0x00

    @power.setter
    def power(self, value: bool) -> None:
        self.data[0] = int(bool(value))

    @property
    def brightness(self) -> int:
        return self.data[1]

    @brightness.setter
    def brightness(self, value: int) -> None:
        self.data[1] = int(value) & 0xFF