"""Momentarily drive a digital output, as if pressing a push button."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, IntEnum

from .core import Clock

LOW = 0
HIGH = 1
_U32 = 0xFFFFFFFF


class OutputMode(Enum):
    """How the pin behaves when triggered."""

    MOMENTARILY_HIGH = "high"
    MOMENTARILY_LOW = "low"
    MOMENTARILY_DRAIN = "drain"


class PinMode(IntEnum):
    INPUT = 0
    OUTPUT = 1


class GPIO(ABC):
    """Access to digital and analog pins."""

    @abstractmethod
    def pin_mode(self, pin: int, mode: PinMode) -> None:
        """Configure a pin as input or output."""

    @abstractmethod
    def digital_write(self, pin: int, value: int) -> None:
        """Drive a pin HIGH or LOW."""

    @abstractmethod
    def analog_read(self, pin: int) -> int:
        """Read the analog value of a pin."""


@dataclass
class FakeGPIO(GPIO):
    """GPIO that records pin modes and levels in memory."""

    modes: dict[int, PinMode] = field(default_factory=dict)
    levels: dict[int, int] = field(default_factory=dict)
    analog: dict[int, int] = field(default_factory=dict)

    def pin_mode(self, pin: int, mode: PinMode) -> None:
        self.modes[pin] = PinMode(mode)

    def digital_write(self, pin: int, value: int) -> None:
        self.levels[pin] = HIGH if value else LOW

    def analog_read(self, pin: int) -> int:
        return self.analog.get(pin, 0)


class _Phase(IntEnum):
    IDLE = 0
    ON = 1
    COOLDOWN = 2


class MomentaryOutput:
    """Hold a pin "on" for ``trigger_ms`` then block retriggering for
    ``cooldown_ms`` (defaults to ``trigger_ms``)."""

    def __init__(
        self,
        pin: int,
        trigger_ms: int,
        gpio: GPIO,
        cooldown_ms: int | None = None,
        mode: OutputMode = OutputMode.MOMENTARILY_HIGH,
        clock: Clock | None = None,
    ) -> None:
        self._pin = pin
        self._gpio = gpio
        self._clock = clock if clock is not None else Clock()
        self._mode = mode
        self._trigger_ms = trigger_ms
        self._cooldown_ms = trigger_ms if cooldown_ms is None or cooldown_ms < 0 else cooldown_ms
        self._phase = _Phase.IDLE
        self._trigger_time = 0

    def init(self) -> None:
        """Put the pin into its idle state."""
        self._gpio.pin_mode(self._pin, PinMode.OUTPUT)
        if self._mode is OutputMode.MOMENTARILY_HIGH:
            self._gpio.digital_write(self._pin, HIGH)
        elif self._mode is OutputMode.MOMENTARILY_LOW:
            self._gpio.pin_mode(self._pin, PinMode.OUTPUT)
            self._gpio.digital_write(self._pin, LOW)
        else:
            self._gpio.digital_write(self._pin, HIGH)
            self._gpio.pin_mode(self._pin, PinMode.INPUT)

    def _elapsed(self) -> int:
        return (self._clock.millis() - self._trigger_time) & _U32

    def update(self) -> None:
        """Advance the trigger state. Call on every loop iteration."""
        if self._phase is _Phase.IDLE:
            return
        if self._elapsed() >= self._trigger_ms + self._cooldown_ms:
            self._phase = _Phase.IDLE
        elif self._phase is _Phase.ON and self._elapsed() >= self._trigger_ms:
            self._phase = _Phase.COOLDOWN
            if self._mode is OutputMode.MOMENTARILY_HIGH:
                self._gpio.digital_write(self._pin, LOW)
            elif self._mode is OutputMode.MOMENTARILY_LOW:
                self._gpio.digital_write(self._pin, HIGH)
            else:
                self._gpio.digital_write(self._pin, HIGH)
                self._gpio.pin_mode(self._pin, PinMode.INPUT)

    def trigger(self) -> bool:
        """Turn the pin on. Return False if it is on or cooling down."""
        if self._phase is not _Phase.IDLE:
            return False
        if self._mode is OutputMode.MOMENTARILY_HIGH:
            self._gpio.digital_write(self._pin, HIGH)
        elif self._mode is OutputMode.MOMENTARILY_LOW:
            self._gpio.digital_write(self._pin, LOW)
        else:
            self._gpio.pin_mode(self._pin, PinMode.OUTPUT)
            self._gpio.digital_write(self._pin, LOW)
        self._phase = _Phase.ON
        self._trigger_time = self._clock.millis()
        return True