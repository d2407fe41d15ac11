"""
Device command sinks.

A sink applies already-resolved commands to the physical light. The engine
only ever talks to this narrow interface; hardware transports and test
doubles both implement it.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Iterable

from ..errors import DeviceError
from .color import RGB
from .targets import TargetId

logger = logging.getLogger(__name__)


class DeviceCommandSink(ABC):
    """
    Interface for sending commands to an indicator light.

    Every method either applies the command or raises DeviceError. Calls must
    not block for long: the scheduler waits on them inside a tick.
    """

    @abstractmethod
    def set_color(self, color: RGB, target: TargetId) -> None:
        """Set target LEDs to a color immediately."""

    @abstractmethod
    def fade_to(self, color: RGB, target: TargetId, speed: int) -> None:
        """Fade target LEDs to a color at the given speed (0-255)."""

    @abstractmethod
    def flash(
        self,
        color: RGB,
        speed: int,
        repeat: int,
        target: TargetId = TargetId.ALL,
    ) -> None:
        """Strobe a color `repeat` times."""

    @abstractmethod
    def wave(self, color: RGB, wave_type: int, speed: int, repeat: int) -> None:
        """
        Run a wave of color across the LEDs.

        Wave types: 1 short, 2 long, 3 overlapping short, 4 overlapping long.
        """

    @abstractmethod
    def off(self) -> None:
        """Turn every LED off."""


@dataclass(frozen=True)
class SinkCall:
    """One command received by a RecordingSink."""
    command: str
    args: tuple[Any, ...]

    @property
    def color(self) -> RGB | None:
        if self.args and isinstance(self.args[0], RGB):
            return self.args[0]
        return None

    @property
    def target(self) -> TargetId | None:
        if self.command in ("set_color", "fade_to"):
            return self.args[1]
        if self.command == "flash":
            return self.args[3]
        return None


class RecordingSink(DeviceCommandSink):
    """
    Sink that records commands instead of driving hardware.

    Used for tests and for running without a device attached. Calls listed in
    `fail_on` (1-based, counting every command) raise DeviceError.
    """

    def __init__(self, fail_on: Iterable[int] = ()):
        self.calls: list[SinkCall] = []
        self.fail_on = set(fail_on)
        self._count = 0

    def _record(self, command: str, *args: Any) -> None:
        self._count += 1
        if self._count in self.fail_on:
            raise DeviceError(f"{command} failed (call {self._count})")
        self.calls.append(SinkCall(command, args))
        logger.debug("%s%r", command, args)

    def set_color(self, color: RGB, target: TargetId) -> None:
        self._record("set_color", color, target)

    def fade_to(self, color: RGB, target: TargetId, speed: int) -> None:
        self._record("fade_to", color, target, speed)

    def flash(
        self,
        color: RGB,
        speed: int,
        repeat: int,
        target: TargetId = TargetId.ALL,
    ) -> None:
        self._record("flash", color, speed, repeat, target)

    def wave(self, color: RGB, wave_type: int, speed: int, repeat: int) -> None:
        self._record("wave", color, wave_type, speed, repeat)

    def off(self) -> None:
        self._record("off")

    @property
    def call_count(self) -> int:
        """Number of commands attempted, including failed ones."""
        return self._count

    def commands(self, command: str | None = None) -> list[SinkCall]:
        """Recorded calls, optionally filtered by command name."""
        if command is None:
            return list(self.calls)
        return [c for c in self.calls if c.command == command]

    def clear(self) -> None:
        self.calls.clear()
