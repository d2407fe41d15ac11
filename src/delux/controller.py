"""
Controller - the host-facing facade.

The Controller combines:
- Settings resolution (presets, brightness, default targets and speeds)
- The sequence scheduler (one active sequence at a time)
- A device command sink (the light itself)

Every mode call returns as soon as its first commands are sent; sequences
keep running on later clock ticks. Device failures never escape a mode call:
they are latched into the device status instead.
"""

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any, Callable

from .config.loader import MEETING_KEYS
from .config.schema import DeluxConfig
from .errors import DeviceError
from .lights.color import RGB, random_rgb
from .lights.sink import DeviceCommandSink
from .sequence.clock import Clock
from .sequence.modes import (
    MEETING_CYCLE_MS,
    MEETING_FLASH_REPEAT,
    MEETING_SPEED,
    MeetingPlan,
    disco_steps,
    france_steps,
    meeting_steps,
)
from .sequence.scheduler import SequenceScheduler, validate_sequence
from .sequence.steps import Emit, StepSource, make_step_source
from .settings.presets import PresetLibrary
from .settings.resolver import Command, SettingsResolver

logger = logging.getLogger(__name__)

# Used when neither the caller nor the config gives a value
FALLBACK_FLASH_REPEAT = 5
FALLBACK_WAVE_TYPE = 2
FALLBACK_WAVE_REPEAT = 5


@dataclass(frozen=True)
class DeviceStatus:
    """Result of the last device interaction."""
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_json(self) -> bool | str:
        """True when healthy, otherwise the error message."""
        return True if self.error is None else str(self.error)


class Controller:
    """
    Drives an indicator light through named modes.

    Usage:
        controller = Controller(config, LuxaforSink(), asyncio.get_running_loop())
        controller.set_busy()
        controller.set_meeting(total_time=30)
        if not controller.get_status().ok:
            ...
    """

    def __init__(
        self,
        config: DeluxConfig | None,
        sink: DeviceCommandSink,
        clock: Clock | None = None,
        rng: random.Random | None = None,
    ):
        self.config = config or DeluxConfig.with_defaults()
        self.sink = sink
        self.presets = PresetLibrary(self.config.presets)
        self.resolver = SettingsResolver(self.config, self.presets)
        self.scheduler = SequenceScheduler(
            clock if clock is not None else asyncio.get_running_loop(),
            self._execute,
            on_error=self._safety_off,
        )
        self._rng = rng or random.Random()
        self._status = DeviceStatus()

        # Name of the last mode applied
        self.mode: str | None = None

    # === Status ===

    @property
    def status(self) -> DeviceStatus:
        return self._status

    def get_status(self) -> DeviceStatus:
        return self._status

    # === Modes ===

    def off(self) -> None:
        """Stop any sequence and turn every LED off."""
        self._turn_off()
        self._set_mode("off")

    def set_available(self) -> None:
        self._apply_preset("available", "available")

    def set_busy(self) -> None:
        self._apply_preset("busy", "busy")

    def set_do_not_disturb(self) -> None:
        """Uses the "dnd" preset, or "busy" when no dnd preset is configured."""
        preset = "dnd" if "dnd" in self.presets else "busy"
        self._apply_preset(preset, "dnd")

    def set_random(self, target: Any = None, speed: int | None = None) -> None:
        """Fade to a random color."""
        command = self.resolver.resolve_command(random_rgb(self._rng), target, speed, method="fade_to")
        self._turn_off()
        self._send(self.sink.fade_to, command.color, command.target, self._fade_speed(command, speed))
        self._set_mode("random")

    def set_disco(self, cycle_speed_ms: float | None = None) -> None:
        """Each tick, fade a random zone to a random color. Runs until replaced."""
        cycle = self._cycle_speed(cycle_speed_ms)
        source = disco_steps(self._rng)
        validate_sequence(source, cycle)

        self._turn_off()
        self.scheduler.start(source, cycle)
        self._set_mode("disco")

    def set_france(self) -> None:
        """Blue, white, red across the top row and again across the bottom row."""
        self._turn_off()
        self.scheduler.start(france_steps(), 0)
        self._set_mode("france")

    def set_meeting(self, **options: Any) -> None:
        """
        Start the meeting timer.

        Options use the config file names (total_time, alternate_time,
        warn_time, color, alternate_color, warn_color, end_color, animated)
        and override the configured meeting settings for this meeting only.
        None values are ignored.

        Raises:
            InvalidColor: If a meeting color is invalid (nothing is sent)
            TypeError: For unknown options
        """
        overrides = {MEETING_KEYS.get(key, key): value for key, value in options.items()}
        plan = MeetingPlan.from_config(self.config.meeting.merged(overrides))
        source = meeting_steps(plan)
        flash = self.resolver.resolve_command(plan.color, speed=MEETING_SPEED, method="flash")

        self._turn_off()
        self._send(self.sink.flash, flash.color, flash.speed, MEETING_FLASH_REPEAT, flash.target)
        self.scheduler.start(source, MEETING_CYCLE_MS)
        self._set_mode("meeting")
        logger.info(
            "Meeting: %ss total, warning at %ss, alternating every %ss",
            plan.end_time, plan.warn_time, plan.alternate_time,
        )

    # === Direct commands ===

    def set_color(self, color: Any, target: Any = None) -> None:
        command = self.resolver.resolve_command(color, target, method="set_color")
        self._send(self.sink.set_color, command.color, command.target)
        self._set_mode("color")

    def fade_to(self, color: Any, target: Any = None, speed: int | None = None) -> None:
        command = self.resolver.resolve_command(color, target, speed, method="fade_to")
        self._send(self.sink.fade_to, command.color, command.target, command.speed)
        self._set_mode("color")

    def flash(
        self,
        color: Any,
        speed: int | None = None,
        repeat: int | None = None,
        target: Any = None,
    ) -> None:
        command = self.resolver.resolve_command(color, target, speed, method="flash")
        defaults = self.config.method_defaults("flash")
        if repeat is None:
            repeat = defaults.repeat if defaults and defaults.repeat is not None else FALLBACK_FLASH_REPEAT
        self._send(self.sink.flash, command.color, command.speed, repeat, command.target)
        self._set_mode("flash")

    def wave(
        self,
        color: Any,
        wave_type: int | None = None,
        speed: int | None = None,
        repeat: int | None = None,
    ) -> None:
        command = self.resolver.resolve_command(color, None, speed, method="wave")
        defaults = self.config.method_defaults("wave")
        if wave_type is None:
            wave_type = defaults.wave_type if defaults and defaults.wave_type is not None else FALLBACK_WAVE_TYPE
        if repeat is None:
            repeat = defaults.repeat if defaults and defaults.repeat is not None else FALLBACK_WAVE_REPEAT
        self._send(self.sink.wave, command.color, wave_type, command.speed, repeat)
        self._set_mode("wave")

    def set_to_off(self, target: Any = None) -> None:
        """Switch the target LEDs off without stopping the sequence."""
        command = self.resolver.resolve_command(RGB.black(), target, method="set_color")
        self._send(self.sink.set_color, command.color, command.target)

    def fade_to_off(self, target: Any = None, speed: int | None = None) -> None:
        command = self.resolver.resolve_command(RGB.black(), target, speed, method="fade_to")
        self._send(self.sink.fade_to, command.color, command.target, self._fade_speed(command, speed))

    # === Sequences ===

    def set_sequence(
        self,
        steps: list[Any] | Callable[..., Any] | StepSource,
        loop: bool | None = None,
        cycle_speed_ms: float | None = None,
    ) -> None:
        """
        Start a custom sequence of fade_to steps.

        Args:
            steps: (color, target[, speed]) tuples, or a callable invoked once
                per tick with the StepPosition
            loop: Restart from the first step when done (default from config)
            cycle_speed_ms: Delay between steps (default from config)

        Raises:
            InvalidSequenceConfig: For missing steps, or a looping sequence
                with no delay
        """
        if loop is None:
            loop = self.config.sequence.loop
        source = make_step_source(steps, loop)
        self.scheduler.start(source, self._cycle_speed(cycle_speed_ms))
        self._set_mode("sequence")

    def stop_sequence(self) -> None:
        self.scheduler.stop()

    # === Internals ===

    def _cycle_speed(self, cycle_speed_ms: float | None) -> float:
        if cycle_speed_ms is None:
            return self.config.sequence.cycle_speed_ms
        return cycle_speed_ms

    def _fade_speed(self, command: Command, speed: int | None) -> int:
        # Random colors and fades to off use the target's speed, not fade_to's
        if speed is not None:
            return command.speed
        return self.resolver.resolve_speed(command.target)

    def _apply_preset(self, preset: str, mode: str) -> None:
        # Resolve first so an invalid preset color sends nothing
        command = self.resolver.resolve_command(preset, method="set_color")
        self._turn_off()
        self._send(self.sink.set_color, command.color, command.target)
        self._set_mode(mode)

    def _turn_off(self) -> None:
        self.scheduler.stop()
        self._send(self.sink.off)

    def _set_mode(self, mode: str) -> None:
        if mode != self.mode:
            logger.info("Mode: %s", mode)
        self.mode = mode

    def _call(self, method: Callable[..., None], *args: Any) -> None:
        """Run one sink call and latch the outcome. Re-raises DeviceError."""
        logger.debug("%s%r", method.__name__, args)
        try:
            method(*args)
        except DeviceError as e:
            logger.warning("Device error in %s: %s", method.__name__, e)
            self._status = DeviceStatus(error=e)
            raise
        self._status = DeviceStatus()

    def _send(self, method: Callable[..., None], *args: Any) -> bool:
        """Run one sink call for a mode call. Returns False on device error."""
        try:
            self._call(method, *args)
        except DeviceError:
            return False
        return True

    def _execute(self, emit: Emit) -> None:
        """Resolve and send one sequence step."""
        command = self.resolver.resolve_command(emit.color, emit.target, emit.speed, method=emit.action)
        if emit.action == "set_color":
            self._call(self.sink.set_color, command.color, command.target)
        else:
            self._call(self.sink.fade_to, command.color, command.target, command.speed)

    def _safety_off(self, error: DeviceError) -> None:
        # Status keeps the error that halted the sequence
        try:
            self.sink.off()
        except DeviceError:
            logger.debug("Safety off after device error failed", exc_info=True)
