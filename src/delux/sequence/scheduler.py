"""
Sequence scheduler.

Runs at most one sequence at a time. Each tick asks the step source for one
step and hands any command to the executor. Starting a new sequence
cancels the old one; a cancelled sequence never ticks again.
"""

import logging
from enum import Enum
from typing import Callable

from ..errors import DeluxError, DeviceError, InvalidSequenceConfig
from .clock import Clock, TimerHandle
from .steps import Emit, Signal, StepPosition, StepSource

logger = logging.getLogger(__name__)

# Upper bound for sources drained without a tick delay
MAX_IMMEDIATE_STEPS = 1000


class SchedulerState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"
    ERRORED = "errored"
    COMPLETED = "completed"


def validate_sequence(source: StepSource | None, cycle_speed_ms: float) -> None:
    """
    Check that a source can be started with the given tick delay.

    Raises:
        InvalidSequenceConfig: If there is no source, the delay is negative,
            or a looping source has no delay
    """
    if source is None:
        raise InvalidSequenceConfig("No steps were defined")
    if cycle_speed_ms < 0:
        raise InvalidSequenceConfig(f"cycle_speed must be >= 0, got {cycle_speed_ms}")
    if cycle_speed_ms == 0 and source.loop:
        raise InvalidSequenceConfig("A looping sequence needs a cycle_speed above 0")


class SequenceScheduler:
    """
    Owns the single active sequence and its timer.

    Args:
        clock: Anything with call_later(delay, callback, *args) (an asyncio
            loop or a ManualClock)
        execute: Sends one Emit to the device. Raises DeviceError on failure.
        on_error: Called with the DeviceError after a failed tick, once the
            sequence has been halted
    """

    def __init__(
        self,
        clock: Clock,
        execute: Callable[[Emit], None],
        on_error: Callable[[DeviceError], None] | None = None,
    ):
        self.clock = clock
        self._execute = execute
        self._on_error = on_error

        self.state = SchedulerState.IDLE
        self.error: Exception | None = None
        self.tick_count = 0

        self._source: StepSource | None = None
        self._position = StepPosition()
        self._interval = 0.0
        self._handle: TimerHandle | None = None
        # Identifies the live sequence; callbacks carrying another token are stale
        self._token: object | None = None

    @property
    def is_running(self) -> bool:
        return self.state is SchedulerState.RUNNING

    @property
    def source(self) -> StepSource | None:
        return self._source

    @property
    def position(self) -> StepPosition:
        return self._position

    def start(self, source: StepSource, cycle_speed_ms: float) -> None:
        """
        Start a sequence, replacing any running one.

        A zero cycle runs a non-looping source to completion before
        returning. Otherwise the first tick fires after one cycle.
        """
        validate_sequence(source, cycle_speed_ms)

        if self.is_running:
            self.stop()

        source.reset()
        self.state = SchedulerState.IDLE
        token = object()
        self._token = token
        self._source = source
        self._position = StepPosition()
        self._interval = cycle_speed_ms / 1000.0
        self.tick_count = 0
        self.error = None

        self._set_state(SchedulerState.RUNNING)
        logger.info(
            "Sequence started (%s, cycle %sms, loop=%s)",
            type(source).__name__, cycle_speed_ms, source.loop,
        )

        if cycle_speed_ms == 0:
            self._drain(token)
        else:
            self._arm(token)

    def stop(self) -> None:
        """Cancel the running sequence. Does nothing if none is running."""
        if not self.is_running:
            return
        self._cancel()
        self._set_state(SchedulerState.STOPPED)

    def _drain(self, token: object) -> None:
        for _ in range(MAX_IMMEDIATE_STEPS):
            if self._token is not token or not self.is_running:
                return
            self._run_step()

        if self._token is token and self.is_running:
            self._halt(InvalidSequenceConfig(
                f"Sequence did not finish within {MAX_IMMEDIATE_STEPS} steps"
            ))

    def _arm(self, token: object) -> None:
        self._handle = self.clock.call_later(self._interval, self._on_tick, token)

    def _cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._token = None

    def _on_tick(self, token: object) -> None:
        if token is not self._token or not self.is_running:
            logger.debug("Ignoring tick from a superseded sequence")
            return

        self._handle = None
        self._run_step()

        # Re-arm last, and only if this tick left the same sequence running
        if token is self._token and self.is_running:
            self._arm(token)

    def _run_step(self) -> None:
        assert self._source is not None
        self.tick_count += 1
        token = self._token

        try:
            result, position = self._source.next(self._position)

            # The source may have stopped or replaced this sequence
            if token is not self._token or not self.is_running:
                logger.debug("Dropping step from a superseded sequence")
                return
            self._position = position

            if isinstance(result, Emit):
                self._execute(result)
                if result.final:
                    self._complete()
            elif result is not Signal.CONTINUE:
                self._complete()

        except DeviceError as e:
            logger.warning("Device error during sequence, halting: %s", e)
            self._halt(e)
            if self._on_error is not None:
                self._on_error(e)
        except DeluxError as e:
            logger.warning("Sequence step failed, halting: %s", e)
            self._halt(e)
        except Exception as e:
            logger.exception("Unexpected error in sequence step")
            self._halt(e)

    def _complete(self) -> None:
        self._cancel()
        self._set_state(SchedulerState.COMPLETED)

    def _halt(self, error: Exception) -> None:
        self._cancel()
        self.error = error
        self._set_state(SchedulerState.ERRORED)

    def _set_state(self, state: SchedulerState) -> None:
        if state is not self.state:
            logger.info("Sequence %s -> %s", self.state.value, state.value)
        self.state = state
