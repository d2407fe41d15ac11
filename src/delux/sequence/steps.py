"""
Step sources for sequences.

A step source is asked for one step per scheduler tick. It answers with a
StepResult: either an Emit (send one command) or a Signal (continue without
sending, or stop). Sources never block and never talk to the device.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, Sequence, TypeVar, Union

from ..errors import InvalidSequenceConfig

ACTIONS = ("fade_to", "set_color")


class Signal(Enum):
    """Non-command step results."""
    CONTINUE = "continue"  # keep running, nothing sent this tick
    STOP = "stop"  # generator asked to stop
    DONE = "done"  # static steps exhausted


@dataclass(frozen=True)
class Emit:
    """
    One command to send.

    color and target are unresolved here; the controller resolves them
    (presets, brightness, default target) when the step is executed.
    A final emit completes the sequence once its command has been sent.
    """
    color: Any
    target: Any = None
    speed: int | None = None
    action: str = "fade_to"
    final: bool = False

    def __post_init__(self):
        if self.action not in ACTIONS:
            raise InvalidSequenceConfig(f"Unknown step action {self.action!r}")


StepResult = Union[Emit, Signal]


@dataclass(frozen=True)
class StepPosition:
    """Where a sequence is: next step index and completed loops."""
    index: int = 0
    loop_count: int = 0

    def advanced(self) -> "StepPosition":
        return StepPosition(self.index + 1, self.loop_count)


def to_emit(step: object, action: str = "fade_to") -> Emit:
    """Convert a (color, target[, speed]) tuple to an Emit."""
    if isinstance(step, Emit):
        return step
    if isinstance(step, (tuple, list)) and len(step) in (2, 3):
        speed = step[2] if len(step) == 3 else None
        return Emit(color=step[0], target=step[1], speed=speed, action=action)
    raise InvalidSequenceConfig(f"Step must be (color, target[, speed]), got {step!r}")


class StepSource(ABC):
    """Produces one StepResult per tick."""

    # Looping sources never finish on their own and need a tick delay
    loop: bool = False

    @abstractmethod
    def next(self, position: StepPosition) -> tuple[StepResult, StepPosition]:
        """Return the step for this tick and the position for the next one."""

    def reset(self) -> None:
        """Called each time the source is started."""


class StaticSteps(StepSource):
    """
    A fixed list of steps.

    Usage:
        steps = StaticSteps([("#00F", TargetId.ZONE_1), ("#F00", TargetId.ZONE_2)], loop=True)
    """

    def __init__(self, steps: Sequence[object] | None, loop: bool = False, action: str = "fade_to"):
        if not steps:
            raise InvalidSequenceConfig("No steps were defined")
        self.steps = tuple(to_emit(step, action) for step in steps)
        self.loop = loop

    def next(self, position: StepPosition) -> tuple[StepResult, StepPosition]:
        index = position.index
        loop_count = position.loop_count

        if index >= len(self.steps):
            if not self.loop:
                return Signal.DONE, position
            index = 0
            loop_count += 1

        return self.steps[index], StepPosition(index + 1, loop_count)

    def __len__(self) -> int:
        return len(self.steps)


class GeneratorSteps(StepSource):
    """
    Steps computed on demand by a callable.

    The callable receives the current StepPosition and returns an Emit, a
    (color, target[, speed]) tuple, a Signal, True to continue without
    sending anything, or False/None to stop.
    """

    def __init__(self, fn: Callable[[StepPosition], object], loop: bool = True):
        if not callable(fn):
            raise InvalidSequenceConfig(f"Step generator must be callable, got {fn!r}")
        self.fn = fn
        self.loop = loop

    def next(self, position: StepPosition) -> tuple[StepResult, StepPosition]:
        return _to_result(self.fn(position)), position.advanced()


S = TypeVar("S")


class MachineSteps(StepSource, Generic[S]):
    """
    An explicit state machine.

    step_fn is pure: it maps the current state to (new state, StepResult).
    The latest state is kept on the source so it can be inspected. Starting
    the source again resets it to initial_state.
    """

    def __init__(
        self,
        initial_state: S,
        step_fn: Callable[[S], tuple[S, StepResult]],
        loop: bool = True,
    ):
        self.initial_state = initial_state
        self.state = initial_state
        self.step_fn = step_fn
        self.loop = loop

    def reset(self) -> None:
        self.state = self.initial_state

    def next(self, position: StepPosition) -> tuple[StepResult, StepPosition]:
        self.state, result = self.step_fn(self.state)
        return _to_result(result), position.advanced()


def _to_result(value: object) -> StepResult:
    if isinstance(value, (Emit, Signal)):
        return value
    if value is True:
        return Signal.CONTINUE
    if value is False or value is None:
        return Signal.STOP
    return to_emit(value)


def make_step_source(steps: object, loop: bool = False) -> StepSource:
    """Build a source from a step list, a callable or an existing source."""
    if isinstance(steps, StepSource):
        return steps
    if callable(steps):
        return GeneratorSteps(steps, loop=loop)
    if steps is None or isinstance(steps, (str, bytes)):
        raise InvalidSequenceConfig(f"Steps must be a list or a callable, got {steps!r}")
    try:
        step_list = list(steps)  # type: ignore[call-overload]
    except TypeError:
        raise InvalidSequenceConfig(f"Steps must be a list or a callable, got {steps!r}") from None
    return StaticSteps(step_list, loop=loop)
