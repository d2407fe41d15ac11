"""
Built-in sequences: disco, France and the meeting timer.
"""

import random
from dataclasses import dataclass, replace
from enum import Enum
from functools import partial

from ..config.schema import MeetingConfig
from ..lights.color import RGB, darken, parse_color, random_rgb
from ..lights.targets import EACH_ALL, TargetId
from .steps import Emit, GeneratorSteps, MachineSteps, Signal, StaticSteps, StepPosition, StepResult

# Blue, white, red over the top row, then again over the bottom row
FRANCE_STEPS = (
    ("#00F", TargetId.ZONE_1),
    ("#FFF", TargetId.ZONE_2),
    ("#F00", TargetId.ZONE_3),
    ("#00F", TargetId.ZONE_4),
    ("#FFF", TargetId.ZONE_5),
    ("#F00", TargetId.ZONE_6),
)

MEETING_CYCLE_MS = 1000
MEETING_TARGET = TargetId.TOP
MEETING_SPEED = 90
MEETING_FLASH_REPEAT = 5


def disco_steps(rng: random.Random | None = None) -> GeneratorSteps:
    """Endless source fading a random zone to a random color each tick."""
    rng = rng or random.Random()

    def step(position: StepPosition) -> Emit:
        return Emit(color=random_rgb(rng), target=rng.choice(EACH_ALL))

    return GeneratorSteps(step, loop=True)


def france_steps() -> StaticSteps:
    return StaticSteps(FRANCE_STEPS, loop=False)


def _seconds(minutes: float) -> float:
    # Round away float noise so e.g. 0.05 min is exactly 3 s
    return round(float(minutes) * 60, 3)


class MeetingPhase(Enum):
    NORMAL = "normal"
    WARN = "warn"
    ENDED = "ended"


@dataclass(frozen=True)
class MeetingPlan:
    """
    A meeting's timings in seconds, with its colors already parsed.

    warn_time is the moment the warning starts, counted from the start.
    """
    end_time: float
    warn_time: float
    alternate_time: float
    color: RGB
    alternate_color: RGB
    warn_color: RGB
    end_color: RGB
    animated: bool = True

    @classmethod
    def from_config(cls, meeting: MeetingConfig) -> "MeetingPlan":
        """
        Convert minutes to seconds and parse colors.

        Raises:
            InvalidColor: If any meeting color is invalid
        """
        end_time = _seconds(meeting.total_time_min)
        return cls(
            end_time=end_time,
            warn_time=end_time - _seconds(meeting.warn_time_min),
            alternate_time=_seconds(meeting.alternate_time_min),
            color=parse_color(meeting.color),
            alternate_color=parse_color(meeting.alternate_color),
            warn_color=parse_color(meeting.warn_color),
            end_color=parse_color(meeting.end_color),
            animated=bool(meeting.animated),
        )


@dataclass(frozen=True)
class MeetingState:
    """
    tick: seconds elapsed (ticks run)
    current_color: the phase color (before pulsing)
    shown_color: last color sent, None before the first command
    """
    tick: int = 0
    phase: MeetingPhase = MeetingPhase.NORMAL
    current_color: RGB | None = None
    shown_color: RGB | None = None


def _show(plan: MeetingPlan, state: MeetingState) -> tuple[MeetingState, StepResult]:
    if plan.animated:
        # Pulse: odd seconds dim, even seconds full
        color = darken(state.current_color) if state.tick % 2 else state.current_color
        return (
            replace(state, shown_color=color),
            Emit(color, MEETING_TARGET, MEETING_SPEED, action="fade_to"),
        )

    if state.current_color == state.shown_color:
        return state, Signal.CONTINUE
    return (
        replace(state, shown_color=state.current_color),
        Emit(state.current_color, MEETING_TARGET, MEETING_SPEED, action="set_color"),
    )


def meeting_step(plan: MeetingPlan, state: MeetingState) -> tuple[MeetingState, StepResult]:
    """Advance the meeting timer by one second."""
    t = state.tick + 1

    if t < plan.warn_time:
        color = state.current_color or plan.color
        if plan.alternate_time > 0 and t % plan.alternate_time == 0:
            color = plan.color if color == plan.alternate_color else plan.alternate_color
        return _show(plan, replace(state, tick=t, phase=MeetingPhase.NORMAL, current_color=color))

    if t < plan.end_time:
        return _show(plan, replace(state, tick=t, phase=MeetingPhase.WARN, current_color=plan.warn_color))

    ended = replace(
        state,
        tick=t,
        phase=MeetingPhase.ENDED,
        current_color=plan.end_color,
        shown_color=plan.end_color,
    )
    action = "fade_to" if plan.animated else "set_color"
    return ended, Emit(plan.end_color, MEETING_TARGET, MEETING_SPEED, action=action, final=True)


def meeting_steps(plan: MeetingPlan) -> MachineSteps[MeetingState]:
    """Source running the meeting timer; one tick per second."""
    return MachineSteps(MeetingState(), partial(meeting_step, plan), loop=True)
