"""Step sources, clocks and the sequence scheduler."""

from .clock import Clock, ManualClock
from .modes import (
    MeetingPhase,
    MeetingPlan,
    MeetingState,
    disco_steps,
    france_steps,
    meeting_step,
    meeting_steps,
)
from .scheduler import SchedulerState, SequenceScheduler, validate_sequence
from .steps import (
    Emit,
    GeneratorSteps,
    MachineSteps,
    Signal,
    StaticSteps,
    StepPosition,
    StepResult,
    StepSource,
    make_step_source,
)

__all__ = [
    "Clock",
    "ManualClock",
    "MeetingPhase",
    "MeetingPlan",
    "MeetingState",
    "disco_steps",
    "france_steps",
    "meeting_step",
    "meeting_steps",
    "SchedulerState",
    "SequenceScheduler",
    "validate_sequence",
    "Emit",
    "GeneratorSteps",
    "MachineSteps",
    "Signal",
    "StaticSteps",
    "StepPosition",
    "StepResult",
    "StepSource",
    "make_step_source",
]
