"""Configuration schema and loading."""

from .schema import (
    DeluxConfig,
    MeetingConfig,
    MethodDefaults,
    Preset,
    SequenceDefaults,
    TargetSettings,
)
from .loader import build_config, clamp_speed, load_config

__all__ = [
    "DeluxConfig",
    "MeetingConfig",
    "MethodDefaults",
    "Preset",
    "SequenceDefaults",
    "TargetSettings",
    "build_config",
    "clamp_speed",
    "load_config",
]
