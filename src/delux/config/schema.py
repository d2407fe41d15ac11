"""Configuration dataclasses."""

from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping

from ..lights.color import ColorSpec
from ..lights.targets import TargetId

DEFAULT_BRIGHTNESS = 1.0
DEFAULT_SPEED = 20


@dataclass(frozen=True)
class TargetSettings:
    """Per-target overrides. None means "use the global value"."""
    brightness: float | None = None  # 0.0-1.0
    speed: int | None = None  # 0-255


@dataclass(frozen=True)
class Preset:
    """A named color selection (e.g. "available", "busy")."""
    target: TargetId | None = None
    color: ColorSpec | None = None
    speed: int | None = None


@dataclass(frozen=True)
class MethodDefaults:
    """Defaults for one device method (set_color, fade_to, flash, wave)."""
    target: TargetId | None = None
    speed: int | None = None
    wave_type: int | None = None  # "type" in config files
    repeat: int | None = None


@dataclass(frozen=True)
class MeetingConfig:
    """Meeting timer settings. Times are in minutes."""
    total_time_min: float = 45
    alternate_time_min: float = 0
    warn_time_min: float = 5
    color: ColorSpec = "#00FF00"
    alternate_color: ColorSpec = "#0000FF"
    warn_color: ColorSpec = "#FFFF00"
    end_color: ColorSpec = "#FF0000"
    animated: bool = True

    def merged(self, overrides: Mapping[str, Any]) -> "MeetingConfig":
        """
        Return a copy with overrides applied.

        None values are ignored so callers can pass through optional inputs
        unchanged. Unknown keys raise TypeError.
        """
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise TypeError(f"Unknown meeting options: {sorted(unknown)}")
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


@dataclass(frozen=True)
class SequenceDefaults:
    """Defaults for generic sequences."""
    loop: bool = False
    cycle_speed_ms: int = 200


def default_presets() -> dict[str, Preset]:
    return {
        "available": Preset(target=TargetId.TOP, color="#0F0"),
        "busy": Preset(target=TargetId.TOP, color="#F00"),
    }


def default_methods() -> dict[str, MethodDefaults]:
    return {
        "set_color": MethodDefaults(target=TargetId.ALL),
        "fade_to": MethodDefaults(target=TargetId.TOP, speed=20),
        "flash": MethodDefaults(target=TargetId.TOP, speed=180, repeat=5),
        "wave": MethodDefaults(wave_type=2, speed=90, repeat=5),
    }


@dataclass(frozen=True)
class DeluxConfig:
    """
    Main application configuration.

    Built once (defaults, then file values, then explicit overrides) and never
    mutated afterwards; resolvers only read from it.
    """
    brightness: float = DEFAULT_BRIGHTNESS
    speed: int = DEFAULT_SPEED
    targets: Mapping[TargetId, TargetSettings] = field(default_factory=dict)
    presets: Mapping[str, Preset] = field(default_factory=default_presets)
    methods: Mapping[str, MethodDefaults] = field(default_factory=default_methods)
    meeting: MeetingConfig = field(default_factory=MeetingConfig)
    sequence: SequenceDefaults = field(default_factory=SequenceDefaults)

    def target_settings(self, target: object) -> TargetSettings | None:
        """Overrides for a target, or None for unknown/unconfigured targets."""
        try:
            return self.targets.get(target)  # type: ignore[call-overload]
        except TypeError:
            return None

    def method_defaults(self, method: str | None) -> MethodDefaults | None:
        if method is None:
            return None
        return self.methods.get(method)

    @classmethod
    def with_defaults(cls) -> "DeluxConfig":
        """Create config with the built-in defaults."""
        return cls()
