"""Configuration file loading."""

import logging
from pathlib import Path
from typing import Any, Mapping

import yaml

from ..errors import ConfigError
from ..lights.targets import TargetId, parse_target
from .schema import (
    DEFAULT_BRIGHTNESS,
    DEFAULT_SPEED,
    DeluxConfig,
    MeetingConfig,
    MethodDefaults,
    Preset,
    SequenceDefaults,
    TargetSettings,
    default_methods,
    default_presets,
)

logger = logging.getLogger(__name__)

# Config file key -> MeetingConfig field
MEETING_KEYS = {
    "total_time": "total_time_min",
    "alternate_time": "alternate_time_min",
    "warn_time": "warn_time_min",
    "color": "color",
    "alternate_color": "alternate_color",
    "warn_color": "warn_color",
    "end_color": "end_color",
    "animated": "animated",
}


def clamp_speed(value: float) -> int:
    """Clamp a transition speed to the device range 0-255."""
    return max(0, min(255, int(value)))


def _section(data: Mapping[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{key}' must be a mapping, got {type(value).__name__}")
    return value


def _brightness(value: Any, where: str) -> float | None:
    if value is None:
        return None
    try:
        brightness = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{where}: brightness must be a number, got {value!r}") from None
    if not 0.0 <= brightness <= 1.0:
        raise ConfigError(f"{where}: brightness must be between 0 and 1, got {brightness}")
    return brightness


def _int(value: Any, where: str, name: str) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{where}: {name} must be an integer, got {value!r}") from None


def _speed(value: Any, where: str) -> int | None:
    speed = _int(value, where, "speed")
    return None if speed is None else clamp_speed(speed)


def _target(value: Any, where: str) -> TargetId | None:
    if value is None:
        return None
    target = parse_target(value)
    if target is None:
        raise ConfigError(f"{where}: unknown target {value!r}")
    return target


def _color(value: Any) -> Any:
    # YAML lists become tuples so configs stay immutable
    if isinstance(value, list):
        return tuple(value)
    return value


def _parse_targets(data: Mapping[str, Any]) -> dict[TargetId, TargetSettings]:
    targets = {}
    for key, target_data in _section(data, "targets").items():
        target = parse_target(key)
        if target is None:
            logger.warning("Ignoring settings for unknown target %r", key)
            continue
        target_data = target_data or {}
        if not isinstance(target_data, dict):
            raise ConfigError(f"targets.{key} must be a mapping")
        where = f"targets.{key}"
        targets[target] = TargetSettings(
            brightness=_brightness(target_data.get("brightness"), where),
            speed=_speed(target_data.get("speed"), where),
        )
    return targets


def _parse_presets(data: Mapping[str, Any]) -> dict[str, Preset]:
    presets = default_presets()
    for name, preset_data in _section(data, "presets").items():
        preset_data = preset_data or {}
        if not isinstance(preset_data, dict):
            raise ConfigError(f"presets.{name} must be a mapping")
        where = f"presets.{name}"
        base = presets.get(name, Preset())
        presets[name] = Preset(
            target=_target(preset_data["target"], where) if "target" in preset_data else base.target,
            color=_color(preset_data["color"]) if "color" in preset_data else base.color,
            speed=_speed(preset_data["speed"], where) if "speed" in preset_data else base.speed,
        )
    return presets


def _parse_methods(data: Mapping[str, Any]) -> dict[str, MethodDefaults]:
    methods = default_methods()
    for name, method_data in _section(data, "methods").items():
        method_data = method_data or {}
        if not isinstance(method_data, dict):
            raise ConfigError(f"methods.{name} must be a mapping")
        where = f"methods.{name}"
        base = methods.get(name, MethodDefaults())
        methods[name] = MethodDefaults(
            target=_target(method_data["target"], where) if "target" in method_data else base.target,
            speed=_speed(method_data["speed"], where) if "speed" in method_data else base.speed,
            wave_type=_int(method_data["type"], where, "type") if "type" in method_data else base.wave_type,
            repeat=_int(method_data["repeat"], where, "repeat") if "repeat" in method_data else base.repeat,
        )
    return methods


def _parse_meeting(data: Mapping[str, Any]) -> MeetingConfig:
    meeting_data = _section(data, "meeting")
    overrides = {}
    for key, value in meeting_data.items():
        if key not in MEETING_KEYS:
            raise ConfigError(f"meeting: unknown option {key!r}")
        if key.endswith("_time") and value is not None:
            try:
                value = float(value)
            except (TypeError, ValueError):
                raise ConfigError(f"meeting: {key} must be a number of minutes, got {value!r}") from None
        overrides[MEETING_KEYS[key]] = _color(value)
    return MeetingConfig().merged(overrides)


def _parse_sequence(data: Mapping[str, Any]) -> SequenceDefaults:
    sequence_data = _section(data, "sequence")
    defaults = SequenceDefaults()
    cycle_speed = _int(sequence_data.get("cycle_speed"), "sequence", "cycle_speed")
    return SequenceDefaults(
        loop=bool(sequence_data.get("loop", defaults.loop)),
        cycle_speed_ms=cycle_speed if cycle_speed is not None else defaults.cycle_speed_ms,
    )


def build_config(data: Mapping[str, Any] | None) -> DeluxConfig:
    """Build a config from an already-parsed mapping, merged over defaults."""
    data = data or {}
    if not isinstance(data, Mapping):
        raise ConfigError("Configuration root must be a mapping")

    brightness = _brightness(data.get("brightness"), "brightness")
    speed = _speed(data.get("speed"), "speed")

    return DeluxConfig(
        brightness=brightness if brightness is not None else DEFAULT_BRIGHTNESS,
        speed=speed if speed is not None else DEFAULT_SPEED,
        targets=_parse_targets(data),
        presets=_parse_presets(data),
        methods=_parse_methods(data),
        meeting=_parse_meeting(data),
        sequence=_parse_sequence(data),
    )


def load_config(config_path: Path) -> DeluxConfig:
    """Load configuration from YAML file."""
    with open(config_path) as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Could not parse {config_path}: {e}") from e

    return build_config(data)
