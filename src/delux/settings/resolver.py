"""
Settings resolution.

Every device command carries a color, a target and (for transitions) a speed.
Callers may leave any of these unspecified; the resolver fills them in from
the layered configuration:

    global defaults  <  per-target overrides  <  method defaults  <  presets

Brightness is the exception: it only has a global value and per-target
overrides, and is applied by scaling the color's HSL lightness.
"""

from dataclasses import dataclass

from ..config.loader import clamp_speed
from ..config.schema import DeluxConfig
from ..errors import InvalidColor
from ..lights.color import RGB, parse_color, scale_lightness
from ..lights.targets import TargetId, parse_target
from .presets import PresetLibrary

# Used when a preset has no color of its own
PRESET_FALLBACK_COLOR = "#FFF"


@dataclass(frozen=True)
class Command:
    """A fully resolved device command."""
    color: RGB
    target: TargetId
    speed: int


class SettingsResolver:
    """
    Resolves effective command settings from a config snapshot.

    Stateless apart from the (immutable) config it reads.
    """

    def __init__(self, config: DeluxConfig, presets: PresetLibrary | None = None):
        self.config = config
        self.presets = presets if presets is not None else PresetLibrary(config.presets)

    def brightness_for(self, target: object = None) -> float:
        """Per-target brightness override if set, otherwise the global brightness."""
        settings = self.config.target_settings(target) if target is not None else None
        if settings is not None and settings.brightness is not None:
            return settings.brightness
        return self.config.brightness

    def resolve_color(self, color: object, target: object = None) -> RGB:
        """
        Resolve a color spec to the RGB value sent to the device.

        Args:
            color: Preset name, hex string, 0xRRGGBB integer, RGB value or
                (r, g, b) sequence
            target: Target whose brightness override applies, if any

        Returns:
            Color with lightness scaled by the effective brightness

        Raises:
            InvalidColor: If the spec cannot be parsed
        """
        seen: set[str] = set()
        while self._is_preset_name(color):
            if color in seen:
                raise InvalidColor(color)
            seen.add(color)
            preset = self.presets.lookup(color)
            color = preset.color if preset.color is not None else PRESET_FALLBACK_COLOR

        return scale_lightness(parse_color(color), self.brightness_for(target))

    def resolve_speed(
        self,
        target: object = None,
        method: str | None = None,
        preset: str | None = None,
    ) -> int:
        """
        Resolve a transition speed.

        Precedence: preset speed, then method speed, then the target's speed
        override, then the global speed. Result is clamped to 0-255.
        """
        preset_settings = self.presets.lookup(preset) if preset else None
        if preset_settings is not None and preset_settings.speed is not None:
            return clamp_speed(preset_settings.speed)

        method_settings = self.config.method_defaults(method)
        if method_settings is not None and method_settings.speed is not None:
            return clamp_speed(method_settings.speed)

        target_settings = self.config.target_settings(target) if target is not None else None
        if target_settings is not None and target_settings.speed is not None:
            return clamp_speed(target_settings.speed)

        return clamp_speed(self.config.speed)

    def resolve_target(self, method: str | None = None, preset: str | None = None) -> TargetId:
        """
        Resolve the target for a command with no explicit target.

        Precedence: preset target, then method target, then ALL.
        """
        preset_settings = self.presets.lookup(preset) if preset else None
        if preset_settings is not None and preset_settings.target is not None:
            return preset_settings.target

        method_settings = self.config.method_defaults(method)
        if method_settings is not None and method_settings.target is not None:
            return method_settings.target

        return TargetId.ALL

    def resolve_command(
        self,
        color: object,
        target: object = None,
        speed: int | None = None,
        method: str | None = None,
    ) -> Command:
        """
        Resolve every field of a command at once.

        An explicit target or speed wins over configured values. A target that
        names no known LED falls back to the resolved default target.
        """
        preset = color if self._is_preset_name(color) else None
        resolved_target = parse_target(target)
        if resolved_target is None:
            resolved_target = self.resolve_target(method, preset)

        return Command(
            color=self.resolve_color(color, resolved_target),
            target=resolved_target,
            speed=clamp_speed(speed) if speed is not None else self.resolve_speed(
                resolved_target, method, preset
            ),
        )

    def _is_preset_name(self, color: object) -> bool:
        return isinstance(color, str) and not color.startswith("#") and color in self.presets
