"""Light addressing, colors and device command sinks."""

from .color import RGB, ColorSpec, darken, parse_color, random_rgb, scale_lightness
from .luxafor import LuxaforSink
from .sink import DeviceCommandSink, RecordingSink, SinkCall
from .targets import EACH_ALL, EACH_BOTTOM, EACH_TOP, TargetId, parse_target

__all__ = [
    "RGB",
    "ColorSpec",
    "darken",
    "parse_color",
    "random_rgb",
    "scale_lightness",
    "LuxaforSink",
    "DeviceCommandSink",
    "RecordingSink",
    "SinkCall",
    "EACH_ALL",
    "EACH_BOTTOM",
    "EACH_TOP",
    "TargetId",
    "parse_target",
]
