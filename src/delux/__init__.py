"""Delux: modes and sequences for multi-zone indicator lights."""

from .config import DeluxConfig, load_config
from .controller import Controller, DeviceStatus
from .errors import ConfigError, DeluxError, DeviceError, InvalidColor, InvalidSequenceConfig
from .lights import RGB, LuxaforSink, RecordingSink, TargetId

__version__ = "0.1.0"

__all__ = [
    "Controller",
    "DeviceStatus",
    "DeluxConfig",
    "load_config",
    "ConfigError",
    "DeluxError",
    "DeviceError",
    "InvalidColor",
    "InvalidSequenceConfig",
    "RGB",
    "LuxaforSink",
    "RecordingSink",
    "TargetId",
]
