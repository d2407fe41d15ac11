"""Exception types raised by the Delux engine."""


class DeluxError(Exception):
    """Base class for all Delux errors."""


class InvalidColor(DeluxError, ValueError):
    """A color spec is neither a preset, a hex string nor an RGB triple."""

    def __init__(self, spec: object):
        self.spec = spec
        super().__init__(f"Invalid color: {spec!r}")


class DeviceError(DeluxError):
    """The device command sink failed to apply a command."""


class InvalidSequenceConfig(DeluxError, ValueError):
    """A sequence was requested without usable steps or timing."""


class ConfigError(DeluxError, ValueError):
    """The configuration file or mapping is malformed."""
