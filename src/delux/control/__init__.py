"""HTTP control interface."""

from .server import ControlServer, create_app

__all__ = [
    "ControlServer",
    "create_app",
]
