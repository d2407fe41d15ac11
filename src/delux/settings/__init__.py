"""Layered settings resolution."""

from .presets import PresetLibrary
from .resolver import Command, SettingsResolver

__all__ = [
    "Command",
    "PresetLibrary",
    "SettingsResolver",
]
