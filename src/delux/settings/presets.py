"""Preset registry."""

from typing import Iterator, Mapping

from ..config.schema import Preset


class PresetLibrary:
    """
    Named presets, looked up by the resolver and the mode builders.

    Usage:
        library = PresetLibrary(config.presets)
        busy = library.lookup("busy")
    """

    def __init__(self, presets: Mapping[str, Preset]):
        self._presets = dict(presets)

    def lookup(self, name: object) -> Preset | None:
        """Get a preset by name, or None if not found."""
        if not isinstance(name, str):
            return None
        return self._presets.get(name)

    def names(self) -> list[str]:
        """List of all preset names."""
        return list(self._presets.keys())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name in self._presets

    def __iter__(self) -> Iterator[str]:
        return iter(self._presets)

    def __len__(self) -> int:
        return len(self._presets)
