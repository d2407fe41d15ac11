"""
LED target addressing for six-zone indicator lights.

The device exposes six individually addressable zones, arranged as a top row
(zones 1-3) and a bottom row (zones 4-6), plus group addresses for each row
and for the whole light. Enum values are the ids used on the wire.
"""

from enum import IntEnum


class TargetId(IntEnum):
    """Addressable LED target."""
    ZONE_1 = 0x01
    ZONE_2 = 0x02
    ZONE_3 = 0x03
    ZONE_4 = 0x04
    ZONE_5 = 0x05
    ZONE_6 = 0x06
    TOP = 0x41
    BOTTOM = 0x42
    ALL = 0xFF

    @property
    def is_zone(self) -> bool:
        """True for a single zone, False for a group address."""
        return self in EACH_ALL

    @property
    def zones(self) -> tuple["TargetId", ...]:
        """Individual zones covered by this target."""
        return GROUP_ZONES.get(self, (self,))


EACH_TOP: tuple[TargetId, ...] = (TargetId.ZONE_1, TargetId.ZONE_2, TargetId.ZONE_3)
EACH_BOTTOM: tuple[TargetId, ...] = (TargetId.ZONE_4, TargetId.ZONE_5, TargetId.ZONE_6)
EACH_ALL: tuple[TargetId, ...] = EACH_TOP + EACH_BOTTOM

GROUP_ZONES: dict[TargetId, tuple[TargetId, ...]] = {
    TargetId.TOP: EACH_TOP,
    TargetId.BOTTOM: EACH_BOTTOM,
    TargetId.ALL: EACH_ALL,
}

# Friendly names accepted in config files and query strings
_ALIASES: dict[str, TargetId] = {
    "top": TargetId.TOP,
    "bottom": TargetId.BOTTOM,
    "all": TargetId.ALL,
}


def parse_target(value: object) -> TargetId | None:
    """
    Parse a target from config or user input.

    Accepts a TargetId, a wire id (int or "0x41"), a zone number ("1"-"6"),
    a zone name ("zone_1") or a group name ("top", "bottom", "all").

    Returns:
        The matching TargetId, or None if the value names no known target
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, TargetId):
        return value
    if isinstance(value, int):
        try:
            return TargetId(value)
        except ValueError:
            return None
    if not isinstance(value, str):
        return None

    text = value.strip().lower()
    if text in _ALIASES:
        return _ALIASES[text]
    if text.startswith("zone_"):
        text = text[len("zone_"):]
    try:
        number = int(text, 16) if text.startswith("0x") else int(text)
    except ValueError:
        return None
    try:
        return TargetId(number)
    except ValueError:
        return None
