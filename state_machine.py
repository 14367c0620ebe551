"""
Module: state_machine.py
Purpose: Define building modes and the legal transitions between them.
Provides:
- Mode enumeration and mode-name parsing
- resolve_transition(current, requested, history) -> destination or None
Behavior:
- Normal modes move between each other along the legality table
- Any normal mode may enter an emergency mode
- An emergency mode may only be left for the recorded history mode
This is a pure logic module: no ports, no I/O.
"""

import re
from enum import Enum
from typing import Optional


class Mode(str, Enum):
    CLOSED = "closed"
    OUT_OF_HOURS = "out of hours"
    OPEN = "open"
    FIRE_DRILL = "fire drill"
    FIRE_ALARM = "fire alarm"

    def __str__(self) -> str:
        return self.value

    @property
    def is_emergency(self) -> bool:
        return self in EMERGENCY_MODES


NORMAL_MODES = frozenset({Mode.CLOSED, Mode.OUT_OF_HOURS, Mode.OPEN})
EMERGENCY_MODES = frozenset({Mode.FIRE_DRILL, Mode.FIRE_ALARM})

# Legal targets from each normal mode. Emergency modes are left only
# through the history mode, so they have no fixed row.
TRANSITIONS: dict[Mode, frozenset[Mode]] = {
    Mode.CLOSED: frozenset({Mode.OUT_OF_HOURS}) | EMERGENCY_MODES,
    Mode.OUT_OF_HOURS: frozenset({Mode.OPEN, Mode.CLOSED}) | EMERGENCY_MODES,
    Mode.OPEN: frozenset({Mode.OUT_OF_HOURS}) | EMERGENCY_MODES,
}

_SEPARATOR = re.compile(r"[ _-]")

# A mode name is its words joined by single separators ("out of hours",
# "out_of_hours") or run together ("outofhours").
_ALIASES: dict[tuple[str, ...], Mode] = {}
for _mode in Mode:
    _words = tuple(_mode.value.split(" "))
    _ALIASES[_words] = _mode
    _ALIASES[("".join(_words),)] = _mode


def parse_mode(name) -> Optional[Mode]:
    """
    Map a mode name to a Mode, ignoring case and word separators.
    Args:
        name: Mode instance or name such as "Open", "OUT OF HOURS", "FireAlarm"
    Returns:
        Mode or None if the name is not a known mode
    """
    if isinstance(name, Mode):
        return name
    if not isinstance(name, str):
        return None
    words = tuple(_SEPARATOR.split(name.strip().lower()))
    return _ALIASES.get(words)


def resolve_transition(
    current: Mode,
    requested: Mode,
    history: Optional[Mode],
) -> Optional[Mode]:
    """
    Return the mode the building should move to, or None if illegal.
    Requests for the current mode are handled by the caller.
    """
    if current in EMERGENCY_MODES:
        if history is not None and requested == history:
            return history
        return None
    if requested in TRANSITIONS[current]:
        return requested
    return None


def legal_targets(current: Mode, history: Optional[Mode]) -> frozenset[Mode]:
    """Return every mode reachable from ``current`` in one request."""
    if current in EMERGENCY_MODES:
        return frozenset({history}) if history is not None else frozenset()
    return TRANSITIONS[current]
