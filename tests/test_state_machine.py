import pytest

from state_machine import Mode, legal_targets, parse_mode, resolve_transition


@pytest.mark.parametrize("name, expected", [
    ("closed", Mode.CLOSED),
    ("OUT OF HOURS", Mode.OUT_OF_HOURS),
    ("OutOfHours", Mode.OUT_OF_HOURS),
    ("out_of_hours", Mode.OUT_OF_HOURS),
    ("  Open ", Mode.OPEN),
    ("FireDrill", Mode.FIRE_DRILL),
    ("fire-alarm", Mode.FIRE_ALARM),
    (Mode.OPEN, Mode.OPEN),
])
def test_parse_mode(name, expected):
    assert parse_mode(name) is expected


@pytest.mark.parametrize("name", ["", "history", "opened", None, 3])
def test_parse_unknown(name):
    assert parse_mode(name) is None


def test_mode_values_are_canonical_strings():
    assert [m.value for m in Mode] == [
        "closed", "out of hours", "open", "fire drill", "fire alarm"
    ]
    assert str(Mode.FIRE_ALARM) == "fire alarm"
    assert Mode.FIRE_DRILL.is_emergency
    assert not Mode.OPEN.is_emergency


def test_normal_table():
    assert legal_targets(Mode.CLOSED, None) == {
        Mode.OUT_OF_HOURS, Mode.FIRE_DRILL, Mode.FIRE_ALARM
    }
    assert legal_targets(Mode.OUT_OF_HOURS, None) == {
        Mode.OPEN, Mode.CLOSED, Mode.FIRE_DRILL, Mode.FIRE_ALARM
    }
    assert legal_targets(Mode.OPEN, None) == {
        Mode.OUT_OF_HOURS, Mode.FIRE_DRILL, Mode.FIRE_ALARM
    }


def test_closed_cannot_open_directly():
    assert resolve_transition(Mode.CLOSED, Mode.OPEN, None) is None
    assert resolve_transition(Mode.OPEN, Mode.CLOSED, None) is None


@pytest.mark.parametrize("emergency", [Mode.FIRE_DRILL, Mode.FIRE_ALARM])
def test_emergency_exits_to_history_only(emergency):
    assert legal_targets(emergency, Mode.OPEN) == {Mode.OPEN}
    assert resolve_transition(emergency, Mode.OPEN, Mode.OPEN) is Mode.OPEN
    assert resolve_transition(emergency, Mode.CLOSED, Mode.OPEN) is None
    assert resolve_transition(emergency, Mode.OUT_OF_HOURS, Mode.OPEN) is None


def test_emergency_to_emergency_is_illegal():
    assert resolve_transition(Mode.FIRE_DRILL, Mode.FIRE_ALARM, Mode.CLOSED) is None
    assert resolve_transition(Mode.FIRE_ALARM, Mode.FIRE_DRILL, Mode.CLOSED) is None


def test_emergency_without_history_has_no_exit():
    assert legal_targets(Mode.FIRE_ALARM, None) == frozenset()
    assert resolve_transition(Mode.FIRE_ALARM, Mode.OPEN, None) is None


@pytest.mark.parametrize("name", [
    "o p e n", "c-l_o-s_e-d", "fi re dr ill", "out  of hours", "outof hours", "fire__alarm",
])
def test_garbled_names_rejected(name):
    assert parse_mode(name) is None
