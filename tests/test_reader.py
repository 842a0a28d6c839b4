import pytest

from volleyscore.actions import CourtZone, Height, ServePosition, SpecialZone, SubZone, Team
from volleyscore.config import ParserConfig
from volleyscore.exceptions import InvalidInputError, PlayerError, TeamPrefixError
from volleyscore.reader import (
    Cursor,
    height_from_char,
    read_height,
    read_player,
    read_serve_position,
    read_team,
    read_zone,
    zone_from_chars,
)


# ---------------------------------------------------------
# Cursor
# ---------------------------------------------------------

def test_cursor_peek_does_not_consume():
    cursor = Cursor("ab")

    assert cursor.peek() == "a"
    assert cursor.peek() == "a"
    assert cursor.advance() == "a"
    assert cursor.advance() == "b"
    assert cursor.advance() is None
    assert cursor.at_end()


def test_take_optional_leaves_unmatched_char():
    cursor = Cursor("4")

    assert cursor.take_optional(height_from_char) is None
    assert cursor.peek() == "4"


# ---------------------------------------------------------
# Team / player
# ---------------------------------------------------------

@pytest.mark.parametrize("text, expected", [("@", Team.AWAY), ("!", Team.HOME)])
def test_read_team(text, expected):
    assert read_team(Cursor(text), ParserConfig()) == expected


@pytest.mark.parametrize("text", ["", "X", "1"])
def test_read_team_rejects_unknown_prefix(text):
    with pytest.raises(TeamPrefixError):
        read_team(Cursor(text), ParserConfig())


def test_read_team_uses_configured_prefixes():
    config = ParserConfig(away_prefix="a", home_prefix="h")

    assert read_team(Cursor("h"), config) == Team.HOME

    with pytest.raises(TeamPrefixError):
        read_team(Cursor("@"), config)


@pytest.mark.parametrize("text, expected, rest", [
    ("7S", 7, "S"),
    ("12S", 12, "S"),
    ("0", 0, None),
    ("99", 99, None),
    ("05H", 5, "H"),
])
def test_read_player(text, expected, rest):
    cursor = Cursor(text)

    assert read_player(cursor) == expected
    assert cursor.peek() == rest


@pytest.mark.parametrize("text", ["", "S1", "@"])
def test_read_player_requires_first_digit(text):
    with pytest.raises(PlayerError):
        read_player(Cursor(text))


# ---------------------------------------------------------
# Modifiers
# ---------------------------------------------------------

def test_serve_position_is_optional():
    cursor = Cursor("C4")
    assert read_serve_position(cursor) == ServePosition.C
    assert read_serve_position(cursor) is None
    assert cursor.peek() == "4"


@pytest.mark.parametrize("text, expected", [
    ("L", Height.LOW),
    ("M", Height.MID),
    ("H", Height.HIGH),
    ("5", None),
    ("", None),
])
def test_read_height(text, expected):
    assert read_height(Cursor(text)) == expected


@pytest.mark.parametrize("text, expected", [
    ("", None),
    ("4", CourtZone(4)),
    ("4A", CourtZone(4, SubZone.A)),
    ("9D", CourtZone(9, SubZone.D)),
    ("0", SpecialZone.OUT_OF_BOUNDS),
    ("N", SpecialZone.NET),
    ("V", SpecialZone.OVERPASS),
])
def test_read_zone(text, expected):
    assert read_zone(Cursor(text)) == expected


@pytest.mark.parametrize("text", ["X", "4E", "0A", "NB", "4AB", "44"])
def test_read_zone_rejects_bad_input(text):
    with pytest.raises(InvalidInputError):
        read_zone(Cursor(text))


def test_zone_from_chars_only_numbers_take_sub_zone():
    assert zone_from_chars("3", "B") == CourtZone(3, SubZone.B)

    with pytest.raises(InvalidInputError):
        zone_from_chars("V", "A")


def test_court_zone_bounds():
    with pytest.raises(ValueError):
        CourtZone(0)
