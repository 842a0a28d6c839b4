from typing import Callable, Optional, TypeVar

from volleyscore.actions import (
    CourtZone,
    Height,
    ServePosition,
    SpecialZone,
    SubZone,
    Team,
    Zone,
)
from volleyscore.config import ParserConfig
from volleyscore.exceptions import InvalidInputError, PlayerError, TeamPrefixError

T = TypeVar("T")

DIGITS = "0123456789"


class Cursor:
    """
    One-character lookahead over a single token.
    """

    def __init__(self, text: str):
        self._text = text
        self._index = 0

    def peek(self) -> Optional[str]:
        if self._index >= len(self._text):
            return None
        return self._text[self._index]

    def advance(self) -> Optional[str]:
        c = self.peek()
        if c is not None:
            self._index += 1
        return c

    def at_end(self) -> bool:
        return self._index >= len(self._text)

    def take_optional(self, classify: Callable[[str], T]) -> Optional[T]:
        """
        Peek-then-consume: the next character is consumed only when
        classify accepts it, otherwise it is left for the next reader.
        """
        c = self.peek()
        if c is None:
            return None

        try:
            value = classify(c)
        except InvalidInputError:
            return None

        self.advance()
        return value


# =========================================================
# CHARACTER CLASSIFIERS
# =========================================================

def serve_position_from_char(c: str) -> ServePosition:
    try:
        return ServePosition(c)
    except ValueError:
        raise InvalidInputError() from None


def sub_zone_from_char(c: str) -> SubZone:
    try:
        return SubZone(c)
    except ValueError:
        raise InvalidInputError() from None


def height_from_char(c: str) -> Height:
    try:
        return Height(c)
    except ValueError:
        raise InvalidInputError() from None


def zone_from_chars(zone: str, sub_zone: Optional[str] = None) -> Zone:
    if len(zone) == 1 and zone in "123456789":
        sz = sub_zone_from_char(sub_zone) if sub_zone is not None else None
        return CourtZone(int(zone), sz)

    # sub zones only refine numbered zones
    if sub_zone is not None:
        raise InvalidInputError()

    try:
        return SpecialZone(zone)
    except ValueError:
        raise InvalidInputError() from None


# =========================================================
# CURSOR READERS
# =========================================================

def read_team(cursor: Cursor, config: ParserConfig) -> Team:
    c = cursor.advance()
    team = config.team_for(c) if c is not None else None

    if team is None:
        raise TeamPrefixError()

    return team


def read_player(cursor: Cursor) -> int:
    first = cursor.advance()
    if first is None or first not in DIGITS:
        raise PlayerError()

    second = cursor.take_optional(_digit)
    if second is None:
        return int(first)

    return int(first) * 10 + second


def read_serve_position(cursor: Cursor) -> Optional[ServePosition]:
    return cursor.take_optional(serve_position_from_char)


def read_height(cursor: Cursor) -> Optional[Height]:
    return cursor.take_optional(height_from_char)


def read_zone(cursor: Cursor) -> Optional[Zone]:
    """
    Optional trailing zone: a zone character plus, for numbered zones,
    an optional sub zone letter. Nothing may follow.
    """
    zone = cursor.advance()
    if zone is None:
        return None

    sub_zone = cursor.advance()

    if not cursor.at_end():
        raise InvalidInputError()

    return zone_from_chars(zone, sub_zone)


def _digit(c: str) -> int:
    if c not in DIGITS:
        raise InvalidInputError()
    return int(c)
