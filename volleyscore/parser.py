import logging
from enum import Enum
from typing import List

from volleyscore.actions import (
    Action,
    ActionType,
    Block,
    Freeball,
    Hit,
    Pass,
    Receive,
    Serve,
    Set,
)
from volleyscore.config import ParserConfig
from volleyscore.exceptions import (
    FirstActionNotServeError,
    InvalidInputError,
    NoActionsError,
    RallyError,
    ServeNotFirstActionError,
)
from volleyscore.reader import (
    Cursor,
    read_height,
    read_player,
    read_serve_position,
    read_team,
    read_zone,
)

LOGGER = logging.getLogger(__name__)


class TokenPosition(str, Enum):
    ONLY = "only"
    FIRST = "first"
    MIDDLE = "middle"
    LAST = "last"

    @property
    def opens_rally(self) -> bool:
        return self in (TokenPosition.ONLY, TokenPosition.FIRST)


def token_positions(count: int) -> List[TokenPosition]:
    if count <= 0:
        return []
    if count == 1:
        return [TokenPosition.ONLY]

    return (
        [TokenPosition.FIRST]
        + [TokenPosition.MIDDLE] * (count - 2)
        + [TokenPosition.LAST]
    )


# =========================================================
# ACTION PARSER
# =========================================================

def parse_action(config: ParserConfig, token: str, position: TokenPosition) -> Action:
    """
    Parse one token: team prefix, player number, then the action code.

    Errors are raised with location 0; parse_rally attaches the token index.
    """
    cursor = Cursor(token)

    team = read_team(cursor, config)
    player = read_player(cursor)

    if position.opens_rally:
        action_type = _parse_first_action(cursor)
    else:
        action_type = _parse_inner_action(cursor, config)

    return Action(team=team, player=player, action_type=action_type)


def _parse_first_action(cursor: Cursor) -> ActionType:
    code = cursor.advance()

    if code is None:
        raise InvalidInputError()

    if code != "S":
        raise FirstActionNotServeError()

    serve_position = read_serve_position(cursor)
    return Serve(serve_position, read_zone(cursor))


def _parse_inner_action(cursor: Cursor, config: ParserConfig) -> ActionType:
    code = cursor.advance()

    if code == "R":
        height = read_height(cursor)
        return Receive(height, read_zone(cursor))

    if code == "P":
        height = read_height(cursor)
        return Pass(height, read_zone(cursor))

    if code == "E":
        if not cursor.at_end():
            raise InvalidInputError()
        return Set()

    if code == "H":
        return Hit(read_zone(cursor))

    if code == "B":
        team = read_team(cursor, config)
        return Block(team, read_zone(cursor))

    if code == "F":
        return Freeball(read_zone(cursor))

    if code == "S":
        raise ServeNotFirstActionError()

    raise InvalidInputError()


# =========================================================
# RALLY PARSER
# =========================================================

def split_tokens(rally: str) -> List[str]:
    # blank input has no tokens
    if not rally.strip():
        return []
    return rally.split(" ")


def parse_rally(config: ParserConfig, rally: str) -> List[Action]:
    """
    Parse a whole rally string into its ordered actions.

    Fails fast: the first bad token aborts the parse and the raised
    RallyError carries that token's index.
    """
    tokens = split_tokens(rally)

    if not tokens:
        raise NoActionsError()

    actions: List[Action] = []

    for index, (token, position) in enumerate(zip(tokens, token_positions(len(tokens)))):
        try:
            actions.append(parse_action(config, token, position))
        except RallyError as exc:
            LOGGER.debug("Rejected token %d %r: %s", index, token, exc.reason.error_msg)
            raise exc.with_location(index) from None

    LOGGER.debug("Parsed rally %r into %d action(s)", rally, len(actions))

    return actions
