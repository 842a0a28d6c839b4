import logging
from typing import Any, Dict, Optional

from volleyscore.actions import Rally
from volleyscore.config import ParserConfig
from volleyscore.exceptions import RallyError
from volleyscore.models import MatchState
from volleyscore.parser import parse_rally
from volleyscore.scoring import build_update, who_scored

LOGGER = logging.getLogger(__name__)


def process_rally(config: ParserConfig, rally_text: str) -> Rally:
    """
    Parse a rally string and decide who won it.
    """
    actions = parse_rally(config, rally_text)
    who = who_scored(actions)

    LOGGER.debug(
        "Rally %r: point to %s (scored=%s, faulted=%s)",
        rally_text,
        who.point_to.value,
        who.scored.player if who.scored else None,
        who.faulted.player if who.faulted else None,
    )

    return Rally(actions=actions, who=who)


def apply_rally(state: MatchState, rally: Rally) -> MatchState:
    return state.update(build_update(rally.actions, rally.who))


def resolve_rally(config: ParserConfig, rally_text: str, current_state: MatchState) -> MatchState:
    """
    Parse, score and aggregate one rally.

    Raises RallyError (with the offending token index) on bad input;
    current_state is never modified.
    """
    return apply_rally(current_state, process_rally(config, rally_text))


def parse_rally_command(
    rally: str,
    current_stats: Dict[str, Any],
    config: Optional[ParserConfig] = None,
) -> Dict[str, Any]:
    """
    Host-facing command working on the camelCase JSON payloads.

    Returns {"Ok": new_state} or {"Fail": reason}.
    """
    config = config or ParserConfig()
    state = MatchState.from_dict(current_stats)

    try:
        new_state = resolve_rally(config, rally, state)
    except RallyError as exc:
        return {"Fail": exc.reason.to_dict()}

    return {"Ok": new_state.to_dict()}
