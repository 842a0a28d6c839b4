from typing import Dict, List, Optional

from volleyscore.actions import (
    Action,
    Block,
    Freeball,
    Hit,
    Pass,
    Receive,
    Scored,
    Serve,
    Set,
    SpecialZone,
    Team,
    WhoScored,
    is_fault_zone,
    is_in_court,
)
from volleyscore.exceptions import NoActionsError
from volleyscore.models import PlayerScores, PlayerStats, UpdateMatchState

# PlayerStats attribute counted for each action kind
STAT_CATEGORIES = {
    Serve: "serves",
    Hit: "hits",
    Block: "blocks",
}


def _credit(action: Action) -> Scored:
    return Scored(team=action.team, player=action.player, action_type=action.action_type)


def _scores(action: Action) -> WhoScored:
    return WhoScored(point_to=action.team, scored=_credit(action))


def _faults(action: Action) -> WhoScored:
    return WhoScored(point_to=action.team.get_opponent(), faulted=_credit(action))


def who_scored(actions: List[Action]) -> WhoScored:
    """
    Decide the rally from its last action and, where needed, the one
    before it (the related action).
    """
    if not actions:
        raise NoActionsError()

    last = actions[-1]
    related: Optional[Action] = actions[-2] if len(actions) > 1 else None
    action_type = last.action_type

    if isinstance(action_type, (Serve, Hit, Freeball)):
        if is_fault_zone(action_type.zone):
            return _faults(last)
        return _scores(last)

    if isinstance(action_type, (Receive, Pass)):
        if action_type.zone is SpecialZone.OVERPASS:
            return _scores(last)
        if related is not None:
            return _scores(related)
        return _faults(last)

    if isinstance(action_type, Set):
        # The setter takes the blame for any rally ending on a set.
        return _faults(last)

    if isinstance(action_type, Block):
        zone = action_type.zone
        blocked_opponent = action_type.team is not last.team and (zone is None or is_in_court(zone))

        if blocked_opponent:
            if related is not None:
                return WhoScored(point_to=last.team, faulted=_credit(related))
            return _scores(last)

        if related is not None:
            return _scores(related)
        return _faults(last)

    raise TypeError(f"Unknown action type: {action_type!r}")


# =========================================================
# PER-RALLY STATS
# =========================================================

def _category(scored: Optional[Scored]) -> Optional[str]:
    if scored is None:
        return None
    return STAT_CATEGORIES.get(type(scored.action_type))


def _player_entry(stats: Dict[Team, Dict[int, PlayerStats]], team: Team, player: int) -> PlayerStats:
    by_player = stats[team]
    if player not in by_player:
        by_player[player] = PlayerStats(player=player)
    return by_player[player]


def _bump(stats: PlayerStats, category: str, scored: int = 0, faults: int = 0, seen: int = 0):
    current: PlayerScores = getattr(stats, category)
    setattr(stats, category, current.merge(PlayerScores(scored, faults, seen)))


def build_update(actions: List[Action], who: WhoScored) -> UpdateMatchState:
    """
    Per-player stat deltas for one rally.

    Every serve/hit/block counts towards its player's `all`; the player
    credited or blamed by the verdict also gets one `scored` or `faults`.
    """
    stats: Dict[Team, Dict[int, PlayerStats]] = {Team.AWAY: {}, Team.HOME: {}}

    for action in actions:
        category = STAT_CATEGORIES.get(type(action.action_type))
        if category is None:
            continue
        _bump(_player_entry(stats, action.team, action.player), category, seen=1)

    category = _category(who.scored)
    if category is not None:
        _bump(_player_entry(stats, who.scored.team, who.scored.player), category, scored=1)

    category = _category(who.faulted)
    if category is not None:
        _bump(_player_entry(stats, who.faulted.team, who.faulted.player), category, faults=1)

    return UpdateMatchState(
        point_to=who.point_to,
        away_player_stats=stats[Team.AWAY],
        home_player_stats=stats[Team.HOME],
    )
