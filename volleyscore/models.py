import logging
from copy import deepcopy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from volleyscore.actions import Team
from volleyscore.config import (
    DECIDING_SET_POINT_CEILING,
    MIN_WINNING_MARGIN,
    SET_POINT_CEILING,
    SETS_TO_WIN,
)

LOGGER = logging.getLogger(__name__)


@dataclass
class PlayerScores:
    scored: int = 0
    faults: int = 0
    all: int = 0

    def merge(self, other: "PlayerScores") -> "PlayerScores":
        return PlayerScores(
            scored=self.scored + other.scored,
            faults=self.faults + other.faults,
            all=self.all + other.all,
        )

    def to_dict(self) -> Dict[str, int]:
        return {"scored": self.scored, "faults": self.faults, "all": self.all}

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "PlayerScores":
        return PlayerScores(
            scored=_count(d.get("scored", 0)),
            faults=_count(d.get("faults", 0)),
            all=_count(d.get("all", 0)),
        )


@dataclass
class PlayerStats:
    player: int
    hits: PlayerScores = field(default_factory=PlayerScores)
    blocks: PlayerScores = field(default_factory=PlayerScores)
    serves: PlayerScores = field(default_factory=PlayerScores)

    def merge(self, other: "PlayerStats") -> "PlayerStats":
        if other.player != self.player:
            raise ValueError(f"Cannot merge stats of player {other.player} into {self.player}")

        return PlayerStats(
            player=self.player,
            hits=self.hits.merge(other.hits),
            blocks=self.blocks.merge(other.blocks),
            serves=self.serves.merge(other.serves),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player": self.player,
            "hits": self.hits.to_dict(),
            "blocks": self.blocks.to_dict(),
            "serves": self.serves.to_dict(),
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "PlayerStats":
        return PlayerStats(
            player=_count(d["player"]),
            hits=PlayerScores.from_dict(d.get("hits", {}) or {}),
            blocks=PlayerScores.from_dict(d.get("blocks", {}) or {}),
            serves=PlayerScores.from_dict(d.get("serves", {}) or {}),
        )


@dataclass
class TeamStats:
    sets: int = 0
    points: int = 0
    player_stats: Dict[int, PlayerStats] = field(default_factory=dict)

    def merge_player_stats(self, deltas: Dict[int, PlayerStats]):
        for player, delta in deltas.items():
            current = self.player_stats.get(player, PlayerStats(player=player))
            self.player_stats[player] = current.merge(delta)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sets": self.sets,
            "points": self.points,
            "playerStats": {
                str(player): stats.to_dict()
                for player, stats in sorted(self.player_stats.items())
            },
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "TeamStats":
        player_stats = {}
        for key, raw in (d.get("playerStats", {}) or {}).items():
            stats = PlayerStats.from_dict(raw)
            if int(key) != stats.player:
                raise ValueError(f"playerStats key {key} does not match player {stats.player}")
            player_stats[stats.player] = stats

        return TeamStats(
            sets=_count(d.get("sets", 0)),
            points=_count(d.get("points", 0)),
            player_stats=player_stats,
        )


class MatchStatus(str, Enum):
    IN_PROGRESS = "InProgress"
    FINISHED = "Finished"


@dataclass
class UpdateMatchState:
    """
    Outcome of one rally: who gets the point plus per-player stat deltas.
    """
    point_to: Team
    away_player_stats: Dict[int, PlayerStats] = field(default_factory=dict)
    home_player_stats: Dict[int, PlayerStats] = field(default_factory=dict)


def set_point_ceiling(completed_sets: int) -> int:
    # the fifth set is played to 15
    if completed_sets >= (SETS_TO_WIN - 1) * 2:
        return DECIDING_SET_POINT_CEILING
    return SET_POINT_CEILING


@dataclass
class MatchState:
    away_team: TeamStats = field(default_factory=TeamStats)
    home_team: TeamStats = field(default_factory=TeamStats)
    status: MatchStatus = MatchStatus.IN_PROGRESS

    @property
    def is_finished(self) -> bool:
        return self.status is MatchStatus.FINISHED

    @property
    def set_number(self) -> int:
        played = self.away_team.sets + self.home_team.sets
        return played if self.is_finished else played + 1

    def team(self, team: Team) -> TeamStats:
        return self.away_team if team is Team.AWAY else self.home_team

    def get_set_winner(self) -> Optional[Team]:
        if self.away_team.points > self.home_team.points:
            leader = Team.AWAY
        elif self.home_team.points > self.away_team.points:
            leader = Team.HOME
        else:
            return None

        winning = self.team(leader)
        losing = self.team(leader.get_opponent())
        ceiling = set_point_ceiling(winning.sets + losing.sets)

        if winning.points >= ceiling and winning.points - losing.points >= MIN_WINNING_MARGIN:
            return leader

        return None

    def get_match_winner(self) -> Optional[Team]:
        if self.away_team.sets >= SETS_TO_WIN:
            return Team.AWAY
        if self.home_team.sets >= SETS_TO_WIN:
            return Team.HOME
        return None

    def update(self, update: UpdateMatchState) -> "MatchState":
        """
        Apply one rally and return the new state. self is left untouched.
        A finished match is returned unchanged.
        """
        new_state = deepcopy(self)

        if new_state.is_finished:
            LOGGER.debug("Match already finished, ignoring point to %s", update.point_to.value)
            return new_state

        new_state.team(update.point_to).points += 1

        set_winner = new_state.get_set_winner()
        if set_winner is not None:
            LOGGER.info(
                "Set %d won by %s %d-%d",
                new_state.set_number,
                set_winner.value,
                new_state.team(set_winner).points,
                new_state.team(set_winner.get_opponent()).points,
            )
            new_state.away_team.points = 0
            new_state.home_team.points = 0
            new_state.team(set_winner).sets += 1

        if new_state.get_match_winner() is not None:
            LOGGER.info("Match finished, won by %s", new_state.get_match_winner().value)
            new_state.status = MatchStatus.FINISHED

        new_state.away_team.merge_player_stats(update.away_player_stats)
        new_state.home_team.merge_player_stats(update.home_player_stats)

        return new_state

    def to_dict(self) -> Dict[str, Any]:
        return {
            "awayTeam": self.away_team.to_dict(),
            "homeTeam": self.home_team.to_dict(),
            "status": self.status.value,
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "MatchState":
        if not isinstance(d, dict):
            raise ValueError("match state must be a mapping")

        try:
            state = MatchState(
                away_team=TeamStats.from_dict(d.get("awayTeam", {}) or {}),
                home_team=TeamStats.from_dict(d.get("homeTeam", {}) or {}),
                status=MatchStatus(d.get("status", MatchStatus.IN_PROGRESS.value)),
            )
        except (KeyError, TypeError, AttributeError) as exc:
            raise ValueError(f"Malformed match state: {exc}") from exc

        sets = (state.away_team.sets, state.home_team.sets)
        if max(sets) > SETS_TO_WIN or min(sets) >= SETS_TO_WIN:
            raise ValueError(f"Impossible set count: {sets[0]}-{sets[1]}")

        if state.is_finished != (state.get_match_winner() is not None):
            raise ValueError(f"Status {state.status.value} does not match sets {sets[0]}-{sets[1]}")

        return state


@dataclass
class MatchSnapshot:
    rally_index: int
    set_number: int
    points_away: int
    points_home: int
    sets_away: int
    sets_home: int
    point_to: Team
    is_finished: bool

    @staticmethod
    def from_state(rally_index: int, state: MatchState, point_to: Team) -> "MatchSnapshot":
        return MatchSnapshot(
            rally_index=rally_index,
            set_number=state.set_number,
            points_away=state.away_team.points,
            points_home=state.home_team.points,
            sets_away=state.away_team.sets,
            sets_home=state.home_team.sets,
            point_to=point_to,
            is_finished=state.is_finished,
        )


def _count(value: Any) -> int:
    number = int(value)
    if number < 0:
        raise ValueError(f"Counts cannot be negative: {value}")
    return number
