from dataclasses import dataclass
from typing import Optional

from volleyscore.actions import Team

DEFAULT_AWAY_PREFIX = "@"
DEFAULT_HOME_PREFIX = "!"

SETS_TO_WIN = 3
SET_POINT_CEILING = 25
DECIDING_SET_POINT_CEILING = 15
MIN_WINNING_MARGIN = 2


@dataclass(frozen=True)
class ParserConfig:
    """
    Team prefix characters used in rally notation.
    """
    away_prefix: str = DEFAULT_AWAY_PREFIX
    home_prefix: str = DEFAULT_HOME_PREFIX

    def __post_init__(self):
        for name, prefix in (("away_prefix", self.away_prefix), ("home_prefix", self.home_prefix)):
            if not isinstance(prefix, str) or len(prefix) != 1:
                raise ValueError(f"{name} must be a single character")
            if prefix.isspace() or prefix in "0123456789":
                raise ValueError(f"{name} cannot be whitespace or a digit")

        if self.away_prefix == self.home_prefix:
            raise ValueError("away_prefix and home_prefix must differ")

    def team_for(self, prefix: str) -> Optional[Team]:
        if prefix == self.away_prefix:
            return Team.AWAY
        if prefix == self.home_prefix:
            return Team.HOME
        return None
