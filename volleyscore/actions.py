from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union


class Team(str, Enum):
    AWAY = "Away"
    HOME = "Home"

    def get_opponent(self) -> "Team":
        return Team.HOME if self is Team.AWAY else Team.AWAY


class ServePosition(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    F = "F"


class SubZone(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"


class Height(str, Enum):
    LOW = "L"
    MID = "M"
    HIGH = "H"


class SpecialZone(str, Enum):
    OUT_OF_BOUNDS = "0"
    NET = "N"
    OVERPASS = "V"


@dataclass(frozen=True)
class CourtZone:
    """
    One of the nine numbered court zones, optionally refined by a sub zone.
    """
    position: int
    sub_zone: Optional[SubZone] = None

    def __post_init__(self):
        if not 1 <= self.position <= 9:
            raise ValueError(f"Court zone must be 1-9, got {self.position}")


Zone = Union[CourtZone, SpecialZone]


def is_in_court(zone: Optional[Zone]) -> bool:
    return isinstance(zone, CourtZone)


def is_fault_zone(zone: Optional[Zone]) -> bool:
    return zone in (SpecialZone.OUT_OF_BOUNDS, SpecialZone.NET)


# =========================================================
# ACTION TYPES
# =========================================================

@dataclass(frozen=True)
class Serve:
    serve_position: Optional[ServePosition] = None
    zone: Optional[Zone] = None


@dataclass(frozen=True)
class Receive:
    height: Optional[Height] = None
    zone: Optional[Zone] = None


@dataclass(frozen=True)
class Pass:
    height: Optional[Height] = None
    zone: Optional[Zone] = None


@dataclass(frozen=True)
class Set:
    pass


@dataclass(frozen=True)
class Hit:
    zone: Optional[Zone] = None


@dataclass(frozen=True)
class Block:
    # Side the block is attributed to, written after the B code.
    team: Team
    zone: Optional[Zone] = None


@dataclass(frozen=True)
class Freeball:
    zone: Optional[Zone] = None


ActionType = Union[Serve, Receive, Pass, Set, Hit, Block, Freeball]


# =========================================================
# RALLY
# =========================================================

@dataclass(frozen=True)
class Action:
    team: Team
    player: int
    action_type: ActionType

    def __post_init__(self):
        if not 0 <= self.player <= 99:
            raise ValueError(f"Player number must be 0-99, got {self.player}")


@dataclass(frozen=True)
class Scored:
    team: Team
    player: int
    action_type: ActionType


@dataclass(frozen=True)
class WhoScored:
    """
    Verdict for one rally. At least one of scored/faulted is set.
    """
    point_to: Team
    scored: Optional[Scored] = None
    faulted: Optional[Scored] = None

    def __post_init__(self):
        if self.scored is None and self.faulted is None:
            raise ValueError("WhoScored needs a scored or a faulted action")


@dataclass(frozen=True)
class Rally:
    actions: List[Action]
    who: WhoScored
