from dataclasses import dataclass, replace
from typing import Dict, Union


@dataclass(frozen=True)
class Reason:
    """
    Failure payload handed back to the host.

    location is the 0-based index of the offending token.
    """
    error_msg: str
    location: int = 0

    def with_location(self, location: int) -> "Reason":
        return replace(self, location=location)

    def to_dict(self) -> Dict[str, Union[str, int]]:
        return {"errorMsg": self.error_msg, "location": self.location}


class RallyError(Exception):
    message = "There's a mistake somewhere in your input"

    def __init__(self, location: int = 0):
        self.reason = Reason(self.message, location)
        super().__init__(self.message)

    @property
    def location(self) -> int:
        return self.reason.location

    def with_location(self, location: int) -> "RallyError":
        return type(self)(location)

    def __str__(self):
        return f"{self.reason.error_msg} (token {self.reason.location})"


class TeamPrefixError(RallyError):
    message = "Expected team prefix here."


class PlayerError(RallyError):
    message = "Expected the players number here."


class InvalidInputError(RallyError):
    message = "There's a mistake somewhere in your input"


class FirstActionNotServeError(RallyError):
    message = "The first action must be a serve."


class ServeNotFirstActionError(RallyError):
    message = "A serve can only be used for the first action"


class NoActionsError(RallyError):
    message = "At least 1 action required."


class MatchFinishedError(Exception):
    pass

