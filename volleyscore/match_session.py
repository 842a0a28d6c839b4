import logging
from copy import deepcopy
from typing import List, Optional

from volleyscore.actions import Rally
from volleyscore.config import ParserConfig
from volleyscore.engine import apply_rally, process_rally
from volleyscore.exceptions import MatchFinishedError, RallyError
from volleyscore.models import MatchSnapshot, MatchState

LOGGER = logging.getLogger(__name__)


class MatchSession:
    """
    Single local scorekeeping session.

    Responsibilities:
    - Resolve rallies typed by the operator against the current state
    - Bulk replay rally strings (atomic)
    - Store timeline snapshots
    - Export the accepted rally strings
    """

    def __init__(self, config: Optional[ParserConfig] = None, state: Optional[MatchState] = None):
        self._config = config or ParserConfig()
        self._initial = deepcopy(state) if state is not None else MatchState()
        self._state = deepcopy(self._initial)
        self._timeline: List[MatchSnapshot] = []
        self._rallies: List[str] = []
        self._last_rally: Optional[Rally] = None

    @property
    def state(self) -> MatchState:
        return deepcopy(self._state)

    @property
    def last_rally(self) -> Optional[Rally]:
        return self._last_rally

    # ---------------------------------------------------------
    # Core API
    # ---------------------------------------------------------

    def submit(self, rally_text: str) -> MatchState:
        """
        Resolve one rally and commit it.
        On RallyError the session is left as it was.
        """
        if self._state.is_finished:
            raise MatchFinishedError("Match already finished")

        try:
            rally = process_rally(self._config, rally_text)
        except RallyError as exc:
            LOGGER.warning("Rejected rally %r: %s", rally_text, exc)
            raise

        self._state = apply_rally(self._state, rally)
        self._last_rally = rally
        self._rallies.append(rally_text)
        self._timeline.append(
            MatchSnapshot.from_state(len(self._rallies), self._state, rally.who.point_to)
        )

        LOGGER.info(
            "Rally %d to %s, score %d-%d (sets %d-%d)",
            len(self._rallies),
            rally.who.point_to.value,
            self._state.away_team.points,
            self._state.home_team.points,
            self._state.away_team.sets,
            self._state.home_team.sets,
        )

        return self.state

    def load_rallies(self, rallies: List[str]) -> List[MatchSnapshot]:
        """
        Bulk load rally strings, replayed from the session's initial state.
        Atomic: if any rally fails -> no state mutation.
        """
        if not isinstance(rallies, list):
            raise ValueError("rallies must be a list")

        temp = MatchSession(self._config, self._initial)
        for rally_text in rallies:
            temp.submit(rally_text)

        # If everything succeeds → commit
        self._state = temp._state
        self._timeline = temp._timeline
        self._rallies = temp._rallies
        self._last_rally = temp._last_rally

        return deepcopy(self._timeline)

    def get_snapshot(self) -> MatchSnapshot:
        if not self._timeline:
            raise RuntimeError("No rallies submitted")

        return self._timeline[-1]

    def get_timeline(self) -> List[MatchSnapshot]:
        return deepcopy(self._timeline)

    def export_rallies(self) -> List[str]:
        return list(self._rallies)

    def reset(self):
        self._state = deepcopy(self._initial)
        self._timeline = []
        self._rallies = []
        self._last_rally = None
