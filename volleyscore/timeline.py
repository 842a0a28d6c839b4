from typing import List, Optional

from volleyscore.config import ParserConfig
from volleyscore.engine import apply_rally, process_rally
from volleyscore.models import MatchSnapshot, MatchState


def build_match_timeline(
    rallies: List[str],
    config: Optional[ParserConfig] = None,
    initial: Optional[MatchState] = None,
) -> List[MatchSnapshot]:
    """
    Replays a match from rally strings.
    Returns a snapshot after each rally and stops once the match is finished.
    Does NOT mutate external state.
    """
    config = config or ParserConfig()
    state = initial if initial is not None else MatchState()

    timeline: List[MatchSnapshot] = []

    for index, rally_text in enumerate(rallies):
        if state.is_finished:
            break

        rally = process_rally(config, rally_text)
        state = apply_rally(state, rally)

        timeline.append(MatchSnapshot.from_state(index + 1, state, rally.who.point_to))

    return timeline
