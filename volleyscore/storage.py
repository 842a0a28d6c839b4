import json
from pathlib import Path

from volleyscore.models import MatchState


def load_match(path: Path) -> MatchState:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    return MatchState.from_dict(data)


def save_match(path: Path, match: MatchState):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(match.to_dict(), f, indent=4)
