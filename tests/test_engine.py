import pytest

from volleyscore.actions import Team
from volleyscore.config import ParserConfig
from volleyscore.engine import parse_rally_command, process_rally, resolve_rally
from volleyscore.exceptions import InvalidInputError, TeamPrefixError
from volleyscore.models import MatchState, MatchStatus, PlayerScores, TeamStats


def create_state(away_sets=0, away_points=0, home_sets=0, home_points=0):
    return MatchState(
        away_team=TeamStats(sets=away_sets, points=away_points),
        home_team=TeamStats(sets=home_sets, points=home_points),
    )


INITIAL_PAYLOAD = {
    "awayTeam": {"sets": 0, "points": 0, "playerStats": {}},
    "homeTeam": {"sets": 0, "points": 0, "playerStats": {}},
    "status": "InProgress",
}


# ---------- RALLY VERDICTS ----------

def test_serve_in_court_point_to_server():
    rally = process_rally(ParserConfig(), "@1SA4")

    assert rally.who.point_to == Team.AWAY
    assert rally.who.scored.player == 1
    assert len(rally.actions) == 1


def test_serve_out_point_to_receiver():
    rally = process_rally(ParserConfig(), "@1SA0")

    assert rally.who.point_to == Team.HOME
    assert rally.who.faulted.player == 1


def test_hit_out_point_to_other_team():
    rally = process_rally(ParserConfig(), "@1SA4 !2H0")

    assert rally.who.point_to == Team.AWAY
    assert rally.who.faulted.player == 2
    assert rally.who.faulted.team == Team.HOME


def test_rally_is_deterministic():
    config = ParserConfig()
    text = "@1SB6 !2RM3 !3E !4H5A @7B!"

    assert process_rally(config, text) == process_rally(config, text)


# ---------- RESOLVE ----------

def test_resolve_rally_updates_points_and_stats():
    state = resolve_rally(ParserConfig(), "@1SA4", MatchState())

    assert state.away_team.points == 1
    assert state.home_team.points == 0
    assert state.away_team.player_stats[1].serves == PlayerScores(scored=1, all=1)


def test_resolve_rally_accumulates_stats():
    config = ParserConfig()

    state = resolve_rally(config, "@1SA4", MatchState())
    state = resolve_rally(config, "@1SA0", state)

    assert (state.away_team.points, state.home_team.points) == (1, 1)
    assert state.away_team.player_stats[1].serves == PlayerScores(scored=1, faults=1, all=2)


def test_resolve_rally_deuce_holds():
    state = resolve_rally(ParserConfig(), "@1SA4", create_state(away_points=24, home_points=24))

    assert (state.away_team.points, state.home_team.points) == (25, 24)
    assert state.away_team.sets == 0
    assert state.status == MatchStatus.IN_PROGRESS


def test_resolve_rally_finishes_match():
    config = ParserConfig()
    state = create_state(away_sets=2, away_points=13, home_sets=2, home_points=13)

    state = resolve_rally(config, "@1SA4", state)
    assert state.away_team.points == 14

    state = resolve_rally(config, "@1SA4", state)
    assert state.away_team.sets == 3
    assert (state.away_team.points, state.home_team.points) == (0, 0)
    assert state.status == MatchStatus.FINISHED


def test_resolve_rally_after_finish_keeps_final_score():
    config = ParserConfig()
    state = create_state(away_sets=3)
    state.status = MatchStatus.FINISHED

    for _ in range(25):
        state = resolve_rally(config, "@1SA4", state)

    assert state.away_team.sets == 3
    assert state.away_team.points == 0
    assert state.status == MatchStatus.FINISHED


def test_command_after_finish_keeps_final_score():
    payload = {
        "awayTeam": {"sets": 3, "points": 0, "playerStats": {}},
        "homeTeam": {"sets": 1, "points": 0, "playerStats": {}},
        "status": "Finished",
    }

    result = parse_rally_command("!2SA4", payload)

    assert result["Ok"] == payload


def test_resolve_rally_failure_keeps_state():
    state = create_state(away_points=3)

    with pytest.raises(TeamPrefixError) as exc_info:
        resolve_rally(ParserConfig(), "X1SA4", state)

    assert exc_info.value.location == 0
    assert state == create_state(away_points=3)


def test_custom_prefixes():
    config = ParserConfig(away_prefix="a", home_prefix="h")

    state = resolve_rally(config, "h3S a5R a6E a7H0", MatchState())

    assert state.home_team.points == 1
    assert state.away_team.player_stats[7].hits == PlayerScores(faults=1, all=1)


@pytest.mark.parametrize("away, home", [("@", "@"), ("", "!"), ("ab", "!"), ("1", "!"), (" ", "!")])
def test_invalid_config(away, home):
    with pytest.raises(ValueError):
        ParserConfig(away_prefix=away, home_prefix=home)


# ---------- HOST COMMAND ----------

def test_command_ok_payload():
    result = parse_rally_command("@1SA4 !2H0", INITIAL_PAYLOAD)

    assert "Fail" not in result
    assert result["Ok"]["awayTeam"]["points"] == 1
    assert result["Ok"]["homeTeam"]["playerStats"]["2"]["hits"] == {"scored": 0, "faults": 1, "all": 1}
    assert result["Ok"]["status"] == "InProgress"


def test_command_fail_payload():
    result = parse_rally_command("X1SA4", INITIAL_PAYLOAD)

    assert result == {"Fail": {"errorMsg": "Expected team prefix here.", "location": 0}}


def test_command_fail_location():
    result = parse_rally_command("@1S !2R !3Q", INITIAL_PAYLOAD)

    assert result["Fail"]["location"] == 2
    assert result["Fail"]["errorMsg"] == InvalidInputError.message


def test_command_does_not_touch_input_payload():
    payload = {
        "awayTeam": {"sets": 0, "points": 0, "playerStats": {}},
        "homeTeam": {"sets": 0, "points": 0, "playerStats": {}},
        "status": "InProgress",
    }

    parse_rally_command("@1SA4", payload)

    assert payload["awayTeam"]["points"] == 0
