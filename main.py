import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, List, Optional

from volleyscore.config import DEFAULT_AWAY_PREFIX, DEFAULT_HOME_PREFIX, ParserConfig
from volleyscore.exceptions import MatchFinishedError, RallyError
from volleyscore.match_session import MatchSession
from volleyscore.models import MatchState
from volleyscore.parser import split_tokens
from volleyscore.storage import load_match, save_match


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Volleyball rally scorekeeper")
    ap.add_argument("--rally", action="append", default=[], help="Rally notation, may be repeated. Reads stdin if omitted.")
    ap.add_argument("--state", type=Path, default=None, help="JSON match state to resume from and save to")
    ap.add_argument("--away-prefix", default=DEFAULT_AWAY_PREFIX)
    ap.add_argument("--home-prefix", default=DEFAULT_HOME_PREFIX)
    ap.add_argument("-v", "--verbose", action="store_true")
    return ap


def format_scoreboard(state: MatchState) -> str:
    line = (
        f"HOME {state.home_team.sets} | {state.home_team.points:>2} - "
        f"{state.away_team.points:<2} | {state.away_team.sets} AWAY"
    )
    if state.is_finished:
        line += "  MATCH FINISHED"
    return line


def format_failure(rally_text: str, exc: RallyError) -> str:
    tokens = split_tokens(rally_text)
    token = tokens[exc.location] if exc.location < len(tokens) else ""
    return f"❌ {exc.reason.error_msg} (token {exc.location}: {token!r})"


def run(session: MatchSession, rallies: Iterable[str], out=sys.stdout) -> int:
    failures = 0

    for raw in rallies:
        rally_text = raw.strip()
        if not rally_text:
            continue

        try:
            state = session.submit(rally_text)
        except RallyError as e:
            failures += 1
            print(format_failure(rally_text, e), file=out)
            continue
        except MatchFinishedError:
            print("❌ Match already finished", file=out)
            break

        print(format_scoreboard(state), file=out)

    return failures


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = ParserConfig(args.away_prefix, args.home_prefix)
    except ValueError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 2

    state = None
    if args.state is not None and args.state.exists():
        state = load_match(args.state)

    session = MatchSession(config, state)

    rallies = args.rally if args.rally else sys.stdin
    failures = run(session, rallies)

    if args.state is not None:
        save_match(args.state, session.state)

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
