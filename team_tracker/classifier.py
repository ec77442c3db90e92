"""
Game classification.

Pure functions over normalized GameRecords and a reference "now":
  - tracked team / opponent resolution
  - per-game result and season record tally
  - previous / next / live game selection
  - broadcast network extraction from a raw competition object
  - time-until-kickoff formatting
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, Optional, Sequence

from .config import TIE_POLICY_NONE, TIE_POLICY_SCORE
from .extract import first_present, path
from .models import GameRecord, GameStatus, Participant, SeasonRecord

IN_PROGRESS_OR_COMPLETED = "Game in progress or completed"
GAME_TIME = "Game time!"

NETWORK_STRATEGIES = (
    path("broadcasts", 0, "network"),
    path("broadcasts", 0, "names", 0),
    path("broadcasts", 0, "media", "shortName"),
    path("geoBroadcasts", 0, "media", "shortName"),
)


@dataclass(frozen=True)
class GameResult:
    """Team-centric outcome of a single game."""
    team_score: int
    opponent_score: int
    outcome: str  # "W" | "L" | "T"

    @property
    def score(self) -> str:
        return f"{self.team_score}-{self.opponent_score}"


def _is_tracked(p: Participant, abbreviations: Iterable[str]) -> bool:
    abbr = (p.abbreviation or "").strip().upper()
    return bool(abbr) and abbr in {a.upper() for a in abbreviations}


def team_participant(game: GameRecord, abbreviations: Sequence[str]) -> Optional[Participant]:
    """Return the tracked team's participant, matching any of its abbreviations."""
    for p in game.participants:
        if _is_tracked(p, abbreviations):
            return p
    return None


def opponent(game: GameRecord, abbreviations: Sequence[str]) -> Optional[Participant]:
    """Return the participant that is not the tracked team."""
    for p in game.participants:
        if not _is_tracked(p, abbreviations):
            return p
    return None


def is_home(game: GameRecord, abbreviations: Sequence[str]) -> bool:
    team = team_participant(game, abbreviations)
    return team is not None and team.homeaway == "home"


def game_result(game: GameRecord, abbreviations: Sequence[str], tie_policy: str = TIE_POLICY_SCORE) -> GameResult:
    """
    Compare the tracked team's score with the opponent's.

    Level scores are ambiguous: an explicit winner flag on either side decides
    them. Without one, the "score" policy records a tie and the "none" policy
    (ties not modeled) records a loss.
    """
    team = team_participant(game, abbreviations)
    opp = opponent(game, abbreviations)
    ts = (team.score if team else None) or 0
    os_ = (opp.score if opp else None) or 0

    if ts > os_:
        return GameResult(ts, os_, "W")
    if ts < os_:
        return GameResult(ts, os_, "L")

    if team is not None and team.winner is True:
        return GameResult(ts, os_, "W")
    if opp is not None and opp.winner is True:
        return GameResult(ts, os_, "L")

    if tie_policy == TIE_POLICY_NONE:
        return GameResult(ts, os_, "L")
    return GameResult(ts, os_, "T")


def tally_record(
    games: Iterable[GameRecord],
    abbreviations: Sequence[str],
    tie_policy: str = TIE_POLICY_SCORE,
) -> SeasonRecord:
    """Fold over final games into a SeasonRecord.

    Finals without both the tracked team and an opponent carry no result and are skipped.
    """
    wins = losses = ties = 0
    for g in games:
        if g.status is not GameStatus.FINAL:
            continue
        if team_participant(g, abbreviations) is None or opponent(g, abbreviations) is None:
            continue
        outcome = game_result(g, abbreviations, tie_policy).outcome
        if outcome == "W":
            wins += 1
        elif outcome == "L":
            losses += 1
        else:
            ties += 1
    return SeasonRecord(wins=wins, losses=losses, ties=ties)


def is_undefeated(record: SeasonRecord, requires_win: bool = False) -> bool:
    """Losses == 0, and at least one win when requires_win is set."""
    if record.losses > 0:
        return False
    return record.wins > 0 if requires_win else True


def previous_game(games: Iterable[GameRecord], now: datetime) -> Optional[GameRecord]:
    """The latest final game at or before now."""
    done = [g for g in games if g.status is GameStatus.FINAL and g.when <= now]
    return max(done, key=lambda g: g.when) if done else None


def next_game(games: Iterable[GameRecord], now: datetime) -> Optional[GameRecord]:
    """The earliest scheduled game after now."""
    ahead = [g for g in games if g.status is GameStatus.SCHEDULED and g.when > now]
    return min(ahead, key=lambda g: g.when) if ahead else None


def live_game(games: Iterable[GameRecord]) -> Optional[GameRecord]:
    """The first game currently in progress (including halftime and delays)."""
    for g in games:
        if g.status.is_live:
            return g
    return None


def extract_network(competition: Dict[str, Any], name_map: Optional[Dict[str, str]] = None) -> str:
    """
    Resolve a broadcast network label from a raw competition object.

    Tries the first broadcast's network, its names list, its media short name,
    then the first geo-broadcast. Returns "TBD" when nothing resolves.
    """
    net = first_present(competition if isinstance(competition, dict) else {}, NETWORK_STRATEGIES)
    if not isinstance(net, str) or not net:
        return "TBD"
    return (name_map or {}).get(net, net)


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}{'' if n == 1 else 's'}"


def time_until(
    target: datetime,
    now: datetime,
    suffix: str = "until kickoff",
    expired: str = IN_PROGRESS_OR_COMPLETED,
) -> str:
    """
    Human label for the time remaining before target.

    Shows the largest non-zero unit and, when non-zero, the unit right below it,
    e.g. "2 days, 3 hours until kickoff" or "5 minutes, 12 seconds until kickoff".
    At or past target returns expired.
    """
    remaining = (target - now).total_seconds()
    if remaining <= 0:
        return expired
    total = int(remaining)

    days, rem = divmod(total, 86400)
    hours, rem = divmod(rem, 3600)
    minutes, seconds = divmod(rem, 60)

    units = ((days, "day"), (hours, "hour"), (minutes, "minute"), (seconds, "second"))
    top = next((i for i, (n, _) in enumerate(units) if n > 0), None)
    if top is None:
        return f"less than a second {suffix}"

    parts = [_plural(n, unit) for n, unit in units[top:top + 2] if n > 0]
    return f"{', '.join(parts)} {suffix}"
