"""
Domain models for the tracker.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Sequence


class GameStatus(str, Enum):
    """Normalized game state."""
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    HALFTIME = "halftime"
    DELAYED = "delayed"
    FINAL = "final"
    OTHER = "other"   # postponed, canceled, unknown

    @property
    def is_live(self) -> bool:
        return self in (GameStatus.IN_PROGRESS, GameStatus.HALFTIME, GameStatus.DELAYED)


@dataclass(frozen=True)
class Participant:
    """One side of a game."""
    team_id: str
    abbreviation: str
    name: str
    homeaway: str                  # "home" or "away"
    score: Optional[int] = None    # None until the game starts
    winner: Optional[bool] = None  # explicit flag from the feed, when present


@dataclass(frozen=True)
class GameRecord:
    """A normalized schedule entry."""
    game_id: str
    when: datetime
    status: GameStatus
    status_name: str = ""
    participants: Sequence[Participant] = ()
    network: str = "TBD"
    detail: str = ""


@dataclass(frozen=True)
class SeasonRecord:
    """Wins, losses and ties for the tracked team."""
    wins: int = 0
    losses: int = 0
    ties: int = 0

    def text(self) -> str:
        """Return "W-L", or "W-L-T" when ties were recorded."""
        base = f"{self.wins}-{self.losses}"
        return f"{base}-{self.ties}" if self.ties > 0 else base


@dataclass(frozen=True)
class StandingsEntry:
    """A single team row for division standings."""
    team_id: str
    abbreviation: str
    name: str
    wins: int
    losses: int
    ties: int
    win_pct: float
    division_record: str = ""
    playoff_seed: Optional[int] = None
    label: str = ""


@dataclass(frozen=True)
class PreviousGameView:
    """Most recent completed game, team-centric."""
    opponent: str
    homeaway: str   # "vs" or "@"
    result: str     # "W" | "L" | "T"
    score: str      # "24-10", tracked team first
    when: datetime
    date_str: str


@dataclass(frozen=True)
class NextGameView:
    """Next scheduled game."""
    opponent: str
    homeaway: str
    when: datetime
    date_str: str
    time_str: str
    network: str
    countdown: str


@dataclass(frozen=True)
class LiveGameView:
    """A game currently being played."""
    opponent: str
    homeaway: str
    score: str
    detail: str
    status: str


@dataclass(frozen=True)
class StatusViewModel:
    """Everything one fetch-classify cycle produces for the presentation layer."""
    now: datetime
    record: Optional[SeasonRecord] = None
    undefeated: Optional[bool] = None
    previous: Optional[PreviousGameView] = None
    next_game: Optional[NextGameView] = None
    live: Optional[LiveGameView] = None
    standings: Optional[Sequence[StandingsEntry]] = None
    placeholders: dict = field(default_factory=dict)
    error: str = ""
