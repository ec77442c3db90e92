"""
Handler responsible for building the full status view model.

Runs one fetch-classify cycle: schedule -> record / previous / next / live,
plus standings when enabled. Each section falls back to its own placeholder.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Sequence

from .. import classifier
from ..config import TIE_POLICY_SCORE
from ..errors import DataShapeError, TransportError
from ..models import (
    GameRecord,
    LiveGameView,
    NextGameView,
    PreviousGameView,
    StatusViewModel,
)
from ..services.schedule_service import ScheduleService
from ..services.standings_service import StandingsService

logger = logging.getLogger(__name__)

NO_RECORD = "Record unavailable"
NO_RECENT = "No recent games found"
NO_UPCOMING = "No upcoming games scheduled"
NO_DETAILS = "Game details not available"
NO_STANDINGS = "Standings unavailable"
UNABLE = "Unable to load game data"

DATE_FMT = "%A, %B %d, %Y"
TIME_FMT = "%-I:%M %p %Z"


@dataclass
class StatusHandler:
    """Orchestrates schedule + standings services into a single view model."""

    schedule_service: ScheduleService
    standings_service: Optional[StandingsService]
    team_abbreviations: Sequence[str]
    tie_policy: str = TIE_POLICY_SCORE
    undefeated_requires_win: bool = False

    def _opponent_name(self, game: GameRecord) -> str:
        opp = classifier.opponent(game, self.team_abbreviations)
        return opp.name if opp is not None and opp.name else "Unknown"

    def _homeaway(self, game: GameRecord) -> str:
        return "vs" if classifier.is_home(game, self.team_abbreviations) else "@"

    def previous_view(self, game: GameRecord) -> PreviousGameView:
        result = classifier.game_result(game, self.team_abbreviations, self.tie_policy)
        return PreviousGameView(
            opponent=self._opponent_name(game),
            homeaway=self._homeaway(game),
            result=result.outcome,
            score=result.score,
            when=game.when,
            date_str=game.when.strftime(DATE_FMT),
        )

    def next_view(self, game: GameRecord, now: datetime) -> NextGameView:
        return NextGameView(
            opponent=self._opponent_name(game),
            homeaway=self._homeaway(game),
            when=game.when,
            date_str=game.when.strftime(DATE_FMT),
            time_str=game.when.strftime(TIME_FMT),
            network=game.network,
            countdown=classifier.time_until(game.when, now),
        )

    def live_view(self, game: GameRecord) -> LiveGameView:
        result = classifier.game_result(game, self.team_abbreviations, self.tie_policy)
        return LiveGameView(
            opponent=self._opponent_name(game),
            homeaway=self._homeaway(game),
            score=result.score,
            detail=game.detail,
            status=game.status.value,
        )

    def _standings(self, placeholders: Dict[str, str]):
        """Fetch standings in isolation; failures never reach the schedule sections."""
        if self.standings_service is None:
            return None
        try:
            rows = self.standings_service.get_division()
        except TransportError as e:
            logger.warning("Standings fetch failed: %s", e)
            rows = []
        if not rows:
            placeholders["standings"] = NO_STANDINGS
            return None
        return rows

    def build(self, now: Optional[datetime] = None) -> StatusViewModel:
        """
        Build a status view model for the current cycle.

        Raises:
            TransportError if the schedule itself cannot be fetched.
        """
        now = now or self.schedule_service.now_local()
        placeholders: Dict[str, str] = {}

        try:
            snapshot = self.schedule_service.fetch_schedule()
        except DataShapeError as e:
            logger.warning("No schedule data: %s", e)
            placeholders.update(record=NO_RECORD, previous=NO_RECENT, next=NO_UPCOMING)
            return StatusViewModel(
                now=now,
                standings=self._standings(placeholders),
                placeholders=placeholders,
                error=str(e),
            )

        games = snapshot.games
        record = snapshot.league_record or classifier.tally_record(
            games, self.team_abbreviations, self.tie_policy
        )

        previous = None
        prev_game = classifier.previous_game(games, now)
        if prev_game is None:
            placeholders["previous"] = NO_RECENT
        elif not prev_game.participants:
            placeholders["previous"] = NO_DETAILS
        else:
            previous = self.previous_view(prev_game)

        upcoming = None
        next_game = classifier.next_game(games, now)
        if next_game is None:
            placeholders["next"] = NO_UPCOMING
        elif not next_game.participants:
            placeholders["next"] = NO_DETAILS
        else:
            upcoming = self.next_view(next_game, now)

        live_game = classifier.live_game(games)

        return StatusViewModel(
            now=now,
            record=record,
            undefeated=classifier.is_undefeated(record, self.undefeated_requires_win),
            previous=previous,
            next_game=upcoming,
            live=self.live_view(live_game) if live_game is not None else None,
            standings=self._standings(placeholders),
            placeholders=placeholders,
        )

    def error_view(self, message: str, now: Optional[datetime] = None) -> StatusViewModel:
        """View model for a failed cycle: every section shows the error placeholder."""
        return StatusViewModel(
            now=now or self.schedule_service.now_local(),
            placeholders={"record": message, "previous": UNABLE, "next": UNABLE},
            error=message,
        )


def _jsonable(v: Any) -> Any:
    if isinstance(v, datetime):
        return v.isoformat()
    if isinstance(v, Enum):
        return v.value
    if isinstance(v, dict):
        return {k: _jsonable(x) for k, x in v.items()}
    if isinstance(v, (list, tuple)):
        return [_jsonable(x) for x in v]
    return v


def to_dict(vm: StatusViewModel) -> Dict[str, Any]:
    """Flatten a view model into JSON-ready primitives."""
    return _jsonable(asdict(vm))
