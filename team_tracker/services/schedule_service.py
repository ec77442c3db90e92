"""
Schedule logic.

Responsibilities:
  - fetch the team schedule payload
  - normalize ESPN events into GameRecords
  - read the league-provided season record summary when present
  - backfill live scores from the scoreboard or event summary
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from dateutil import parser as date_parser
from dateutil import tz

from ..classifier import extract_network, live_game
from ..errors import DataShapeError, TransportError
from ..espn_client import ESPNClient
from ..extract import as_dict, as_list, first_present, path, safe_int
from ..models import GameRecord, GameStatus, Participant, SeasonRecord

logger = logging.getLogger(__name__)

STATUS_NAMES = {
    "STATUS_SCHEDULED": GameStatus.SCHEDULED,
    "STATUS_PRE_GAME": GameStatus.SCHEDULED,
    "STATUS_IN_PROGRESS": GameStatus.IN_PROGRESS,
    "STATUS_FIRST_HALF": GameStatus.IN_PROGRESS,
    "STATUS_SECOND_HALF": GameStatus.IN_PROGRESS,
    "STATUS_OVERTIME": GameStatus.IN_PROGRESS,
    "STATUS_END_PERIOD": GameStatus.IN_PROGRESS,
    "STATUS_HALFTIME": GameStatus.HALFTIME,
    "STATUS_DELAYED": GameStatus.DELAYED,
    "STATUS_RAIN_DELAY": GameStatus.DELAYED,
    "STATUS_WEATHER_DELAY": GameStatus.DELAYED,
    "STATUS_FINAL": GameStatus.FINAL,
    "STATUS_FINAL_OT": GameStatus.FINAL,
    "STATUS_FULL_TIME": GameStatus.FINAL,
    "STATUS_POSTPONED": GameStatus.OTHER,
    "STATUS_CANCELED": GameStatus.OTHER,
    "STATUS_SUSPENDED": GameStatus.OTHER,
}

STATES = {
    "pre": GameStatus.SCHEDULED,
    "in": GameStatus.IN_PROGRESS,
}

TEAM_NAME_STRATEGIES = (
    path("team", "displayName"),
    path("team", "name"),
    path("team", "shortDisplayName"),
    path("team", "abbreviation"),
)


def _scalar_score(competitor: Dict[str, Any]):
    v = competitor.get("score")
    return v if isinstance(v, (str, int, float)) and not isinstance(v, bool) else None


SCORE_STRATEGIES = (
    path("score", "value"),
    path("score", "displayValue"),
    _scalar_score,
    path("team", "score"),
)


def parse_score(competitor: Dict[str, Any]) -> Optional[int]:
    """
    Read a competitor score.

    Returns None when the feed carries no score (game not started), otherwise a
    non-negative int; unparseable values such as "N/A" become 0.
    """
    raw = first_present(competitor, SCORE_STRATEGIES)
    if raw is None:
        return None
    return safe_int(raw, 0)


def get_status_type(obj: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    t = path("status", "type")(obj)
    return t if isinstance(t, dict) else None


def parse_status(competition: Dict[str, Any], event: Dict[str, Any]) -> tuple[GameStatus, str, str]:
    """
    Normalize the status of an event into (status, raw name, short detail).

    The competition status is preferred, falling back to the event-level status.
    Unknown names fall back to the coarse ESPN state (pre / in / post).
    """
    status_type = as_dict(get_status_type(competition) or get_status_type(event))
    name = str(status_type.get("name") or "").strip().upper()
    detail = str(status_type.get("shortDetail") or status_type.get("detail") or "")

    if name in STATUS_NAMES:
        return STATUS_NAMES[name], name, detail

    state = str(status_type.get("state") or "").strip().lower()
    if state == "post":
        return (GameStatus.FINAL if status_type.get("completed") else GameStatus.OTHER), name, detail
    return STATES.get(state, GameStatus.OTHER), name, detail


def parse_participant(competitor: Dict[str, Any]) -> Participant:
    """Normalize a single ESPN competitor object."""
    team = as_dict(competitor.get("team"))
    winner = competitor.get("winner")
    return Participant(
        team_id=str(team.get("id") or competitor.get("id") or ""),
        abbreviation=str(team.get("abbreviation") or "").upper(),
        name=first_present(competitor, TEAM_NAME_STRATEGIES, "Unknown"),
        homeaway=str(competitor.get("homeAway") or "").lower(),
        score=parse_score(competitor),
        winner=winner if isinstance(winner, bool) else None,
    )


def parse_record_summary(summary: Any) -> Optional[SeasonRecord]:
    """Parse a "W-L" or "W-L-T" summary string."""
    if not isinstance(summary, str):
        return None
    parts = [p.strip() for p in summary.split("-")]
    if len(parts) not in (2, 3) or not all(p.isdigit() for p in parts):
        return None
    nums = [int(p) for p in parts] + [0]
    return SeasonRecord(wins=nums[0], losses=nums[1], ties=nums[2])


@dataclass(frozen=True)
class ScheduleSnapshot:
    """The result of one schedule fetch."""
    games: Sequence[GameRecord]
    league_record: Optional[SeasonRecord] = None


@dataclass
class ScheduleService:
    """Service responsible for building normalized GameRecords for the tracked team."""

    client: ESPNClient
    tz_name: str
    team_abbreviations: Sequence[str]
    network_name_map: dict[str, str] | None = None

    @property
    def app_tz(self):
        """Return the configured timezone object used for all local conversions."""
        return tz.gettz(self.tz_name) or tz.UTC

    def now_local(self) -> datetime:
        """Return the current time in the app timezone."""
        return datetime.now(tz=self.app_tz)

    def _parse_game_datetime(self, event: Dict[str, Any], competition: Dict[str, Any]) -> datetime | None:
        """Parse the event start time and convert to the app timezone."""
        for val in (event.get("date"), competition.get("date"), competition.get("startDate")):
            if not val:
                continue
            try:
                dt = date_parser.isoparse(str(val))
            except (ValueError, OverflowError):
                continue
            if dt.tzinfo is None:
                dt = dt.replace(tzinfo=timezone.utc)
            return dt.astimezone(self.app_tz)
        return None

    def _normalize_events(self, payload: Dict[str, Any]) -> List[Dict[str, Any]]:
        """
        Flatten the schedule payload into a list of raw events.

        Handles {"events": [...]} and {"team": {"events": [...], "nextEvent": [...]}},
        de-duplicating by event id.
        """
        team = as_dict(payload.get("team"))
        raw = as_list(payload.get("events")) or as_list(team.get("events"))
        raw = raw + as_list(team.get("nextEvent"))

        out: List[Dict[str, Any]] = []
        seen: set[str] = set()
        for e in raw:
            if not isinstance(e, dict):
                continue
            eid = str(e.get("id") or "")
            if eid and eid in seen:
                continue
            if eid:
                seen.add(eid)
            out.append(e)
        return out

    def to_game_record(self, event: Dict[str, Any]) -> GameRecord | None:
        """Normalize one raw event; returns None when it has no usable date."""
        comps = as_list(event.get("competitions"))
        competition = as_dict(comps[0]) if comps else {}
        when = self._parse_game_datetime(event, competition)
        if when is None:
            return None

        status, status_name, detail = parse_status(competition, event)
        participants = tuple(
            parse_participant(c) for c in as_list(competition.get("competitors")) if isinstance(c, dict)
        )
        return GameRecord(
            game_id=str(event.get("id") or competition.get("id") or ""),
            when=when,
            status=status,
            status_name=status_name,
            participants=participants,
            network=extract_network(competition, self.network_name_map),
            detail=detail,
        )

    def league_record(self, payload: Dict[str, Any]) -> Optional[SeasonRecord]:
        """Read the season record summary the league publishes on the team object."""
        summary = first_present(payload, (
            path("team", "recordSummary"),
            path("team", "record", "items", 0, "summary"),
            path("requestedSeason", "record", "summary"),
        ))
        return parse_record_summary(summary)

    def fetch_schedule(self) -> ScheduleSnapshot:
        """
        Fetch and normalize the schedule.

        Raises:
            TransportError if the schedule request fails.
            DataShapeError if the payload holds no usable events.
        """
        payload = self.client.team_schedule()
        events = self._normalize_events(payload)
        games = [g for g in (self.to_game_record(e) for e in events) if g is not None]
        if not games:
            raise DataShapeError("No games found in schedule")

        games.sort(key=lambda g: g.when)
        logger.debug("Schedule normalized: %d games", len(games))

        live = live_game(games)
        if live is not None and any(p.score is None for p in live.participants):
            updated = self.backfill_live(live)
            games = [updated if g is live else g for g in games]

        return ScheduleSnapshot(games=games, league_record=self.league_record(payload))

    def _find_scoreboard_competition(self, payload: Dict[str, Any], game_id: str) -> tuple[dict, dict] | None:
        for event in as_list(payload.get("events")):
            if isinstance(event, dict) and str(event.get("id") or "") == game_id:
                comps = as_list(event.get("competitions"))
                return event, as_dict(comps[0]) if comps else {}
        return None

    def backfill_live(self, game: GameRecord) -> GameRecord:
        """
        Replace a live game's participants/status with data from the scoreboard,
        falling back to the single event summary.

        Failures are logged and the schedule's own values are kept.
        """
        found = None
        try:
            found = self._find_scoreboard_competition(self.client.scoreboard(), game.game_id)
            if found is None:
                summary = self.client.event_summary(game.game_id)
                comps = as_list(path("header", "competitions")(summary))
                if comps:
                    found = as_dict(summary.get("header")), as_dict(comps[0])
        except TransportError as e:
            logger.warning("Live score backfill failed for %s: %s", game.game_id, e)
            return game

        if found is None:
            logger.warning("Live game %s not found on scoreboard or summary", game.game_id)
            return game

        event, competition = found
        participants = tuple(
            parse_participant(c) for c in as_list(competition.get("competitors")) if isinstance(c, dict)
        )
        if not participants:
            return game

        status, status_name, detail = parse_status(competition, event)
        logger.info("Backfilled live score for %s", game.game_id)
        return replace(
            game,
            participants=participants,
            status=status if status is not GameStatus.OTHER else game.status,
            status_name=status_name or game.status_name,
            detail=detail or game.detail,
        )
