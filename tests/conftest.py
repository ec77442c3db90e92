"""Shared pytest fixtures and payload builders."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from team_tracker.models import GameRecord, GameStatus, Participant

NOW = datetime(2025, 10, 19, 18, 0, tzinfo=timezone.utc)

TEAM = ["GB", "GNB"]


def competitor(abbr, score=None, homeaway="home", winner=None, name=None, team_id="9"):
    """Build a raw ESPN competitor object."""
    c = {
        "id": team_id,
        "homeAway": homeaway,
        "team": {"id": team_id, "abbreviation": abbr, "displayName": name or f"{abbr} Team"},
    }
    if score is not None:
        c["score"] = score
    if winner is not None:
        c["winner"] = winner
    return c


def event(event_id, when, status="STATUS_FINAL", competitors=None, broadcasts=None, state=None, completed=None):
    """Build a raw ESPN schedule event."""
    status_type = {"name": status, "shortDetail": "Final" if status == "STATUS_FINAL" else ""}
    if state is not None:
        status_type["state"] = state
    if completed is not None:
        status_type["completed"] = completed
    comp = {
        "id": event_id,
        "date": when.strftime("%Y-%m-%dT%H:%MZ"),
        "status": {"type": status_type},
        "competitors": competitors if competitors is not None else [],
    }
    if broadcasts is not None:
        comp["broadcasts"] = broadcasts
    return {"id": event_id, "date": when.strftime("%Y-%m-%dT%H:%MZ"), "competitions": [comp]}


def game(game_id, when, status=GameStatus.FINAL, team_score=None, opp_score=None,
         home=True, team_winner=None, opp_winner=None, network="TBD"):
    """Build a normalized GameRecord for the tracked team against CHI."""
    return GameRecord(
        game_id=game_id,
        when=when,
        status=status,
        participants=(
            Participant("9", "GB", "Green Bay Packers", "home" if home else "away", team_score, team_winner),
            Participant("3", "CHI", "Chicago Bears", "away" if home else "home", opp_score, opp_winner),
        ),
        network=network,
    )


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def days():
    return lambda n: NOW + timedelta(days=n)


@pytest.fixture
def mock_client():
    """A MagicMock standing in for ESPNClient."""
    client = MagicMock()
    client.team_schedule.return_value = {"events": []}
    client.standings.return_value = {}
    return client
