# team_tracker/config.py
"""
Configuration for the team status tracker.

This module centralizes all tunable settings (tracked team abbreviations, ESPN
endpoints, refresh intervals, record policies and network display names).
"""

from __future__ import annotations

from dataclasses import dataclass, field
import json
import os
from typing import Dict, List

TIE_POLICY_SCORE = "score"
TIE_POLICY_NONE = "none"
TIE_POLICIES = (TIE_POLICY_SCORE, TIE_POLICY_NONE)

_ESPN_NFL = "https://site.api.espn.com/apis/site/v2/sports/football/nfl"


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable, returning default on missing/invalid values."""
    try:
        return int(os.getenv(name, str(default)))
    except (TypeError, ValueError):
        return default


def _env_bool(name: str, default: bool) -> bool:
    """Read a boolean flag such as 1/0, true/false, yes/no."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_json(name: str, default):
    """
    Read a JSON environment variable and parse it.

    Intended for:
      - NETWORK_NAME_MAP_JSON: {"ESPN2":"ESPN", ...}

    Returns default on missing/invalid JSON.
    """
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return json.loads(raw)
    except ValueError:
        return default


def _env_list(name: str, default: List[str]) -> List[str]:
    """
    Read a comma-delimited string list from the environment.

    Example:
      TEAM_ABBREVIATIONS="GB,GNB"
    """
    raw = os.getenv(name)
    if not raw:
        return default
    out = [x.strip() for x in raw.split(",") if x.strip()]
    return out or default


@dataclass(frozen=True)
class AppConfig:
    """
    Immutable app configuration.

    Notes on record policies:
      - undefeated_requires_win: when True a team with no games played is not undefeated.
      - tie_policy: "score" counts level finals as ties unless a winner flag says otherwise;
        "none" never produces ties and counts an unflagged level final as a loss.
    """

    # Tracked team
    team_abbreviations: List[str] = field(default_factory=lambda: _env_list("TEAM_ABBREVIATIONS", ["GB", "GNB"]))
    tz: str = os.getenv("TZ", "America/Chicago")

    # Endpoints
    schedule_endpoint: str = os.getenv("SCHEDULE_ENDPOINT", f"{_ESPN_NFL}/teams/gb/schedule")
    scoreboard_endpoint: str = os.getenv("SCOREBOARD_ENDPOINT", f"{_ESPN_NFL}/scoreboard")
    summary_endpoint: str = os.getenv("SUMMARY_ENDPOINT", f"{_ESPN_NFL}/summary")
    standings_endpoint: str = os.getenv(
        "STANDINGS_ENDPOINT", "https://site.api.espn.com/apis/v2/sports/football/nfl/standings?level=3"
    )
    request_timeout_seconds: int = _env_int("REQUEST_TIMEOUT_SECONDS", 10)

    # Refresh timers
    live_refresh_interval_seconds: int = _env_int("LIVE_REFRESH_INTERVAL_SECONDS", 30)
    countdown_tick_seconds: int = _env_int("COUNTDOWN_TICK_SECONDS", 60)

    # Record policies
    undefeated_requires_win: bool = _env_bool("UNDEFEATED_REQUIRES_WIN", False)
    tie_policy: str = os.getenv("TIE_POLICY", TIE_POLICY_SCORE)

    # Standings
    include_standings: bool = _env_bool("INCLUDE_STANDINGS", True)
    playoff_spots: int = _env_int("PLAYOFF_SPOTS", 7)

    # Exact-name network map
    network_name_map: Dict[str, str] = field(default_factory=lambda: {
        "ESPN2": "ESPN",
        "ABC/ESPN": "ESPN",
        "Prime": "Prime Video",
    })

    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    def __post_init__(self):
        """
        Normalize values and apply optional env overrides.

        Supported env options:
          - NETWORK_NAME_MAP_JSON (JSON dict)
        """
        # dataclass frozen => use object.__setattr__
        object.__setattr__(
            self,
            "team_abbreviations",
            [a.strip().upper() for a in self.team_abbreviations if a and a.strip()],
        )

        policy = (self.tie_policy or "").strip().lower()
        object.__setattr__(self, "tie_policy", policy if policy in TIE_POLICIES else TIE_POLICY_SCORE)

        name_map_json = _env_json("NETWORK_NAME_MAP_JSON", None)
        if isinstance(name_map_json, dict) and all(isinstance(k, str) and isinstance(v, str) for k, v in name_map_json.items()):
            object.__setattr__(self, "network_name_map", name_map_json)
