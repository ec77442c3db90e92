"""
Thin HTTP client wrapper for ESPN site API endpoints.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from .errors import TransportError

logger = logging.getLogger(__name__)


class ESPNClient:
    """A minimal client for retrieving JSON from the configured ESPN endpoints."""

    def __init__(
        self,
        schedule_url: str,
        scoreboard_url: str,
        summary_url: str,
        standings_url: str,
        timeout: int = 10,
    ) -> None:
        """Store endpoint URLs and build request headers."""
        self.schedule_url = schedule_url
        self.scoreboard_url = scoreboard_url
        self.summary_url = summary_url
        self.standings_url = standings_url
        self.timeout = timeout
        self._headers = {"Accept": "application/json", "User-Agent": "team-tracker/1.0"}

    def get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Execute a GET request and return the parsed JSON object.

        Raises:
            TransportError on connection failures, timeouts, non-2xx responses
            or a body that is not a JSON object.
        """
        logger.debug("GET %s params=%s", url, params)
        try:
            r = requests.get(url, params=params, timeout=self.timeout, headers=self._headers)
            r.raise_for_status()
            data = r.json()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise TransportError(f"HTTP error {status} fetching {url}", url=url, status_code=status) from e
        except requests.RequestException as e:
            raise TransportError(f"Request failed for {url}: {e}", url=url) from e
        except ValueError as e:
            raise TransportError(f"Invalid JSON from {url}", url=url) from e

        if not isinstance(data, dict):
            raise TransportError(f"Unexpected JSON body from {url}", url=url)
        return data

    def team_schedule(self) -> Dict[str, Any]:
        """Fetch the tracked team's season schedule."""
        return self.get_json(self.schedule_url)

    def scoreboard(self) -> Dict[str, Any]:
        """Fetch the league-wide scoreboard for the current week/day."""
        return self.get_json(self.scoreboard_url)

    def event_summary(self, event_id: str) -> Dict[str, Any]:
        """Fetch the summary payload for a single event."""
        return self.get_json(self.summary_url, params={"event": event_id})

    def standings(self) -> Dict[str, Any]:
        """Fetch the league standings payload."""
        return self.get_json(self.standings_url)
