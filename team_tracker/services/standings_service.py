"""
Standings logic.

Responsibilities:
  - fetch standings payload
  - locate the tracked team's division group
  - normalize rows into StandingsEntry models with a playoff position label

The payload is read against explicit schemas, tried in order:
  A) children[] (conference) -> children[] (division) -> standings.entries
  B) children[] -> standings.entries (conference table, no division leader)
  C) standings.entries (league table, no division leader)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..espn_client import ESPNClient
from ..extract import as_dict, as_list, first_present, path, safe_float, safe_int
from ..models import StandingsEntry

logger = logging.getLogger(__name__)

Group = Tuple[str, List[Dict[str, Any]]]
DivisionGroup = Tuple[str, List[Dict[str, Any]], bool]


def _groups_schema_a(payload: Dict[str, Any]) -> List[Group]:
    out: List[Group] = []
    for conf in as_list(payload.get("children")):
        for div in as_list(as_dict(conf).get("children")):
            div = as_dict(div)
            entries = as_list(path("standings", "entries")(div))
            if entries:
                out.append((str(div.get("name") or div.get("abbreviation") or ""), entries))
    return out


def _groups_schema_b(payload: Dict[str, Any]) -> List[Group]:
    out: List[Group] = []
    for conf in as_list(payload.get("children")):
        conf = as_dict(conf)
        entries = as_list(path("standings", "entries")(conf))
        if entries:
            out.append((str(conf.get("name") or conf.get("abbreviation") or ""), entries))
    return out


def _groups_schema_c(payload: Dict[str, Any]) -> List[Group]:
    entries = as_list(path("standings", "entries")(payload))
    return [(str(payload.get("name") or ""), entries)] if entries else []


# (schema, groups are divisions)
SCHEMAS = ((_groups_schema_a, True), (_groups_schema_b, False), (_groups_schema_c, False))


def _stat_maps(stats: list) -> tuple[dict, dict]:
    """Index a stats list by stat name and by stat type."""
    by_name: Dict[str, dict] = {}
    by_type: Dict[str, dict] = {}
    for s in stats:
        if not isinstance(s, dict):
            continue
        if s.get("name"):
            by_name[str(s["name"])] = s
        if s.get("type"):
            by_type[str(s["type"])] = s
    return by_name, by_type


def _stat_value(by_name: dict, name: str):
    s = by_name.get(name) or {}
    return s.get("value") if s.get("value") is not None else s.get("displayValue")


@dataclass
class StandingsService:
    """Service responsible for returning the tracked team's division standings."""

    client: ESPNClient
    team_abbreviations: Sequence[str]
    playoff_spots: int = 7

    def _is_tracked(self, entry: Dict[str, Any]) -> bool:
        abbr = str(path("team", "abbreviation")(entry) or "").upper()
        return abbr in {a.upper() for a in self.team_abbreviations}

    def find_group(self, payload: Dict[str, Any]) -> Optional[DivisionGroup]:
        """
        Return (group name, raw entries, is_division) for the group containing the tracked team.

        Only schema A groups are divisions; B and C are conference or league tables.
        """
        for schema, is_division in SCHEMAS:
            for name, entries in schema(payload):
                if any(self._is_tracked(as_dict(e)) for e in entries):
                    return name, entries, is_division
        return None

    def to_entry(self, raw: Dict[str, Any]) -> StandingsEntry:
        """Normalize a single {team, stats} standings entry."""
        team = as_dict(raw.get("team"))
        by_name, by_type = _stat_maps(as_list(raw.get("stats")))

        wins = safe_int(_stat_value(by_name, "wins"), 0)
        losses = safe_int(_stat_value(by_name, "losses"), 0)
        ties = safe_int(_stat_value(by_name, "ties"), 0)

        played = wins + losses + ties
        computed_pct = (wins + 0.5 * ties) / played if played else 0.0
        pct = safe_float(_stat_value(by_name, "winPercent"), computed_pct)

        division_record = first_present(by_type, (
            path("vsdiv", "summary"),
            path("vsdiv", "displayValue"),
        )) or first_present(by_name, (
            path("divisionRecord", "summary"),
            path("divisionRecord", "displayValue"),
        ), "")

        seed_raw = _stat_value(by_name, "playoffSeed")
        seed = safe_int(seed_raw, 0) if seed_raw is not None else 0

        return StandingsEntry(
            team_id=str(team.get("id") or ""),
            abbreviation=str(team.get("abbreviation") or "").upper(),
            name=str(team.get("displayName") or team.get("name") or team.get("abbreviation") or "TBD"),
            wins=wins,
            losses=losses,
            ties=ties,
            win_pct=pct,
            division_record=str(division_record),
            playoff_seed=seed or None,
        )

    def playoff_label(self, rank: int, entry: StandingsEntry, is_division: bool = True) -> str:
        """Label a row by its division rank and playoff seed."""
        if rank == 1 and is_division:
            return "Division leader"
        if entry.playoff_seed is None:
            return ""
        if entry.playoff_seed <= self.playoff_spots:
            return f"Playoff position (#{entry.playoff_seed})"
        return "Outside playoff position"

    def get_division(self) -> Sequence[StandingsEntry]:
        """
        Return the tracked team's division as a list of StandingsEntry.

        Sorting is win percentage desc, then wins desc, then losses asc.
        Returns an empty list when the payload has no group containing the team.
        """
        payload = self.client.standings()
        group = self.find_group(payload)
        if group is None:
            logger.warning("Tracked team not found in standings payload")
            return []

        name, raw_entries, is_division = group
        rows = [self.to_entry(as_dict(e)) for e in raw_entries]
        rows.sort(key=lambda r: (-r.win_pct, -r.wins, r.losses))
        logger.debug("Standings for %s: %d teams", name or "group", len(rows))

        return [replace(r, label=self.playoff_label(i, r, is_division)) for i, r in enumerate(rows, start=1)]
