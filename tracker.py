"""
Entry point for the team status tracker.

Wires config, client, services, handler and refresh controller, then runs until
interrupted. The presenter here only logs; a page or widget layer would plug in
the same callbacks.

Environment (see team_tracker/config.py):
  - TEAM_ABBREVIATIONS=GB,GNB
  - SCHEDULE_ENDPOINT / SCOREBOARD_ENDPOINT / SUMMARY_ENDPOINT / STANDINGS_ENDPOINT
  - LIVE_REFRESH_INTERVAL_SECONDS=30, COUNTDOWN_TICK_SECONDS=60
  - UNDEFEATED_REQUIRES_WIN=0, TIE_POLICY=score|none
  - INCLUDE_STANDINGS=1, LOG_LEVEL=INFO
"""

from __future__ import annotations

import json
import logging
import threading

from team_tracker.config import AppConfig
from team_tracker.espn_client import ESPNClient
from team_tracker.handlers.status_handler import StatusHandler, to_dict
from team_tracker.models import StatusViewModel
from team_tracker.scheduler import RefreshController
from team_tracker.services.schedule_service import ScheduleService
from team_tracker.services.standings_service import StandingsService

LOG_FORMAT = "[%(asctime)s] %(levelname)-8s [%(name)s:%(lineno)d] %(message)s"

logger = logging.getLogger("tracker")


def configure_logging(level: str) -> None:
    """Configure the root logger once for the process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_controller(cfg: AppConfig) -> RefreshController:
    """
    Build the object graph.

    The standings service is only created when standings are enabled.
    """
    client = ESPNClient(
        schedule_url=cfg.schedule_endpoint,
        scoreboard_url=cfg.scoreboard_endpoint,
        summary_url=cfg.summary_endpoint,
        standings_url=cfg.standings_endpoint,
        timeout=cfg.request_timeout_seconds,
    )
    schedule = ScheduleService(
        client=client,
        tz_name=cfg.tz,
        team_abbreviations=cfg.team_abbreviations,
        network_name_map=cfg.network_name_map,
    )
    standings = (
        StandingsService(client=client, team_abbreviations=cfg.team_abbreviations, playoff_spots=cfg.playoff_spots)
        if cfg.include_standings
        else None
    )
    handler = StatusHandler(
        schedule_service=schedule,
        standings_service=standings,
        team_abbreviations=cfg.team_abbreviations,
        tie_policy=cfg.tie_policy,
        undefeated_requires_win=cfg.undefeated_requires_win,
    )
    return RefreshController(
        handler,
        on_update=present,
        on_countdown=present_countdown,
        live_interval=cfg.live_refresh_interval_seconds,
        countdown_interval=cfg.countdown_tick_seconds,
    )


def present(vm: StatusViewModel) -> None:
    """Log a compact rendering of a view model."""
    if vm.error:
        logger.error("Status unavailable: %s", vm.error)

    if vm.record is not None:
        verdict = "YES" if vm.undefeated else "NO"
        logger.info("Undefeated? %s  (record %s)", verdict, vm.record.text())
    else:
        logger.info("Record: %s", vm.placeholders.get("record", ""))

    if vm.live is not None:
        lv = vm.live
        logger.info("LIVE %s %s  %s  %s", lv.homeaway, lv.opponent, lv.score, lv.detail)

    if vm.previous is not None:
        p = vm.previous
        logger.info("Previous: %s %s  %s %s  %s", p.homeaway, p.opponent, p.result, p.score, p.date_str)
    else:
        logger.info("Previous: %s", vm.placeholders.get("previous", ""))

    if vm.next_game is not None:
        n = vm.next_game
        logger.info(
            "Next: %s %s  %s %s  %s  TV: %s",
            n.homeaway, n.opponent, n.date_str, n.time_str, n.countdown, n.network,
        )
    else:
        logger.info("Next: %s", vm.placeholders.get("next", ""))

    for row in vm.standings or ():
        logger.info(
            "  %-4s %2d-%d-%d  %.3f  div %-5s %s",
            row.abbreviation, row.wins, row.losses, row.ties, row.win_pct, row.division_record, row.label,
        )
    if "standings" in vm.placeholders:
        logger.info("Standings: %s", vm.placeholders["standings"])

    logger.debug("View model: %s", json.dumps(to_dict(vm)))


def present_countdown(label: str) -> None:
    logger.info("Countdown: %s", label)


def main() -> None:
    cfg = AppConfig()
    configure_logging(cfg.log_level)
    logger.info("Tracking %s", ",".join(cfg.team_abbreviations))

    controller = create_controller(cfg)
    controller.start()
    try:
        threading.Event().wait()
    except KeyboardInterrupt:
        pass
    finally:
        controller.stop()


if __name__ == "__main__":
    main()
