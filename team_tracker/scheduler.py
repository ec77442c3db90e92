"""
Refresh scheduler for the status view.

States:
  - idle:          no live or upcoming game; nothing is armed
  - countdown:     an upcoming game exists; the countdown label is recomputed on
                   a fixed tick without re-fetching
  - live_refresh:  a game is in progress; the full fetch-classify cycle re-runs
                   on a fixed tick

Only one timer is ever armed. The next live tick is armed after the current
cycle finishes, so fetches never overlap.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Callable, Optional

from .classifier import GAME_TIME, time_until
from .errors import TrackerError
from .handlers.status_handler import StatusHandler
from .models import StatusViewModel

logger = logging.getLogger(__name__)

IDLE = "idle"
COUNTDOWN = "countdown"
LIVE_REFRESH = "live_refresh"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RefreshController:
    """
    Owns both timer handles and drives the fetch-classify cycle.

    Usage:
        controller = RefreshController(handler, on_update=present, on_countdown=show_label)
        controller.start()
        # ... application runs ...
        controller.stop()
    """

    def __init__(
        self,
        handler: StatusHandler,
        on_update: Callable[[StatusViewModel], None],
        on_countdown: Optional[Callable[[str], None]] = None,
        live_interval: float = 30,
        countdown_interval: float = 60,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._handler = handler
        self._on_update = on_update
        self._on_countdown = on_countdown
        self._live_interval = live_interval
        self._countdown_interval = countdown_interval
        self._timer_factory = timer_factory
        self._clock = clock

        self._lock = threading.RLock()
        self._live_timer = None
        self._countdown_timer = None
        self._kickoff: Optional[datetime] = None
        self._state = IDLE
        self._stopped = True

    @property
    def state(self) -> str:
        return self._state

    @property
    def kickoff(self) -> Optional[datetime]:
        return self._kickoff

    def start(self) -> Optional[StatusViewModel]:
        """Run the first cycle immediately and arm whichever timer applies."""
        with self._lock:
            self._stopped = False
        logger.info("Refresh controller started")
        return self.run_cycle()

    def stop(self) -> None:
        """Cancel both timers; no tick re-arms after this returns."""
        with self._lock:
            self._stopped = True
            self._cancel_timers()
            self._kickoff = None
            self._state = IDLE
        logger.info("Refresh controller stopped")

    def run_cycle(self) -> Optional[StatusViewModel]:
        """
        Fetch, classify, publish, then re-evaluate the state.

        A failed cycle publishes an error view. When live, the next tick is
        re-armed so it tries again.
        """
        if self._stopped:
            return None

        try:
            vm = self._handler.build(now=self._clock())
        except TrackerError as e:
            logger.error("Refresh cycle failed: %s", e)
            self._on_update(self._handler.error_view(str(e), now=self._clock()))
            with self._lock:
                if not self._stopped and self._state == LIVE_REFRESH:
                    self._arm_live()
            return None

        self._on_update(vm)
        self._apply(vm)
        return vm

    def _apply(self, vm: StatusViewModel) -> None:
        with self._lock:
            if self._stopped:
                return
            previous = self._state
            if vm.live is not None:
                self._kickoff = None
                self._arm_live()
                self._state = LIVE_REFRESH
            elif vm.next_game is not None:
                self._kickoff = vm.next_game.when
                self._arm_countdown()
                self._state = COUNTDOWN
            else:
                self._cancel_timers()
                self._kickoff = None
                self._state = IDLE
            if previous != self._state:
                logger.info("Refresh state %s -> %s", previous, self._state)

    def _cancel_timers(self) -> None:
        for t in (self._live_timer, self._countdown_timer):
            if t is not None:
                t.cancel()
        self._live_timer = None
        self._countdown_timer = None

    def _start_timer(self, interval: float, fn: Callable[[], None]):
        self._cancel_timers()
        t = self._timer_factory(interval, fn)
        t.daemon = True
        t.start()
        return t

    def _arm_live(self) -> None:
        self._live_timer = self._start_timer(self._live_interval, self._on_live_tick)

    def _arm_countdown(self) -> None:
        self._countdown_timer = self._start_timer(self._countdown_interval, self._on_countdown_tick)

    def _on_live_tick(self) -> None:
        with self._lock:
            self._live_timer = None
            if self._stopped:
                return
        try:
            self.run_cycle()
        except Exception as e:
            logger.exception("Error in live refresh tick: %s", e)
            with self._lock:
                if not self._stopped:
                    self._arm_live()

    def _on_countdown_tick(self) -> None:
        with self._lock:
            self._countdown_timer = None
            if self._stopped or self._kickoff is None:
                return
            label = time_until(self._kickoff, self._clock(), expired=GAME_TIME)
            if label != GAME_TIME:
                self._arm_countdown()
            else:
                logger.info("Kickoff reached")

        if self._on_countdown is not None:
            self._on_countdown(label)
