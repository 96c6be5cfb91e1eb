"""
Core orchestration for the Internship Tracker.

One cycle is: load state → fetch all sources → find new postings → alert →
merge → persist. InternshipTracker exposes the three user-facing operations
(single check, one monitor cycle, list) and MonitorScheduler repeats the
monitor cycle on a fixed interval.
"""

import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import IO, Any, Callable, List, Optional, Sequence

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.interval import IntervalTrigger

from internship_tracker.compare import build_id_set, find_new_postings, mark_new, merge_postings
from internship_tracker.config import DEFAULT_INTERVAL_MINUTES, ConfigError, TrackerConfig
from internship_tracker.models import Posting, TrackerState, utc_now
from internship_tracker.notify import Notifier, NullNotifier, build_notifier, display_postings
from internship_tracker.sources import PostingSource, default_sources, fetch_all_sources
from internship_tracker.store import StateStore
from internship_tracker.utils import get_logger


# Module logger
logger = get_logger("tracker")

MONITOR_JOB_ID = "internship-check"
CYCLE_RULE = "─" * 60


@dataclass
class CycleResult:
    """
    Outcome of one fetch cycle.

    Attributes:
        checked_at: Time the cycle ran; also the new ``last_check``.
        fetched: Everything fetched, with ``is_new`` set on new postings.
        new: Postings whose identifier was not stored before this cycle.
        state: State after merging, as persisted (or attempted).
        saved: Whether the state was written successfully.
    """
    checked_at: datetime
    fetched: List[Posting]
    new: List[Posting]
    state: TrackerState
    saved: bool


class InternshipTracker:
    """Runs fetch cycles against a state store and a set of sources."""

    def __init__(
        self,
        store: StateStore,
        sources: Sequence[PostingSource],
        notifier: Optional[Notifier] = None,
        clock: Callable[[], datetime] = utc_now,
        stream: Optional[IO[str]] = None
    ):
        self.store = store
        self.sources = list(sources)
        self.notifier = notifier or NullNotifier()
        self.clock = clock
        self.stream = stream
        self._cycle_time: Optional[datetime] = None

    @classmethod
    def from_config(
        cls,
        config: TrackerConfig,
        clock: Callable[[], datetime] = utc_now
    ) -> "InternshipTracker":
        """Build a tracker wired with the default sources and notifiers."""
        tracker = cls(
            store=StateStore(config.state_path),
            sources=[],
            notifier=build_notifier(config),
            clock=clock,
        )
        # Static postings share the discovery time of the cycle that fetched them
        tracker.sources = default_sources(config, clock=tracker.cycle_time)
        return tracker

    def cycle_time(self) -> datetime:
        """Time of the cycle in progress, or the current time between cycles."""
        return self._cycle_time or self.clock()

    def _print(self, text: str = "") -> None:
        print(text, file=self.stream)

    def _run(self, notify: bool) -> CycleResult:
        now = self.clock()

        state = self.store.load()

        self._cycle_time = now
        try:
            fetched = fetch_all_sources(self.sources, now=now)
        finally:
            self._cycle_time = None

        new_ids = build_id_set(find_new_postings(fetched, state.postings))
        fetched = mark_new(fetched, new_ids)
        new = [p for p in fetched if p.is_new]

        if notify:
            for posting in new:
                self.notifier.notify(posting)

        merge_postings(state.postings, fetched)
        state.last_check = now
        saved = self.store.save(state)

        return CycleResult(checked_at=now, fetched=fetched, new=new, state=state, saved=saved)

    def check_once(self) -> CycleResult:
        """
        Fetch once, record the results, and show everything that was found.

        No alerts are sent; new postings are only marked in the listing.
        """
        self._print("🚀 Internship Tracker - Single Check")
        self._print(f"⏰ {self.clock().astimezone():%Y-%m-%d %H:%M:%S}\n")

        result = self._run(notify=False)

        display_postings(result.fetched, f"Found {len(result.fetched)} Total Internships", self.stream)
        logger.info(
            f"Check complete: {len(result.fetched)} fetched, {len(result.new)} new, "
            f"{len(result.state.postings)} tracked"
        )

        return result

    def run_cycle(self) -> CycleResult:
        """Run one monitor cycle: alert on each new posting, then persist."""
        self._print(f"\n🔍 Checking at {self.clock().astimezone():%Y-%m-%d %H:%M:%S}")

        result = self._run(notify=True)

        if result.new:
            self._print(f"\n🎉 Found {len(result.new)} NEW internships!")
            display_postings(result.new, "New Internships", self.stream)
        else:
            self._print("No new internships found.")

        self._print(CYCLE_RULE)

        return result

    def list_postings(self) -> TrackerState:
        """Show every retained posting without fetching or saving."""
        state = self.store.load()
        postings = list(state.postings.values())

        self._print(f"📊 Total Tracked Internships: {len(postings)}")
        self._print(f"🕒 Last Check: {state.last_check.astimezone():%Y-%m-%d %H:%M:%S}\n")

        display_postings(postings, "All Tracked Internships", self.stream)

        return state

    def monitor(self, interval_minutes: int = DEFAULT_INTERVAL_MINUTES) -> None:
        """Check immediately, then every ``interval_minutes``, until the process ends."""
        self._print("🚀 Starting Internship Monitor...")
        self._print(f"⏱️  Checking every {interval_minutes} minutes")
        self._print("🔔 Notifications: ON\n")

        MonitorScheduler(self.run_cycle, interval_minutes).run_forever()


class MonitorScheduler:
    """
    Repeats a cycle on a fixed interval.

    ``tick`` may be driven by the built-in APScheduler loop or called
    directly. A tick that fires while the previous one is still running is
    skipped, and an exception inside a cycle is logged so the loop survives.
    """

    def __init__(
        self,
        cycle: Callable[[], Any],
        interval_minutes: int = DEFAULT_INTERVAL_MINUTES,
        scheduler_factory: Callable[..., Any] = BlockingScheduler
    ):
        if interval_minutes <= 0:
            raise ConfigError(f"Interval must be a positive number of minutes, got {interval_minutes}")

        self.cycle = cycle
        self.interval_minutes = interval_minutes
        self.scheduler_factory = scheduler_factory
        self.skipped_ticks = 0
        self._in_progress = threading.Lock()

    def tick(self) -> bool:
        """
        Run one cycle unless another is still in progress.

        Returns:
            True if the cycle ran, False if it was skipped.
        """
        if not self._in_progress.acquire(blocking=False):
            self.skipped_ticks += 1
            logger.warning("Previous check still running, skipping this one")
            return False

        try:
            self.cycle()
        except Exception:
            logger.exception("Check cycle failed")
        finally:
            self._in_progress.release()

        return True

    def run_forever(self) -> None:
        """Run the first tick now and then every interval. Blocks."""
        scheduler = self.scheduler_factory(timezone=timezone.utc)
        scheduler.add_job(
            self.tick,
            trigger=IntervalTrigger(minutes=self.interval_minutes, timezone=timezone.utc),
            id=MONITOR_JOB_ID,
            next_run_time=datetime.now(timezone.utc),
            max_instances=1,
            coalesce=True,
            misfire_grace_time=None,
        )

        logger.info(f"Monitor started, checking every {self.interval_minutes} minute(s)")

        try:
            scheduler.start()
        finally:
            if scheduler.running:
                scheduler.shutdown(wait=False)
            logger.info("Monitor stopped")
