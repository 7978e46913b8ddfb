"""
Sweep Scheduler

Runs the reclamation sweep in-process on a fixed interval, starting with
an immediate run, using an APScheduler background scheduler.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler

from filedrop.application.reclamation_sweeper import ReclamationSweeper

logger = logging.getLogger(__name__)


class SweepScheduler:
    """
    Start/stop lifecycle around the periodic sweep job.

    The application factory starts it and registers shutdown() with atexit.
    """

    JOB_ID = "reclaim_expired_files"

    def __init__(
        self,
        sweeper: ReclamationSweeper,
        interval_seconds: float = 30.0,
        scheduler: Optional[BackgroundScheduler] = None,
    ):
        """
        Args:
            sweeper: Sweeper whose run_once() is scheduled
            interval_seconds: Period between sweep starts
            scheduler: Scheduler to use, a daemon BackgroundScheduler if None
        """
        self.sweeper = sweeper
        self.interval_seconds = interval_seconds
        self._scheduler = scheduler or BackgroundScheduler(daemon=True)

    @property
    def running(self) -> bool:
        return bool(self._scheduler.running)

    def start(self) -> None:
        """Schedule the sweep job and start the scheduler thread. Idempotent."""
        if self.running:
            return

        self._scheduler.add_job(
            func=self.sweeper.run_once,
            trigger="interval",
            seconds=self.interval_seconds,
            id=self.JOB_ID,
            name="Reclaim expired files",
            replace_existing=True,
            next_run_time=datetime.now(timezone.utc),
            coalesce=True,
            max_instances=1,
        )
        self._scheduler.start()
        logger.info(f"Sweep scheduler started, interval {self.interval_seconds}s")

    def shutdown(self, wait: bool = False) -> None:
        """Stop scheduling sweeps. Safe to call when not running."""
        if not self.running:
            return
        self._scheduler.shutdown(wait=wait)
        logger.info("Sweep scheduler stopped")
