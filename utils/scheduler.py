import logging
import threading
from datetime import timedelta

from apscheduler.schedulers.background import BackgroundScheduler

logger = logging.getLogger(__name__)


class SkipIfRunning:
    """Wrap an action so overlapping calls are dropped instead of queued."""

    def __init__(self, action, name=None):
        self.action = action
        self.name = name or getattr(action, "__name__", "task")
        self._lock = threading.Lock()

    @property
    def busy(self):
        return self._lock.locked()

    def __call__(self, *args, **kwargs):
        """Returns (ran, result). ran is False when a previous run still holds the slot."""
        if not self._lock.acquire(blocking=False):
            logger.warning(f"{self.name} still running, skipping this run", extra={"task": self.name})
            return False, None
        try:
            return True, self.action(*args, **kwargs)
        finally:
            self._lock.release()


class RecurringTask:
    """Handle returned by schedule_recurring. cancel() stops future runs."""

    def __init__(self, guarded, scheduler, job_id):
        self.guarded = guarded
        self._scheduler = scheduler
        self._job_id = job_id

    @property
    def name(self):
        return self.guarded.name

    @property
    def running(self):
        return self._scheduler.running

    @property
    def next_run_time(self):
        if not self._scheduler.running:
            return None
        job = self._scheduler.get_job(self._job_id)
        return job.next_run_time if job else None

    def run_now(self):
        return self.guarded()

    def cancel(self):
        if not self._scheduler.running:
            return
        self._scheduler.shutdown(wait=False)
        logger.info(f"Cancelled recurring task {self.name}", extra={"task": self.name})


def _run_logged(guarded):
    try:
        guarded()
    except Exception:
        # keep the timer alive; next run tries again
        logger.exception(f"Recurring task {guarded.name} failed", extra={"task": guarded.name})


def schedule_recurring(interval_sec, action, name=None) -> RecurringTask:
    """Run action once now, then every interval_sec seconds on a background thread.

    Runs never overlap: a run that comes due while the previous one is still going
    is skipped. The returned handle cancels the timer.
    """
    if interval_sec <= 0:
        raise ValueError("interval_sec must be > 0")

    guarded = SkipIfRunning(action, name=name)
    _run_logged(guarded)

    scheduler = BackgroundScheduler(daemon=True)
    job = scheduler.add_job(
        _run_logged,
        "interval",
        args=[guarded],
        seconds=interval_sec,
        id=guarded.name,
        max_instances=1,
        coalesce=True,
    )
    scheduler.start()
    logger.info(
        f"Scheduled {guarded.name} every {timedelta(seconds=interval_sec)}",
        extra={"task": guarded.name},
    )
    return RecurringTask(guarded, scheduler, job.id)
