# APScheduler orchestrator for maintenance jobs
from __future__ import annotations
import logging
import sys

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger
from pydantic_settings import BaseSettings

sys.path.insert(0, ".")

from core.logging import setup_json_logging
from jobs.reconcile_counters import main as reconcile_counters

log = logging.getLogger("runner")


class RunnerSettings(BaseSettings):
    reconcile_cron_minute: str = "15"

    class Config:
        env_file = ".env"
        extra = "ignore"


def safe(fn, *args):
    def _wrap():
        try:
            fn(*args)
        except Exception:
            log.exception("Job failed: %s", getattr(fn, "__name__", "unknown"))
    return _wrap


def build_scheduler(settings: RunnerSettings | None = None) -> BlockingScheduler:
    settings = settings or RunnerSettings()
    sched = BlockingScheduler(timezone="UTC")
    # hourly at the configured minute
    sched.add_job(
        safe(reconcile_counters, []),
        CronTrigger(minute=settings.reconcile_cron_minute),
        id="reconcile_counters",
    )
    return sched


if __name__ == "__main__":
    setup_json_logging()
    sched = build_scheduler()
    log.info("Scheduler starting (UTC)...")
    try:
        sched.start()
    except (KeyboardInterrupt, SystemExit):
        log.info("Scheduler stopped.")
