"""
Job Scheduler
=============
APScheduler-based scheduling for the bot runner: a recurring tick and one-shot
follow-up evaluations at fixed times.
"""

import logging
from datetime import datetime, timezone
from dataclasses import dataclass, field
from typing import Callable, Optional, Dict, Any
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.date import DateTrigger
from apscheduler.triggers.interval import IntervalTrigger
from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.executors.pool import ThreadPoolExecutor


logger = logging.getLogger("paperbot.jobs.scheduler")


@dataclass
class ScheduledJob:
    """Represents a scheduled job"""
    id: str
    name: str
    interval_seconds: Optional[int] = None  # For interval jobs
    run_at: Optional[datetime] = None       # For one-shot jobs
    func: Optional[Callable] = None
    args: tuple = ()
    kwargs: Dict[str, Any] = field(default_factory=dict)


class JobScheduler:
    """
    Central scheduler for bot jobs.

    Jobs:
    - Bot tick (every N seconds): evaluate every active bot
    - Recovery follow-up (one-shot): re-evaluate a bot when its pending
      confirmed-recovery check falls due

    Usage:
        scheduler = JobScheduler()
        scheduler.add_interval_job("tick", 60, runner.run_tick)
        scheduler.add_one_shot_job("recovery-abc", due_at, runner.process_bot, args=("abc",))
        scheduler.start()
    """

    def __init__(self, tz=timezone.utc, max_workers: int = 4):
        """
        Initialize scheduler.

        Args:
            tz: Timezone for scheduling (default: UTC)
            max_workers: Thread pool size
        """
        self.timezone = tz

        jobstores = {
            'default': MemoryJobStore()
        }
        executors = {
            'default': ThreadPoolExecutor(max_workers),
        }
        job_defaults = {
            'coalesce': True,  # Combine missed runs
            'max_instances': 1,  # Only one instance at a time
            'misfire_grace_time': 60,  # 1 minute grace
        }

        self._scheduler = BackgroundScheduler(
            jobstores=jobstores,
            executors=executors,
            job_defaults=job_defaults,
            timezone=self.timezone,
        )

        self._jobs: Dict[str, ScheduledJob] = {}
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def job_ids(self) -> list:
        return list(self._jobs)

    def _wrap_job(self, job: ScheduledJob, one_shot: bool = False) -> Callable:
        """Wrap job function with timing and error logging"""
        def wrapper():
            # A one-shot body may re-add its own id; only drop this entry
            if one_shot and self._jobs.get(job.id) is job:
                del self._jobs[job.id]

            try:
                logger.debug(f"Running job: {job.name}")
                start_time = datetime.now()

                result = job.func(*job.args, **job.kwargs)

                elapsed = (datetime.now() - start_time).total_seconds()
                logger.debug(f"Job {job.name} completed in {elapsed:.2f}s")

                return result

            except Exception as e:
                logger.error(f"Job {job.name} failed: {e}", exc_info=True)
                raise

        return wrapper

    def add_interval_job(
        self,
        job_id: str,
        interval_seconds: int,
        func: Callable,
        name: Optional[str] = None,
        args: tuple = (),
        kwargs: Optional[Dict[str, Any]] = None,
    ):
        """
        Add a job to run at regular intervals.

        Args:
            job_id: Unique job identifier
            interval_seconds: Seconds between runs
            func: Function to execute
            name: Human-readable name
            args: Positional arguments for func
            kwargs: Keyword arguments for func
        """
        job = ScheduledJob(
            id=job_id,
            name=name or job_id,
            interval_seconds=interval_seconds,
            func=func,
            args=args,
            kwargs=kwargs or {},
        )

        self._jobs[job_id] = job

        self._scheduler.add_job(
            self._wrap_job(job),
            IntervalTrigger(seconds=interval_seconds, timezone=self.timezone),
            id=job_id,
            name=job.name,
            replace_existing=True,
        )

        logger.info(f"Added interval job: {job.name} every {interval_seconds}s")

    def add_one_shot_job(
        self,
        job_id: str,
        run_at: datetime,
        func: Callable,
        name: Optional[str] = None,
        args: tuple = (),
        kwargs: Optional[Dict[str, Any]] = None,
    ):
        """
        Add a job that runs once at ``run_at``.

        Re-adding an existing id replaces the earlier schedule.
        """
        if run_at.tzinfo is None:
            run_at = run_at.replace(tzinfo=self.timezone)

        job = ScheduledJob(
            id=job_id,
            name=name or job_id,
            run_at=run_at,
            func=func,
            args=args,
            kwargs=kwargs or {},
        )

        self._jobs[job_id] = job

        self._scheduler.add_job(
            self._wrap_job(job, one_shot=True),
            DateTrigger(run_date=run_at, timezone=self.timezone),
            id=job_id,
            name=job.name,
            replace_existing=True,
        )

        logger.debug(f"Added one-shot job: {job.name} at {run_at.isoformat()}")

    def remove_job(self, job_id: str):
        """Remove a scheduled job"""
        if job_id in self._jobs:
            del self._jobs[job_id]
            try:
                self._scheduler.remove_job(job_id)
                logger.info(f"Removed job: {job_id}")
            except JobLookupError:
                logger.debug(f"Job {job_id} already finished")

    def start(self):
        """Start the scheduler"""
        if not self._running:
            self._scheduler.start()
            self._running = True
            logger.info("Scheduler started")

    def stop(self, wait: bool = True):
        """Stop the scheduler"""
        if self._running:
            self._scheduler.shutdown(wait=wait)
            self._running = False
            logger.info("Scheduler stopped")

    def get_next_run_time(self, job_id: str) -> Optional[datetime]:
        """Get next scheduled run time for a job"""
        job = self._scheduler.get_job(job_id)
        return getattr(job, "next_run_time", None) if job else None

    def get_status(self) -> str:
        """Get scheduler status"""
        status = []
        status.append(f"Scheduler: {'Running' if self._running else 'Stopped'}")
        status.append(f"Jobs: {len(self._jobs)}")
        status.append("")

        for job_id, job in self._jobs.items():
            next_run = self.get_next_run_time(job_id)
            next_run_str = next_run.strftime("%H:%M:%S") if next_run else "N/A"

            if job.interval_seconds:
                schedule = f"Every {job.interval_seconds}s"
            elif job.run_at:
                schedule = f"Once at {job.run_at.strftime('%H:%M:%S')}"
            else:
                schedule = "Unknown"

            status.append(f"  {job.name}: {schedule} (next: {next_run_str})")

        return "\n".join(status)
