"""
Pipeline Trigger

Runs the daily digest on a cron schedule. Every run ends in a logged
RunOutcome; nothing raised by a stage ever reaches the scheduler, so one bad
day never unschedules the job.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

# Standard library imports
import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import date, timezone
from enum import Enum
from typing import Protocol

# Third-party imports
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

# Local application imports
import constants as const
from errors import (
    DeliveryError,
    NoMessagesError,
    PersistenceFailed,
    StoreError,
    SummarizationFailed,
)
from notifier import Notifier
from report_generator import ReportGenerator


logger = logging.getLogger(__name__)

Task = Callable[[], Awaitable[object]]


class Scheduler(Protocol):
    def register_periodic(self, cron_expr: str, task: Task) -> None: ...

    def start(self) -> None: ...

    def shutdown(self) -> None: ...


class CronScheduler:
    """APScheduler-backed Scheduler evaluating cron expressions in UTC"""

    def __init__(self, job_id: str = const.DIGEST_JOB_ID):
        self.scheduler = AsyncIOScheduler(timezone=timezone.utc)
        self.job_id = job_id

    def register_periodic(self, cron_expr: str, task: Task) -> None:
        """
        Schedule `task` on a five-field cron expression.

        Raises:
            ValueError: If the expression is invalid
        """
        trigger = CronTrigger.from_crontab(cron_expr, timezone=timezone.utc)
        self.scheduler.add_job(
            func=task,
            trigger=trigger,
            id=self.job_id,
            name="Generate and deliver daily digest",
            replace_existing=True,
            # An overlapping firing is skipped, never queued
            max_instances=1,
            coalesce=True,
            misfire_grace_time=3600,
        )
        logger.info(f"Digest job scheduled with cron '{cron_expr}' (UTC)")

    def start(self) -> None:
        """Start the scheduler. Must be called with an asyncio loop running."""
        if not self.scheduler.running:
            self.scheduler.start()
            job = self.scheduler.get_job(self.job_id)
            if job is not None:
                logger.info(f"Scheduler started, next digest run at {job.next_run_time}")
            else:
                logger.info("Scheduler started")

    def shutdown(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Scheduler stopped")


class RunState(Enum):
    IDLE = "idle"
    RUNNING = "running"


class RunStatus(Enum):
    DELIVERED = "delivered"
    GENERATED = "generated"  # stored, delivery not requested
    NO_MESSAGES = "no_messages"
    STORE_UNAVAILABLE = "store_unavailable"
    SUMMARIZATION_FAILED = "summarization_failed"
    PERSISTENCE_FAILED = "persistence_failed"
    DELIVERY_FAILED = "delivery_failed"
    SKIPPED = "skipped"
    UNEXPECTED_ERROR = "unexpected_error"


@dataclass
class RunOutcome:
    status: RunStatus
    target_date: date | None = None
    digest: str | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.status in (RunStatus.DELIVERED, RunStatus.GENERATED)


class PipelineTrigger:
    """Invokes the report generator once per firing and delivers the result"""

    def __init__(
        self,
        generator: ReportGenerator,
        notifier: Notifier | None,
        destination: int | None,
        scheduler: Scheduler | None = None,
        cron_expr: str = const.DIGEST_CRON,
    ):
        """
        Args:
            generator: Report generator for the run
            notifier: Delivery channel (None = store only, no delivery)
            destination: Discord channel ID passed to the notifier
            scheduler: Scheduler to register with (only needed for register())
            cron_expr: Five-field cron expression, UTC
        """
        self.generator = generator
        self.notifier = notifier
        self.destination = destination
        self.scheduler = scheduler
        self.cron_expr = cron_expr
        self.state = RunState.IDLE

    def register(self) -> None:
        """Register run() with the scheduler"""
        if self.scheduler is None:
            raise ValueError("No scheduler configured")
        self.scheduler.register_periodic(self.cron_expr, self.run)

    async def run(self, target_date: date | None = None) -> RunOutcome:
        """
        Run the pipeline once. Never raises (except on task cancellation).

        Args:
            target_date: Day to summarize (defaults to yesterday, UTC)
        """
        if self.state is RunState.RUNNING:
            logger.warning("Previous digest run still in progress, skipping this firing")
            return RunOutcome(RunStatus.SKIPPED, target_date=target_date)

        self.state = RunState.RUNNING
        try:
            outcome = await self._run(target_date)
        finally:
            self.state = RunState.IDLE

        logger.info(
            f"Digest run finished: status={outcome.status.value}, "
            f"date={outcome.target_date.isoformat() if outcome.target_date else 'n/a'}"
        )
        return outcome

    async def _run(self, target_date: date | None) -> RunOutcome:
        logger.info("Running daily digest task...")

        try:
            if target_date is None:
                target_date = self.generator.target_date()
            # Store and LLM calls block, keep them off the event loop
            digest = await asyncio.to_thread(self.generator.generate_report, target_date)

        except NoMessagesError as e:
            logger.info(f"{e}")
            return RunOutcome(RunStatus.NO_MESSAGES, target_date=target_date, error=e)

        except SummarizationFailed as e:
            logger.error(f"Digest summarization failed: {e}", exc_info=True)
            return RunOutcome(RunStatus.SUMMARIZATION_FAILED, target_date=target_date, error=e)

        except PersistenceFailed as e:
            # The digest is not stored anywhere else; the log is its only copy
            logger.error(f"Digest for {e.target_date.isoformat()} was generated but not stored: {e}", exc_info=True)
            logger.error(f"Unsaved digest for {e.target_date.isoformat()}:\n{e.digest}")
            return RunOutcome(
                RunStatus.PERSISTENCE_FAILED, target_date=target_date, digest=e.digest, error=e
            )

        except StoreError as e:
            logger.error(f"Message store unavailable: {e}", exc_info=True)
            return RunOutcome(RunStatus.STORE_UNAVAILABLE, target_date=target_date, error=e)

        except Exception as e:
            logger.error(f"Error in daily digest task: {e}", exc_info=True)
            return RunOutcome(RunStatus.UNEXPECTED_ERROR, target_date=target_date, error=e)

        if self.notifier is None or self.destination is None:
            logger.info("No notifier configured, digest stored without delivery")
            return RunOutcome(RunStatus.GENERATED, target_date=target_date, digest=digest)

        try:
            await self.notifier.deliver(self.destination, digest)
        except DeliveryError as e:
            logger.error(f"Something went wrong while sending summary message: {e}", exc_info=True)
            return RunOutcome(RunStatus.DELIVERY_FAILED, target_date=target_date, digest=digest, error=e)
        except Exception as e:
            logger.error(f"Unexpected delivery error: {e}", exc_info=True)
            return RunOutcome(RunStatus.DELIVERY_FAILED, target_date=target_date, digest=digest, error=e)

        return RunOutcome(RunStatus.DELIVERED, target_date=target_date, digest=digest)
