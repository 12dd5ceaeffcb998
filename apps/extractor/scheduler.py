"""
Extraction Scheduler - One-Shot and Cron Execution

Runs the extraction job either once (default) or on a cron schedule via
APScheduler.

Features:
- RUN_ONCE mode: a single extraction; failures propagate to the exit code
- Scheduled mode (RUN_ONCE=false): one job on EXTRACT_SCHEDULE_CRON, kept
  running until SIGINT/SIGTERM

Usage:
    # Run once and exit
    python -m apps.extractor

    # Scheduled mode
    RUN_ONCE=false python -m apps.extractor
"""

import asyncio
import logging
import signal
import sys
from typing import Optional

from apscheduler.job import Job
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from apps.extractor.extractor_job import run_extraction
from utils.config import Settings, config_file_path, get_settings
from utils.errors import ConfigurationError
from utils.logging import TEXT_FORMAT, setup_logging

logger = logging.getLogger(__name__)

JOB_ID = "declaration_area_extraction"
SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class ExtractionScheduler:
    """
    Runs extraction jobs for one Settings instance.

    Handles:
    - RUN_ONCE immediate execution
    - Cron job registration on an AsyncIOScheduler
    - Shutdown on SIGINT/SIGTERM or when shutdown_event is set
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.scheduler: Optional[AsyncIOScheduler] = None
        self.job: Optional[Job] = None
        self.shutdown_event = asyncio.Event()

    async def execute_extraction(self) -> None:
        """Run one extraction, logging the outcome; failures are re-raised."""
        try:
            output_file = await run_extraction(self.settings)
        except Exception as e:
            logger.error(
                "Extraction failed: %s",
                str(e),
                extra={"error_type": type(e).__name__},
                exc_info=True,
            )
            raise

        logger.info(
            "Extraction finished",
            extra={"output_file": str(output_file) if output_file else None},
        )

    def build_scheduler(self) -> AsyncIOScheduler:
        """
        Create a scheduler holding the extraction job.

        Raises:
            ValueError: If EXTRACT_SCHEDULE_CRON is not a valid crontab expression
        """
        trigger = CronTrigger.from_crontab(self.settings.EXTRACT_SCHEDULE_CRON)

        scheduler = AsyncIOScheduler()
        self.job = scheduler.add_job(
            self.execute_extraction,
            trigger=trigger,
            id=JOB_ID,
            name="FEMA web declaration area extraction",
            max_instances=1,
            coalesce=True,
        )
        return scheduler

    def _on_signal(self, signum: int) -> None:
        logger.info("Received %s, stopping scheduler", signal.Signals(signum).name)
        self.shutdown_event.set()

    def _install_signal_handlers(self) -> list[int]:
        loop = asyncio.get_running_loop()
        installed = []
        for signum in SHUTDOWN_SIGNALS:
            try:
                loop.add_signal_handler(signum, self._on_signal, signum)
            except (NotImplementedError, RuntimeError):
                # Loop cannot watch signals here (Windows, or not the main thread)
                continue
            installed.append(signum)
        return installed

    async def run_scheduled(self) -> None:
        """Start the cron job and block until shutdown is requested."""
        self.scheduler = self.build_scheduler()
        installed = self._install_signal_handlers()

        self.scheduler.start()
        logger.info(
            "Extraction scheduled (cron=%s, next_run=%s)",
            self.settings.EXTRACT_SCHEDULE_CRON,
            getattr(self.job, "next_run_time", None),
        )

        try:
            await self.shutdown_event.wait()
        finally:
            loop = asyncio.get_running_loop()
            for signum in installed:
                loop.remove_signal_handler(signum)
            self.scheduler.shutdown()
            logger.info("Scheduler stopped")

    async def start(self) -> None:
        """Run once or on schedule, depending on RUN_ONCE."""
        if self.settings.RUN_ONCE:
            logger.info("Running a single extraction")
            await self.execute_extraction()
        else:
            await self.run_scheduled()


async def main() -> None:
    """Main entry point: load settings, configure logging, run."""
    try:
        settings = get_settings()
    except ConfigurationError as e:
        # Logging is not configured yet; fall back to stderr
        logging.basicConfig(level=logging.ERROR, format=TEXT_FORMAT, stream=sys.stderr)
        logger.error("Failed to load configuration: %s", str(e))
        sys.exit(1)

    setup_logging(
        level=settings.effective_log_level,
        format_type=settings.LOG_FORMAT,
        output=settings.LOG_FILE,
    )
    logger.info("Started logger (config_file=%s)", str(config_file_path()))

    try:
        await ExtractionScheduler(settings).start()
    except Exception as e:
        logger.error("Extractor stopped on error", extra={"error": str(e)})
        sys.exit(1)


def run() -> None:
    """Console script entry point."""
    asyncio.run(main())
