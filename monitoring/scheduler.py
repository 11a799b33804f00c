"""
============================================================================
ENDPOINT PINGER - SCHEDULER / RUNNER
============================================================================
Owns the lifecycle of a pinger run on top of APScheduler's AsyncIOScheduler.

    IDLE ──start()──► SCHEDULING ──► RUNNING ──request_shutdown()──►
         SHUTTING_DOWN ──drain──► STOPPED

Scheduling
----------
For every concrete endpoint, in config order:
    1. an immediate probe is launched as a detached task;
    2. one recurring job is registered on the shared schedule.
A registration failure is logged and the next endpoint is processed.
The clock starts even if nothing could be registered.

Shutdown
--------
New firings stop first; scheduled firings that are already running are
awaited (the drain). Immediate startup probes are not awaited.

License: MIT
============================================================================
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Set

import httpx
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.base import BaseTrigger

from config.models import Endpoint, RunConfig
from config.settings import PingerSettings, get_settings
from exceptions.base import SchedulingError
from monitoring.cron import build_trigger
from monitoring.probe import ProbeExecutor, ProbeResult
from utils.logger import get_logger


# ============================================================================
# STATE & JOB DEFINITION
# ============================================================================

class RunnerState(str, Enum):
    """Lifecycle of a PingScheduler."""
    IDLE = "idle"
    SCHEDULING = "scheduling"
    RUNNING = "running"
    SHUTTING_DOWN = "shutting_down"
    STOPPED = "stopped"


@dataclass(frozen=True)
class ScheduledJob:
    """
    One endpoint registered on the schedule.

    Attributes
    ----------
    job_id : str
        APScheduler job id.
    endpoint : Endpoint
        Immutable copy bound to the job at registration time.
    expression : str
        Schedule expression the trigger was built from.
    trigger : BaseTrigger
    """
    job_id: str
    endpoint: Endpoint
    expression: str
    trigger: BaseTrigger


# ============================================================================
# SCHEDULER
# ============================================================================

class PingScheduler:
    """
    Drives probes for every configured endpoint.

    Usage
    -----
        runner = PingScheduler(config, client)
        await runner.start()
        # ... a signal handler calls runner.request_shutdown() ...
        await runner.wait_for_shutdown()
        await runner.shutdown()
    """

    def __init__(
        self,
        config: RunConfig,
        client: httpx.AsyncClient,
        executor: Optional[ProbeExecutor] = None,
        logger=None,
        settings: Optional[PingerSettings] = None,
    ):
        self.config = config
        self.client = client
        self.settings = settings or get_settings()
        self._logger = logger or get_logger("Scheduler")
        self.executor = executor or ProbeExecutor(logger=logger)

        scheduler_options = {
            "job_defaults": {
                "coalesce": False,
                "max_instances": self.settings.max_overlapping_firings,
                "misfire_grace_time": None,
            },
        }
        if self.settings.timezone:
            scheduler_options["timezone"] = self.settings.timezone
        self._scheduler = AsyncIOScheduler(**scheduler_options)

        self._state = RunnerState.IDLE
        self._jobs: List[ScheduledJob] = []
        self._startup_tasks: Set[asyncio.Task] = set()
        self._firing_tasks: Set[asyncio.Task] = set()
        self._shutdown_event = asyncio.Event()

    # ------------------------------------------------------------------
    # PROPERTIES
    # ------------------------------------------------------------------

    @property
    def state(self) -> RunnerState:
        return self._state

    @property
    def jobs(self) -> List[ScheduledJob]:
        return list(self._jobs)

    @property
    def job_count(self) -> int:
        return len(self._jobs)

    # ------------------------------------------------------------------
    # REGISTRATION
    # ------------------------------------------------------------------

    def schedule_endpoint(self, endpoint: Endpoint, expression: str) -> bool:
        """
        Register one recurring job for *endpoint*.

        Parameters
        ----------
        endpoint : Endpoint
            Bound to the job as a job argument, never looked up later.
        expression : str
            Schedule expression (see monitoring.cron).

        Returns
        -------
        bool
            False if the registration failed; the failure is logged.
        """
        job_id = f"ping-{len(self._jobs) + 1}"

        try:
            trigger = build_trigger(expression, timezone=self.settings.timezone)
            self._scheduler.add_job(
                func=self._run_scheduled_probe,
                trigger=trigger,
                args=[endpoint],
                id=job_id,
                name=f"Ping: {endpoint.name}",
            )
        except SchedulingError as e:
            self._log_schedule_failure(endpoint, e)
            return False
        except Exception as e:
            self._log_schedule_failure(
                endpoint, SchedulingError.from_exception(e, expression=expression)
            )
            return False

        self._jobs.append(
            ScheduledJob(
                job_id=job_id,
                endpoint=endpoint,
                expression=expression,
                trigger=trigger,
            )
        )
        self._logger.info(f"Scheduled: {endpoint.name}")
        return True

    def _log_schedule_failure(self, endpoint: Endpoint, error: SchedulingError) -> None:
        error.with_details(endpoint=endpoint.name)
        self._logger.bind(error=error.to_dict()).error(
            f"Failed to schedule {endpoint.name}: {error.message}"
        )

    # ------------------------------------------------------------------
    # LIFECYCLE
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Launch startup probes, register every endpoint and start the clock."""
        if self._state is not RunnerState.IDLE:
            self._logger.warning(f"Scheduler already in state: {self._state.value}")
            return

        self._state = RunnerState.SCHEDULING
        self._logger.info(
            f"Scheduling pinger: {len(self.config.endpoints)} endpoint(s), "
            f"cron={self.config.schedule!r}"
        )

        for endpoint in self.config.endpoints:
            self._launch_immediate_probe(endpoint)
            self.schedule_endpoint(endpoint, self.config.schedule)

        self._scheduler.start()
        self._state = RunnerState.RUNNING

        if not self._jobs:
            self._logger.warning("No endpoints scheduled; running with an idle clock")

    def request_shutdown(self) -> None:
        """Ask a running scheduler to stop. Safe to call from a signal handler."""
        self._shutdown_event.set()

    async def wait_for_shutdown(self) -> None:
        await self._shutdown_event.wait()

    async def shutdown(self) -> None:
        """Stop new firings, drain running scheduled firings, then stop."""
        if self._state in (RunnerState.SHUTTING_DOWN, RunnerState.STOPPED):
            return

        if self._state is not RunnerState.RUNNING:
            self._state = RunnerState.STOPPED
            return

        self._state = RunnerState.SHUTTING_DOWN
        self._logger.info("Shutting down...")

        self._scheduler.pause()

        # Let firings already handed to the executor register themselves
        await asyncio.sleep(0)
        while self._firing_tasks:
            await asyncio.gather(*list(self._firing_tasks), return_exceptions=True)

        self._scheduler.shutdown(wait=False)
        self._state = RunnerState.STOPPED
        self._logger.info("Shutdown complete")

    async def run_until_stopped(self) -> None:
        """start(), block until request_shutdown(), then shutdown()."""
        await self.start()
        try:
            await self.wait_for_shutdown()
        finally:
            await self.shutdown()

    # ------------------------------------------------------------------
    # FIRINGS
    # ------------------------------------------------------------------

    def _launch_immediate_probe(self, endpoint: Endpoint) -> None:
        task = asyncio.create_task(
            self._probe(endpoint), name=f"startup-probe:{endpoint.name}"
        )
        self._startup_tasks.add(task)
        task.add_done_callback(self._startup_tasks.discard)

    async def _run_scheduled_probe(self, endpoint: Endpoint) -> Optional[ProbeResult]:
        task = asyncio.current_task()
        if task is not None:
            self._firing_tasks.add(task)
        try:
            return await self._probe(endpoint)
        finally:
            if task is not None:
                self._firing_tasks.discard(task)

    async def _probe(self, endpoint: Endpoint) -> Optional[ProbeResult]:
        try:
            return await self.executor.execute(
                self.client,
                endpoint,
                self.config.api_key_header_name,
                self.config.api_key,
                self.config.user_agent,
            )
        except Exception as e:
            self._logger.error(f"[{endpoint.name}] Probe crashed: {e!r}")
            return None
