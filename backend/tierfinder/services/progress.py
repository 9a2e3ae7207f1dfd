"""Progress sources for tier migration jobs."""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import AsyncIterator
from typing import Protocol

from tierfinder.config import settings
from tierfinder.schemas.jobs import HydrationJob, JobProgress, JobStatus
from tierfinder.services.backend import BackendError, StorageBackend

logger = logging.getLogger(__name__)


class ProgressSource(Protocol):
    """Yields progress reports for one running job until it reaches 100."""

    def updates(self, job: HydrationJob) -> AsyncIterator[JobProgress]: ...


class SimulatedProgressSource:
    """Synthetic ticks for backends that do not report migration progress."""

    def __init__(
        self,
        tick_seconds: float | None = None,
        max_step: float | None = None,
        rng: random.Random | None = None,
    ):
        self._tick = settings.progress_tick_seconds if tick_seconds is None else tick_seconds
        self._max_step = max(1.0, max_step or settings.progress_max_step)
        self._rng = rng or random.Random()

    async def updates(self, job: HydrationJob) -> AsyncIterator[JobProgress]:
        progress = job.progress
        while progress < 100.0:
            await asyncio.sleep(self._tick)
            progress = min(100.0, progress + self._rng.uniform(1.0, self._max_step))
            yield JobProgress(progress=progress)


class BackendProgressSource:
    """Polls the backend for the job's request until it completes or fails."""

    def __init__(self, backend: StorageBackend, interval_seconds: float | None = None):
        self._backend = backend
        self._interval = (
            settings.job_poll_interval_seconds if interval_seconds is None else interval_seconds
        )

    async def updates(self, job: HydrationJob) -> AsyncIterator[JobProgress]:
        if job.request_id is None:
            raise BackendError(f"Job {job.id} has no backend request to poll")

        while True:
            await asyncio.sleep(self._interval)
            report = await self._backend.get_tier_job(job.source_id, job.request_id)
            if report.status == JobStatus.FAILED:
                raise BackendError(report.error or "Tier change failed on the backend")

            yield report
            if report.progress >= 100.0 or report.status == JobStatus.COMPLETED:
                logger.debug("Backend reports request %s done", job.request_id)
                return
