"""Tier migration job manager — state machine, estimates and progress tracking.

Jobs move ``pending -> in_progress -> completed | failed`` and never leave a
terminal state. Each job runs in its own asyncio task so one slow migration
never blocks another. Progress numbers come from a pluggable
:class:`~tierfinder.services.progress.ProgressSource`.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Callable, Iterable
from datetime import datetime, timezone

from tierfinder.schemas.jobs import HydrationJob, JobProgress, JobStatus
from tierfinder.schemas.sources import FileEntry
from tierfinder.schemas.tiers import TierConfig, TierCostEstimate, TierType
from tierfinder.services import tier_model
from tierfinder.services.backend import BackendError, StorageBackend
from tierfinder.services.progress import ProgressSource
from tierfinder.utils.formatting import format_bytes

logger = logging.getLogger(__name__)

VALID_TRANSITIONS: dict[JobStatus, set[JobStatus]] = {
    JobStatus.PENDING: {JobStatus.IN_PROGRESS, JobStatus.FAILED},
    JobStatus.IN_PROGRESS: {JobStatus.COMPLETED, JobStatus.FAILED},
    JobStatus.COMPLETED: set(),
    JobStatus.FAILED: set(),
}

CANCELLED_MESSAGE = "Cancelled by user"

JobListener = Callable[[HydrationJob], None]


class TierMigrationJobManager:
    """Owns every HydrationJob of the session."""

    def __init__(
        self,
        backend: StorageBackend,
        progress_source: ProgressSource,
        configs: dict[TierType, TierConfig] | None = None,
    ):
        self._backend = backend
        self._progress = progress_source
        self._configs = configs
        self._jobs: dict[str, HydrationJob] = {}
        self._tasks: dict[str, asyncio.Task] = {}
        self._listeners: list[JobListener] = []

    # --- estimates ---

    def estimate(self, files: Iterable[FileEntry], target_tier: TierType) -> TierCostEstimate:
        return tier_model.estimate(files, target_tier, self._configs)

    async def request_estimate(
        self, source_id: str, files: list[FileEntry], target_tier: TierType
    ) -> TierCostEstimate:
        """Ask the backend first; fall back to the local model if it fails."""
        try:
            return await self._backend.estimate_tier_migration(
                source_id, [f.path for f in files], target_tier
            )
        except BackendError as e:
            logger.warning("Backend estimate failed, using local model: %s", e)
            return self.estimate(files, target_tier)

    # --- lifecycle ---

    def start(
        self, source_id: str, files: list[FileEntry], target_tier: TierType
    ) -> HydrationJob:
        """Create a job, move it to in_progress and schedule its task.

        Must be called from a running event loop.
        """
        if not files:
            raise ValueError("A tier change needs at least one file")

        estimate = self.estimate(files, target_tier)
        job = HydrationJob(
            id=f"job-{uuid.uuid4().hex[:12]}",
            source_id=source_id,
            files=[f.model_copy(deep=True) for f in files],
            source_tier=tier_model.dominant_tier(files),
            target_tier=target_tier,
            bytes_total=estimate.total_bytes,
            files_total=len(files),
            estimated_cost=estimate.retrieval_cost,
        )
        self._jobs[job.id] = job
        logger.info(
            "Job %s created: %d file(s), %s, %s -> %s",
            job.id, job.files_total, format_bytes(job.bytes_total),
            job.source_tier.value, target_tier.value,
        )

        self._transition(job, JobStatus.IN_PROGRESS)
        task = asyncio.create_task(self._run(job), name=f"hydration-{job.id}")
        self._tasks[job.id] = task
        task.add_done_callback(lambda _: self._tasks.pop(job.id, None))
        return job

    async def _run(self, job: HydrationJob) -> None:
        try:
            job.request_id = await self._backend.request_tier_change(
                job.source_id, job.paths, job.target_tier
            )
            logger.debug("Job %s backend request %s", job.id, job.request_id)

            async for update in self._progress.updates(job):
                if job.is_terminal:
                    return
                self._apply_progress(job, update)

            if not job.is_terminal:
                self._finish(job)
        except asyncio.CancelledError:
            if not job.is_terminal:
                self._fail(job, CANCELLED_MESSAGE)
            raise
        except BackendError as e:
            self._fail(job, str(e))
        except Exception as e:
            logger.exception("Job %s crashed", job.id)
            self._fail(job, str(e) or type(e).__name__)

    def _apply_progress(self, job: HydrationJob, update: JobProgress) -> None:
        """Clamp to [0, 100], never go backwards, derive counters when missing."""
        progress = max(job.progress, min(100.0, max(0.0, update.progress)))
        job.progress = progress

        files_completed = (
            update.files_completed
            if update.files_completed is not None
            else int(job.files_total * progress / 100)
        )
        bytes_transferred = (
            update.bytes_transferred
            if update.bytes_transferred is not None
            else int(job.bytes_total * progress / 100)
        )
        job.files_completed = min(job.files_total, max(job.files_completed, files_completed))
        job.bytes_transferred = min(job.bytes_total, max(job.bytes_transferred, bytes_transferred))
        self._notify(job)

    def _finish(self, job: HydrationJob) -> None:
        # Progress reaches exactly 100 before the job is marked completed
        if job.progress < 100.0 or job.files_completed < job.files_total:
            job.progress = 100.0
            job.files_completed = job.files_total
            job.bytes_transferred = job.bytes_total
            self._notify(job)
        self._transition(job, JobStatus.COMPLETED)

    def _fail(self, job: HydrationJob, error: str) -> None:
        previous, job.error = job.error, error
        if not self._transition(job, JobStatus.FAILED):
            job.error = previous

    def _transition(self, job: HydrationJob, new_status: JobStatus) -> bool:
        """Apply a status change. Returns True if valid, False if rejected."""
        valid = VALID_TRANSITIONS.get(job.status, set())
        if new_status not in valid:
            logger.warning(
                "Invalid job transition for %s: %s -> %s (valid: %s)",
                job.id, job.status.value, new_status.value, valid,
            )
            return False

        old_status = job.status
        job.status = new_status
        if job.is_terminal:
            job.completed_at = datetime.now(timezone.utc)

        if new_status == JobStatus.FAILED:
            logger.warning("Job %s: %s -> failed (%s)", job.id, old_status.value, job.error)
        else:
            logger.info("Job %s: %s -> %s", job.id, old_status.value, new_status.value)
        self._notify(job)
        return True

    def cancel(self, job_id: str) -> bool:
        """Fail a running job. Already dispatched backend work is not undone."""
        job = self._jobs.get(job_id)
        if job is None or job.status != JobStatus.IN_PROGRESS:
            return False

        self._fail(job, CANCELLED_MESSAGE)
        task = self._tasks.get(job_id)
        if task is not None and not task.done():
            task.cancel()
        return True

    # --- observation ---

    def subscribe(self, listener: JobListener) -> Callable[[], None]:
        """Register a listener for job updates. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, job: HydrationJob) -> None:
        if not self._listeners:
            return
        snapshot = job.model_copy(deep=True)
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Job listener failed")

    @property
    def jobs(self) -> list[HydrationJob]:
        return [job.model_copy(deep=True) for job in self._jobs.values()]

    def get_job(self, job_id: str) -> HydrationJob | None:
        job = self._jobs.get(job_id)
        return job.model_copy(deep=True) if job else None

    @property
    def active_count(self) -> int:
        return sum(1 for job in self._jobs.values() if not job.is_terminal)

    async def wait(self, job_id: str, timeout: float | None = None) -> HydrationJob:
        """Wait for one job's task to finish and return the job."""
        if job_id not in self._jobs:
            raise KeyError(job_id)
        task = self._tasks.get(job_id)
        if task is not None:
            await asyncio.wait({task}, timeout=timeout)
        return self.get_job(job_id)

    async def wait_all(self, timeout: float | None = None) -> None:
        tasks = set(self._tasks.values())
        if tasks:
            await asyncio.wait(tasks, timeout=timeout)

    async def shutdown(self) -> None:
        """Cancel running jobs; they fail with the cancellation error."""
        for job_id in list(self._tasks):
            self.cancel(job_id)
        tasks = list(self._tasks.values())
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.info("Job manager stopped")
