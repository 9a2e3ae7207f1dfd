"""Hydration job schemas."""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field

from tierfinder.schemas.sources import FileEntry
from tierfinder.schemas.tiers import TierType


class JobStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


class HydrationJob(BaseModel):
    """A tier migration job tracked for the lifetime of the session."""
    id: str
    source_id: str
    files: list[FileEntry] = []
    source_tier: TierType
    target_tier: TierType
    status: JobStatus = JobStatus.PENDING
    progress: float = 0.0
    bytes_transferred: int = 0
    bytes_total: int = 0
    files_completed: int = 0
    files_total: int = 0
    estimated_cost: float = 0.0
    request_id: str | None = None
    error: str | None = None
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: datetime | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in (JobStatus.COMPLETED, JobStatus.FAILED)

    @property
    def paths(self) -> list[str]:
        return [f.path for f in self.files]


class TierChangeRequest(BaseModel):
    paths: list[str] | None = None  # defaults to current selection
    target_tier: TierType


class JobProgress(BaseModel):
    """One progress report for a running migration."""
    progress: float
    bytes_transferred: int | None = None
    files_completed: int | None = None
    status: JobStatus | None = None
    error: str | None = None
