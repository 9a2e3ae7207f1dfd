"""Storage backend contract — the only way the core reaches storage."""

from __future__ import annotations

from typing import Protocol

from tierfinder.schemas.jobs import JobProgress
from tierfinder.schemas.sources import FileEntry, StorageSource
from tierfinder.schemas.tiers import TierCostEstimate, TierType

# Pseudo source id for paths on the host filesystem (native clipboard, OS drops)
NATIVE_SOURCE_ID = "native"


class BackendError(Exception):
    """A storage backend call failed."""

    def __init__(self, message: str, *, retryable: bool = False):
        super().__init__(message)
        self.retryable = retryable


class UnknownSourceError(LookupError):
    """No storage source with the given id."""


class NoSourceSelectedError(RuntimeError):
    """A file operation needs a current source but none is selected."""


class ConfirmationRequiredError(RuntimeError):
    """A destructive operation was requested without explicit confirmation."""


class StorageBackend(Protocol):
    async def list_sources(self) -> list[StorageSource]: ...

    async def list_files(self, source_id: str, path: str) -> list[FileEntry]: ...

    async def copy(
        self, source_id: str, from_path: str, to_path: str, recursive: bool = True
    ) -> None: ...

    async def move(self, source_id: str, from_path: str, to_path: str) -> None: ...

    async def copy_to_source(
        self, from_source_id: str, from_path: str, to_source_id: str, to_path: str
    ) -> None: ...

    async def move_to_source(
        self, from_source_id: str, from_path: str, to_source_id: str, to_path: str
    ) -> None: ...

    async def delete(self, source_id: str, path: str) -> None: ...

    async def rename(self, source_id: str, from_path: str, to_path: str) -> None: ...

    async def mkdir(self, source_id: str, path: str) -> None: ...

    async def request_tier_change(
        self, source_id: str, paths: list[str], target_tier: TierType
    ) -> str:
        """Start a migration; returns the backend request id."""
        ...

    async def estimate_tier_migration(
        self, source_id: str, paths: list[str], target_tier: TierType
    ) -> TierCostEstimate: ...

    async def get_tier_job(self, source_id: str, request_id: str) -> JobProgress: ...


class NativeClipboard(Protocol):
    """OS clipboard file references."""

    async def read(self) -> list[str]: ...

    async def write(self, paths: list[str]) -> None: ...
