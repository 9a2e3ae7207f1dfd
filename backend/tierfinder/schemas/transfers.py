"""Transfer plan and batch result schemas."""

from enum import Enum

from pydantic import BaseModel


class TransferMode(str, Enum):
    COPY = "copy"
    MOVE = "move"


class TransferEntry(BaseModel):
    """One planned copy/move."""
    source_id: str
    source_path: str
    destination_source_id: str
    destination_path: str
    mode: TransferMode

    @property
    def is_cross_source(self) -> bool:
        return self.source_id != self.destination_source_id


class TransferPlan(BaseModel):
    """Per-item operations derived from one paste or drop."""
    entries: list[TransferEntry] = []
    skipped: list[str] = []  # self/descendant drops, never failures

    @property
    def is_empty(self) -> bool:
        return not self.entries


class TransferFailure(BaseModel):
    path: str
    error: str


class BatchResult(BaseModel):
    """Outcome of a sequential batch — successes are never obscured by failures."""
    succeeded: list[str] = []
    failures: list[TransferFailure] = []
    skipped: list[str] = []

    @property
    def ok_count(self) -> int:
        return len(self.succeeded)

    @property
    def failed_count(self) -> int:
        return len(self.failures)


class DropRequest(BaseModel):
    source_id: str
    paths: list[str]
    target_path: str | None = None
    force_copy: bool = False
    force_move: bool = False


class DropOnSourceRequest(BaseModel):
    source_id: str
    paths: list[str]
    target_source_id: str
    force_move: bool = False


class ImportRequest(BaseModel):
    external_paths: list[str]
    target_path: str | None = None


class DeleteRequest(BaseModel):
    paths: list[str] | None = None  # defaults to current selection
    confirmed: bool = False


class RenameRequest(BaseModel):
    path: str
    new_name: str


class CreateFolderRequest(BaseModel):
    parent_path: str | None = None


class DuplicateRequest(BaseModel):
    path: str
