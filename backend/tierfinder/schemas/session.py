"""Read-only session snapshots for the presentation layer."""

from pydantic import BaseModel

from tierfinder.schemas.clipboard import ClipboardStatus
from tierfinder.schemas.jobs import HydrationJob
from tierfinder.schemas.sources import FileEntry, SourceCategory


class Breadcrumb(BaseModel):
    name: str
    path: str


class NavigationSnapshot(BaseModel):
    source_id: str | None = None
    source_name: str | None = None
    category: SourceCategory | None = None
    current_path: str = ""
    history: list[str] = []
    history_index: int = 0
    can_go_back: bool = False
    can_go_forward: bool = False
    can_go_up: bool = False
    breadcrumbs: list[Breadcrumb] = []


class SelectionSnapshot(BaseModel):
    paths: list[str] = []
    anchor: str | None = None


class ListingSnapshot(BaseModel):
    source_id: str | None = None
    path: str = ""
    files: list[FileEntry] = []
    error: str | None = None
    retryable: bool = False


class SessionSnapshot(BaseModel):
    navigation: NavigationSnapshot
    selection: SelectionSnapshot
    clipboard: ClipboardStatus
    listing: ListingSnapshot
    jobs: list[HydrationJob] = []


class NavigateRequest(BaseModel):
    path: str
    add_to_history: bool = True


class SelectPathRequest(BaseModel):
    path: str


class SelectRangeRequest(BaseModel):
    target: str
    anchor: str | None = None  # defaults to the stored anchor
