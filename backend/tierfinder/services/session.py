"""Browser session — one explicitly owned set of controllers per open browser."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from tierfinder.schemas.clipboard import ClipboardState
from tierfinder.schemas.jobs import HydrationJob
from tierfinder.schemas.session import ListingSnapshot, SessionSnapshot
from tierfinder.schemas.sources import FileEntry, StorageSource
from tierfinder.schemas.tiers import TierCostEstimate, TierType
from tierfinder.schemas.transfers import BatchResult, TransferFailure, TransferPlan
from tierfinder.services.backend import (
    BackendError,
    NativeClipboard,
    NoSourceSelectedError,
    StorageBackend,
    UnknownSourceError,
)
from tierfinder.services.clipboard import ClipboardArbiter
from tierfinder.services.hydration import TierMigrationJobManager
from tierfinder.services.navigation import NavigationController
from tierfinder.services.progress import ProgressSource
from tierfinder.services.selection import SelectionModel
from tierfinder.services.transfers import TransferOrchestrator, TransferPolicy
from tierfinder.utils.paths import dialect_for

logger = logging.getLogger(__name__)


class BrowserSession:
    """Entry points the presentation layer calls, plus read-only snapshots.

    Every mutation goes through the owned components; after any batch that
    touches the current source the listing is fetched again.
    """

    def __init__(
        self,
        backend: StorageBackend,
        native_clipboard: NativeClipboard,
        progress_source: ProgressSource,
        policy: TransferPolicy | None = None,
        history_limit: int | None = None,
    ):
        self.backend = backend
        self.selection = SelectionModel()
        self.navigation = NavigationController(self.selection, history_limit)
        self.clipboard = ClipboardArbiter(self.navigation, native_clipboard)
        self.transfers = TransferOrchestrator(backend, policy)
        self.jobs = TierMigrationJobManager(backend, progress_source)

        self._sources: list[StorageSource] = []
        self._listing: list[FileEntry] = []
        self.sources_error: str | None = None
        self.listing_error: str | None = None
        self.listing_retryable = False

    # --- sources ---

    @property
    def sources(self) -> list[StorageSource]:
        return list(self._sources)

    @property
    def listing(self) -> list[FileEntry]:
        return list(self._listing)

    @property
    def visible_paths(self) -> list[str]:
        return [entry.path for entry in self._listing]

    async def load_sources(self) -> list[StorageSource]:
        """Refresh the source list; on failure the previous list is kept."""
        try:
            sources = await self.backend.list_sources()
        except BackendError as e:
            logger.warning("Could not load sources: %s", e)
            self.sources_error = str(e)
            return self.sources

        self._sources = sources
        self.sources_error = None

        current_id = self.navigation.source_id
        for source in sources:
            if source.id == current_id:
                self.navigation.update_source(source)
                if not source.is_connected:
                    self._set_listing_error(f"{source.name} is {source.status.value}")
        return self.sources

    def get_source(self, source_id: str) -> StorageSource:
        for source in self._sources:
            if source.id == source_id:
                return source
        raise UnknownSourceError(source_id)

    # --- navigation ---

    async def select_source(self, source_id: str) -> bool:
        if not self.navigation.select_source(self.get_source(source_id)):
            return False
        await self.refresh()
        return True

    async def navigate_to(self, path: str, add_to_history: bool = True) -> bool:
        if not self.navigation.navigate_to(path, add_to_history):
            return False
        await self.refresh()
        return True

    async def go_back(self) -> bool:
        if not self.navigation.go_back():
            return False
        await self.refresh()
        return True

    async def go_forward(self) -> bool:
        if not self.navigation.go_forward():
            return False
        await self.refresh()
        return True

    async def go_up(self) -> bool:
        if not self.navigation.go_up():
            return False
        await self.refresh()
        return True

    async def refresh(self) -> bool:
        """Fetch the listing for the current location.

        The response is discarded if navigation moved on while the fetch was
        in flight. Returns True if a listing was applied.
        """
        token = self.navigation.token
        if token is None:
            self._listing = []
            return False

        try:
            files = await self.backend.list_files(token.source_id, token.path)
        except BackendError as e:
            if not self.navigation.is_current(token):
                logger.warning("Ignoring failed listing for stale location %s:%s", token.source_id, token.path)
                return False
            logger.warning("Listing %s:%s failed: %s", token.source_id, token.path or "/", e)
            self._set_listing_error(str(e))
            return False

        if not self.navigation.is_current(token):
            logger.warning("Discarding stale listing for %s:%s", token.source_id, token.path or "/")
            return False

        self._listing = files
        self.listing_error = None
        self.listing_retryable = False
        self.selection.revalidate(self.visible_paths)
        return True

    def _set_listing_error(self, message: str) -> None:
        self._listing = []
        self.listing_error = message
        self.listing_retryable = True
        self.selection.clear()

    # --- selection ---

    def toggle(self, path: str) -> bool:
        if path not in self.visible_paths:
            return False
        return self.selection.toggle(path)

    def select_single(self, path: str) -> bool:
        if path not in self.visible_paths:
            return False
        self.selection.select_single(path)
        return True

    def select_range(self, target: str, anchor: str | None = None) -> list[str]:
        if anchor is None:
            return self.selection.extend_to(target, self.visible_paths)
        return self.selection.select_range(anchor, target, self.visible_paths)

    def select_all(self) -> None:
        self.selection.select_all(self.visible_paths)

    def clear_selection(self) -> None:
        self.selection.clear()

    # --- clipboard ---

    def _require_source(self) -> str:
        source_id = self.navigation.source_id
        if source_id is None:
            raise NoSourceSelectedError("No storage source selected")
        return source_id

    def _paths_or_selection(self, paths: Iterable[str] | None) -> list[str]:
        return list(paths) if paths is not None else self.selection.paths

    async def copy_selection(self, paths: list[str] | None = None) -> ClipboardState | None:
        return await self.clipboard.copy(self._require_source(), self._paths_or_selection(paths))

    async def cut_selection(self, paths: list[str] | None = None) -> ClipboardState | None:
        return await self.clipboard.cut(self._require_source(), self._paths_or_selection(paths))

    async def paste(self, target_path: str | None = None) -> BatchResult:
        """Paste the virtual clipboard, or the OS clipboard if it is empty."""
        source_id, directory = self.clipboard.paste_target(target_path)
        state = await self.clipboard.resolve_for_paste()
        if state is None:
            return BatchResult()

        try:
            names = await self._names_for_copy(state.source_id, source_id, directory)
            plan = self.transfers.plan_paste(
                state, source_id, directory, self.navigation.dialect, existing_names=names,
            )
            result = await self.transfers.execute_transfer(plan)
        finally:
            await self.clipboard.clear_after_paste(
                state, clear_copy=self.transfers.policy.clear_clipboard_after_copy_paste
            )
        await self.refresh()
        return result

    # --- transfers ---

    async def drop(
        self,
        source_id: str,
        paths: list[str],
        target_path: str | None = None,
        force_copy: bool = False,
        force_move: bool = False,
    ) -> BatchResult:
        """Drop items (from any source) into a folder of the current source."""
        destination_id = self._require_source()
        dialect = self.navigation.dialect
        directory = self.navigation.current_path if target_path is None else dialect.normalize(target_path)
        plan = self.transfers.plan_transfer(
            paths, source_id, directory, destination_id,
            force_copy=force_copy, force_move=force_move, dialect=dialect,
            existing_names=await self._names_for_copy(source_id, destination_id, directory),
        )
        return await self._execute(plan)

    async def drop_on_source(
        self,
        source_id: str,
        paths: list[str],
        target_source_id: str,
        force_move: bool = False,
    ) -> BatchResult:
        target = self.get_source(target_source_id)
        plan = self.transfers.plan_drop_on_source(
            paths, source_id, target.id, force_move=force_move,
            dialect=dialect_for(target.category),
        )
        return await self._execute(plan)

    async def import_external(
        self, external_paths: list[str], target_path: str | None = None
    ) -> BatchResult:
        destination_id = self._require_source()
        dialect = self.navigation.dialect
        directory = self.navigation.current_path if target_path is None else dialect.normalize(target_path)
        plan = self.transfers.plan_import(external_paths, directory, destination_id, dialect)
        return await self._execute(plan)

    async def _execute(self, plan: TransferPlan) -> BatchResult:
        result = await self.transfers.execute_transfer(plan)
        await self.refresh()
        return result

    # --- file operations ---

    async def delete_selection(
        self, paths: list[str] | None = None, confirmed: bool = False
    ) -> BatchResult:
        source_id = self._require_source()
        result = await self.transfers.delete(
            source_id, self._paths_or_selection(paths), confirmed=confirmed
        )
        await self.refresh()
        return result

    async def rename(self, path: str, new_name: str) -> BatchResult:
        source_id = self._require_source()
        result = await self.transfers.rename(source_id, path, new_name, self.navigation.dialect)
        await self.refresh()
        return result

    async def create_folder(self, parent_path: str | None = None) -> BatchResult:
        source_id = self._require_source()
        dialect = self.navigation.dialect
        parent = self.navigation.current_path if parent_path is None else dialect.normalize(parent_path)
        try:
            names = await self._sibling_names(source_id, parent)
        except BackendError as e:
            return BatchResult(failures=[TransferFailure(path=parent, error=str(e))])

        result = await self.transfers.create_folder(source_id, parent, names, dialect)
        await self.refresh()
        return result

    async def duplicate(self, path: str) -> BatchResult:
        source_id = self._require_source()
        dialect = self.navigation.dialect
        try:
            names = await self._sibling_names(source_id, dialect.parent(path))
        except BackendError as e:
            return BatchResult(failures=[TransferFailure(path=path, error=str(e))])

        result = await self.transfers.duplicate(source_id, path, names, dialect)
        await self.refresh()
        return result

    async def _sibling_names(self, source_id: str, directory: str) -> list[str]:
        if directory == self.navigation.current_path and self.listing_error is None:
            return [entry.name for entry in self._listing]
        return [entry.name for entry in await self.backend.list_files(source_id, directory)]

    async def _names_for_copy(
        self, from_source_id: str, to_source_id: str, directory: str
    ) -> list[str]:
        """Names already in ``directory``, needed when a copy lands beside its original."""
        if from_source_id != to_source_id:
            return []
        try:
            return await self._sibling_names(to_source_id, directory)
        except BackendError as e:
            logger.warning("Could not list %s:%s for copy names: %s", to_source_id, directory or "/", e)
            return []

    # --- tiers ---

    def _entries(self, paths: Iterable[str] | None) -> list[FileEntry]:
        wanted = set(self._paths_or_selection(paths))
        return [entry for entry in self._listing if entry.path in wanted]

    async def estimate_tier_change(
        self, target_tier: TierType, paths: list[str] | None = None
    ) -> TierCostEstimate:
        source_id = self._require_source()
        return await self.jobs.request_estimate(source_id, self._entries(paths), target_tier)

    async def change_tier(
        self, target_tier: TierType, paths: list[str] | None = None
    ) -> HydrationJob:
        source_id = self._require_source()
        files = self._entries(paths)
        if not files:
            raise ValueError("Select at least one listed file to change its tier")
        return self.jobs.start(source_id, files, target_tier)

    def cancel_job(self, job_id: str) -> bool:
        return self.jobs.cancel(job_id)

    # --- presentation ---

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            navigation=self.navigation.snapshot(),
            selection=self.selection.snapshot(),
            clipboard=self.clipboard.status(),
            listing=ListingSnapshot(
                source_id=self.navigation.source_id,
                path=self.navigation.current_path,
                files=self.listing,
                error=self.listing_error,
                retryable=self.listing_retryable,
            ),
            jobs=self.jobs.jobs,
        )

    async def close(self) -> None:
        await self.jobs.shutdown()
