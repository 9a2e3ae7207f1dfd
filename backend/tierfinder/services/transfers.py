"""Transfer planning and sequential execution of copy/move/delete batches."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from tierfinder.config import Settings, settings
from tierfinder.schemas.clipboard import ClipboardMode, ClipboardOrigin, ClipboardState
from tierfinder.schemas.transfers import (
    BatchResult,
    TransferEntry,
    TransferFailure,
    TransferMode,
    TransferPlan,
)
from tierfinder.services.backend import (
    NATIVE_SOURCE_ID,
    BackendError,
    ConfirmationRequiredError,
    StorageBackend,
)
from tierfinder.utils.naming import duplicate_name, untitled_folder_name, validate_name
from tierfinder.utils.paths import POSIX, ROOT, PathDialect, basename

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransferPolicy:
    """Default transfer mode per entry point."""
    paste_mode: TransferMode = TransferMode.COPY
    drag_same_source_mode: TransferMode = TransferMode.MOVE
    drag_cross_source_mode: TransferMode = TransferMode.COPY
    clear_clipboard_after_copy_paste: bool = False

    @classmethod
    def from_settings(cls, cfg: Settings | None = None) -> TransferPolicy:
        cfg = cfg or settings
        return cls(
            paste_mode=TransferMode(cfg.paste_mode),
            drag_same_source_mode=TransferMode(cfg.drag_same_source_mode),
            drag_cross_source_mode=TransferMode(cfg.drag_cross_source_mode),
            clear_clipboard_after_copy_paste=cfg.clear_clipboard_after_copy_paste,
        )


class TransferOrchestrator:
    """Turns paste/drop intents into plans and runs them one entry at a time."""

    def __init__(self, backend: StorageBackend, policy: TransferPolicy | None = None):
        self._backend = backend
        self.policy = policy or TransferPolicy.from_settings()

    # --- planning ---

    def drag_mode(
        self,
        source_id: str,
        destination_source_id: str,
        force_copy: bool = False,
        force_move: bool = False,
    ) -> TransferMode:
        if force_move:
            return TransferMode.MOVE
        if force_copy:
            return TransferMode.COPY
        if source_id == destination_source_id:
            return self.policy.drag_same_source_mode
        return self.policy.drag_cross_source_mode

    def plan_transfer(
        self,
        paths: Iterable[str],
        source_id: str,
        destination_path: str,
        destination_source_id: str,
        mode: TransferMode | None = None,
        force_copy: bool = False,
        force_move: bool = False,
        dialect: PathDialect = POSIX,
        existing_names: Iterable[str] | None = None,
    ) -> TransferPlan:
        """Plan one drop or paste.

        Each item lands at ``destination_path/<basename>``. Within one source,
        items dropped onto themselves or into their own subtree are skipped,
        as are moves that would leave an item where it already is. Skipped
        items are not failures. A copy into the item's own folder gets the
        next free duplicate name among ``existing_names``.
        """
        if mode is None:
            mode = self.drag_mode(source_id, destination_source_id, force_copy, force_move)
        same_source = source_id == destination_source_id
        taken = set(existing_names or ())
        plan = TransferPlan()

        for path in dict.fromkeys(paths):
            if same_source and dialect.is_same_or_descendant(destination_path, path):
                logger.debug("Skipping %s: destination is inside it", path)
                plan.skipped.append(path)
                continue

            name = basename(path)
            target = dialect.join(destination_path, name)
            if same_source and target == dialect.normalize(path):
                if mode == TransferMode.MOVE:
                    logger.debug("Skipping %s: already in %s", path, destination_path or "/")
                    plan.skipped.append(path)
                    continue
                name = duplicate_name(name, taken)
                taken.add(name)
                target = dialect.join(destination_path, name)

            plan.entries.append(TransferEntry(
                source_id=source_id,
                source_path=path,
                destination_source_id=destination_source_id,
                destination_path=target,
                mode=mode,
            ))
        return plan

    def plan_paste(
        self,
        state: ClipboardState,
        destination_source_id: str,
        destination_path: str,
        dialect: PathDialect = POSIX,
        existing_names: Iterable[str] | None = None,
    ) -> TransferPlan:
        """A cut pastes as move; copies follow the paste policy, OS imports copy."""
        if state.mode == ClipboardMode.CUT:
            mode = TransferMode.MOVE
        elif state.origin == ClipboardOrigin.NATIVE:
            mode = TransferMode.COPY
        else:
            mode = self.policy.paste_mode
        return self.plan_transfer(
            state.paths, state.source_id, destination_path, destination_source_id,
            mode=mode, dialect=dialect, existing_names=existing_names,
        )

    def plan_import(
        self,
        external_paths: Iterable[str],
        destination_path: str,
        destination_source_id: str,
        dialect: PathDialect = POSIX,
    ) -> TransferPlan:
        """Files dragged in from the host filesystem are always copied."""
        return self.plan_transfer(
            external_paths, NATIVE_SOURCE_ID, destination_path, destination_source_id,
            mode=TransferMode.COPY, dialect=dialect,
        )

    def plan_drop_on_source(
        self,
        paths: Iterable[str],
        source_id: str,
        target_source_id: str,
        force_move: bool = False,
        dialect: PathDialect = POSIX,
    ) -> TransferPlan:
        """Drop onto a sidebar source: lands in its root, copy unless forced."""
        mode = TransferMode.MOVE if force_move else TransferMode.COPY
        return self.plan_transfer(
            paths, source_id, ROOT, target_source_id, mode=mode, dialect=dialect,
        )

    # --- execution ---

    async def execute_transfer(self, plan: TransferPlan) -> BatchResult:
        """Run entries strictly in plan order; one failure never stops the batch."""
        result = BatchResult(skipped=list(plan.skipped))
        for entry in plan.entries:
            try:
                await self._execute_entry(entry)
            except BackendError as e:
                logger.warning(
                    "%s %s -> %s failed: %s",
                    entry.mode.value, entry.source_path, entry.destination_path, e,
                )
                result.failures.append(TransferFailure(path=entry.source_path, error=str(e)))
            else:
                result.succeeded.append(entry.destination_path)

        if plan.entries:
            logger.info(
                "Transfer batch finished: %d ok, %d failed, %d skipped",
                result.ok_count, result.failed_count, len(result.skipped),
            )
        return result

    async def _execute_entry(self, entry: TransferEntry) -> None:
        if entry.is_cross_source:
            if entry.mode == TransferMode.MOVE:
                await self._backend.move_to_source(
                    entry.source_id, entry.source_path,
                    entry.destination_source_id, entry.destination_path,
                )
            else:
                await self._backend.copy_to_source(
                    entry.source_id, entry.source_path,
                    entry.destination_source_id, entry.destination_path,
                )
        elif entry.mode == TransferMode.MOVE:
            await self._backend.move(entry.source_id, entry.source_path, entry.destination_path)
        else:
            await self._backend.copy(
                entry.source_id, entry.source_path, entry.destination_path, recursive=True
            )

    # --- file operations on one source ---

    async def delete(self, source_id: str, paths: Iterable[str], confirmed: bool = False) -> BatchResult:
        if not confirmed:
            raise ConfirmationRequiredError("Deleting files requires confirmation")

        result = BatchResult()
        for path in dict.fromkeys(paths):
            try:
                await self._backend.delete(source_id, path)
            except BackendError as e:
                logger.warning("Delete %s failed: %s", path, e)
                result.failures.append(TransferFailure(path=path, error=str(e)))
            else:
                result.succeeded.append(path)

        logger.info("Delete finished: %d ok, %d failed", result.ok_count, result.failed_count)
        return result

    async def rename(
        self, source_id: str, path: str, new_name: str, dialect: PathDialect = POSIX
    ) -> BatchResult:
        """Rename in place. Invalid names raise InvalidNameError before any backend call."""
        name = validate_name(new_name)
        new_path = dialect.join(dialect.parent(path), name)
        if new_path == dialect.normalize(path):
            return BatchResult(skipped=[path])
        return await self._single(
            path, new_path, self._backend.rename(source_id, path, new_path)
        )

    async def create_folder(
        self,
        source_id: str,
        parent: str,
        existing_names: Iterable[str],
        dialect: PathDialect = POSIX,
    ) -> BatchResult:
        new_path = dialect.join(parent, untitled_folder_name(existing_names))
        return await self._single(parent, new_path, self._backend.mkdir(source_id, new_path))

    async def duplicate(
        self,
        source_id: str,
        path: str,
        sibling_names: Iterable[str],
        dialect: PathDialect = POSIX,
    ) -> BatchResult:
        new_name = duplicate_name(dialect.basename(path), sibling_names)
        new_path = dialect.join(dialect.parent(path), new_name)
        return await self._single(
            path, new_path,
            self._backend.copy(source_id, path, new_path, recursive=True),
        )

    @staticmethod
    async def _single(path: str, new_path: str, call) -> BatchResult:
        try:
            await call
        except BackendError as e:
            logger.warning("Operation on %s failed: %s", path, e)
            return BatchResult(failures=[TransferFailure(path=path, error=str(e))])
        logger.info("%s -> %s", path or "/", new_path)
        return BatchResult(succeeded=[new_path])
