"""In-memory storage backend — demo data for dev mode and a test double."""

from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from tierfinder.schemas.jobs import JobProgress, JobStatus
from tierfinder.schemas.sources import ConnectionStatus, FileEntry, SourceCategory, StorageSource
from tierfinder.schemas.tiers import TierCostEstimate, TierType
from tierfinder.services import tier_model
from tierfinder.services.backend import NATIVE_SOURCE_ID, BackendError

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[\\/]")


def _key(path: str) -> str:
    """Canonical tree key: '/a/b', root is ''."""
    parts = [p for p in _SEPARATORS.split(path) if p]
    return "/" + "/".join(parts) if parts else ""


def _parent(key: str) -> str:
    return key.rsplit("/", 1)[0] if key else ""


def _name(key: str) -> str:
    return key.rsplit("/", 1)[-1]


def _within(key: str, ancestor: str) -> bool:
    return key == ancestor or key.startswith(ancestor + "/")


@dataclass
class _TierRequest:
    source_id: str
    paths: list[str]
    target_tier: TierType
    progress: float = 0.0


class MemoryStorageBackend:
    """Multi-source file trees held in dicts keyed by canonical path."""

    def __init__(self, progress_step: float = 50.0):
        self._sources: dict[str, StorageSource] = {}
        self._trees: dict[str, dict[str, FileEntry]] = {}
        self._requests: dict[str, _TierRequest] = {}
        self.native_files: dict[str, int] = {}  # host path -> size
        self.failing_paths: set[str] = set()
        self.calls: list[tuple] = []
        self.progress_step = progress_step

    # --- setup helpers ---

    def add_source(self, source: StorageSource) -> None:
        self._sources[source.id] = source
        self._trees.setdefault(source.id, {})

    def set_status(self, source_id: str, status: ConnectionStatus) -> None:
        self._sources[source_id] = self._sources[source_id].model_copy(update={"status": status})

    def add_directory(self, source_id: str, path: str) -> FileEntry:
        return self.add_file(source_id, path, is_directory=True)

    def add_file(
        self,
        source_id: str,
        path: str,
        size: int = 0,
        tier: TierType = TierType.HOT,
        is_directory: bool = False,
        tags: list[str] | None = None,
    ) -> FileEntry:
        """Insert an entry, creating missing parent directories."""
        tree = self._trees.setdefault(source_id, {})
        key = _key(path)
        parent = _parent(key)
        if parent and parent not in tree:
            self.add_directory(source_id, parent)
        entry = FileEntry(
            path=key,
            name=_name(key),
            size=0 if is_directory else size,
            is_directory=is_directory,
            tier_status=tier,
            mime_type="folder" if is_directory else None,
            tags=tags or [],
            modified_at=datetime.now(timezone.utc),
        )
        tree[key] = entry
        return entry

    def entry(self, source_id: str, path: str) -> FileEntry | None:
        return self._trees.get(source_id, {}).get(_key(path))

    def exists(self, source_id: str, path: str) -> bool:
        return self.entry(source_id, path) is not None

    @classmethod
    def demo(cls) -> MemoryStorageBackend:
        """Backend pre-populated with a few sources for dev mode."""
        backend = cls()
        backend.add_source(StorageSource(
            id="local-1", name="Local Storage", category=SourceCategory.LOCAL,
            provider_id="local", used_space=256_000_000_000, total_space=512_000_000_000,
        ))
        backend.add_source(StorageSource(
            id="s3-archive", name="Cloud Archive", category=SourceCategory.CLOUD,
            provider_id="aws-s3", current_tier=TierType.NEARLINE,
        ))
        backend.add_source(StorageSource(
            id="nas-1", name="Team Share", category=SourceCategory.NETWORK,
            provider_id="smb",
        ))

        backend.add_file("local-1", "/Documents/report.txt", 24_576)
        backend.add_file("local-1", "/Documents/budget.xlsx", 182_000, TierType.WARM)
        backend.add_file("local-1", "/Pictures/holiday.jpg", 4_200_000)
        backend.add_file("local-1", "/notes.md", 2_048)

        backend.add_file("s3-archive", "/projects/render-final.mov", 2 * tier_model.GB, TierType.COLD)
        backend.add_file("s3-archive", "/projects/raw-footage.mxf", 8 * tier_model.GB, TierType.ARCHIVE)
        backend.add_file("s3-archive", "/backups/2024.tar.gz", tier_model.GB, TierType.ARCHIVE)

        backend.add_file("nas-1", "/shared/handbook.pdf", 3_500_000, TierType.WARM)

        backend.native_files["/Users/demo/Desktop/photo.png"] = 2_000_000
        return backend

    # --- StorageBackend ---

    async def list_sources(self) -> list[StorageSource]:
        return [s.model_copy() for s in self._sources.values()]

    async def list_files(self, source_id: str, path: str) -> list[FileEntry]:
        self.calls.append(("list_files", source_id, path))
        tree = self._tree(source_id)
        key = _key(path)
        if key and (key not in tree or not tree[key].is_directory):
            raise BackendError(f"No such directory: {path}")
        children = [e for k, e in tree.items() if _parent(k) == key]
        children.sort(key=lambda e: (not e.is_directory, e.name.lower()))
        return [e.model_copy(deep=True) for e in children]

    async def copy(
        self, source_id: str, from_path: str, to_path: str, recursive: bool = True
    ) -> None:
        self.calls.append(("copy", source_id, from_path, to_path))
        self._check_failure(from_path, to_path)
        tree = self._tree(source_id)
        self._copy_subtree(tree, _key(from_path), tree, _key(to_path), recursive)

    async def move(self, source_id: str, from_path: str, to_path: str) -> None:
        self.calls.append(("move", source_id, from_path, to_path))
        self._check_failure(from_path, to_path)
        tree = self._tree(source_id)
        src, dst = _key(from_path), _key(to_path)
        self._copy_subtree(tree, src, tree, dst, True)
        self._remove_subtree(tree, src)

    async def copy_to_source(
        self, from_source_id: str, from_path: str, to_source_id: str, to_path: str
    ) -> None:
        self.calls.append(("copy_to_source", from_source_id, from_path, to_source_id, to_path))
        self._check_failure(from_path, to_path)
        dst_tree = self._tree(to_source_id)
        if from_source_id == NATIVE_SOURCE_ID:
            self._import_native(from_path, dst_tree, _key(to_path))
            return
        src_tree = self._tree(from_source_id)
        self._copy_subtree(src_tree, _key(from_path), dst_tree, _key(to_path), True)

    async def move_to_source(
        self, from_source_id: str, from_path: str, to_source_id: str, to_path: str
    ) -> None:
        self.calls.append(("move_to_source", from_source_id, from_path, to_source_id, to_path))
        self._check_failure(from_path, to_path)
        dst_tree = self._tree(to_source_id)
        if from_source_id == NATIVE_SOURCE_ID:
            self._import_native(from_path, dst_tree, _key(to_path))
            self.native_files.pop(from_path, None)
            return
        src_tree = self._tree(from_source_id)
        src = _key(from_path)
        self._copy_subtree(src_tree, src, dst_tree, _key(to_path), True)
        self._remove_subtree(src_tree, src)

    async def delete(self, source_id: str, path: str) -> None:
        self.calls.append(("delete", source_id, path))
        self._check_failure(path)
        tree = self._tree(source_id)
        key = _key(path)
        if key not in tree:
            raise BackendError(f"No such file or directory: {path}")
        self._remove_subtree(tree, key)

    async def rename(self, source_id: str, from_path: str, to_path: str) -> None:
        self.calls.append(("rename", source_id, from_path, to_path))
        self._check_failure(from_path, to_path)
        tree = self._tree(source_id)
        src, dst = _key(from_path), _key(to_path)
        self._copy_subtree(tree, src, tree, dst, True)
        self._remove_subtree(tree, src)

    async def mkdir(self, source_id: str, path: str) -> None:
        self.calls.append(("mkdir", source_id, path))
        self._check_failure(path)
        tree = self._tree(source_id)
        key = _key(path)
        if key in tree:
            raise BackendError(f"Already exists: {path}")
        self._check_parent(tree, key)
        self.add_directory(source_id, key)

    async def request_tier_change(
        self, source_id: str, paths: list[str], target_tier: TierType
    ) -> str:
        self.calls.append(("request_tier_change", source_id, tuple(paths), target_tier))
        self._check_failure(*paths)
        tree = self._tree(source_id)
        for path in paths:
            entry = tree.get(_key(path))
            if entry is None:
                raise BackendError(f"No such file or directory: {path}")
            entry.is_hydrating = True
        request_id = f"req-{uuid.uuid4().hex[:12]}"
        self._requests[request_id] = _TierRequest(source_id, list(paths), target_tier)
        return request_id

    async def estimate_tier_migration(
        self, source_id: str, paths: list[str], target_tier: TierType
    ) -> TierCostEstimate:
        tree = self._tree(source_id)
        entries = [tree[_key(p)] for p in paths if _key(p) in tree]
        return tier_model.estimate(entries, target_tier)

    async def get_tier_job(self, source_id: str, request_id: str) -> JobProgress:
        request = self._requests.get(request_id)
        if request is None or request.source_id != source_id:
            raise BackendError(f"Unknown tier request: {request_id}")
        request.progress = min(100.0, request.progress + self.progress_step)
        if request.progress < 100.0:
            return JobProgress(progress=request.progress, status=JobStatus.IN_PROGRESS)

        tree = self._trees.get(source_id, {})
        for path in request.paths:
            entry = tree.get(_key(path))
            if entry is not None:
                entry.tier_status = request.target_tier
                entry.is_hydrating = False
        return JobProgress(progress=100.0, status=JobStatus.COMPLETED)

    # --- internals ---

    def _tree(self, source_id: str) -> dict[str, FileEntry]:
        source = self._sources.get(source_id)
        if source is None:
            raise BackendError(f"Unknown source: {source_id}")
        if source.status != ConnectionStatus.CONNECTED:
            raise BackendError(f"Source {source_id} is {source.status.value}", retryable=True)
        return self._trees[source_id]

    def _check_failure(self, *paths: str) -> None:
        for path in paths:
            if path in self.failing_paths:
                raise BackendError(f"Simulated failure for {path}")

    @staticmethod
    def _check_parent(tree: dict[str, FileEntry], key: str) -> None:
        parent = _parent(key)
        if parent and (parent not in tree or not tree[parent].is_directory):
            raise BackendError(f"No such directory: {parent}")

    def _copy_subtree(
        self,
        src_tree: dict[str, FileEntry],
        src: str,
        dst_tree: dict[str, FileEntry],
        dst: str,
        recursive: bool,
    ) -> None:
        if src not in src_tree:
            raise BackendError(f"No such file or directory: {src}")
        if dst in dst_tree:
            raise BackendError(f"Already exists: {dst}")
        if src_tree is dst_tree and _within(dst, src):
            raise BackendError(f"Cannot copy {src} into itself")
        self._check_parent(dst_tree, dst)

        items = [
            (k, e) for k, e in src_tree.items()
            if k == src or (recursive and k.startswith(src + "/"))
        ]
        for k, e in items:
            new_key = dst + k[len(src):]
            dst_tree[new_key] = e.model_copy(
                update={"path": new_key, "name": _name(new_key)}, deep=True
            )

    @staticmethod
    def _remove_subtree(tree: dict[str, FileEntry], key: str) -> None:
        for k in [k for k in tree if _within(k, key)]:
            del tree[k]

    def _import_native(self, host_path: str, dst_tree: dict[str, FileEntry], dst: str) -> None:
        if dst in dst_tree:
            raise BackendError(f"Already exists: {dst}")
        self._check_parent(dst_tree, dst)
        dst_tree[dst] = FileEntry(
            path=dst,
            name=_name(dst),
            size=self.native_files.get(host_path, 0),
            modified_at=datetime.now(timezone.utc),
        )


class MemoryNativeClipboard:
    """Stand-in for the OS clipboard."""

    def __init__(self, paths: list[str] | None = None):
        self.paths: list[str] = list(paths or [])

    async def read(self) -> list[str]:
        return list(self.paths)

    async def write(self, paths: list[str]) -> None:
        self.paths = list(paths)
