"""Tests for transfer planning and sequential batch execution."""

import pytest

from tierfinder.config import Settings
from tierfinder.schemas.clipboard import ClipboardMode, ClipboardOrigin, ClipboardState
from tierfinder.schemas.transfers import TransferMode
from tierfinder.services.backend import NATIVE_SOURCE_ID, ConfirmationRequiredError
from tierfinder.services.transfers import TransferOrchestrator, TransferPolicy
from tierfinder.utils.naming import InvalidNameError
from tierfinder.utils.paths import UNC

FILES = ["/a.txt", "/b.txt", "/c.txt"]


@pytest.fixture
def orchestrator(backend):
    return TransferOrchestrator(backend, TransferPolicy())


def _calls(backend, name):
    return [call for call in backend.calls if call[0] == name]


class TestModeSelection:
    def test_paste_defaults_to_copy_and_drag_to_move(self, orchestrator):
        state = ClipboardState(source_id="s1", paths=tuple(FILES), mode=ClipboardMode.COPY)
        paste = orchestrator.plan_paste(state, "s1", "/dest")
        drag = orchestrator.plan_transfer(FILES, "s1", "/dest", "s1")

        assert {e.mode for e in paste.entries} == {TransferMode.COPY}
        assert {e.mode for e in drag.entries} == {TransferMode.MOVE}
        assert [e.destination_path for e in drag.entries] == [
            "/dest/a.txt", "/dest/b.txt", "/dest/c.txt",
        ]

    def test_cut_pastes_as_move(self, orchestrator):
        state = ClipboardState(source_id="s1", paths=("/a.txt",), mode=ClipboardMode.CUT)
        plan = orchestrator.plan_paste(state, "s1", "/dest")
        assert plan.entries[0].mode == TransferMode.MOVE

    def test_native_paste_is_copy_even_with_move_policy(self, backend):
        orchestrator = TransferOrchestrator(backend, TransferPolicy(paste_mode=TransferMode.MOVE))
        state = ClipboardState(
            source_id=NATIVE_SOURCE_ID, paths=("/host/x",), origin=ClipboardOrigin.NATIVE,
        )
        plan = orchestrator.plan_paste(state, "s1", "/dest")
        assert plan.entries[0].mode == TransferMode.COPY

    def test_modifiers(self, orchestrator):
        assert orchestrator.drag_mode("s1", "s1", force_copy=True) == TransferMode.COPY
        assert orchestrator.drag_mode("s1", "s2") == TransferMode.COPY
        assert orchestrator.drag_mode("s1", "s2", force_move=True) == TransferMode.MOVE

    def test_policy_from_settings(self):
        policy = TransferPolicy.from_settings(Settings(paste_mode="MOVE", drag_same_source_mode="copy"))
        assert policy.paste_mode == TransferMode.MOVE
        assert policy.drag_same_source_mode == TransferMode.COPY


class TestGuards:
    def test_descendant_drop_excludes_only_that_entry(self, orchestrator):
        plan = orchestrator.plan_transfer(["/docs", "/a.txt"], "s1", "/docs/sub", "s1")
        assert plan.skipped == ["/docs"]
        assert [e.source_path for e in plan.entries] == ["/a.txt"]
        assert plan.entries[0].destination_path == "/docs/sub/a.txt"

    def test_drop_onto_self(self, orchestrator):
        plan = orchestrator.plan_transfer(["/docs"], "s1", "/docs", "s1")
        assert plan.is_empty
        assert plan.skipped == ["/docs"]

    def test_move_into_own_parent_is_skipped(self, orchestrator):
        plan = orchestrator.plan_transfer(["/a.txt"], "s1", "", "s1")
        assert plan.skipped == ["/a.txt"]

    def test_copy_into_own_folder_gets_duplicate_name(self, orchestrator):
        state = ClipboardState(source_id="s1", paths=("/a.txt", "/b.txt"), mode=ClipboardMode.COPY)
        plan = orchestrator.plan_paste(
            state, "s1", "", existing_names=["a.txt", "b.txt", "a copy.txt"],
        )
        assert plan.skipped == []
        assert [e.destination_path for e in plan.entries] == ["/a copy 2.txt", "/b copy.txt"]

    def test_copy_into_own_folder_twice_in_one_batch(self, orchestrator):
        plan = orchestrator.plan_transfer(
            ["/a.txt", "/a.txt/"], "s1", "", "s1", mode=TransferMode.COPY,
        )
        assert [e.destination_path for e in plan.entries] == ["/a copy.txt", "/a copy 2.txt"]

    def test_guard_ignores_other_sources(self, orchestrator):
        plan = orchestrator.plan_transfer(["/docs"], "s1", "/docs/sub", "s2")
        assert plan.skipped == []
        assert plan.entries[0].is_cross_source

    def test_root_forms_are_equivalent(self, orchestrator):
        empty = orchestrator.plan_transfer(["/dest/x.txt"], "s1", "", "s1")
        slash = orchestrator.plan_transfer(["/dest/x.txt"], "s1", "/", "s1")
        assert empty.entries[0].destination_path == slash.entries[0].destination_path == "/x.txt"

    def test_unc_destination(self, orchestrator):
        plan = orchestrator.plan_transfer(
            ["\\\\srv\\share\\a.txt"], "nas", "\\\\srv\\share\\dir", "nas", dialect=UNC,
        )
        assert plan.entries[0].destination_path == "\\\\srv\\share\\dir\\a.txt"


def test_plan_import_is_copy_from_host(orchestrator):
    plan = orchestrator.plan_import(["/Users/me/photo.png"], "/dest", "s1")
    entry = plan.entries[0]
    assert entry.source_id == NATIVE_SOURCE_ID
    assert entry.mode == TransferMode.COPY
    assert entry.destination_path == "/dest/photo.png"


def test_plan_drop_on_source(orchestrator):
    plan = orchestrator.plan_drop_on_source(["/docs/report.txt"], "s1", "s2")
    assert plan.entries[0].destination_path == "/report.txt"
    assert plan.entries[0].mode == TransferMode.COPY

    forced = orchestrator.plan_drop_on_source(["/docs/report.txt"], "s1", "s2", force_move=True)
    assert forced.entries[0].mode == TransferMode.MOVE


class TestExecute:
    @pytest.mark.asyncio
    async def test_sequential_with_partial_failure(self, orchestrator, backend):
        backend.failing_paths = {"/b.txt"}
        plan = orchestrator.plan_transfer(FILES, "s1", "/dest", "s1")

        result = await orchestrator.execute_transfer(plan)

        assert result.succeeded == ["/dest/a.txt", "/dest/c.txt"]
        assert [f.path for f in result.failures] == ["/b.txt"]
        assert [c[2] for c in _calls(backend, "move")] == FILES
        assert backend.exists("s1", "/b.txt")
        assert not backend.exists("s1", "/a.txt")

    @pytest.mark.asyncio
    async def test_cross_source_copy(self, orchestrator, backend):
        plan = orchestrator.plan_transfer(["/a.txt"], "s1", "/inbox", "s2")
        result = await orchestrator.execute_transfer(plan)
        assert result.succeeded == ["/inbox/a.txt"]
        assert backend.exists("s2", "/inbox/a.txt")
        assert backend.exists("s1", "/a.txt")
        assert _calls(backend, "copy_to_source")

    @pytest.mark.asyncio
    async def test_cross_source_move(self, orchestrator, backend):
        plan = orchestrator.plan_transfer(["/docs"], "s1", "", "s2", force_move=True)
        await orchestrator.execute_transfer(plan)
        assert backend.exists("s2", "/docs/report.txt")
        assert not backend.exists("s1", "/docs")

    @pytest.mark.asyncio
    async def test_skipped_reported(self, orchestrator):
        plan = orchestrator.plan_transfer(["/docs"], "s1", "/docs/sub", "s1")
        result = await orchestrator.execute_transfer(plan)
        assert result.skipped == ["/docs"]
        assert result.ok_count == 0
        assert result.failed_count == 0


class TestDelete:
    @pytest.mark.asyncio
    async def test_requires_confirmation(self, orchestrator, backend):
        with pytest.raises(ConfirmationRequiredError):
            await orchestrator.delete("s1", ["/a.txt"])
        assert not _calls(backend, "delete")

    @pytest.mark.asyncio
    async def test_collects_failures(self, orchestrator, backend):
        result = await orchestrator.delete("s1", ["/a.txt", "/missing", "/c.txt"], confirmed=True)
        assert result.succeeded == ["/a.txt", "/c.txt"]
        assert [f.path for f in result.failures] == ["/missing"]


class TestSingleOperations:
    @pytest.mark.asyncio
    async def test_rename(self, orchestrator, backend):
        result = await orchestrator.rename("s1", "/a.txt", "renamed.txt")
        assert result.succeeded == ["/renamed.txt"]
        assert backend.exists("s1", "/renamed.txt")

    @pytest.mark.asyncio
    async def test_rename_rejects_before_backend(self, orchestrator, backend):
        with pytest.raises(InvalidNameError):
            await orchestrator.rename("s1", "/a.txt", "bad/name")
        assert not _calls(backend, "rename")

    @pytest.mark.asyncio
    async def test_rename_to_same_name(self, orchestrator, backend):
        result = await orchestrator.rename("s1", "/a.txt", "a.txt")
        assert result.skipped == ["/a.txt"]
        assert not _calls(backend, "rename")

    @pytest.mark.asyncio
    async def test_rename_conflict_is_failure(self, orchestrator):
        result = await orchestrator.rename("s1", "/a.txt", "b.txt")
        assert result.failed_count == 1

    @pytest.mark.asyncio
    async def test_create_folder(self, orchestrator, backend):
        result = await orchestrator.create_folder("s1", "/dest", ["untitled folder"])
        assert result.succeeded == ["/dest/untitled folder 2"]
        assert backend.entry("s1", "/dest/untitled folder 2").is_directory

    @pytest.mark.asyncio
    async def test_duplicate_naming(self, orchestrator, backend):
        backend.add_file("s1", "/docs/report copy.txt", 10)
        result = await orchestrator.duplicate(
            "s1", "/docs/report.txt", ["report.txt", "report copy.txt", "sub"],
        )
        assert result.succeeded == ["/docs/report copy 2.txt"]
        assert backend.entry("s1", "/docs/report copy 2.txt").size == 1024

    @pytest.mark.asyncio
    async def test_duplicate_folder_is_recursive(self, orchestrator, backend):
        await orchestrator.duplicate("s1", "/docs", ["a.txt", "docs", "dest"])
        assert backend.exists("s1", "/docs copy/report.txt")
