"""Tests for the clipboard arbiter — virtual context, OS fallback, clearing."""

from unittest.mock import AsyncMock

import pytest

from tierfinder.schemas.clipboard import ClipboardMode, ClipboardOrigin
from tierfinder.schemas.sources import SourceCategory, StorageSource
from tierfinder.services.backend import NATIVE_SOURCE_ID, BackendError, NoSourceSelectedError
from tierfinder.services.clipboard import ClipboardArbiter, NativeContents, VirtualContents, resolve
from tierfinder.services.memory_backend import MemoryNativeClipboard
from tierfinder.services.navigation import NavigationController
from tierfinder.services.selection import SelectionModel


@pytest.fixture
def nav():
    controller = NavigationController(SelectionModel())
    controller.select_source(StorageSource(id="s1", name="Disk", category=SourceCategory.LOCAL))
    return controller


@pytest.fixture
def native():
    return MemoryNativeClipboard()


@pytest.fixture
def arbiter(nav, native):
    return ClipboardArbiter(nav, native)


def test_resolve_tagged_union():
    virtual = resolve(VirtualContents("s1", ("/a",), ClipboardMode.CUT))
    assert (virtual.source_id, virtual.mode, virtual.origin) == ("s1", ClipboardMode.CUT, ClipboardOrigin.VIRTUAL)

    native = resolve(NativeContents(("/host/x",)))
    assert native.source_id == NATIVE_SOURCE_ID
    assert native.mode == ClipboardMode.COPY
    assert native.origin == ClipboardOrigin.NATIVE


class TestCopyCut:
    @pytest.mark.asyncio
    async def test_copy_sets_state_and_mirrors(self, arbiter, native):
        state = await arbiter.copy("s1", ["/a", "/b", "/a"])
        assert state.paths == ("/a", "/b")
        assert state.mode == ClipboardMode.COPY
        assert native.paths == ["/a", "/b"]

    @pytest.mark.asyncio
    async def test_cut_replaces_copy(self, arbiter):
        await arbiter.copy("s1", ["/a"])
        state = await arbiter.cut("s1", ["/b"])
        assert arbiter.state is state
        assert state.paths == ("/b",)
        assert arbiter.is_cut("s1", "/b")
        assert not arbiter.is_cut("s1", "/a")

    @pytest.mark.asyncio
    async def test_empty_copy_is_ignored(self, arbiter):
        await arbiter.copy("s1", ["/a"])
        await arbiter.copy("s1", [])
        assert arbiter.state.paths == ("/a",)

    @pytest.mark.asyncio
    async def test_mirror_failure_keeps_virtual_state(self, nav):
        native = AsyncMock()
        native.write = AsyncMock(side_effect=BackendError("no clipboard"))
        arbiter = ClipboardArbiter(nav, native)

        state = await arbiter.copy("s1", ["/a"])
        assert arbiter.state is state


class TestPasteable:
    @pytest.mark.asyncio
    async def test_nothing_to_paste(self, arbiter):
        assert await arbiter.has_pasteable() is False

    @pytest.mark.asyncio
    async def test_native_only(self, arbiter, native):
        native.paths = ["/host/photo.png"]
        assert await arbiter.has_pasteable() is True
        assert arbiter.status().native_count == 1

    @pytest.mark.asyncio
    async def test_native_read_failure_uses_cache(self, nav):
        native = AsyncMock()
        native.read = AsyncMock(side_effect=BackendError("denied"))
        arbiter = ClipboardArbiter(nav, native)
        assert await arbiter.read_native() == []


class TestResolveForPaste:
    @pytest.mark.asyncio
    async def test_prefers_virtual(self, arbiter, native):
        state = await arbiter.copy("s1", ["/a"])
        native.paths = ["/host/other"]
        assert await arbiter.resolve_for_paste() is state

    @pytest.mark.asyncio
    async def test_imports_native_once(self, arbiter, native):
        native.paths = ["/host/x", "/host/y"]
        first = await arbiter.resolve_for_paste()
        assert first.origin == ClipboardOrigin.NATIVE
        assert first.mode == ClipboardMode.COPY
        assert first.paths == ("/host/x", "/host/y")

        native.paths = ["/host/z"]
        assert await arbiter.resolve_for_paste() is first

    @pytest.mark.asyncio
    async def test_empty(self, arbiter):
        assert await arbiter.resolve_for_paste() is None


class TestClearAfterPaste:
    @pytest.mark.asyncio
    async def test_copy_kept_by_default(self, arbiter):
        state = await arbiter.copy("s1", ["/a"])
        assert await arbiter.clear_after_paste(state) is False
        assert arbiter.state is state

    @pytest.mark.asyncio
    async def test_copy_cleared_when_configured(self, arbiter):
        state = await arbiter.copy("s1", ["/a"])
        assert await arbiter.clear_after_paste(state, clear_copy=True) is True
        assert arbiter.state is None

    @pytest.mark.asyncio
    async def test_cut_cleared_with_os_clipboard(self, arbiter, native):
        state = await arbiter.cut("s1", ["/a"])
        assert await arbiter.clear_after_paste(state) is True
        assert arbiter.state is None
        assert native.paths == []

    @pytest.mark.asyncio
    async def test_native_import_cleared(self, arbiter, native):
        native.paths = ["/host/x"]
        state = await arbiter.resolve_for_paste()
        assert await arbiter.clear_after_paste(state) is True
        assert arbiter.state is None

    @pytest.mark.asyncio
    async def test_replaced_context_untouched(self, arbiter):
        old = await arbiter.cut("s1", ["/a"])
        new = await arbiter.copy("s1", ["/b"])
        assert await arbiter.clear_after_paste(old) is False
        assert arbiter.state is new


def test_clear(arbiter):
    arbiter._state = resolve(VirtualContents("s1", ("/a",), ClipboardMode.CUT))
    arbiter.clear()
    assert arbiter.state is None
    assert arbiter.status().has_pasteable is False


class TestPasteTarget:
    def test_defaults_to_current_path(self, arbiter, nav):
        nav.navigate_to("/docs")
        assert arbiter.paste_target() == ("s1", "/docs")
        assert arbiter.paste_target("/dest/") == ("s1", "/dest")

    def test_requires_source(self, native):
        arbiter = ClipboardArbiter(NavigationController(SelectionModel()), native)
        with pytest.raises(NoSourceSelectedError):
            arbiter.paste_target()


class TestOwnMirror:
    @pytest.mark.asyncio
    async def test_cleared_cut_is_not_pasteable(self, arbiter, native):
        await arbiter.cut("s1", ["/a"])
        arbiter.clear()

        assert native.paths == ["/a"]
        assert await arbiter.has_pasteable() is False
        assert await arbiter.resolve_for_paste() is None

    @pytest.mark.asyncio
    async def test_copy_cleared_after_paste_is_not_pasteable(self, arbiter):
        state = await arbiter.copy("s1", ["/a", "/b"])
        await arbiter.clear_after_paste(state, clear_copy=True)

        assert await arbiter.has_pasteable() is False
        assert arbiter.status().native_count == 0

    @pytest.mark.asyncio
    async def test_host_files_copied_later_are_pasteable(self, arbiter, native):
        await arbiter.copy("s1", ["/a"])
        arbiter.clear()
        native.paths = ["/host/x"]

        state = await arbiter.resolve_for_paste()
        assert state.origin == ClipboardOrigin.NATIVE
        assert state.paths == ("/host/x",)
