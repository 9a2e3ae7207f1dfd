"""Clipboard arbitration between the virtual clipboard and the OS clipboard."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from tierfinder.schemas.clipboard import ClipboardMode, ClipboardOrigin, ClipboardState, ClipboardStatus
from tierfinder.services.backend import (
    NATIVE_SOURCE_ID,
    BackendError,
    NativeClipboard,
    NoSourceSelectedError,
)
from tierfinder.services.navigation import NavigationController

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VirtualContents:
    """Paths copied or cut inside the browser."""
    source_id: str
    paths: tuple[str, ...]
    mode: ClipboardMode


@dataclass(frozen=True)
class NativeContents:
    """File references found on the OS clipboard. Always pasted as copy."""
    paths: tuple[str, ...]


ClipboardSource = VirtualContents | NativeContents


def resolve(source: ClipboardSource) -> ClipboardState:
    """Collapse either clipboard flavour into the one state the planner uses."""
    if isinstance(source, VirtualContents):
        return ClipboardState(
            source_id=source.source_id,
            paths=source.paths,
            mode=source.mode,
            origin=ClipboardOrigin.VIRTUAL,
        )
    return ClipboardState(
        source_id=NATIVE_SOURCE_ID,
        paths=source.paths,
        mode=ClipboardMode.COPY,
        origin=ClipboardOrigin.NATIVE,
    )


class ClipboardArbiter:
    """Holds at most one virtual clipboard context and mirrors it to the OS.

    When the virtual clipboard is empty the native clipboard is the fallback:
    its file references are imported as a copy context at paste time.
    """

    def __init__(self, navigation: NavigationController, native: NativeClipboard):
        self._navigation = navigation
        self._native = native
        self._state: ClipboardState | None = None
        self._native_paths: list[str] = []
        self._mirrored: tuple[str, ...] = ()

    @property
    def state(self) -> ClipboardState | None:
        return self._state

    async def copy(self, source_id: str, paths: list[str]) -> ClipboardState | None:
        return await self._set(VirtualContents(source_id, tuple(dict.fromkeys(paths)), ClipboardMode.COPY))

    async def cut(self, source_id: str, paths: list[str]) -> ClipboardState | None:
        return await self._set(VirtualContents(source_id, tuple(dict.fromkeys(paths)), ClipboardMode.CUT))

    async def _set(self, contents: VirtualContents) -> ClipboardState | None:
        if not contents.paths:
            logger.debug("Ignoring %s of an empty selection", contents.mode.value)
            return self._state

        # Replaced in one assignment; the previous context is simply dropped
        self._state = resolve(contents)
        logger.info(
            "Clipboard %s: %d item(s) from %s",
            contents.mode.value, len(contents.paths), contents.source_id,
        )

        try:
            await self._native.write(list(contents.paths))
            self._mirrored = contents.paths
            self._native_paths = []
        except BackendError as e:
            logger.warning("Could not mirror clipboard to the OS: %s", e)
        return self._state

    async def read_native(self) -> list[str]:
        """Read (and cache) host file references from the OS clipboard.

        Paths this arbiter mirrored there itself are browser paths, not host
        files, and read as an empty clipboard.
        """
        try:
            paths = await self._native.read()
        except BackendError as e:
            logger.warning("Could not read the OS clipboard: %s", e)
            return list(self._native_paths)

        if self._mirrored and tuple(paths) == self._mirrored:
            paths = []
        elif paths:
            self._mirrored = ()
        self._native_paths = list(paths)
        return list(self._native_paths)

    async def has_pasteable(self) -> bool:
        if self._state is not None:
            return True
        return bool(await self.read_native())

    async def resolve_for_paste(self) -> ClipboardState | None:
        """The context a paste should use, importing the OS clipboard if needed.

        The import happens once: the synthesized context is stored and later
        pastes reuse it until it is cleared.
        """
        if self._state is not None:
            return self._state

        paths = await self.read_native()
        if not paths:
            return None

        self._state = resolve(NativeContents(tuple(dict.fromkeys(paths))))
        logger.info("Imported %d item(s) from the OS clipboard", len(paths))
        return self._state

    async def clear_after_paste(self, state: ClipboardState, clear_copy: bool = False) -> bool:
        """Drop ``state`` once its paste batch finished. Returns True if cleared.

        Cut and OS-imported contexts are always cleared; copy contexts only
        with ``clear_copy``. A context replaced while the paste ran is left alone.
        """
        if self._state is not state:
            return False

        should_clear = (
            state.mode == ClipboardMode.CUT
            or state.origin == ClipboardOrigin.NATIVE
            or clear_copy
        )
        if not should_clear:
            return False

        self._state = None
        if state.mode == ClipboardMode.CUT:
            # Cut files no longer exist at the mirrored paths
            try:
                await self._native.write([])
                self._mirrored = ()
                self._native_paths = []
            except BackendError as e:
                logger.warning("Could not clear the OS clipboard: %s", e)
        logger.debug("Clipboard cleared after paste")
        return True

    def clear(self) -> None:
        """Drop the virtual context. The OS mirror stays but is no longer pasteable."""
        self._state = None

    def is_cut(self, source_id: str, path: str) -> bool:
        state = self._state
        return (
            state is not None
            and state.mode == ClipboardMode.CUT
            and state.source_id == source_id
            and path in state.paths
        )

    def paste_target(self, path: str | None = None) -> tuple[str, str]:
        """(source_id, directory) a paste lands in; defaults to the current path."""
        source_id = self._navigation.source_id
        if source_id is None:
            raise NoSourceSelectedError("Select a source before pasting")
        if path is None:
            return source_id, self._navigation.current_path
        return source_id, self._navigation.dialect.normalize(path)

    def status(self) -> ClipboardStatus:
        return ClipboardStatus(
            state=self._state,
            has_pasteable=self._state is not None or bool(self._native_paths),
            native_count=len(self._native_paths),
        )
