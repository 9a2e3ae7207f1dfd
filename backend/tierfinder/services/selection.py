"""Selection of paths within the current listing."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from tierfinder.schemas.session import SelectionSnapshot

logger = logging.getLogger(__name__)


class SelectionModel:
    """Selected paths (insertion ordered) plus the anchor for range selection."""

    def __init__(self) -> None:
        self._paths: dict[str, None] = {}
        self._anchor: str | None = None

    @property
    def paths(self) -> list[str]:
        return list(self._paths)

    @property
    def anchor(self) -> str | None:
        return self._anchor

    @property
    def is_empty(self) -> bool:
        return not self._paths

    def __contains__(self, path: object) -> bool:
        return path in self._paths

    def __len__(self) -> int:
        return len(self._paths)

    def toggle(self, path: str) -> bool:
        """Add or remove one path (modifier-click). Returns True if now selected."""
        self._anchor = path
        if path in self._paths:
            del self._paths[path]
            return False
        self._paths[path] = None
        return True

    def select_single(self, path: str) -> None:
        self._paths = {path: None}
        self._anchor = path

    def select_range(
        self, anchor: str | None, target: str, visible: Sequence[str]
    ) -> list[str]:
        """Select the inclusive span between anchor and target in visible order.

        A missing or stale anchor degrades to selecting only ``target``; a
        target that is not visible leaves the selection untouched.
        """
        visible = list(visible)
        if target not in visible:
            logger.debug("Range target %s not in listing, ignoring", target)
            return self.paths
        if anchor is None or anchor not in visible:
            self.select_single(target)
            return self.paths

        start, end = sorted((visible.index(anchor), visible.index(target)))
        self._paths = dict.fromkeys(visible[start:end + 1])
        self._anchor = anchor
        return self.paths

    def extend_to(self, target: str, visible: Sequence[str]) -> list[str]:
        """Shift-click: range from the stored anchor."""
        return self.select_range(self._anchor, target, visible)

    def select_all(self, visible: Sequence[str]) -> None:
        self._paths = dict.fromkeys(visible)
        self._anchor = visible[0] if visible else None

    def clear(self) -> None:
        self._paths = {}
        self._anchor = None

    def revalidate(self, listing: Iterable[str]) -> None:
        """Drop paths (and a stale anchor) no longer present in the listing."""
        present = set(listing)
        dropped = [p for p in self._paths if p not in present]
        if dropped:
            logger.debug("Dropping %d stale selected path(s)", len(dropped))
        self._paths = {p: None for p in self._paths if p in present}
        if self._anchor is not None and self._anchor not in present:
            self._anchor = None

    def snapshot(self) -> SelectionSnapshot:
        return SelectionSnapshot(paths=self.paths, anchor=self._anchor)
