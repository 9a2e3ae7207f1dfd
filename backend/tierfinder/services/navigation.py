"""Navigation across storage sources — current path and back/forward history."""

from __future__ import annotations

import logging
from typing import NamedTuple

from tierfinder.config import settings
from tierfinder.schemas.session import Breadcrumb, NavigationSnapshot
from tierfinder.schemas.sources import StorageSource
from tierfinder.services.selection import SelectionModel
from tierfinder.utils.paths import POSIX, ROOT, PathDialect, dialect_for

logger = logging.getLogger(__name__)


class ListingToken(NamedTuple):
    """Navigation state a listing fetch was issued under."""
    source_id: str
    path: str
    generation: int


class NavigationController:
    """Owns NavigationState; clears the selection on every navigation.

    Invariant: ``0 <= history_index < len(history)`` and
    ``history[history_index] == current_path``. Without a selected source
    every navigation operation is a no-op.
    """

    def __init__(self, selection: SelectionModel, history_limit: int | None = None):
        self._selection = selection
        self._history_limit = history_limit or settings.history_limit
        self._source: StorageSource | None = None
        self._current_path = ROOT
        self._history: list[str] = [ROOT]
        self._history_index = 0
        self._generation = 0

    @property
    def source(self) -> StorageSource | None:
        return self._source

    @property
    def source_id(self) -> str | None:
        return self._source.id if self._source else None

    @property
    def current_path(self) -> str:
        return self._current_path

    @property
    def history(self) -> list[str]:
        return list(self._history)

    @property
    def history_index(self) -> int:
        return self._history_index

    @property
    def dialect(self) -> PathDialect:
        if self._source is None:
            return POSIX
        return dialect_for(self._source.category)

    @property
    def can_go_back(self) -> bool:
        return self._source is not None and self._history_index > 0

    @property
    def can_go_forward(self) -> bool:
        return self._source is not None and self._history_index < len(self._history) - 1

    @property
    def can_go_up(self) -> bool:
        return self._source is not None and self._current_path != ROOT

    @property
    def token(self) -> ListingToken | None:
        if self._source is None:
            return None
        return ListingToken(self._source.id, self._current_path, self._generation)

    def is_current(self, token: ListingToken | None) -> bool:
        return token is not None and token == self.token

    def select_source(self, source: StorageSource) -> bool:
        """Switch to ``source`` at its root. Returns False if already current."""
        if self._source is not None and self._source.id == source.id:
            return False

        self._source = source
        self._current_path = ROOT
        self._history = [ROOT]
        self._history_index = 0
        self._changed()
        logger.info("Selected source %s (%s)", source.id, source.name)
        return True

    def update_source(self, source: StorageSource) -> None:
        """Refresh status flags of the current source after a sources reload."""
        if self._source is not None and self._source.id == source.id:
            self._source = source

    def navigate_to(self, path: str, add_to_history: bool = True) -> bool:
        """Go to ``path``. Returns False when nothing changed.

        With ``add_to_history=False`` the current history entry is replaced
        instead of a new one being pushed.
        """
        if self._source is None:
            return False

        normalized = self.dialect.normalize(path)
        if normalized == self._current_path:
            return False

        self._current_path = normalized
        if add_to_history:
            del self._history[self._history_index + 1:]
            self._history.append(normalized)
            overflow = len(self._history) - self._history_limit
            if overflow > 0:
                del self._history[:overflow]
            self._history_index = len(self._history) - 1
        else:
            self._history[self._history_index] = normalized

        self._changed()
        logger.debug("Navigated to %s:%s", self._source.id, normalized or "/")
        return True

    def go_back(self) -> bool:
        if not self.can_go_back:
            return False
        self._history_index -= 1
        self._current_path = self._history[self._history_index]
        self._changed()
        return True

    def go_forward(self) -> bool:
        if not self.can_go_forward:
            return False
        self._history_index += 1
        self._current_path = self._history[self._history_index]
        self._changed()
        return True

    def go_up(self) -> bool:
        if not self.can_go_up:
            return False
        return self.navigate_to(self.dialect.parent(self._current_path))

    def breadcrumbs(self) -> list[Breadcrumb]:
        if self._source is None:
            return []
        crumbs = [Breadcrumb(name=self._source.name, path=ROOT)]
        crumbs.extend(
            Breadcrumb(name=name, path=path)
            for name, path in self.dialect.breadcrumbs(self._current_path)
        )
        return crumbs

    def snapshot(self) -> NavigationSnapshot:
        return NavigationSnapshot(
            source_id=self.source_id,
            source_name=self._source.name if self._source else None,
            category=self._source.category if self._source else None,
            current_path=self._current_path,
            history=self.history,
            history_index=self._history_index,
            can_go_back=self.can_go_back,
            can_go_forward=self.can_go_forward,
            can_go_up=self.can_go_up,
            breadcrumbs=self.breadcrumbs(),
        )

    def _changed(self) -> None:
        self._generation += 1
        self._selection.clear()
