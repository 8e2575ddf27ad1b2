"""Keeps open boards in sync with recomputed document metadata."""

from __future__ import annotations

from typing import Iterator

from boardmode.domain.views import BOARD_VIEW_TYPE
from boardmode.ports.host import BoardView, Disposer, MetadataCache, Workspace


class ChangeListener:
    """Re-renders board panes. Never re-decides a pane's mode."""

    def __init__(self, workspace: Workspace, cache: MetadataCache) -> None:
        self._workspace = workspace
        self._cache = cache

    def start(self) -> Disposer:
        return self._cache.on_changed(self.handle)

    def handle(self, path: str) -> None:
        for view in self.board_views():
            view.on_file_metadata_change(path)

    def refresh_all(self) -> int:
        count = 0
        for view in self.board_views():
            view.set_view_data(view.data, True)
            count += 1
        return count

    def board_views(self) -> Iterator[BoardView]:
        for pane in list(self._workspace.panes_of_type(BOARD_VIEW_TYPE)):
            if isinstance(pane.view, BoardView):
                yield pane.view


__all__ = ["ChangeListener"]
