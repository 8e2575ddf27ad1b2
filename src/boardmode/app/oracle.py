"""Read-only answers to "does this document declare itself a board?"."""

from __future__ import annotations

from typing import Dict, Mapping, Optional

from boardmode.domain.views import declares_board, has_frontmatter_key_raw
from boardmode.ports.host import Disposer, DocumentFile, MetadataCache


class MetadataOracle:
    """Fails closed: anything unexpected reads as "not a board".

    Text written by the engine itself is remembered until the cache reports
    the document recomputed; until then the raw-text check answers for it.
    """

    def __init__(self, cache: MetadataCache) -> None:
        self._cache = cache
        self._unindexed: Dict[str, str] = {}

    def start(self) -> Disposer:
        return self._cache.on_changed(self.forget_written)

    def note_written(self, path: str, text: str) -> None:
        self._unindexed[path] = text

    def forget_written(self, path: str) -> None:
        self._unindexed.pop(path, None)

    def declares_structured(self, path: str | None) -> bool:
        if not path:
            return False
        if path in self._unindexed:
            return self.declares_structured_raw(self._unindexed[path])
        try:
            cache = self._cache.get_cache(path)
        except Exception:  # noqa: BLE001
            return False
        if not isinstance(cache, Mapping):
            return False
        frontmatter = cache.get("frontmatter")
        return declares_board(frontmatter if isinstance(frontmatter, Mapping) else None)

    def declares_file(self, file: Optional[DocumentFile]) -> bool:
        if file is None:
            return False
        return self.declares_structured(file.path)

    @staticmethod
    def declares_structured_raw(text: str | None) -> bool:
        return has_frontmatter_key_raw(text)


__all__ = ["MetadataOracle"]
