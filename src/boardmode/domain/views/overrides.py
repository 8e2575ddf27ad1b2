"""In-memory table of explicit per-pane view mode overrides."""

from __future__ import annotations

from typing import Dict, ItemsView, Optional

from .value_objects import Mode


class OverrideStore:
    """Explicit user intent, keyed by pane identity (or document path as a fallback).

    Lives for the process only. Every operation on an unknown or empty key is a
    no-op or an absent result.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, Mode] = {}

    def set(self, key: str | None, mode: Mode) -> None:
        if not key:
            return
        self._entries[key] = Mode(mode)

    def get(self, key: str | None) -> Optional[Mode]:
        if not key:
            return None
        return self._entries.get(key)

    def clear(self, key: str | None) -> None:
        if key:
            self._entries.pop(key, None)

    def reset(self) -> None:
        self._entries.clear()

    def items(self) -> ItemsView[str, Mode]:
        return self._entries.items()

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["OverrideStore"]
