from __future__ import annotations

import asyncio
from typing import Any, Callable, Mapping, Optional

from boardmode.adapters.memory import MemoryMetadataCache, MemoryVault
from boardmode.app.oracle import MetadataOracle
from boardmode.domain.views import render_board_frontmatter
from boardmode.ports.host import Disposer, MetadataCache


class StaticCache(MetadataCache):
    def __init__(self, entries: Mapping[str, Any]) -> None:
        self._entries = dict(entries)

    def get_cache(self, path: str) -> Optional[Mapping[str, Any]]:
        return self._entries.get(path)

    def on_changed(self, callback: Callable[[str], None]) -> Disposer:
        return lambda: None


class BrokenCache(StaticCache):
    def get_cache(self, path: str) -> Optional[Mapping[str, Any]]:
        raise RuntimeError("index corrupted")


def test_declaration_is_read_from_the_cache() -> None:
    oracle = MetadataOracle(
        StaticCache(
            {
                "board.md": {"frontmatter": {"kanban-plugin": "basic"}},
                "note.md": {"frontmatter": {"title": "notes"}},
                "plain.md": {},
                "odd.md": {"frontmatter": ["kanban-plugin"]},
                "off.md": {"frontmatter": {"kanban-plugin": False}},
            }
        )
    )
    assert oracle.declares_structured("board.md") is True
    assert oracle.declares_structured("note.md") is False
    assert oracle.declares_structured("plain.md") is False
    assert oracle.declares_structured("odd.md") is False
    assert oracle.declares_structured("off.md") is False
    assert oracle.declares_structured("missing.md") is False
    assert oracle.declares_structured(None) is False
    assert oracle.declares_structured("") is False


def test_cache_failures_read_as_not_declared() -> None:
    assert MetadataOracle(BrokenCache({})).declares_structured("board.md") is False


def test_declares_file_handles_missing_file() -> None:
    assert MetadataOracle(StaticCache({})).declares_file(None) is False


def test_raw_check_sees_writes_the_cache_has_not_caught_up_with() -> None:
    async def scenario() -> None:
        cache = MemoryMetadataCache(deferred=True)
        vault = MemoryVault(cache)
        oracle = MetadataOracle(cache)
        document = vault.add_file("N.md", "")
        await vault.modify(document, render_board_frontmatter())

        assert oracle.declares_structured("N.md") is False
        assert MetadataOracle.declares_structured_raw(await vault.read(document)) is True

        cache.flush()
        assert oracle.declares_structured("N.md") is True

    asyncio.run(scenario())


def test_written_text_answers_until_cache_recomputes() -> None:
    cache = MemoryMetadataCache(deferred=True)
    vault = MemoryVault(cache)
    oracle = MetadataOracle(cache)
    dispose = oracle.start()
    vault.add_file("N.md", "")

    oracle.note_written("N.md", render_board_frontmatter())
    assert oracle.declares_structured("N.md") is True

    cache.recompute("N.md", "# plain\n")
    assert oracle.declares_structured("N.md") is False

    dispose()
    oracle.note_written("N.md", render_board_frontmatter())
    cache.recompute("N.md", "# plain\n")
    assert oracle.declares_structured("N.md") is True
