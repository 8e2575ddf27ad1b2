from __future__ import annotations

import asyncio
from pathlib import Path
from typing import List

import pytest

from boardmode.adapters.filesystem import FileSystemVault
from boardmode.app.documents import BoardDocuments
from boardmode.app.oracle import MetadataOracle
from boardmode.domain.views import BoardSettings, render_board_frontmatter
from boardmode.ports.host import HostOperationError


def test_create_board_writes_annotation_block(tmp_path: Path) -> None:
    vault = FileSystemVault(tmp_path / "vault")
    documents = BoardDocuments(vault, BoardSettings())

    async def scenario() -> None:
        first = await documents.create_board(vault.folder("Projects"))
        second = await documents.create_board(vault.folder("Projects"))
        assert first.path == "Projects/Untitled Kanban.md"
        assert second.path == "Projects/Untitled Kanban 1.md"

    asyncio.run(scenario())
    text = (tmp_path / "vault" / "Projects" / "Untitled Kanban.md").read_text(encoding="utf-8")
    assert text == render_board_frontmatter()
    assert MetadataOracle(vault.cache).declares_structured("Projects/Untitled Kanban.md")


def test_modify_refreshes_cache_and_notifies(tmp_path: Path) -> None:
    root = tmp_path / "vault"
    root.mkdir()
    (root / "Y.md").write_text(render_board_frontmatter(), encoding="utf-8")
    vault = FileSystemVault(root)
    oracle = MetadataOracle(vault.cache)
    changed: List[str] = []
    dispose = vault.cache.on_changed(changed.append)
    assert oracle.declares_structured("Y.md")

    asyncio.run(vault.modify(vault.get_file("Y.md"), "# plain\n"))

    assert changed == ["Y.md"]
    assert not oracle.declares_structured("Y.md")
    dispose()
    asyncio.run(vault.modify(vault.get_file("Y.md"), render_board_frontmatter()))
    assert changed == ["Y.md"]
    assert oracle.declares_structured("Y.md")


def test_convert_only_touches_empty_documents(tmp_path: Path) -> None:
    root = tmp_path / "vault"
    root.mkdir()
    (root / "E.md").write_text("", encoding="utf-8")
    (root / "X.md").write_text("# notes\n", encoding="utf-8")
    vault = FileSystemVault(root)
    documents = BoardDocuments(vault, BoardSettings(board_variant="detailed"))

    assert asyncio.run(documents.convert_empty(vault.get_file("E.md"))) is True
    assert asyncio.run(documents.convert_empty(vault.get_file("X.md"))) is False
    assert (root / "E.md").read_text(encoding="utf-8") == render_board_frontmatter("detailed")
    assert (root / "X.md").read_text(encoding="utf-8") == "# notes\n"


def test_paths_outside_vault_are_rejected(tmp_path: Path) -> None:
    vault = FileSystemVault(tmp_path / "vault")
    (tmp_path / "outside.md").write_text("x", encoding="utf-8")
    with pytest.raises(HostOperationError):
        vault.get_file("../outside.md")
    with pytest.raises(HostOperationError):
        vault.folder(tmp_path)


def test_missing_documents(tmp_path: Path) -> None:
    vault = FileSystemVault(tmp_path / "vault")
    assert vault.get_file("nope.md") is None
    assert vault.cache.get_cache("nope.md") is None
    assert MetadataOracle(vault.cache).declares_structured("nope.md") is False


def test_new_file_parent_follows_source_document(tmp_path: Path) -> None:
    root = tmp_path / "vault"
    (root / "Projects").mkdir(parents=True)
    vault = FileSystemVault(root)
    assert vault.get_new_file_parent("Projects/notes.md").path == "Projects"
    assert vault.get_new_file_parent("Gone/notes.md").path == ""
    assert vault.get_new_file_parent("").path == ""
