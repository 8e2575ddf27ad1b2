"""Document-level board operations shared by the command router and the CLI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from boardmode.domain.views import BoardSettings, render_board_frontmatter
from boardmode.ports.host import DocumentFile, Folder, Vault

from .oracle import MetadataOracle


@dataclass
class BoardDocuments:
    vault: Vault
    settings: BoardSettings
    oracle: Optional[MetadataOracle] = None

    def resolve_folder(self, folder: Optional[Folder], active_path: str | None) -> Folder:
        if folder is not None:
            return folder
        return self.vault.get_new_file_parent(active_path or "")

    async def create_board(self, folder: Folder) -> DocumentFile:
        """Create a new document in ``folder`` and write the board annotation block into it."""

        document = await self.vault.create_new_markdown_file(folder, self.settings.new_board_name)
        await self._write_annotation(document)
        return document

    async def convert_empty(self, document: DocumentFile) -> bool:
        """Write the annotation block into an empty document. Non-empty documents are left alone."""

        if document.size != 0:
            return False
        await self._write_annotation(document)
        return True

    async def _write_annotation(self, document: DocumentFile) -> None:
        text = render_board_frontmatter(self.settings.board_variant)
        # noted before the write: a synchronous cache fires on_changed inside modify()
        if self.oracle is not None:
            self.oracle.note_written(document.path, text)
        try:
            await self.vault.modify(document, text)
        except BaseException:
            if self.oracle is not None:
                self.oracle.forget_written(document.path)
            raise


__all__ = ["BoardDocuments"]
