"""In-memory documents and metadata cache."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional

from boardmode.domain.views import parse_frontmatter
from boardmode.ports.host import Disposer, DocumentFile, Folder, HostOperationError, MetadataCache, Vault


@dataclass
class MemoryFile(DocumentFile):
    _path: str
    content: str = ""

    @property
    def path(self) -> str:
        return self._path

    @property
    def size(self) -> int:
        return len(self.content.encode("utf-8"))

    @property
    def basename(self) -> str:
        return posixpath.splitext(posixpath.basename(self._path))[0]


@dataclass(frozen=True)
class MemoryFolder(Folder):
    _path: str = ""

    @property
    def path(self) -> str:
        return self._path


class MemoryMetadataCache(MetadataCache):
    """Annotation cache recomputed on every write.

    With ``deferred=True`` recomputation waits for :meth:`flush`, which models
    the host's cache lagging behind freshly written documents.
    """

    def __init__(self, *, deferred: bool = False) -> None:
        self.deferred = deferred
        self._entries: Dict[str, Dict[str, Any]] = {}
        self._pending: Dict[str, str] = {}
        self._listeners: List[Callable[[str], None]] = []

    def get_cache(self, path: str) -> Optional[Mapping[str, Any]]:
        return self._entries.get(path)

    def on_changed(self, callback: Callable[[str], None]) -> Disposer:
        self._listeners.append(callback)

        def dispose() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return dispose

    def document_written(self, path: str, text: str) -> None:
        if self.deferred:
            self._pending[path] = text
            return
        self.recompute(path, text)

    def flush(self) -> None:
        pending, self._pending = self._pending, {}
        for path, text in pending.items():
            self.recompute(path, text)

    def forget(self, path: str) -> None:
        self._entries.pop(path, None)
        self._pending.pop(path, None)

    def recompute(self, path: str, text: str) -> None:
        frontmatter = parse_frontmatter(text)
        self._entries[path] = {"frontmatter": frontmatter} if frontmatter is not None else {}
        for listener in list(self._listeners):
            listener(path)


class MemoryVault(Vault):
    def __init__(self, cache: MemoryMetadataCache) -> None:
        self._cache = cache
        self._files: Dict[str, MemoryFile] = {}
        self._folders: Dict[str, MemoryFolder] = {"": MemoryFolder("")}
        self.reject_creates = False
        self.reject_writes = False

    @property
    def root(self) -> MemoryFolder:
        return self._folders[""]

    def add_folder(self, path: str) -> MemoryFolder:
        path = path.strip("/")
        folder = self._folders.get(path)
        if folder is None:
            parent = posixpath.dirname(path)
            if parent:
                self.add_folder(parent)
            folder = self._folders[path] = MemoryFolder(path)
        return folder

    def add_file(self, path: str, content: str = "") -> MemoryFile:
        """Seed a document synchronously; its metadata is computed immediately."""

        self.add_folder(posixpath.dirname(path))
        file = self._files[path] = MemoryFile(path, content)
        self._cache.recompute(path, content)
        return file

    def get_file(self, path: str) -> Optional[MemoryFile]:
        return self._files.get(path)

    def list_files(self) -> List[str]:
        return sorted(self._files)

    async def read(self, file: DocumentFile) -> str:
        return self._require(file.path).content

    async def modify(self, file: DocumentFile, data: str) -> None:
        if self.reject_writes:
            raise HostOperationError(f"Write rejected for {file.path}")
        target = self._require(file.path)
        target.content = data
        self._cache.document_written(target.path, data)

    async def create_new_markdown_file(self, folder: Folder, base_name: str) -> MemoryFile:
        if self.reject_creates:
            raise HostOperationError(f"Cannot create '{base_name}' in '{folder.path or '/'}'")
        self.add_folder(folder.path)
        candidate = posixpath.join(folder.path, f"{base_name}.md")
        counter = 0
        while candidate in self._files:
            counter += 1
            candidate = posixpath.join(folder.path, f"{base_name} {counter}.md")
        file = self._files[candidate] = MemoryFile(candidate, "")
        return file

    def get_new_file_parent(self, source_path: str) -> MemoryFolder:
        parent = posixpath.dirname(source_path)
        return self._folders.get(parent, self.root)

    def _require(self, path: str) -> MemoryFile:
        file = self._files.get(path)
        if file is None:
            raise HostOperationError(f"No such document: {path}")
        return file


__all__ = ["MemoryFile", "MemoryFolder", "MemoryMetadataCache", "MemoryVault"]
