"""Filesystem-backed vault and annotation cache."""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from boardmode.domain.views import parse_frontmatter
from boardmode.ports.host import Disposer, DocumentFile, Folder, HostOperationError, MetadataCache, Vault


@dataclass(frozen=True)
class FSFile(DocumentFile):
    root: Path
    relative: str

    @property
    def path(self) -> str:
        return self.relative

    @property
    def absolute(self) -> Path:
        return self.root / self.relative

    @property
    def size(self) -> int:
        return self.absolute.stat().st_size


@dataclass(frozen=True)
class FSFolder(Folder):
    root: Path
    relative: str = ""

    @property
    def path(self) -> str:
        return self.relative

    @property
    def absolute(self) -> Path:
        return self.root / self.relative if self.relative else self.root


def _relative_to_root(root: Path, path: str | Path) -> str:
    candidate = Path(path)
    if not candidate.is_absolute():
        candidate = root / candidate
    resolved = candidate.resolve()
    try:
        relative = resolved.relative_to(root)
    except ValueError as exc:
        raise HostOperationError(f"{path} is outside the vault at {root}") from exc
    text = PurePosixPath(*relative.parts).as_posix()
    return "" if text == "." else text


class FileSystemMetadataCache(MetadataCache):
    """Parses annotation blocks lazily and remembers them per (mtime, size)."""

    def __init__(self, root: Path) -> None:
        self._root = root.resolve()
        self._entries: Dict[str, Tuple[Tuple[int, int], Dict[str, Any]]] = {}
        self._listeners: List[Callable[[str], None]] = []

    def get_cache(self, path: str) -> Optional[Mapping[str, Any]]:
        target = self._root / path
        if not target.is_file():
            self._entries.pop(path, None)
            return None
        stat = target.stat()
        stamp = (stat.st_mtime_ns, stat.st_size)
        cached = self._entries.get(path)
        if cached is not None and cached[0] == stamp:
            return cached[1]
        frontmatter = parse_frontmatter(target.read_text(encoding="utf-8", errors="replace"))
        entry: Dict[str, Any] = {"frontmatter": frontmatter} if frontmatter is not None else {}
        self._entries[path] = (stamp, entry)
        return entry

    def on_changed(self, callback: Callable[[str], None]) -> Disposer:
        self._listeners.append(callback)

        def dispose() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return dispose

    def invalidate(self, path: str) -> None:
        self._entries.pop(path, None)
        self.get_cache(path)
        for listener in list(self._listeners):
            listener(path)


class FileSystemVault(Vault):
    def __init__(self, root: Path, cache: Optional[FileSystemMetadataCache] = None) -> None:
        self.root = root.expanduser().resolve()
        self.root.mkdir(parents=True, exist_ok=True)
        self.cache = cache if cache is not None else FileSystemMetadataCache(self.root)

    def folder(self, path: str | Path = "") -> FSFolder:
        relative = _relative_to_root(self.root, path)
        return FSFolder(self.root, relative)

    def get_file(self, path: str | Path) -> Optional[FSFile]:
        relative = _relative_to_root(self.root, path)
        if not relative or not (self.root / relative).is_file():
            return None
        return FSFile(self.root, relative)

    async def read(self, file: DocumentFile) -> str:
        return (self.root / file.path).read_text(encoding="utf-8")

    async def modify(self, file: DocumentFile, data: str) -> None:
        target = self.root / file.path
        if not target.is_file():
            raise HostOperationError(f"No such document: {file.path}")
        _atomic_write(target, data)
        self.cache.invalidate(file.path)

    async def create_new_markdown_file(self, folder: Folder, base_name: str) -> FSFile:
        directory = self.root / folder.path if folder.path else self.root
        directory.mkdir(parents=True, exist_ok=True)
        counter = 0
        while True:
            name = f"{base_name}.md" if counter == 0 else f"{base_name} {counter}.md"
            target = directory / name
            try:
                with target.open("x", encoding="utf-8"):
                    pass
            except FileExistsError:
                counter += 1
                continue
            return FSFile(self.root, _relative_to_root(self.root, target))

    def get_new_file_parent(self, source_path: str) -> FSFolder:
        if source_path:
            parent = (self.root / source_path).parent
            if parent.is_dir():
                return self.folder(parent)
        return self.folder("")


def _atomic_write(path: Path, data: str) -> None:
    fd, tmp_path = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data.encode("utf-8"))
        os.replace(tmp_path, path)
    finally:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)


__all__ = ["FSFile", "FSFolder", "FileSystemMetadataCache", "FileSystemVault"]
