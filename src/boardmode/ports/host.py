"""Port definitions for the editing host that owns panes, documents and metadata."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Optional

from boardmode.domain.views import BoardSettings, TransitionRequest

from .hooks import HostHooks

Disposer = Callable[[], None]
CheckCallback = Callable[[bool], Any]


class HostOperationError(RuntimeError):
    """Raised by a host when it rejects a transition, write or creation."""


class DocumentFile(ABC):
    @property
    @abstractmethod
    def path(self) -> str:
        """Vault-relative path of the document."""

    @property
    @abstractmethod
    def size(self) -> int:
        """Content size in bytes."""


class Folder(ABC):
    @property
    @abstractmethod
    def path(self) -> str:
        """Vault-relative path of the folder ("" for the root)."""


class View(ABC):
    """Whatever a pane currently renders."""

    view_type: str = ""

    @property
    @abstractmethod
    def file(self) -> Optional[DocumentFile]:
        """Document shown by the view, if any."""

    @abstractmethod
    def get_state(self) -> Mapping[str, Any]:
        """Serializable view state; the document path lives under ``file``."""


class BoardView(View):
    """Structured board rendering. Supplied by the board UI, driven by the engine."""

    @property
    @abstractmethod
    def data(self) -> str:
        """Current document text backing the board."""

    @abstractmethod
    async def set_state(self, state: Mapping[str, Any]) -> None:
        """Point the view at the document named in ``state``."""

    @abstractmethod
    def set_view_data(self, data: str, clear: bool = False) -> None:
        """Re-render from ``data``; ``clear`` forces a full rebuild."""

    @abstractmethod
    def archive_completed_cards(self) -> None:
        """Move completed items to the board archive."""

    @abstractmethod
    def toggle_search(self) -> None:
        """Open or close the board's own search."""

    @abstractmethod
    def on_file_metadata_change(self, path: str) -> None:
        """Called after the annotations of ``path`` were recomputed."""


class Pane(ABC):
    @property
    @abstractmethod
    def id(self) -> Optional[str]:
        """Stable identity for the pane's lifetime; may be unavailable."""

    @property
    @abstractmethod
    def view(self) -> Optional[View]:
        """View currently mounted in the pane."""

    def get_state(self) -> Mapping[str, Any]:
        view = self.view
        return view.get_state() if view is not None else {}

    @abstractmethod
    async def set_view_state(self, request: TransitionRequest) -> None:
        """Commit a view-state transition (dispatched through the transition hooks)."""

    @abstractmethod
    async def open(self, view: View) -> None:
        """Mount an already constructed view."""

    @abstractmethod
    def detach(self) -> None:
        """Close the pane (dispatched through the detach hooks)."""


class Menu(ABC):
    @abstractmethod
    def add_item(self, title: str, icon: str, on_click: Callable[[], Any]) -> "Menu":
        """Append an entry."""

    @abstractmethod
    def add_separator(self) -> "Menu":
        """Append a separator."""


class Vault(ABC):
    @abstractmethod
    def get_file(self, path: str) -> Optional[DocumentFile]:
        """Resolve a document by path."""

    @abstractmethod
    async def read(self, file: DocumentFile) -> str:
        """Return the document text."""

    @abstractmethod
    async def modify(self, file: DocumentFile, data: str) -> None:
        """Replace the document text."""

    @abstractmethod
    async def create_new_markdown_file(self, folder: Folder, base_name: str) -> DocumentFile:
        """Create an empty document named after ``base_name`` (made unique) inside ``folder``."""

    @abstractmethod
    def get_new_file_parent(self, source_path: str) -> Folder:
        """Folder where new documents go when created relative to ``source_path``."""


class MetadataCache(ABC):
    @abstractmethod
    def get_cache(self, path: str) -> Optional[Mapping[str, Any]]:
        """Cached annotations for ``path``: ``{"frontmatter": {...}}`` or ``None``."""

    @abstractmethod
    def on_changed(self, callback: Callable[[str], None]) -> Disposer:
        """Subscribe to per-document recomputation events."""


@dataclass
class Command:
    """A named host action; ``check_callback(True)`` answers enablement."""

    id: str
    name: str
    callback: Optional[Callable[[], Any]] = None
    check_callback: Optional[CheckCallback] = None


class CommandRegistry(ABC):
    @abstractmethod
    def add_command(self, command: Command) -> Disposer:
        """Register a command."""

    @abstractmethod
    def find_command(self, command_id: str) -> Optional[Command]:
        """Look up a registered command (host built-ins included)."""


class Notifier(ABC):
    @abstractmethod
    def notice(self, message: str) -> None:
        """Show a transient user notification."""


class Workspace(ABC):
    @property
    @abstractmethod
    def active_pane(self) -> Optional[Pane]:
        """Focused pane."""

    def get_active_file(self) -> Optional[DocumentFile]:
        pane = self.active_pane
        if pane is None or pane.view is None:
            return None
        return pane.view.file

    @abstractmethod
    def panes_of_type(self, view_type: str) -> Iterable[Pane]:
        """Open panes whose mounted view has ``view_type``."""

    @abstractmethod
    def new_pane(self) -> Pane:
        """Open a fresh empty pane and focus it."""

    @abstractmethod
    def register_view(self, view_type: str, factory: Callable[[Pane], View]) -> Disposer:
        """Make ``view_type`` constructible by the host."""

    @abstractmethod
    async def wait_until_layout_ready(self) -> None:
        """Resolve once the host finished loading; command objects exist afterwards."""

    @abstractmethod
    def register_hover_link_source(self, source_id: str, display: str) -> None:
        """Advertise a hover preview source."""

    @abstractmethod
    def unregister_hover_link_source(self, source_id: str) -> None:
        """Withdraw a hover preview source."""


class SettingsStore(ABC):
    @abstractmethod
    def load(self) -> BoardSettings:
        """Read persisted board settings (defaults when nothing is stored)."""

    @abstractmethod
    def save(self, settings: BoardSettings) -> None:
        """Persist board settings."""


@dataclass
class Host:
    """Bundle of capabilities the engine needs from the host."""

    workspace: Workspace
    vault: Vault
    metadata_cache: MetadataCache
    commands: CommandRegistry
    notifier: Notifier
    hooks: HostHooks


__all__ = [
    "BoardView",
    "Command",
    "CommandRegistry",
    "Disposer",
    "DocumentFile",
    "Folder",
    "Host",
    "HostOperationError",
    "Menu",
    "MetadataCache",
    "Notifier",
    "Pane",
    "SettingsStore",
    "Vault",
    "View",
    "Workspace",
]
