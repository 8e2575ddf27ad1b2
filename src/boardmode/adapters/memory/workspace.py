"""In-memory panes, menus, commands and workspace.

Every interceptable operation goes through :class:`~boardmode.ports.hooks.HostHooks`
before the host's own behaviour runs, the same way a real editor host would.
"""

from __future__ import annotations

import asyncio
import inspect
import itertools
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

from boardmode.domain.views import MARKDOWN_VIEW_TYPE, TransitionRequest
from boardmode.domain.views.constants import SEARCH_COMMAND_ID
from boardmode.ports.hooks import HostHooks
from boardmode.ports.host import (
    Command,
    CommandRegistry,
    Disposer,
    DocumentFile,
    Folder,
    HostOperationError,
    Menu,
    Notifier,
    Pane,
    View,
    Workspace,
)

from .vault import MemoryVault

ViewFactory = Callable[[Pane], View]


class MarkdownView(View):
    """Raw text view provided by the host itself."""

    view_type = MARKDOWN_VIEW_TYPE

    def __init__(self, pane: Pane, vault: MemoryVault) -> None:
        self.pane = pane
        self._vault = vault
        self._file: Optional[DocumentFile] = None

    @property
    def file(self) -> Optional[DocumentFile]:
        return self._file

    def get_state(self) -> Mapping[str, Any]:
        return {"file": self._file.path} if self._file is not None else {}

    async def set_state(self, state: Mapping[str, Any]) -> None:
        path = state.get("file")
        self._file = self._vault.get_file(path) if isinstance(path, str) else None


@dataclass
class MenuEntry:
    title: str
    icon: str = ""
    on_click: Optional[Callable[[], Any]] = None

    @property
    def is_separator(self) -> bool:
        return self.on_click is None and not self.title


@dataclass
class MemoryMenu(Menu):
    entries: List[MenuEntry] = field(default_factory=list)

    def add_item(self, title: str, icon: str, on_click: Callable[[], Any]) -> "MemoryMenu":
        self.entries.append(MenuEntry(title, icon, on_click))
        return self

    def add_separator(self) -> "MemoryMenu":
        self.entries.append(MenuEntry(""))
        return self

    def titles(self) -> List[str]:
        return [entry.title for entry in self.entries if not entry.is_separator]

    def click(self, title: str) -> Any:
        for entry in self.entries:
            if entry.title == title and entry.on_click is not None:
                return entry.on_click()
        raise KeyError(title)


class MemoryPane(Pane):
    def __init__(self, workspace: "MemoryWorkspace", pane_id: Optional[str]) -> None:
        self._workspace = workspace
        self._id = pane_id
        self._view: Optional[View] = None
        self.history: List[str] = []
        self.detached = False

    @property
    def id(self) -> Optional[str]:
        return self._id

    @property
    def view(self) -> Optional[View]:
        return self._view

    @property
    def view_type(self) -> Optional[str]:
        return self._view.view_type if self._view is not None else None

    async def set_view_state(self, request: TransitionRequest) -> None:
        result = self._workspace.hooks.transition.dispatch(self, request, MemoryPane._commit)
        if inspect.isawaitable(result):
            await result

    async def open(self, view: View) -> None:
        self._mount(view)

    def detach(self) -> None:
        self._workspace.hooks.detach.dispatch(self, dict(self.get_state()), MemoryPane._teardown)

    def build_menu(self) -> MemoryMenu:
        menu = MemoryMenu()

        def host_items(pane: "MemoryPane", current: MemoryMenu) -> MemoryMenu:
            current.add_item("Split right", "separator-vertical", lambda: None)
            return current

        return self._workspace.hooks.pane_menu.dispatch(self, menu, host_items)

    async def _commit(self, request: TransitionRequest) -> None:
        factory = self._workspace.view_factory(request.type)
        view = factory(self)
        await view.set_state(dict(request.state))  # type: ignore[attr-defined]
        self._mount(view)

    def _teardown(self, state: Mapping[str, Any]) -> None:
        self._view = None
        self.detached = True
        self._workspace._forget(self)

    def _mount(self, view: View) -> None:
        if self.detached:
            raise HostOperationError(f"Pane {self._id} is detached")
        self._view = view
        self.history.append(view.view_type)


class MemoryCommandRegistry(CommandRegistry):
    def __init__(self, hooks: HostHooks) -> None:
        self._hooks = hooks
        self._commands: Dict[str, Command] = {}

    def add_command(self, command: Command) -> Disposer:
        if command.id in self._commands:
            raise ValueError(f"Command {command.id} already registered")
        self._commands[command.id] = command

        def dispose() -> None:
            if self._commands.get(command.id) is command:
                del self._commands[command.id]

        return dispose

    def find_command(self, command_id: str) -> Optional[Command]:
        return self._commands.get(command_id)

    def list_commands(self) -> List[str]:
        return sorted(self._commands)

    def is_enabled(self, command_id: str) -> bool:
        command = self._require(command_id)
        if command.check_callback is None:
            return True
        return bool(self._hooks.command(command_id).dispatch(command, True, _run_check))

    async def execute(self, command_id: str) -> bool:
        command = self._require(command_id)
        if command.check_callback is not None and not self.is_enabled(command_id):
            return False
        if command.check_callback is not None:
            result = self._hooks.command(command_id).dispatch(command, False, _run_check)
        else:
            result = command.callback() if command.callback is not None else None
        if inspect.isawaitable(result):
            await result
        return True

    def _require(self, command_id: str) -> Command:
        command = self._commands.get(command_id)
        if command is None:
            raise KeyError(f"Command {command_id} not registered")
        return command


def _run_check(command: Command, checking: bool) -> Any:
    return command.check_callback(checking)  # type: ignore[misc]


class MemoryNotifier(Notifier):
    def __init__(self) -> None:
        self.messages: List[str] = []

    def notice(self, message: str) -> None:
        self.messages.append(message)


class MemoryWorkspace(Workspace):
    def __init__(self, vault: MemoryVault, hooks: HostHooks, commands: MemoryCommandRegistry) -> None:
        self.vault = vault
        self.hooks = hooks
        self.commands = commands
        self.panes: List[MemoryPane] = []
        self.hover_sources: Dict[str, str] = {}
        self.text_searches = 0
        self._active: Optional[MemoryPane] = None
        self._factories: Dict[str, ViewFactory] = {
            MARKDOWN_VIEW_TYPE: lambda pane: MarkdownView(pane, vault),
        }
        self._ids = itertools.count(1)
        self._layout_ready = asyncio.Event()

    @property
    def active_pane(self) -> Optional[MemoryPane]:
        return self._active

    def focus(self, pane: MemoryPane) -> None:
        self._active = pane

    def panes_of_type(self, view_type: str) -> List[MemoryPane]:
        return [pane for pane in self.panes if pane.view_type == view_type]

    def new_pane(self) -> MemoryPane:
        return self.add_pane(f"pane-{next(self._ids)}")

    def add_pane(self, pane_id: Optional[str]) -> MemoryPane:
        pane = MemoryPane(self, pane_id)
        self.panes.append(pane)
        self._active = pane
        return pane

    async def open_file(self, path: str, pane: Optional[MemoryPane] = None) -> MemoryPane:
        """Navigate to a document the way the host does: by requesting the raw view."""

        target = pane if pane is not None else self.new_pane()
        await target.set_view_state(TransitionRequest(type=MARKDOWN_VIEW_TYPE, state={"file": path}))
        self._active = target
        return target

    def register_view(self, view_type: str, factory: ViewFactory) -> Disposer:
        if view_type in self._factories:
            raise ValueError(f"View type {view_type} already registered")
        self._factories[view_type] = factory

        def dispose() -> None:
            if self._factories.get(view_type) is factory:
                del self._factories[view_type]

        return dispose

    def view_factory(self, view_type: str) -> ViewFactory:
        factory = self._factories.get(view_type)
        if factory is None:
            raise HostOperationError(f"Unknown view type: {view_type}")
        return factory

    def mark_layout_ready(self) -> None:
        if self._layout_ready.is_set():
            return
        self.commands.add_command(
            Command(id=SEARCH_COMMAND_ID, name="Search current file", check_callback=self._text_search)
        )
        self._layout_ready.set()

    async def wait_until_layout_ready(self) -> None:
        await self._layout_ready.wait()

    def register_hover_link_source(self, source_id: str, display: str) -> None:
        self.hover_sources[source_id] = display

    def unregister_hover_link_source(self, source_id: str) -> None:
        self.hover_sources.pop(source_id, None)

    def build_file_menu(self, target: DocumentFile | Folder) -> MemoryMenu:
        def host_items(subject: Any, menu: MemoryMenu) -> MemoryMenu:
            menu.add_item("Rename", "pencil", lambda: None)
            return menu

        return self.hooks.file_menu.dispatch(target, MemoryMenu(), host_items)

    def _text_search(self, checking: bool) -> bool:
        if not checking:
            self.text_searches += 1
        return True

    def _forget(self, pane: MemoryPane) -> None:
        if pane in self.panes:
            self.panes.remove(pane)
        if self._active is pane:
            self._active = self.panes[-1] if self.panes else None


__all__ = [
    "MarkdownView",
    "MemoryCommandRegistry",
    "MemoryMenu",
    "MemoryNotifier",
    "MemoryPane",
    "MemoryWorkspace",
    "MenuEntry",
]
