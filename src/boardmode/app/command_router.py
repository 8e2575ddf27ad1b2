"""User-invokable board commands and contextual menu entries."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Callable, Coroutine, Iterable, List, Optional, Set

from boardmode.domain.views import (
    BOARD_VIEW_TYPE,
    MARKDOWN_VIEW_TYPE,
    Mode,
    OverrideChange,
    OverrideStore,
    TransitionRequest,
    override_key,
)
from boardmode.domain.views.constants import (
    BOARD_ICON,
    COMMAND_NAMES,
    MENU_NEW_BOARD,
    MENU_OPEN_AS_BOARD,
    NOTICE_CREATE_FAILED,
)
from boardmode.ports.hooks import HostHooks, Proceed
from boardmode.ports.host import (
    BoardView,
    Command,
    Disposer,
    DocumentFile,
    Folder,
    Host,
    HostOperationError,
    Menu,
    Pane,
)
from boardmode.settings import RuntimeSettings
from boardmode.utils.telemetry import record_structured_event

from .documents import BoardDocuments
from .interceptors import active_board_view
from .oracle import MetadataOracle

ViewFactory = Callable[[Pane], BoardView]


class CommandNotFoundError(RuntimeError):
    pass


@dataclass
class BoardCommand:
    id: str
    name: str
    enabled: Callable[[], bool]
    run: Callable[[], Coroutine[Any, Any, Any]]


class CommandRouter:
    def __init__(
        self,
        host: Host,
        overrides: OverrideStore,
        oracle: MetadataOracle,
        documents: BoardDocuments,
        view_factory: ViewFactory,
        runtime: RuntimeSettings,
    ) -> None:
        self._host = host
        self._overrides = overrides
        self._oracle = oracle
        self._documents = documents
        self._view_factory = view_factory
        self._runtime = runtime
        self._tasks: Set[asyncio.Task[Any]] = set()
        self._commands = {command.id: command for command in self._build_commands()}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def get(self, command_id: str) -> BoardCommand:
        if command_id not in self._commands:
            raise CommandNotFoundError(f"Command {command_id} not registered")
        return self._commands[command_id]

    def list_commands(self) -> Iterable[str]:
        return sorted(self._commands)

    def register(self) -> List[Disposer]:
        disposers: List[Disposer] = []
        for command in self._commands.values():
            disposers.append(
                self._host.commands.add_command(
                    Command(id=command.id, name=command.name, check_callback=self._check_callback(command))
                )
            )
        return disposers

    def install_menus(self, hooks: HostHooks) -> List[Disposer]:
        return [
            hooks.pane_menu.register(self._offers_open_as_board, self._add_open_as_board, name="board-open-as"),
            hooks.file_menu.register(self._offers_new_board, self._add_new_board, name="board-new-in-folder"),
        ]

    def _check_callback(self, command: BoardCommand) -> Callable[[bool], Any]:
        def check(checking: bool) -> Any:
            if checking:
                return command.enabled()
            return self.spawn(command.run())

        return check

    def _build_commands(self) -> List[BoardCommand]:
        return [
            BoardCommand(
                id="create-new-kanban-board",
                name=COMMAND_NAMES["create-new-kanban-board"],
                enabled=lambda: True,
                run=lambda: self.new_board(),
            ),
            BoardCommand(
                id="archive-completed-cards",
                name=COMMAND_NAMES["archive-completed-cards"],
                enabled=lambda: active_board_view(self._host.workspace) is not None,
                run=self._archive_active,
            ),
            BoardCommand(
                id="toggle-kanban-view",
                name=COMMAND_NAMES["toggle-kanban-view"],
                enabled=lambda: self._oracle.declares_file(self._host.workspace.get_active_file()),
                run=self._toggle_active,
            ),
            BoardCommand(
                id="convert-to-kanban",
                name=COMMAND_NAMES["convert-to-kanban"],
                enabled=self._active_file_is_empty,
                run=self._convert_active,
            ),
        ]

    def _active_file_is_empty(self) -> bool:
        active = self._host.workspace.get_active_file()
        return active is not None and active.size == 0

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def toggle_mode(self, pane: Pane) -> Optional[Mode]:
        file = pane.view.file if pane.view is not None else None
        if file is None:
            return None
        current = Mode.STRUCTURED if isinstance(pane.view, BoardView) else Mode.RAW
        target = current.opposite
        self._pin(pane, file.path, target, source="toggle")
        await self._transition(pane, target.view_type)
        return target

    async def open_as_board(self, pane: Pane) -> None:
        file = pane.view.file if pane.view is not None else None
        if file is None:
            return
        self._pin(pane, file.path, Mode.STRUCTURED, source="menu")
        await self.set_board_view(pane)

    async def convert_empty(self, pane: Pane, file: DocumentFile) -> bool:
        if not await self._documents.convert_empty(file):
            return False
        await self.set_board_view(pane)
        return True

    async def new_board(self, folder: Optional[Folder] = None) -> Optional[Pane]:
        workspace = self._host.workspace
        active = workspace.get_active_file()
        pane: Optional[Pane] = None
        try:
            target = self._documents.resolve_folder(folder, active.path if active else None)
            document = await self._documents.create_board(target)
            pane = workspace.new_pane()
            view = self._view_factory(pane)
            await view.set_state({"file": document.path})
            await pane.open(view)
        except (HostOperationError, OSError) as exc:
            if pane is not None:
                pane.detach()
            self._host.notifier.notice(NOTICE_CREATE_FAILED.format(error=exc))
            record_structured_event(
                self._runtime,
                "board.create",
                level="error",
                status="failed",
                component="commands",
                payload={"folder": folder.path if folder is not None else None, "error": str(exc)},
            )
            return None
        self._pin(pane, document.path, Mode.STRUCTURED, source="create")
        record_structured_event(
            self._runtime,
            "board.create",
            status="ok",
            component="commands",
            payload={"path": document.path},
        )
        return pane

    def archive_completed(self, view: BoardView) -> None:
        view.archive_completed_cards()

    async def set_board_view(self, pane: Pane) -> None:
        await self._transition(pane, BOARD_VIEW_TYPE)

    async def set_markdown_view(self, pane: Pane) -> None:
        await self._transition(pane, MARKDOWN_VIEW_TYPE)

    # ------------------------------------------------------------------
    # Task handling
    # ------------------------------------------------------------------

    def spawn(self, coro: Coroutine[Any, Any, Any]) -> "asyncio.Task[Any]":
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def cancel_pending(self) -> None:
        for task in list(self._tasks):
            task.cancel()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _transition(self, pane: Pane, view_type: str) -> None:
        request = TransitionRequest(type=view_type, state=pane.get_state(), options={"popstate": True})
        await pane.set_view_state(request)

    def _pin(self, pane: Pane, path: str, mode: Mode, *, source: str) -> None:
        key = override_key(pane.id, path)
        self._overrides.set(key, mode)
        if key:
            record_structured_event(
                self._runtime,
                "override.set",
                component="commands",
                payload=OverrideChange(key=key, mode=mode.value, source=source).to_dict(),
            )

    async def _archive_active(self) -> None:
        view = active_board_view(self._host.workspace)
        if view is not None:
            self.archive_completed(view)

    async def _toggle_active(self) -> None:
        pane = self._host.workspace.active_pane
        if pane is not None:
            await self.toggle_mode(pane)

    async def _convert_active(self) -> None:
        pane = self._host.workspace.active_pane
        file = self._host.workspace.get_active_file()
        if pane is not None and file is not None:
            await self.convert_empty(pane, file)

    def _offers_open_as_board(self, pane: Pane, menu: Menu) -> bool:
        view = pane.view
        return view is not None and view.view_type == MARKDOWN_VIEW_TYPE and self._oracle.declares_file(view.file)

    def _add_open_as_board(self, pane: Pane, menu: Menu, proceed: Proceed) -> Any:
        menu.add_item(MENU_OPEN_AS_BOARD, BOARD_ICON, lambda: self.spawn(self.open_as_board(pane)))
        menu.add_separator()
        return proceed(menu)

    def _offers_new_board(self, target: Any, menu: Menu) -> bool:
        return isinstance(target, Folder)

    def _add_new_board(self, folder: Folder, menu: Menu, proceed: Proceed) -> Any:
        menu.add_item(MENU_NEW_BOARD, BOARD_ICON, lambda: self.spawn(self.new_board(folder)))
        return proceed(menu)


__all__ = ["BoardCommand", "CommandNotFoundError", "CommandRouter", "ViewFactory"]
