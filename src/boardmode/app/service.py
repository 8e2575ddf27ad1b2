"""Engine service: wires the arbitration components into a host."""

from __future__ import annotations

import asyncio
import contextlib
from typing import List, Optional

from boardmode.domain.views import BOARD_VIEW_TYPE, FRONTMATTER_KEY, BoardSettings, OverrideStore
from boardmode.domain.views.constants import HOVER_LINK_DISPLAY, SEARCH_COMMAND_ID
from boardmode.ports.host import Disposer, Host, SettingsStore
from boardmode.settings import SETTINGS, RuntimeSettings
from boardmode.utils.telemetry import record_structured_event

from .command_router import CommandRouter, ViewFactory
from .documents import BoardDocuments
from .interceptors import LifecycleInterceptor, SearchCommandInterceptor, TransitionInterceptor
from .listener import ChangeListener
from .oracle import MetadataOracle


class BoardModeService:
    """Owns the override store and every registration made against the host."""

    def __init__(
        self,
        host: Host,
        view_factory: ViewFactory,
        *,
        runtime: RuntimeSettings = SETTINGS,
        settings_store: Optional[SettingsStore] = None,
    ) -> None:
        self.host = host
        self.runtime = runtime
        self.settings_store = settings_store
        self.settings = BoardSettings()
        self.overrides = OverrideStore()
        self.oracle = MetadataOracle(host.metadata_cache)
        self.documents = BoardDocuments(host.vault, self.settings, self.oracle)
        self.router = CommandRouter(host, self.overrides, self.oracle, self.documents, view_factory, runtime)
        self.transitions = TransitionInterceptor(self.overrides, self.oracle, runtime)
        self.lifecycle = LifecycleInterceptor(self.overrides)
        self.search = SearchCommandInterceptor(host.workspace)
        self.listener = ChangeListener(host.workspace, host.metadata_cache)
        self._view_factory = view_factory
        self._disposers: List[Disposer] = []
        self._ready_task: Optional[asyncio.Task[None]] = None
        self._search_installed = False
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def search_installed(self) -> bool:
        return self._search_installed

    async def load(self) -> None:
        if self._loaded:
            return
        if self.settings_store is not None:
            self._apply_settings(self.settings_store.load())
        workspace = self.host.workspace
        hooks = self.host.hooks
        self._disposers.append(workspace.register_view(BOARD_VIEW_TYPE, self._view_factory))
        workspace.register_hover_link_source(FRONTMATTER_KEY, HOVER_LINK_DISPLAY)
        self._disposers.append(self.transitions.install(hooks))
        self._disposers.append(self.lifecycle.install(hooks))
        self._disposers.extend(self.router.install_menus(hooks))
        self._disposers.extend(self.router.register())
        self._disposers.append(self.oracle.start())
        self._disposers.append(self.listener.start())
        self._ready_task = asyncio.get_running_loop().create_task(self._install_search_when_ready())
        self._loaded = True
        record_structured_event(
            self.runtime,
            "engine.load",
            component="engine",
            payload={"commands": list(self.router.list_commands())},
        )

    async def wait_until_ready(self) -> None:
        if self._ready_task is not None:
            await self._ready_task

    async def on_settings_change(self, settings: BoardSettings) -> int:
        self._apply_settings(settings)
        if self.settings_store is not None:
            self.settings_store.save(settings)
        refreshed = self.listener.refresh_all()
        record_structured_event(
            self.runtime,
            "settings.change",
            component="engine",
            payload={"refreshed": refreshed},
        )
        return refreshed

    async def unload(self) -> None:
        if not self._loaded:
            return
        task = self._ready_task
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._ready_task = None
        self.router.cancel_pending()
        while self._disposers:
            self._disposers.pop()()
        self._search_installed = False
        for pane in list(self.host.workspace.panes_of_type(BOARD_VIEW_TYPE)):
            await self.router.set_markdown_view(pane)
        self.host.workspace.unregister_hover_link_source(FRONTMATTER_KEY)
        self.overrides.reset()
        self._loaded = False
        record_structured_event(self.runtime, "engine.unload", component="engine")

    async def _install_search_when_ready(self) -> None:
        await self.host.workspace.wait_until_layout_ready()
        disposer = self.search.install(self.host.hooks, self.host.commands)
        if disposer is None:
            record_structured_event(
                self.runtime,
                "search.unavailable",
                level="warn",
                component="engine",
                payload={"command": SEARCH_COMMAND_ID},
            )
            return
        self._disposers.append(disposer)
        self._search_installed = True

    def _apply_settings(self, settings: BoardSettings) -> None:
        self.settings = settings
        self.documents.settings = settings


__all__ = ["BoardModeService"]
