"""Interceptors the engine installs on the host's transition, detach and command hooks."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from boardmode.domain.views import (
    BOARD_VIEW_TYPE,
    MARKDOWN_VIEW_TYPE,
    Mode,
    OverrideStore,
    TransitionDecision,
    TransitionRequest,
    override_key,
)
from boardmode.domain.views.constants import SEARCH_COMMAND_ID
from boardmode.ports.hooks import HostHooks, Proceed
from boardmode.ports.host import BoardView, Command, CommandRegistry, Disposer, Pane, Workspace
from boardmode.settings import RuntimeSettings
from boardmode.utils.telemetry import record_structured_event

from .oracle import MetadataOracle


def active_board_view(workspace: Workspace) -> Optional[BoardView]:
    pane = workspace.active_pane
    view = pane.view if pane is not None else None
    return view if isinstance(view, BoardView) else None


class TransitionInterceptor:
    """Rewrites raw transitions of board documents to the board view type.

    Precedence, for a request targeting the raw view with a document path:

    * an explicit ``raw`` override keeps the request untouched;
    * otherwise the document's metadata declaration decides, and a rewrite
      pins the pane to ``structured`` in the override store.

    A ``structured`` override therefore never forces a board onto a document
    that stopped declaring one, and re-running a decision after its own store
    write gives the same answer.
    """

    name = "board-transition"

    def __init__(self, overrides: OverrideStore, oracle: MetadataOracle, runtime: RuntimeSettings) -> None:
        self._overrides = overrides
        self._oracle = oracle
        self._runtime = runtime

    def install(self, hooks: HostHooks) -> Disposer:
        return hooks.transition.register(self.applies, self, name=self.name)

    def applies(self, pane: Pane, request: TransitionRequest) -> bool:
        return request.type == MARKDOWN_VIEW_TYPE and request.document_path is not None

    def __call__(self, pane: Pane, request: TransitionRequest, proceed: Proceed) -> Any:
        return proceed(self.arbitrate(pane.id, request))

    def arbitrate(self, pane_id: str | None, request: TransitionRequest) -> TransitionRequest:
        decision = self.decide(pane_id, request)
        if not decision.rewritten:
            return request
        self._overrides.set(override_key(pane_id, decision.path), Mode.STRUCTURED)
        record_structured_event(
            self._runtime,
            "transition.rewrite",
            component="interceptor",
            payload=decision.to_dict(),
        )
        return request.retarget(decision.forwarded)

    def decide(self, pane_id: str | None, request: TransitionRequest) -> TransitionDecision:
        path = request.document_path

        def keep(reason: str) -> TransitionDecision:
            return TransitionDecision(pane_id, path, request.type, request.type, reason)

        if request.type != MARKDOWN_VIEW_TYPE:
            return keep("not-raw")
        if path is None:
            return keep("no-document")
        if self._overrides.get(override_key(pane_id, path)) is Mode.RAW:
            return keep("override-raw")
        if not self._oracle.declares_structured(path):
            return keep("not-declared")
        return TransitionDecision(pane_id, path, request.type, BOARD_VIEW_TYPE, "declared")


class LifecycleInterceptor:
    """Drops a closing pane's override so a reopen starts from the declaration again."""

    name = "board-detach"

    def __init__(self, overrides: OverrideStore) -> None:
        self._overrides = overrides

    def install(self, hooks: HostHooks) -> Disposer:
        return hooks.detach.register(self.applies, self, name=self.name)

    def applies(self, pane: Pane, state: Mapping[str, Any] | None) -> bool:
        return bool(state) and bool(state.get("file"))

    def __call__(self, pane: Pane, state: Mapping[str, Any], proceed: Proceed) -> Any:
        self._overrides.clear(override_key(pane.id, state.get("file")))
        return proceed(state)


class SearchCommandInterceptor:
    """Sends the host's search command to the board's own search when a board is focused."""

    name = "board-search"

    def __init__(self, workspace: Workspace) -> None:
        self._workspace = workspace

    def install(self, hooks: HostHooks, registry: CommandRegistry) -> Optional[Disposer]:
        command: Optional[Command] = registry.find_command(SEARCH_COMMAND_ID)
        if command is None:
            return None
        return hooks.command(command.id).register(self.applies, self, name=self.name)

    def applies(self, command: Command, checking: bool) -> bool:
        return not checking

    def __call__(self, command: Command, checking: bool, proceed: Proceed) -> Any:
        view = active_board_view(self._workspace)
        if view is None:
            return proceed(False)
        view.toggle_search()
        return True


__all__ = [
    "LifecycleInterceptor",
    "SearchCommandInterceptor",
    "TransitionInterceptor",
    "active_board_view",
]
