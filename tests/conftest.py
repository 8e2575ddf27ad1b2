from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, List, Mapping, Optional

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
SANDBOX_HOME = ROOT / ".test_place" / "boardmode-home"
os.environ.setdefault("BOARDMODE_HOME", str(SANDBOX_HOME))
SANDBOX_HOME.mkdir(parents=True, exist_ok=True)
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from boardmode.adapters.memory import MemoryVault, MemoryWorkspace, build_memory_host  # noqa: E402
from boardmode.app.service import BoardModeService  # noqa: E402
from boardmode.domain.views import BOARD_VIEW_TYPE  # noqa: E402
from boardmode.ports.host import BoardView, DocumentFile, Host, Pane, SettingsStore  # noqa: E402
from boardmode.settings import RuntimeSettings  # noqa: E402


class RecordingBoardView(BoardView):
    """Board view stand-in that records what the engine asks of it."""

    view_type = BOARD_VIEW_TYPE

    def __init__(self, pane: Pane, vault: MemoryVault) -> None:
        self.pane = pane
        self._vault = vault
        self._file: Optional[DocumentFile] = None
        self._data = ""
        self.renders: List[bool] = []
        self.metadata_events: List[str] = []
        self.searches = 0
        self.archives = 0

    @property
    def file(self) -> Optional[DocumentFile]:
        return self._file

    @property
    def data(self) -> str:
        return self._data

    def get_state(self) -> Mapping[str, Any]:
        return {"file": self._file.path} if self._file is not None else {}

    async def set_state(self, state: Mapping[str, Any]) -> None:
        path = state.get("file")
        self._file = self._vault.get_file(path) if isinstance(path, str) else None
        self._data = await self._vault.read(self._file) if self._file is not None else ""

    def set_view_data(self, data: str, clear: bool = False) -> None:
        self._data = data
        self.renders.append(clear)

    def archive_completed_cards(self) -> None:
        self.archives += 1

    def toggle_search(self) -> None:
        self.searches += 1

    def on_file_metadata_change(self, path: str) -> None:
        self.metadata_events.append(path)


@dataclass
class Harness:
    host: Host
    service: BoardModeService
    views: List[RecordingBoardView] = field(default_factory=list)

    @property
    def workspace(self) -> MemoryWorkspace:
        return self.host.workspace  # type: ignore[return-value]

    @property
    def vault(self) -> MemoryVault:
        return self.host.vault  # type: ignore[return-value]


def make_runtime_settings(base: Path) -> RuntimeSettings:
    home = base / "home"
    state_dir = home / "state"
    log_dir = home / "logs"
    for directory in (home, state_dir, log_dir):
        directory.mkdir(parents=True, exist_ok=True)
    return RuntimeSettings(
        home_dir=home,
        state_dir=state_dir,
        log_dir=log_dir,
        config_file=home / "config.yaml",
        cli_version="0.1.0",
    )


@pytest.fixture()
def runtime(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> RuntimeSettings:
    monkeypatch.setenv("BOARDMODE_TELEMETRY", "1")
    return make_runtime_settings(tmp_path / "runtime")


@pytest.fixture()
def harness_factory(runtime: RuntimeSettings) -> Callable[..., Harness]:
    def build(*, deferred_metadata: bool = False, settings_store: SettingsStore | None = None) -> Harness:
        host = build_memory_host(deferred_metadata=deferred_metadata)
        views: List[RecordingBoardView] = []

        def view_factory(pane: Pane) -> RecordingBoardView:
            view = RecordingBoardView(pane, host.vault)  # type: ignore[arg-type]
            views.append(view)
            return view

        service = BoardModeService(host, view_factory, runtime=runtime, settings_store=settings_store)
        return Harness(host=host, service=service, views=views)

    return build
