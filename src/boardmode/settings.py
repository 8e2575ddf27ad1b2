"""Runtime settings for the boardmode engine."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from boardmode import __version__


@dataclass(frozen=True)
class RuntimeSettings:
    home_dir: Path
    state_dir: Path
    log_dir: Path
    config_file: Path
    cli_version: str = __version__

    @property
    def telemetry_log(self) -> Path:
        return self.log_dir / "telemetry.jsonl"


def _default_home_dir() -> Path:
    override = os.environ.get("BOARDMODE_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".boardmode"


def load_settings() -> RuntimeSettings:
    base = _default_home_dir()
    return RuntimeSettings(
        home_dir=base,
        state_dir=base / "state",
        log_dir=base / "logs",
        config_file=base / "config.yaml",
    )


SETTINGS = load_settings()
