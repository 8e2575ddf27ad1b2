"""YAML-backed persistence for board settings."""

from __future__ import annotations

from pathlib import Path

import yaml

from boardmode.domain.views import BoardSettings, BoardSettingsError
from boardmode.ports.host import SettingsStore


class YamlSettingsStore(SettingsStore):
    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> BoardSettings:
        if not self._path.exists():
            return BoardSettings()
        try:
            data = yaml.safe_load(self._path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as exc:
            raise BoardSettingsError(
                f"Unable to read board settings from {self._path}: {exc}",
                code="BOARD_SETTINGS_UNREADABLE",
            ) from exc
        return BoardSettings.from_dict(data)

    def save(self, settings: BoardSettings) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = yaml.safe_dump(settings.to_dict(), sort_keys=True, allow_unicode=True)
        self._path.write_text(payload, encoding="utf-8")


__all__ = ["YamlSettingsStore"]
