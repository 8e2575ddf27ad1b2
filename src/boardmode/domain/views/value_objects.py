"""Value objects for the view arbitration bounded context."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from .constants import (
    BOARD_VIEW_TYPE,
    DEFAULT_BOARD_VARIANT,
    DEFAULT_NEW_BOARD_NAME,
    MARKDOWN_VIEW_TYPE,
    remediation_for,
)


class Mode(str, Enum):
    """Rendering mode of a document inside a pane."""

    RAW = "raw"
    STRUCTURED = "structured"

    @property
    def view_type(self) -> str:
        return MARKDOWN_VIEW_TYPE if self is Mode.RAW else BOARD_VIEW_TYPE

    @property
    def opposite(self) -> "Mode":
        return Mode.STRUCTURED if self is Mode.RAW else Mode.RAW

    @classmethod
    def for_view_type(cls, view_type: str | None) -> Optional["Mode"]:
        if view_type == MARKDOWN_VIEW_TYPE:
            return cls.RAW
        if view_type == BOARD_VIEW_TYPE:
            return cls.STRUCTURED
        return None


def override_key(pane_id: str | None, path: str | None) -> str | None:
    """Key under which a pane's override lives: its identity, else its document path."""

    return pane_id or path or None


def _freeze(data: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return MappingProxyType(dict(data or {}))


@dataclass(frozen=True)
class TransitionRequest:
    """A pane view-state change the host is about to commit."""

    type: str
    state: Mapping[str, Any] = field(default_factory=dict)
    options: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "state", _freeze(self.state))
        object.__setattr__(self, "options", _freeze(self.options))

    @property
    def document_path(self) -> str | None:
        path = self.state.get("file")
        return path if isinstance(path, str) and path else None

    @property
    def mode(self) -> Optional[Mode]:
        return Mode.for_view_type(self.type)

    def retarget(self, view_type: str) -> "TransitionRequest":
        return replace(self, type=view_type)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "state": dict(self.state), **dict(self.options)}


class BoardSettingsError(ValueError):
    """Raised when board settings cannot be loaded or validated."""

    def __init__(self, message: str, *, code: str = "BOARD_SETTINGS_INVALID", remediation: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.remediation = remediation if remediation is not None else remediation_for(code)


@dataclass(frozen=True)
class BoardSettings:
    """Global board configuration. Unknown keys ride along in ``extra``."""

    new_board_name: str = DEFAULT_NEW_BOARD_NAME
    board_variant: str = DEFAULT_BOARD_VARIANT
    extra: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "BoardSettings":
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise BoardSettingsError("Board settings must be a mapping")
        values: Dict[str, str] = {}
        for key, default in (("new_board_name", DEFAULT_NEW_BOARD_NAME), ("board_variant", DEFAULT_BOARD_VARIANT)):
            value = data.get(key, default)
            if not isinstance(value, str) or not value.strip():
                raise BoardSettingsError(f"Board setting '{key}' must be a non-empty string", code="BOARD_SETTINGS_TYPE")
            values[key] = value.strip()
        extra = {key: value for key, value in data.items() if key not in values}
        return cls(extra=extra, **values)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = dict(self.extra)
        payload["new_board_name"] = self.new_board_name
        payload["board_variant"] = self.board_variant
        return payload


__all__ = [
    "BoardSettings",
    "BoardSettingsError",
    "Mode",
    "TransitionRequest",
    "override_key",
]
