"""Domain events emitted while arbitrating pane view modes."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class TransitionDecision:
    """Outcome of running a transition request through the arbiter."""

    pane_id: Optional[str]
    path: Optional[str]
    requested: str
    forwarded: str
    reason: str

    @property
    def rewritten(self) -> bool:
        return self.requested != self.forwarded

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class OverrideChange:
    """Captures an explicit override write or removal."""

    key: str
    mode: Optional[str]
    source: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
