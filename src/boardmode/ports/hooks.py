"""Interception points a host consults before running its own pane and command logic.

Instead of patching host objects in place, the host routes each interceptable
operation through an :class:`InterceptorChain`. Entries are ``(predicate,
transform)`` pairs evaluated in registration order; the first entry whose
predicate accepts the event receives a ``proceed`` callable that continues
with the remaining entries and ends in the host's own behaviour.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

Predicate = Callable[[Any, Any], bool]
Proceed = Callable[[Any], Any]
Transform = Callable[[Any, Any, Proceed], Any]
Fallthrough = Callable[[Any, Any], Any]


@dataclass(frozen=True)
class Interceptor:
    predicate: Predicate
    transform: Transform
    name: str = ""


class InterceptorChain:
    """Ordered decide-then-delegate middleware for one host operation."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._entries: List[Interceptor] = []

    def register(self, predicate: Predicate, transform: Transform, *, name: str = "") -> Callable[[], None]:
        entry = Interceptor(predicate=predicate, transform=transform, name=name)
        self._entries.append(entry)

        def dispose() -> None:
            if entry in self._entries:
                self._entries.remove(entry)

        return dispose

    def dispatch(self, subject: Any, payload: Any, fallthrough: Fallthrough) -> Any:
        entries = tuple(self._entries)

        def run(start: int, current: Any) -> Any:
            for index in range(start, len(entries)):
                entry = entries[index]
                if entry.predicate(subject, current):
                    return entry.transform(subject, current, lambda forwarded: run(index + 1, forwarded))
            return fallthrough(subject, current)

        return run(0, payload)

    def names(self) -> List[str]:
        return [entry.name for entry in self._entries]

    def __len__(self) -> int:
        return len(self._entries)


@dataclass
class HostHooks:
    """The chains a host dispatches through."""

    transition: InterceptorChain = field(default_factory=lambda: InterceptorChain("transition"))
    detach: InterceptorChain = field(default_factory=lambda: InterceptorChain("detach"))
    pane_menu: InterceptorChain = field(default_factory=lambda: InterceptorChain("pane-menu"))
    file_menu: InterceptorChain = field(default_factory=lambda: InterceptorChain("file-menu"))
    commands: Dict[str, InterceptorChain] = field(default_factory=dict)

    def command(self, command_id: str) -> InterceptorChain:
        chain = self.commands.get(command_id)
        if chain is None:
            chain = self.commands[command_id] = InterceptorChain(f"command:{command_id}")
        return chain


__all__ = ["HostHooks", "Interceptor", "InterceptorChain"]
