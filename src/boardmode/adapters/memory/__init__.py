"""Reference in-memory host used by the test-suite and for embedding experiments."""

from __future__ import annotations

from boardmode.ports.hooks import HostHooks
from boardmode.ports.host import Host

from .vault import MemoryFile, MemoryFolder, MemoryMetadataCache, MemoryVault
from .workspace import (
    MarkdownView,
    MemoryCommandRegistry,
    MemoryMenu,
    MemoryNotifier,
    MemoryPane,
    MemoryWorkspace,
    MenuEntry,
)


def build_memory_host(*, deferred_metadata: bool = False) -> Host:
    hooks = HostHooks()
    cache = MemoryMetadataCache(deferred=deferred_metadata)
    vault = MemoryVault(cache)
    commands = MemoryCommandRegistry(hooks)
    workspace = MemoryWorkspace(vault, hooks, commands)
    return Host(
        workspace=workspace,
        vault=vault,
        metadata_cache=cache,
        commands=commands,
        notifier=MemoryNotifier(),
        hooks=hooks,
    )


__all__ = [
    "MarkdownView",
    "MemoryCommandRegistry",
    "MemoryFile",
    "MemoryFolder",
    "MemoryMenu",
    "MemoryMetadataCache",
    "MemoryNotifier",
    "MemoryPane",
    "MemoryVault",
    "MemoryWorkspace",
    "MenuEntry",
    "build_memory_host",
]
