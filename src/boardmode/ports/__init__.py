"""Ports the engine consumes from its host."""

from .hooks import HostHooks, Interceptor, InterceptorChain
from .host import (
    BoardView,
    Command,
    CommandRegistry,
    DocumentFile,
    Folder,
    Host,
    HostOperationError,
    Menu,
    MetadataCache,
    Notifier,
    Pane,
    SettingsStore,
    Vault,
    View,
    Workspace,
)

__all__ = [
    "BoardView",
    "Command",
    "CommandRegistry",
    "DocumentFile",
    "Folder",
    "Host",
    "HostHooks",
    "HostOperationError",
    "Interceptor",
    "InterceptorChain",
    "Menu",
    "MetadataCache",
    "Notifier",
    "Pane",
    "SettingsStore",
    "Vault",
    "View",
    "Workspace",
]
