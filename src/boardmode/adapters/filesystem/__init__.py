"""Filesystem adapters: a directory as a vault, YAML for settings."""

from .settings_store import YamlSettingsStore
from .vault import FileSystemMetadataCache, FileSystemVault, FSFile, FSFolder

__all__ = ["FSFile", "FSFolder", "FileSystemMetadataCache", "FileSystemVault", "YamlSettingsStore"]
