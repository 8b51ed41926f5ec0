"""Plugin registry - tracks all resolved plugins."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from launcher.plugins.descriptor import PluginDescriptor, Resolution

logger = logging.getLogger(__name__)


@dataclass
class PluginEntry:
    """A registered plugin and how it was resolved."""

    resolution: Resolution

    @property
    def descriptor(self) -> PluginDescriptor:
        return self.resolution.descriptor

    @property
    def path(self) -> Path:
        return self.descriptor.path

    @property
    def name(self) -> str:
        return self.descriptor.name

    def to_dict(self) -> dict:
        """Serialize plugin entry to dict for API responses."""
        info = self.descriptor.to_dict()
        info["degradation"] = (
            self.resolution.degradation.value if self.resolution.degradation else None
        )
        info["detail"] = self.resolution.detail or None
        return info


class PluginRegistry:
    """Central registry for all plugins, keyed by install path."""

    def __init__(self):
        self._plugins: Dict[Path, PluginEntry] = {}

    def register(self, resolution: Resolution) -> PluginEntry:
        """Register a resolved plugin."""
        entry = PluginEntry(resolution=resolution)
        if entry.path in self._plugins:
            logger.warning(f"Plugin at '{entry.path}' already registered, overwriting")
        self._plugins[entry.path] = entry
        source = "core" if entry.descriptor.is_core else "user"
        logger.info(f"Registered plugin: {entry.name} ({source}, {entry.descriptor.schema.value})")
        return entry

    def get(self, path: Path) -> Optional[PluginEntry]:
        """Get a plugin by install path."""
        return self._plugins.get(Path(path))

    def get_by_name(self, name: str) -> Optional[PluginEntry]:
        """Get the first plugin whose directory basename matches."""
        return next((p for p in self._plugins.values() if p.name == name), None)

    def get_all(self) -> List[PluginEntry]:
        """Get all registered plugins."""
        return list(self._plugins.values())

    def get_by_keyword(self, keyword: str) -> List[PluginEntry]:
        """Get all plugins triggered by the given keyword."""
        if not keyword:
            return []
        return [p for p in self._plugins.values() if p.descriptor.keyword == keyword]

    def get_fallback(self) -> List[PluginEntry]:
        """Get plugins without a keyword (only reachable via default search)."""
        return [p for p in self._plugins.values() if not p.descriptor.keyword]

    def keywords(self) -> List[str]:
        return sorted({p.descriptor.keyword for p in self._plugins.values() if p.descriptor.keyword})

    def remove(self, path: Path) -> Optional[PluginEntry]:
        """Remove a plugin from the registry."""
        return self._plugins.pop(Path(path), None)

    def has(self, path: Path) -> bool:
        """Check if a plugin is registered."""
        return Path(path) in self._plugins

    def count(self) -> int:
        """Get total number of registered plugins."""
        return len(self._plugins)

    def clear(self) -> None:
        self._plugins.clear()
