"""Plugin registry - the set of active plugins keyed by name."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Optional

from mentat.plugins.base import BasePlugin

logger = logging.getLogger(__name__)


class PluginState(str, Enum):
    """Plugin lifecycle states."""

    LOADED = "loaded"
    REGISTERED = "registered"
    STARTED = "started"
    STOPPED = "stopped"
    ERROR = "error"


@dataclass
class PluginInstance:
    """An active plugin and where it was loaded from."""

    plugin: BasePlugin = field(repr=False)
    source: Path
    module_name: str
    state: PluginState = PluginState.LOADED
    error: Optional[str] = None

    @property
    def name(self) -> str:
        return self.plugin.name

    def to_dict(self) -> dict:
        """Serialize for API responses."""
        return {
            "name": self.plugin.name,
            "version": self.plugin.version,
            "description": self.plugin.description or "No description",
            "enabled": self.plugin.enabled is not False,
            "commandCount": len(self.plugin.commands or []),
            "eventCount": len(self.plugin.events or []),
            "state": self.state.value,
            "source": self.source.name,
            "error": self.error,
        }


class PluginRegistry:
    """Active plugin set. At most one entry per name."""

    def __init__(self):
        self._plugins: Dict[str, PluginInstance] = {}

    def add(self, instance: PluginInstance) -> None:
        if instance.name in self._plugins:
            logger.warning(f"Plugin '{instance.name}' already active, overwriting")
        self._plugins[instance.name] = instance

    def get(self, name: str) -> Optional[PluginInstance]:
        return self._plugins.get(name)

    def get_all(self) -> list[PluginInstance]:
        return list(self._plugins.values())

    def remove(self, name: str) -> Optional[PluginInstance]:
        return self._plugins.pop(name, None)

    def has(self, name: str) -> bool:
        return name in self._plugins

    def count(self) -> int:
        return len(self._plugins)
