"""Command registry - maps command names to the active handler and its owner."""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from mentat.plugins.base import CommandHandler

logger = logging.getLogger(__name__)


@dataclass
class CommandDescriptor:
    """A registered command and the plugin that owns it."""

    name: str
    description: str
    execute: CommandHandler = field(repr=False)
    plugin: str

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "owningPlugin": self.plugin,
        }


class CommandRegistry:
    """Name -> descriptor mapping with owner tracking.

    All operations are synchronous and in-memory.
    """

    def __init__(self):
        self._commands: Dict[str, CommandDescriptor] = {}

    def register(self, descriptor: CommandDescriptor) -> None:
        """Insert or overwrite a command by name (last write wins)."""
        existing = self._commands.get(descriptor.name)
        if existing is not None and existing.plugin != descriptor.plugin:
            logger.warning(
                f"Command '{descriptor.name}' owned by '{existing.plugin}' "
                f"replaced by plugin '{descriptor.plugin}'"
            )
        self._commands[descriptor.name] = descriptor
        logger.debug(f"Registered command: {descriptor.name} ({descriptor.plugin})")

    def unregister_owned_by(self, owner: str) -> List[str]:
        """Remove every command owned by ``owner``.

        Returns:
            Names of the removed commands
        """
        removed = [name for name, cmd in self._commands.items() if cmd.plugin == owner]
        for name in removed:
            del self._commands[name]
        if removed:
            logger.debug(f"Unregistered {len(removed)} command(s) of plugin '{owner}'")
        return removed

    def resolve(self, name: str) -> Optional[CommandDescriptor]:
        """Exact-match lookup of an (already lower-cased) command name."""
        return self._commands.get(name)

    def list(self) -> List[CommandDescriptor]:
        return list(self._commands.values())

    def owned_by(self, owner: str) -> List[CommandDescriptor]:
        return [cmd for cmd in self._commands.values() if cmd.plugin == owner]

    def count(self) -> int:
        return len(self._commands)

    def __contains__(self, name: str) -> bool:
        return name in self._commands
