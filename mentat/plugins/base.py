"""Plugin base class and the descriptors a plugin contributes."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict, List, Optional

if TYPE_CHECKING:
    from mentat.core.framework import BotFramework

CommandHandler = Callable[..., Awaitable[Any]]
EventHandler = Callable[..., Awaitable[Any]]


@dataclass
class Command:
    """A text command contributed by a plugin.

    ``execute`` is called as ``execute(message, args, framework, plugin)``.
    """

    name: str
    execute: CommandHandler
    description: str = "No description"


@dataclass
class EventListener:
    """A platform event listener contributed by a plugin.

    ``name`` is the client's listener name, e.g. ``on_member_join``.
    """

    name: str
    handler: EventHandler


class BasePlugin:
    """Base class every loadable plugin derives from.

    Subclasses set ``name`` and ``version`` and fill ``commands`` / ``events``
    in ``__init__``. The module that defines a plugin exposes a module-level
    ``register(framework)`` function returning the instance.
    """

    name: str = ""
    version: str = ""
    description: str = "No description"

    def __init__(self, framework: Optional[BotFramework] = None):
        self.framework = framework
        self.enabled: bool = True
        self.commands: List[Command] = []
        self.events: List[EventListener] = []
        self.config: Dict[str, Any] = {}

    @property
    def logger(self) -> logging.Logger:
        return logging.getLogger(f"plugin.{self.name or type(self).__name__}")

    async def initialize(self) -> None:
        """Called once after the plugin's commands and listeners are registered."""

    async def cleanup(self) -> None:
        """Called once before the plugin is removed."""

    async def update_config(self, new_config: Dict[str, Any]) -> None:
        """Merge new configuration values. Override for custom handling."""
        self.config = {**self.config, **new_config}
        self.logger.info(f"Configuration updated: {new_config}")

    def get_config(self, key: str, default: Any = None) -> Any:
        return self.config.get(key, default)

    def set_config(self, key: str, value: Any) -> None:
        self.config[key] = value
