"""Dispatch router - turns inbound chat messages into command invocations."""
from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, List, Optional

from mentat.constants import COMMAND_FAILED_NOTICE

if TYPE_CHECKING:
    from mentat.plugins.manager import PluginManager
    from mentat.services.config_service import ConfigService

logger = logging.getLogger(__name__)


@dataclass
class Invocation:
    """A command name and its arguments parsed from one message."""

    command_name: str
    args: List[str] = field(default_factory=list)


def parse_invocation(content: str, prefix: str) -> Optional[Invocation]:
    """Split ``content`` into an Invocation.

    Returns None when the content does not start with ``prefix`` or
    nothing follows it.
    """
    if not prefix or not content or not content.startswith(prefix):
        return None
    tokens = content[len(prefix):].split()
    if not tokens:
        return None
    return Invocation(command_name=tokens[0].lower(), args=tokens[1:])


class DispatchRouter:
    """Routes message events to registered command handlers.

    Each message is handled on its own: filter, tokenize, resolve, invoke.
    Handler failures are logged and answered with a generic notice; they
    never reach the client's event loop.
    """

    def __init__(self, manager: PluginManager, config_service: ConfigService, framework: Any = None):
        self.manager = manager
        self.config_service = config_service
        self.framework = framework
        self.commands_executed = 0
        self.commands_failed = 0

    async def on_message(self, message: Any) -> bool:
        """Listener for the client's message events.

        Returns:
            True if a command handler was invoked
        """
        author = getattr(message, "author", None)
        if author is None or getattr(author, "bot", False):
            return False

        invocation = parse_invocation(getattr(message, "content", "") or "", self.config_service.prefix)
        if invocation is None:
            return False

        descriptor = self.manager.commands.resolve(invocation.command_name)
        if descriptor is None:
            return False

        instance = self.manager.plugins.get(descriptor.plugin)
        plugin = instance.plugin if instance is not None else None
        if plugin is not None and plugin.enabled is False:
            logger.debug(f"Ignoring '{invocation.command_name}': plugin '{descriptor.plugin}' is disabled")
            return False

        self.commands_executed += 1
        try:
            result = descriptor.execute(message, invocation.args, self.framework, plugin)
            if inspect.isawaitable(result):
                await result
        except Exception:
            self.commands_failed += 1
            logger.exception(f"Command execution error: {invocation.command_name} ({descriptor.plugin})")
            await self._notify_failure(message)
        return True

    async def _notify_failure(self, message: Any) -> None:
        try:
            await message.reply(COMMAND_FAILED_NOTICE)
        except Exception as e:
            logger.warning(f"Could not send failure notice: {e}")
