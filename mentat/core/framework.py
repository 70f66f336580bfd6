"""Bot framework - ties the chat client, plugin manager and router together."""

import asyncio
import logging
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

import discord

from mentat.constants import THEME_COLORS
from mentat.core.dispatch import DispatchRouter
from mentat.plugins.manager import PluginManager
from mentat.services.config_service import ConfigService

logger = logging.getLogger(__name__)


class BotFramework:
    """Owns the process-wide plugin state and the chat client.

    This is the ``framework`` object handed to plugins and command handlers.
    """

    def __init__(
        self,
        client: Any,
        config_service: ConfigService,
        plugins_dir: Path,
        token: str = "",
    ):
        self.client = client
        self.config_service = config_service
        self.token = token
        self.started_at: Optional[float] = None
        self._client_task: Optional[asyncio.Task] = None

        self.manager = PluginManager(
            plugins_dir=plugins_dir,
            config_service=config_service,
            event_source=client,
            framework=self,
        )
        self.router = DispatchRouter(self.manager, config_service, framework=self)
        client.add_listener(self.router.on_message, "on_message")

    @property
    def config(self) -> ConfigService:
        return self.config_service

    @property
    def prefix(self) -> str:
        return self.config_service.prefix

    @property
    def plugins(self):
        return self.manager.plugins

    @property
    def commands(self):
        return self.manager.commands

    @property
    def is_ready(self) -> bool:
        is_ready = getattr(self.client, "is_ready", None)
        return bool(is_ready()) if callable(is_ready) else False

    @property
    def uptime(self) -> float:
        """Seconds since start() was called."""
        if self.started_at is None:
            return 0.0
        return time.time() - self.started_at

    async def start(self, autoload: bool = True) -> None:
        """Load plugins, then connect the client in the background if a token is set."""
        self.started_at = time.time()
        if autoload:
            await self.manager.load_all()

        if not self.token:
            logger.warning(
                "No Discord token provided (DISCORD_TOKEN). "
                "The admin API works but the bot won't connect to Discord."
            )
            return

        logger.info("Connecting to Discord...")
        self._client_task = asyncio.create_task(self._run_client())

    async def _run_client(self) -> None:
        try:
            await self.client.start(self.token)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Discord client stopped with an error")

    async def stop(self) -> None:
        """Clean up every plugin in turn, then release the client connection."""
        logger.info("Shutting down gracefully...")
        await self.manager.shutdown()

        if not self.client.is_closed():
            await self.client.close()
            logger.info("Discord client closed")
        if self._client_task is not None and not self._client_task.done():
            self._client_task.cancel()

    def status(self) -> Dict[str, Any]:
        return {
            "status": "online" if self.is_ready else "offline",
            "guilds": len(getattr(self.client, "guilds", []) or []),
            "users": len(getattr(self.client, "users", []) or []),
            "plugins": self.manager.plugins.count(),
            "commands": self.manager.commands.count(),
            "commandsExecuted": self.router.commands_executed,
            "commandsFailed": self.router.commands_failed,
            "uptime": int(self.uptime * 1000),
            "timestamp": int(time.time() * 1000),
        }

    def create_embed(
        self,
        title: Optional[str] = None,
        description: Optional[str] = None,
        fields: Optional[List[Dict[str, Any]]] = None,
        footer: Optional[str] = None,
    ) -> discord.Embed:
        """Build an embed coloured by the configured theme."""
        color = THEME_COLORS.get(self.config_service.theme, THEME_COLORS["default"])
        embed = discord.Embed(title=title, description=description, color=color)
        embed.timestamp = discord.utils.utcnow()
        for f in fields or []:
            embed.add_field(name=f["name"], value=f["value"], inline=f.get("inline", False))
        if footer:
            embed.set_footer(text=footer)
        return embed
