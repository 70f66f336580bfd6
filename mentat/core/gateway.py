"""Discord client wiring."""

import logging

import discord
from discord.ext import commands

logger = logging.getLogger(__name__)


class MentatBot(commands.Bot):
    """discord.py bot used as the event source.

    Built-in prefix command processing is switched off: text commands go
    through the DispatchRouter, which is attached as an ``on_message``
    listener.
    """

    async def on_message(self, message: discord.Message) -> None:
        return None

    async def on_ready(self) -> None:
        logger.info(f"Bot is ready! Logged in as {self.user}")
        await self.change_presence(
            activity=discord.Activity(type=discord.ActivityType.watching, name="Framework Running")
        )


def create_bot(prefix: str) -> MentatBot:
    """Create the Discord client with the intents the framework needs."""
    intents = discord.Intents.default()
    intents.guilds = True
    intents.guild_messages = True
    intents.message_content = True
    intents.members = True
    return MentatBot(command_prefix=prefix, intents=intents, help_command=None)
