"""Utility plugin - ping, help and bot info commands."""

import math

import discord

from mentat import __version__
from mentat.plugins.base import BasePlugin, Command


class UtilityPlugin(BasePlugin):
    """Basic utility commands."""

    name = "Utility"
    version = "1.0.0"
    description = "Basic utility commands"

    def __init__(self, framework):
        super().__init__(framework)
        self.commands = [
            Command(name="ping", description="Check bot latency", execute=self.ping_command),
            Command(name="help", description="Show available commands", execute=self.help_command),
            Command(name="info", description="Bot information", execute=self.info_command),
        ]

    async def ping_command(self, message, args, framework, plugin):
        latency_ms = int((discord.utils.utcnow() - message.created_at).total_seconds() * 1000)
        api_latency = framework.client.latency
        api_text = "n/a" if math.isnan(api_latency) else f"{int(api_latency * 1000)}ms"
        embed = framework.create_embed(
            title="🏓 Pong!",
            description=f"Latency: {latency_ms}ms\nAPI Latency: {api_text}",
        )
        await message.reply(embed=embed)

    async def help_command(self, message, args, framework, plugin):
        prefix = framework.prefix
        lines = [f"`{prefix}{cmd.name}` - {cmd.description}" for cmd in framework.commands.list()]
        embed = framework.create_embed(
            title="📋 Available Commands",
            description="\n".join(lines) or "No commands available",
        )
        await message.reply(embed=embed)

    async def info_command(self, message, args, framework, plugin):
        client = framework.client
        embed = framework.create_embed(
            title="🤖 Bot Information",
            fields=[
                {"name": "Framework Version", "value": __version__, "inline": True},
                {"name": "Plugins Loaded", "value": str(framework.plugins.count()), "inline": True},
                {"name": "Commands Available", "value": str(framework.commands.count()), "inline": True},
                {"name": "Servers", "value": str(len(client.guilds)), "inline": True},
                {"name": "Users", "value": str(len(client.users)), "inline": True},
                {"name": "Theme", "value": framework.config.theme, "inline": True},
            ],
        )
        await message.reply(embed=embed)


def register(framework):
    return UtilityPlugin(framework)
