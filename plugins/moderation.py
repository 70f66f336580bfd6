"""Moderation plugin - kick, ban, clear, mute and warning commands."""

from collections import defaultdict
from datetime import timedelta

import discord

from mentat.plugins.base import BasePlugin, Command, EventListener

MAX_TIMEOUT_MINUTES = 40320  # 28 days, the platform maximum


class ModerationPlugin(BasePlugin):
    """Basic moderation commands for Discord servers."""

    name = "Moderation"
    version = "1.0.0"
    description = "Basic moderation commands for Discord servers"

    def __init__(self, framework):
        super().__init__(framework)
        self.config = {"log_channel_id": None, "default_mute_minutes": 10}
        self.commands = [
            Command(name="kick", description="Kick a user from the server", execute=self.kick_command),
            Command(name="ban", description="Ban a user from the server", execute=self.ban_command),
            Command(name="clear", description="Clear messages from a channel", execute=self.clear_command),
            Command(name="mute", description="Mute a user (timeout)", execute=self.mute_command),
            Command(name="unmute", description="Unmute a user", execute=self.unmute_command),
            Command(name="warn", description="Warn a user", execute=self.warn_command),
            Command(name="warnings", description="List a user's warnings", execute=self.warnings_command),
        ]
        self.events = [
            EventListener(name="on_member_join", handler=self.on_member_join),
            EventListener(name="on_message_delete", handler=self.on_message_delete),
        ]
        # In-memory only; lost on reload.
        self.warnings = defaultdict(list)

    async def initialize(self):
        self.logger.info("Moderation plugin initialized")

    async def cleanup(self):
        self.warnings.clear()

    async def _check_permission(self, message, permission: str) -> bool:
        """Reply and return False unless both the author and the bot hold ``permission``."""
        if message.guild is None:
            await message.reply("❌ This command can only be used in a server.")
            return False
        label = permission.upper()
        if not getattr(message.author.guild_permissions, permission, False):
            await message.reply(f"❌ You need {label} permission to use this command.")
            return False
        if not getattr(message.guild.me.guild_permissions, permission, False):
            await message.reply(f"❌ I need {label} permission to execute this command.")
            return False
        return True

    async def _mentioned_member(self, message, usage: str):
        if message.guild is None:
            await message.reply("❌ This command can only be used in a server.")
            return None
        if not message.mentions:
            await message.reply(f"❌ Please mention a user.\nUsage: `{self.framework.prefix}{usage}`")
            return None
        member = message.guild.get_member(message.mentions[0].id)
        if member is None:
            await message.reply("❌ User not found in this server.")
        return member

    def _action_embed(self, title, description, message, **extra_fields):
        fields = [{"name": k.replace("_", " ").title(), "value": str(v), "inline": False} for k, v in extra_fields.items()]
        fields.append({"name": "Moderator", "value": str(message.author), "inline": True})
        return self.framework.create_embed(title=title, description=description, fields=fields)

    async def kick_command(self, message, args, framework, plugin):
        if not await self._check_permission(message, "kick_members"):
            return
        member = await self._mentioned_member(message, "kick @user [reason]")
        if member is None:
            return
        if member.id == message.author.id:
            await message.reply("❌ You cannot kick yourself!")
            return

        reason = " ".join(args[1:]) or "No reason provided"
        try:
            await member.send(f"You have been kicked from **{message.guild.name}** by {message.author}.\nReason: {reason}")
        except discord.HTTPException:
            self.logger.info("Could not send DM to kicked user")

        try:
            await member.kick(reason=reason)
        except discord.Forbidden:
            await message.reply("❌ I cannot kick this user. They may have higher permissions than me.")
            return
        await message.reply(
            embed=self._action_embed("👢 User Kicked", f"{member} has been kicked from the server.", message, reason=reason)
        )
        self.logger.info(f"{member} was kicked by {message.author}. Reason: {reason}")

    async def ban_command(self, message, args, framework, plugin):
        if not await self._check_permission(message, "ban_members"):
            return
        if not message.mentions:
            await message.reply(f"❌ Please mention a user to ban.\nUsage: `{framework.prefix}ban @user [reason]`")
            return
        user = message.mentions[0]
        if user.id == message.author.id:
            await message.reply("❌ You cannot ban yourself!")
            return

        reason = " ".join(args[1:]) or "No reason provided"
        try:
            await user.send(f"You have been banned from **{message.guild.name}** by {message.author}.\nReason: {reason}")
        except discord.HTTPException:
            self.logger.info("Could not send DM to banned user")

        try:
            await message.guild.ban(user, reason=reason, delete_message_seconds=86400)
        except discord.Forbidden:
            await message.reply("❌ I cannot ban this user. They may have higher permissions than me.")
            return
        await message.reply(
            embed=self._action_embed("🔨 User Banned", f"{user} has been banned from the server.", message, reason=reason)
        )
        self.logger.info(f"{user} was banned by {message.author}. Reason: {reason}")

    async def clear_command(self, message, args, framework, plugin):
        if not await self._check_permission(message, "manage_messages"):
            return
        try:
            amount = int(args[0])
        except (IndexError, ValueError):
            amount = 0
        if not 1 <= amount <= 100:
            await message.reply(f"❌ Please provide a number between 1 and 100.\nUsage: `{framework.prefix}clear <amount>`")
            return

        await message.delete()
        deleted = await message.channel.purge(limit=amount)
        embed = self._action_embed("🧹 Messages Cleared", f"Successfully deleted {len(deleted)} messages.", message)
        await message.channel.send(embed=embed, delete_after=5)
        self.logger.info(f"{message.author} cleared {len(deleted)} messages in #{message.channel}")

    async def mute_command(self, message, args, framework, plugin):
        if not await self._check_permission(message, "moderate_members"):
            return
        member = await self._mentioned_member(message, "mute @user [minutes] [reason]")
        if member is None:
            return

        minutes = self.get_config("default_mute_minutes", 10)
        if len(args) > 1 and args[1].isdigit():
            minutes = min(int(args[1]), MAX_TIMEOUT_MINUTES)
        reason = " ".join(args[2:]) or "No reason provided"

        await member.timeout(timedelta(minutes=minutes), reason=reason)
        await message.reply(
            embed=self._action_embed(
                "🔇 User Muted", f"{member} has been muted for {minutes} minutes.", message,
                reason=reason, duration=f"{minutes} minutes",
            )
        )
        self.logger.info(f"{member} was muted by {message.author} for {minutes} minutes. Reason: {reason}")

    async def unmute_command(self, message, args, framework, plugin):
        if not await self._check_permission(message, "moderate_members"):
            return
        member = await self._mentioned_member(message, "unmute @user")
        if member is None:
            return
        await member.timeout(None)
        await message.reply(embed=self._action_embed("🔊 User Unmuted", f"{member} has been unmuted.", message))
        self.logger.info(f"{member} was unmuted by {message.author}")

    async def warn_command(self, message, args, framework, plugin):
        if not await self._check_permission(message, "manage_messages"):
            return
        member = await self._mentioned_member(message, "warn @user <reason>")
        if member is None:
            return

        reason = " ".join(args[1:]) or "No reason provided"
        self.warnings[member.id].append(
            {"reason": reason, "moderator": str(message.author), "timestamp": discord.utils.utcnow().isoformat()}
        )
        count = len(self.warnings[member.id])
        await message.reply(
            embed=self._action_embed(
                "⚠️ User Warned", f"{member} has been warned.", message, reason=reason, total_warnings=count,
            )
        )
        self.logger.info(f"{member} was warned by {message.author} ({count} total). Reason: {reason}")

    async def warnings_command(self, message, args, framework, plugin):
        member = await self._mentioned_member(message, "warnings @user")
        if member is None:
            return
        entries = self.warnings.get(member.id, [])
        lines = [f"{i}. {w['reason']} ({w['moderator']})" for i, w in enumerate(entries, 1)]
        embed = framework.create_embed(
            title=f"⚠️ Warnings for {member}",
            description="\n".join(lines) or "No warnings.",
        )
        await message.reply(embed=embed)

    async def on_member_join(self, member):
        self.logger.info(f"Member joined {member.guild}: {member}")

    async def on_message_delete(self, message):
        channel_id = self.get_config("log_channel_id")
        if not channel_id or message.author.bot:
            return
        channel = self.framework.client.get_channel(int(channel_id))
        if channel is None:
            return
        embed = self.framework.create_embed(
            title="🗑️ Message Deleted",
            fields=[
                {"name": "Author", "value": str(message.author), "inline": True},
                {"name": "Channel", "value": str(message.channel), "inline": True},
                {"name": "Content", "value": (message.content or "(empty)")[:1024]},
            ],
        )
        await channel.send(embed=embed)


def register(framework):
    return ModerationPlugin(framework)
