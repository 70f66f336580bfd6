"""ServerStats plugin - server, user and bot statistics."""

import time

import discord

from mentat.plugins.base import BasePlugin, Command, EventListener


def _format_duration(seconds: float) -> str:
    seconds = int(seconds)
    days, seconds = divmod(seconds, 86400)
    hours, seconds = divmod(seconds, 3600)
    minutes, seconds = divmod(seconds, 60)
    return f"{days}d {hours}h {minutes}m {seconds}s"


class ServerStatsPlugin(BasePlugin):
    """Display server statistics and information."""

    name = "ServerStats"
    version = "1.0.0"
    description = "Display server statistics and information"

    def __init__(self, framework):
        super().__init__(framework)
        self.commands = [
            Command(name="serverinfo", description="Display detailed server information", execute=self.server_info_command),
            Command(name="userinfo", description="Display user information", execute=self.user_info_command),
            Command(name="stats", description="Display bot statistics", execute=self.stats_command),
            Command(name="membercount", description="Show current member count", execute=self.member_count_command),
        ]
        self.events = [
            EventListener(name="on_member_join", handler=self.on_member_join),
            EventListener(name="on_member_remove", handler=self.on_member_remove),
        ]
        self.stats = {"members_joined": 0, "members_left": 0}
        self.start_time = time.time()

    async def initialize(self):
        self.start_time = time.time()
        self.logger.info("ServerStats plugin initialized")

    async def server_info_command(self, message, args, framework, plugin):
        guild = message.guild
        if guild is None:
            await message.reply("❌ This command can only be used in a server.")
            return

        humans = sum(1 for m in guild.members if not m.bot)
        bots = len(guild.members) - humans
        embed = framework.create_embed(
            title=f"📊 {guild.name} Server Information",
            fields=[
                {
                    "name": "🏷️ Basic Info",
                    "value": f"**Name:** {guild.name}\n**ID:** {guild.id}\n**Created:** {guild.created_at:%a %b %d %Y}",
                    "inline": True,
                },
                {"name": "👑 Owner", "value": f"{guild.owner}\n({guild.owner_id})", "inline": True},
                {
                    "name": "📈 Members",
                    "value": f"**Total:** {guild.member_count}\n**Humans:** {humans}\n**Bots:** {bots}",
                    "inline": True,
                },
                {
                    "name": "📺 Channels",
                    "value": (
                        f"**Text:** {len(guild.text_channels)}\n**Voice:** {len(guild.voice_channels)}\n"
                        f"**Categories:** {len(guild.categories)}\n**Total:** {len(guild.channels)}"
                    ),
                    "inline": True,
                },
                {
                    "name": "🎭 Roles",
                    "value": f"**Count:** {len(guild.roles)}\n**Highest:** {guild.roles[-1].name if guild.roles else 'None'}",
                    "inline": True,
                },
                {
                    "name": "💎 Boosts",
                    "value": f"**Level:** {guild.premium_tier}\n**Boosts:** {guild.premium_subscription_count or 0}",
                    "inline": True,
                },
            ],
        )
        if guild.icon:
            embed.set_thumbnail(url=guild.icon.url)
        await message.reply(embed=embed)

    async def user_info_command(self, message, args, framework, plugin):
        member = message.mentions[0] if message.mentions else message.author
        fields = [
            {"name": "🏷️ User", "value": f"**Tag:** {member}\n**ID:** {member.id}\n**Bot:** {'Yes' if member.bot else 'No'}", "inline": True},
            {"name": "📅 Created", "value": f"{member.created_at:%a %b %d %Y}", "inline": True},
        ]
        if isinstance(member, discord.Member):
            roles = [role.mention for role in reversed(member.roles) if role != member.guild.default_role]
            if member.joined_at:
                fields.append({"name": "📥 Joined", "value": f"{member.joined_at:%a %b %d %Y}", "inline": True})
            fields.append({"name": f"🎭 Roles ({len(roles)})", "value": " ".join(roles[:10]) or "None", "inline": False})

        embed = framework.create_embed(title=f"👤 {member.display_name}", fields=fields)
        embed.set_thumbnail(url=member.display_avatar.url)
        await message.reply(embed=embed)

    async def stats_command(self, message, args, framework, plugin):
        client = framework.client
        embed = framework.create_embed(
            title="🤖 Bot Statistics",
            fields=[
                {
                    "name": "📊 General",
                    "value": f"**Servers:** {len(client.guilds)}\n**Users:** {len(client.users)}\n**Plugins:** {framework.plugins.count()}",
                    "inline": True,
                },
                {"name": "⏱️ Uptime", "value": _format_duration(framework.uptime), "inline": True},
                {
                    "name": "📈 Session",
                    "value": (
                        f"**Members Joined:** {self.stats['members_joined']}\n"
                        f"**Members Left:** {self.stats['members_left']}\n"
                        f"**Commands Run:** {framework.router.commands_executed}"
                    ),
                    "inline": True,
                },
            ],
        )
        await message.reply(embed=embed)

    async def member_count_command(self, message, args, framework, plugin):
        guild = message.guild
        if guild is None:
            await message.reply("❌ This command can only be used in a server.")
            return
        embed = framework.create_embed(
            title=f"👥 {guild.name} Members",
            description=f"**{guild.member_count}** members",
            fields=[
                {
                    "name": "This Session",
                    "value": f"+{self.stats['members_joined']} / -{self.stats['members_left']}",
                    "inline": True,
                }
            ],
        )
        await message.reply(embed=embed)

    async def on_member_join(self, member):
        self.stats["members_joined"] += 1
        self.logger.info(
            f"Member joined: {member} ({member.guild}) - Total joined this session: {self.stats['members_joined']}"
        )

    async def on_member_remove(self, member):
        self.stats["members_left"] += 1
        self.logger.info(
            f"Member left: {member} ({member.guild}) - Total left this session: {self.stats['members_left']}"
        )


def register(framework):
    return ServerStatsPlugin(framework)
