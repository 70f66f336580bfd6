"""Shared fixtures: fake chat client, plugin files and the framework."""

import sys
import textwrap
from collections import defaultdict
from unittest.mock import AsyncMock, MagicMock

import pytest

from mentat.core.framework import BotFramework
from mentat.services.config_service import ConfigService


UTILITY_SOURCE = '''
from mentat.plugins.base import BasePlugin, Command


class UtilityPlugin(BasePlugin):
    name = "Utility"
    version = "1.0.0"
    description = "Basic utility commands"

    def __init__(self, framework):
        super().__init__(framework)
        self.calls = []
        self.commands = [Command(name="ping", description="Check bot latency", execute=self.ping)]

    async def ping(self, message, args, framework, plugin):
        self.calls.append(args)
        await message.reply("pong")


def register(framework):
    return UtilityPlugin(framework)
'''


GREETER_SOURCE = '''
from mentat.plugins.base import BasePlugin, Command, EventListener


class GreeterPlugin(BasePlugin):
    name = "Greeter"
    version = "0.1.0"

    def __init__(self, framework):
        super().__init__(framework)
        self.joined = []
        self.cleaned_up = False
        self.config = {"greeting": "hello"}
        self.commands = [
            Command(name="Greet", description="Say hello", execute=self.greet),
            Command(name="boom", description="Always fails", execute=self.boom),
        ]
        self.events = [EventListener(name="on_member_join", handler=self.on_member_join)]

    async def greet(self, message, args, framework, plugin):
        await message.reply(self.get_config("greeting"))

    async def boom(self, message, args, framework, plugin):
        raise RuntimeError("kaboom")

    async def on_member_join(self, member):
        self.joined.append(member)

    async def cleanup(self):
        self.cleaned_up = True


def register(framework):
    return GreeterPlugin(framework)
'''


class FakeEventSource:
    """Records listeners the way ``commands.Bot`` stores extra events."""

    def __init__(self):
        self.listeners = defaultdict(list)

    def add_listener(self, func, name):
        self.listeners[name].append(func)

    def remove_listener(self, func, name):
        if func in self.listeners[name]:
            self.listeners[name].remove(func)

    async def dispatch(self, name, *args):
        for func in list(self.listeners[name]):
            await func(*args)


class FakeClient(FakeEventSource):
    """Stand-in for the Discord client."""

    latency = 0.042

    def __init__(self):
        super().__init__()
        self.guilds = []
        self.users = []
        self.closed = False
        self.start = AsyncMock()

    def is_ready(self):
        return False

    def is_closed(self):
        return self.closed

    async def close(self):
        self.closed = True


def make_message(content, bot=False):
    """A message-like mock with an awaitable reply()."""
    message = MagicMock()
    message.content = content
    message.author = MagicMock()
    message.author.bot = bot
    message.reply = AsyncMock()
    return message


@pytest.fixture(autouse=True)
def _evict_plugin_modules():
    yield
    for name in [m for m in sys.modules if m.startswith("mentat_plugin_")]:
        del sys.modules[name]


@pytest.fixture
def plugins_dir(tmp_path):
    path = tmp_path / "plugins"
    path.mkdir()
    return path


@pytest.fixture
def write_plugin(plugins_dir):
    """Write a plugin source file into the plugins directory."""

    def _write(filename, source):
        path = plugins_dir / filename
        path.write_text(textwrap.dedent(source), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def config_file(tmp_path):
    return tmp_path / "config.json"


@pytest.fixture
def config_service(config_file):
    return ConfigService(config_file)


@pytest.fixture
def client():
    return FakeClient()


@pytest.fixture
def framework(client, config_service, plugins_dir):
    return BotFramework(client=client, config_service=config_service, plugins_dir=plugins_dir)


@pytest.fixture
def manager(framework):
    return framework.manager
