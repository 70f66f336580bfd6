"""Plugin manager - top-level orchestrator for the plugin system."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Union

from mentat.plugins.commands import CommandDescriptor, CommandRegistry
from mentat.plugins.discovery import PluginDiscovery
from mentat.plugins.errors import PluginError, PluginHookError, PluginNotFoundError
from mentat.plugins.events import EventRegistry, EventSource
from mentat.plugins.lifecycle import PluginLifecycle
from mentat.plugins.registry import PluginInstance, PluginRegistry, PluginState
from mentat.services.config_service import ConfigService

if TYPE_CHECKING:
    from mentat.core.framework import BotFramework

logger = logging.getLogger(__name__)


class PluginManager:
    """Single authority over the active plugin set and the derived registries.

    The command and event registries are only mutated through this class.
    The dispatch router and the admin API hold references to the same
    registries, so loads, unloads and config edits are visible immediately.
    """

    def __init__(
        self,
        plugins_dir: Path,
        config_service: ConfigService,
        event_source: EventSource,
        framework: Optional[BotFramework] = None,
    ):
        self.plugins_dir = Path(plugins_dir)
        self.config_service = config_service
        self.framework = framework

        self.plugins = PluginRegistry()
        self.commands = CommandRegistry()
        self.events = EventRegistry(event_source)
        self.discovery = PluginDiscovery(self.plugins_dir)
        self.lifecycle = PluginLifecycle()

    async def load(self, source: Union[str, Path]) -> PluginInstance:
        """Load, validate, register and initialize one plugin.

        If a plugin with the same name is already active it is unloaded
        first, after the new instance has been validated.

        Args:
            source: Plugin file name (relative to the plugins dir) or path

        Returns:
            The active PluginInstance

        Raises:
            PluginNotFoundError: the source file does not exist
            InvalidPluginError: the file does not yield a valid plugin
        """
        path = self.discovery.resolve(source)
        plugin, module_name = self.lifecycle.load(path, self.framework)
        name = plugin.name

        previous = self.plugins.get(name)
        if previous is not None:
            logger.info(f"Plugin '{name}' is already active, replacing it")
            await self.unload(name, evict=previous.module_name != module_name)

        saved = self.config_service.get_plugin_config(name)
        if saved:
            plugin.config = {**(plugin.config or {}), **saved}

        instance = PluginInstance(plugin=plugin, source=path, module_name=module_name)

        for command in plugin.commands or []:
            self.commands.register(
                CommandDescriptor(
                    name=command.name.strip().lower(),
                    description=command.description or "No description",
                    execute=command.execute,
                    plugin=name,
                )
            )
        for listener in plugin.events or []:
            self.events.subscribe(name, listener.name, listener.handler)
        instance.state = PluginState.REGISTERED

        try:
            await self.lifecycle.initialize(plugin)
            instance.state = PluginState.STARTED
        except PluginHookError as e:
            # Registration is kept; the plugin stays routable.
            instance.state = PluginState.ERROR
            instance.error = str(e)
            logger.error(f"{e}; plugin remains registered")

        self.plugins.add(instance)
        logger.info(f"Loaded plugin: {name} v{plugin.version}")
        return instance

    async def unload(self, name: str, evict: bool = True) -> bool:
        """Unregister and clean up an active plugin.

        Returns:
            False if no plugin with that name is active
        """
        instance = self.plugins.get(name)
        if instance is None:
            return False

        self.commands.unregister_owned_by(name)
        self.events.unsubscribe_owned_by(name)

        try:
            await self.lifecycle.cleanup(instance.plugin)
        except PluginHookError as e:
            logger.error(f"{e}; removing plugin anyway")

        instance.state = PluginState.STOPPED
        self.plugins.remove(name)
        if evict:
            self.lifecycle.evict(instance.module_name)
        logger.info(f"Unloaded plugin: {name}")
        return True

    async def reload(self, name: str) -> PluginInstance:
        """Hot-reload an active plugin from the file it was loaded from.

        Raises:
            PluginNotFoundError: no plugin with that name is active, or its
                file has been removed
            InvalidPluginError: the edited file no longer yields a valid
                plugin (the old instance stays active)
        """
        instance = self.plugins.get(name)
        if instance is None:
            raise PluginNotFoundError(f"Plugin not found: {name}")

        reloaded = await self.load(instance.source)
        if reloaded.name != name:
            # The file now declares a different name; drop the stale entry.
            await self.unload(name, evict=False)
        return reloaded

    async def load_all(self, sources: Optional[Iterable[Union[str, Path]]] = None) -> List[PluginInstance]:
        """Best-effort bulk load.

        Args:
            sources: Plugin sources; defaults to every file in the plugins dir

        Returns:
            The instances that loaded successfully
        """
        if sources is None:
            sources = self.discovery.discover_all()

        loaded = []
        for source in sources:
            try:
                loaded.append(await self.load(source))
            except PluginError as e:
                logger.error(f"Failed to load plugin {source}: {e}")
            except Exception:
                logger.exception(f"Unexpected error loading plugin {source}")

        logger.info(f"Loaded {len(loaded)} plugin(s), {self.commands.count()} command(s) available")
        return loaded

    async def shutdown(self) -> None:
        """Unload every active plugin, one at a time, in load order."""
        for instance in self.plugins.get_all():
            await self.unload(instance.name)
        logger.info("All plugins unloaded")

    def get(self, name: str) -> PluginInstance:
        """Get an active plugin.

        Raises:
            PluginNotFoundError: if absent
        """
        instance = self.plugins.get(name)
        if instance is None:
            raise PluginNotFoundError(f"Plugin not found: {name}")
        return instance

    def toggle(self, name: str) -> bool:
        """Flip a plugin's ``enabled`` flag and return the new value."""
        plugin = self.get(name).plugin
        plugin.enabled = not plugin.enabled
        logger.info(f"Plugin '{name}' {'enabled' if plugin.enabled else 'disabled'}")
        return plugin.enabled

    def get_plugin_config(self, name: str) -> Dict[str, Any]:
        return dict(self.get(name).plugin.config or {})

    async def update_plugin_config(self, name: str, values: Dict[str, Any]) -> Dict[str, Any]:
        """Merge ``values`` into a plugin's config, notify it, and persist.

        Returns:
            The plugin's resulting configuration
        """
        plugin = self.get(name).plugin
        previous = dict(plugin.config or {})
        merged = {**previous, **values}

        try:
            await self.lifecycle.update_config(plugin, merged)
        except PluginHookError:
            plugin.config = previous
            raise
        plugin.config = merged

        self.config_service.set_plugin_config(name, merged)
        return dict(merged)

    def get_plugin_info(self, name: str) -> dict:
        instance = self.get(name)
        info = instance.to_dict()
        info["commands"] = [cmd.to_dict() for cmd in self.commands.owned_by(name)]
        info["events"] = [binding.event for binding in self.events.owned_by(name)]
        info["config"] = dict(instance.plugin.config or {})
        return info

    def list_plugins(self) -> List[dict]:
        return [instance.to_dict() for instance in self.plugins.get_all()]

    def list_commands(self) -> List[dict]:
        return [cmd.to_dict() for cmd in self.commands.list()]
