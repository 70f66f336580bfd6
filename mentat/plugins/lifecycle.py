"""Plugin lifecycle management - module loading, validation and hooks."""
from __future__ import annotations

import importlib
import importlib.util
import inspect
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Tuple

from pydantic import ValidationError

from mentat.plugins.base import BasePlugin, Command, EventListener
from mentat.plugins.errors import InvalidPluginError, PluginHookError
from mentat.plugins.manifest import PluginManifest

if TYPE_CHECKING:
    from mentat.core.framework import BotFramework

logger = logging.getLogger(__name__)

ENTRY_POINT = "register"
# discord.py only dispatches extra listeners registered under on_<event> names
EVENT_PREFIX = "on_"


class PluginLifecycle:
    """Builds plugin instances from source files and runs their hooks."""

    @staticmethod
    def module_name_for(path: Path) -> str:
        return f"mentat_plugin_{path.stem}"

    def load(self, path: Path, framework: BotFramework | None) -> Tuple[BasePlugin, str]:
        """Import a plugin file fresh and construct its plugin instance.

        Any module previously imported from the same file is evicted first,
        so edits on disk take effect on re-load.

        Args:
            path: Resolved plugin file
            framework: Framework passed to the module's ``register()``

        Returns:
            (plugin instance, module name)

        Raises:
            InvalidPluginError: the file cannot be imported, has no
                ``register()``, or the instance breaks the plugin contract
        """
        module_name = self.module_name_for(path)
        self.evict(module_name)
        self._discard_bytecode(path)
        importlib.invalidate_caches()

        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            raise InvalidPluginError(f"Cannot import plugin file {path}")

        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except Exception as e:
            self.evict(module_name)
            raise InvalidPluginError(f"Error importing {path.name}: {e}") from e

        register_func = getattr(module, ENTRY_POINT, None)
        if not callable(register_func):
            self.evict(module_name)
            raise InvalidPluginError(f"{path.name} has no callable '{ENTRY_POINT}(framework)'")

        try:
            plugin = register_func(framework)
        except Exception as e:
            self.evict(module_name)
            raise InvalidPluginError(f"{path.name}: {ENTRY_POINT}() failed: {e}") from e

        try:
            self.validate(plugin)
        except InvalidPluginError:
            self.evict(module_name)
            raise

        logger.debug(f"Constructed plugin '{plugin.name}' from {path}")
        return plugin, module_name

    def validate(self, plugin: Any) -> PluginManifest:
        """Check a constructed object against the plugin contract.

        Raises:
            InvalidPluginError: on the first violation found
        """
        if not isinstance(plugin, BasePlugin):
            raise InvalidPluginError(
                f"register() must return a BasePlugin, got {type(plugin).__name__}"
            )

        try:
            manifest = PluginManifest(
                name=getattr(plugin, "name", None),
                version=getattr(plugin, "version", None),
                description=getattr(plugin, "description", None) or "",
            )
        except ValidationError as e:
            raise InvalidPluginError(f"Plugin must have name and version properties: {e}") from e

        for command in plugin.commands or []:
            if not isinstance(command, Command):
                raise InvalidPluginError(f"Plugin '{manifest.name}': commands must be Command objects")
            if not isinstance(command.name, str) or not command.name.strip():
                raise InvalidPluginError(f"Plugin '{manifest.name}': command without a name")
            if not callable(command.execute):
                raise InvalidPluginError(
                    f"Plugin '{manifest.name}': command '{command.name}' has no callable execute"
                )

        for listener in plugin.events or []:
            if not isinstance(listener, EventListener):
                raise InvalidPluginError(f"Plugin '{manifest.name}': events must be EventListener objects")
            if not isinstance(listener.name, str) or not listener.name.strip():
                raise InvalidPluginError(f"Plugin '{manifest.name}': event listener without a name")
            if not listener.name.startswith(EVENT_PREFIX):
                raise InvalidPluginError(
                    f"Plugin '{manifest.name}': event name '{listener.name}' must start with '{EVENT_PREFIX}'"
                )
            if not inspect.iscoroutinefunction(listener.handler):
                raise InvalidPluginError(
                    f"Plugin '{manifest.name}': listener for '{listener.name}' must be a coroutine function"
                )

        return manifest

    def evict(self, module_name: str) -> None:
        """Drop a cached plugin module."""
        if sys.modules.pop(module_name, None) is not None:
            logger.debug(f"Evicted module cache: {module_name}")

    def _discard_bytecode(self, path: Path) -> None:
        # The .pyc is keyed on whole-second mtime and size; an edit within the
        # same second could otherwise be served from the stale cache.
        try:
            Path(importlib.util.cache_from_source(str(path))).unlink(missing_ok=True)
        except (OSError, NotImplementedError) as e:
            logger.debug(f"Could not discard bytecode for {path}: {e}")

    async def initialize(self, plugin: BasePlugin) -> None:
        """Run ``initialize()``.

        Raises:
            PluginHookError: wrapping whatever the hook raised
        """
        await self._run_hook(plugin, "initialize")

    async def cleanup(self, plugin: BasePlugin) -> None:
        """Run ``cleanup()``.

        Raises:
            PluginHookError: wrapping whatever the hook raised
        """
        await self._run_hook(plugin, "cleanup")

    async def update_config(self, plugin: BasePlugin, config: Dict[str, Any]) -> None:
        await self._run_hook(plugin, "update_config", config)

    async def _run_hook(self, plugin: BasePlugin, hook: str, *args: Any) -> None:
        func = getattr(plugin, hook, None)
        if func is None:
            return
        try:
            result = func(*args)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            raise PluginHookError(plugin.name, hook, e) from e
