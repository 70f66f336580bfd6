"""Plugin system for mentat.

Imports are lazy so lightweight pieces (e.g. PluginDiscovery, used by the
operator CLI) do not pull in the chat client.
"""

__all__ = [
    "BasePlugin",
    "Command",
    "EventListener",
    "PluginManifest",
    "CommandRegistry",
    "CommandDescriptor",
    "EventRegistry",
    "EventBinding",
    "PluginRegistry",
    "PluginInstance",
    "PluginState",
    "PluginDiscovery",
    "PluginLifecycle",
    "PluginManager",
    "PluginError",
    "PluginNotFoundError",
    "InvalidPluginError",
    "PluginHookError",
]


def __getattr__(name):
    if name in ("BasePlugin", "Command", "EventListener"):
        from mentat.plugins import base
        return getattr(base, name)
    if name == "PluginManifest":
        from mentat.plugins.manifest import PluginManifest
        return PluginManifest
    if name in ("CommandRegistry", "CommandDescriptor"):
        from mentat.plugins import commands
        return getattr(commands, name)
    if name in ("EventRegistry", "EventBinding"):
        from mentat.plugins import events
        return getattr(events, name)
    if name in ("PluginRegistry", "PluginInstance", "PluginState"):
        from mentat.plugins import registry
        return getattr(registry, name)
    if name == "PluginDiscovery":
        from mentat.plugins.discovery import PluginDiscovery
        return PluginDiscovery
    if name == "PluginLifecycle":
        from mentat.plugins.lifecycle import PluginLifecycle
        return PluginLifecycle
    if name == "PluginManager":
        from mentat.plugins.manager import PluginManager
        return PluginManager
    if name in ("PluginError", "PluginNotFoundError", "InvalidPluginError", "PluginHookError"):
        from mentat.plugins import errors
        return getattr(errors, name)
    raise AttributeError(f"module 'mentat.plugins' has no attribute {name!r}")
