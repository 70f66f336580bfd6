"""Plugin system exceptions."""


class PluginError(Exception):
    """Base class for plugin system errors."""


class PluginNotFoundError(PluginError):
    """A plugin source file or an active plugin name does not exist."""


class InvalidPluginError(PluginError):
    """A loaded unit does not satisfy the plugin contract."""


class PluginHookError(PluginError):
    """A plugin's initialize/cleanup/update_config hook raised."""

    def __init__(self, plugin_name: str, hook: str, cause: BaseException):
        super().__init__(f"Plugin '{plugin_name}' {hook}() failed: {cause}")
        self.plugin_name = plugin_name
        self.hook = hook
        self.cause = cause
