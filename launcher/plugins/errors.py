"""Exceptions raised inside the plugin runtime."""


class PluginError(Exception):
    """Base class for plugin runtime errors."""

    def __init__(self, plugin: str, message: str):
        super().__init__(f"{plugin}: {message}")
        self.plugin = plugin


class PluginLoadError(PluginError):
    """A native plugin package could not be imported."""


class ExternalToolError(PluginError):
    """An external-tool child process failed or produced unusable output."""


class PluginExecutionError(PluginError):
    """A native plugin's execute hook raised or rejected."""
