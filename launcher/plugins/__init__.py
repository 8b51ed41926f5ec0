"""Plugin system for the launcher.

Imports are lazy so that lightweight pieces (descriptors, item
normalization) can be used without importing the executor or manager.
"""

__all__ = [
    "PluginDescriptor",
    "PluginSchema",
    "PluginStub",
    "Resolution",
    "DegradationReason",
    "SchemaDetector",
    "ResultItem",
    "connect_items",
    "QueryExecutor",
    "PluginRegistry",
    "PluginManager",
    "CacheConf",
    "InMemoryCache",
]


def __getattr__(name):
    if name in ("PluginDescriptor", "PluginSchema", "PluginStub", "Resolution", "DegradationReason"):
        from launcher.plugins import descriptor
        return getattr(descriptor, name)
    if name == "SchemaDetector":
        from launcher.plugins.discovery import SchemaDetector
        return SchemaDetector
    if name in ("ResultItem", "connect_items"):
        from launcher.plugins import items
        return getattr(items, name)
    if name == "QueryExecutor":
        from launcher.plugins.executor import QueryExecutor
        return QueryExecutor
    if name == "PluginRegistry":
        from launcher.plugins.registry import PluginRegistry
        return PluginRegistry
    if name == "PluginManager":
        from launcher.plugins.manager import PluginManager
        return PluginManager
    if name in ("CacheConf", "InMemoryCache"):
        from launcher.plugins import cache
        return getattr(cache, name)
    raise AttributeError(f"module 'launcher.plugins' has no attribute {name!r}")
