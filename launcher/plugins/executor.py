"""Query executor - runs a plugin per its schema, normalizes and caches results."""

import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional

from pydantic import ValidationError

from launcher.constants import PLUGIN_CACHE_DIR
from launcher.plugins.cache import CacheConf, CacheStore
from launcher.plugins.descriptor import PluginDescriptor
from launcher.plugins.errors import ExternalToolError
from launcher.plugins.items import ResultItem, connect_items
from launcher.plugins.strategies import Plugin, create_plugin

logger = logging.getLogger(__name__)

CacheFactory = Callable[[str], CacheStore]


def default_cache_factory(cache_dir: Path = PLUGIN_CACHE_DIR) -> CacheFactory:
    """Cache factory writing one JSON file per plugin under ``cache_dir``."""

    def factory(config_name: str) -> CacheStore:
        return CacheConf(config_name=config_name, cache_dir=cache_dir)

    return factory


class QueryExecutor:
    """Executes queries against resolved plugins.

    Each plugin gets its own cache namespace named after its directory
    basename. Results are cached under the raw joined query string.
    """

    def __init__(self, cache_factory: Optional[CacheFactory] = None):
        self.cache_factory = cache_factory or default_cache_factory()
        self._caches: Dict[str, CacheStore] = {}
        self._plugins: Dict[Path, Plugin] = {}

    def attach(self, descriptor: PluginDescriptor, plugin: Plugin) -> None:
        """Use an already selected strategy for this descriptor."""
        self._plugins[descriptor.path] = plugin

    def plugin_for(self, descriptor: PluginDescriptor) -> Plugin:
        plugin = self._plugins.get(descriptor.path)
        if plugin is None:
            plugin = create_plugin(descriptor)
            self._plugins[descriptor.path] = plugin
        return plugin

    def cache_for(self, descriptor: PluginDescriptor) -> CacheStore:
        cache = self._caches.get(descriptor.name)
        if cache is None:
            cache = self.cache_factory(descriptor.name)
            self._caches[descriptor.name] = cache
        return cache

    async def query(self, plugin: PluginDescriptor, args: List[str]) -> List[ResultItem]:
        """Query for the items of the given plugin.

        Args:
            plugin: Resolved plugin descriptor
            args: Query tokens typed after the keyword

        Returns:
            Normalized result items

        Raises:
            PluginExecutionError: if a native plugin's execute hook fails.
                External-tool failures are logged and yield an empty list.
        """
        cache = self.cache_for(plugin)
        cache_key = " ".join(args)
        if cache.has(cache_key):
            cached = cache.get(cache_key) or []
            try:
                items = [ResultItem.model_validate(i) for i in cached]
                logger.debug(f"Cache hit for plugin {plugin.name}: {cache_key!r}")
                return items
            except (ValidationError, TypeError) as e:
                logger.warning(f"Discarding bad cache entry for plugin {plugin.name}: {e}")

        strategy = self.plugin_for(plugin)
        try:
            raw_items = await strategy.execute(args)
        except ExternalToolError as e:
            logger.warning(f"External tool plugin failed, returning no results: {e}")
            return []

        items = [] if raw_items is None else connect_items(raw_items, plugin)

        cache.set(cache_key, [i.model_dump(mode="json") for i in items])
        return items
