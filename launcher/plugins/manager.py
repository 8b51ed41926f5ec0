"""Plugin manager - top-level orchestrator for discovery and query fan-out."""

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from launcher.plugins.descriptor import PluginDescriptor, PluginStub, is_theme
from launcher.plugins.discovery import SchemaDetector, load_plugins_in_path
from launcher.plugins.errors import PluginError
from launcher.plugins.executor import QueryExecutor
from launcher.plugins.items import ResultItem
from launcher.plugins.registry import PluginEntry, PluginRegistry

logger = logging.getLogger(__name__)


@dataclass
class PluginResults:
    """Results of one plugin for one query."""

    plugin: str
    items: List[ResultItem] = field(default_factory=list)
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "plugin": self.plugin,
            "items": [i.model_dump(mode="json") for i in self.items],
            "error": self.error,
        }


@dataclass
class SearchResponse:
    """Aggregated results for one keystroke.

    ``query`` echoes the tokens that started the search so callers can drop
    responses that arrive after the user kept typing.
    """

    query: List[str]
    results: List[PluginResults] = field(default_factory=list)

    @property
    def items(self) -> List[ResultItem]:
        return [item for r in self.results for item in r.items]

    def to_dict(self) -> dict:
        return {
            "query": self.query,
            "results": [r.to_dict() for r in self.results],
        }


def tokenize(text: str) -> List[str]:
    """Split the typed text into query tokens."""
    return text.split()


class PluginManager:
    """Top-level plugin system orchestrator.

    Coordinates discovery, schema detection, keyword dispatch and the
    per-plugin failure boundary around query execution.
    """

    def __init__(
        self,
        core_dir: Path,
        user_dir: Path,
        extra_paths: Optional[List[Path]] = None,
        executor: Optional[QueryExecutor] = None,
        detector: Optional[SchemaDetector] = None,
    ):
        self.core_dir = Path(core_dir)
        self.user_dir = Path(user_dir).expanduser()

        self.registry = PluginRegistry()
        self.executor = executor or QueryExecutor()
        self.detector = detector or SchemaDetector()
        self.themes: List[Path] = []

        self.search_paths = [self.core_dir, self.user_dir]
        # Add extra paths from PLUGIN_PATHS env var
        if extra_paths:
            self.search_paths.extend(Path(p) for p in extra_paths)

    async def load_all(self) -> List[PluginDescriptor]:
        """Discover and resolve every plugin in the search paths.

        Returns:
            Descriptors of all registered plugins
        """
        self.registry.clear()
        self.themes = []

        stubs = []
        for search_path in self.search_paths:
            for plugin_path in load_plugins_in_path(search_path):
                if is_theme(plugin_path):
                    logger.info(f"Skipping theme: {plugin_path.name}")
                    self.themes.append(plugin_path)
                    continue
                stubs.append(PluginStub.from_path(plugin_path, self.user_dir))

        resolutions = await asyncio.gather(*(self.detector.resolve(s) for s in stubs))
        for resolution in resolutions:
            self.registry.register(resolution)
            if resolution.plugin is not None:
                self.executor.attach(resolution.descriptor, resolution.plugin)

        degraded = [r for r in resolutions if r.degraded]
        logger.info(
            f"Plugin system initialized, {self.registry.count()} plugin(s), "
            f"{len(self.themes)} theme(s), {len(degraded)} degraded"
        )
        return [entry.descriptor for entry in self.registry.get_all()]

    def select(self, tokens: List[str]) -> tuple:
        """Pick the plugins for a tokenized query.

        Returns:
            (entries, args) - keyword plugins with the remaining tokens when
            the first token is a keyword, otherwise the fallback plugins with
            all tokens
        """
        if tokens:
            triggered = self.registry.get_by_keyword(tokens[0])
            if triggered:
                return triggered, tokens[1:]
        return self.registry.get_fallback(), list(tokens)

    async def search(self, text: str) -> SearchResponse:
        """Run the typed text against every matching plugin concurrently."""
        tokens = tokenize(text)
        entries, args = self.select(tokens)
        results = await asyncio.gather(*(self._run(entry, args) for entry in entries))
        return SearchResponse(query=tokens, results=list(results))

    async def query_plugin(self, name: str, args: List[str]) -> Optional[PluginResults]:
        """Query a single plugin by directory name.

        Returns:
            PluginResults, or None if no such plugin is registered
        """
        entry = self.registry.get_by_name(name)
        if not entry:
            logger.error(f"Plugin not found: {name}")
            return None
        return await self._run(entry, args)

    async def _run(self, entry: PluginEntry, args: List[str]) -> PluginResults:
        try:
            items = await self.executor.query(entry.descriptor, args)
        except PluginError as e:
            logger.error(f"Plugin {entry.name} failed: {e}")
            return PluginResults(plugin=entry.name, error=str(e))
        except Exception as e:
            logger.exception(f"Unexpected error in plugin {entry.name}")
            return PluginResults(plugin=entry.name, error=f"{entry.name}: {e}")
        return PluginResults(plugin=entry.name, items=items)

    def get_plugin_info(self, name: str) -> Optional[dict]:
        """Get plugin information as dict."""
        entry = self.registry.get_by_name(name)
        if not entry:
            return None
        return entry.to_dict()

    def list_plugins(self) -> List[dict]:
        """List all plugins as dicts."""
        return [p.to_dict() for p in self.registry.get_all()]

    def list_themes(self) -> List[dict]:
        return [{"name": p.name, "path": str(p)} for p in self.themes]
