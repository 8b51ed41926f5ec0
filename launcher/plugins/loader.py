"""Native plugin loading with a process-wide module cache."""

import hashlib
import importlib.util
import logging
import re
import sys
from pathlib import Path
from types import ModuleType
from typing import Dict

from launcher.plugins.errors import PluginLoadError

logger = logging.getLogger(__name__)

PACKAGE_ENTRY = "__init__.py"

# Loaded plugin modules keyed by resolved plugin directory
_module_cache: Dict[Path, ModuleType] = {}


def module_entry(plugin_path: Path) -> Path:
    return Path(plugin_path) / PACKAGE_ENTRY


def _module_name(plugin_path: Path) -> str:
    safe = re.sub(r"\W", "_", plugin_path.name)
    digest = hashlib.sha1(str(plugin_path).encode("utf-8")).hexdigest()[:10]
    return f"launcher_plugin_{safe}_{digest}"


def load_plugin_module(plugin_path: Path) -> ModuleType:
    """Import a native plugin package, reusing an earlier import if present.

    Args:
        plugin_path: Plugin directory containing ``__init__.py``

    Returns:
        The loaded module

    Raises:
        PluginLoadError: if the package is missing or fails to import
    """
    plugin_path = Path(plugin_path).resolve()
    cached = _module_cache.get(plugin_path)
    if cached is not None:
        return cached

    entry = module_entry(plugin_path)
    if not entry.is_file():
        raise PluginLoadError(plugin_path.name, f"no {PACKAGE_ENTRY} in {plugin_path}")

    module_name = _module_name(plugin_path)
    spec = importlib.util.spec_from_file_location(
        module_name,
        entry,
        submodule_search_locations=[str(plugin_path)],
    )
    if spec is None or spec.loader is None:
        raise PluginLoadError(plugin_path.name, f"cannot build import spec for {entry}")

    module = importlib.util.module_from_spec(spec)
    # Registered before exec so the package can import its own submodules
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        sys.modules.pop(module_name, None)
        raise PluginLoadError(plugin_path.name, f"import failed: {e}") from e

    _module_cache[plugin_path] = module
    logger.info(f"Loaded native plugin module: {plugin_path.name}")
    return module


def unload_plugin_module(plugin_path: Path) -> None:
    """Drop a plugin from the module cache (next load re-imports it)."""
    plugin_path = Path(plugin_path).resolve()
    module = _module_cache.pop(plugin_path, None)
    if module is not None:
        sys.modules.pop(module.__name__, None)


def clear_module_cache() -> None:
    for path in list(_module_cache):
        unload_plugin_module(path)
