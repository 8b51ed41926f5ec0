"""Dependency injection container for services."""

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

# ============================================================================
# Global service instances (Singleton pattern, but exposed via functions for easier testing/mocking)
# ============================================================================

_plugin_manager_instance = None


def get_plugin_manager():
    """Get plugin manager (singleton)."""
    global _plugin_manager_instance
    if _plugin_manager_instance is None:
        from launcher.constants import CORE_PLUGINS_DIR, PLUGIN_CACHE_DIR, USER_PLUGINS_DIR
        from launcher.plugins.executor import QueryExecutor, default_cache_factory
        from launcher.plugins.manager import PluginManager

        # Parse extra plugin paths from environment
        extra_paths = None
        plugin_paths_env = os.getenv("PLUGIN_PATHS", "")
        if plugin_paths_env:
            extra_paths = [Path(p.strip()) for p in plugin_paths_env.split(":") if p.strip()]

        _plugin_manager_instance = PluginManager(
            core_dir=CORE_PLUGINS_DIR,
            user_dir=USER_PLUGINS_DIR,
            extra_paths=extra_paths,
            executor=QueryExecutor(cache_factory=default_cache_factory(PLUGIN_CACHE_DIR)),
        )
        logger.info("Created PluginManager instance")
    return _plugin_manager_instance


# Test utility function (for unit testing - resets all singletons)
def reset_services():
    """Reset all service instances (only for testing)."""
    global _plugin_manager_instance

    _plugin_manager_instance = None
    logger.info("Reset all service instances")
