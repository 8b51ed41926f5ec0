"""Global constants for the launcher plugin runtime."""

import os
import sys
from pathlib import Path

# Directory paths
LAUNCHER_ROOT = Path(__file__).resolve().parent.parent

# Plugins bundled with the launcher (is_core=True)
CORE_PLUGINS_DIR = Path(os.getenv("CORE_PLUGINS_DIR", str(LAUNCHER_ROOT / "plugins" / "core")))

# Plugins installed by the user (is_core=False)
USER_PLUGINS_DIR = Path(
    os.getenv("USER_PLUGINS_DIR", str(Path.home() / ".dext" / "plugins"))
).expanduser()

# Per-plugin result caches, one JSON file per plugin basename
PLUGIN_CACHE_DIR = Path(
    os.getenv("PLUGIN_CACHE_DIR", str(Path.home() / ".dext" / "cache"))
).expanduser()

# Seconds an external-tool plugin may run before it is killed
PLUGIN_QUERY_TIMEOUT = float(os.getenv("PLUGIN_QUERY_TIMEOUT", "10"))

# Upper bound on buffered stdout of an external-tool plugin
PLUGIN_MAX_OUTPUT_BYTES = int(os.getenv("PLUGIN_MAX_OUTPUT_BYTES", str(4 * 1024 * 1024)))

# Interpreter used to run external-tool plugins (`python <plugin dir>`)
PLUGIN_PYTHON = os.getenv("PLUGIN_PYTHON", sys.executable)

# Package metadata keyword that marks a plugin directory as a theme
THEME_KEYWORD = os.getenv("THEME_KEYWORD", "dext-theme")

# File names inside a plugin directory
PACKAGE_FILE = "plugin.json"
WORKFLOW_MANIFEST_FILE = "info.plist"
