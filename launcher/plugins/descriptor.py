"""Plugin descriptors - resolved, immutable metadata for one plugin."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, TYPE_CHECKING

from pydantic import ValidationError

from launcher.constants import PACKAGE_FILE, THEME_KEYWORD
from launcher.plugins.manifest import PackageManifest

if TYPE_CHECKING:
    from launcher.plugins.strategies import Plugin

logger = logging.getLogger(__name__)


class PluginSchema(str, Enum):
    """Execution strategy of a plugin."""

    NATIVE = "native"
    EXTERNAL_TOOL = "external-tool"


class DegradationReason(str, Enum):
    """Why resolution fell back to a default instead of the plugin's own data."""

    MANIFEST_UNREADABLE = "manifest_unreadable"
    MANIFEST_MALFORMED = "manifest_malformed"
    MANIFEST_INCOMPLETE = "manifest_incomplete"
    MODULE_MISSING = "module_missing"
    MODULE_LOAD_FAILED = "module_load_failed"
    PACKAGE_UNREADABLE = "package_unreadable"


@dataclass(frozen=True)
class PluginStub:
    """A plugin directory before its schema is known."""

    path: Path
    name: str
    is_core: bool

    @classmethod
    def from_path(cls, path: Path, user_plugins_dir: Path) -> "PluginStub":
        path = Path(path).resolve()
        return cls(
            path=path,
            name=path.name,
            is_core=is_core_plugin(path, user_plugins_dir),
        )


@dataclass(frozen=True)
class PluginDescriptor:
    """Fully resolved plugin. The path is the identity key."""

    path: Path
    name: str
    is_core: bool
    schema: PluginSchema
    action: str = ""
    keyword: str = ""

    def to_dict(self) -> dict:
        """Serialize descriptor to dict for API responses."""
        return {
            "path": str(self.path),
            "name": self.name,
            "is_core": self.is_core,
            "schema": self.schema.value,
            "action": self.action,
            "keyword": self.keyword,
        }


@dataclass(frozen=True)
class Resolution:
    """Outcome of schema detection for one plugin.

    ``degradation`` is set when the descriptor was produced from defaults
    rather than from the plugin's manifest or module.
    """

    descriptor: PluginDescriptor
    plugin: Optional["Plugin"] = None
    degradation: Optional[DegradationReason] = None
    detail: str = ""

    @property
    def degraded(self) -> bool:
        return self.degradation is not None


@dataclass(frozen=True)
class ThemeCheck:
    is_theme: bool
    degradation: Optional[DegradationReason] = None
    detail: str = ""


def check_theme(directory: Path) -> ThemeCheck:
    """Classify a plugin directory as a theme from its package keywords.

    A package without a ``keywords`` list, or whose keywords contain the
    theme marker, is a theme. An unreadable or invalid package file yields
    ``is_theme=False`` with a degradation reason, so read errors surface as
    "not a theme" and the directory is still loaded as a plugin.
    """
    package_file = Path(directory) / PACKAGE_FILE
    try:
        with open(package_file, "r", encoding="utf-8") as f:
            manifest = PackageManifest(**json.load(f))
    except (OSError, json.JSONDecodeError, ValidationError, TypeError) as e:
        return ThemeCheck(
            is_theme=False,
            degradation=DegradationReason.PACKAGE_UNREADABLE,
            detail=str(e),
        )

    if manifest.keywords is None or THEME_KEYWORD in manifest.keywords:
        return ThemeCheck(is_theme=True)
    return ThemeCheck(is_theme=False)


def is_theme(directory: Path) -> bool:
    """Check if the plugin directory is a theme."""
    result = check_theme(directory)
    if result.degradation:
        logger.debug(
            f"Treating {directory} as a plugin, package metadata unreadable "
            f"({result.degradation.value}): {result.detail}"
        )
    return result.is_theme


def is_core_plugin(directory: Path, user_plugins_dir: Path) -> bool:
    """True unless the plugin lives directly under the user plugin root."""
    parent = Path(directory).resolve().parent
    return parent != Path(user_plugins_dir).expanduser().resolve()
