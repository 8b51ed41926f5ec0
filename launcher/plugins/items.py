"""Result items - normalizes raw plugin output into a uniform shape for the UI."""

import copy
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Iterable, List
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator

from launcher.plugins.descriptor import PluginDescriptor

logger = logging.getLogger(__name__)


class Icon(BaseModel):
    """Item icon, either an absolute file path or a remote URL."""

    model_config = ConfigDict(extra="allow")

    path: str = ""

    @field_validator("path", mode="before")
    @classmethod
    def _coerce_path(cls, value: Any) -> str:
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)


class ResultItem(BaseModel):
    """One normalized, displayable result entry.

    Values are kept exactly as the plugin emitted them (``null`` and numbers
    included); only the icon path is coerced to a string.
    """

    model_config = ConfigDict(extra="allow")

    title: Any = ""
    subtitle: Any = ""
    icon: Icon = Field(default_factory=Icon)
    keyword: Any = None
    action: Any = None


def is_url(value: str) -> bool:
    """True for well-formed absolute URLs such as ``https://host/icon.png``."""
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return bool(parsed.scheme and parsed.netloc)


def _resolve_icon_path(icon_path: str, plugin_path: Path) -> str:
    if is_url(icon_path):
        return icon_path
    # String join only; symlinks inside the plugin are not followed
    return os.path.normpath(os.path.join(str(plugin_path), icon_path))


def connect_items(items: Iterable[Any], plugin: PluginDescriptor) -> List[ResultItem]:
    """Connect raw result items with the plugin that produced them.

    Icon paths that are not URLs are resolved against the plugin directory,
    and the plugin's keyword and action replace the item's when the plugin
    declares them. Inputs are not modified; output order matches input order.

    Args:
        items: Raw items as emitted by the plugin
        plugin: Descriptor of the producing plugin

    Returns:
        List of normalized ResultItem objects, one per input item
    """
    connected = []
    for raw in items:
        if isinstance(raw, Mapping):
            data = copy.deepcopy(dict(raw))
        else:
            logger.debug(f"Plugin {plugin.name} emitted non-object item {raw!r}, using empty item")
            data = {}

        icon = data.get("icon")
        if isinstance(icon, Mapping):
            icon = dict(icon)
            if icon.get("path"):
                icon["path"] = _resolve_icon_path(str(icon["path"]), plugin.path)
            data["icon"] = icon
        else:
            data["icon"] = {"path": ""}

        if plugin.keyword:
            data["keyword"] = plugin.keyword
        if plugin.action:
            data["action"] = plugin.action

        connected.append(ResultItem.model_validate(data))
    return connected
