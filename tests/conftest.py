"""Shared fixtures for plugin runtime tests."""

import json
import plistlib
import textwrap
from pathlib import Path

import pytest

from launcher.dependencies import reset_services
from launcher.plugins.loader import clear_module_cache


@pytest.fixture(autouse=True)
def _isolate_plugin_state():
    clear_module_cache()
    reset_services()
    yield
    clear_module_cache()
    reset_services()


def write_native_plugin(directory: Path, source: str, package: dict = None) -> Path:
    """Create a native plugin package with the given ``__init__.py`` source."""
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "__init__.py").write_text(textwrap.dedent(source), encoding="utf-8")
    if package is not None:
        (directory / "plugin.json").write_text(json.dumps(package), encoding="utf-8")
    return directory


def write_external_plugin(directory: Path, objects: list, main_source: str = "") -> Path:
    """Create an external-tool plugin with an info.plist and a ``__main__.py``."""
    directory.mkdir(parents=True, exist_ok=True)
    with open(directory / "info.plist", "wb") as f:
        plistlib.dump({"name": directory.name, "objects": objects}, f)
    (directory / "__main__.py").write_text(textwrap.dedent(main_source), encoding="utf-8")
    return directory


def script_filter(keyword: str) -> dict:
    return {"type": "alfred.workflow.input.scriptfilter", "config": {"keyword": keyword}}


def open_url() -> dict:
    return {"type": "alfred.workflow.action.openurl", "config": {"url": "{query}"}}
