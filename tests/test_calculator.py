"""Tests for the bundled calculator plugin."""

import asyncio
import time

from launcher.constants import CORE_PLUGINS_DIR
from launcher.plugins.cache import InMemoryCache
from launcher.plugins.executor import QueryExecutor
from launcher.plugins.loader import load_plugin_module
from launcher.plugins.manager import PluginManager


def _calculator():
    return load_plugin_module(CORE_PLUGINS_DIR / "calculator")


class TestExecute:
    """Tests for the calculator execute hook."""

    def test_arithmetic(self):
        result = _calculator().execute("2 ** 10 + 1")
        assert result["items"][0]["title"] == "1025"

    def test_blank_query_returns_none(self):
        assert _calculator().execute("   ") is None

    def test_division_by_zero_is_empty(self):
        assert _calculator().execute("1 / 0") == {"items": []}

    def test_names_rejected(self):
        assert _calculator().execute("__import__('os')") == {"items": []}

    def test_huge_power_rejected_quickly(self):
        started = time.monotonic()
        assert _calculator().execute("9**9**7") == {"items": []}
        assert time.monotonic() - started < 1

    def test_power_at_limit_allowed(self):
        calculator = _calculator()
        result = calculator.execute(f"2 ** {calculator.MAX_POWER_BITS // 2}")
        assert result["items"][0]["title"] == str(2 ** (calculator.MAX_POWER_BITS // 2))

    def test_float_power_unaffected(self):
        assert _calculator().execute("2 ** 0.5")["items"][0]["title"] == str(2 ** 0.5)


def test_huge_power_through_manager(tmp_path):
    manager = PluginManager(
        core_dir=CORE_PLUGINS_DIR,
        user_dir=tmp_path / "user",
        executor=QueryExecutor(cache_factory=InMemoryCache),
    )
    asyncio.run(manager.load_all())
    response = asyncio.run(manager.search("= 9**9**9"))
    by_plugin = {r.plugin: r for r in response.results}
    assert by_plugin["calculator"].error is None
    assert by_plugin["calculator"].items == []
