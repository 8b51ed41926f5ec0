"""Tests for the per-plugin cache stores."""

import json

from launcher.plugins.cache import CacheConf, InMemoryCache


class TestCacheConf:
    """Tests for the JSON file cache."""

    def test_set_persists_to_file(self, tmp_path):
        cache = CacheConf("weather", tmp_path)
        cache.set("london", [{"title": "London"}])

        with open(tmp_path / "weather.json", encoding="utf-8") as f:
            assert json.load(f) == {"london": [{"title": "London"}]}

        reopened = CacheConf("weather", tmp_path)
        assert reopened.has("london")
        assert reopened.get("london") == [{"title": "London"}]

    def test_empty_list_is_a_hit(self, tmp_path):
        cache = CacheConf("weather", tmp_path)
        cache.set("", [])
        assert cache.has("")
        assert cache.get("") == []
        assert not cache.has("other")
        assert cache.get("other") is None

    def test_corrupt_file_starts_empty(self, tmp_path):
        (tmp_path / "weather.json").write_text("{broken", encoding="utf-8")
        cache = CacheConf("weather", tmp_path)
        assert not cache.has("london")
        cache.set("london", [])
        assert CacheConf("weather", tmp_path).has("london")

    def test_creates_cache_dir(self, tmp_path):
        cache = CacheConf("weather", tmp_path / "nested" / "cache")
        cache.set("q", [])
        assert (tmp_path / "nested" / "cache" / "weather.json").exists()

    def test_clear(self, tmp_path):
        cache = CacheConf("weather", tmp_path)
        cache.set("q", [])
        cache.clear()
        assert not CacheConf("weather", tmp_path).has("q")


def test_in_memory_cache():
    cache = InMemoryCache("calc")
    assert not cache.has("1+1")
    cache.set("1+1", [])
    assert cache.has("1+1")
    assert cache.get("1+1") == []
