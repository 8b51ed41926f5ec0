"""Tests for result item normalization."""

import copy
import os
from pathlib import Path

from launcher.plugins.descriptor import PluginDescriptor, PluginSchema
from launcher.plugins.items import ResultItem, connect_items, is_url


def _plugin(path="/plugins/foo", keyword="", action=""):
    return PluginDescriptor(
        path=Path(path),
        name=Path(path).name,
        is_core=True,
        schema=PluginSchema.NATIVE,
        action=action,
        keyword=keyword,
    )


class TestConnectItems:
    """Tests for connect_items."""

    def test_length_and_order_preserved(self):
        raw = [{"title": str(i)} for i in range(5)]
        items = connect_items(raw, _plugin())
        assert len(items) == len(raw)
        assert [i.title for i in items] == ["0", "1", "2", "3", "4"]

    def test_relative_icon_resolved_against_plugin(self, tmp_path):
        items = connect_items([{"icon": {"path": "icon.png"}}], _plugin(tmp_path / "foo"))
        assert items[0].icon.path == os.path.join(str(tmp_path / "foo"), "icon.png")

    def test_relative_icon_posix_path(self):
        items = connect_items([{"icon": {"path": "icon.png"}}], _plugin("/plugins/foo"))
        assert items[0].icon.path == os.path.normpath("/plugins/foo/icon.png")

    def test_icon_symlink_not_followed(self, tmp_path):
        """A symlinked icon keeps its path inside the plugin directory."""
        plugin_dir = tmp_path / "foo"
        plugin_dir.mkdir()
        (tmp_path / "shared.png").write_bytes(b"")
        (plugin_dir / "icon.png").symlink_to(tmp_path / "shared.png")
        items = connect_items([{"icon": {"path": "icon.png"}}], _plugin(plugin_dir))
        assert items[0].icon.path == os.path.join(str(plugin_dir), "icon.png")

    def test_dot_segments_normalized(self):
        items = connect_items([{"icon": {"path": "./img/../icon.png"}}], _plugin("/plugins/foo"))
        assert items[0].icon.path == os.path.normpath("/plugins/foo/icon.png")

    def test_null_and_numeric_fields_pass_through(self):
        raw = [
            {"title": "A"},
            {"title": "B", "subtitle": None},
            {"title": 3, "subtitle": 4.5, "icon": {"path": None}},
        ]
        items = connect_items(raw, _plugin())
        assert len(items) == 3
        assert items[1].subtitle is None
        assert items[2].title == 3
        assert items[2].subtitle == 4.5
        assert items[2].icon.path == ""

    def test_null_keyword_kept_when_plugin_has_none(self):
        items = connect_items([{"keyword": None, "action": 1}], _plugin())
        assert items[0].keyword is None
        assert items[0].action == 1

    def test_url_icon_unchanged(self):
        items = connect_items([{"icon": {"path": "https://x/y.png"}}], _plugin())
        assert items[0].icon.path == "https://x/y.png"

    def test_absent_icon_is_empty(self):
        items = connect_items([{"title": "no icon"}], _plugin())
        assert items[0].icon.path == ""

    def test_keyword_not_set_when_plugin_has_none(self):
        items = connect_items([{}], _plugin(keyword=""))
        assert items[0].keyword is None

    def test_keyword_inherited_from_plugin(self):
        items = connect_items([{}], _plugin(keyword="k"))
        assert items[0].keyword == "k"

    def test_plugin_keyword_overrides_item(self):
        items = connect_items([{"keyword": "mine", "action": "mine"}], _plugin(keyword="k", action="openurl"))
        assert items[0].keyword == "k"
        assert items[0].action == "openurl"

    def test_item_action_kept_when_plugin_has_none(self):
        items = connect_items([{"action": "copy"}], _plugin(action=""))
        assert items[0].action == "copy"

    def test_extra_fields_pass_through(self):
        items = connect_items([{"title": "A", "arg": "https://a", "uid": 7}], _plugin())
        dumped = items[0].model_dump()
        assert dumped["arg"] == "https://a"
        assert dumped["uid"] == 7

    def test_inputs_not_mutated(self):
        raw = [{"title": "A", "icon": {"path": "icon.png"}}]
        snapshot = copy.deepcopy(raw)
        connect_items(raw, _plugin(keyword="k", action="openurl"))
        assert raw == snapshot

    def test_non_object_item_becomes_empty(self):
        items = connect_items(["junk", {"title": "B"}], _plugin())
        assert len(items) == 2
        assert items[0].title == ""
        assert items[1].title == "B"

    def test_returns_result_items(self):
        assert all(isinstance(i, ResultItem) for i in connect_items([{}, {}], _plugin()))


class TestIsUrl:
    """Tests for is_url."""

    def test_urls(self):
        assert is_url("https://example.com/icon.png")
        assert is_url("file://host/icon.png")

    def test_not_urls(self):
        assert not is_url("icon.png")
        assert not is_url("/abs/icon.png")
        assert not is_url("C:\\icons\\icon.png")
        assert not is_url("https:/missing-host")
