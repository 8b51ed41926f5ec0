"""Tests for workflow manifest parsing."""

import plistlib

import pytest

from launcher.plugins.manifest import (
    ManifestStructureError,
    OpenURLAction,
    ScriptFilterInput,
    UnrecognizedObject,
    build_workflow_manifest,
    parse_workflow_object,
    read_workflow_manifest,
)


class TestParseWorkflowObject:
    """Tests for parse_workflow_object."""

    def test_script_filter(self):
        obj = parse_workflow_object(
            {"type": "alfred.workflow.input.scriptfilter", "config": {"keyword": "wf"}}
        )
        assert obj == ScriptFilterInput(keyword="wf")

    def test_script_filter_without_config(self):
        obj = parse_workflow_object({"type": "alfred.workflow.input.scriptfilter"})
        assert obj == ScriptFilterInput(keyword="")

    def test_open_url(self):
        assert parse_workflow_object({"type": "alfred.workflow.action.openurl"}) == OpenURLAction()

    def test_unrecognized(self):
        obj = parse_workflow_object({"type": "alfred.workflow.output.notification"})
        assert obj == UnrecognizedObject(type="alfred.workflow.output.notification")

    def test_non_dict(self):
        assert isinstance(parse_workflow_object("junk"), UnrecognizedObject)


class TestBuildWorkflowManifest:
    """Tests for build_workflow_manifest."""

    def test_keyword_and_action(self):
        manifest = build_workflow_manifest({
            "objects": [
                {"type": "alfred.workflow.output.notification"},
                {"type": "alfred.workflow.input.scriptfilter", "config": {"keyword": "k"}},
                {"type": "alfred.workflow.action.openurl"},
            ]
        })
        assert manifest.keyword == "k"
        assert manifest.action == "openurl"
        assert len(manifest.objects) == 3

    def test_no_matching_objects(self):
        manifest = build_workflow_manifest({"objects": [{"type": "other"}]})
        assert manifest.keyword == ""
        assert manifest.action == ""

    def test_last_script_filter_wins(self):
        manifest = build_workflow_manifest({
            "objects": [
                {"type": "alfred.workflow.input.scriptfilter", "config": {"keyword": "first"}},
                {"type": "alfred.workflow.input.scriptfilter", "config": {"keyword": "second"}},
            ]
        })
        assert manifest.keyword == "second"

    def test_missing_objects(self):
        with pytest.raises(ManifestStructureError):
            build_workflow_manifest({"name": "no objects"})


def test_read_binary_plist(tmp_path):
    plist_path = tmp_path / "info.plist"
    with open(plist_path, "wb") as f:
        plistlib.dump(
            {"objects": [{"type": "alfred.workflow.input.scriptfilter", "config": {"keyword": "bin"}}]},
            f,
            fmt=plistlib.FMT_BINARY,
        )
    assert read_workflow_manifest(plist_path).keyword == "bin"
