"""Plugin manifests - package metadata and external-tool workflow manifests."""
from __future__ import annotations

import logging
import plistlib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

SCRIPT_FILTER_TYPE = "alfred.workflow.input.scriptfilter"
OPEN_URL_TYPE = "alfred.workflow.action.openurl"

# Action assigned to plugins whose workflow opens URLs
OPEN_URL_ACTION = "openurl"


class PackageManifest(BaseModel):
    """Package metadata loaded from plugin.json."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(default="", description="Package name")
    version: str = Field(default="", description="Package version")
    description: str = Field(default="", description="Package description")
    keywords: Optional[List[str]] = Field(
        default=None,
        description="Classification keywords, e.g. the theme marker",
    )


@dataclass(frozen=True)
class ScriptFilterInput:
    """Input object that maps a trigger keyword to the workflow."""

    keyword: str


@dataclass(frozen=True)
class OpenURLAction:
    """Action object that opens the selected item's URL."""


@dataclass(frozen=True)
class UnrecognizedObject:
    """Any workflow object this runtime does not consume."""

    type: str


WorkflowObject = Union[ScriptFilterInput, OpenURLAction, UnrecognizedObject]


@dataclass(frozen=True)
class WorkflowManifest:
    """Invocation contract extracted from an info.plist."""

    objects: tuple
    keyword: str = ""
    action: str = ""


class ManifestStructureError(ValueError):
    """The plist parsed but is not shaped like a workflow manifest."""


def parse_workflow_object(raw: Any) -> WorkflowObject:
    """Turn one raw plist dict into its typed variant."""
    if not isinstance(raw, dict):
        return UnrecognizedObject(type="")

    object_type = str(raw.get("type", ""))
    if object_type == SCRIPT_FILTER_TYPE:
        config = raw.get("config")
        keyword = config.get("keyword", "") if isinstance(config, dict) else ""
        return ScriptFilterInput(keyword=str(keyword or ""))
    if object_type == OPEN_URL_TYPE:
        return OpenURLAction()
    return UnrecognizedObject(type=object_type)


def build_workflow_manifest(data: Any) -> WorkflowManifest:
    """Scan parsed plist data for the keyword and default action.

    Raises:
        ManifestStructureError: if there is no ``objects`` array. The caller
            still treats the plugin as external-tool with empty keyword/action.
    """
    if not isinstance(data, dict) or not isinstance(data.get("objects"), list):
        raise ManifestStructureError("missing 'objects' array")

    objects = tuple(parse_workflow_object(o) for o in data["objects"])
    keyword = ""
    action = ""
    for obj in objects:
        if isinstance(obj, ScriptFilterInput):
            keyword = obj.keyword
        elif isinstance(obj, OpenURLAction):
            action = OPEN_URL_ACTION
        elif isinstance(obj, UnrecognizedObject):
            continue
        else:
            raise TypeError(f"Unhandled workflow object: {obj!r}")

    return WorkflowManifest(objects=objects, keyword=keyword, action=action)


def read_workflow_manifest(plist_path: Path) -> WorkflowManifest:
    """Read and parse an info.plist file.

    Raises:
        OSError: if the file cannot be read
        plistlib.InvalidFileException: if the file is not a property list
        ManifestStructureError: if the plist lacks an ``objects`` array
    """
    with open(plist_path, "rb") as f:
        data = plistlib.load(f)
    return build_workflow_manifest(data)
