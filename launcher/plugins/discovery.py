"""Plugin discovery - lists plugin directories and detects their schema."""

import asyncio
import logging
import os
from pathlib import Path
from typing import List

from launcher.constants import WORKFLOW_MANIFEST_FILE
from launcher.plugins.descriptor import (
    DegradationReason,
    PluginDescriptor,
    PluginSchema,
    PluginStub,
    Resolution,
)
from launcher.plugins.errors import PluginLoadError
from launcher.plugins.loader import load_plugin_module, module_entry
from launcher.plugins.manifest import ManifestStructureError, WorkflowManifest, read_workflow_manifest
from launcher.plugins.strategies import ExternalToolPlugin, NativePlugin

logger = logging.getLogger(__name__)


def load_plugins_in_path(directory: Path) -> List[Path]:
    """List plugin directories in the given path.

    Hidden and OS-generated entries (``.DS_Store``, ``.git``) are skipped.

    Args:
        directory: The directory to read

    Returns:
        Sorted list of absolute plugin paths
    """
    directory = Path(directory).expanduser()
    try:
        entries = sorted(os.listdir(directory))
    except OSError as e:
        logger.debug(f"Plugin search path not readable: {directory} ({e})")
        return []

    return [
        (directory / entry).resolve()
        for entry in entries
        if not entry.startswith(".") and (directory / entry).is_dir()
    ]


class SchemaDetector:
    """Resolves plugin stubs into descriptors.

    A readable ``info.plist`` makes the plugin an external tool; otherwise it
    is a native Python package. Resolution never raises: failures produce the
    best descriptor available plus a degradation reason.
    """

    MANIFEST_FILE = WORKFLOW_MANIFEST_FILE

    async def resolve(self, stub: PluginStub) -> Resolution:
        plist_path = Path(stub.path) / self.MANIFEST_FILE
        try:
            manifest = await asyncio.to_thread(read_workflow_manifest, plist_path)
        except FileNotFoundError:
            return self._resolve_native(stub)
        except ManifestStructureError as e:
            resolution = self._external_tool(stub, WorkflowManifest(objects=()))
            return self._degraded(resolution, DegradationReason.MANIFEST_INCOMPLETE, str(e))
        except OSError as e:
            resolution = self._resolve_native(stub)
            if resolution.degraded:
                return resolution
            return self._degraded(resolution, DegradationReason.MANIFEST_UNREADABLE, str(e))
        except Exception as e:
            resolution = self._resolve_native(stub)
            if resolution.degraded:
                return resolution
            return self._degraded(resolution, DegradationReason.MANIFEST_MALFORMED, str(e))

        return self._external_tool(stub, manifest)

    def _external_tool(self, stub: PluginStub, manifest: WorkflowManifest) -> Resolution:
        plugin = ExternalToolPlugin(stub.path, manifest=manifest)
        descriptor = PluginDescriptor(
            path=stub.path,
            name=stub.name,
            is_core=stub.is_core,
            schema=PluginSchema.EXTERNAL_TOOL,
            action=plugin.action,
            keyword=plugin.keyword,
        )
        logger.debug(f"Resolved external-tool plugin {stub.name} (keyword={plugin.keyword!r})")
        return Resolution(descriptor=descriptor, plugin=plugin)

    def _resolve_native(self, stub: PluginStub) -> Resolution:
        fallback = PluginDescriptor(
            path=stub.path,
            name=stub.name,
            is_core=stub.is_core,
            schema=PluginSchema.NATIVE,
        )
        if not module_entry(stub.path).is_file():
            return self._degraded(
                Resolution(descriptor=fallback, plugin=NativePlugin(stub.path)),
                DegradationReason.MODULE_MISSING,
                f"no {WORKFLOW_MANIFEST_FILE} and no Python package",
            )

        try:
            module = load_plugin_module(stub.path)
        except PluginLoadError as e:
            return self._degraded(
                Resolution(descriptor=fallback, plugin=NativePlugin(stub.path)),
                DegradationReason.MODULE_LOAD_FAILED,
                str(e),
            )

        plugin = NativePlugin(stub.path, module=module)
        descriptor = PluginDescriptor(
            path=stub.path,
            name=stub.name,
            is_core=stub.is_core,
            schema=PluginSchema.NATIVE,
            action=plugin.action,
            keyword=plugin.keyword,
        )
        logger.debug(f"Resolved native plugin {stub.name} (keyword={plugin.keyword!r})")
        return Resolution(descriptor=descriptor, plugin=plugin)

    @staticmethod
    def _degraded(resolution: Resolution, reason: DegradationReason, detail: str) -> Resolution:
        logger.warning(
            f"Plugin {resolution.descriptor.name} resolved with defaults "
            f"({reason.value}): {detail}"
        )
        return Resolution(
            descriptor=resolution.descriptor,
            plugin=resolution.plugin,
            degradation=reason,
            detail=detail,
        )
