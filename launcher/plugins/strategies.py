"""Execution strategies - one concrete Plugin per schema."""
from __future__ import annotations

import asyncio
import inspect
import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path
from types import ModuleType
from typing import Any, List, Optional

from launcher.constants import PLUGIN_MAX_OUTPUT_BYTES, PLUGIN_PYTHON, PLUGIN_QUERY_TIMEOUT
from launcher.plugins.descriptor import PluginDescriptor, PluginSchema
from launcher.plugins.errors import ExternalToolError, PluginExecutionError
from launcher.plugins.loader import load_plugin_module
from launcher.plugins.manifest import WorkflowManifest

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 64 * 1024


def extract_items(output: Any) -> List[Any]:
    """Pull the ``items`` list out of a plugin payload."""
    if isinstance(output, Mapping):
        items = output.get("items")
    else:
        items = getattr(output, "items", None)
    if items is None:
        return []
    if isinstance(items, (list, tuple)):
        return list(items)
    raise TypeError(f"'items' must be a list, got {type(items).__name__}")


class Plugin(ABC):
    """A resolved plugin that knows how to run a query."""

    schema: PluginSchema

    def __init__(self, path: Path):
        self.path = Path(path)

    @property
    def name(self) -> str:
        return self.path.name

    @property
    @abstractmethod
    def keyword(self) -> str:
        """Trigger token, empty when the plugin has none."""
        ...

    @property
    @abstractmethod
    def action(self) -> str:
        """Default action applied to the plugin's items."""
        ...

    @abstractmethod
    async def execute(self, args: List[str]) -> Optional[List[Any]]:
        """Run the query and return raw items.

        Returns:
            Raw item list, or None when the plugin produced nothing at all
        """
        ...

    def __repr__(self):
        return f"{self.__class__.__name__}({self.name})"


class NativePlugin(Plugin):
    """Plugin implemented as an in-process Python package."""

    schema = PluginSchema.NATIVE

    def __init__(self, path: Path, module: Optional[ModuleType] = None):
        super().__init__(path)
        self._module = module

    @property
    def module(self) -> ModuleType:
        if self._module is None:
            self._module = load_plugin_module(self.path)
        return self._module

    @property
    def keyword(self) -> str:
        return str(getattr(self.module, "keyword", "") or "")

    @property
    def action(self) -> str:
        return str(getattr(self.module, "action", "") or "")

    async def execute(self, args: List[str]) -> Optional[List[Any]]:
        query = " ".join(args)
        hook = getattr(self.module, "execute", None)
        try:
            output = hook(query) if callable(hook) else hook
            if inspect.isawaitable(output):
                output = await output
        except Exception as e:
            raise PluginExecutionError(self.name, f"execute failed: {e}") from e

        if not output:
            return None
        try:
            return extract_items(output)
        except TypeError as e:
            raise PluginExecutionError(self.name, str(e)) from e


class ExternalToolPlugin(Plugin):
    """Plugin run as a child process that prints ``{"items": [...]}``.

    The process is started as ``python <plugin dir> <tokens...>`` with the
    plugin directory as working directory. Stdout is buffered up to
    ``max_output_bytes`` and parsed once the stream closes and the process
    has exited.
    """

    schema = PluginSchema.EXTERNAL_TOOL

    def __init__(
        self,
        path: Path,
        manifest: Optional[WorkflowManifest] = None,
        python: str = PLUGIN_PYTHON,
        timeout: Optional[float] = PLUGIN_QUERY_TIMEOUT,
        max_output_bytes: int = PLUGIN_MAX_OUTPUT_BYTES,
    ):
        super().__init__(path)
        self.manifest = manifest
        self.python = python
        self.timeout = timeout
        self.max_output_bytes = max_output_bytes

    @property
    def keyword(self) -> str:
        return self.manifest.keyword if self.manifest else ""

    @property
    def action(self) -> str:
        return self.manifest.action if self.manifest else ""

    async def execute(self, args: List[str]) -> Optional[List[Any]]:
        try:
            process = await asyncio.create_subprocess_exec(
                self.python,
                str(self.path),
                *args,
                cwd=str(self.path),
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as e:
            raise ExternalToolError(self.name, f"spawn failed: {e}") from e

        try:
            buffer = await asyncio.wait_for(self._collect(process), timeout=self.timeout)
        except asyncio.TimeoutError:
            await self._kill(process)
            raise ExternalToolError(self.name, f"timed out after {self.timeout}s")

        if process.returncode != 0:
            raise ExternalToolError(self.name, f"exited with code {process.returncode}")

        return self._parse(buffer)

    async def _collect(self, process: asyncio.subprocess.Process) -> bytes:
        """Buffer stdout until EOF, then wait for the process to exit."""
        buffer = bytearray()
        while True:
            chunk = await process.stdout.read(READ_CHUNK_SIZE)
            if not chunk:
                break
            buffer.extend(chunk)
            if len(buffer) > self.max_output_bytes:
                await self._kill(process)
                raise ExternalToolError(
                    self.name, f"output exceeded {self.max_output_bytes} bytes"
                )
        await process.wait()
        return bytes(buffer)

    @staticmethod
    async def _kill(process: asyncio.subprocess.Process) -> None:
        if process.returncode is None:
            try:
                process.kill()
            except ProcessLookupError:
                pass
            await process.wait()

    def _parse(self, buffer: bytes) -> List[Any]:
        text = buffer.decode("utf-8", errors="replace")
        if not text.strip():
            return []
        try:
            output = json.loads(text)
        except json.JSONDecodeError as e:
            raise ExternalToolError(self.name, f"invalid JSON output: {e}") from e
        if not output:
            return []
        try:
            return extract_items(output)
        except TypeError as e:
            raise ExternalToolError(self.name, str(e)) from e


def create_plugin(descriptor: PluginDescriptor) -> Plugin:
    """Build the strategy for an already resolved descriptor."""
    if descriptor.schema == PluginSchema.EXTERNAL_TOOL:
        return ExternalToolPlugin(descriptor.path)
    if descriptor.schema == PluginSchema.NATIVE:
        return NativePlugin(descriptor.path)
    raise ValueError(f"Unknown plugin schema: {descriptor.schema}")
