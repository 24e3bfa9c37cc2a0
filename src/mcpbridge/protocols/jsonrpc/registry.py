"""ToolRegistry — the name-to-definition map shared by concurrent requests."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from mcpbridge.protocols.jsonrpc.models import ToolDefinition

logger = logging.getLogger(__name__)


class ReadWriteLock:
    """Reader-preferring asyncio reader/writer lock.

    Any number of readers may hold the lock together; a writer waits until
    no reader or writer holds it.
    """

    def __init__(self) -> None:
        self._cond = asyncio.Condition()
        self._readers = 0
        self._writer = False

    @asynccontextmanager
    async def read(self) -> AsyncIterator[None]:
        async with self._cond:
            await self._cond.wait_for(lambda: not self._writer)
            self._readers += 1
        try:
            yield
        finally:
            async with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @asynccontextmanager
    async def write(self) -> AsyncIterator[None]:
        async with self._cond:
            await self._cond.wait_for(lambda: not self._writer and self._readers == 0)
            self._writer = True
        try:
            yield
        finally:
            async with self._cond:
                self._writer = False
                self._cond.notify_all()


class ToolRegistry:
    """Concurrency-safe registry of :class:`ToolDefinition` objects.

    Usage::

        registry = ToolRegistry()
        await registry.register(FileReadTool().definition())

        tools = await registry.list()              # snapshot
        tool = await registry.lookup("file_read")  # or None
    """

    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._tools: dict[str, ToolDefinition] = {}

    async def register(self, tool: ToolDefinition) -> None:
        """Insert or overwrite *tool*; the last registration for a name wins."""
        async with self._lock.write():
            replaced = tool.name in self._tools
            self._tools[tool.name] = tool
        logger.debug("%s tool %s", "Replaced" if replaced else "Registered", tool.name)

    async def list(self) -> list[ToolDefinition]:
        """Return a snapshot of every registered tool."""
        async with self._lock.read():
            return list(self._tools.values())

    async def lookup(self, name: str) -> ToolDefinition | None:
        """Return the tool registered under *name*, or ``None``."""
        async with self._lock.read():
            return self._tools.get(name)
