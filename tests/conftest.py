"""Shared fixtures: a sandboxed tool server and a scripted chat endpoint."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import httpx
import pytest

from mcpbridge.protocols.jsonrpc.server import MCPServer, ServerConfig


class ScriptedChatEndpoint:
    """Fake ``/api/chat`` endpoint answering with queued replies.

    Every request body is recorded in :attr:`requests`.
    """

    def __init__(self) -> None:
        self.requests: list[dict[str, Any]] = []
        self._replies: list[tuple[int, Any]] = []

    def reply(
        self,
        content: str = "",
        tool_calls: list[tuple[str, Any]] | None = None,
        *,
        done: bool = True,
    ) -> None:
        message: dict[str, Any] = {"role": "assistant", "content": content}
        if tool_calls:
            message["tool_calls"] = [
                {"function": {"name": name, "arguments": arguments}}
                for name, arguments in tool_calls
            ]
        self._replies.append((
            200,
            {
                "model": "llama3",
                "created_at": "2024-06-01T12:00:00Z",
                "message": message,
                "done": done,
                "total_duration": 5000,
                "eval_count": 12,
            },
        ))

    def fail(self, status: int, body: Any) -> None:
        self._replies.append((status, body))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(json.loads(request.content))
        if not self._replies:
            return httpx.Response(500, text="no scripted reply left")
        status, body = self._replies.pop(0)
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def sandbox(tmp_path: Path) -> Path:
    """A sandbox directory holding ``a.txt`` with ``hello``."""
    root = tmp_path / "allowed_files"
    root.mkdir()
    (root / "a.txt").write_text("hello", encoding="utf-8")
    return root


@pytest.fixture
def sandbox_root(sandbox: Path) -> str:
    return f"{sandbox}/"


@pytest.fixture
async def server(sandbox_root: str) -> MCPServer:
    """An MCP server with the built-in tools registered."""
    srv = MCPServer(ServerConfig(sandbox_root=sandbox_root))
    await srv.register_builtins()
    return srv


@pytest.fixture
def server_transport(server: MCPServer) -> httpx.ASGITransport:
    """In-process HTTP transport routed to :func:`server`."""
    return httpx.ASGITransport(app=server.create_app())


@pytest.fixture
def chat_endpoint() -> ScriptedChatEndpoint:
    return ScriptedChatEndpoint()
