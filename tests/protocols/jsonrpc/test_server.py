"""Tests for MCPServer request handling and its HTTP endpoint."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import AsyncMock, patch

import httpx

from mcpbridge.protocols.jsonrpc.models import ToolDefinition
from mcpbridge.protocols.jsonrpc.server import MCPServer, ServerConfig
from mcpbridge.tools import FileReadTool


def _body(method: str, params: Any = None, request_id: Any = "req-1") -> str:
    payload: dict[str, Any] = {"jsonrpc": "2.0", "id": request_id, "method": method}
    if params is not None:
        payload["params"] = params
    return json.dumps(payload)


def _call(name: str, arguments: Any = None) -> str:
    return _body("tools/call", {"name": name, "arguments": arguments})


class TestEnvelopeParsing:
    async def test_malformed_json_is_parse_error(self, server: MCPServer) -> None:
        response = await server.handle("{not json")
        assert response.error is not None
        assert response.error.code == -32700
        assert response.id is None

    async def test_missing_method_is_invalid_request(self, server: MCPServer) -> None:
        response = await server.handle(json.dumps({"jsonrpc": "2.0", "id": "abc"}))
        assert response.error is not None
        assert response.error.code == -32600
        assert response.id == "abc"

    async def test_non_object_is_invalid_request(self, server: MCPServer) -> None:
        response = await server.handle("[1, 2, 3]")
        assert response.error is not None
        assert response.error.code == -32600
        assert response.id is None

    async def test_wrong_version_is_invalid_request(self, server: MCPServer) -> None:
        body = json.dumps({"jsonrpc": "1.0", "id": "v", "method": "tools/list"})
        response = await server.handle(body)
        assert response.error is not None
        assert response.error.code == -32600
        assert response.id == "v"

    async def test_missing_version_is_invalid_request(self, server: MCPServer) -> None:
        response = await server.handle(json.dumps({"id": "x", "method": "tools/list"}))
        assert response.result is None
        assert response.error is not None
        assert response.error.code == -32600
        assert response.id == "x"

    async def test_missing_id_is_invalid_request(self, server: MCPServer) -> None:
        response = await server.handle(json.dumps({"jsonrpc": "2.0", "method": "tools/list"}))
        assert response.result is None
        assert response.error is not None
        assert response.error.code == -32600
        assert response.id is None

    async def test_unknown_method(self, server: MCPServer) -> None:
        response = await server.handle(_body("resources/list"))
        assert response.error is not None
        assert response.error.code == -32601
        assert response.id == "req-1"

    async def test_numeric_id_echoed(self, server: MCPServer) -> None:
        response = await server.handle(_body("tools/list", request_id=42))
        assert response.id == 42


class TestToolsList:
    async def test_lists_builtin(self, server: MCPServer) -> None:
        response = await server.handle(_body("tools/list"))
        assert response.error is None
        tools = response.result["tools"]
        assert len(tools) == 1
        assert tools[0]["name"] == "file_read"
        assert tools[0]["description"]
        assert tools[0]["inputSchema"]["required"] == ["path"]

    async def test_empty_registry(self) -> None:
        srv = MCPServer()
        response = await srv.handle(_body("tools/list"))
        assert response.result == {"tools": []}

    async def test_registration_visible_immediately(self, server: MCPServer) -> None:
        await server.add_tool(ToolDefinition(name="echo", description="Echo"))
        response = await server.handle(_body("tools/list"))
        names = sorted(t["name"] for t in response.result["tools"])
        assert names == ["echo", "file_read"]


class TestToolsCall:
    async def test_missing_params(self, server: MCPServer) -> None:
        response = await server.handle(_body("tools/call"))
        assert response.error is not None
        assert response.error.code == -32602
        assert response.error.message == "Missing params"

    async def test_params_without_name(self, server: MCPServer) -> None:
        response = await server.handle(_body("tools/call", {"arguments": {}}))
        assert response.error is not None
        assert response.error.code == -32602

    async def test_unknown_tool(self, server: MCPServer) -> None:
        response = await server.handle(_call("rm_rf", {"path": "/"}))
        assert response.error is not None
        assert response.error.code == -32601
        assert "rm_rf" in response.error.message

    async def test_registered_tool_without_executor(self, server: MCPServer) -> None:
        await server.add_tool(ToolDefinition(name="echo"))
        response = await server.handle(_call("echo", {}))
        assert response.error is not None
        assert response.error.code == -32601

    async def test_builtin_not_registered_is_not_found(self, sandbox_root: str) -> None:
        srv = MCPServer(ServerConfig(sandbox_root=sandbox_root))
        response = await srv.handle(_call("file_read", {"path": f"{sandbox_root}a.txt"}))
        assert response.error is not None
        assert response.error.code == -32601

    async def test_missing_arguments(self, server: MCPServer) -> None:
        response = await server.handle(_call("file_read"))
        assert response.error is not None
        assert response.error.code == -32602
        assert "requires arguments" in response.error.message

    async def test_invalid_arguments(self, server: MCPServer) -> None:
        response = await server.handle(_call("file_read", {"file": "a.txt"}))
        assert response.error is not None
        assert response.error.code == -32602
        assert "Invalid file_read arguments" in response.error.message

    async def test_reads_file(self, server: MCPServer, sandbox_root: str) -> None:
        response = await server.handle(_call("file_read", {"path": f"{sandbox_root}a.txt"}))
        assert response.error is None
        block = response.result["content"][0]
        assert block["type"] == "text"
        assert "hello" in block["text"]
        assert "Size: 5 bytes" in block["text"]
        assert "MIME Type: text/plain" in block["text"]
        assert "isError" not in response.result

    async def test_outside_sandbox_is_success_with_denial(self, server: MCPServer) -> None:
        response = await server.handle(_call("file_read", {"path": "/etc/passwd"}))
        assert response.error is None
        text = response.result["content"][0]["text"]
        assert "Access denied" in text
        assert "root:" not in text
        assert response.result["isError"] is True

    async def test_missing_file_is_success_with_error_text(
        self, server: MCPServer, sandbox_root: str
    ) -> None:
        response = await server.handle(_call("file_read", {"path": f"{sandbox_root}missing.txt"}))
        assert response.error is None
        assert "File not found" in response.result["content"][0]["text"]

    async def test_executor_crash_is_internal_error(self, server: MCPServer, sandbox_root: str) -> None:
        with patch.object(FileReadTool, "run", AsyncMock(side_effect=RuntimeError("boom"))):
            response = await server.handle(_call("file_read", {"path": f"{sandbox_root}a.txt"}))
        assert response.error is not None
        assert response.error.code == -32603
        assert response.error.data == "boom"


class TestHTTPEndpoint:
    async def test_post_tools_list(self, server_transport: httpx.ASGITransport) -> None:
        async with httpx.AsyncClient(transport=server_transport, base_url="http://testserver") as c:
            response = await c.post("/mcp", content=_body("tools/list"))
        assert response.status_code == 200
        body = response.json()
        assert body["jsonrpc"] == "2.0"
        assert body["id"] == "req-1"
        assert body["result"]["tools"][0]["name"] == "file_read"

    async def test_parse_error_still_200(self, server_transport: httpx.ASGITransport) -> None:
        async with httpx.AsyncClient(transport=server_transport, base_url="http://testserver") as c:
            response = await c.post("/mcp", content="garbage")
        assert response.status_code == 200
        body = response.json()
        assert body["error"]["code"] == -32700
        assert body["id"] is None
        assert "result" not in body

    async def test_custom_path(self, sandbox_root: str) -> None:
        srv = MCPServer(ServerConfig(path="/rpc", sandbox_root=sandbox_root))
        await srv.register_builtins()
        transport = httpx.ASGITransport(app=srv.create_app())
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
            assert (await c.post("/mcp", content=_body("tools/list"))).status_code == 404
            assert (await c.post("/rpc", content=_body("tools/list"))).status_code == 200

    async def test_servers_do_not_share_registries(self) -> None:
        first, second = MCPServer(), MCPServer()
        await first.add_tool(ToolDefinition(name="only-first"))
        assert await second.registry.lookup("only-first") is None
