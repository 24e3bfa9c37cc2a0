"""MCPClient — talks JSON-RPC 2.0 to an MCP tool server over HTTP.

Implements the raw ``call`` primitive plus tool discovery (``tools/list``)
and execution (``tools/call``).
"""

from __future__ import annotations

import logging
from typing import Any
from uuid import uuid4

import httpx
from pydantic import BaseModel, ValidationError

from mcpbridge.protocols.errors import (
    DecodeError,
    EmptyResponseError,
    IdMismatchError,
    ProtocolError,
)
from mcpbridge.protocols.http import post_json
from mcpbridge.protocols.jsonrpc.models import (
    CallToolResult,
    InboundResponse,
    JsonRpcRequest,
    ListToolsResult,
    ToolDefinition,
)
from mcpbridge.utils.telemetry import ATTR_RPC_ID, ATTR_RPC_METHOD, ATTR_TOOL_NAME, get_tracer

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)


class MCPClientConfig(BaseModel):
    """Where the tool server lives and how long to wait for it."""

    url: str = "http://localhost:8080/mcp"
    timeout: float = 30.0


class MCPClient:
    """Async context manager that sends JSON-RPC requests to a tool server.

    Usage::

        async with MCPClient(MCPClientConfig(url="http://localhost:8080/mcp")) as client:
            tools = await client.list_tools()
            result = await client.call_tool("file_read", {"path": "/tmp/allowed_files/a.txt"})
    """

    def __init__(
        self,
        config: MCPClientConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or MCPClientConfig()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> MCPClient:
        self._client = httpx.AsyncClient(transport=self._transport)
        return self

    async def __aexit__(self, *_: object) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            msg = "MCPClient must be used as an async context manager"
            raise RuntimeError(msg)
        return self._client

    async def call(self, method: str, params: Any = None) -> Any:
        """Send one request and return its ``result``.

        Raises:
            TransportError: connection, timeout or HTTP status failure.
            ProtocolError: the envelope carries an error, is malformed,
                answers a different id, or is empty.
        """
        request = JsonRpcRequest(id=str(uuid4()), method=method, params=params)
        with _tracer.start_as_current_span("jsonrpc.call") as span:
            span.set_attribute(ATTR_RPC_METHOD, method)
            span.set_attribute(ATTR_RPC_ID, str(request.id))
            response = await post_json(
                self._http(),
                self.config.url,
                request.to_wire(),
                timeout=self.config.timeout,
            )
            return self._unwrap(request, response)

    async def list_tools(self) -> list[ToolDefinition]:
        """Send ``tools/list`` and decode the advertised tools."""
        result = await self.call("tools/list")
        try:
            tools = ListToolsResult.model_validate(result).tools
        except ValidationError as exc:
            raise DecodeError("tools/list result", str(exc)) from exc
        logger.debug("Retrieved %d tools from %s", len(tools), self.config.url)
        return tools

    async def call_tool(self, name: str, arguments: Any = None) -> CallToolResult:
        """Send ``tools/call`` for the named tool and decode its content."""
        with _tracer.start_as_current_span("jsonrpc.call_tool") as span:
            span.set_attribute(ATTR_TOOL_NAME, name)
            result = await self.call("tools/call", {"name": name, "arguments": arguments})
        try:
            return CallToolResult.model_validate(result)
        except ValidationError as exc:
            raise DecodeError("tools/call result", str(exc)) from exc

    @staticmethod
    def _unwrap(request: JsonRpcRequest, response: httpx.Response) -> Any:
        """Validate the response envelope against *request* and return its result."""
        try:
            envelope = InboundResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise ProtocolError(f"malformed response envelope: {exc}") from exc

        # Errors raised before the server could read our id come back with a null id.
        if envelope.id != request.id and not (envelope.error is not None and envelope.id is None):
            raise IdMismatchError(str(request.id), envelope.id)
        has_result = "result" in envelope.model_fields_set
        if envelope.error is not None:
            if has_result:
                raise ProtocolError("response carries both result and error")
            raise ProtocolError(envelope.error.message, envelope.error.code, envelope.error.data)
        if not has_result:
            raise EmptyResponseError()
        return envelope.result
