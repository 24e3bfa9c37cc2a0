"""JSON-RPC 2.0 messages and MCP tool payloads.

Implements the envelope exchanged by :class:`~mcpbridge.protocols.jsonrpc.server.MCPServer`
and :class:`~mcpbridge.protocols.jsonrpc.client.MCPClient`, plus the payloads of
the two methods they speak: ``tools/list`` and ``tools/call``.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

JSONRPC_VERSION = "2.0"

# Reserved JSON-RPC 2.0 error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

RequestId = str | int | None

# ---------------------------------------------------------------------------
# JSON-RPC 2.0 envelope
# ---------------------------------------------------------------------------


class JsonRpcRequest(BaseModel):
    """A JSON-RPC 2.0 request message."""

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    id: RequestId = None
    method: str = Field(min_length=1)
    params: Any = None

    def to_wire(self) -> dict[str, Any]:
        """Serialize, omitting ``params`` when there are none."""
        payload: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id, "method": self.method}
        if self.params is not None:
            payload["params"] = self.params
        return payload


class JsonRpcError(BaseModel):
    """A JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None


class JsonRpcResponse(BaseModel):
    """A JSON-RPC 2.0 response message.

    Exactly one of ``result`` and ``error`` is set on a well-formed response.
    """

    jsonrpc: str = JSONRPC_VERSION
    id: RequestId = None
    result: Any = None
    error: JsonRpcError | None = None

    @classmethod
    def success(cls, request_id: RequestId, result: Any) -> JsonRpcResponse:
        return cls(id=request_id, result=result)

    @classmethod
    def failure(
        cls,
        request_id: RequestId,
        code: int,
        message: str,
        data: Any = None,
    ) -> JsonRpcResponse:
        return cls(id=request_id, error=JsonRpcError(code=code, message=message, data=data))

    def to_wire(self) -> dict[str, Any]:
        """Serialize with ``id`` always present and only one of result/error."""
        payload: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            payload["error"] = self.error.model_dump(exclude_none=True)
        else:
            payload["result"] = self.result
        return payload


class InboundRequest(JsonRpcRequest):
    """A request as received by the server; ``jsonrpc`` and ``id`` must be sent."""

    jsonrpc: Literal["2.0"]
    id: RequestId


class InboundResponse(JsonRpcResponse):
    """A response as received by the client; ``jsonrpc`` must be ``"2.0"``.

    Use ``model_fields_set`` to tell an absent ``result`` from a null one.
    """

    jsonrpc: Literal["2.0"]


# ---------------------------------------------------------------------------
# MCP-specific payloads
# ---------------------------------------------------------------------------


class ToolDefinition(BaseModel):
    """A tool as advertised by ``tools/list``."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str = Field(min_length=1)
    description: str | None = None
    input_schema: dict[str, Any] | None = Field(default=None, alias="inputSchema")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

    def to_function_schema(self) -> dict[str, Any]:
        """Convert to the function-tool shape understood by chat endpoints."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description or "",
                "parameters": self.input_schema or {"type": "object", "properties": {}},
            },
        }


class TextContent(BaseModel):
    """A text content block inside a ``tools/call`` result."""

    type: Literal["text"] = "text"
    text: str


class ListToolsResult(BaseModel):
    """Result payload of ``tools/list``."""

    tools: list[ToolDefinition]


class CallToolParams(BaseModel):
    """Params payload of ``tools/call``."""

    name: str = Field(min_length=1)
    arguments: Any = None


class CallToolResult(BaseModel):
    """Result payload of ``tools/call``.

    ``is_error`` marks a tool-level failure; the envelope is still a success.
    """

    model_config = ConfigDict(populate_by_name=True)

    content: list[TextContent]
    is_error: bool = Field(default=False, alias="isError")

    @classmethod
    def from_text(cls, text: str, *, is_error: bool = False) -> CallToolResult:
        return cls(content=[TextContent(text=text)], is_error=is_error)

    @property
    def text(self) -> str:
        """Concatenated text of all content blocks."""
        return "\n".join(block.text for block in self.content)

    def to_wire(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"content": [block.model_dump() for block in self.content]}
        if self.is_error:
            payload["isError"] = True
        return payload
