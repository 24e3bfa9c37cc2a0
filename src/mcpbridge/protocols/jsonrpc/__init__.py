"""JSON-RPC 2.0 tool protocol — models, registry and client.

The server lives in :mod:`mcpbridge.protocols.jsonrpc.server`; it depends on
the built-in tools and is imported from there directly.
"""

from mcpbridge.protocols.jsonrpc.client import MCPClient, MCPClientConfig
from mcpbridge.protocols.jsonrpc.models import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    CallToolParams,
    CallToolResult,
    InboundRequest,
    InboundResponse,
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    ListToolsResult,
    TextContent,
    ToolDefinition,
)
from mcpbridge.protocols.jsonrpc.registry import ReadWriteLock, ToolRegistry

__all__ = [
    "INTERNAL_ERROR",
    "INVALID_PARAMS",
    "INVALID_REQUEST",
    "METHOD_NOT_FOUND",
    "PARSE_ERROR",
    "CallToolParams",
    "CallToolResult",
    "InboundRequest",
    "InboundResponse",
    "JsonRpcError",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "ListToolsResult",
    "MCPClient",
    "MCPClientConfig",
    "ReadWriteLock",
    "TextContent",
    "ToolDefinition",
    "ToolRegistry",
]
