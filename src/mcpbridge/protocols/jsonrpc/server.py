"""MCPServer — serves ``tools/list`` and ``tools/call`` over JSON-RPC 2.0.

Each request is parsed, dispatched against the :class:`ToolRegistry` and the
built-in executors, and answered with exactly one envelope. Tool-level
failures become successful results carrying error text; only protocol
problems (bad envelope, unknown method or tool, bad params) become
JSON-RPC errors.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from mcpbridge.protocols.errors import ApplicationError
from mcpbridge.protocols.jsonrpc.models import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    CallToolParams,
    CallToolResult,
    InboundRequest,
    JsonRpcRequest,
    JsonRpcResponse,
    RequestId,
    ToolDefinition,
)
from mcpbridge.protocols.jsonrpc.registry import ToolRegistry
from mcpbridge.tools import DEFAULT_SANDBOX_ROOT, ArgumentsRejected, builtin_tools
from mcpbridge.utils.telemetry import (
    ATTR_RPC_ERROR_CODE,
    ATTR_RPC_ID,
    ATTR_RPC_METHOD,
    ATTR_TOOL_IS_ERROR,
    ATTR_TOOL_NAME,
    get_tracer,
)

if TYPE_CHECKING:
    from mcpbridge.tools import BuiltinTool

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)


class ServerConfig(BaseModel):
    """Where the server listens and what it lets ``file_read`` see."""

    host: str = "127.0.0.1"
    port: int = 8080
    path: str = "/mcp"
    sandbox_root: str = DEFAULT_SANDBOX_ROOT
    cors: bool = True


class MCPServer:
    """JSON-RPC 2.0 tool server.

    Registry and configuration are owned by the instance, so several servers
    can coexist in one process.

    Usage::

        server = MCPServer(ServerConfig(port=8080))
        await server.register_builtins()
        await server.serve()
    """

    def __init__(
        self,
        config: ServerConfig | None = None,
        *,
        registry: ToolRegistry | None = None,
        tools: list[BuiltinTool[Any]] | None = None,
    ) -> None:
        self.config = config or ServerConfig()
        self.registry = registry or ToolRegistry()
        executors = tools if tools is not None else builtin_tools(self.config.sandbox_root)
        self._executors: dict[str, BuiltinTool[Any]] = {tool.name: tool for tool in executors}

    async def add_tool(self, tool: ToolDefinition) -> None:
        """Register *tool*; it is listed and callable once this returns."""
        await self.registry.register(tool)

    async def register_builtins(self) -> None:
        """Register the definition of every built-in executor."""
        for executor in self._executors.values():
            await self.add_tool(executor.definition())

    # ------------------------------------------------------------------
    # Request handling
    # ------------------------------------------------------------------

    async def handle(self, body: bytes | str) -> JsonRpcResponse:
        """Parse a raw request body and produce its response envelope."""
        try:
            payload = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            return JsonRpcResponse.failure(None, PARSE_ERROR, "Parse error", str(exc))

        request_id = _recover_id(payload)
        try:
            request = InboundRequest.model_validate(payload)
        except ValidationError as exc:
            return JsonRpcResponse.failure(
                request_id,
                INVALID_REQUEST,
                "Invalid Request",
                _summarize(exc),
            )
        return await self.dispatch(request)

    async def dispatch(self, request: JsonRpcRequest) -> JsonRpcResponse:
        """Route a parsed request to its method handler."""
        with _tracer.start_as_current_span("jsonrpc.dispatch") as span:
            span.set_attribute(ATTR_RPC_METHOD, request.method)
            span.set_attribute(ATTR_RPC_ID, str(request.id))
            try:
                if request.method == "tools/list":
                    response = await self._tools_list(request)
                elif request.method == "tools/call":
                    response = await self._tools_call(request)
                else:
                    response = JsonRpcResponse.failure(
                        request.id, METHOD_NOT_FOUND, "Method not found"
                    )
            except Exception as exc:
                logger.exception("Unhandled error while dispatching %s", request.method)
                response = JsonRpcResponse.failure(
                    request.id, INTERNAL_ERROR, "Internal error", str(exc)
                )

            if response.error is not None:
                span.set_attribute(ATTR_RPC_ERROR_CODE, response.error.code)
            return response

    async def _tools_list(self, request: JsonRpcRequest) -> JsonRpcResponse:
        tools = await self.registry.list()
        return JsonRpcResponse.success(request.id, {"tools": [tool.to_wire() for tool in tools]})

    async def _tools_call(self, request: JsonRpcRequest) -> JsonRpcResponse:
        if request.params is None:
            return JsonRpcResponse.failure(request.id, INVALID_PARAMS, "Missing params")
        try:
            params = CallToolParams.model_validate(request.params)
        except ValidationError as exc:
            return JsonRpcResponse.failure(
                request.id, INVALID_PARAMS, f"Invalid params: {_summarize(exc)}"
            )

        if await self.registry.lookup(params.name) is None:
            return JsonRpcResponse.failure(
                request.id, METHOD_NOT_FOUND, f"Tool '{params.name}' not found"
            )
        executor = self._executors.get(params.name)
        if executor is None:
            return JsonRpcResponse.failure(
                request.id, METHOD_NOT_FOUND, f"Tool '{params.name}' has no executor"
            )

        parsed = executor.parse(params.arguments)
        if isinstance(parsed, ArgumentsRejected):
            return JsonRpcResponse.failure(request.id, INVALID_PARAMS, parsed.reason)

        with _tracer.start_as_current_span("tool.execute") as span:
            span.set_attribute(ATTR_TOOL_NAME, params.name)
            try:
                result = CallToolResult.from_text(await executor.run(parsed.request))
            except ApplicationError as exc:
                logger.info("Tool %s failed: %s", params.name, exc.detail)
                result = CallToolResult.from_text(executor.describe_failure(exc), is_error=True)
            span.set_attribute(ATTR_TOOL_IS_ERROR, result.is_error)

        return JsonRpcResponse.success(request.id, result.to_wire())

    # ------------------------------------------------------------------
    # HTTP wiring
    # ------------------------------------------------------------------

    def create_app(self) -> FastAPI:
        """Build the ASGI application exposing the JSON-RPC endpoint."""
        app = FastAPI(title="mcp-bridge")
        if self.config.cors:
            app.add_middleware(
                CORSMiddleware,
                allow_origins=["*"],
                allow_methods=["*"],
                allow_headers=["*"],
            )

        @app.post(self.config.path)
        async def jsonrpc(request: Request) -> JSONResponse:
            body = await request.body()
            response = await self.handle(body)
            return JSONResponse(response.to_wire())

        return app

    async def serve(self) -> None:
        """Run the HTTP server until it is shut down."""
        import uvicorn

        config = uvicorn.Config(
            self.create_app(),
            host=self.config.host,
            port=self.config.port,
            log_level="info",
        )
        logger.info(
            "Starting MCP server on http://%s:%d%s",
            self.config.host,
            self.config.port,
            self.config.path,
        )
        await uvicorn.Server(config).serve()


def _recover_id(payload: Any) -> RequestId:
    """Pull a usable id out of a payload that may not be a valid request."""
    if isinstance(payload, dict):
        candidate = payload.get("id")
        if isinstance(candidate, str) or (
            isinstance(candidate, int) and not isinstance(candidate, bool)
        ):
            return candidate
    return None


def _summarize(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(p) for p in err['loc']) or 'body'}: {err['msg']}" for err in exc.errors()
    )
