"""``mcp-bridge serve`` — run the JSON-RPC tool server."""

from __future__ import annotations

import asyncio

import click

from mcpbridge.cli_commands._output import console
from mcpbridge.tools import DEFAULT_SANDBOX_ROOT


@click.command()
@click.option("--host", default="127.0.0.1", envvar="MCP_BRIDGE_HOST", show_default=True)
@click.option("--port", "-p", type=int, default=8080, envvar="MCP_BRIDGE_PORT", show_default=True)
@click.option("--path", default="/mcp", show_default=True, help="HTTP path of the JSON-RPC endpoint.")
@click.option(
    "--sandbox-root",
    default=DEFAULT_SANDBOX_ROOT,
    envvar="MCP_BRIDGE_SANDBOX_ROOT",
    show_default=True,
    help="Only paths starting with this prefix are readable by file_read.",
)
@click.option("--no-cors", is_flag=True, help="Disable the permissive CORS policy.")
def serve(host: str, port: int, path: str, sandbox_root: str, no_cors: bool) -> None:
    """Serve the built-in tools over JSON-RPC 2.0."""
    from mcpbridge.protocols.jsonrpc.server import MCPServer, ServerConfig

    config = ServerConfig(
        host=host,
        port=port,
        path=path,
        sandbox_root=sandbox_root,
        cors=not no_cors,
    )
    server = MCPServer(config)

    async def _serve() -> None:
        await server.register_builtins()
        await server.serve()

    console.print(f"MCP server starting on http://{host}:{port}{path}")
    console.print("Try it with:")
    console.print(
        f"  curl -X POST http://{host}:{port}{path} -H 'Content-Type: application/json' "
        "-d '{\"jsonrpc\":\"2.0\",\"id\":\"1\",\"method\":\"tools/list\"}'",
        highlight=False,
    )
    asyncio.run(_serve())
