"""``mcp-bridge tools`` — inspect the tools a server exposes."""

from __future__ import annotations

import asyncio
import sys

import click

from mcpbridge.cli_commands._output import console, print_tools_table


@click.group()
def tools() -> None:
    """Inspect tools on a JSON-RPC tool server."""


@tools.command("list")
@click.option(
    "--mcp-server",
    "-s",
    "server_url",
    required=True,
    envvar="MCP_BRIDGE_SERVER",
    help="Tool server endpoint, e.g. http://localhost:8080/mcp",
)
@click.option("--timeout", type=float, default=30.0, show_default=True)
def list_cmd(server_url: str, timeout: float) -> None:
    """List the tools advertised by a server."""
    from mcpbridge.protocols.jsonrpc.client import MCPClient, MCPClientConfig
    from mcpbridge.protocols.jsonrpc.models import ToolDefinition

    async def _list() -> list[ToolDefinition]:
        async with MCPClient(MCPClientConfig(url=server_url, timeout=timeout)) as client:
            return await client.list_tools()

    try:
        found = asyncio.run(_list())
    except Exception as exc:
        console.print(f"[red]Failed to get tools from MCP server:[/red] {exc}")
        sys.exit(1)

    if not found:
        console.print("[yellow]No tools available.[/yellow]")
        return

    print_tools_table(found)
