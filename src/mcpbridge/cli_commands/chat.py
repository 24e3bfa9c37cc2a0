"""``mcp-bridge chat`` and ``mcp-bridge ask`` — talk to a model with remote tools."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click

from mcpbridge.cli_commands._output import console, print_tools_table, print_turn
from mcpbridge.core.conversation import ChatSession, SessionConfig
from mcpbridge.core.interface import ChatMessage, CompletionClient, ModelConfig
from mcpbridge.protocols.errors import BridgeError
from mcpbridge.protocols.jsonrpc import MCPClient, MCPClientConfig

_QUIT_WORDS = {"quit", "exit"}


def _model_options(func):  # type: ignore[no-untyped-def]
    func = click.option(
        "--ollama-url",
        default="http://localhost:11434",
        envvar="MCP_BRIDGE_OLLAMA_URL",
        show_default=True,
        help="Base URL of the chat endpoint.",
    )(func)
    func = click.option("--temperature", type=float, default=None, help="Sampling temperature.")(func)
    func = click.option("--max-tokens", type=int, default=None, help="Maximum tokens to generate.")(func)
    func = click.option(
        "--model", "-m", default="llama3", envvar="MCP_BRIDGE_MODEL", show_default=True
    )(func)
    return func


@click.command()
@_model_options
@click.option(
    "--mcp-server",
    "-s",
    "server_url",
    required=True,
    envvar="MCP_BRIDGE_SERVER",
    help="Tool server endpoint, e.g. http://localhost:8080/mcp",
)
@click.option("--system", "system_prompt", default=None, help="Optional system prompt.")
@click.option(
    "--max-tool-rounds",
    type=click.IntRange(min=1),
    default=5,
    show_default=True,
    help="How many waves of tool calls one message may trigger.",
)
def chat(
    model: str,
    max_tokens: int | None,
    temperature: float | None,
    ollama_url: str,
    server_url: str,
    system_prompt: str | None,
    max_tool_rounds: int,
) -> None:
    """Start a conversation; type 'quit' or 'exit' to stop."""
    model_config = ModelConfig(
        model=model,
        base_url=ollama_url,
        temperature=temperature,
        max_tokens=max_tokens,
    )
    session_config = SessionConfig(system_prompt=system_prompt, max_tool_rounds=max_tool_rounds)
    code = asyncio.run(_converse(model_config, MCPClientConfig(url=server_url), session_config))
    if code:
        sys.exit(code)


async def _converse(
    model_config: ModelConfig,
    mcp_config: MCPClientConfig,
    session_config: SessionConfig,
) -> int:
    console.print(f"Connecting to MCP server: {mcp_config.url}")
    async with CompletionClient(model_config) as llm, MCPClient(mcp_config) as mcp:
        try:
            session = await ChatSession.from_server(llm, mcp, session_config)
        except BridgeError as exc:
            console.print(f"[red]Failed to get tools from MCP server:[/red] {exc}")
            console.print(f"Make sure the MCP server is running at: {mcp_config.url}")
            return 1

        if session.available_tools:
            print_tools_table(session.available_tools)
        console.print("Starting conversational mode. Type 'quit' or 'exit' to stop.")

        while True:
            try:
                line = console.input("> ")
            except EOFError:
                break
            message = line.strip()
            if not message:
                continue
            if message.lower() in _QUIT_WORDS:
                console.print("Goodbye!")
                break

            try:
                result = await session.send(message)
            except BridgeError as exc:
                console.print(f"[red]Error talking to the model:[/red] {exc}")
                continue
            print_turn(result)
    return 0


@click.command()
@_model_options
@click.option(
    "--prompt-file",
    "-f",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="File holding the prompt to send.",
)
@click.option(
    "--mcp-server",
    "-s",
    "server_url",
    default=None,
    envvar="MCP_BRIDGE_SERVER",
    help="Optional tool server endpoint; without it the model gets no tools.",
)
def ask(
    model: str,
    max_tokens: int | None,
    temperature: float | None,
    ollama_url: str,
    prompt_file: Path,
    server_url: str | None,
) -> None:
    """Send the prompt in a file and print the reply."""
    prompt = prompt_file.read_text(encoding="utf-8").strip()
    if not prompt:
        console.print(f"[red]Prompt file is empty:[/red] {prompt_file}")
        sys.exit(1)
    console.print(f"Using message from file: {prompt}")

    model_config = ModelConfig(
        model=model,
        base_url=ollama_url,
        temperature=temperature,
        max_tokens=max_tokens,
    )
    try:
        asyncio.run(_ask(prompt, model_config, server_url))
    except BridgeError as exc:
        console.print(f"[red]Error talking to the model:[/red] {exc}")
        sys.exit(1)


async def _ask(prompt: str, model_config: ModelConfig, server_url: str | None) -> None:
    async with CompletionClient(model_config) as llm:
        if server_url is None:
            turn = await llm.complete([ChatMessage.user(prompt)])
            console.print(f"[bold green]Response:[/bold green] {turn.content}")
            return

        async with MCPClient(MCPClientConfig(url=server_url)) as mcp:
            session = await ChatSession.from_server(llm, mcp)
            print_turn(await session.send(prompt))
