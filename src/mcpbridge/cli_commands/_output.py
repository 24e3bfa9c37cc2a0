"""Shared CLI output formatters."""

from __future__ import annotations

import json

from rich.console import Console
from rich.table import Table

from mcpbridge.core.conversation.models import ToolOutcome, TurnResult  # noqa: TC001
from mcpbridge.protocols.jsonrpc.models import ToolDefinition  # noqa: TC001

console = Console()


def print_tools_table(tools: list[ToolDefinition]) -> None:
    """Pretty-print tool definitions as a table."""
    table = Table(title="Available Tools")
    table.add_column("Name", style="cyan")
    table.add_column("Description")

    for tool in tools:
        table.add_row(tool.name, _truncate(tool.description or "No description"))

    console.print(table)


def print_turn(result: TurnResult) -> None:
    """Print every assistant reply and tool outcome of a turn, in order."""
    outcomes = iter(result.tool_outcomes)
    for message in result.messages:
        if message.role != "assistant":
            continue
        if message.content:
            console.print(f"[bold green]Assistant:[/bold green] {message.content}")
        for call in message.tool_calls or []:
            console.print(
                f"[magenta]Tool call:[/magenta] {call.name} {json.dumps(call.arguments, default=str)}"
            )
            outcome = next(outcomes, None)
            if outcome is not None:
                print_tool_outcome(outcome)

    if result.unanswered_tool_calls:
        names = ", ".join(call.name for call in result.unanswered_tool_calls)
        console.print(f"[yellow]Tool calls left unanswered:[/yellow] {names}")


def print_tool_outcome(outcome: ToolOutcome) -> None:
    if outcome.ok:
        console.print(f"[dim]Tool result:[/dim] {_truncate(outcome.text, 400)}")
    else:
        console.print(f"[red]Tool '{outcome.invocation.name}' failed:[/red] {outcome.text}")


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
