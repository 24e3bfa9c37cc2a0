"""mcp-bridge CLI entrypoint."""

from __future__ import annotations

import logging

import click
from rich.logging import RichHandler

from mcpbridge import __version__


@click.group()
@click.version_option(version=__version__, prog_name="mcp-bridge")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.option("--telemetry", is_flag=True, help="Export trace spans to the console.")
def main(verbose: bool, telemetry: bool) -> None:
    """mcp-bridge — JSON-RPC tools for chat models."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )
    if telemetry:
        from mcpbridge.utils.telemetry import configure_telemetry

        configure_telemetry()


# Register subcommands
from mcpbridge.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
