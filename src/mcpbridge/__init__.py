"""mcp-bridge — connects a JSON-RPC tool server to a chat model."""

from __future__ import annotations

__version__ = "0.1.0"
