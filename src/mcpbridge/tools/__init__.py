"""Built-in tools executed in-process by the JSON-RPC server."""

from mcpbridge.tools.base import ArgumentsAccepted, ArgumentsRejected, BuiltinTool, parse_arguments
from mcpbridge.tools.file_read import (
    DEFAULT_SANDBOX_ROOT,
    FileReadRequest,
    FileReadResponse,
    FileReadTool,
    guess_mime_type,
    read_file,
)


def builtin_tools(sandbox_root: str = DEFAULT_SANDBOX_ROOT) -> list[BuiltinTool]:  # type: ignore[type-arg]
    """Return the fixed set of built-in executors."""
    return [FileReadTool(sandbox_root)]


__all__ = [
    "DEFAULT_SANDBOX_ROOT",
    "ArgumentsAccepted",
    "ArgumentsRejected",
    "BuiltinTool",
    "FileReadRequest",
    "FileReadResponse",
    "FileReadTool",
    "builtin_tools",
    "guess_mime_type",
    "parse_arguments",
    "read_file",
]
