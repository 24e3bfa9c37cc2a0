"""``file_read`` — read a text file from inside a sandbox directory."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from mcpbridge.protocols.errors import ApplicationError
from mcpbridge.protocols.jsonrpc.models import ToolDefinition
from mcpbridge.tools.base import ArgumentsAccepted, ArgumentsRejected, BuiltinTool, parse_arguments

logger = logging.getLogger(__name__)

DEFAULT_SANDBOX_ROOT = "/tmp/allowed_files/"

_MIME_TYPES: dict[str, str] = {
    "txt": "text/plain",
    "md": "text/markdown",
    "rs": "text/x-rust",
    "py": "text/x-python",
    "js": "text/javascript",
    "ts": "text/typescript",
    "json": "application/json",
    "xml": "application/xml",
    "html": "text/html",
    "css": "text/css",
    "yaml": "application/x-yaml",
    "yml": "application/x-yaml",
    "toml": "application/toml",
}


class FileReadRequest(BaseModel):
    """Arguments accepted by ``file_read``."""

    path: str


class FileReadResponse(BaseModel):
    """What ``file_read`` found at the requested path."""

    content: str
    path: str
    size: int
    mime_type: str | None = None

    def render(self) -> str:
        return (
            f"File: {self.path}\n"
            f"Size: {self.size} bytes\n"
            f"MIME Type: {self.mime_type or 'unknown'}\n\n"
            f"Content:\n{self.content}"
        )


def guess_mime_type(path: str) -> str | None:
    """Guess a MIME type from the file extension, or ``None`` if unknown."""
    suffix = Path(path).suffix
    if not suffix:
        return None
    return _MIME_TYPES.get(suffix[1:])


def read_file(request: FileReadRequest, sandbox_root: str = DEFAULT_SANDBOX_ROOT) -> FileReadResponse:
    """Read *request.path*, refusing anything not prefixed by *sandbox_root*.

    The sandbox check is a plain string prefix test on the path as given.

    Raises:
        ApplicationError: access denied, missing file, not a file, unreadable
            or not valid UTF-8.
    """
    if not request.path.startswith(sandbox_root):
        raise ApplicationError(
            "file_read",
            f"Access denied: File path must be within {sandbox_root}",
        )

    path = Path(request.path)
    if not path.exists():
        raise ApplicationError("file_read", f"File not found: {request.path}")
    if not path.is_file():
        raise ApplicationError("file_read", f"Path is not a file: {request.path}")

    try:
        raw = path.read_bytes()
        content = raw.decode("utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ApplicationError(
            "file_read",
            f"Failed to read file '{request.path}': {exc}",
        ) from exc

    return FileReadResponse(
        content=content,
        path=request.path,
        size=len(raw),
        mime_type=guess_mime_type(request.path),
    )


class FileReadTool(BuiltinTool[FileReadRequest]):
    """Built-in ``file_read`` executor bound to one sandbox root."""

    name = "file_read"

    def __init__(self, sandbox_root: str = DEFAULT_SANDBOX_ROOT) -> None:
        self.sandbox_root = sandbox_root

    def definition(self) -> ToolDefinition:
        return ToolDefinition(
            name=self.name,
            description=(
                "Read the contents of a file from the filesystem. "
                f"The path must be within {self.sandbox_root}"
            ),
            input_schema={
                "type": "object",
                "properties": {
                    "path": {"type": "string", "description": "The file path to read"},
                },
                "required": ["path"],
            },
        )

    def parse(self, raw: Any) -> ArgumentsAccepted[FileReadRequest] | ArgumentsRejected:
        return parse_arguments(self.name, FileReadRequest, raw)

    async def run(self, request: FileReadRequest) -> str:
        logger.debug("file_read %s", request.path)
        response = await asyncio.to_thread(read_file, request, self.sandbox_root)
        return response.render()

    def describe_failure(self, error: ApplicationError) -> str:
        return f"Error reading file: {error.detail}"
