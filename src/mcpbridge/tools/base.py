"""Built-in tool base class and argument parsing.

Tool arguments arrive as opaque JSON values. Each tool parses them into its
own typed request model before running; the outcome of that parse is either
:class:`ArgumentsAccepted` or :class:`ArgumentsRejected`, never a loose dict
threaded through the executor.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from mcpbridge.protocols.errors import ApplicationError
from mcpbridge.protocols.jsonrpc.models import ToolDefinition

RequestT = TypeVar("RequestT", bound=BaseModel)


@dataclass(frozen=True)
class ArgumentsAccepted(Generic[RequestT]):
    """Arguments that validated against the tool's request model."""

    request: RequestT


@dataclass(frozen=True)
class ArgumentsRejected:
    """Arguments that are missing or do not fit the tool's request model."""

    reason: str


def parse_arguments(
    tool_name: str,
    model: type[RequestT],
    raw: Any,
) -> ArgumentsAccepted[RequestT] | ArgumentsRejected:
    """Validate *raw* against *model*."""
    if raw is None:
        return ArgumentsRejected(f"{tool_name} tool requires arguments")
    try:
        return ArgumentsAccepted(model.model_validate(raw))
    except ValidationError as exc:
        return ArgumentsRejected(f"Invalid {tool_name} arguments: {_summarize(exc)}")


def _summarize(exc: ValidationError) -> str:
    parts: list[str] = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "arguments"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


class BuiltinTool(ABC, Generic[RequestT]):
    """A tool executed in-process by the JSON-RPC server.

    Subclasses declare their :class:`ToolDefinition`, parse raw arguments into
    a typed request, and run it. Domain failures are raised as
    :class:`~mcpbridge.protocols.errors.ApplicationError`; the server turns
    them into error content rather than a JSON-RPC error.
    """

    name: str

    @abstractmethod
    def definition(self) -> ToolDefinition:
        """Return the definition advertised by ``tools/list``."""
        ...

    @abstractmethod
    def parse(self, raw: Any) -> ArgumentsAccepted[RequestT] | ArgumentsRejected:
        """Parse raw call arguments into this tool's request model."""
        ...

    @abstractmethod
    async def run(self, request: RequestT) -> str:
        """Execute the tool and return the text for the result content block."""
        ...

    def describe_failure(self, error: ApplicationError) -> str:
        """Render a domain failure as the text of an error content block."""
        return f"Error running tool '{self.name}': {error.detail}"
