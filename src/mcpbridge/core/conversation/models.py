"""Session configuration and per-turn results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, Field

from mcpbridge.core.interface.models import ChatMessage, ToolCallInvocation  # noqa: TC001
from mcpbridge.protocols.errors import BridgeError  # noqa: TC001


class SessionConfig(BaseModel):
    """Behaviour of a :class:`~mcpbridge.core.conversation.session.ChatSession`.

    ``max_tool_rounds`` bounds how many waves of tool calls one human turn
    may trigger. ``1`` dispatches only the calls in the first reply.
    """

    system_prompt: str | None = None
    max_tool_rounds: int = Field(default=5, ge=1)


class SessionState(str, Enum):
    """Where a session is in its turn loop."""

    IDLE = "idle"
    AWAITING_COMPLETION = "awaiting_completion"
    TOOL_DISPATCH = "tool_dispatch"


@dataclass
class ToolOutcome:
    """How one tool invocation went.

    ``error`` is set for transport, protocol and decode failures, and for
    tool-level failures reported as error content.
    """

    invocation: ToolCallInvocation
    text: str
    error: BridgeError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def follow_up(self) -> str:
        """The message fed back to the model about this invocation."""
        if self.ok:
            return f"Tool '{self.invocation.name}' executed successfully. Result: {self.text}"
        return f"Tool '{self.invocation.name}' execution failed: {self.text}"


@dataclass
class TurnResult:
    """Everything one human turn added to the conversation."""

    messages: list[ChatMessage] = field(default_factory=list)
    tool_outcomes: list[ToolOutcome] = field(default_factory=list)
    unanswered_tool_calls: list[ToolCallInvocation] = field(default_factory=list)

    @property
    def replies(self) -> list[ChatMessage]:
        """Assistant messages produced during the turn, in order."""
        return [m for m in self.messages if m.role == "assistant"]

    @property
    def reply(self) -> ChatMessage:
        """The last assistant message of the turn."""
        return self.replies[-1]
