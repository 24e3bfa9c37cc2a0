"""Chat messages and completion results.

These mirror the wire format of the ``/api/chat`` endpoint closely enough
that ``model_dump`` produces a valid request message, while keeping the
orchestration code free of raw dicts.
"""

import json
from typing import Any, Literal

from pydantic import BaseModel, model_validator

# ---------------------------------------------------------------------------
# Tool invocations
# ---------------------------------------------------------------------------


class ToolCallInvocation(BaseModel):
    """A tool the model asked to run.

    ``arguments`` stays opaque here; the tool that receives it parses it.
    On the wire an invocation is nested as ``{"function": {"name", "arguments"}}``.
    """

    name: str
    arguments: Any = None

    @model_validator(mode="before")
    @classmethod
    def _unwrap_function(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("function"), dict):
            return data["function"]
        return data

    def to_wire(self) -> dict[str, Any]:
        return {"function": {"name": self.name, "arguments": self.arguments}}

    def decoded_arguments(self) -> Any:
        """Return the arguments, decoding them first if the model sent a JSON string."""
        if isinstance(self.arguments, str):
            try:
                return json.loads(self.arguments)
            except json.JSONDecodeError:
                return self.arguments
        return self.arguments


# ---------------------------------------------------------------------------
# Chat messages
# ---------------------------------------------------------------------------


class ChatMessage(BaseModel):
    """A single message in a conversation.

    Only assistant messages may carry ``tool_calls``.
    """

    role: Literal["system", "user", "assistant"]
    content: str = ""
    tool_calls: list[ToolCallInvocation] | None = None

    @model_validator(mode="after")
    def _only_assistant_calls_tools(self) -> "ChatMessage":
        if self.tool_calls and self.role != "assistant":
            msg = f"{self.role} messages cannot carry tool calls"
            raise ValueError(msg)
        return self

    @classmethod
    def system(cls, text: str) -> "ChatMessage":
        return cls(role="system", content=text)

    @classmethod
    def user(cls, text: str) -> "ChatMessage":
        return cls(role="user", content=text)

    @classmethod
    def assistant(
        cls,
        text: str = "",
        tool_calls: list[ToolCallInvocation] | None = None,
    ) -> "ChatMessage":
        return cls(role="assistant", content=text, tool_calls=tool_calls or None)

    def to_wire(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"role": self.role, "content": self.content}
        if self.tool_calls:
            payload["tool_calls"] = [call.to_wire() for call in self.tool_calls]
        return payload


# ---------------------------------------------------------------------------
# Completion responses
# ---------------------------------------------------------------------------


class ChatResponse(BaseModel):
    """Response body of the ``/api/chat`` endpoint (non-streaming)."""

    model: str = ""
    created_at: str = ""
    message: ChatMessage
    done: bool
    total_duration: int | None = None
    load_duration: int | None = None
    prompt_eval_count: int | None = None
    prompt_eval_duration: int | None = None
    eval_count: int | None = None
    eval_duration: int | None = None


class CompletionTurn(BaseModel):
    """What the model produced for one completion request."""

    content: str = ""
    tool_calls: list[ToolCallInvocation] = []
    done: bool = True
    model: str = ""
    metrics: dict[str, int] = {}

    @classmethod
    def from_response(cls, response: ChatResponse) -> "CompletionTurn":
        timing = response.model_dump(
            include={
                "total_duration",
                "load_duration",
                "prompt_eval_count",
                "prompt_eval_duration",
                "eval_count",
                "eval_duration",
            },
            exclude_none=True,
        )
        return cls(
            content=response.message.content,
            tool_calls=list(response.message.tool_calls or []),
            done=response.done,
            model=response.model,
            metrics=timing,
        )

    @property
    def message(self) -> ChatMessage:
        """The assistant message to record in history."""
        return ChatMessage.assistant(self.content, list(self.tool_calls) or None)

    @property
    def has_tool_calls(self) -> bool:
        return bool(self.tool_calls)
