"""Conversation orchestration — the human turn / tool call loop."""

from mcpbridge.core.conversation.models import SessionConfig, SessionState, ToolOutcome, TurnResult
from mcpbridge.core.conversation.session import ChatSession, Completer, ToolCaller

__all__ = [
    "ChatSession",
    "Completer",
    "SessionConfig",
    "SessionState",
    "ToolCaller",
    "ToolOutcome",
    "TurnResult",
]
