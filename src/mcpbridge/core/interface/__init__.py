"""Completion interface — chat messages and the chat endpoint client."""

from mcpbridge.core.interface.client import CompletionClient
from mcpbridge.core.interface.config import ModelConfig
from mcpbridge.core.interface.models import (
    ChatMessage,
    ChatResponse,
    CompletionTurn,
    ToolCallInvocation,
)

__all__ = [
    "ChatMessage",
    "ChatResponse",
    "CompletionClient",
    "CompletionTurn",
    "ModelConfig",
    "ToolCallInvocation",
]
