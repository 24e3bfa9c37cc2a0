"""ChatSession — drives human turns through the completion/tool-call loop.

One turn goes:

1. append the user message and ask the model for a reply;
2. append the reply; if it requests tools, run each through the tool server
   in order, and for each one ask the model again with a follow-up message
   describing the result (or failure), appending every new reply;
3. repeat step 2 for tool calls requested by follow-up replies, up to
   ``max_tool_rounds`` waves.

Follow-up messages are sent with the completion request that answers them
but are not stored; history holds only user and assistant turns.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

from mcpbridge.core.conversation.models import (
    SessionConfig,
    SessionState,
    ToolOutcome,
    TurnResult,
)
from mcpbridge.core.interface.models import ChatMessage, CompletionTurn, ToolCallInvocation
from mcpbridge.protocols.errors import ApplicationError, BridgeError
from mcpbridge.utils.telemetry import (
    ATTR_MESSAGE_COUNT,
    ATTR_MODEL,
    ATTR_TOOL_CALL_COUNT,
    ATTR_TOOL_ROUND,
    get_tracer,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from mcpbridge.protocols.jsonrpc.models import CallToolResult, ToolDefinition

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)


class Completer(Protocol):
    """Anything that can produce the next assistant turn."""

    @property
    def model(self) -> str: ...

    async def complete(
        self,
        history: Sequence[ChatMessage],
        tools: list[dict[str, Any]] | None = None,
    ) -> CompletionTurn: ...


class ToolCaller(Protocol):
    """Anything that can list and execute remote tools."""

    async def list_tools(self) -> list[ToolDefinition]: ...

    async def call_tool(self, name: str, arguments: Any = None) -> CallToolResult: ...


class ChatSession:
    """A single conversation with a model that can call remote tools.

    The session owns its history exclusively and runs one turn at a time.

    Usage::

        async with CompletionClient(model_cfg) as llm, MCPClient(mcp_cfg) as mcp:
            session = await ChatSession.from_server(llm, mcp)
            result = await session.send("What is in /tmp/allowed_files/a.txt?")
            print(result.reply.content)
    """

    def __init__(
        self,
        completion: Completer,
        tools_client: ToolCaller,
        tools: Sequence[ToolDefinition] = (),
        config: SessionConfig | None = None,
    ) -> None:
        self._completion = completion
        self._tools_client = tools_client
        self.available_tools: list[ToolDefinition] = list(tools)
        self.config = config or SessionConfig()
        self._manifest = [tool.to_function_schema() for tool in self.available_tools] or None
        self._history: list[ChatMessage] = []
        self._state = SessionState.IDLE
        if self.config.system_prompt:
            self._history.append(ChatMessage.system(self.config.system_prompt))

    @classmethod
    async def from_server(
        cls,
        completion: Completer,
        tools_client: ToolCaller,
        config: SessionConfig | None = None,
    ) -> ChatSession:
        """Create a session exposing every tool the server advertises."""
        tools = await tools_client.list_tools()
        return cls(completion, tools_client, tools, config)

    @property
    def model(self) -> str:
        return self._completion.model

    @property
    def history(self) -> list[ChatMessage]:
        """A copy of the conversation so far."""
        return list(self._history)

    @property
    def state(self) -> SessionState:
        return self._state

    async def send(self, text: str) -> TurnResult:
        """Run one human turn to completion.

        Raises:
            ValueError: *text* is empty.
            RuntimeError: another turn is still in progress.
            TransportError: the completion endpoint could not be reached.
            DecodeError: the completion endpoint answered with a bad body.
        """
        if not text or not text.strip():
            msg = "Message must not be empty"
            raise ValueError(msg)
        if self._state is not SessionState.IDLE:
            msg = f"Cannot start a turn while session is {self._state.value}"
            raise RuntimeError(msg)

        result = TurnResult()
        with _tracer.start_as_current_span("session.send") as span:
            span.set_attribute(ATTR_MODEL, self.model)
            try:
                self._record(result, ChatMessage.user(text))
                turn = await self._complete()
                self._record(result, turn.message)
                await self._run_tool_rounds(turn.tool_calls, result)
            finally:
                self._state = SessionState.IDLE
            span.set_attribute(ATTR_MESSAGE_COUNT, len(result.messages))
            span.set_attribute(ATTR_TOOL_CALL_COUNT, len(result.tool_outcomes))
        return result

    async def _run_tool_rounds(
        self,
        pending: list[ToolCallInvocation],
        result: TurnResult,
    ) -> None:
        rounds = 0
        while pending and rounds < self.config.max_tool_rounds:
            rounds += 1
            next_wave: list[ToolCallInvocation] = []
            with _tracer.start_as_current_span("session.tool_round") as span:
                span.set_attribute(ATTR_TOOL_ROUND, rounds)
                for invocation in pending:
                    outcome = await self._dispatch(invocation)
                    result.tool_outcomes.append(outcome)
                    follow_up = await self._complete(ChatMessage.user(outcome.follow_up))
                    self._record(result, follow_up.message)
                    next_wave.extend(follow_up.tool_calls)
            pending = next_wave

        if pending:
            logger.warning(
                "Stopped after %d tool round(s); %d tool call(s) left unanswered",
                rounds,
                len(pending),
            )
            result.unanswered_tool_calls.extend(pending)

    async def _dispatch(self, invocation: ToolCallInvocation) -> ToolOutcome:
        """Run one invocation on the tool server, folding failures into the outcome."""
        self._state = SessionState.TOOL_DISPATCH
        logger.debug("Calling tool %s", invocation.name)
        try:
            called = await self._tools_client.call_tool(
                invocation.name, invocation.decoded_arguments()
            )
        except BridgeError as exc:
            logger.warning("Tool %s could not be called: %s", invocation.name, exc)
            return ToolOutcome(invocation, str(exc), exc)

        if called.is_error:
            logger.info("Tool %s reported a failure", invocation.name)
            return ToolOutcome(invocation, called.text, ApplicationError(invocation.name, called.text))
        return ToolOutcome(invocation, called.text)

    async def _complete(self, follow_up: ChatMessage | None = None) -> CompletionTurn:
        self._state = SessionState.AWAITING_COMPLETION
        messages = list(self._history)
        if follow_up is not None:
            messages.append(follow_up)
        return await self._completion.complete(messages, self._manifest)

    def _record(self, result: TurnResult, message: ChatMessage) -> None:
        self._history.append(message)
        result.messages.append(message)
