"""CompletionClient — async client for an Ollama-style ``/api/chat`` endpoint.

Sends the whole conversation plus an optional tool manifest in one
non-streaming request and converts the reply into a :class:`CompletionTurn`.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import httpx
from pydantic import ValidationError

from mcpbridge.core.interface.config import ModelConfig
from mcpbridge.core.interface.models import ChatMessage, ChatResponse, CompletionTurn
from mcpbridge.protocols.errors import DecodeError
from mcpbridge.protocols.http import post_json
from mcpbridge.utils.telemetry import (
    ATTR_MESSAGE_COUNT,
    ATTR_MODEL,
    ATTR_TOOL_CALL_COUNT,
    get_tracer,
)

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)


class CompletionClient:
    """Async context manager wrapping the chat endpoint.

    Usage::

        async with CompletionClient(ModelConfig(model="llama3")) as client:
            turn = await client.complete([ChatMessage.user("hi")])
    """

    def __init__(
        self,
        config: ModelConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or ModelConfig()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def model(self) -> str:
        return self.config.model

    async def __aenter__(self) -> CompletionClient:
        self._client = httpx.AsyncClient(transport=self._transport)
        return self

    async def __aexit__(self, *_: object) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            msg = "CompletionClient must be used as an async context manager"
            raise RuntimeError(msg)
        return self._client

    async def complete(
        self,
        history: Sequence[ChatMessage],
        tools: list[dict[str, Any]] | None = None,
    ) -> CompletionTurn:
        """Request the next assistant turn for *history*.

        Args:
            history: The full ordered conversation.
            tools: Optional tool manifest in function-schema format.

        Raises:
            TransportError: connection, timeout or HTTP status failure.
            DecodeError: the body is not a valid chat response.
        """
        with _tracer.start_as_current_span("completion.complete") as span:
            span.set_attribute(ATTR_MODEL, self.config.model)
            span.set_attribute(ATTR_MESSAGE_COUNT, len(history))

            response = await post_json(
                self._http(),
                self.config.chat_url,
                self.build_payload(history, tools),
                timeout=self.config.timeout,
            )
            turn = self._parse_response(response)

            span.set_attribute(ATTR_TOOL_CALL_COUNT, len(turn.tool_calls))
            return turn

    def build_payload(
        self,
        history: Sequence[ChatMessage],
        tools: list[dict[str, Any]] | None = None,
    ) -> dict[str, Any]:
        """Build the request body; ``stream`` is always ``False``."""
        payload: dict[str, Any] = {
            "model": self.config.model,
            "messages": [message.to_wire() for message in history],
            "stream": False,
        }
        if tools:
            payload["tools"] = tools
        options = self.config.options()
        if options:
            payload["options"] = options
        return payload

    @staticmethod
    def _parse_response(response: httpx.Response) -> CompletionTurn:
        try:
            body = response.json()
        except ValueError as exc:
            raise DecodeError("chat response", f"body is not JSON: {exc}") from exc
        try:
            parsed = ChatResponse.model_validate(body)
        except ValidationError as exc:
            raise DecodeError("chat response", str(exc)) from exc

        if not parsed.done:
            logger.warning("Chat response for %s arrived with done=false", parsed.model)
        return CompletionTurn.from_response(parsed)
