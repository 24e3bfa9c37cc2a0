"""Model configuration — which chat endpoint and model to talk to."""

from typing import Any

from pydantic import BaseModel, Field


class ModelConfig(BaseModel):
    """Configuration for the completion endpoint.

    ``temperature`` and ``max_tokens`` are sent as the endpoint's
    ``options.temperature`` and ``options.num_predict`` when set.
    """

    model: str = "llama3"
    base_url: str = "http://localhost:11434"
    temperature: float | None = None
    max_tokens: int | None = None
    timeout: float = 120.0
    extra_options: dict[str, Any] = Field(default_factory=lambda: dict[str, Any]())

    @property
    def chat_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/api/chat"

    def options(self) -> dict[str, Any]:
        """Sampling options for the request payload (may be empty)."""
        opts: dict[str, Any] = dict(self.extra_options)
        if self.temperature is not None:
            opts["temperature"] = self.temperature
        if self.max_tokens is not None:
            opts["num_predict"] = self.max_tokens
        return opts
