"""Shared error types for the protocol layer.

Four kinds of failure cross the bridge:

- :class:`TransportError` — the request never produced a usable HTTP
  response (connection refused, timeout, non-2xx status).
- :class:`ProtocolError` — a response arrived but the JSON-RPC envelope
  carries an ``error`` or is itself malformed.
- :class:`DecodeError` — the envelope is fine but the payload does not have
  the shape expected for the call that was made.
- :class:`ApplicationError` — a tool ran and reported a domain failure. On
  the wire this is a *successful* result whose content describes the failure.
"""

from __future__ import annotations

from typing import Any


class BridgeError(Exception):
    """Base error for all bridge failures."""


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------


class TransportError(BridgeError):
    """The remote endpoint could not be reached or answered with a failure status."""


class ConnectError(TransportError):
    """The remote endpoint refused or dropped the connection."""

    def __init__(self, url: str, detail: str = "") -> None:
        self.url = url
        self.detail = detail
        super().__init__(f"Cannot connect to {url}" + (f": {detail}" if detail else ""))


class RequestTimeoutError(TransportError):
    """The remote endpoint did not answer within the configured timeout."""

    def __init__(self, url: str, timeout: float | None) -> None:
        self.url = url
        self.timeout = timeout
        super().__init__(f"Request to {url} timed out after {timeout}s")


class HTTPStatusError(TransportError):
    """The remote endpoint answered with a non-success HTTP status."""

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"HTTP error {status_code}: {body}")


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


class ProtocolError(BridgeError):
    """A JSON-RPC error response, or a response that breaks the envelope rules."""

    def __init__(self, message: str, code: int | None = None, data: Any = None) -> None:
        self.code = code
        self.message = message
        self.data = data
        prefix = f"JSON-RPC error {code}: " if code is not None else "JSON-RPC protocol violation: "
        super().__init__(prefix + message)


class EmptyResponseError(ProtocolError):
    """The envelope carried neither ``result`` nor ``error``."""

    def __init__(self) -> None:
        super().__init__("empty response")


class IdMismatchError(ProtocolError):
    """The response id does not match the id of the request that was sent."""

    def __init__(self, expected: str, received: Any) -> None:
        self.expected = expected
        self.received = received
        super().__init__(f"response id {received!r} does not match request id {expected!r}")


# ---------------------------------------------------------------------------
# Decoding & application
# ---------------------------------------------------------------------------


class DecodeError(BridgeError):
    """A response body does not have the shape expected for the call."""

    def __init__(self, what: str, detail: str = "") -> None:
        self.what = what
        self.detail = detail
        super().__init__(f"Cannot decode {what}" + (f": {detail}" if detail else ""))


class ApplicationError(BridgeError):
    """A tool ran and reported a domain-level failure."""

    def __init__(self, tool_name: str, detail: str) -> None:
        self.tool_name = tool_name
        self.detail = detail
        super().__init__(detail)
