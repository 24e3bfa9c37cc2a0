"""Protocol layer — JSON-RPC tool protocol and the shared error taxonomy."""

from mcpbridge.protocols.errors import (
    ApplicationError,
    BridgeError,
    ConnectError,
    DecodeError,
    EmptyResponseError,
    HTTPStatusError,
    IdMismatchError,
    ProtocolError,
    RequestTimeoutError,
    TransportError,
)

__all__ = [
    "ApplicationError",
    "BridgeError",
    "ConnectError",
    "DecodeError",
    "EmptyResponseError",
    "HTTPStatusError",
    "IdMismatchError",
    "ProtocolError",
    "RequestTimeoutError",
    "TransportError",
]
