"""
httpsocket - bidirectional messaging tunnelled over HTTP request/response.

Shared pieces used by the client: socket context (registry), socket handle,
connection identifier, worker pool, XML parsing, settings and logging.
"""

__version__ = "0.1.0"

from .context import HttpSocketContext
from .errors import (
    ConnectTimeoutError,
    ContextClosedError,
    DuplicateSocketError,
    FaultKind,
    HttpSocketError,
    InvalidEndpointError,
    MalformedIdentifierError,
    ProtocolError,
    Severity,
    TransportError,
    classify,
)
from .http_socket import HttpSocket
from .identifier import Identifier

__all__ = [
    "HttpSocketContext",
    "HttpSocket",
    "Identifier",
    "FaultKind",
    "Severity",
    "classify",
    "HttpSocketError",
    "InvalidEndpointError",
    "TransportError",
    "ConnectTimeoutError",
    "ProtocolError",
    "MalformedIdentifierError",
    "ContextClosedError",
    "DuplicateSocketError",
]
