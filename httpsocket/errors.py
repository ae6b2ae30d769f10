from __future__ import annotations

from enum import Enum
from typing import Optional


class FaultKind(str, Enum):
    """Where a connect failure came from."""

    INPUT = "INPUT"            # malformed endpoint
    TRANSPORT = "TRANSPORT"    # refused, timeout, I/O, non-200 status
    PROTOCOL = "PROTOCOL"      # bad XML, wrong root, bad id
    CALLBACK = "CALLBACK"      # raised by a caller-supplied callback
    STATE = "STATE"            # closed context / client, duplicate id


class Severity(str, Enum):
    """How a fault raised inside a callback or pool task is treated."""

    RECOVERABLE = "RECOVERABLE"  # caught and logged
    FATAL = "FATAL"              # re-raised out of the worker task


# Runtime-abort signals. Swallowing these would break interpreter shutdown.
_FATAL_TYPES = (SystemExit, KeyboardInterrupt)


def classify(exc: BaseException) -> Severity:
    """Return FATAL for runtime-abort signals, RECOVERABLE for everything else."""
    if isinstance(exc, _FATAL_TYPES):
        return Severity.FATAL
    return Severity.RECOVERABLE


class HttpSocketError(Exception):
    """Base class for every fault this package raises."""
    kind: FaultKind = FaultKind.TRANSPORT


class InvalidEndpointError(HttpSocketError):
    """Raised when the endpoint is not an absolute http(s) URL."""
    kind = FaultKind.INPUT


class TransportError(HttpSocketError):
    """Raised on I/O faults and on any status code other than 200."""
    kind = FaultKind.TRANSPORT

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ConnectTimeoutError(TransportError):
    """Raised when the connect or read timeout elapses."""


class ProtocolError(HttpSocketError):
    """Raised when the handshake response is not a valid <connection id="..."/> document."""
    kind = FaultKind.PROTOCOL


class MalformedIdentifierError(ValueError):
    """Raised when text is not a valid 128-bit identifier."""


class ContextClosedError(HttpSocketError):
    """Raised when using a closed context, client or pool."""
    kind = FaultKind.STATE


class DuplicateSocketError(HttpSocketError):
    """Raised when a socket id is already registered."""
    kind = FaultKind.STATE
