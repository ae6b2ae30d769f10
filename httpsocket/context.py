from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Callable, Dict, List, Optional

from httpsocket.documents import DocumentBuilder, DocumentBuilderFactory
from httpsocket.errors import ContextClosedError, DuplicateSocketError
from httpsocket.identifier import Identifier
from httpsocket.log import get_logger

if TYPE_CHECKING:
    from httpsocket.http_socket import HttpSocket

logger = get_logger(__name__)

NewSocketListener = Callable[["HttpSocket"], None]


class HttpSocketContext:
    """
    Owns every live HttpSocket and the shared XML document-builder factory.

    Registration, lookup and close may be called from any thread.
    """

    def __init__(self) -> None:
        self.builder_factory = DocumentBuilderFactory()
        self._sockets: Dict[Identifier, "HttpSocket"] = {}
        self._new_socket_listeners: List[NewSocketListener] = []
        self._lock = threading.RLock()
        self._closed = False

    def new_document_builder(self) -> DocumentBuilder:
        return self.builder_factory.new_document_builder()

    # ========================================
    #           SOCKET REGISTRY
    # ========================================

    def new_identifier(self) -> Identifier:
        """Random identifier not used by any registered socket"""
        with self._lock:
            while True:
                candidate = Identifier.random()
                if candidate not in self._sockets:
                    return candidate

    def add_socket(self, socket: "HttpSocket") -> None:
        """
        Register a socket and notify new-socket listeners.

        Raises:
            ContextClosedError: context already closed (the socket is closed too)
            DuplicateSocketError: a socket with the same id is registered
        """
        with self._lock:
            closed = self._closed
            if not closed:
                if socket.id in self._sockets:
                    raise DuplicateSocketError(f"Duplicate socket id: {socket.id}")
                self._sockets[socket.id] = socket
                listeners = list(self._new_socket_listeners)
        if closed:
            socket.close()
            raise ContextClosedError("Socket context is closed")

        for listener in listeners:
            try:
                listener(socket)
            except Exception:
                logger.exception("New-socket listener failed for socket %s", socket.id)

    def remove_socket(self, socket: "HttpSocket") -> None:
        with self._lock:
            if self._sockets.get(socket.id) is socket:
                del self._sockets[socket.id]

    def get_socket(self, id: Identifier) -> Optional["HttpSocket"]:
        with self._lock:
            return self._sockets.get(id)

    def get_sockets(self) -> Dict[Identifier, "HttpSocket"]:
        """Snapshot of the registered sockets"""
        with self._lock:
            return dict(self._sockets)

    def add_new_socket_listener(self, listener: NewSocketListener) -> None:
        with self._lock:
            self._new_socket_listeners.append(listener)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sockets)

    # ========================================
    #           LIFECYCLE
    # ========================================

    @property
    def is_closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """
        Close the context and every registered socket. Safe to call twice.

        Every socket gets a close attempt; the first failure is re-raised
        after all of them were tried.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            sockets = list(self._sockets.values())

        first_error: Optional[Exception] = None
        for socket in sockets:
            try:
                socket.close()
            except Exception as e:
                logger.error("Error closing socket %s: %s", socket.id, e)
                if first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error

    def __enter__(self) -> "HttpSocketContext":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
