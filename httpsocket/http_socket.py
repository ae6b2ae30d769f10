from __future__ import annotations

import threading
import time
from typing import TYPE_CHECKING, Callable, List, Optional

import httpx

from httpsocket.identifier import Identifier
from httpsocket.log import get_logger

if TYPE_CHECKING:
    from httpsocket.context import HttpSocketContext

logger = get_logger(__name__)

CloseListener = Callable[["HttpSocket"], None]


class HttpSocket:
    """
    Handle for one logical connection established over HTTP.

    Created by the client after a successful handshake and then owned by
    the context it was registered with. Message exchange over the
    connection is handled elsewhere.
    """

    protocol = "http"

    def __init__(
        self,
        context: "HttpSocketContext",
        id: Identifier,
        connect_time: int,
        endpoint: httpx.URL,
    ) -> None:
        self.context = context
        self.id = id
        self.connect_time = connect_time  # Unix ms, taken just before the handshake request
        self.endpoint = endpoint
        self.close_time: Optional[int] = None
        self._close_listeners: List[CloseListener] = []
        self._lock = threading.Lock()

    @property
    def is_closed(self) -> bool:
        return self.close_time is not None

    def add_close_listener(self, listener: CloseListener) -> None:
        self._close_listeners.append(listener)

    def close(self) -> None:
        """Close the socket and drop it from its context. Safe to call twice."""
        with self._lock:
            if self.close_time is not None:
                return
            self.close_time = int(time.time() * 1000)
        logger.debug("Closing socket", extra={"socket_id": str(self.id), "endpoint": str(self.endpoint)})
        try:
            self.context.remove_socket(self)
        finally:
            for listener in list(self._close_listeners):
                try:
                    listener(self)
                except Exception:
                    logger.exception("Close listener failed for socket %s", self.id)

    def __repr__(self) -> str:
        state = "closed" if self.is_closed else "open"
        return f"HttpSocket(id={self.id}, endpoint={self.endpoint}, {state})"
