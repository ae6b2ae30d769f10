#!/usr/bin/env python3
"""
Client side of bidirectional messaging over HTTP.

HttpSocketClient.connect() runs the connect handshake on a worker thread:
one POST of "action=connect", answered by <connection id="..."/>. The
resulting HttpSocket is registered with the client (which is its socket
context) and handed to on_connect. Any failure goes to on_error instead.
Exactly one of the two callbacks fires per connect() call.
"""

from __future__ import annotations

import time
from typing import Any, Callable, Optional

import httpx

from httpsocket.config import ClientSettings, load_settings
from httpsocket.context import HttpSocketContext
from httpsocket.errors import (
    ConnectTimeoutError,
    ContextClosedError,
    InvalidEndpointError,
    Severity,
    TransportError,
    classify,
)
from httpsocket.executors import Executors
from httpsocket.http_socket import HttpSocket
from httpsocket.log import get_logger

from .wire import REQUEST_HEADERS, decode_connect_response, encode_connect_request

logger = get_logger(__name__)

OnConnect = Callable[[HttpSocket], Any]
OnError = Callable[[BaseException], Any]


class HttpSocketClient(HttpSocketContext):
    """Client component for bi-directional messaging over HTTP."""

    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """
        Args:
            settings: Timeouts and pool sizing; load_settings() when omitted.
            transport: httpx transport used for every handshake (tests, proxies).
        """
        super().__init__()
        self.settings = settings if settings is not None else load_settings()
        self._transport = transport
        self._executors = Executors(
            max_workers=self.settings.max_workers,
            thread_name_prefix=self.settings.thread_name_prefix,
        )

    def close(self) -> None:
        try:
            super().close()
        finally:
            self._executors.dispose()

    def connect(
        self,
        endpoint: str,
        on_connect: Optional[OnConnect] = None,
        on_error: Optional[OnError] = None,
    ) -> None:
        """
        Asynchronously connects.

        Returns immediately. The outcome arrives on a pool thread through
        exactly one of on_connect(socket) or on_error(fault); either may be
        None, in which case that outcome is only logged.

        Raises:
            ContextClosedError: the client has been closed
        """
        if self.is_closed:
            raise ContextClosedError("HttpSocketClient is closed")
        self._executors.submit(lambda: self._run_connect(endpoint, on_connect, on_error))

    # ========================================
    #           HANDSHAKE (pool thread)
    # ========================================

    def _run_connect(
        self,
        endpoint: str,
        on_connect: Optional[OnConnect],
        on_error: Optional[OnError],
    ) -> None:
        try:
            socket = self._handshake(endpoint)
        except BaseException as fault:
            self._dispatch_error(on_error, fault)
            if classify(fault) is Severity.FATAL:
                raise
            return
        # Registered: success is final from here on
        self._dispatch_connect(on_connect, socket)

    def _handshake(self, endpoint: str) -> HttpSocket:
        body = encode_connect_request()
        connect_time = int(time.time() * 1000)
        url = _parse_endpoint(endpoint)

        timeout = httpx.Timeout(self.settings.read_timeout, connect=self.settings.connect_timeout)
        headers = dict(REQUEST_HEADERS, **{"User-Agent": self.settings.user_agent})
        try:
            with httpx.Client(transport=self._transport, follow_redirects=False, timeout=timeout) as http:
                response = http.post(url, content=body, headers=headers)
        except httpx.TimeoutException as e:
            raise ConnectTimeoutError(f"Timed out connecting to {url}: {e}") from e
        except httpx.HTTPError as e:
            raise TransportError(f"Error connecting to {url}: {e}") from e

        logger.debug("Got connection with response: %s", response.status_code, extra={"endpoint": str(url)})
        if response.status_code != 200:
            raise TransportError(f"Unexpected response code: {response.status_code}", status_code=response.status_code)

        socket_id = decode_connect_response(self.new_document_builder(), response.content)
        logger.debug("Got id = %s", socket_id, extra={"endpoint": str(url)})

        socket = HttpSocket(self, socket_id, connect_time, url)
        logger.debug("Adding socket", extra={"socket_id": str(socket_id), "endpoint": str(url)})
        try:
            self.add_socket(socket)
        except BaseException:
            socket.close()
            raise
        return socket

    def _dispatch_connect(self, on_connect: Optional[OnConnect], socket: HttpSocket) -> None:
        if on_connect is None:
            logger.debug("No on_connect: %s", socket)
            return
        logger.debug("Calling on_connect: %s", socket)
        try:
            on_connect(socket)
        except BaseException as e:
            if classify(e) is Severity.FATAL:
                raise
            logger.exception("on_connect failed for %s", socket)

    def _dispatch_error(self, on_error: Optional[OnError], fault: BaseException) -> None:
        if on_error is None:
            logger.debug("No on_error", exc_info=fault)
            return
        logger.debug("Calling on_error", exc_info=fault)
        try:
            on_error(fault)
        except BaseException as e:
            # Raised while fault is being handled, so e.__context__ keeps it
            if classify(e) is Severity.FATAL:
                raise
            logger.exception("on_error failed")


def _parse_endpoint(endpoint: str) -> httpx.URL:
    """Absolute http(s) URL or InvalidEndpointError"""
    try:
        url = httpx.URL(endpoint)
    except (httpx.InvalidURL, TypeError) as e:
        raise InvalidEndpointError(f"Malformed endpoint: {endpoint!r}") from e
    if url.scheme not in ("http", "https") or not url.host:
        raise InvalidEndpointError(f"Endpoint must be an absolute http(s) URL: {endpoint!r}")
    return url
