import logging
import threading
from typing import Callable, List

import httpx
import pytest

from httpsocket.config import ClientSettings
from httpsocket_client import HttpSocketClient


VALID_ID = "0123456789abcdef0123456789abcdef"


def connection_xml(id_text: str = VALID_ID) -> bytes:
    return f'<connection id="{id_text}"/>'.encode("ascii")


class Outcome:
    """Records on_connect / on_error calls for one connect()"""

    def __init__(self) -> None:
        self.sockets: list = []
        self.errors: list = []
        self.done = threading.Event()
        self._lock = threading.Lock()

    def on_connect(self, socket) -> None:
        with self._lock:
            self.sockets.append(socket)
        self.done.set()

    def on_error(self, fault) -> None:
        with self._lock:
            self.errors.append(fault)
        self.done.set()

    @property
    def calls(self) -> int:
        return len(self.sockets) + len(self.errors)

    def wait(self, timeout: float = 5.0) -> None:
        assert self.done.wait(timeout), "no callback fired"


class ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.records: List[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


@pytest.fixture
def fast_settings() -> ClientSettings:
    return ClientSettings(connect_timeout=0.5, read_timeout=0.5, max_workers=32)


@pytest.fixture
def make_client(fast_settings):
    """Build clients over an httpx.MockTransport; all are closed and drained at teardown."""
    clients = []

    def factory(handler: Callable[[httpx.Request], httpx.Response], settings: ClientSettings = None) -> HttpSocketClient:
        client = HttpSocketClient(settings or fast_settings, transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.close()
        client._executors.dispose(wait=True)


@pytest.fixture
def client_log():
    logger = logging.getLogger("httpsocket_client.client")
    handler = ListHandler()
    level = logger.level
    logger.setLevel(logging.DEBUG)
    logger.addHandler(handler)
    yield handler.records
    logger.removeHandler(handler)
    logger.setLevel(level)


def drain(client: HttpSocketClient) -> None:
    """Wait for every queued handshake to finish."""
    client._executors.dispose(wait=True)
