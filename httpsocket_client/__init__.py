"""
httpsocket_client - client for asynchronous bidirectional messaging over HTTP.

    from httpsocket_client import HttpSocketClient

    with HttpSocketClient() as client:
        client.connect("http://localhost:8080/connect", on_connect, on_error)
"""

from .client import HttpSocketClient
from .wire import decode_connect_response, encode_connect_request

__all__ = ["HttpSocketClient", "decode_connect_response", "encode_connect_request"]
