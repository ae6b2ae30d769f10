"""
Wire format of the connect handshake.

    POST <endpoint>
    Content-Length: 14

    action=connect

answered with status 200 and

    <connection id="0123456789abcdef0123456789abcdef"/>
"""

from __future__ import annotations

from typing import Dict

from httpsocket.documents import DocumentBuilder
from httpsocket.errors import MalformedIdentifierError, ProtocolError
from httpsocket.identifier import Identifier

CONNECT_ACTION = "connect"
ROOT_ELEMENT = "connection"
ID_ATTRIBUTE = "id"

REQUEST_HEADERS: Dict[str, str] = {
    "Content-Type": "application/x-www-form-urlencoded",
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
}


def encode_connect_request() -> bytes:
    return f"action={CONNECT_ACTION}".encode("ascii")


def decode_connect_response(builder: DocumentBuilder, body: bytes) -> Identifier:
    """
    Parse a handshake response body into the connection identifier.

    Raises:
        ProtocolError: invalid XML, wrong root element, missing or malformed id
    """
    root = builder.parse(body)
    if root.tag != ROOT_ELEMENT:
        raise ProtocolError(f"Unexpected root node name: {root.tag}")
    text = root.get(ID_ATTRIBUTE)
    if text is None:
        raise ProtocolError("Missing id attribute")
    try:
        return Identifier.parse(text)
    except MalformedIdentifierError as e:
        raise ProtocolError(f"Malformed id attribute: {text!r}") from e
