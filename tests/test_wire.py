import pytest

from httpsocket.documents import DocumentBuilderFactory
from httpsocket.errors import FaultKind, ProtocolError
from httpsocket.identifier import Identifier
from httpsocket_client.wire import decode_connect_response, encode_connect_request

from tests.conftest import VALID_ID, connection_xml


@pytest.fixture
def builder():
    return DocumentBuilderFactory().new_document_builder()


def test_connect_request_body_is_fixed_ascii():
    body = encode_connect_request()
    assert body == b"action=connect"
    assert len(body) == 14


def test_decode_valid_response(builder):
    assert decode_connect_response(builder, connection_xml()) == Identifier.parse(VALID_ID)


def test_decode_tolerates_declaration_and_children(builder):
    body = (
        b'<?xml version="1.0" encoding="UTF-8"?>\n'
        b'<connection id="' + VALID_ID.encode() + b'"><extra/></connection>'
    )
    assert decode_connect_response(builder, body) == Identifier.parse(VALID_ID)


def test_decode_wrong_root(builder):
    with pytest.raises(ProtocolError, match="Unexpected root node name: error") as exc:
        decode_connect_response(builder, b"<error/>")
    assert exc.value.kind is FaultKind.PROTOCOL


def test_decode_missing_id(builder):
    with pytest.raises(ProtocolError, match="Missing id attribute"):
        decode_connect_response(builder, b"<connection/>")


def test_decode_malformed_id(builder):
    with pytest.raises(ProtocolError, match="Malformed id attribute") as exc:
        decode_connect_response(builder, connection_xml("not-an-id"))
    assert exc.value.__cause__ is not None


@pytest.mark.parametrize("body", [b"", b"not xml", b"<connection id='x'>", b"<a></b>"])
def test_decode_rejects_malformed_xml(builder, body):
    with pytest.raises(ProtocolError):
        decode_connect_response(builder, body)


def test_builder_rejects_doctype(builder):
    body = (
        b'<!DOCTYPE connection [<!ENTITY x "' + VALID_ID.encode() + b'">]>'
        b'<connection id="&x;"/>'
    )
    with pytest.raises(ProtocolError, match="DOCTYPE"):
        builder.parse(body)


def test_factory_returns_independent_builders():
    factory = DocumentBuilderFactory()
    assert factory.new_document_builder() is not factory.new_document_builder()
