"""
Shared XML parsing facility.

One DocumentBuilderFactory lives on each socket context and is shared by
every worker thread. Each parse gets its own parser and tree builder, so
the factory itself carries no per-parse state and needs no locking.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET

from httpsocket.errors import ProtocolError


class _NoDoctypeTreeBuilder(ET.TreeBuilder):
    """TreeBuilder that refuses DTDs, so no entity expansion happens"""

    def doctype(self, name, pubid, system):
        raise ProtocolError(f"DOCTYPE not allowed: {name}")


class DocumentBuilder:
    """Parses one well-formed XML document into its root element"""

    def parse(self, data: bytes) -> ET.Element:
        parser = ET.XMLParser(target=_NoDoctypeTreeBuilder())
        try:
            parser.feed(data)
            return parser.close()
        except ET.ParseError as e:
            raise ProtocolError(f"Invalid XML: {e}") from e


class DocumentBuilderFactory:

    def new_document_builder(self) -> DocumentBuilder:
        return DocumentBuilder()
