"""
XML scheme documents.

Layout (two spaces per level, CRLF line endings by default)::

    <?xml version="1.0" encoding="UTF-8"?>
    <scheme>
      <nodes>
        <node>
          <name>TEXT</name>
          <description>TEXT</description>
          <parents>
            <parent>PARENT_NAME</parent>
          </parents>
        </node>
      </nodes>
    </scheme>

Parents are referenced by name and resolved against the scheme that is
being loaded, so every parent has to precede its children in the
document. `InformationScheme.halfsort_hierarchically` produces such an
order before saving.
"""

from __future__ import annotations

import io
import logging
import xml.etree.ElementTree as ET
from typing import TYPE_CHECKING, Dict, Iterator, Optional, TextIO, Tuple
from xml.parsers.expat import errors as expat_errors
from xml.sax.saxutils import escape

from ..config import XmlSettings, get_settings
from ..errors import MalformedDocumentError, SchemeDependencyError

if TYPE_CHECKING:
    from ..graph.information import InformationComponent
    from ..graph.information_scheme import InformationScheme

logger = logging.getLogger(__name__)

XML_SCHEME = "scheme"
XML_NODES = "nodes"
XML_NODE = "node"
XML_NAME = "name"
XML_DESCRIPTION = "description"
XML_PARENTS = "parents"
XML_PARENT = "parent"

XML_ERR_EXPECTED_START_DOCUMENT = "Unexpected XML start!"
XML_ERR_EXPECTED_END_DOCUMENT = "Unexpected XML end!"
XML_ERR_UNEXPECTED_ELEMENT = "Unexpected XML element!"
XML_ERR_EXPECTED_START_ELEMENT = XML_ERR_UNEXPECTED_ELEMENT + " Start element expected"
XML_ERR_EXPECTED_END_ELEMENT = XML_ERR_UNEXPECTED_ELEMENT + " End element expected"

_START = "start"
_END = "end"

_TRUNCATION_ERRORS = {
    expat_errors.XML_ERROR_NO_ELEMENTS,
    expat_errors.XML_ERROR_UNCLOSED_TOKEN,
    expat_errors.XML_ERROR_JUNK_AFTER_DOC_ELEMENT,
}


def _unexpected_tag(tag: str) -> MalformedDocumentError:
    return MalformedDocumentError(f"{XML_ERR_UNEXPECTED_ELEMENT} {tag} tag expected!", tag=tag)


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------

# A raw CR would be folded into LF by the reading parser.
_TEXT_ENTITIES = {"\r": "&#13;"}


def _text_element(tag: str, text: Optional[str]) -> str:
    return f"<{tag}>{escape(text or '', _TEXT_ENTITIES)}</{tag}>"


def write_xml(
    scheme: InformationScheme,
    stream: TextIO,
    *,
    settings: Optional[XmlSettings] = None,
) -> None:
    """
    Write `scheme` to a text stream, members in scheme order.

    Line endings and indentation only ever go between elements; text
    content is written verbatim apart from escaping.

    No check is made that parents precede their children; a scheme that
    is not hierarchically ordered is written fine but fails to load.
    """
    if settings is None:
        settings = get_settings().xml

    eol = settings.line_ending

    def line(level: int, content: str) -> None:
        stream.write(settings.indent * level + content + eol)

    stream.write(f'<?xml version="1.0" encoding="{settings.encoding}"?>{eol}')
    line(0, f"<{XML_SCHEME}>")
    if not len(scheme):
        line(1, f"<{XML_NODES}></{XML_NODES}>")
    else:
        line(1, f"<{XML_NODES}>")
        for component in scheme:
            line(2, f"<{XML_NODE}>")
            line(3, _text_element(XML_NAME, component.name))
            line(3, _text_element(XML_DESCRIPTION, component.description))
            parents = component.parents
            if not parents:
                line(3, f"<{XML_PARENTS}></{XML_PARENTS}>")
            else:
                line(3, f"<{XML_PARENTS}>")
                for parent in parents:
                    line(4, _text_element(XML_PARENT, getattr(parent, "name", None)))
                line(3, f"</{XML_PARENTS}>")
            line(2, f"</{XML_NODE}>")
        line(1, f"</{XML_NODES}>")
    line(0, f"</{XML_SCHEME}>")
    logger.info("Wrote scheme document with %d nodes", len(scheme))


def dumps_xml(scheme: InformationScheme, *, settings: Optional[XmlSettings] = None) -> str:
    buffer = io.StringIO(newline="")
    write_xml(scheme, buffer, settings=settings)
    return buffer.getvalue()


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------


class _EventCursor:
    """
    Forward-only view on start/end element events of a document.

    `current` is the event the reader is positioned on, None once the
    document has ended.
    """

    def __init__(self, stream: TextIO, chunk_size: int) -> None:
        self._events = self._iter_events(stream, chunk_size)
        self._seen_any = False
        self.current: Optional[Tuple[str, ET.Element]] = None

    def _iter_events(self, stream: TextIO, chunk_size: int) -> Iterator[Tuple[str, ET.Element]]:
        parser = ET.XMLPullParser(events=(_START, _END))
        try:
            for chunk in iter(lambda: stream.read(chunk_size), ""):
                parser.feed(chunk)
                yield from parser.read_events()
            parser.close()
            yield from parser.read_events()
        except ET.ParseError as exc:
            raise self._translate(exc) from exc

    def _translate(self, exc: ET.ParseError) -> MalformedDocumentError:
        if not self._seen_any:
            return MalformedDocumentError(XML_ERR_EXPECTED_START_DOCUMENT)
        if expat_errors.messages.get(exc.code) in _TRUNCATION_ERRORS:
            return MalformedDocumentError(XML_ERR_EXPECTED_END_DOCUMENT)
        return MalformedDocumentError(f"Malformed XML document: {exc}")

    def advance(self) -> Optional[Tuple[str, ET.Element]]:
        self.current = next(self._events, None)
        if self.current is not None:
            self._seen_any = True
        return self.current

    # Positioning helpers -------------------------------------------------

    def next_tag(self) -> Tuple[str, ET.Element]:
        """Move to the next start or end element; running out is an error."""
        event = self.advance()
        if event is None:
            raise MalformedDocumentError(XML_ERR_EXPECTED_END_DOCUMENT)
        return event

    def expect_start(self, tag: str) -> ET.Element:
        if self.current is None or self.current[0] != _START:
            raise MalformedDocumentError(XML_ERR_EXPECTED_START_ELEMENT, tag=tag)
        if self.current[1].tag != tag:
            raise _unexpected_tag(tag)
        return self.current[1]

    def expect_end(self, tag: str) -> ET.Element:
        if self.current is None or self.current[0] != _END:
            raise MalformedDocumentError(XML_ERR_EXPECTED_END_ELEMENT, tag=tag)
        if self.current[1].tag != tag:
            raise _unexpected_tag(tag)
        return self.current[1]

    def element_text(self, tag: str) -> str:
        """
        Read a text-only element the cursor is positioned on; the cursor
        ends up on its end event.
        """
        self.expect_start(tag)
        self.next_tag()
        element = self.expect_end(tag)
        return element.text or ""


def _read_node(cursor: _EventCursor, scheme: InformationScheme) -> InformationComponent:
    cursor.expect_start(XML_NODE)

    cursor.next_tag()
    name = cursor.element_text(XML_NAME)
    cursor.next_tag()
    description = cursor.element_text(XML_DESCRIPTION).strip()

    cursor.next_tag()
    cursor.expect_start(XML_PARENTS)
    parent_names: Dict[str, None] = {}
    while True:
        _, element = cursor.next_tag()
        if element.tag == XML_PARENTS:
            cursor.expect_end(XML_PARENTS)
            break
        parent_names.setdefault(cursor.element_text(XML_PARENT), None)

    component = scheme.component_factory(name, description)
    for parent_name in parent_names:
        candidates = scheme.get_by_string(parent_name, True)
        if not candidates:
            err = SchemeDependencyError(parent_name)
            logger.error("Cannot load node %r: %s", name, err)
            raise err
        component.add_parent(candidates[0])
    component.force_family_together()

    cursor.next_tag()
    node = cursor.expect_end(XML_NODE)
    node.clear()
    logger.debug("Loaded node %r with %d parents", name, len(parent_names))
    return component


def read_xml(
    stream: TextIO,
    scheme: InformationScheme,
    *,
    settings: Optional[XmlSettings] = None,
) -> InformationScheme:
    """
    Append the nodes of a scheme document to `scheme` and return it.

    Each node is added as soon as it is read, so on failure the scheme
    keeps the nodes parsed before the error.

    Raises
    ------
    SchemeDependencyError
        A parent name does not match any component loaded so far.
    MalformedDocumentError
        The document does not follow the scheme layout.
    """
    if settings is None:
        settings = get_settings().xml

    cursor = _EventCursor(stream, settings.read_chunk_size)
    if cursor.advance() is None:
        raise MalformedDocumentError(XML_ERR_EXPECTED_START_DOCUMENT)

    cursor.expect_start(XML_SCHEME)
    cursor.next_tag()
    cursor.expect_start(XML_NODES)

    count = 0
    kind, element = cursor.next_tag()
    while kind == _START and element.tag == XML_NODE:
        scheme.add(_read_node(cursor, scheme))
        count += 1
        kind, element = cursor.next_tag()

    cursor.expect_end(XML_NODES)
    cursor.next_tag()
    cursor.expect_end(XML_SCHEME)
    if cursor.advance() is not None:
        raise MalformedDocumentError(XML_ERR_EXPECTED_END_DOCUMENT)

    logger.info("Loaded %d nodes into scheme (size=%d)", count, len(scheme))
    return scheme


def loads_xml(
    text: str,
    scheme: Optional[InformationScheme] = None,
    *,
    settings: Optional[XmlSettings] = None,
) -> InformationScheme:
    """Parse a scheme document held in a string, into a new scheme by default."""
    if scheme is None:
        from ..graph.information_scheme import InformationScheme  # local import avoids cycles

        scheme = InformationScheme()
    return read_xml(io.StringIO(text), scheme, settings=settings)
