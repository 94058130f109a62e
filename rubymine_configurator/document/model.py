"""In-memory XML document model for IDE configuration files.

Documents are parsed into a materialized ``ElementTree`` tree (comments and
processing instructions included) and re-serialized with a fixed 2-space
indentation. Attribute order and the literal value of every attribute and
text node survive the round trip; insignificant whitespace does not.
The declaration, DOCTYPE, comments and processing instructions outside the
root element are kept verbatim.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

INDENT = "  "
DEFAULT_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

_DECLARATION = re.compile(r"\A\ufeff?\s*(<\?xml\s.*?\?>)", re.DOTALL)
_DOCTYPE = r"<!DOCTYPE[^\[>]*(?:\[.*?\]\s*)?>"
# Comments, processing instructions and the DOCTYPE between the declaration and the root
_PROLOG_ITEM = re.compile(r"\s*(<!--.*?-->|<\?.*?\?>|" + _DOCTYPE + ")", re.DOTALL)
# Comments and processing instructions after the root end tag, up to end of text
_EPILOG = re.compile(r"(?:\s*(?:<!--(?:(?!-->).)*-->|<\?(?:(?!\?>).)*\?>))+\s*\Z", re.DOTALL)
_MISC_ITEM = re.compile(r"<!--.*?-->|<\?.*?\?>", re.DOTALL)
_POSITION_SUFFIX = re.compile(r": line \d+, column \d+$")


class MalformedDocument(Exception):
    """Raised when input text is not well-formed XML."""

    def __init__(self, message: str, line: int | None = None, column: int | None = None) -> None:
        self.line = line
        self.column = column
        self.position = (
            f"line {line}, column {column}" if line is not None else "unknown position"
        )
        super().__init__(f"{message} ({self.position})")


@dataclass
class Document:
    """A parsed or synthesized configuration document."""

    root: ET.Element
    declaration: str | None = None
    prolog: list[str] = field(default_factory=list)
    epilog: list[str] = field(default_factory=list)


def _split_prolog(text: str) -> tuple[str | None, list[str]]:
    declaration = None
    pos = 0
    match = _DECLARATION.match(text)
    if match:
        declaration = match.group(1)
        pos = match.end()

    prolog: list[str] = []
    while True:
        item = _PROLOG_ITEM.match(text, pos)
        if item is None:
            break
        prolog.append(item.group(1))
        pos = item.end()
    return declaration, prolog


def _split_epilog(text: str) -> list[str]:
    match = _EPILOG.search(text)
    if match is None:
        return []
    return _MISC_ITEM.findall(match.group(0))


def parse(text: str) -> Document:
    """Parse *text* into a Document.

    Raises MalformedDocument on any well-formedness error; no partial
    recovery is attempted.
    """
    if not text.strip():
        raise MalformedDocument("document is empty", 1, 0)

    parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True, insert_pis=True))
    try:
        parser.feed(text)
        root = parser.close()
    except ET.ParseError as e:
        line, column = e.position
        reason = _POSITION_SUFFIX.sub("", str(e))
        raise MalformedDocument(f"not well-formed XML: {reason}", line, column) from e

    declaration, prolog = _split_prolog(text)
    epilog = _split_epilog(text)
    logger.debug(
        "parsed <%s> document (%d prolog, %d epilog items)", root.tag, len(prolog), len(epilog)
    )
    return Document(root=root, declaration=declaration, prolog=prolog, epilog=epilog)


def synthesize(root_tag: str, root_attributes: dict[str, str] | None = None) -> Document:
    """Build an empty document holding only a root element."""
    return Document(
        root=ET.Element(root_tag, dict(root_attributes or {})),
        declaration=DEFAULT_DECLARATION,
    )


def serialize(document: Document) -> str:
    """Render *document* as text with deterministic indentation.

    Re-indents the tree in place; the document must not be mutated afterwards.
    """
    ET.indent(document.root, space=INDENT)
    body = ET.tostring(document.root, encoding="unicode", short_empty_elements=True)
    parts = []
    if document.declaration:
        parts.append(document.declaration)
    parts.extend(document.prolog)
    parts.append(body)
    parts.extend(document.epilog)
    return "\n".join(parts) + "\n"


def _tag_name(element: ET.Element) -> str:
    # Comment and ProcessingInstruction nodes carry a factory function as tag
    tag = element.tag
    return tag if isinstance(tag, str) else getattr(tag, "__name__", str(tag))


def canonical(element: ET.Element) -> tuple:
    """Structural fingerprint of *element*: tags, ordered attributes, text, children."""
    return (
        _tag_name(element),
        tuple(element.attrib.items()),
        (element.text or "").strip(),
        (element.tail or "").strip(),
        tuple(canonical(child) for child in element),
    )
