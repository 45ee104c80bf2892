"""Rich text value model.

This module defines `RichTextValue`, the wrapper around a rich text XML
document. Rich text documents follow a DocBook 5 variant:

    - The root element is a DocBook ``section``
    - Links and embeds carry their target in an ``xlink:href`` attribute
    - Presentation attributes live in the ``ezxhtml`` namespace
    - Custom tags live in the ``ezcustom`` namespace

A value is either a parsed document or the *empty* sentinel document
(`EMPTY_VALUE`). Values are treated as immutable: engine passes that rewrite
a document (export/import) always work on a deep copy of `RichTextValue.xml`
and wrap the result in a new value. XML comments and processing instructions
are not part of the parsed tree.

The string form of a value is deterministic, and re-parsing it yields a
structurally equal document:

    ```python
    value = RichTextValue(xml_text)
    assert RichTextValue(str(value)) == value
    ```
"""

from __future__ import annotations

import copy
import xml.etree.ElementTree as ET
from typing import Any, Union

DOCBOOK_NS = "http://docbook.org/ns/docbook"
XLINK_NS = "http://www.w3.org/1999/xlink"
EZXHTML_NS = "http://ez.no/xmlns/ezpublish/docbook/xhtml"
EZCUSTOM_NS = "http://ez.no/xmlns/ezpublish/docbook/custom"

# DocBook is the default namespace of a serialized value; see _declare_default_namespace
NAMESPACES = {
    "xlink": XLINK_NS,
    "ezxhtml": EZXHTML_NS,
    "ezcustom": EZCUSTOM_NS,
}

for _prefix, _uri in NAMESPACES.items():
    ET.register_namespace(_prefix, _uri)

_DOCBOOK_TAG_PREFIX = f"{{{DOCBOOK_NS}}}"

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

EMPTY_VALUE = (
    XML_DECLARATION
    + "\n"
    + f'<section xmlns="{DOCBOOK_NS}" xmlns:xlink="{XLINK_NS}" '
    + f'xmlns:ezxhtml="{EZXHTML_NS}" xmlns:ezcustom="{EZCUSTOM_NS}" '
    + 'version="5.0-variant ezpublish-1.0"/>\n'
)


class InvalidValueError(ValueError):
    """Raised when input cannot be turned into a rich text value."""


def local_tag(tag: Any) -> str:
    """Strip the XML namespace from a tag for comparison."""
    if isinstance(tag, str) and "}" in tag:
        return tag.split("}", 1)[1]
    return tag if isinstance(tag, str) else ""


def qualified(namespace: str, name: str) -> str:
    """Return the ElementTree ``{namespace}name`` form."""
    return f"{{{namespace}}}{name}"


def elements_equal(a: ET.Element, b: ET.Element) -> bool:
    """Structural equality of two element trees.

    Compares tag, attributes, text and tail recursively. A missing text or
    tail is equal to an empty one.
    """
    if a.tag != b.tag or a.attrib != b.attrib:
        return False
    if (a.text or "") != (b.text or "") or (a.tail or "") != (b.tail or ""):
        return False
    if len(a) != len(b):
        return False
    return all(elements_equal(x, y) for x, y in zip(a, b))


def _declare_default_namespace(element: ET.Element, in_scope: str = "") -> None:
    """Write DocBook tags unprefixed, declaring ``xmlns`` where the default changes.

    Works in place on a throwaway copy. Elements without a namespace get
    ``xmlns=""`` when they sit inside DocBook, so they stay outside the
    DocBook namespace when the text is parsed again.
    """
    default = in_scope
    if isinstance(element.tag, str):
        if element.tag.startswith(_DOCBOOK_TAG_PREFIX):
            element.tag = element.tag[len(_DOCBOOK_TAG_PREFIX) :]
            default = DOCBOOK_NS
        elif not element.tag.startswith("{"):
            default = ""
        if default != in_scope:
            element.attrib = {"xmlns": default, **element.attrib}
    for child in element:
        _declare_default_namespace(child, default)


class RichTextValue:
    """A rich text document, or the empty sentinel document.

    Accepts raw XML text, an `xml.etree.ElementTree.Element` (deep-copied),
    another `RichTextValue`, or ``None`` / empty text for the empty value.

    Raises:
        InvalidValueError: If the XML text is not well-formed.
    """

    __slots__ = ("_root", "_serialized")

    def __init__(self, value: Union[str, bytes, ET.Element, "RichTextValue", None] = None):
        if isinstance(value, RichTextValue):
            root = copy.deepcopy(value.xml)
        elif isinstance(value, ET.Element):
            root = copy.deepcopy(value)
        else:
            # Bytes go to the parser undecoded so the declared encoding applies
            if value is None or not value.strip():
                value = EMPTY_VALUE
            try:
                root = ET.fromstring(value.strip())
            except (ET.ParseError, UnicodeDecodeError) as e:
                raise InvalidValueError(f"Rich text is not well-formed XML: {e}") from e
        self._root = root
        self._serialized: str | None = None

    @classmethod
    def empty(cls) -> "RichTextValue":
        return cls(EMPTY_VALUE)

    @classmethod
    def adopt(cls, root: ET.Element) -> "RichTextValue":
        """Wrap an element the caller hands over, without copying it.

        The caller must not keep mutating `root` afterwards. Used by the
        rewriting passes, which already work on their own deep copy.
        """
        value = cls.__new__(cls)
        value._root = root
        value._serialized = None
        return value

    @property
    def xml(self) -> ET.Element:
        """Root element (the DocBook ``section``)."""
        return self._root

    def copy_tree(self) -> ET.Element:
        """Return a deep copy of the document root for rewriting."""
        return copy.deepcopy(self._root)

    def is_empty(self) -> bool:
        return len(self._root) == 0 and not (self._root.text or "").strip()

    def __str__(self) -> str:
        if self._serialized is None:
            tree = copy.deepcopy(self._root)
            _declare_default_namespace(tree)
            body = ET.tostring(tree, encoding="unicode")
            self._serialized = f"{XML_DECLARATION}\n{body}\n"
        return self._serialized

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RichTextValue):
            return NotImplemented
        return elements_equal(self._root, other._root)

    def __repr__(self) -> str:
        return f"RichTextValue({str(self)!r})"
