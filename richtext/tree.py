"""Element tree helpers shared by the rewriter, extractor and validator."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Collection, Iterator

from rtschema.reference import REFERENCE_PREFIXES
from rtschema.value import local_tag


def iter_tagged(root: ET.Element, tags: Collection[str]) -> Iterator[tuple[ET.Element | None, ET.Element]]:
    """Yield (parent, element) for elements whose local tag is in `tags`.

    Walks in document order. The list of matches is taken before yielding, so
    callers may detach yielded elements from their parents.
    """
    parents = {child: parent for parent in root.iter() for child in parent}
    for element in list(root.iter()):
        if local_tag(element.tag) in tags:
            yield parents.get(element), element


def repository_href(element: ET.Element, href_attribute: str) -> str | None:
    """Return the element's href if it is a ``content://``/``location://`` reference."""
    href = element.get(href_attribute)
    if href is None or not href.startswith(REFERENCE_PREFIXES):
        return None
    return href


def remove_element(parent: ET.Element, element: ET.Element) -> None:
    """Detach `element` from `parent`, keeping the text that follows it.

    ElementTree stores the text after an element as that element's tail;
    the tail moves to the previous sibling (or the parent's text) so only the
    element itself disappears.
    """
    if element.tail:
        index = list(parent).index(element)
        if index > 0:
            previous = parent[index - 1]
            previous.tail = (previous.tail or "") + element.tail
        else:
            parent.text = (parent.text or "") + element.tail
    parent.remove(element)
