"""Plain text extraction for search index metadata."""

import xml.etree.ElementTree as ET


def extract_text(element: ET.Element) -> str:
    """Concatenate the text of a subtree in document order.

    Every text node contributes its text followed by one space; elements
    contribute the text of their children. Whitespace is not normalized, so
    nested markup produces runs of separators. The result is meant for
    indexing, not display.
    """
    parts: list[str] = []
    if element.text:
        parts.append(element.text + " ")
    for child in element:
        parts.append(extract_text(child))
        if child.tail:
            parts.append(child.tail + " ")
    return "".join(parts)
