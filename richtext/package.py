"""Package wire format for rich text attributes.

Exported content packages describe each attribute as an XML node. For rich
text the node carries the portable document as the text of a dedicated
``rich-text-xml`` child:

    <attribute id="120" identifier="body" type="ezrichtext">
      <rich-text-xml>&lt;?xml version="1.0" ...</rich-text-xml>
    </attribute>

Class attributes carry their editor row count in a ``num-rows`` parameter.
"""

import xml.etree.ElementTree as ET

from pydantic import BaseModel, ConfigDict

from rtschema.field import ContentAttribute
from rtschema.relation import RelationSet

RICH_TEXT_XML_TAG = "rich-text-xml"
NUM_ROWS_TAG = "num-rows"


class SerializedAttribute(BaseModel):
    """An exported attribute node plus the content it links to and embeds.

    The relations tell the exporter which other objects the package needs
    for the portable references to resolve on import.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    node: ET.Element
    relations: RelationSet


def create_attribute_node(attribute: ContentAttribute) -> ET.Element:
    return ET.Element(
        "attribute",
        {
            "id": str(attribute.id),
            "identifier": attribute.identifier,
            "type": attribute.data_type_string,
        },
    )


def append_rich_text(node: ET.Element, xml_text: str) -> ET.Element:
    child = ET.SubElement(node, RICH_TEXT_XML_TAG)
    child.text = xml_text
    return child


def read_rich_text(node: ET.Element) -> str | None:
    """Return the document text of an attribute node, or None if absent."""
    child = node.find(f".//{RICH_TEXT_XML_TAG}")
    if child is None:
        return None
    return child.text or ""


def append_num_rows(parameters_node: ET.Element, num_rows: int) -> None:
    ET.SubElement(parameters_node, NUM_ROWS_TAG).text = str(num_rows)


def read_num_rows(parameters_node: ET.Element) -> int:
    """Row count from class attribute parameters; 0 when missing or not a number."""
    child = parameters_node.find(f".//{NUM_ROWS_TAG}")
    if child is None or child.text is None:
        return 0
    try:
        return int(child.text.strip())
    except ValueError:
        return 0
