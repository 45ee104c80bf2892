"""Rich text field type: value acceptance, persistence encoding and naming."""

import xml.etree.ElementTree as ET
from typing import Any

from rtschema.field import FieldValue
from rtschema.relation import ExtractedRelations
from rtschema.value import InvalidValueError, RichTextValue

from richtext.relations import RelationExtractor


class RichTextFieldType:
    """Converts between input, `RichTextValue` and persistence form.

    Args:
        extractor: Used by `get_relations`; optional when relations are not needed.
    """

    def __init__(self, extractor: RelationExtractor | None = None):
        self.extractor = extractor

    def empty_value(self) -> RichTextValue:
        return RichTextValue.empty()

    def is_empty_value(self, value: RichTextValue | None) -> bool:
        return value is None or value.is_empty()

    def accept_value(self, input_value: Any) -> RichTextValue:
        """Turn user or package input into a value.

        Raises:
            InvalidValueError: If the input is not XML text, an element or a
                value, or if the XML is not well-formed.
        """
        if isinstance(input_value, (RichTextValue, ET.Element)):
            return RichTextValue(input_value)
        if isinstance(input_value, (str, bytes)):
            return RichTextValue(input_value)
        raise InvalidValueError(f"Cannot accept {type(input_value).__name__} as rich text")

    def to_persistence_value(self, value: RichTextValue) -> FieldValue:
        return FieldValue(data=str(value), external_data=None, sort_key=None)

    def from_persistence_value(self, field_value: FieldValue) -> RichTextValue:
        return RichTextValue(field_value.data)

    def get_name(self, value: RichTextValue) -> str:
        """Short name for the value, used for object titles.

        Uses the text of the first top-level element (usually a title or the
        first paragraph), falling back to all text in the document.
        """
        root = value.xml
        if len(root):
            name = "".join(root[0].itertext()).strip()
            if name:
                return name
        return "".join(root.itertext()).strip()

    def get_relations(self, value: RichTextValue) -> ExtractedRelations:
        if self.extractor is None:
            raise RuntimeError("RichTextFieldType was created without a relation extractor")
        return self.extractor.extract(value)
